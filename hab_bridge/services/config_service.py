from typing import Any

from fastapi import HTTPException

from hab_bridge.core import settings
from hab_bridge.core.host import mask_base_url
from hab_bridge.models.schemas import RuntimeConfig, RuntimeConfigUpdateRequest, RuntimeConfigView
from hab_bridge.storage.config_storage import load_runtime_config_from_db, save_runtime_config_to_db


def get_runtime_config() -> RuntimeConfig:
    with settings.runtime_config_lock:
        return RuntimeConfig(
            host=settings.OPENHAB_HOST,
            port=settings.OPENHAB_PORT,
            username=settings.OPENHAB_USERNAME or None,
            password=settings.OPENHAB_PASSWORD or None,
            use_rest_api=settings.OPENHAB_USE_REST_API,
            timeout_sec=settings.OPENHAB_TIMEOUT_SEC,
        )


def get_runtime_config_view() -> RuntimeConfigView:
    config = get_runtime_config()
    return RuntimeConfigView(
        host=config.host,
        port=config.port,
        username=config.username,
        password_set=bool(config.password),
        use_rest_api=config.use_rest_api,
        timeout_sec=config.timeout_sec,
        base_url=mask_base_url(config),
    )


def initialize_runtime_config_state() -> None:
    persisted = load_runtime_config_from_db()
    with settings.runtime_config_lock:
        settings.OPENHAB_HOST = str(persisted["host"]).strip()
        settings.OPENHAB_PORT = int(persisted["port"])
        settings.OPENHAB_USERNAME = str(persisted["username"])
        settings.OPENHAB_PASSWORD = str(persisted["password"])
        settings.OPENHAB_USE_REST_API = bool(persisted["use_rest_api"])
        settings.OPENHAB_TIMEOUT_SEC = float(persisted["timeout_sec"])


def _persist_current_config() -> None:
    with settings.runtime_config_lock:
        persisted_payload = {
            "host": settings.OPENHAB_HOST,
            "port": settings.OPENHAB_PORT,
            "username": settings.OPENHAB_USERNAME,
            "password": settings.OPENHAB_PASSWORD,
            "use_rest_api": settings.OPENHAB_USE_REST_API,
            "timeout_sec": settings.OPENHAB_TIMEOUT_SEC,
        }
    save_runtime_config_to_db(**persisted_payload)


def apply_runtime_config_update(req: RuntimeConfigUpdateRequest) -> list[str]:
    updated_fields: list[str] = []
    with settings.runtime_config_lock:
        if req.host is not None:
            normalized = req.host.strip().rstrip("/")
            if not normalized:
                raise HTTPException(status_code=400, detail="host cannot be empty")
            settings.OPENHAB_HOST = normalized
            updated_fields.append("host")

        if req.port is not None:
            settings.OPENHAB_PORT = req.port
            updated_fields.append("port")

        if req.username is not None:
            settings.OPENHAB_USERNAME = req.username.strip()
            updated_fields.append("username")

        if req.password is not None:
            settings.OPENHAB_PASSWORD = req.password
            updated_fields.append("password")

        if req.use_rest_api is not None:
            settings.OPENHAB_USE_REST_API = req.use_rest_api
            updated_fields.append("use_rest_api")

        if req.timeout_sec is not None:
            settings.OPENHAB_TIMEOUT_SEC = req.timeout_sec
            updated_fields.append("timeout_sec")

    _persist_current_config()
    return updated_fields


def disable_rest_api() -> None:
    with settings.runtime_config_lock:
        settings.OPENHAB_USE_REST_API = False
    _persist_current_config()


def update_runtime_config_response(req: RuntimeConfigUpdateRequest) -> dict[str, Any]:
    updated_fields = apply_runtime_config_update(req)
    return {
        "success": True,
        "updated_fields": updated_fields,
        "config": get_runtime_config_view().model_dump(mode="json"),
    }
