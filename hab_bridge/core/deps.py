from fastapi import Request

from hab_bridge.models.schemas import RuntimeConfig
from hab_bridge.services.config_service import get_runtime_config
from hab_bridge.services.log_service import OperationLog


def get_operation_log(request: Request) -> OperationLog:
    return request.app.state.operation_log


def current_config() -> RuntimeConfig:
    return get_runtime_config()
