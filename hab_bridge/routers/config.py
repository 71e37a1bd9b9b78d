from typing import Any

from fastapi import APIRouter

from hab_bridge.models.schemas import RuntimeConfigUpdateRequest, RuntimeConfigView
from hab_bridge.services.config_service import get_runtime_config_view, update_runtime_config_response

router = APIRouter(prefix="/v1/config", tags=["system"])


@router.get("/openhab", response_model=RuntimeConfigView)
async def get_openhab_config() -> RuntimeConfigView:
    return get_runtime_config_view()


@router.put("/openhab")
async def update_openhab_config(req: RuntimeConfigUpdateRequest) -> dict[str, Any]:
    return update_runtime_config_response(req)
