from typing import Any

from fastapi import APIRouter, Depends

from hab_bridge.core.deps import current_config, get_operation_log
from hab_bridge.models.schemas import HoverContent, Item, RestResult, RuntimeConfig
from hab_bridge.services.log_service import OperationLog
from hab_bridge.services.rest_service import fetch_item, get_rest_hover, get_simple_mode_state, get_sitemaps

router = APIRouter(prefix="/v1", tags=["openhab"])


@router.get("/items/{name}/hover", response_model=RestResult[HoverContent])
async def item_hover(
    name: str,
    config: RuntimeConfig = Depends(current_config),
    log: OperationLog = Depends(get_operation_log),
) -> RestResult[HoverContent]:
    return await get_rest_hover(config, name, log=log)


@router.get("/items/{name}", response_model=RestResult[Item])
async def item_detail(
    name: str,
    config: RuntimeConfig = Depends(current_config),
    log: OperationLog = Depends(get_operation_log),
) -> RestResult[Item]:
    return await fetch_item(config, name, log=log)


@router.get("/sitemaps", response_model=RestResult[list[dict[str, Any]]])
async def sitemaps(
    config: RuntimeConfig = Depends(current_config),
    log: OperationLog = Depends(get_operation_log),
) -> RestResult[list[dict[str, Any]]]:
    return await get_sitemaps(config, log=log)


@router.get("/simple-mode", response_model=RestResult[bool])
async def simple_mode(
    config: RuntimeConfig = Depends(current_config),
    log: OperationLog = Depends(get_operation_log),
) -> RestResult[bool]:
    return await get_simple_mode_state(config, log=log)
