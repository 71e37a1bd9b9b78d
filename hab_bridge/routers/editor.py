from fastapi import APIRouter, Depends, Query

from hab_bridge.core.deps import current_config, get_operation_log
from hab_bridge.core.text_format import humanize
from hab_bridge.models.schemas import (
    ActionResponse,
    ErrorActionRequest,
    ErrorPrompt,
    OpenBrowserRequest,
    OpenUiRequest,
    PanelDescriptor,
    RequestErrorReport,
    RuntimeConfig,
)
from hab_bridge.services.browser_service import open_browser, open_ui
from hab_bridge.services.error_service import present_request_error, resolve_error_action
from hab_bridge.services.log_service import OperationLog

router = APIRouter(prefix="/v1", tags=["editor"])


@router.post("/open/browser", response_model=ActionResponse)
async def open_browser_api(
    req: OpenBrowserRequest,
    config: RuntimeConfig = Depends(current_config),
) -> ActionResponse:
    return open_browser(config, req.url, req.selection)


@router.post("/open/ui", response_model=PanelDescriptor)
async def open_ui_api(
    req: OpenUiRequest,
    config: RuntimeConfig = Depends(current_config),
    log: OperationLog = Depends(get_operation_log),
) -> PanelDescriptor:
    return open_ui(config, log=log, query=req.query, title=req.title)


@router.post("/errors/present", response_model=ErrorPrompt)
async def present_error_api(
    req: RequestErrorReport,
    log: OperationLog = Depends(get_operation_log),
) -> ErrorPrompt:
    return present_request_error(req.error, log=log)


@router.post("/errors/resolve", response_model=ActionResponse)
async def resolve_error_api(
    req: ErrorActionRequest,
    log: OperationLog = Depends(get_operation_log),
) -> ActionResponse:
    return resolve_error_action(req.choice, log=log)


@router.get("/humanize")
async def humanize_api(text: str = Query(default="", description="Identifier to turn into a label")) -> dict[str, str]:
    return {"text": text, "label": humanize(text)}
