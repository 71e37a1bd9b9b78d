from contextlib import asynccontextmanager
from time import perf_counter
from typing import Any

from fastapi import FastAPI, Request

from hab_bridge.core import settings
from hab_bridge.routers import config, editor, items, log
from hab_bridge.services.config_service import get_runtime_config_view, initialize_runtime_config_state
from hab_bridge.services.log_service import OperationLog
from hab_bridge.storage.config_storage import bootstrap_storage


@asynccontextmanager
async def lifespan(app: FastAPI):
    bootstrap_storage()
    initialize_runtime_config_state()

    operation_log = OperationLog.from_settings()
    operation_log.start()
    app.state.operation_log = operation_log
    operation_log.append_line(f"{settings.APP_NAME} started")
    try:
        yield
    finally:
        operation_log.append_line(f"{settings.APP_NAME} stopping")
        operation_log.stop()


app = FastAPI(title=settings.APP_NAME, version="0.1.0", lifespan=lifespan)


@app.middleware("http")
async def log_http_requests(request: Request, call_next):
    started = perf_counter()
    response = await call_next(request)
    operation_log: OperationLog | None = getattr(request.app.state, "operation_log", None)
    if operation_log is not None and request.url.path != "/health":
        operation_log.log_http_request(
            source="editor",
            method=request.method,
            path=request.url.path,
            status_code=response.status_code,
            duration_ms=round((perf_counter() - started) * 1000, 2),
            client_ip=request.client.host if request.client else None,
        )
    return response


@app.get("/health")
async def health() -> dict[str, Any]:
    view = get_runtime_config_view()
    return {
        "service": settings.APP_NAME,
        "status": "ok",
        "use_rest_api": view.use_rest_api,
        "base_url": view.base_url,
    }


app.include_router(items.router)
app.include_router(editor.router)
app.include_router(config.router)
app.include_router(log.router)
