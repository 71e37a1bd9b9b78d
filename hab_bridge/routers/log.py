from typing import Any

from fastapi import APIRouter, Depends, Query

from hab_bridge.core.deps import get_operation_log
from hab_bridge.models.schemas import OutputLineRequest
from hab_bridge.services.log_service import OperationLog

router = APIRouter(prefix="/v1/logs", tags=["system"])


def _normalize_sources(sources: list[str] | None) -> list[str] | None:
    if not sources:
        return None

    normalized: list[str] = []
    seen: set[str] = set()
    for raw in sources:
        for value in raw.split(","):
            source = value.strip()
            if not source or source in seen:
                continue
            seen.add(source)
            normalized.append(source)
    return normalized or None


@router.post("/output")
async def append_output(req: OutputLineRequest, log: OperationLog = Depends(get_operation_log)) -> dict[str, Any]:
    item = log.append_line(req.message, source=req.source)
    return {"success": True, "event_id": item.event_id}


@router.get("/recent")
async def get_recent_logs(
    limit: int = Query(default=200, ge=1, le=1000),
    source: list[str] | None = Query(default=None),
    event_type: str | None = Query(default=None),
    log: OperationLog = Depends(get_operation_log),
) -> dict[str, Any]:
    logs = log.list_recent(
        limit=limit,
        sources=_normalize_sources(source),
        event_type=event_type,
    )
    return {
        **log.storage_meta(),
        "logs": [x.model_dump(mode="json") for x in logs],
    }
