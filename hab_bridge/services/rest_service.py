from time import perf_counter
from typing import Any

import httpx
from pydantic import ValidationError

from hab_bridge.core import settings
from hab_bridge.core.host import mask_base_url, resolve_base_url
from hab_bridge.models.schemas import HoverContent, Item, RestResult, RuntimeConfig
from hab_bridge.services.format_service import format_item, render_markdown
from hab_bridge.services.log_service import OperationLog


NOT_AN_ITEM_MESSAGE = "That's no openHAB item. Waiting for the next hover."


def _open_client(config: RuntimeConfig) -> httpx.AsyncClient:
    return httpx.AsyncClient(timeout=config.timeout_sec)


def _error_body(resp: httpx.Response) -> str | dict[str, Any]:
    try:
        payload = resp.json()
    except ValueError:
        return resp.text.strip()
    if isinstance(payload, dict) and isinstance(payload.get("error"), (str, dict)):
        return payload["error"]
    return resp.text.strip()


async def _request_json(
    config: RuntimeConfig,
    path: str,
    *,
    context: str,
    log: OperationLog,
) -> RestResult[Any]:
    masked_url = f"{mask_base_url(config)}{path}"
    if not config.use_rest_api:
        return RestResult[Any](status="disabled", url=masked_url)

    base_url = resolve_base_url(config)
    started = perf_counter()
    try:
        async with _open_client(config) as client:
            resp = await client.get(f"{base_url}{path}", headers={"Accept": "application/json"})
    except (httpx.HTTPError, httpx.InvalidURL) as ex:
        duration_ms = round((perf_counter() - started) * 1000, 2)
        log.log_rest_request(
            path=path,
            status_code=0,
            duration_ms=duration_ms,
            context=context,
            base_url=mask_base_url(config),
            message=str(ex),
        )
        return RestResult[Any](status="transport_failure", error=str(ex), url=masked_url)

    duration_ms = round((perf_counter() - started) * 1000, 2)
    log.log_rest_request(
        path=path,
        status_code=resp.status_code,
        duration_ms=duration_ms,
        context=context,
        base_url=mask_base_url(config),
    )

    if resp.status_code == 404:
        return RestResult[Any](status="not_found", error=_error_body(resp), url=masked_url)
    if resp.status_code >= 400:
        return RestResult[Any](status="transport_failure", error=_error_body(resp), url=masked_url)

    try:
        payload = resp.json()
    except ValueError:
        return RestResult[Any](status="transport_failure", error="invalid JSON body", url=masked_url)
    return RestResult[Any](status="ok", value=payload, url=masked_url)


async def fetch_item(config: RuntimeConfig, name: str, *, log: OperationLog) -> RestResult[Item]:
    result = await _request_json(config, f"/rest/items/{name}", context="items.get", log=log)
    if not result.ok:
        return RestResult[Item](status=result.status, error=result.error, url=result.url)

    payload = result.value
    if not isinstance(payload, dict):
        return RestResult[Item](status="transport_failure", error="unexpected item payload", url=result.url)
    if payload.get("error") is not None:
        return RestResult[Item](status="not_found", error=payload["error"], url=result.url)

    try:
        item = Item.model_validate(payload)
    except ValidationError as ex:
        return RestResult[Item](status="transport_failure", error=f"invalid item payload: {ex}", url=result.url)
    return RestResult[Item](status="ok", value=item, url=result.url)


async def get_rest_hover(config: RuntimeConfig, hovered_text: str, *, log: OperationLog) -> RestResult[HoverContent]:
    if config.use_rest_api:
        log.append_line(f"Requesting => {mask_base_url(config)}/rest/items/{hovered_text} <= now")

    result = await fetch_item(config, hovered_text, log=log)
    if result.status == "not_found":
        log.append_line(NOT_AN_ITEM_MESSAGE)
    if not result.ok or result.value is None:
        return RestResult[HoverContent](status=result.status, error=result.error, url=result.url)

    document = format_item(result.value)
    content = HoverContent(
        item_name=result.value.name,
        markdown=render_markdown(document),
        document=document,
    )
    return RestResult[HoverContent](status="ok", value=content, url=result.url)


async def get_simple_mode_state(config: RuntimeConfig, *, log: OperationLog) -> RestResult[bool]:
    path = f"/rest/services/{settings.SIMPLE_MODE_SERVICE_ID}/config"
    result = await _request_json(config, path, context="services.config", log=log)
    if not result.ok:
        return RestResult[bool](status=result.status, error=result.error, url=result.url)

    payload = result.value if isinstance(result.value, dict) else {}
    return RestResult[bool](status="ok", value=bool(payload.get("autoLinks")), url=result.url)


async def get_sitemaps(config: RuntimeConfig, *, log: OperationLog) -> RestResult[list[dict[str, Any]]]:
    result = await _request_json(config, "/rest/sitemaps", context="sitemaps.list", log=log)
    if not result.ok:
        return RestResult[list[dict[str, Any]]](status=result.status, error=result.error, url=result.url)

    if not isinstance(result.value, list):
        return RestResult[list[dict[str, Any]]](
            status="transport_failure",
            error="unexpected sitemaps payload",
            url=result.url,
        )
    sitemaps = [row for row in result.value if isinstance(row, dict)]
    dropped = len(result.value) - len(sitemaps)
    if dropped:
        log.append_line(f"Ignored {dropped} malformed sitemap entries from {result.url}")
    return RestResult[list[dict[str, Any]]](status="ok", value=sitemaps, url=result.url)
