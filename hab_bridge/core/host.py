from __future__ import annotations

from hab_bridge.models.schemas import ServerConfig


DEFAULT_SCHEME = "http"
SCHEME_SEPARATOR = "://"
QUERY_PLACEHOLDER = "%s"


def split_scheme(host: str) -> tuple[str, str]:
    if SCHEME_SEPARATOR not in host:
        return DEFAULT_SCHEME, host
    scheme, bare_host = host.split(SCHEME_SEPARATOR, 1)
    return scheme, bare_host


def build_auth_prefix(username: str | None, password: str | None) -> str:
    if not username:
        return ""
    auth = username
    if password:
        auth += f":{password}"
    return f"{auth}@"


def resolve_base_url(config: ServerConfig) -> str:
    """Scheme, credentials, host and port of the openHAB server, without a path.

    No validation happens here: whatever the user configured ends up in the
    string as-is.
    """
    scheme, host = split_scheme(config.host)
    auth = build_auth_prefix(config.username, config.password)
    port_suffix = "" if config.port == 80 else f":{config.port}"
    return f"{scheme}{SCHEME_SEPARATOR}{auth}{host}{port_suffix}"


def mask_base_url(config: ServerConfig) -> str:
    if not config.password or not config.username:
        return resolve_base_url(config)
    return resolve_base_url(config.model_copy(update={"password": "***"}))


def build_url(base: str, path_or_full_url: str) -> str:
    if path_or_full_url.startswith("http"):
        return path_or_full_url
    return f"{base}{path_or_full_url}"


def substitute_query(url: str, text: str) -> str:
    # Only the first space of the fragment is escaped.
    return url.replace(QUERY_PLACEHOLDER, text.replace(" ", "%20", 1), 1)


def compose_url(base: str, path_or_full_url: str, text: str) -> str:
    return substitute_query(build_url(base, path_or_full_url), text)
