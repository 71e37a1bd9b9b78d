from hab_bridge.core import settings
from hab_bridge.core.host import compose_url, mask_base_url, resolve_base_url
from hab_bridge.models.schemas import ActionResponse, EditorCommand, Notice, PanelDescriptor, ServerConfig
from hab_bridge.services.log_service import OperationLog


OPEN_URL_COMMAND = "vscode.open"
NO_ACTIVE_EDITOR_MESSAGE = "No editor is active"


def open_browser(config: ServerConfig, url: str, selection: str | None) -> ActionResponse:
    """Resolve ``url`` against the server and hand it to the editor's opener.

    ``selection`` is the selected text of the active editor and replaces the
    ``%s`` placeholder; ``None`` means there is no active editor.
    """
    if selection is None:
        return ActionResponse(
            success=False,
            message="no active editor",
            notice=Notice(level="info", message=NO_ACTIVE_EDITOR_MESSAGE),
        )

    target = compose_url(resolve_base_url(config), url, selection)
    return ActionResponse(
        success=True,
        message="open url",
        command=EditorCommand(command=OPEN_URL_COMMAND, arguments=[target]),
        data={"url": target},
    )


def open_ui(
    config: ServerConfig,
    *,
    log: OperationLog,
    query: str = settings.DEFAULT_UI_QUERY,
    title: str | None = None,
) -> PanelDescriptor:
    src_path = f"{resolve_base_url(config)}{query}"
    log.append_line(f"URL that will be opened is: {mask_base_url(config)}{query}")
    return PanelDescriptor(title=title, url=src_path)
