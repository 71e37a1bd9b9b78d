from typing import Any

from hab_bridge.models.schemas import ActionResponse, EditorCommand, ErrorPrompt
from hab_bridge.services.config_service import disable_rest_api
from hab_bridge.services.log_service import OperationLog


SET_HOST_ACTION = "Set openHAB host"
DISABLE_REST_ACTION = "Disable REST API"
OPEN_SETTINGS_COMMAND = "workbench.action.openWorkspaceSettings"
ERROR_PREFIX = "Error while connecting to openHAB REST API."


def extract_error_message(error: Any) -> str:
    if isinstance(error, str):
        return error
    if isinstance(error, dict):
        message = error.get("message")
        return message if isinstance(message, str) else ""
    return ""


def present_request_error(error: Any, *, log: OperationLog) -> ErrorPrompt:
    message = f"{ERROR_PREFIX} {extract_error_message(error)}"
    log.log(
        event_type="rest_error",
        source="system",
        action="openhab.error.present",
        success=False,
        message=message,
    )
    return ErrorPrompt(message=message, actions=[SET_HOST_ACTION, DISABLE_REST_ACTION])


def resolve_error_action(choice: str | None, *, log: OperationLog) -> ActionResponse:
    if choice == SET_HOST_ACTION:
        return ActionResponse(
            success=True,
            message="open workspace settings",
            command=EditorCommand(command=OPEN_SETTINGS_COMMAND),
        )

    if choice == DISABLE_REST_ACTION:
        disable_rest_api()
        log.append_line("REST API disabled after connection error")
        return ActionResponse(success=True, message="REST API disabled", data={"use_rest_api": False})

    return ActionResponse(success=False, message="no action")
