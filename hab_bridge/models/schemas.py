from __future__ import annotations

from typing import Any, Generic, Literal, TypeVar

from pydantic import BaseModel, Field


T = TypeVar("T")

ResultStatus = Literal["ok", "not_found", "transport_failure", "disabled"]
BlockKind = Literal["code", "markdown", "text"]
NoticeLevel = Literal["info", "warning", "error"]


class ServerConfig(BaseModel):
    host: str = Field(description="openHAB host, optionally prefixed with a scheme such as https://")
    port: int = Field(gt=0, description="openHAB port, left out of the URL when 80")
    username: str | None = Field(default=None, description="Optional user embedded in the URL")
    password: str | None = Field(default=None, description="Optional password, only used with a username")


class RuntimeConfig(ServerConfig):
    use_rest_api: bool = Field(default=True, description="Whether REST lookups are enabled at all")
    timeout_sec: float = Field(default=6.0, gt=0, description="Timeout for a single REST request")


class RuntimeConfigView(BaseModel):
    host: str
    port: int
    username: str | None = None
    password_set: bool
    use_rest_api: bool
    timeout_sec: float
    base_url: str = Field(description="Resolved base URL with the password masked")


class RuntimeConfigUpdateRequest(BaseModel):
    host: str | None = None
    port: int | None = Field(default=None, gt=0)
    username: str | None = None
    password: str | None = None
    use_rest_api: bool | None = None
    timeout_sec: float | None = Field(default=None, gt=0)

    model_config = {
        "json_schema_extra": {
            "example": {
                "host": "https://myhab.example.com",
                "port": 8443,
                "username": "bob",
                "password": "pw",
            }
        }
    }


class Item(BaseModel):
    name: str = ""
    state: str = ""
    type: str = ""
    label: str | None = None
    link: str | None = None
    members: list[Item] | None = None
    error: str | dict[str, Any] | None = None

    model_config = {"extra": "ignore"}

    @property
    def is_group(self) -> bool:
        return self.type == "Group"


class DisplayBlock(BaseModel):
    kind: BlockKind
    text: str
    label: str | None = Field(default=None, description="Code block language for kind=code")


class DisplayDocument(BaseModel):
    blocks: list[DisplayBlock] = Field(default_factory=list)


class HoverContent(BaseModel):
    item_name: str
    markdown: str
    document: DisplayDocument


class RestResult(BaseModel, Generic[T]):
    status: ResultStatus
    value: T | None = None
    error: str | dict[str, Any] | None = Field(default=None, description="Error payload for transport failures")
    url: str | None = Field(default=None, description="Requested URL with the password masked")

    @property
    def ok(self) -> bool:
        return self.status == "ok"


class EditorCommand(BaseModel):
    command: str = Field(min_length=1, description="Editor command id to execute")
    arguments: list[Any] = Field(default_factory=list)


class Notice(BaseModel):
    level: NoticeLevel = "info"
    message: str


class ActionResponse(BaseModel):
    success: bool = Field(description="Whether the action produced something to do")
    message: str = Field(description="Result message")
    command: EditorCommand | None = Field(default=None, description="Command the editor should execute")
    notice: Notice | None = Field(default=None, description="Non-blocking notice the editor should show")
    data: dict[str, Any] | None = None


class OpenBrowserRequest(BaseModel):
    url: str = Field(min_length=1, description="Absolute URL or path relative to the openHAB base URL")
    selection: str | None = Field(
        default=None,
        description="Selected text of the active editor; null when no editor is active",
    )

    model_config = {
        "json_schema_extra": {
            "example": {
                "url": "/basicui/app?%s",
                "selection": "my item",
            }
        }
    }


class OpenUiRequest(BaseModel):
    query: str = Field(default="/basicui/app", min_length=1)
    title: str | None = None


class PanelDescriptor(BaseModel):
    title: str | None = None
    url: str


class RequestErrorReport(BaseModel):
    error: str | dict[str, Any] | None = Field(default=None, description="Error payload of a failed REST call")


class ErrorPrompt(BaseModel):
    message: str
    actions: list[str]


class ErrorActionRequest(BaseModel):
    choice: str | None = Field(default=None, description="Chosen action label, null when dismissed")


class OutputLineRequest(BaseModel):
    message: str = Field(min_length=1, max_length=4000)
    source: str = Field(default="editor", min_length=1, max_length=64)


class OperationLogItem(BaseModel):
    event_id: str
    created_at: str
    event_type: str
    source: str
    action: str
    method: str | None = None
    path: str | None = None
    status_code: int | None = None
    duration_ms: float | None = None
    client_ip: str | None = None
    success: bool | None = None
    message: str | None = None
    detail: dict[str, Any] = Field(default_factory=dict)


Item.model_rebuild()
