"""Input and output models for the MCP tools."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, model_validator


class ErrorResponse(BaseModel):
    """Error response structure."""

    error_code: str
    message: str
    recovery_strategy: str
    details: Optional[Dict[str, Any]] = None


class PingOutput(BaseModel):
    """Output from ping."""

    status: str
    timestamp: str
    message: str
    tools: int = Field(description="Number of document tools served")


class SessionAction(str, Enum):
    OPEN = "open"
    CREATE = "create"
    SAVE = "save"
    CLOSE = "close"
    LIST = "list"
    STATUS = "status"


class DocumentSessionInput(BaseModel):
    """Input for the document_session tool."""

    operation: SessionAction
    path: Optional[str] = None
    session_id: Optional[str] = None
    mode: str = "readwrite"
    output_path: Optional[str] = None
    overwrite: bool = False
    discard: bool = False

    @model_validator(mode="after")
    def _check_required(self) -> "DocumentSessionInput":
        if self.operation in (SessionAction.OPEN, SessionAction.CREATE) and not self.path:
            raise ValueError(f"path is required for '{self.operation.value}'")
        if self.operation in (SessionAction.SAVE, SessionAction.CLOSE, SessionAction.STATUS) and not self.session_id:
            raise ValueError(f"session_id is required for '{self.operation.value}'")
        return self


class ListOperationsInput(BaseModel):
    """Input for the list_operations tool."""

    tool: Optional[str] = Field(None, description="Only describe this tool")
    domain: Optional[str] = Field(None, description="Only describe tools of this domain")


class OperationCallInput(BaseModel):
    """Envelope of a document tool call.

    Everything except the routing keys is passed to the operation as its
    parameters.
    """

    model_config = ConfigDict(extra="allow")

    operation: str
    session_id: Optional[str] = None
    path: Optional[str] = None
    output_path: Optional[str] = None

    @model_validator(mode="after")
    def _check_target(self) -> "OperationCallInput":
        if bool(self.session_id) == bool(self.path):
            raise ValueError("Provide exactly one of session_id or path")
        if self.output_path and self.session_id:
            raise ValueError("output_path applies to path mode only; use document_session save for sessions")
        return self

    def operation_parameters(self) -> Dict[str, Any]:
        return dict(self.model_extra or {})
