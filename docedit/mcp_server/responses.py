"""MCP server response helpers.

This module holds low-level helpers used by MCP tool handlers and routing:
- JSON serialization helpers
- success/error response formatting
- mapping of docedit exceptions onto the error envelope
- Pydantic validation error formatting
"""

from __future__ import annotations

import json
from typing import Any, Dict, Optional

from mcp.types import TextContent
from pydantic import ValidationError as PydanticValidationError

from docedit.exceptions import DocEditError
from docedit.mcp_server.models import ErrorResponse
from docedit.mcp_server.tool_types import ToolResponse

RECOVERY_STRATEGIES: Dict[str, str] = {
    "INVALID_PARAMETER": (
        "Check the parameter named in 'details.parameter'. Call list_operations to see each "
        "operation's parameters and types, correct the value, and retry."
    ),
    "VALIDATION_ERROR": "Review the error message, adjust the request, and try again.",
    "NOT_FOUND": (
        "The referenced item does not exist. Use the matching 'get' operation to list what exists "
        "(sheets, paragraphs, slides, pages, attachments) and retry with a valid index."
    ),
    "UNSUPPORTED_OPERATION": (
        "Use one of the operations listed in 'details.available', or call list_operations "
        "to see every tool's operations."
    ),
    "DOCUMENT_TYPE_MISMATCH": (
        "This tool works on a different document type. Call list_operations and pick a tool "
        "whose domain matches the file extension."
    ),
    "ENGINE_ERROR": (
        "The document library rejected the change. Check the document is not corrupt and the "
        "values are valid for this document type, then retry."
    ),
    "SESSION_NOT_FOUND": (
        "Call document_session with operation='list' to see open sessions, or open the file "
        "again with operation='open'."
    ),
    "SESSION_LIMIT_REACHED": "Close a session with document_session operation='close' and retry.",
    "SESSION_READ_ONLY": (
        "The session was opened read-only. Save to a different file with output_path, or close it "
        "and reopen with mode='readwrite'."
    ),
    "SESSION_ERROR": "Call document_session with operation='status' to inspect the session.",
}

DEFAULT_RECOVERY = "Review the error message, adjust the request, and try again."


def _json_serializer(obj: Any) -> Any:
    """Custom JSON serializer for non-standard types."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump(mode="json")
    if hasattr(obj, "isoformat"):
        return obj.isoformat()
    return str(obj)


def _json_text(payload: Dict[str, Any]) -> TextContent:
    return TextContent(
        type="text",
        text=json.dumps(payload, indent=2, ensure_ascii=True, default=_json_serializer),
    )


def _success(data: Any, message: Optional[str] = None) -> ToolResponse:
    payload: Dict[str, Any] = {"status": "success", "data": data}
    if message:
        payload["message"] = message
    return [_json_text(payload)]


def _error(
    code: str, message: str, recovery: str, details: Optional[Dict[str, Any]] = None
) -> ToolResponse:
    error_model = ErrorResponse(
        error_code=code,
        message=message,
        recovery_strategy=recovery,
        details=details,
    )
    payload = {"status": "error", **error_model.model_dump(mode="json")}
    return [_json_text(payload)]


def map_error_for_mcp(exc: DocEditError) -> Dict[str, Any]:
    """Turn a docedit exception into the fields of an ErrorResponse."""
    return ErrorResponse(
        error_code=exc.code,
        message=exc.message,
        recovery_strategy=RECOVERY_STRATEGIES.get(exc.code, DEFAULT_RECOVERY),
        details=exc.details or None,
    ).model_dump(mode="json")


def _handle_validation_error(exc: PydanticValidationError) -> ToolResponse:
    errors = exc.errors(include_url=False, include_context=False)
    details = {"validation_errors": errors}

    missing_fields = [e["loc"][0] for e in errors if e["type"] == "missing" and e["loc"]]
    invalid_types = [e["loc"][0] for e in errors if "type" in e["type"] and e["loc"]]

    recovery_msg = "Input validation failed. "
    if missing_fields:
        recovery_msg += f"MISSING REQUIRED FIELDS: {', '.join(str(f) for f in missing_fields)}. "
    if invalid_types:
        recovery_msg += f"INCORRECT TYPES: {', '.join(str(f) for f in invalid_types)}. "
    recovery_msg += (
        "Check the tool's inputSchema for required parameters and their types. Review the "
        "'details' field for specific errors, correct your input, and retry."
    )

    return _error(
        code="INVALID_ARGUMENTS",
        message=f"Input payload failed validation. {len(errors)} error(s) found.",
        recovery=recovery_msg,
        details=details,
    )
