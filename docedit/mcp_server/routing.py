"""Tool routing and dispatch for MCP server."""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import ValidationError as PydanticValidationError

from docedit.exceptions import DocEditError
from docedit.logger import Logger
from docedit.mcp_server.responses import _error, _handle_validation_error, _json_text, map_error_for_mcp
from docedit.mcp_server.state import get_components
from docedit.mcp_server.tool_types import ToolHandler, ToolResponse
from docedit.mcp_server.tools.discovery import _tool_list_operations, _tool_ping
from docedit.mcp_server.tools.documents import make_document_handler
from docedit.mcp_server.tools.sessions import _tool_document_session

HANDLERS: Dict[str, ToolHandler] = {
    "ping": _tool_ping,
    "list_operations": _tool_list_operations,
    "document_session": _tool_document_session,
}


def get_handler(name: str) -> Optional[ToolHandler]:
    handler = HANDLERS.get(name)
    if handler is not None:
        return handler
    components = get_components()
    if components is not None and name in components.registries:
        return make_document_handler(name)
    return None


def available_tools() -> List[str]:
    components = get_components()
    registries = list(components.registries) if components is not None else []
    return list(HANDLERS) + registries


async def dispatch_tool_call(
    *,
    name: str,
    arguments: Optional[Dict[str, Any]],
    logger: Logger,
) -> ToolResponse:
    arguments = dict(arguments or {})
    logger.info(
        "Tool invocation started",
        tool=name,
        operation=arguments.get("operation"),
        args_keys=list(arguments.keys()),
    )

    handler = get_handler(name)
    if handler is None:
        tools = available_tools()
        logger.error("Unknown tool requested", tool=name, available_tools=tools)
        return _error(
            code="UNKNOWN_TOOL",
            message=f"Tool '{name}' does not exist in this service.",
            recovery=(
                f"Available tools: {', '.join(tools)}. "
                "Call list_tools() to see detailed descriptions and schemas. "
                "Check for typos in the tool name."
            ),
        )

    try:
        result = await handler(arguments)
        logger.info("Tool completed successfully", tool=name, operation=arguments.get("operation"))
        return result
    except PydanticValidationError as exc:
        logger.error(
            "Validation error",
            tool=name,
            error_count=len(exc.errors()),
            errors=[{"loc": e["loc"], "msg": e["msg"], "type": e["type"]} for e in exc.errors()],
        )
        return _handle_validation_error(exc)
    except DocEditError as exc:
        logger.error(
            "Domain error",
            tool=name,
            operation=arguments.get("operation"),
            error_code=exc.code,
            error_type=type(exc).__name__,
            error_message=str(exc),
        )
        error_response = map_error_for_mcp(exc)
        return [_json_text({"status": "error", **error_response})]
    except Exception as exc:  # pragma: no cover
        logger.error(
            "Unexpected tool failure",
            tool=name,
            error_type=type(exc).__name__,
            error=str(exc),
        )
        return _error(
            code="UNEXPECTED_ERROR",
            message=f"Unexpected error: {exc}",
            recovery="Check server logs for details and retry the request.",
        )
