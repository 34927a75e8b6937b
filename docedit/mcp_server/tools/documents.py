"""Document tool handlers: one per operation registry."""

from __future__ import annotations

import asyncio
from typing import Any, Dict

from docedit.mcp_server.models import OperationCallInput
from docedit.mcp_server.responses import _success
from docedit.mcp_server.state import ensure_config, ensure_manager, ensure_registries
from docedit.mcp_server.tool_types import ToolHandler, ToolResponse
from docedit.operations import OperationParameters
from docedit.sessions import run_on_file


async def _run_document_tool(tool: str, arguments: Dict[str, Any]) -> ToolResponse:
    payload = OperationCallInput.model_validate(arguments)
    registry = ensure_registries()[tool]
    parameters = OperationParameters(payload.operation_parameters())

    if payload.session_id:
        manager = ensure_manager()
        result = await asyncio.to_thread(
            manager.run, payload.session_id, registry, payload.operation, parameters
        )
        data = {
            "tool": tool,
            "operation": registry.resolve(payload.operation).name,
            "session_id": payload.session_id,
            "modified": manager.get(payload.session_id).modified,
            "result": result.model_dump(mode="json"),
        }
        return _success(data, message=result.message)

    config = ensure_config()
    outcome = await asyncio.to_thread(
        run_on_file,
        registry,
        payload.operation,
        parameters,
        config.resolve_path(payload.path),
        config.resolve_path(payload.output_path) if payload.output_path else None,
    )
    data = {
        "tool": tool,
        "operation": registry.resolve(payload.operation).name,
        "modified": outcome.modified,
        "saved_to": outcome.saved_to,
        "result": outcome.result.model_dump(mode="json"),
    }
    return _success(data, message=outcome.result.message)


def make_document_handler(tool: str) -> ToolHandler:
    """Bind a registry name into a tool handler."""

    async def handler(arguments: Dict[str, Any]) -> ToolResponse:
        return await _run_document_tool(tool, arguments)

    handler.__name__ = f"_tool_{tool}"
    return handler
