"""Discovery tool handlers."""

from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict

from docedit.handlers import registries_for_domain
from docedit.mcp_server.models import ListOperationsInput, PingOutput
from docedit.mcp_server.responses import _error, _success
from docedit.mcp_server.state import ensure_registries
from docedit.mcp_server.tool_types import ToolResponse


async def _tool_ping(arguments: Dict[str, Any]) -> ToolResponse:
    output = PingOutput(
        status="ok",
        timestamp=datetime.now(timezone.utc).isoformat(),
        message="Document editing service is online.",
        tools=len(ensure_registries()),
    )
    return _success(output.model_dump(mode="json"))


async def _tool_list_operations(arguments: Dict[str, Any]) -> ToolResponse:
    payload = ListOperationsInput.model_validate(arguments)
    registries = ensure_registries()

    if payload.tool is not None and payload.tool not in registries:
        return _error(
            code="UNKNOWN_TOOL",
            message=f"Tool '{payload.tool}' does not exist in this service.",
            recovery=f"Available document tools: {', '.join(registries)}. Omit 'tool' to list all.",
        )

    selected = (
        registries_for_domain(registries, payload.domain.lower())
        if payload.domain is not None
        else list(registries.values())
    )
    if payload.tool is not None:
        selected = [registry for registry in selected if registry.name == payload.tool]
    return _success(
        {
            "tool_count": len(selected),
            "tools": [registry.describe() for registry in selected],
        }
    )
