"""Session lifecycle tool handler."""

from __future__ import annotations

import asyncio
from typing import Any, Dict

from docedit.mcp_server.models import DocumentSessionInput, SessionAction
from docedit.mcp_server.responses import _success
from docedit.mcp_server.state import ensure_config, ensure_manager
from docedit.mcp_server.tool_types import ToolResponse


async def _tool_document_session(arguments: Dict[str, Any]) -> ToolResponse:
    payload = DocumentSessionInput.model_validate(arguments)
    manager = ensure_manager()
    config = ensure_config()

    if payload.operation is SessionAction.OPEN:
        path = str(config.resolve_path(payload.path))
        info = await asyncio.to_thread(manager.open, path, payload.mode)
        return _success(info.model_dump(mode="json"), message=f"Session opened for {info.path}")

    if payload.operation is SessionAction.CREATE:
        path = str(config.resolve_path(payload.path))
        info = await asyncio.to_thread(manager.create, path, payload.overwrite)
        return _success(info.model_dump(mode="json"), message=f"New {info.domain.value} document session created")

    if payload.operation is SessionAction.SAVE:
        output_path = str(config.resolve_path(payload.output_path)) if payload.output_path else None
        output = await asyncio.to_thread(manager.save, payload.session_id, output_path)
        return _success(output.model_dump(mode="json"), message=output.message)

    if payload.operation is SessionAction.CLOSE:
        output = await asyncio.to_thread(manager.close, payload.session_id, payload.discard)
        return _success(output.model_dump(mode="json"), message=output.message)

    if payload.operation is SessionAction.STATUS:
        info = manager.get(payload.session_id)
        return _success(info.model_dump(mode="json"))

    sessions = manager.list()
    return _success(
        {
            "session_count": len(sessions),
            "max_sessions": manager.max_sessions,
            "sessions": [info.model_dump(mode="json") for info in sessions],
        }
    )
