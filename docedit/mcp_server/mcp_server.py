"""Document editing MCP server.

One MCP tool per operation registry (``excel_data_operations``,
``word_text``, ``pdf_page``, ...) plus ``ping``, ``list_operations`` and
``document_session``. Every document tool takes an ``operation`` name and
either a ``session_id`` or a ``path``; all other arguments are the
operation's parameters.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from mcp.server import Server
from mcp.types import Tool

from docedit.config import Config
from docedit.logger import Logger, session_logger
from docedit.mcp_server.components import initialize_components
from docedit.mcp_server.routing import dispatch_tool_call
from docedit.mcp_server.state import ensure_registries, get_components, set_components
from docedit.mcp_server.tool_schemas import build_tools
from docedit.mcp_server.tool_types import ToolResponse

app = Server("docedit-document-service")
logger: Logger = session_logger


async def initialize_server(config: Optional[Config] = None) -> None:
    """Initialize server components once."""
    if get_components() is not None:
        return
    logger.info("Initialising document MCP server")
    set_components(initialize_components(config=config, logger=logger))


@app.list_tools()
async def handle_list_tools() -> List[Tool]:
    await initialize_server()
    return await build_tools(ensure_registries())


@app.call_tool()
async def handle_call_tool(name: str, arguments: Dict[str, Any]) -> ToolResponse:
    await initialize_server()
    return await dispatch_tool_call(name=name, arguments=arguments, logger=logger)
