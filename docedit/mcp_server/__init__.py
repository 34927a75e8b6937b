"""MCP transport for the document editing service."""

from docedit.mcp_server.mcp_server import app, initialize_server
from docedit.mcp_server.server import main, main_stdio, starlette_app

__all__ = ["app", "initialize_server", "main", "main_stdio", "starlette_app"]
