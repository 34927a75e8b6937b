"""Server lifecycle, StreamableHTTP wiring and stdio runner for MCP server."""

from __future__ import annotations

import asyncio
import contextlib
from datetime import datetime, timezone
from typing import AsyncIterator, Optional

from mcp.server.streamable_http_manager import StreamableHTTPSessionManager
from starlette.applications import Starlette
from starlette.middleware.cors import CORSMiddleware
from starlette.requests import Request
from starlette.responses import JSONResponse
from starlette.routing import Mount, Route

from docedit.config import Config
from docedit.mcp_server.mcp_server import app, initialize_server, logger
from docedit.mcp_server.state import get_components
from docedit.sessions import sweep_idle_sessions

session_manager_http = StreamableHTTPSessionManager(
    app=app,
    event_store=None,
    json_response=False,
    stateless=False,
)


async def handle_streamable_http(scope, receive, send) -> None:
    await session_manager_http.handle_request(scope, receive, send)


def _close_sessions() -> None:
    components = get_components()
    if components is None:
        return
    closed = components.session_manager.close_all()
    logger.info("Open sessions closed on shutdown", count=closed)


def _start_sweeper() -> Optional[asyncio.Task]:
    components = get_components()
    if components is None:
        return None
    return asyncio.create_task(
        sweep_idle_sessions(
            components.session_manager, components.config.sweep_interval_seconds, logger
        )
    )


async def _stop_sweeper(task: Optional[asyncio.Task]) -> None:
    if task is None:
        return
    task.cancel()
    with contextlib.suppress(asyncio.CancelledError):
        await task


@contextlib.asynccontextmanager
async def lifespan(starlette_app) -> AsyncIterator[None]:
    logger.info("Starting StreamableHTTP session manager")
    await initialize_server()
    async with session_manager_http.run():
        logger.info("StreamableHTTP session manager ready")
        sweeper = _start_sweeper()
        try:
            yield
        finally:
            await _stop_sweeper(sweeper)
            _close_sessions()


async def health(request: Request) -> JSONResponse:
    components = get_components()
    return JSONResponse(
        {
            "status": "ok",
            "service": "docedit-mcp",
            "timestamp": datetime.now(timezone.utc).isoformat(),
            "tools": len(components.registries) if components is not None else 0,
            "open_sessions": len(components.session_manager.list()) if components is not None else 0,
        }
    )


def create_starlette_app() -> Starlette:
    starlette_app = Starlette(
        routes=[
            Route("/ping", health, methods=["GET"]),
            Route("/health", health, methods=["GET"]),
            Mount("/mcp/", app=handle_streamable_http),
        ],
        lifespan=lifespan,
    )
    starlette_app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST", "DELETE", "OPTIONS"],
        allow_headers=["*"],
        expose_headers=["Mcp-Session-Id"],
    )
    return starlette_app


starlette_app = create_starlette_app()


async def main(host: str = "0.0.0.0", port: int = 8020, config: Optional[Config] = None) -> None:
    import uvicorn

    await initialize_server(config)
    logger.info("Starting document MCP server", host=host, port=port, transport="http")
    uvicorn_config = uvicorn.Config(starlette_app, host=host, port=port, log_level="info")
    server = uvicorn.Server(uvicorn_config)
    await server.serve()


async def main_stdio(config: Optional[Config] = None) -> None:
    from mcp.server.stdio import stdio_server

    await initialize_server(config)
    logger.info("Starting document MCP server", transport="stdio")
    sweeper = _start_sweeper()
    try:
        async with stdio_server() as (read_stream, write_stream):
            await app.run(read_stream, write_stream, app.create_initialization_options())
    finally:
        await _stop_sweeper(sweeper)
        _close_sessions()
