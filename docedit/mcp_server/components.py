"""Component initialization for the MCP server.

This module centralizes construction of the registries and the session
manager used by tool handlers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Mapping, Optional

from docedit.config import Config
from docedit.handlers import build_registries
from docedit.logger import Logger
from docedit.operations import OperationRegistry
from docedit.sessions import SessionManager


@dataclass
class ServerComponents:
    config: Config
    registries: Mapping[str, OperationRegistry]
    session_manager: SessionManager


def initialize_components(*, config: Optional[Config] = None, logger: Logger) -> ServerComponents:
    """Initialize all server components.

    Args:
        config: Resolved configuration (default: read from the environment)
        logger: Logger
    """
    config = config or Config.from_env()
    registries = build_registries()
    session_manager = SessionManager(
        max_sessions=config.max_sessions,
        max_file_size_mb=config.max_file_size_mb,
        idle_timeout_minutes=config.idle_timeout_minutes,
        logger=logger,
    )
    logger.info(
        "Server components initialized",
        tools=len(registries),
        max_sessions=config.max_sessions,
        max_file_size_mb=config.max_file_size_mb,
        idle_timeout_minutes=config.idle_timeout_minutes,
    )
    return ServerComponents(config=config, registries=registries, session_manager=session_manager)
