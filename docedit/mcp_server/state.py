from __future__ import annotations

from typing import Mapping, Optional

from docedit.config import Config
from docedit.mcp_server.components import ServerComponents
from docedit.operations import OperationRegistry
from docedit.sessions import SessionManager

components: Optional[ServerComponents] = None


def set_components(value: Optional[ServerComponents]) -> None:
    global components
    components = value


def require_components() -> ServerComponents:
    if components is None:
        raise RuntimeError("Server components have not been initialised")
    return components


def get_components() -> Optional[ServerComponents]:
    return components


def ensure_registries() -> Mapping[str, OperationRegistry]:
    return require_components().registries


def ensure_manager() -> SessionManager:
    return require_components().session_manager


def ensure_config() -> Config:
    return require_components().config
