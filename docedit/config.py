"""Configuration defaults, environment variables and loading for docedit.

# =============================================================================
# ENVIRONMENT VARIABLES REFERENCE
# =============================================================================

Data & Files
------------
DOCEDIT_DATA_DIR: Base directory that relative document paths resolve
  against (default: current directory)
DOCEDIT_MAX_FILE_SIZE_MB: Largest file a session may open (default: 100)
DOCEDIT_MAX_SESSIONS: Maximum simultaneously open sessions (default: 10)
DOCEDIT_SESSION_IDLE_TIMEOUT_MINS: Minutes a session may sit unused before it is
  closed and its changes saved; 0 keeps sessions open until closed (default: 30)
DOCEDIT_SESSION_SWEEP_INTERVAL_SECONDS: How often idle sessions are checked
  (default: 60)

Server
------
DOCEDIT_TRANSPORT: "stdio" or "http" (default: stdio)
DOCEDIT_MCP_HOST: Bind address for the HTTP transport (default: 0.0.0.0)
DOCEDIT_MCP_PORT: Port for the HTTP transport (default: 8020)

Logging
-------
DOCEDIT_LOG_LEVEL: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)
DOCEDIT_LOG_JSON: "true" to emit one JSON object per log line (default: false)

Config file
-----------
DOCEDIT_CONFIG_FILE: Optional YAML file with the same keys in lower case
  (data_dir, max_sessions, ...). Environment variables override the file.
"""

import os
from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml

from docedit.exceptions import ConfigurationError

# =============================================================================
# CONFIGURATION DEFAULTS
# =============================================================================

DEFAULT_MCP_HOST = "0.0.0.0"
DEFAULT_MCP_PORT = 8020
DEFAULT_TRANSPORT = "stdio"
DEFAULT_LOG_LEVEL = "INFO"
DEFAULT_MAX_SESSIONS = 10
DEFAULT_MAX_FILE_SIZE_MB = 100
DEFAULT_IDLE_TIMEOUT_MINUTES = 30
DEFAULT_SWEEP_INTERVAL_SECONDS = 60

ENV_PREFIX = "DOCEDIT_"
TRANSPORTS = ("stdio", "http")
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Environment names that differ from DOCEDIT_<FIELD>
ENV_ALIASES = {
    "idle_timeout_minutes": "SESSION_IDLE_TIMEOUT_MINS",
    "sweep_interval_seconds": "SESSION_SWEEP_INTERVAL_SECONDS",
}

_TRUE = {"1", "true", "yes", "on"}
_FALSE = {"0", "false", "no", "off"}


@dataclass
class Config:
    """Resolved server configuration."""

    data_dir: Optional[str] = None
    mcp_host: str = DEFAULT_MCP_HOST
    mcp_port: int = DEFAULT_MCP_PORT
    transport: str = DEFAULT_TRANSPORT
    log_level: str = DEFAULT_LOG_LEVEL
    log_json: bool = False
    max_sessions: int = DEFAULT_MAX_SESSIONS
    max_file_size_mb: float = DEFAULT_MAX_FILE_SIZE_MB
    idle_timeout_minutes: float = DEFAULT_IDLE_TIMEOUT_MINUTES
    sweep_interval_seconds: float = DEFAULT_SWEEP_INTERVAL_SECONDS

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "Config":
        """Build a Config from an optional YAML file plus environment variables.

        Raises:
            ConfigurationError: If a value cannot be parsed or is out of range
        """
        environ = os.environ if environ is None else environ
        values: Dict[str, Any] = {}
        config_file = environ.get(f"{ENV_PREFIX}CONFIG_FILE")
        if config_file:
            values.update(load_config_file(config_file))
        for item in fields(cls):
            env_name = ENV_ALIASES.get(item.name, item.name.upper())
            raw = environ.get(f"{ENV_PREFIX}{env_name}")
            if raw is not None and raw != "":
                values[item.name] = raw
        return cls.from_mapping(values)

    @classmethod
    def from_mapping(cls, values: Mapping[str, Any]) -> "Config":
        known = {item.name: item for item in fields(cls)}
        unknown = sorted(set(values) - set(known))
        if unknown:
            raise ConfigurationError(
                f"Unknown configuration key(s): {', '.join(unknown)}",
                details={"unknown": unknown},
            )
        parsed: Dict[str, Any] = {}
        for name, value in values.items():
            parsed[name] = _convert(name, value, known[name].type)
        config = cls(**parsed)
        config.validate()
        return config

    def validate(self) -> None:
        self.transport = self.transport.lower()
        self.log_level = self.log_level.upper()
        if self.transport not in TRANSPORTS:
            raise ConfigurationError(
                f"Invalid transport '{self.transport}' (use one of: {', '.join(TRANSPORTS)})"
            )
        if self.log_level not in LOG_LEVELS:
            raise ConfigurationError(
                f"Invalid log level '{self.log_level}' (use one of: {', '.join(LOG_LEVELS)})"
            )
        if not 0 < self.mcp_port < 65536:
            raise ConfigurationError(f"Invalid port {self.mcp_port}")
        if self.max_sessions < 1:
            raise ConfigurationError(f"max_sessions must be >= 1, got {self.max_sessions}")
        if self.max_file_size_mb <= 0:
            raise ConfigurationError(f"max_file_size_mb must be > 0, got {self.max_file_size_mb}")
        if self.idle_timeout_minutes < 0:
            raise ConfigurationError(
                f"idle_timeout_minutes must be >= 0 (0 disables expiry), got {self.idle_timeout_minutes}"
            )
        if self.sweep_interval_seconds <= 0:
            raise ConfigurationError(
                f"sweep_interval_seconds must be > 0, got {self.sweep_interval_seconds}"
            )

    def resolve_path(self, path: str) -> Path:
        """Resolve a document path, relative paths against data_dir."""
        candidate = Path(path).expanduser()
        if not candidate.is_absolute() and self.data_dir:
            candidate = Path(self.data_dir).expanduser() / candidate
        return candidate

    def summary(self) -> Dict[str, Any]:
        return asdict(self)


def _convert(name: str, value: Any, annotation: Any) -> Any:
    try:
        if annotation is int:
            return int(value)
        if annotation is float:
            return float(value)
        if annotation is bool:
            if isinstance(value, bool):
                return value
            text = str(value).strip().lower()
            if text in _TRUE:
                return True
            if text in _FALSE:
                return False
            raise ValueError(f"'{value}' is not a boolean")
    except (TypeError, ValueError) as exc:
        raise ConfigurationError(
            f"Invalid value for {name}: {exc}", details={"key": name, "value": str(value)}
        ) from exc
    return None if value is None else str(value)


def load_config_file(path: str) -> Dict[str, Any]:
    """Read a YAML mapping of configuration keys.

    Raises:
        ConfigurationError: If the file is missing, unreadable or not a mapping
    """
    config_path = Path(path).expanduser()
    if not config_path.is_file():
        raise ConfigurationError(f"Config file not found: {config_path}")
    try:
        with open(config_path, "r", encoding="utf-8") as handle:
            data = yaml.safe_load(handle) or {}
    except (OSError, yaml.YAMLError) as exc:
        raise ConfigurationError(f"Cannot read config file {config_path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {config_path} must contain a mapping")
    return {str(key).lower(): value for key, value in data.items()}
