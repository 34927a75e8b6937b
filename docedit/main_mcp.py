import argparse
import asyncio
import os
import sys
from typing import Any, Dict, List, Optional

from docedit.config import Config
from docedit.exceptions import ConfigurationError
from docedit.logger import Logger, configure_logging, session_logger

logger: Logger = session_logger


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="docedit MCP Server - Edit Excel, Word, PowerPoint, PDF and email documents via Model Context Protocol"
    )
    parser.add_argument(
        "--transport",
        choices=["stdio", "http"],
        default=None,
        help="Transport to serve on (default: stdio, or DOCEDIT_TRANSPORT env var)",
    )
    parser.add_argument(
        "--host",
        type=str,
        default=None,
        help="Host address to bind to for http (default: 0.0.0.0, or DOCEDIT_MCP_HOST env var)",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=None,
        help="Port number to listen on for http (default: 8020, or DOCEDIT_MCP_PORT env var)",
    )
    parser.add_argument(
        "--data-dir",
        type=str,
        default=None,
        help="Directory relative document paths resolve against (default: current directory)",
    )
    parser.add_argument(
        "--max-sessions",
        type=int,
        default=None,
        help="Maximum simultaneously open sessions (default: 10)",
    )
    parser.add_argument(
        "--session-idle-timeout",
        type=float,
        default=None,
        help="Minutes before an unused session is closed and saved; 0 disables (default: 30)",
    )
    parser.add_argument(
        "--log-level",
        type=str,
        default=None,
        help="Log level: DEBUG, INFO, WARNING, ERROR, CRITICAL (default: INFO)",
    )
    parser.add_argument(
        "--log-json",
        action="store_true",
        help="Emit one JSON object per log line",
    )
    parser.add_argument(
        "--config-file",
        type=str,
        default=None,
        help="YAML config file (default: DOCEDIT_CONFIG_FILE env var)",
    )
    return parser


def resolve_config(args: argparse.Namespace, environ: Optional[Dict[str, str]] = None) -> Config:
    """Environment (and config file) first, then command line flags on top.

    Raises:
        ConfigurationError: If any value is invalid
    """
    env = dict(os.environ if environ is None else environ)
    if args.config_file:
        env["DOCEDIT_CONFIG_FILE"] = args.config_file
    config = Config.from_env(env)

    overrides: Dict[str, Any] = {
        "transport": args.transport,
        "mcp_host": args.host,
        "mcp_port": args.port,
        "data_dir": args.data_dir,
        "max_sessions": args.max_sessions,
        "idle_timeout_minutes": args.session_idle_timeout,
        "log_level": args.log_level,
        "log_json": True if args.log_json else None,
    }
    values = config.summary()
    values.update({key: value for key, value in overrides.items() if value is not None})
    return Config.from_mapping(values)


def run(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)

    try:
        config = resolve_config(args)
    except ConfigurationError as e:
        logger.error("FATAL: Invalid configuration", error=str(e))
        sys.exit(1)

    configure_logging(config.log_level, json_output=config.log_json)
    startup_logger: Logger = session_logger
    startup_logger.info("Configuration resolved", **config.summary())

    from docedit.mcp_server import main, main_stdio

    try:
        if config.transport == "http":
            startup_logger.info(
                "Starting MCP server",
                host=config.mcp_host,
                port=config.mcp_port,
                transport="Streamable HTTP",
            )
            asyncio.run(main(host=config.mcp_host, port=config.mcp_port, config=config))
        else:
            startup_logger.info("Starting MCP server", transport="stdio")
            asyncio.run(main_stdio(config=config))
        startup_logger.info("MCP server shutdown complete")
    except KeyboardInterrupt:
        startup_logger.info("Shutdown complete")
        sys.exit(0)
    except Exception as e:
        startup_logger.error("Failed to start server", error=str(e), error_type=type(e).__name__)
        sys.exit(1)


if __name__ == "__main__":
    run()
