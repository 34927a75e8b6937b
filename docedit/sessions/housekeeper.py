"""Housekeeper: periodic expiry of idle sessions.

Runs beside the MCP server, calling ``SessionManager.expire_idle`` so that
sessions nobody has touched for ``idle_timeout_minutes`` are closed and
their changes written back.

Environment Variables:
    DOCEDIT_SESSION_IDLE_TIMEOUT_MINS       Idle minutes before expiry (default: 30, 0 disables)
    DOCEDIT_SESSION_SWEEP_INTERVAL_SECONDS  Seconds between sweeps     (default: 60)
"""

import asyncio
from typing import Optional

from docedit.logger import Logger, session_logger
from docedit.sessions.manager import SessionManager


async def sweep_idle_sessions(
    manager: SessionManager,
    interval_seconds: float,
    logger: Optional[Logger] = None,
) -> None:
    """Expire idle sessions every ``interval_seconds`` until cancelled."""
    logger = logger or session_logger
    if manager.idle_timeout_minutes <= 0:
        logger.info("housekeeper.disabled", idle_timeout_minutes=manager.idle_timeout_minutes)
        return

    logger.info(
        "housekeeper.start",
        interval_seconds=interval_seconds,
        idle_timeout_minutes=manager.idle_timeout_minutes,
    )
    while True:
        await asyncio.sleep(interval_seconds)
        try:
            expired = await asyncio.to_thread(manager.expire_idle)
        except Exception as e:
            logger.error("housekeeper.cycle_failed", error=str(e), cause=type(e).__name__)
            continue
        if expired:
            logger.info("housekeeper.sessions_expired", count=len(expired), session_ids=expired)
