"""Tests for the idle-session housekeeper loop."""

import asyncio
import contextlib
from datetime import datetime, timedelta, timezone

import openpyxl
import pytest

from docedit.sessions import SessionManager, sweep_idle_sessions


@pytest.fixture
def xlsx_file(tmp_path):
    path = tmp_path / "book.xlsx"
    openpyxl.Workbook().save(path)
    return path


def make_stale(manager, session_id, minutes):
    stamp = datetime.now(timezone.utc) - timedelta(minutes=minutes)
    manager._sessions[session_id].last_accessed = stamp.isoformat()


class TestSweepIdleSessions:
    """Test the periodic sweep"""

    async def test_sweep_expires_stale_sessions(self, logger, xlsx_file):
        """Test the loop closes stale sessions and keeps running"""
        manager = SessionManager(idle_timeout_minutes=1, logger=logger)
        stale = manager.open(str(xlsx_file), mode="readonly")
        fresh = manager.open(str(xlsx_file), mode="readonly")
        make_stale(manager, stale.session_id, 5)

        task = asyncio.create_task(sweep_idle_sessions(manager, 0.01, logger))
        try:
            for _ in range(200):
                if len(manager.list()) == 1:
                    break
                await asyncio.sleep(0.01)
            assert not task.done()
        finally:
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

        assert [info.session_id for info in manager.list()] == [fresh.session_id]

    async def test_disabled_when_timeout_is_zero(self, logger, xlsx_file):
        """Test the loop returns at once without closing anything"""
        manager = SessionManager(idle_timeout_minutes=0, logger=logger)
        info = manager.open(str(xlsx_file))
        make_stale(manager, info.session_id, 60)

        await asyncio.wait_for(sweep_idle_sessions(manager, 0.01, logger), timeout=1)

        assert len(manager.list()) == 1

    async def test_cancel_stops_the_loop(self, logger):
        """Test cancellation ends the sweep"""
        task = asyncio.create_task(sweep_idle_sessions(SessionManager(logger=logger), 60, logger))
        await asyncio.sleep(0)
        task.cancel()
        with pytest.raises(asyncio.CancelledError):
            await task
