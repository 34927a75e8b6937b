"""Fixtures for MCP tool tests.

Tools are exercised in process: components are built against a temporary
data directory and installed as the server's shared state.
"""

import json

import openpyxl
import pytest

from docedit.config import Config
from docedit.mcp_server.components import initialize_components
from docedit.mcp_server.state import set_components


@pytest.fixture
def components(tmp_path, logger):
    """Server components with data_dir set to tmp_path."""
    value = initialize_components(config=Config(data_dir=str(tmp_path), max_sessions=2), logger=logger)
    set_components(value)
    yield value
    value.session_manager.close_all(discard=True)
    set_components(None)


@pytest.fixture
def xlsx_path(tmp_path):
    path = tmp_path / "book.xlsx"
    workbook = openpyxl.Workbook()
    workbook.active["A1"] = "initial"
    workbook.save(path)
    return path


@pytest.fixture
def parse():
    """Decode the JSON payload of a tool response."""

    def decode(result):
        assert len(result) == 1
        return json.loads(result[0].text)

    return decode
