import asyncio
from typing import Any, Callable

import pytest

from db2_browser.client import DB2BrowserClient
from db2_browser.config import config_from_env
from db2_browser.db import Connector
from db2_browser.errors import QueryError
from db2_browser.tools import register_query_tools

from conftest import FakeDriver


class RecordingServer:
    """Collects functions registered through the FastMCP tool decorator."""

    def __init__(self) -> None:
        self.tools: dict[str, Callable[..., Any]] = {}

    def tool(self) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
        def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
            self.tools[func.__name__] = func
            return func

        return decorator


def make_tools(driver: FakeDriver) -> tuple[RecordingServer, DB2BrowserClient]:
    config = config_from_env(
        {
            "DB2_HOST": "db2.example.com",
            "DB2_PORT": "50000",
            "DB2_DATABASE": "SAMPLE",
            "DB2_USER": "db2inst1",
            "DB2_PASSWORD": "pw",
        }
    )
    client = DB2BrowserClient(
        config,
        status=lambda text: None,
        connector=Connector(status=lambda text: None, driver_loader=lambda: driver),
    )
    server = RecordingServer()
    register_query_tools(server, client)
    return server, client


def test_tools_registered() -> None:
    server, _ = make_tools(FakeDriver())
    assert set(server.tools) == {"run_query", "connection_status"}


def test_run_query_connects_lazily() -> None:
    driver = FakeDriver(results={"VALUES 1": ([("1", "int")], [(1,)])})
    server, client = make_tools(driver)

    result = asyncio.run(server.tools["run_query"]("VALUES 1", request_id="req-1"))

    assert result == {
        "columns": ["1"],
        "rows": [["1"]],
        "row_count": 1,
        "request_id": "req-1",
    }
    assert client.is_connected
    asyncio.run(server.tools["run_query"]("VALUES 1"))
    assert len(driver.connection_strings) == 1


def test_connection_status() -> None:
    driver = FakeDriver(results={"VALUES 1": ([("1", "int")], [(1,)])})
    server, _ = make_tools(driver)

    before = asyncio.run(server.tools["connection_status"]())
    asyncio.run(server.tools["run_query"]("VALUES 1"))
    after = asyncio.run(server.tools["connection_status"]())

    assert before == {"connected": False, "target": None}
    assert after == {"connected": True, "target": "db2://db2.example.com:50000/SAMPLE"}


def test_run_query_error_propagates() -> None:
    server, _ = make_tools(FakeDriver())

    with pytest.raises(QueryError):
        asyncio.run(server.tools["run_query"]("SELEC 1"))
