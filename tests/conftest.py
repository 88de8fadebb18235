"""Shared fixtures: an in-memory stand-in for the ibm_db driver module."""

from __future__ import annotations

from typing import Any

import pytest

from db2_browser.db import Session


class FakeStatement:
    def __init__(self, columns: list[tuple[str, Any]], rows: list[tuple]) -> None:
        self.columns = columns
        self._rows = iter(rows)
        self.fetches = 0
        self.result_freed = False
        self.freed = False

    def next_row(self) -> tuple | bool:
        self.fetches += 1
        return next(self._rows, False)


class FakeDriver:
    """Implements the part of the ibm_db API the connector and projector use."""

    def __init__(
        self,
        results: dict[str, tuple[list[tuple[str, Any]], list[tuple]]] | None = None,
        connect_error: Exception | None = None,
    ) -> None:
        self.results = results or {}
        self.connect_error = connect_error
        self.connection_strings: list[str] = []
        self.credentials: list[tuple[str, str]] = []
        self.closed: list[Any] = []
        self.executed: list[str] = []
        self.statements: list[FakeStatement] = []
        self.free_result_ok = True
        self.free_stmt_error: Exception | None = None
        self.close_error: Exception | None = None

    def connect(self, conn_str: str, user: str, password: str) -> object:
        self.connection_strings.append(conn_str)
        self.credentials.append((user, password))
        if self.connect_error is not None:
            raise self.connect_error
        return object()

    def close(self, handle: Any) -> bool:
        self.closed.append(handle)
        if self.close_error is not None:
            raise self.close_error
        return True

    def exec_immediate(self, handle: Any, sql: str) -> FakeStatement:
        self.executed.append(sql)
        if sql not in self.results:
            raise Exception(f'[IBM][CLI Driver][DB2/LINUXX8664] SQL0104N  "{sql}"')
        columns, rows = self.results[sql]
        stmt = FakeStatement(columns, rows)
        self.statements.append(stmt)
        return stmt

    def num_fields(self, stmt: FakeStatement) -> int | bool:
        return len(stmt.columns) or False

    def field_name(self, stmt: FakeStatement, index: int) -> str:
        return stmt.columns[index][0]

    def field_type(self, stmt: FakeStatement, index: int) -> Any:
        return stmt.columns[index][1]

    def fetch_tuple(self, stmt: FakeStatement) -> tuple | bool:
        return stmt.next_row()

    def free_result(self, stmt: FakeStatement) -> bool:
        stmt.result_freed = True
        return self.free_result_ok

    def free_stmt(self, stmt: FakeStatement) -> bool:
        if self.free_stmt_error is not None:
            raise self.free_stmt_error
        stmt.freed = True
        return True

    def conn_errormsg(self) -> str:
        return ""

    def stmt_errormsg(self) -> str:
        return ""


@pytest.fixture
def driver() -> FakeDriver:
    return FakeDriver()


@pytest.fixture
def statuses() -> list[str]:
    return []


@pytest.fixture
def session(driver: FakeDriver, statuses: list[str]) -> Session:
    return Session(driver, object(), "db2://db2.example.com:50000/SAMPLE", status=statuses.append)
