from __future__ import annotations

import logging
import uuid
from typing import Any

from ..errors import QueryError, ResourceCleanupError, SessionBusyError
from ..logging_utils import StatusCallback, log_extra, log_status, report_error
from .connector import Session
from .convert import to_text
from .models import Column, ColumnKind, ResultTable
from .types import lookup


class QueryProjector:
    """Execute ad-hoc SQL on a session and project the result set to text."""

    def __init__(
        self, status: StatusCallback | None = None, exact_decimals: bool = False
    ) -> None:
        self._status = status or log_status
        self._exact_decimals = exact_decimals
        self._log = logging.getLogger(__name__)

    def execute(self, session: Session, sql: str) -> ResultTable:
        """
        Execute ``sql`` verbatim and return its result set as display strings.

        Column metadata is read and classified once before any row is fetched.
        The statement is released after the rows are materialized, and also
        when execution fails; release errors are reported, never raised.

        Parameters:
        session (Session): Open session with no query in flight
        sql (str): Statement text, sent as-is

        Returns:
        ResultTable: Column names and stringified rows in engine order

        Raises:
        SessionBusyError: If another query is running on the session
        QueryError: If the session is closed or execution fails
        """
        if not session.is_open:
            raise QueryError("Session is not connected")
        if session.busy:
            raise SessionBusyError(f"A query is already running on {session.target}")

        query_id = str(uuid.uuid4())
        session.busy = True
        self._status("Processing queries")
        self._log.info(
            "Executing: %s", sql, extra=log_extra(query_id=query_id, target=session.target)
        )
        driver = session.driver
        stmt = None
        try:
            try:
                stmt = driver.exec_immediate(session.handle, sql)
                if not stmt:
                    raise QueryError(self._statement_error(driver))
                columns = self._describe(driver, stmt)
                rows = self._materialize(driver, stmt, columns) if columns else []
            except QueryError as exc:
                report_error(
                    self._status, self._log, "Error executing the query.", exc, query_id=query_id
                )
                raise
            except Exception as exc:
                # ibm_db raises plain Exception for SQL errors
                report_error(
                    self._status, self._log, "Error executing the query.", exc, query_id=query_id
                )
                raise QueryError(f"Query execution failed: {exc}") from exc
            finally:
                if stmt:
                    self._status("Closing statement.")
                    self._release(driver, stmt, query_id)
        finally:
            session.busy = False

        self._log.info(
            "Query executed",
            extra=log_extra(
                query_id=query_id, column_count=len(columns), row_count=len(rows)
            ),
        )
        return ResultTable(
            column_names=tuple(column.name for column in columns),
            rows=tuple(rows),
        )

    def _describe(self, driver: Any, stmt: Any) -> list[Column]:
        count = driver.num_fields(stmt)
        if not count:
            # DDL and DML produce no result set
            return []
        columns = []
        unknown: list[str] = []
        for index in range(count):
            name = driver.field_name(stmt, index)
            type_id = driver.field_type(stmt, index)
            kind = lookup(type_id)
            if kind is None:
                kind = ColumnKind.UNKNOWN
                if str(type_id) not in unknown:
                    unknown.append(str(type_id))
            columns.append(Column(name=name, type_id=type_id, kind=kind))
        if unknown:
            type_ids = ", ".join(unknown)
            self._log.warning(
                "Unknown data type: %s",
                type_ids,
                extra=log_extra(
                    columns=[c.name for c in columns if c.kind is ColumnKind.UNKNOWN]
                ),
            )
            self._status(f"Error: Unknown data type: {type_ids}")
        return columns

    def _materialize(
        self, driver: Any, stmt: Any, columns: list[Column]
    ) -> list[tuple[str, ...]]:
        rows = []
        record = driver.fetch_tuple(stmt)
        while record is not False and record is not None:
            rows.append(
                tuple(
                    to_text(column.kind, value, self._exact_decimals)
                    for column, value in zip(columns, record)
                )
            )
            record = driver.fetch_tuple(stmt)
        return rows

    def _release(self, driver: Any, stmt: Any, query_id: str) -> None:
        for release, message in (
            (driver.free_result, "Error closing result."),
            (driver.free_stmt, "Error closing statement."),
        ):
            try:
                # ibm_db signals some failures by returning False
                released = release(stmt)
            except Exception as exc:
                error = ResourceCleanupError(str(exc))
            else:
                if released is not False:
                    continue
                error = ResourceCleanupError("driver reported failure")
            report_error(self._status, self._log, message, error, query_id=query_id)

    @staticmethod
    def _statement_error(driver: Any) -> str:
        errormsg = getattr(driver, "stmt_errormsg", None)
        message = errormsg() if callable(errormsg) else ""
        return f"Query execution failed: {message or 'no statement returned'}"
