"""Data models shared by the connector and the query projector."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class ConnectionParams:
    host: str
    port: str
    database: str
    user: str
    password: str = field(repr=False)

    def is_complete(self) -> bool:
        return all((self.host, self.port, self.database, self.user, self.password))


class ColumnKind(Enum):
    """Display classification of a result column."""

    BIG_INTEGER = "BigInteger"
    BOOLEAN = "Boolean"
    DECIMAL = "Decimal"
    DOUBLE = "Double"
    FLOAT = "Float"
    INTEGER = "Integer"
    NUMERIC = "Numeric"
    REAL = "Real"
    SMALL_INT = "SmallInt"
    DATE = "Date"
    TIME = "Time"
    TIMESTAMP = "Timestamp"
    LONG_TEXT = "LongText"
    TEXT = "Text"
    CLOB = "Clob"
    UNKNOWN = "Unknown"


@dataclass(frozen=True)
class Column:
    name: str
    type_id: Any
    kind: ColumnKind


@dataclass(frozen=True)
class ResultTable:
    """Header plus rectangular string cells of one executed query."""

    column_names: tuple[str, ...] = ()
    rows: tuple[tuple[str, ...], ...] = ()

    @property
    def row_count(self) -> int:
        return len(self.rows)

    def as_dict(self) -> dict[str, Any]:
        return {
            "columns": list(self.column_names),
            "rows": [list(row) for row in self.rows],
            "row_count": self.row_count,
        }
