from __future__ import annotations

import logging
from typing import Any

from .models import ColumnKind

_log = logging.getLogger(__name__)

# Names as reported by the driver or by DB2 catalog views. INT and STRING are
# the short forms ibm_db.field_type() uses.
_KINDS_BY_NAME: dict[str, ColumnKind] = {
    "BIGINT": ColumnKind.BIG_INTEGER,
    "BOOLEAN": ColumnKind.BOOLEAN,
    "DECIMAL": ColumnKind.DECIMAL,
    "DOUBLE": ColumnKind.DOUBLE,
    "FLOAT": ColumnKind.FLOAT,
    "INTEGER": ColumnKind.INTEGER,
    "INT": ColumnKind.INTEGER,
    "NUMERIC": ColumnKind.NUMERIC,
    "REAL": ColumnKind.REAL,
    "SMALLINT": ColumnKind.SMALL_INT,
    "DATE": ColumnKind.DATE,
    "TIME": ColumnKind.TIME,
    "TIMESTAMP": ColumnKind.TIMESTAMP,
    "LONGVARCHAR": ColumnKind.LONG_TEXT,
    "LONG VARCHAR": ColumnKind.LONG_TEXT,
    "VARCHAR": ColumnKind.TEXT,
    "CHAR": ColumnKind.TEXT,
    "CHARACTER": ColumnKind.TEXT,
    "STRING": ColumnKind.TEXT,
    "CLOB": ColumnKind.CLOB,
}

# JDBC / CLI numeric type codes.
_KINDS_BY_CODE: dict[int, ColumnKind] = {
    -5: ColumnKind.BIG_INTEGER,
    16: ColumnKind.BOOLEAN,
    3: ColumnKind.DECIMAL,
    8: ColumnKind.DOUBLE,
    6: ColumnKind.FLOAT,
    4: ColumnKind.INTEGER,
    2: ColumnKind.NUMERIC,
    7: ColumnKind.REAL,
    5: ColumnKind.SMALL_INT,
    91: ColumnKind.DATE,
    92: ColumnKind.TIME,
    93: ColumnKind.TIMESTAMP,
    -1: ColumnKind.LONG_TEXT,
    12: ColumnKind.TEXT,
    1: ColumnKind.TEXT,
    2005: ColumnKind.CLOB,
}


def lookup(type_id: Any) -> ColumnKind | None:
    """Return the kind for a reported type identifier, or None if unmapped."""
    if isinstance(type_id, bool):
        return None
    if isinstance(type_id, int):
        return _KINDS_BY_CODE.get(type_id)
    if isinstance(type_id, str):
        return _KINDS_BY_NAME.get(type_id.strip().upper())
    return None


def classify(type_id: Any, column: str | None = None) -> ColumnKind:
    """Map a reported type identifier to its ColumnKind.

    Unmapped identifiers classify as UNKNOWN and log one warning; they never
    raise.
    """
    kind = lookup(type_id)
    if kind is None:
        _log.warning(
            "Unknown data type: %s",
            type_id,
            extra={"column": column} if column is not None else None,
        )
        return ColumnKind.UNKNOWN
    return kind
