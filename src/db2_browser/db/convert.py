"""Cell to display-text conversion, one rule per ColumnKind."""

from __future__ import annotations

import datetime
import math
import struct
from decimal import Decimal, InvalidOperation
from typing import Any, Callable

from ..errors import QueryError
from .models import ColumnKind

NULL = "NULL"
UNKNOWN = "UNKNOWN"
CLOB = "CLOB"

_INT64_MIN = -(2**63)
_INT64_MAX = 2**63 - 1

_TRUE_TEXT = {"1", "true", "t", "y", "yes"}


def _as_decimal(value: Any) -> Decimal:
    if isinstance(value, Decimal):
        return value
    try:
        return Decimal(str(value).strip())
    except InvalidOperation as exc:
        raise QueryError(f"Value {value!r} is not a number") from exc


def _big_integer(value: Any) -> str:
    return _as_decimal(value).to_eng_string()


def _boolean(value: Any) -> str:
    if isinstance(value, str):
        value = value.strip().lower() in _TRUE_TEXT
    return "true" if value else "false"


def _truncated_integer(value: Any) -> str:
    number = _as_decimal(value)
    if not number.is_finite():
        raise QueryError(f"Value {value!r} has no integer reading")
    integer = int(number)
    if not _INT64_MIN <= integer <= _INT64_MAX:
        raise QueryError(f"Value {value!r} is out of range for an integer reading")
    return str(integer)


def _exact_decimal(value: Any) -> str:
    return str(_as_decimal(value))


def _double(value: Any) -> str:
    return repr(float(value))


def _single(value: Any) -> str:
    number = float(value)
    try:
        single = struct.unpack("f", struct.pack("f", number))[0]
    except OverflowError:
        return repr(math.copysign(math.inf, number))
    # shortest text that reads back as the same single-precision value
    for digits in range(1, 10):
        text = f"{single:.{digits}g}"
        if struct.unpack("f", struct.pack("f", float(text)))[0] == single:
            return repr(float(text))
    return repr(single)


def _integer(value: Any) -> str:
    return str(int(value))


def _date(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        return value.date().isoformat()
    if isinstance(value, datetime.date):
        return value.isoformat()
    return str(value)


def _time(value: Any) -> str:
    if isinstance(value, (datetime.time, datetime.datetime)):
        return value.strftime("%H:%M:%S")
    return str(value)


def _timestamp(value: Any) -> str:
    if isinstance(value, datetime.datetime):
        fraction = f"{value.microsecond:06d}".rstrip("0") or "0"
        return f"{value:%Y-%m-%d %H:%M:%S}.{fraction}"
    if isinstance(value, datetime.date):
        return f"{value.isoformat()} 00:00:00.0"
    return str(value)


def _text(value: Any) -> str:
    return value if isinstance(value, str) else str(value)


_RULES: dict[ColumnKind, Callable[[Any], str]] = {
    ColumnKind.BIG_INTEGER: _big_integer,
    ColumnKind.BOOLEAN: _boolean,
    ColumnKind.DECIMAL: _truncated_integer,
    ColumnKind.DOUBLE: _double,
    ColumnKind.FLOAT: _single,
    ColumnKind.INTEGER: _integer,
    ColumnKind.NUMERIC: _truncated_integer,
    ColumnKind.REAL: _double,
    ColumnKind.SMALL_INT: _integer,
    ColumnKind.DATE: _date,
    ColumnKind.TIME: _time,
    ColumnKind.TIMESTAMP: _timestamp,
    ColumnKind.LONG_TEXT: _text,
    ColumnKind.TEXT: _text,
    ColumnKind.CLOB: lambda value: CLOB,
    ColumnKind.UNKNOWN: lambda value: UNKNOWN,
}


def to_text(kind: ColumnKind, value: Any, exact_decimals: bool = False) -> str:
    """Convert one cell to its display string.

    SQL null is checked before any rule and is always "NULL". DECIMAL and
    NUMERIC cells are truncated toward zero to a 64-bit integer unless
    ``exact_decimals`` is set.
    """
    if value is None:
        return NULL
    if exact_decimals and kind in (ColumnKind.DECIMAL, ColumnKind.NUMERIC):
        return _exact_decimal(value)
    try:
        return _RULES[kind](value)
    except (TypeError, ValueError, OverflowError) as exc:
        raise QueryError(f"Cannot convert {value!r} as {kind.value}") from exc
