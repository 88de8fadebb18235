"""DB2 connection and result-set projection."""

from .connector import Connector, Session, build_connection_string, describe_target
from .convert import to_text
from .models import Column, ColumnKind, ConnectionParams, ResultTable
from .projector import QueryProjector
from .types import classify

__all__ = [
    "Column",
    "ColumnKind",
    "ConnectionParams",
    "Connector",
    "QueryProjector",
    "ResultTable",
    "Session",
    "build_connection_string",
    "classify",
    "describe_target",
    "to_text",
]
