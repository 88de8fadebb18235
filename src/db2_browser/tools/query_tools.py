"""Query tools for the MCP server.

The server owns a single DB2 session. A session runs one statement at a time,
so tool calls are serialized with a lock and run off the event loop.
"""

from __future__ import annotations

import asyncio
import threading
import uuid
from typing import Any

from ..client import DB2BrowserClient


def _request_id(value: str | None = None) -> str:
    """Generate a unique request ID for tracing."""
    return value or str(uuid.uuid4())


def register_query_tools(mcp_server: Any, client: DB2BrowserClient) -> None:
    """Register the query tools with the server.

    Args:
        mcp_server: The FastMCP server instance
        client: DB2BrowserClient holding the shared session
    """
    lock = threading.Lock()

    def _run_query(sql: str, request_id: str) -> dict[str, Any]:
        with lock:
            if not client.is_connected:
                client.connect()
            table = client.run_query(sql)
        result = table.as_dict()
        result["request_id"] = request_id
        return result

    def _status() -> dict[str, Any]:
        with lock:
            session = client.session
            return {
                "connected": client.is_connected,
                "target": session.target if session is not None else None,
            }

    @mcp_server.tool()
    async def run_query(sql: str, request_id: str | None = None) -> dict[str, Any]:
        """Execute a SQL statement verbatim and return its rows as display strings.

        Every cell is text. SQL null is "NULL", CLOB cells are "CLOB" and
        columns of unsupported types are "UNKNOWN".

        Returns:
            dict with columns, rows, row_count and request_id
        """
        rid = _request_id(request_id)
        return await asyncio.to_thread(_run_query, sql, rid)

    @mcp_server.tool()
    async def connection_status() -> dict[str, Any]:
        """Report whether the server holds an open DB2 session and its target."""
        return await asyncio.to_thread(_status)
