"""Command line front-end: connect, run one statement, print the table."""

from __future__ import annotations

import argparse
import getpass
import json
import sys
from typing import TextIO

from .client import DB2BrowserClient
from .config import AppConfig, config_from_env, load_config
from .db import ConnectionParams, ResultTable
from .errors import ConfigError, ConnectionError, QueryError
from .logging_utils import configure_logging

# Pre-filled answers of the credential prompt.
DEFAULT_HOST = "localhost"
DEFAULT_PORT = "50000"


def _ask(label: str, default: str) -> str:
    value = input(f"{label} [{default}]: ").strip()
    return value or default


def prompt_credentials(previous: ConnectionParams) -> ConnectionParams | None:
    """Ask for connection parameters on the terminal. None means cancelled."""
    try:
        host = _ask("Hostname", previous.host or DEFAULT_HOST)
        port = _ask("Port", previous.port or DEFAULT_PORT)
        database = _ask("Database", previous.database)
        user = _ask("User", previous.user)
        password = getpass.getpass("Password: ") or previous.password
    except (EOFError, KeyboardInterrupt):
        return None
    return ConnectionParams(
        host=host, port=port, database=database, user=user, password=password
    )


def format_table(table: ResultTable) -> str:
    if not table.column_names:
        return "(no result set)"
    widths = [len(name) for name in table.column_names]
    for row in table.rows:
        for index, cell in enumerate(row):
            widths[index] = max(widths[index], len(cell))
    lines = [
        " | ".join(name.ljust(width) for name, width in zip(table.column_names, widths)),
        "-+-".join("-" * width for width in widths),
    ]
    lines.extend(
        " | ".join(cell.ljust(width) for cell, width in zip(row, widths))
        for row in table.rows
    )
    lines.append(f"({table.row_count} rows)")
    return "\n".join(lines)


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="db2-browser", description="Run an ad-hoc SQL statement against DB2"
    )
    parser.add_argument("--config", help="YAML config file (default: DB2_* environment)")
    parser.add_argument("--host", help="Database server hostname")
    parser.add_argument("--port", help="Port or service number")
    parser.add_argument("--database", help="Database name")
    parser.add_argument("--user", help="User name (password from DB2_PASSWORD or prompt)")
    parser.add_argument("--sql", help="Statement to execute (default: read piped stdin)")
    parser.add_argument(
        "--format", choices=("table", "json"), default="table", help="Output format"
    )
    parser.add_argument(
        "--no-prompt",
        action="store_true",
        help="Fail instead of asking for missing credentials",
    )
    return parser


def _resolve_config(args: argparse.Namespace) -> AppConfig:
    config = load_config(args.config) if args.config else config_from_env()
    for name in ("host", "port", "database", "user"):
        value = getattr(args, name)
        if value:
            setattr(config.connection, name, value)
    return config


def main(argv: list[str] | None = None, stdin: TextIO | None = None) -> int:
    args = _build_parser().parse_args(argv)
    stdin = stdin or sys.stdin

    try:
        config = _resolve_config(args)
    except ConfigError as exc:
        print(f"Configuration error: {exc}", file=sys.stderr)
        return 2
    configure_logging(config.observability.log_level)

    if args.sql is None and stdin.isatty():
        # the terminal is kept for the credential prompt
        print("--sql is required when stdin is a terminal", file=sys.stderr)
        return 2
    sql = args.sql if args.sql is not None else stdin.read()
    if not sql.strip():
        print("No SQL statement given", file=sys.stderr)
        return 2

    interactive = not args.no_prompt and stdin.isatty()
    client = DB2BrowserClient(
        config,
        prompt=prompt_credentials if interactive else None,
        status=lambda text: print(text, file=sys.stderr),
    )
    try:
        with client:
            client.connect()
            table = client.run_query(sql)
    except (ConnectionError, QueryError) as exc:
        print(f"Error: {exc}", file=sys.stderr)
        return 1

    if args.format == "json":
        print(json.dumps(table.as_dict(), indent=2))
    else:
        print(format_table(table))
    return 0


if __name__ == "__main__":
    sys.exit(main())
