"""Entry point for the DB2 browser server: db2-browser-server."""

from __future__ import annotations

import argparse

import uvicorn

from .app import create_app, load_app_config


def main() -> None:
    """Start the server using uvicorn.

    Host and port default to the ``server`` section of the configuration
    (DB2_BROWSER_CONFIG or the DB2_* environment) and can be overridden on the
    command line.
    """
    parser = argparse.ArgumentParser(description="Start the DB2 browser MCP server")
    parser.add_argument("--host", help="Interface to bind (default: from config)")
    parser.add_argument("--port", type=int, help="Port to run the server on (default: from config)")
    args = parser.parse_args()

    config = load_app_config()
    combined_app, _client = create_app(config=config)

    uvicorn.run(
        combined_app,
        host=args.host or config.server.host,
        port=args.port or config.server.port,
    )


if __name__ == "__main__":
    main()
