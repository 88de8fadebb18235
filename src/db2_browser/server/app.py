"""FastAPI application for the DB2 browser MCP server.

This module sets up the application by:
1. Loading the configuration and building the shared DB2BrowserClient
2. Registering the query tools with a FastMCP server
3. Combining the MCP routes with a health check route
4. Closing the DB2 session when the application shuts down
"""

from __future__ import annotations

import os
from contextlib import asynccontextmanager
from pathlib import Path
from typing import AsyncIterator

from fastapi import FastAPI
from fastmcp import FastMCP

from ..client import DB2BrowserClient
from ..config import AppConfig, config_from_env, load_config
from ..logging_utils import configure_logging
from ..tools import register_query_tools


def _config_path() -> Path | None:
    """Get the configuration file path from the environment, if any."""
    path = os.environ.get("DB2_BROWSER_CONFIG")
    return Path(path) if path else None


def load_app_config(config_path: Path | None = None) -> AppConfig:
    """Load the YAML config when a path is known, else the DB2_* environment."""
    if config_path is None:
        config_path = _config_path()
    if config_path is None:
        return config_from_env()
    return load_config(config_path)


def create_app(
    config_path: Path | None = None, config: AppConfig | None = None
) -> tuple[FastAPI, DB2BrowserClient]:
    """Create and configure the server application.

    The DB2 session is opened lazily by the first query.

    Args:
        config_path: Optional path to config file. If None, uses the environment.
        config: Already loaded configuration, takes precedence over config_path.

    Returns:
        tuple: (combined_app, client)
    """
    if config is None:
        config = load_app_config(config_path)
    configure_logging(config.observability.log_level)

    client = DB2BrowserClient(config)

    mcp_server = FastMCP(name="db2-browser")
    register_query_tools(mcp_server, client)
    mcp_app = mcp_server.http_app()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        async with mcp_app.lifespan(app):
            try:
                yield
            finally:
                client.close()

    app = FastAPI(title="DB2 Browser Server", version="0.1.0")

    @app.get("/", include_in_schema=False)
    async def health_check() -> dict:
        """Health check endpoint."""
        return {
            "message": "DB2 Browser Server is running",
            "status": "healthy",
            "connected": client.is_connected,
        }

    combined_app = FastAPI(
        title="DB2 Browser App",
        routes=[
            *mcp_app.routes,
            *app.routes,
        ],
        lifespan=lifespan,
    )

    return combined_app, client
