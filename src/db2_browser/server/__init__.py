"""MCP server entry point and initialization."""

from .main import main

__all__ = ["main"]
