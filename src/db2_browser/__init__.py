"""DB2 ad-hoc query browser package."""

# Note: submodules are imported explicitly to keep the server and CLI
# dependencies out of library use:
# from db2_browser.db import Connector, QueryProjector
# from db2_browser.client import DB2BrowserClient

__all__ = [
    "config",
    "db",
]
