class ConfigError(ValueError):
    """Configuration is missing or invalid."""


class ConnectionError(RuntimeError):
    """The DB2 session could not be established."""


class QueryError(RuntimeError):
    """Query execution failed in a user-facing way."""


class SessionBusyError(QueryError):
    """Another query is already in flight on the session."""


class ResourceCleanupError(RuntimeError):
    """Closing a statement or connection failed. Reported, never raised."""
