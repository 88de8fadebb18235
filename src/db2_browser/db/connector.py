from __future__ import annotations

import logging
from types import ModuleType
from typing import Any, Callable

from ..errors import ConnectionError, ResourceCleanupError
from ..logging_utils import StatusCallback, log_extra, log_status, report_error
from .models import ConnectionParams

_log = logging.getLogger(__name__)


def _load_driver() -> ModuleType:
    try:
        import ibm_db
    except ImportError as exc:
        raise ConnectionError("DB2 driver ibm_db is not available") from exc
    return ibm_db


def build_connection_string(params: ConnectionParams) -> str:
    """DSN naming the endpoint only; credentials are passed to connect separately."""
    return (
        f"DATABASE={params.database};"
        f"HOSTNAME={params.host};"
        f"PORT={params.port};"
        "PROTOCOL=TCPIP;"
    )


def describe_target(params: ConnectionParams) -> str:
    return f"db2://{params.host}:{params.port}/{params.database}"


class Session:
    """A live DB2 session: the driver module plus its connection handle.

    At most one statement is in flight at a time; ``busy`` is set by the
    projector while a query runs.
    """

    def __init__(
        self,
        driver: Any,
        handle: Any,
        target: str,
        status: StatusCallback | None = None,
    ) -> None:
        self.driver = driver
        self.handle = handle
        self.target = target
        self.busy = False
        self._status = status or log_status

    @property
    def is_open(self) -> bool:
        return self.handle is not None

    def close(self) -> None:
        if self.handle is None:
            return
        handle, self.handle = self.handle, None
        try:
            # ibm_db raises plain Exception for driver errors
            closed = self.driver.close(handle)
        except Exception as exc:
            self._report_cleanup(ResourceCleanupError(str(exc)))
            return
        if closed is False:
            self._report_cleanup(ResourceCleanupError("close returned failure"))
            return
        _log.info("Connection closed", extra=log_extra(target=self.target))

    def _report_cleanup(self, error: ResourceCleanupError) -> None:
        report_error(
            self._status, _log, "Error closing the connection.", error, target=self.target
        )

    def __repr__(self) -> str:
        state = "open" if self.is_open else "closed"
        return f"Session({self.target!r}, {state})"


class Connector:
    def __init__(
        self,
        status: StatusCallback | None = None,
        driver_loader: Callable[[], Any] | None = None,
    ) -> None:
        self._status = status or log_status
        self._driver_loader = driver_loader or _load_driver

    def connect(self, params: ConnectionParams) -> Session:
        """Open a DB2 session for ``params``.

        Raises:
        ConnectionError: If the driver is missing, the host cannot be reached
            or the credentials are rejected. Nothing is retained on failure.
        """
        target = describe_target(params)
        self._status("Connecting")
        try:
            driver = self._driver_loader()
        except ConnectionError as exc:
            report_error(self._status, _log, str(exc), exc, target=target)
            raise

        try:
            handle = driver.connect(
                build_connection_string(params), params.user, params.password
            )
        except Exception as exc:
            report_error(self._status, _log, "SQL error", exc, target=target)
            raise ConnectionError(f"Could not connect to {target}: {exc}") from exc

        if not handle:
            errormsg = getattr(driver, "conn_errormsg", None)
            message = (errormsg() if callable(errormsg) else "") or "connection refused"
            error = ConnectionError(f"Could not connect to {target}: {message}")
            report_error(self._status, _log, "SQL error", error, target=target)
            raise error

        _log.info("Connected", extra=log_extra(target=target, user=params.user))
        self._status("Connected")
        return Session(driver, handle, target, status=self._status)

    def close(self, session: Session | None) -> None:
        if session is not None:
            session.close()
