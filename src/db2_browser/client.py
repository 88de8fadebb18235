from __future__ import annotations

import logging
from typing import Callable

from .config import AppConfig
from .db import Connector, ConnectionParams, QueryProjector, ResultTable, Session
from .errors import ConnectionError, QueryError
from .logging_utils import StatusCallback, log_extra, log_status

# Receives the last attempted parameters (possibly incomplete) and returns new
# ones, or None when the user cancels.
CredentialPrompt = Callable[[ConnectionParams], "ConnectionParams | None"]


class DB2BrowserClient:
    """Owns one DB2 session for a front-end: connect, query, tear down."""

    def __init__(
        self,
        config: AppConfig,
        prompt: CredentialPrompt | None = None,
        status: StatusCallback | None = None,
        connector: Connector | None = None,
        projector: QueryProjector | None = None,
    ) -> None:
        self._config = config
        self._prompt = prompt
        self._status = status or log_status
        self._connector = connector or Connector(status=self._status)
        self._projector = projector or QueryProjector(
            status=self._status,
            exact_decimals=config.projection.exact_decimals,
        )
        self._session: Session | None = None
        self._log = logging.getLogger(__name__)

    @property
    def session(self) -> Session | None:
        return self._session

    @property
    def is_connected(self) -> bool:
        return self._session is not None and self._session.is_open

    def connect(self, params: ConnectionParams | None = None) -> Session:
        """Connect with ``params`` or the configured parameters.

        The credential prompt is asked for new parameters when the current
        ones are incomplete or the attempt fails, up to
        ``connection.max_prompt_attempts`` times.

        Raises:
        ConnectionError: If every attempt fails or the prompt is cancelled.
        """
        self.close()
        current = params or self._config.connection.params()
        last_error: ConnectionError | None = None
        attempts = 0
        while True:
            if current.is_complete():
                try:
                    self._session = self._connector.connect(current)
                    return self._session
                except ConnectionError as exc:
                    last_error = exc
            if self._prompt is None:
                break
            if attempts >= self._config.connection.max_prompt_attempts:
                self._log.warning(
                    "Giving up after prompting for credentials",
                    extra=log_extra(attempts=attempts),
                )
                break
            attempts += 1
            answer = self._prompt(current)
            if answer is None:
                self._status("Connection cancelled")
                raise last_error or ConnectionError("Connection cancelled")
            current = answer

        if last_error is not None:
            raise last_error
        raise ConnectionError("Connection parameters are incomplete")

    def run_query(self, sql: str) -> ResultTable:
        if self._session is None or not self._session.is_open:
            raise QueryError("Not connected to a database")
        return self._projector.execute(self._session, sql)

    def close(self) -> None:
        if self._session is None:
            return
        self._status("Closing connection.")
        self._connector.close(self._session)
        self._session = None

    def __enter__(self) -> "DB2BrowserClient":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()
