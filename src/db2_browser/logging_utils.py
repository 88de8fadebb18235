from __future__ import annotations

import logging
from typing import Any, Callable

StatusCallback = Callable[[str], None]

_status_log = logging.getLogger("db2_browser.status")


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(message)s",
    )


def log_extra(**kwargs: Any) -> dict[str, Any]:
    return {k: v for k, v in kwargs.items() if v is not None}


def log_status(text: str) -> None:
    """Default status channel: one INFO record per phase transition."""
    _status_log.info(text)


def report_error(
    status: StatusCallback,
    log: logging.Logger,
    message: str,
    exc: BaseException | None = None,
    **extra: Any,
) -> None:
    """Emit a short status line and a detailed diagnostic record for a failure."""
    status(f"Error: {message}")
    log.error(
        message,
        exc_info=(type(exc), exc, exc.__traceback__) if exc is not None else None,
        extra=log_extra(error_message=str(exc) if exc is not None else None, **extra),
    )
