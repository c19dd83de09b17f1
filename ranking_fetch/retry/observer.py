"""Observers notified about retry events."""

from dataclasses import dataclass
from typing import Protocol

import structlog

from ranking_fetch.errors.models import FetchError


logger = structlog.get_logger()


@dataclass(frozen=True)
class RetryEvent:
    """A failed attempt that will be retried after a delay."""

    attempt: int
    max_retries: int
    delay_ms: float
    error: FetchError
    label: str | None = None


class RetryObserver(Protocol):
    """Receives retry events from RetryExecutor."""

    def on_retry(self, event: RetryEvent) -> None:
        """Handle a scheduled retry."""
        ...

    def on_exhausted(self, error: FetchError, attempts: int, label: str | None) -> None:
        """Handle an operation that failed for good."""
        ...


class LoggingRetryObserver:
    """Logs retry events through structlog."""

    def __init__(self, run_id: str | None = None) -> None:
        """Initialize the observer with an optional run id."""
        self._log = logger.bind(component="retry", run_id=run_id)

    def on_retry(self, event: RetryEvent) -> None:
        """Log a scheduled retry."""
        self._log.info(
            "retry_scheduled",
            operation=event.label,
            attempt=event.attempt,
            max_retries=event.max_retries,
            delay_ms=round(event.delay_ms, 2),
            error_kind=event.error.kind.value,
            status_code=event.error.status_code,
        )

    def on_exhausted(self, error: FetchError, attempts: int, label: str | None) -> None:
        """Log a failure that will not be retried."""
        self._log.warning(
            "retry_exhausted",
            operation=label,
            attempts=attempts,
            error_kind=error.kind.value,
            status_code=error.status_code,
            retryable=error.retryable,
        )
