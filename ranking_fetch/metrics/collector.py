"""Request and error counters for fetch operations."""

from collections import Counter
from collections.abc import Callable
from datetime import UTC, datetime, timedelta
from threading import Lock

from pydantic import BaseModel, ConfigDict, Field

from ranking_fetch.errors.models import ErrorKind, FetchError


def _utcnow() -> datetime:
    return datetime.now(UTC)


class ErrorMetrics(BaseModel):
    """Immutable snapshot of request/error counters over a window."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    total_requests: int = Field(default=0, ge=0)
    total_errors: int = Field(default=0, ge=0)
    errors_by_kind: dict[ErrorKind, int] = Field(default_factory=dict)
    window_start: datetime
    window_end: datetime

    @property
    def error_rate(self) -> float:
        """Calculate the error rate.

        Returns:
            total_errors / total_requests, or 0.0 with no requests.
        """
        if self.total_requests == 0:
            return 0.0
        return self.total_errors / self.total_requests


class MetricsCollector:
    """Thread-safe accumulator of request and error counts.

    Each PaginatedFetcher owns one unless the caller shares an instance.
    When ``window_seconds`` is set the counters roll over to a fresh
    window on the first record_request call after the window has elapsed.
    """

    def __init__(
        self,
        window_seconds: float | None = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the collector.

        Args:
            window_seconds: Length of the rolling window, or None to keep
                accumulating until reset().
            clock: Source of the current time (injectable for tests).
        """
        self._lock = Lock()
        self._clock = clock
        self._window = (
            timedelta(seconds=window_seconds) if window_seconds is not None else None
        )
        now = clock()
        self._total_requests = 0
        self._total_errors = 0
        self._errors_by_kind: Counter[ErrorKind] = Counter()
        self._window_start = now
        self._window_end = now

    def _reset_locked(self, now: datetime) -> None:
        self._total_requests = 0
        self._total_errors = 0
        self._errors_by_kind = Counter()
        self._window_start = now
        self._window_end = now

    def _roll_window_locked(self, now: datetime) -> None:
        if self._window is not None and now - self._window_start >= self._window:
            self._reset_locked(now)

    def record_request(self) -> None:
        """Record one request attempt and extend the window to now."""
        now = self._clock()
        with self._lock:
            self._roll_window_locked(now)
            self._total_requests += 1
            self._window_end = now

    def record_error(self, error: FetchError) -> None:
        """Record a classified error against the current window.

        Only record_request rolls the window, so an error always lands in
        the window that counted its request.

        Args:
            error: The error to count.
        """
        with self._lock:
            self._total_errors += 1
            self._errors_by_kind[error.kind] += 1

    def snapshot(self) -> ErrorMetrics:
        """Get an immutable copy of the current counters.

        Returns:
            ErrorMetrics snapshot.
        """
        with self._lock:
            return ErrorMetrics(
                total_requests=self._total_requests,
                total_errors=self._total_errors,
                errors_by_kind=dict(self._errors_by_kind),
                window_start=self._window_start,
                window_end=self._window_end,
            )

    def reset(self) -> None:
        """Clear all counters and restart the window at the current time."""
        now = self._clock()
        with self._lock:
            self._reset_locked(now)

    def to_dict(self) -> dict[str, object]:
        """Export metrics as dictionary.

        Returns:
            Dictionary representation of all metrics.
        """
        snapshot = self.snapshot()
        return {
            "total_requests": snapshot.total_requests,
            "total_errors": snapshot.total_errors,
            "error_rate": snapshot.error_rate,
            "errors_by_kind": {
                kind.value: count for kind, count in snapshot.errors_by_kind.items()
            },
            "window_start": snapshot.window_start.isoformat(),
            "window_end": snapshot.window_end.isoformat(),
        }

    def to_prometheus_format(self) -> str:
        """Export metrics in Prometheus text format.

        Returns:
            Prometheus-formatted metrics string.
        """
        snapshot = self.snapshot()
        lines: list[str] = [
            "# HELP ranking_fetch_requests_total Total request attempts",
            "# TYPE ranking_fetch_requests_total counter",
            f"ranking_fetch_requests_total {snapshot.total_requests}",
            "# HELP ranking_fetch_errors_total Total errors by kind",
            "# TYPE ranking_fetch_errors_total counter",
        ]
        for kind, count in sorted(
            snapshot.errors_by_kind.items(), key=lambda entry: entry[0].value
        ):
            lines.append(f'ranking_fetch_errors_total{{kind="{kind.value}"}} {count}')
        lines.extend(
            [
                "# HELP ranking_fetch_error_rate Errors per request in the window",
                "# TYPE ranking_fetch_error_rate gauge",
                f"ranking_fetch_error_rate {snapshot.error_rate:.4f}",
            ]
        )
        return "\n".join(lines)
