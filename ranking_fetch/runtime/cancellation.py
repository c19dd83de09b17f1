"""Cooperative cancellation and interruptible waits."""

import threading
import time
from typing import Protocol


class OperationCancelledError(Exception):
    """Raised when a fetch is abandoned by its cancellation token."""

    def __init__(self, reason: str = "cancelled") -> None:
        """Initialize the error.

        Args:
            reason: Why the operation was cancelled.
        """
        self.reason = reason
        super().__init__(f"Operation cancelled: {reason}")


class CancellationToken:
    """External cancellation signal with an optional deadline.

    Thread-safe. Waiting on the token returns early as soon as it is
    cancelled, so backoff and pacing waits can be abandoned immediately.
    """

    def __init__(self, timeout_seconds: float | None = None) -> None:
        """Initialize the token.

        Args:
            timeout_seconds: Cancel automatically after this many seconds.
        """
        self._event = threading.Event()
        self._reason: str | None = None
        self._lock = threading.Lock()
        self._deadline = (
            time.monotonic() + timeout_seconds if timeout_seconds is not None else None
        )

    def cancel(self, reason: str = "cancelled") -> None:
        """Trigger cancellation.

        Args:
            reason: Why the operation is being cancelled.
        """
        with self._lock:
            if self._reason is None:
                self._reason = reason
        self._event.set()

    @property
    def reason(self) -> str | None:
        """Get the cancellation reason, if cancelled."""
        self._check_deadline()
        with self._lock:
            return self._reason

    @property
    def is_cancelled(self) -> bool:
        """Check whether cancellation has been triggered."""
        self._check_deadline()
        return self._event.is_set()

    def _check_deadline(self) -> None:
        if (
            self._deadline is not None
            and not self._event.is_set()
            and time.monotonic() >= self._deadline
        ):
            self.cancel("deadline exceeded")

    def _remaining(self) -> float | None:
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - time.monotonic())

    def wait(self, seconds: float) -> bool:
        """Sleep for up to ``seconds``, waking early on cancellation.

        Args:
            seconds: Maximum time to wait.

        Returns:
            True if the wait was interrupted by cancellation.
        """
        if self.is_cancelled:
            return True
        remaining = self._remaining()
        if remaining is not None and remaining < seconds:
            self._event.wait(remaining)
            self._check_deadline()
            return self.is_cancelled
        return self._event.wait(max(0.0, seconds))

    def raise_if_cancelled(self) -> None:
        """Raise OperationCancelledError if cancellation was triggered.

        Raises:
            OperationCancelledError: If the token is cancelled.
        """
        if self.is_cancelled:
            raise OperationCancelledError(self.reason or "cancelled")


class Sleeper(Protocol):
    """Interruptible sleep strategy.

    Allows dependency injection of waits for testing.
    """

    def __call__(self, seconds: float, token: CancellationToken) -> bool:
        """Wait for ``seconds`` unless ``token`` is cancelled.

        Args:
            seconds: Time to wait.
            token: Cancellation token to observe.

        Returns:
            True if the wait was interrupted by cancellation.
        """
        ...


def interruptible_sleep(seconds: float, token: CancellationToken) -> bool:
    """Default sleeper backed by the token's event wait."""
    return token.wait(seconds)
