"""Runtime helpers for cooperative cancellation."""

from ranking_fetch.runtime.cancellation import (
    CancellationToken,
    OperationCancelledError,
    Sleeper,
    interruptible_sleep,
)


__all__ = [
    "CancellationToken",
    "OperationCancelledError",
    "Sleeper",
    "interruptible_sleep",
]
