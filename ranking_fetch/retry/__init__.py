"""Retry execution with exponential backoff and jitter."""

from ranking_fetch.retry.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    JITTER_FRACTION,
)
from ranking_fetch.retry.executor import RetryExecutor
from ranking_fetch.retry.models import RetryPolicy
from ranking_fetch.retry.observer import LoggingRetryObserver, RetryEvent, RetryObserver
from ranking_fetch.retry.state_machine import (
    RetryState,
    RetryStateMachine,
    RetryStateTransitionError,
)


__all__ = [
    # Executor
    "RetryExecutor",
    # Models
    "RetryPolicy",
    # Observer
    "LoggingRetryObserver",
    "RetryEvent",
    "RetryObserver",
    # State machine
    "RetryState",
    "RetryStateMachine",
    "RetryStateTransitionError",
    # Constants
    "DEFAULT_BACKOFF_FACTOR",
    "DEFAULT_INITIAL_DELAY_MS",
    "DEFAULT_MAX_DELAY_MS",
    "DEFAULT_MAX_RETRIES",
    "JITTER_FRACTION",
]
