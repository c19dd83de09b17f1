"""Bounded retry with exponential backoff and jitter."""

import random
from collections.abc import Callable
from typing import TypeVar

import structlog

from ranking_fetch.errors.classifier import ErrorClassifier
from ranking_fetch.errors.models import FetchError
from ranking_fetch.metrics.collector import MetricsCollector
from ranking_fetch.retry.models import RetryPolicy
from ranking_fetch.retry.observer import LoggingRetryObserver, RetryEvent, RetryObserver
from ranking_fetch.retry.state_machine import RetryStateMachine
from ranking_fetch.runtime.cancellation import (
    CancellationToken,
    OperationCancelledError,
    Sleeper,
    interruptible_sleep,
)


logger = structlog.get_logger()

T = TypeVar("T")


class RetryExecutor:
    """Executes a fallible operation with bounded retries.

    Each attempt is counted in the metrics collector; each failed attempt
    is classified and counted as an error. Transient kinds are retried
    after an interruptible backoff wait; non-retryable kinds and the last
    allotted attempt fail immediately with the classified error.
    """

    def __init__(  # noqa: PLR0913
        self,
        metrics: MetricsCollector | None = None,
        classifier: ErrorClassifier | None = None,
        observer: RetryObserver | None = None,
        sleep: Sleeper = interruptible_sleep,
        rng: random.Random | None = None,
        run_id: str | None = None,
    ) -> None:
        """Initialize the executor.

        Args:
            metrics: Collector for attempts and errors.
            classifier: Classifier for raw exceptions.
            observer: Receives retry events (defaults to structured logging).
            sleep: Interruptible sleep used for backoff waits.
            rng: Random source for jitter.
            run_id: Run identifier for logging.
        """
        self._metrics = metrics if metrics is not None else MetricsCollector()
        self._classifier = classifier or ErrorClassifier()
        self._observer = observer or LoggingRetryObserver(run_id)
        self._sleep = sleep
        self._rng = rng
        self._log = logger.bind(component="retry", run_id=run_id)

    @property
    def metrics(self) -> MetricsCollector:
        """Get the metrics collector."""
        return self._metrics

    def execute(
        self,
        operation: Callable[[], T],
        policy: RetryPolicy,
        cancel_token: CancellationToken | None = None,
        label: str | None = None,
    ) -> T:
        """Run ``operation`` until it succeeds or retries are exhausted.

        Args:
            operation: Zero-argument fallible action.
            policy: Retry configuration.
            cancel_token: Cancellation signal observed before each attempt
                and during backoff waits.
            label: Operation label for logging.

        Returns:
            The operation's result, unchanged.

        Raises:
            FetchError: The last classified error once the operation fails.
            OperationCancelledError: If cancelled before success.
        """
        token = cancel_token or CancellationToken()
        machine = RetryStateMachine(label)

        for attempt in range(policy.max_attempts):
            if token.is_cancelled:
                machine.to_failed()
                raise OperationCancelledError(token.reason or "cancelled")

            machine.to_attempting()
            self._metrics.record_request()
            try:
                result = operation()
            except OperationCancelledError:
                machine.to_failed()
                raise
            except Exception as e:  # noqa: BLE001
                raw_error = e
                error = self._classifier.classify_exception(e)
                self._metrics.record_error(error)
            else:
                machine.to_succeeded()
                return result

            is_last = attempt + 1 >= policy.max_attempts
            if not error.retryable or is_last:
                machine.to_failed()
                self._observer.on_exhausted(error, attempt + 1, label)
                if error is raw_error:
                    raise error
                raise error from raw_error

            delay_ms = policy.get_delay_ms(attempt, self._rng)
            machine.to_waiting()
            self._observer.on_retry(
                RetryEvent(
                    attempt=attempt,
                    max_retries=policy.max_retries,
                    delay_ms=delay_ms,
                    error=error,
                    label=label,
                )
            )
            if self._sleep(delay_ms / 1000.0, token):
                machine.to_failed()
                self._log.info(
                    "retry_cancelled",
                    operation=label,
                    attempt=attempt,
                    reason=token.reason,
                )
                raise OperationCancelledError(token.reason or "cancelled")

        # Unreachable: max_attempts >= 1 and the final attempt always returns or raises
        msg = "retry loop exited without a result"
        raise RuntimeError(msg)
