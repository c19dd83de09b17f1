"""Batch execution with partial-success and early-abort policies."""

from collections.abc import Callable, Sequence
from concurrent.futures import FIRST_COMPLETED, Future, ThreadPoolExecutor, wait
from dataclasses import dataclass, field
from typing import Any

import structlog

from ranking_fetch.batch.models import AbortReason, BatchOptions, BatchResult
from ranking_fetch.errors.models import FetchError
from ranking_fetch.retry.executor import RetryExecutor
from ranking_fetch.retry.models import RetryPolicy
from ranking_fetch.runtime.cancellation import (
    CancellationToken,
    OperationCancelledError,
    Sleeper,
    interruptible_sleep,
)


logger = structlog.get_logger()

PageOperation = Callable[[], Sequence[Any]]


@dataclass
class _Outcome:
    """Result of one finished operation, pending its abort decision."""

    items: Sequence[Any] | None = None
    error: FetchError | None = None
    cancelled: bool = False


@dataclass
class _BatchState:
    """Accumulated batch state.

    Only the thread that calls run_batch mutates this, so the
    consecutive-error counter and abort check have a single owner even
    when operations run on worker threads.
    """

    size: int
    options: BatchOptions
    buffer: list[Sequence[Any] | None] = field(init=False)
    errors: list[FetchError] = field(default_factory=list)
    attempted: int = 0
    consecutive_errors: int = 0
    abort_reason: AbortReason | None = None
    cancelled: bool = False

    def __post_init__(self) -> None:
        self.buffer = [None] * self.size

    @property
    def stopped(self) -> bool:
        return self.abort_reason is not None or self.cancelled

    def record_success(self, index: int, items: Sequence[Any]) -> None:
        self.attempted += 1
        self.consecutive_errors = 0
        self.buffer[index] = items

    def record_failure(self, error: FetchError) -> AbortReason | None:
        """Record a failed operation and check the abort conditions.

        Returns:
            The abort reason if this failure stops the batch.
        """
        self.attempted += 1
        self.consecutive_errors += 1
        self.errors.append(error)

        if self.abort_reason is not None:
            return None
        if self.options.stop_on_fatal_error and error.fatal:
            self.abort_reason = AbortReason.FATAL_ERROR
        elif self.consecutive_errors >= self.options.max_consecutive_errors:
            self.abort_reason = AbortReason.CONSECUTIVE_ERRORS
        return self.abort_reason

    def collected_items(self) -> list[Any]:
        items: list[Any] = []
        for page_items in self.buffer:
            if page_items is not None:
                items.extend(page_items)
        return items


def _has_unfolded_failure(finished: dict[int, _Outcome]) -> bool:
    return any(
        outcome.error is not None or outcome.cancelled
        for outcome in finished.values()
    )


class BatchAggregator:
    """Runs page-fetch operations and aggregates their results.

    Provides:
    - Per-operation retries through RetryExecutor
    - Failure isolation (a failed page is recorded and the batch continues)
    - Early abort on fatal errors or too many consecutive failures
    - Pacing delay between operations
    - Optional bounded concurrency with page-ordered results
    """

    def __init__(
        self,
        executor: RetryExecutor,
        max_workers: int = 1,
        sleep: Sleeper = interruptible_sleep,
        run_id: str | None = None,
    ) -> None:
        """Initialize the aggregator.

        Args:
            executor: Retry executor wrapping each operation.
            max_workers: Maximum operations in flight (1 = sequential).
            sleep: Interruptible sleep used for pacing.
            run_id: Run identifier for logging.
        """
        self._executor = executor
        self._max_workers = max(1, max_workers)
        self._sleep = sleep
        self._log = logger.bind(component="batch", run_id=run_id)

    def run_batch(  # noqa: PLR0913
        self,
        operations: Sequence[PageOperation],
        policy: RetryPolicy,
        options: BatchOptions | None = None,
        pacing_delay_ms: float = 0,
        cancel_token: CancellationToken | None = None,
        labels: Sequence[str] | None = None,
        pace_first: bool = False,
    ) -> BatchResult:
        """Run operations in order and aggregate their items.

        Args:
            operations: Fallible actions returning the items of one page.
            policy: Retry policy applied to every operation.
            options: Partial-success and abort policy.
            pacing_delay_ms: Delay inserted before each operation after the first.
            cancel_token: Cancellation signal; unstarted operations are
                abandoned once it fires.
            labels: Optional per-operation labels for logging.
            pace_first: Also wait before the first operation, for callers
                that made a request of their own just before the batch.

        Returns:
            BatchResult reflecting every attempted operation.
        """
        options = options or BatchOptions()
        token = cancel_token or CancellationToken()
        state = _BatchState(size=len(operations), options=options)
        pace_from = 0 if pace_first else 1
        names = list(labels) if labels is not None else [
            f"operation-{index}" for index in range(len(operations))
        ]

        self._log.info(
            "batch_started",
            operation_count=len(operations),
            max_workers=self._max_workers,
            pacing_delay_ms=pacing_delay_ms,
        )

        if self._max_workers <= 1:
            self._run_sequential(
                operations, policy, pacing_delay_ms, pace_from, token, state, names
            )
        else:
            self._run_concurrent(
                operations, policy, pacing_delay_ms, pace_from, token, state, names
            )

        result = BatchResult.build(
            items=state.collected_items(),
            errors=state.errors,
            total_requested=state.attempted,
            min_success_rate=options.min_success_rate,
            abort_reason=state.abort_reason,
            cancelled=state.cancelled,
        )

        self._log.info(
            "batch_complete",
            operation_count=len(operations),
            total_requested=result.total_requested,
            error_count=result.error_count,
            item_count=len(result.items),
            success_rate=round(result.success_rate, 4),
            success=result.success,
            abort_reason=result.abort_reason.value if result.abort_reason else None,
            cancelled=result.cancelled,
        )
        return result

    def _pace(
        self,
        index: int,
        pacing_delay_ms: float,
        pace_from: int,
        token: CancellationToken,
    ) -> bool:
        """Wait before an operation; True if cancellation interrupted it."""
        if token.is_cancelled:
            return True
        if index < pace_from or pacing_delay_ms <= 0:
            return False
        return self._sleep(pacing_delay_ms / 1000.0, token)

    def _run_one(
        self,
        operation: PageOperation,
        policy: RetryPolicy,
        token: CancellationToken,
        label: str,
    ) -> _Outcome:
        try:
            items = self._executor.execute(operation, policy, token, label)
        except OperationCancelledError:
            return _Outcome(cancelled=True)
        except FetchError as e:
            return _Outcome(error=e)
        return _Outcome(items=items)

    def _apply(
        self,
        index: int,
        outcome: _Outcome,
        state: _BatchState,
        label: str,
    ) -> None:
        """Fold one outcome into the batch state."""
        if outcome.cancelled:
            state.cancelled = True
            return
        if outcome.error is None:
            state.record_success(index, outcome.items or [])
            return

        error = outcome.error
        reason = state.record_failure(error)
        self._log.warning(
            "batch_operation_failed",
            operation=label,
            error_kind=error.kind.value,
            status_code=error.status_code,
            consecutive_errors=state.consecutive_errors,
        )
        if reason is not None:
            self._log.warning(
                "batch_aborted",
                operation=label,
                abort_reason=reason.value,
                error_kind=error.kind.value,
                attempted=state.attempted,
            )

    def _run_sequential(  # noqa: PLR0913
        self,
        operations: Sequence[PageOperation],
        policy: RetryPolicy,
        pacing_delay_ms: float,
        pace_from: int,
        token: CancellationToken,
        state: _BatchState,
        names: list[str],
    ) -> None:
        for index, operation in enumerate(operations):
            if self._pace(index, pacing_delay_ms, pace_from, token):
                state.cancelled = True
                break
            outcome = self._run_one(operation, policy, token, names[index])
            self._apply(index, outcome, state, names[index])
            if state.stopped:
                break

    def _run_concurrent(  # noqa: PLR0913
        self,
        operations: Sequence[PageOperation],
        policy: RetryPolicy,
        pacing_delay_ms: float,
        pace_from: int,
        token: CancellationToken,
        state: _BatchState,
        names: list[str],
    ) -> None:
        """Run with up to max_workers operations in flight.

        Outcomes are folded in operation order, so abort decisions match
        the sequential mode's page order. While a failure waits on an
        earlier operation to be folded, nothing new is started. After an abort, in-flight
        operations finish and are recorded but nothing new is started.
        """
        pending: dict[Future[_Outcome], int] = {}
        finished: dict[int, _Outcome] = {}
        next_index = 0
        cursor = 0

        with ThreadPoolExecutor(max_workers=self._max_workers) as pool:
            while True:
                while (
                    not state.stopped
                    and not _has_unfolded_failure(finished)
                    and next_index < len(operations)
                    and len(pending) < self._max_workers
                ):
                    if self._pace(next_index, pacing_delay_ms, pace_from, token):
                        state.cancelled = True
                        break
                    future = pool.submit(
                        self._run_one,
                        operations[next_index],
                        policy,
                        token,
                        names[next_index],
                    )
                    pending[future] = next_index
                    next_index += 1

                if not pending:
                    break

                done, _ = wait(pending, return_when=FIRST_COMPLETED)
                for future in done:
                    finished[pending.pop(future)] = future.result()

                while cursor in finished:
                    self._apply(cursor, finished.pop(cursor), state, names[cursor])
                    cursor += 1
