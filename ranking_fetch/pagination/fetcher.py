"""Orchestration of multi-page ranking fetches."""

import math
import random
import time
from typing import Any

import structlog

from ranking_fetch.batch.aggregator import BatchAggregator, PageOperation
from ranking_fetch.batch.models import BatchOptions, BatchResult
from ranking_fetch.errors.classifier import ErrorClassifier
from ranking_fetch.metrics.collector import ErrorMetrics, MetricsCollector
from ranking_fetch.pagination.constants import DEFAULT_PACING_DELAY_MS
from ranking_fetch.pagination.models import PageRequest, PageResult, PageSource
from ranking_fetch.retry.executor import RetryExecutor
from ranking_fetch.retry.models import RetryPolicy
from ranking_fetch.retry.observer import RetryObserver
from ranking_fetch.runtime.cancellation import (
    CancellationToken,
    OperationCancelledError,
    Sleeper,
    interruptible_sleep,
)


logger = structlog.get_logger()


def plan_page_count(
    max_items: int,
    page_size: int,
    total_count_hint: int | None,
) -> int:
    """Compute how many pages are needed.

    Args:
        max_items: Maximum items the caller wants.
        page_size: Items per page.
        total_count_hint: Total items reported by the source, if known.

    Returns:
        ceil(min(total_count_hint, max_items) / page_size).
    """
    target = max_items if total_count_hint is None else min(total_count_hint, max_items)
    return math.ceil(target / page_size)


class PaginatedFetcher:
    """Fetches every page needed to collect up to ``max_items`` items.

    Page 1 is fetched directly to learn the total-count hint; the
    remaining pages run through BatchAggregator with pacing between
    requests. Owns its MetricsCollector unless one is injected.
    """

    def __init__(  # noqa: PLR0913
        self,
        source: PageSource,
        metrics: MetricsCollector | None = None,
        classifier: ErrorClassifier | None = None,
        observer: RetryObserver | None = None,
        sleep: Sleeper = interruptible_sleep,
        pacing_delay_ms: float = DEFAULT_PACING_DELAY_MS,
        max_workers: int = 1,
        rng: random.Random | None = None,
        run_id: str | None = None,
    ) -> None:
        """Initialize the fetcher.

        Args:
            source: Remote page source.
            metrics: Shared collector; a private one is created if omitted.
            classifier: Classifier for raw failures.
            observer: Receives retry events.
            sleep: Interruptible sleep for backoff and pacing waits.
            pacing_delay_ms: Delay between page requests.
            max_workers: Pages in flight for the batch phase (1 = sequential).
            rng: Random source for jitter.
            run_id: Run identifier for logging.
        """
        self._source = source
        self._metrics = metrics if metrics is not None else MetricsCollector()
        self._pacing_delay_ms = pacing_delay_ms
        self._executor = RetryExecutor(
            metrics=self._metrics,
            classifier=classifier,
            observer=observer,
            sleep=sleep,
            rng=rng,
            run_id=run_id,
        )
        self._aggregator = BatchAggregator(
            self._executor,
            max_workers=max_workers,
            sleep=sleep,
            run_id=run_id,
        )
        self._log = logger.bind(component="fetcher", run_id=run_id)

    def get_metrics(self) -> ErrorMetrics:
        """Get a snapshot of request and error counters."""
        return self._metrics.snapshot()

    def reset_metrics(self) -> None:
        """Clear request and error counters."""
        self._metrics.reset()

    def _page_operation(self, request: PageRequest) -> PageOperation:
        def operation() -> list[Any]:
            return self._source.fetch_page(request).items

        return operation

    def fetch_all(  # noqa: PLR0913
        self,
        max_items: int,
        page_size: int,
        query_params: dict[str, Any] | None = None,
        retry_policy: RetryPolicy | None = None,
        batch_options: BatchOptions | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> BatchResult:
        """Fetch up to ``max_items`` items across as many pages as needed.

        Args:
            max_items: Maximum number of items to return.
            page_size: Items per page.
            query_params: Filters passed through to every page request.
            retry_policy: Retry configuration for every page.
            batch_options: Partial-success and abort policy for pages 2..N.
            cancel_token: Cancellation signal; the result accumulated so far
                is returned with success=False once it fires.

        Returns:
            BatchResult with items in ranking order, truncated to max_items.

        Raises:
            FetchError: If page 1 fails, since the total is then unknown.
            ValueError: If max_items or page_size is not positive.
        """
        if max_items < 1 or page_size < 1:
            msg = f"max_items and page_size must be >= 1 (got {max_items}, {page_size})"
            raise ValueError(msg)

        start_time_ns = time.perf_counter_ns()
        params = dict(query_params or {})
        policy = retry_policy or RetryPolicy()
        options = batch_options or BatchOptions()
        token = cancel_token or CancellationToken()

        log = self._log.bind(max_items=max_items, page_size=page_size)
        log.info("fetch_all_started", query_params=sorted(params))

        first_request = PageRequest(page_number=1, page_size=page_size, query_params=params)
        try:
            first_page: PageResult = self._executor.execute(
                lambda: self._source.fetch_page(first_request),
                policy,
                token,
                label="page-1",
            )
        except OperationCancelledError as e:
            log.warning("fetch_all_cancelled", reason=e.reason, pages_fetched=0)
            return BatchResult.build(
                items=[],
                errors=[],
                total_requested=0,
                min_success_rate=options.min_success_rate,
                cancelled=True,
            )

        page_count = plan_page_count(max_items, page_size, first_page.total_count)
        log = log.bind(page_count=page_count, total_count_hint=first_page.total_count)

        if page_count <= 1:
            result = BatchResult.build(
                items=first_page.items[:max_items],
                errors=[],
                total_requested=1,
                min_success_rate=options.min_success_rate,
            )
            self._log_complete(log, result, start_time_ns)
            return result

        requests = [
            PageRequest(page_number=page, page_size=page_size, query_params=params)
            for page in range(2, page_count + 1)
        ]
        batch = self._aggregator.run_batch(
            [self._page_operation(request) for request in requests],
            policy,
            options,
            pacing_delay_ms=self._pacing_delay_ms,
            cancel_token=token,
            labels=[f"page-{request.page_number}" for request in requests],
            pace_first=True,
        )

        items = [*first_page.items, *batch.items][:max_items]
        result = BatchResult(
            items=items,
            errors=batch.errors,
            total_requested=batch.total_requested,
            success_rate=batch.success_rate,
            success=batch.success,
            aborted=batch.aborted,
            abort_reason=batch.abort_reason,
            cancelled=batch.cancelled,
        )
        self._log_complete(log, result, start_time_ns)
        return result

    def _log_complete(
        self,
        log: structlog.stdlib.BoundLogger,
        result: BatchResult,
        start_time_ns: int,
    ) -> None:
        duration_ms = (time.perf_counter_ns() - start_time_ns) / 1_000_000
        log.info(
            "fetch_all_complete",
            item_count=len(result.items),
            error_count=result.error_count,
            success_rate=round(result.success_rate, 4),
            success=result.success,
            aborted=result.aborted,
            cancelled=result.cancelled,
            duration_ms=round(duration_ms, 2),
        )
