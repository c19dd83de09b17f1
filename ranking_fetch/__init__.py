"""Resilient paginated fetching of ranking data from rate-limited APIs.

Provides:
- Classification of HTTP/transport failures into a closed error taxonomy
- Bounded retries with exponential backoff and jitter
- Batch aggregation with partial-success and early-abort policies
- Request/error metrics over a rolling window
- Page planning from the source's total-count hint
"""

from ranking_fetch.batch import BatchAggregator, BatchOptions, BatchResult
from ranking_fetch.errors import ErrorClassifier, ErrorKind, FetchError
from ranking_fetch.metrics import ErrorMetrics, MetricsCollector
from ranking_fetch.pagination import PageRequest, PageResult, PaginatedFetcher
from ranking_fetch.retry import RetryExecutor, RetryPolicy
from ranking_fetch.runtime import CancellationToken, OperationCancelledError


__version__ = "0.1.0"

__all__ = [
    "BatchAggregator",
    "BatchOptions",
    "BatchResult",
    "CancellationToken",
    "ErrorClassifier",
    "ErrorKind",
    "ErrorMetrics",
    "FetchError",
    "MetricsCollector",
    "OperationCancelledError",
    "PageRequest",
    "PageResult",
    "PaginatedFetcher",
    "RetryExecutor",
    "RetryPolicy",
]
