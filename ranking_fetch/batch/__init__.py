"""Batch aggregation of page fetches with partial-success policies."""

from ranking_fetch.batch.aggregator import BatchAggregator, PageOperation
from ranking_fetch.batch.models import (
    DEFAULT_MAX_CONSECUTIVE_ERRORS,
    DEFAULT_MIN_SUCCESS_RATE,
    AbortReason,
    BatchOptions,
    BatchResult,
    compute_success_rate,
)


__all__ = [
    "AbortReason",
    "BatchAggregator",
    "BatchOptions",
    "BatchResult",
    "DEFAULT_MAX_CONSECUTIVE_ERRORS",
    "DEFAULT_MIN_SUCCESS_RATE",
    "PageOperation",
    "compute_success_rate",
]
