"""Paginated fetch orchestration."""

from ranking_fetch.pagination.constants import DEFAULT_PACING_DELAY_MS, DEFAULT_PAGE_SIZE
from ranking_fetch.pagination.fetcher import PaginatedFetcher, plan_page_count
from ranking_fetch.pagination.models import PageRequest, PageResult, PageSource


__all__ = [
    "DEFAULT_PACING_DELAY_MS",
    "DEFAULT_PAGE_SIZE",
    "PageRequest",
    "PageResult",
    "PageSource",
    "PaginatedFetcher",
    "plan_page_count",
]
