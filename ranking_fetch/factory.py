"""Factory for wiring a PaginatedFetcher to the ranking API."""

import structlog

from ranking_fetch.config.schemas import FetchProfile
from ranking_fetch.errors.classifier import ErrorClassifier
from ranking_fetch.metrics.collector import MetricsCollector
from ranking_fetch.pagination.fetcher import PaginatedFetcher
from ranking_fetch.settings.app import AppSettings
from ranking_fetch.source.client import RankingApiSource


logger = structlog.get_logger()


class MissingCredentialsError(Exception):
    """Raised when the API application id is not configured."""


def create_ranking_fetcher(
    profile: FetchProfile,
    settings: AppSettings,
    metrics: MetricsCollector | None = None,
    run_id: str | None = None,
) -> tuple[PaginatedFetcher, RankingApiSource]:
    """Create a fetcher backed by the HTTP ranking source.

    The caller owns the returned source and must close it.

    Args:
        profile: Fetch profile with policies and API layout.
        settings: Environment settings holding credentials.
        metrics: Collector to share; the fetcher creates one if omitted.
        run_id: Run identifier for logging.

    Returns:
        Tuple of (fetcher, source).

    Raises:
        MissingCredentialsError: If RAKUTEN_APPLICATION_ID is not set.
    """
    if not settings.rakuten_application_id:
        msg = "RAKUTEN_APPLICATION_ID is not set"
        raise MissingCredentialsError(msg)

    source = RankingApiSource(
        application_id=settings.rakuten_application_id,
        config=profile.api,
        affiliate_id=settings.rakuten_affiliate_id,
        run_id=run_id,
    )
    fetcher = PaginatedFetcher(
        source,
        metrics=metrics,
        classifier=ErrorClassifier(items_key=profile.api.items_key),
        pacing_delay_ms=profile.pacing_delay_ms,
        max_workers=profile.max_workers,
        run_id=run_id,
    )
    logger.bind(component="factory", run_id=run_id).info(
        "ranking_fetcher_created",
        profile=profile.name,
        endpoint=profile.api.endpoint,
        max_workers=profile.max_workers,
    )
    return fetcher, source
