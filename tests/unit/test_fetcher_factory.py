"""Unit tests for the ranking fetcher factory."""

import pytest

from ranking_fetch.config.schemas import FetchProfile
from ranking_fetch.factory import MissingCredentialsError, create_ranking_fetcher
from ranking_fetch.metrics.collector import MetricsCollector
from ranking_fetch.pagination.fetcher import PaginatedFetcher
from ranking_fetch.settings.app import AppSettings
from ranking_fetch.source.client import RankingApiSource


class TestCreateRankingFetcher:
    """Tests for create_ranking_fetcher."""

    def test_requires_application_id(self, monkeypatch: pytest.MonkeyPatch) -> None:
        """Without credentials no fetcher is created."""
        monkeypatch.delenv("RAKUTEN_APPLICATION_ID", raising=False)

        with pytest.raises(MissingCredentialsError, match="RAKUTEN_APPLICATION_ID"):
            create_ranking_fetcher(FetchProfile(), AppSettings(_env_file=None))

    def test_wires_source_and_shared_metrics(
        self, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        """The fetcher reports into the supplied collector."""
        monkeypatch.setenv("RAKUTEN_APPLICATION_ID", "app-123")
        collector = MetricsCollector()
        collector.record_request()

        fetcher, source = create_ranking_fetcher(
            FetchProfile(name="daily"),
            AppSettings(_env_file=None),
            metrics=collector,
            run_id="run-1",
        )
        try:
            assert isinstance(fetcher, PaginatedFetcher)
            assert isinstance(source, RankingApiSource)
            assert fetcher.get_metrics().total_requests == 1
        finally:
            source.close()
