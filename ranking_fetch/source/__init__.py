"""HTTP page source for the ranking API."""

from ranking_fetch.source.client import RankingApiSource
from ranking_fetch.source.config import RankingApiConfig
from ranking_fetch.source.redact import redact_params


__all__ = [
    "RankingApiConfig",
    "RankingApiSource",
    "redact_params",
]
