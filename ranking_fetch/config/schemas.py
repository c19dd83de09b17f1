"""Schema for fetch profile configuration files."""

from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from ranking_fetch.batch.models import BatchOptions
from ranking_fetch.pagination.constants import DEFAULT_PACING_DELAY_MS, DEFAULT_PAGE_SIZE
from ranking_fetch.retry.models import RetryPolicy
from ranking_fetch.source.config import RankingApiConfig


class FetchProfile(BaseModel):
    """A named, reusable fetch configuration.

    Bundles the retry and batch policies with the page plan and the API
    layout so one YAML file describes a complete fetch.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: Annotated[str, Field(min_length=1, max_length=100)] = "default"
    max_items: Annotated[int, Field(ge=1, le=100000)] = 100
    page_size: Annotated[int, Field(ge=1, le=1000)] = DEFAULT_PAGE_SIZE
    pacing_delay_ms: Annotated[float, Field(ge=0, le=60000)] = DEFAULT_PACING_DELAY_MS
    max_workers: Annotated[int, Field(ge=1, le=16)] = 1
    query_params: dict[str, Any] = Field(default_factory=dict)
    retry_policy: RetryPolicy = Field(default_factory=RetryPolicy)
    batch_options: BatchOptions = Field(default_factory=BatchOptions)
    api: RankingApiConfig = Field(default_factory=RankingApiConfig)
