"""Configuration model for the ranking API page source."""

from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, field_validator

from ranking_fetch.errors.constants import DEFAULT_ITEMS_KEY
from ranking_fetch.source.constants import (
    DEFAULT_ITEM_WRAPPER_KEY,
    DEFAULT_RANKING_ENDPOINT,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_TOTAL_COUNT_KEY,
    DEFAULT_USER_AGENT,
)
from ranking_fetch.source.redact import is_sensitive_param


class RankingApiConfig(BaseModel):
    """Connection and response-layout settings for the ranking API.

    Credentials are not part of this model; they come from AppSettings.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    endpoint: Annotated[str, Field(min_length=1)] = DEFAULT_RANKING_ENDPOINT
    user_agent: Annotated[str, Field(min_length=1, max_length=500)] = (
        DEFAULT_USER_AGENT
    )
    timeout_seconds: Annotated[float, Field(ge=1.0, le=300.0)] = (
        DEFAULT_TIMEOUT_SECONDS
    )
    items_key: Annotated[str, Field(min_length=1)] = DEFAULT_ITEMS_KEY
    item_wrapper_key: str | None = DEFAULT_ITEM_WRAPPER_KEY
    total_count_key: str | None = DEFAULT_TOTAL_COUNT_KEY
    page_size_param: str | None = Field(
        default=None,
        description="Query parameter carrying the page size, if the API has one",
    )
    default_params: dict[str, str | int] = Field(default_factory=dict)

    @field_validator("endpoint")
    @classmethod
    def validate_endpoint(cls, v: str) -> str:
        """Ensure the endpoint is an HTTP(S) URL."""
        if not v.startswith(("http://", "https://")):
            msg = f"endpoint must be an http(s) URL: {v}"
            raise ValueError(msg)
        return v

    @field_validator("default_params")
    @classmethod
    def validate_no_credentials(
        cls, v: dict[str, str | int]
    ) -> dict[str, str | int]:
        """Ensure no credentials are stored in config."""
        for key in v:
            if is_sensitive_param(key):
                msg = (
                    f"Parameter '{key}' must not be stored in config; "
                    "use environment variables"
                )
                raise ValueError(msg)
        return v
