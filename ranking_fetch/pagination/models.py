"""Data models for paginated fetching."""

from typing import Annotated, Any, Protocol

from pydantic import BaseModel, ConfigDict, Field


class PageRequest(BaseModel):
    """Request for one page of ranking data.

    ``query_params`` carries caller-supplied filters (genre, age, sex, ...)
    and is passed through to the page source untouched.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    page_number: Annotated[int, Field(ge=1)]
    page_size: Annotated[int, Field(ge=1)]
    query_params: dict[str, Any] = Field(default_factory=dict)


class PageResult(BaseModel):
    """Items of one page plus the source's total-count hint.

    The hint is only meaningful for page 1.
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    items: list[Any] = Field(default_factory=list)
    total_count: Annotated[int, Field(ge=0)] | None = None


class PageSource(Protocol):
    """Remote source of ranking pages.

    Implementations raise FetchError (or a raw transport/HTTP exception
    the classifier understands) on any non-success condition.
    """

    def fetch_page(self, request: PageRequest) -> PageResult:
        """Fetch one page.

        Args:
            request: The page to fetch.

        Returns:
            PageResult with the page's items.
        """
        ...
