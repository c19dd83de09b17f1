"""Deterministic test doubles for the fetch engine."""

from collections.abc import Callable, Iterable
from dataclasses import dataclass, field
from datetime import UTC, datetime, timedelta
from typing import Any

from ranking_fetch.errors.models import ErrorKind, FetchError
from ranking_fetch.pagination.models import PageRequest, PageResult
from ranking_fetch.retry.observer import RetryEvent
from ranking_fetch.runtime.cancellation import CancellationToken


@dataclass
class FakeSleeper:
    """Records requested waits instead of sleeping.

    Optionally cancels the token once a given number of waits happened.
    """

    waits: list[float] = field(default_factory=list)
    cancel_after: int | None = None

    def __call__(self, seconds: float, token: CancellationToken) -> bool:
        self.waits.append(seconds)
        if self.cancel_after is not None and len(self.waits) >= self.cancel_after:
            token.cancel("test cancellation")
        return token.is_cancelled


@dataclass
class RecordingObserver:
    """Collects retry events."""

    events: list[RetryEvent] = field(default_factory=list)
    exhausted: list[tuple[FetchError, int]] = field(default_factory=list)

    def on_retry(self, event: RetryEvent) -> None:
        self.events.append(event)

    def on_exhausted(self, error: FetchError, attempts: int, label: str | None) -> None:  # noqa: ARG002
        self.exhausted.append((error, attempts))


class FakeClock:
    """Manually advanced UTC clock."""

    def __init__(self, start: datetime | None = None) -> None:
        self.now = start or datetime(2024, 1, 1, tzinfo=UTC)

    def __call__(self) -> datetime:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += timedelta(seconds=seconds)


def make_items(page: int, count: int) -> list[dict[str, int]]:
    """Build ``count`` ranked items for a page."""
    return [{"page": page, "rank": (page - 1) * count + i + 1} for i in range(count)]


def network_error() -> FetchError:
    return FetchError(kind=ErrorKind.NETWORK_ERROR, message="socket hang up")


def auth_error() -> FetchError:
    return FetchError(
        kind=ErrorKind.AUTHENTICATION_ERROR, message="unauthorized", status_code=401
    )


def unknown_error() -> FetchError:
    return FetchError(kind=ErrorKind.UNKNOWN_ERROR, message="something odd")


class ScriptedPageSource:
    """Page source whose failures are scripted per page number.

    ``failures`` maps a page number to the errors raised on successive
    calls for that page; once exhausted the page succeeds.
    ``permanent`` maps a page number to an error raised on every call.
    """

    def __init__(
        self,
        total_count: int | None,
        page_size: int,
        failures: dict[int, Iterable[Exception]] | None = None,
        permanent: dict[int, Exception] | None = None,
        on_call: Callable[[PageRequest], None] | None = None,
    ) -> None:
        self.total_count = total_count
        self.page_size = page_size
        self.failures = {page: list(errs) for page, errs in (failures or {}).items()}
        self.permanent = permanent or {}
        self.on_call = on_call
        self.calls: list[int] = []
        self.requests: list[PageRequest] = []

    def fetch_page(self, request: PageRequest) -> PageResult:
        self.calls.append(request.page_number)
        self.requests.append(request)
        if self.on_call is not None:
            self.on_call(request)
        page = request.page_number
        if page in self.permanent:
            raise self.permanent[page]
        pending = self.failures.get(page)
        if pending:
            raise pending.pop(0)
        items: list[Any] = make_items(page, self.page_size)
        return PageResult(
            items=items,
            total_count=self.total_count if page == 1 else None,
        )
