"""HTTP page source for the ranking API."""

import json
from collections.abc import Mapping
from typing import Any

import httpx
import structlog

from ranking_fetch.errors.classifier import ErrorClassifier
from ranking_fetch.errors.constants import HTTP_STATUS_OK_MAX, HTTP_STATUS_OK_MIN
from ranking_fetch.errors.models import ErrorKind, FetchError
from ranking_fetch.pagination.models import PageRequest, PageResult
from ranking_fetch.source.config import RankingApiConfig
from ranking_fetch.source.constants import (
    AFFILIATE_ID_PARAM,
    APPLICATION_ID_PARAM,
    FORMAT_PARAM,
    PAGE_PARAM,
    RESPONSE_FORMAT,
)
from ranking_fetch.source.redact import redact_params


logger = structlog.get_logger()


class RankingApiSource:
    """Fetches ranking pages over HTTP.

    Raises classified FetchErrors for non-2xx responses and malformed
    bodies. Transport exceptions from httpx propagate unchanged so the
    retry executor can classify them.
    """

    def __init__(  # noqa: PLR0913
        self,
        application_id: str,
        config: RankingApiConfig | None = None,
        affiliate_id: str | None = None,
        transport: httpx.BaseTransport | None = None,
        run_id: str | None = None,
    ) -> None:
        """Initialize the page source.

        Args:
            application_id: API application identifier.
            config: Endpoint and response-layout settings.
            affiliate_id: Optional affiliate identifier.
            transport: httpx transport override (for tests).
            run_id: Run identifier for logging.
        """
        if not application_id:
            msg = "application_id must not be empty"
            raise ValueError(msg)
        self._application_id = application_id
        self._affiliate_id = affiliate_id
        self._config = config or RankingApiConfig()
        self._classifier = ErrorClassifier(items_key=self._config.items_key)
        self._client = httpx.Client(
            timeout=self._config.timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": self._config.user_agent, "Accept": "application/json"},
            transport=transport,
        )
        self._log = logger.bind(component="source", run_id=run_id)

    def __enter__(self) -> "RankingApiSource":
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def build_params(self, request: PageRequest) -> dict[str, Any]:
        """Build query parameters for a page request.

        Args:
            request: The page to fetch.

        Returns:
            Query parameters including credentials.
        """
        params: dict[str, Any] = dict(self._config.default_params)
        params.update(request.query_params)
        params[APPLICATION_ID_PARAM] = self._application_id
        if self._affiliate_id:
            params[AFFILIATE_ID_PARAM] = self._affiliate_id
        params[FORMAT_PARAM] = RESPONSE_FORMAT
        params[PAGE_PARAM] = request.page_number
        if self._config.page_size_param:
            params[self._config.page_size_param] = request.page_size
        return params

    def fetch_page(self, request: PageRequest) -> PageResult:
        """Fetch one ranking page.

        Args:
            request: The page to fetch.

        Returns:
            PageResult with unwrapped items and the total-count hint.

        Raises:
            FetchError: For error statuses and malformed bodies.
            httpx.TransportError: For network-level failures.
        """
        params = self.build_params(request)
        log = self._log.bind(page=request.page_number, params=redact_params(params))

        response = self._client.get(self._config.endpoint, params=params)
        body = self._decode_body(response)

        error = self._classifier.classify_response(response.status_code, body)
        if error is not None:
            log.debug(
                "page_rejected",
                status_code=response.status_code,
                error_kind=error.kind.value,
            )
            raise error

        items = [self._unwrap(entry) for entry in body[self._config.items_key]]
        total_count = self._total_count(body)
        log.debug(
            "page_fetched",
            status_code=response.status_code,
            item_count=len(items),
            total_count=total_count,
        )
        return PageResult(items=items, total_count=total_count)

    def _decode_body(self, response: httpx.Response) -> Any:
        """Decode a JSON body.

        Non-2xx bodies that are not JSON are returned as text so status
        classification still applies.

        Raises:
            FetchError: DATA_PARSING_ERROR for undecodable 2xx bodies.
        """
        try:
            return response.json()
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            if HTTP_STATUS_OK_MIN <= response.status_code < HTTP_STATUS_OK_MAX:
                raise FetchError(
                    kind=ErrorKind.DATA_PARSING_ERROR,
                    message=f"Response body is not valid JSON: {e}",
                    status_code=response.status_code,
                    raw_payload=response.text[:500],
                ) from e
            return response.text

    def _unwrap(self, entry: Any) -> Any:
        wrapper = self._config.item_wrapper_key
        if wrapper and isinstance(entry, Mapping) and wrapper in entry:
            return entry[wrapper]
        return entry

    def _total_count(self, body: Mapping[str, Any]) -> int | None:
        key = self._config.total_count_key
        if not key:
            return None
        value = body.get(key)
        if isinstance(value, bool):
            return None
        if isinstance(value, int):
            return max(0, value)
        if isinstance(value, str) and value.isdigit():
            return int(value)
        return None
