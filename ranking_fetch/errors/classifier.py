"""Mapping of raw failure signals onto classified fetch errors.

Classification rules are evaluated in order and the first match wins:

1. 401/403 -> AUTHENTICATION_ERROR
2. 429 -> RATE_LIMIT_ERROR
3. 400 with a ``wrong_parameter`` body -> parameter subtype
4. 5xx -> SYSTEM_ERROR
5. Other non-2xx -> UNKNOWN_HTTP_ERROR
6. Transport timeout -> TIMEOUT_ERROR
7. Transport connection/network failure -> CONNECTION_ERROR / NETWORK_ERROR
8. Malformed 2xx body -> RESPONSE_FORMAT_ERROR / DATA_PARSING_ERROR
9. Anything else -> UNKNOWN_ERROR

All functions are pure: the same signal always yields the same kind and
retryability.
"""

import json
import re
from collections.abc import Mapping
from typing import Any

import httpx

from ranking_fetch.errors.constants import (
    CONNECTION_MARKERS,
    DEFAULT_ITEMS_KEY,
    ERROR_DESCRIPTION_FIELD,
    ERROR_FIELD,
    FILTER_PARAMETER_NAMES,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_FORBIDDEN,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MIN,
    HTTP_STATUS_TOO_MANY_REQUESTS,
    HTTP_STATUS_UNAUTHORIZED,
    NETWORK_MARKERS,
    PAGE_PARAMETER_NAMES,
    TIMEOUT_MARKERS,
    WRONG_PARAMETER_ERROR,
)
from ranking_fetch.errors.models import ErrorKind, FetchError


def _mentions_any(description: str, names: tuple[str, ...]) -> bool:
    return any(
        re.search(rf"\b{re.escape(name)}\b", description, re.IGNORECASE)
        for name in names
    )


def _parameter_kind(description: str) -> ErrorKind:
    """Pick the parameter error subtype from an error description.

    Args:
        description: The API's ``error_description`` text.

    Returns:
        INVALID_PAGE_ERROR, INVALID_FILTER_ERROR or PARAMETER_ERROR.
    """
    if _mentions_any(description, PAGE_PARAMETER_NAMES):
        return ErrorKind.INVALID_PAGE_ERROR
    if _mentions_any(description, FILTER_PARAMETER_NAMES):
        return ErrorKind.INVALID_FILTER_ERROR
    return ErrorKind.PARAMETER_ERROR


def _wrong_parameter_description(body: Any) -> str | None:
    if not isinstance(body, Mapping):
        return None
    if body.get(ERROR_FIELD) != WRONG_PARAMETER_ERROR:
        return None
    description = body.get(ERROR_DESCRIPTION_FIELD)
    return str(description) if description is not None else ""


def classify_status(status_code: int, body: Any = None) -> FetchError | None:
    """Classify an HTTP status code.

    Args:
        status_code: HTTP status code.
        body: Decoded response body, used to refine 400 responses.

    Returns:
        FetchError if the status indicates failure, None for 2xx.
    """
    if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
        return None

    if status_code in (HTTP_STATUS_UNAUTHORIZED, HTTP_STATUS_FORBIDDEN):
        return FetchError(
            kind=ErrorKind.AUTHENTICATION_ERROR,
            message=f"Authentication failed ({status_code})",
            status_code=status_code,
            raw_payload=body,
        )

    if status_code == HTTP_STATUS_TOO_MANY_REQUESTS:
        return FetchError(
            kind=ErrorKind.RATE_LIMIT_ERROR,
            message="Rate limited (429 Too Many Requests)",
            status_code=status_code,
            raw_payload=body,
        )

    if status_code == HTTP_STATUS_BAD_REQUEST:
        description = _wrong_parameter_description(body)
        if description is not None:
            return FetchError(
                kind=_parameter_kind(description),
                message=f"Wrong parameter: {description or 'no description'}",
                status_code=status_code,
                raw_payload=body,
            )

    if status_code >= HTTP_STATUS_SERVER_ERROR_MIN:
        return FetchError(
            kind=ErrorKind.SYSTEM_ERROR,
            message=f"Server error ({status_code})",
            status_code=status_code,
            raw_payload=body,
        )

    return FetchError(
        kind=ErrorKind.UNKNOWN_HTTP_ERROR,
        message=f"Unexpected HTTP status ({status_code})",
        status_code=status_code,
        raw_payload=body,
    )


def classify_payload(
    body: Any,
    items_key: str = DEFAULT_ITEMS_KEY,
) -> FetchError | None:
    """Check that a successful response body carries the item collection.

    Args:
        body: Decoded response body.
        items_key: Key holding the item list.

    Returns:
        RESPONSE_FORMAT_ERROR if the body is malformed, None otherwise.
    """
    if not isinstance(body, Mapping):
        return FetchError(
            kind=ErrorKind.RESPONSE_FORMAT_ERROR,
            message=f"Response body is not an object ({type(body).__name__})",
            raw_payload=body,
        )
    if not isinstance(body.get(items_key), list):
        return FetchError(
            kind=ErrorKind.RESPONSE_FORMAT_ERROR,
            message=f"Response body is missing '{items_key}' list",
            raw_payload=body,
        )
    return None


def classify_response(
    status_code: int,
    body: Any,
    items_key: str = DEFAULT_ITEMS_KEY,
) -> FetchError | None:
    """Classify a complete HTTP response.

    Args:
        status_code: HTTP status code.
        body: Decoded response body.
        items_key: Key holding the item list.

    Returns:
        FetchError for any failure, None if the response is usable.
    """
    error = classify_status(status_code, body)
    if error is not None:
        return error
    return classify_payload(body, items_key)


def _message_has(message: str, markers: tuple[str, ...]) -> bool:
    lowered = message.lower()
    return any(marker in lowered for marker in markers)


def classify_exception(exc: BaseException) -> FetchError:  # noqa: PLR0911
    """Classify a raised exception.

    Args:
        exc: The exception raised by a fetch operation.

    Returns:
        The classified FetchError. FetchError instances pass through unchanged.
    """
    if isinstance(exc, FetchError):
        return exc

    if isinstance(exc, httpx.HTTPStatusError):
        body: Any
        try:
            body = exc.response.json()
        except ValueError:
            body = exc.response.text
        status_error = classify_status(exc.response.status_code, body)
        if status_error is not None:
            return status_error

    message = str(exc) or type(exc).__name__

    if isinstance(exc, httpx.TimeoutException | TimeoutError) or _message_has(
        message, TIMEOUT_MARKERS
    ):
        return FetchError(
            kind=ErrorKind.TIMEOUT_ERROR,
            message=f"Request timed out: {message}",
        )

    if isinstance(exc, httpx.ConnectError | ConnectionError) or _message_has(
        message, CONNECTION_MARKERS
    ):
        return FetchError(
            kind=ErrorKind.CONNECTION_ERROR,
            message=f"Connection failed: {message}",
        )

    if isinstance(exc, httpx.TransportError) or _message_has(
        message, NETWORK_MARKERS
    ):
        return FetchError(
            kind=ErrorKind.NETWORK_ERROR,
            message=f"Network error: {message}",
        )

    if isinstance(exc, json.JSONDecodeError | UnicodeDecodeError):
        return FetchError(
            kind=ErrorKind.DATA_PARSING_ERROR,
            message=f"Response body could not be decoded: {message}",
        )

    return FetchError(
        kind=ErrorKind.UNKNOWN_ERROR,
        message=f"Unexpected error: {message}",
    )


class ErrorClassifier:
    """Classifies raw failure signals into FetchErrors.

    Thin stateless wrapper around the module-level functions that fixes
    the response item key for a given API.
    """

    def __init__(self, items_key: str = DEFAULT_ITEMS_KEY) -> None:
        """Initialize the classifier.

        Args:
            items_key: Key holding the item list in successful responses.
        """
        self._items_key = items_key

    @property
    def items_key(self) -> str:
        """Get the response item key."""
        return self._items_key

    def classify_response(self, status_code: int, body: Any) -> FetchError | None:
        """Classify an HTTP response; None when it is valid."""
        return classify_response(status_code, body, self._items_key)

    def classify_exception(self, exc: BaseException) -> FetchError:
        """Classify a raised exception."""
        return classify_exception(exc)
