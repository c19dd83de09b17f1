"""Unit tests for error classification."""

import json

import httpx
import pytest

from ranking_fetch.errors.classifier import (
    ErrorClassifier,
    classify_exception,
    classify_payload,
    classify_response,
    classify_status,
)
from ranking_fetch.errors.models import ErrorKind, FetchError


def wrong_parameter(description: str) -> dict[str, str]:
    return {"error": "wrong_parameter", "error_description": description}


class TestClassifyStatus:
    """Tests for status code classification."""

    def test_success_returns_none(self) -> None:
        """2xx statuses are not errors."""
        assert classify_status(200) is None
        assert classify_status(204) is None

    @pytest.mark.parametrize("status", [401, 403])
    def test_auth_errors(self, status: int) -> None:
        """401 and 403 are non-retryable authentication errors."""
        error = classify_status(status)

        assert error is not None
        assert error.kind == ErrorKind.AUTHENTICATION_ERROR
        assert error.retryable is False
        assert error.status_code == status

    def test_rate_limited(self) -> None:
        """429 is a retryable rate limit error."""
        error = classify_status(429)

        assert error is not None
        assert error.kind == ErrorKind.RATE_LIMIT_ERROR
        assert error.retryable is True

    def test_wrong_parameter_page(self) -> None:
        """A rejected page number maps to INVALID_PAGE_ERROR."""
        error = classify_status(400, wrong_parameter("page must be a number"))

        assert error is not None
        assert error.kind == ErrorKind.INVALID_PAGE_ERROR
        assert error.retryable is False
        assert error.fatal is True

    @pytest.mark.parametrize(
        "description",
        ["genreId is not valid", "age must be one of 10,20,30", "sex is invalid"],
    )
    def test_wrong_parameter_filter(self, description: str) -> None:
        """Rejected genre/demographic filters map to INVALID_FILTER_ERROR."""
        error = classify_status(400, wrong_parameter(description))

        assert error is not None
        assert error.kind == ErrorKind.INVALID_FILTER_ERROR

    def test_wrong_parameter_other_field(self) -> None:
        """Other rejected parameters map to PARAMETER_ERROR."""
        error = classify_status(400, wrong_parameter("applicationId is required"))

        assert error is not None
        assert error.kind == ErrorKind.PARAMETER_ERROR
        assert error.raw_payload == wrong_parameter("applicationId is required")

    def test_bad_request_without_structured_body(self) -> None:
        """400 without a wrong_parameter body falls through to UNKNOWN_HTTP_ERROR."""
        error = classify_status(400, "Bad Request")

        assert error is not None
        assert error.kind == ErrorKind.UNKNOWN_HTTP_ERROR
        assert error.retryable is False

    @pytest.mark.parametrize("status", [500, 502, 503, 504])
    def test_server_errors(self, status: int) -> None:
        """5xx statuses are retryable system errors."""
        error = classify_status(status)

        assert error is not None
        assert error.kind == ErrorKind.SYSTEM_ERROR
        assert error.retryable is True

    @pytest.mark.parametrize("status", [301, 404, 405, 410])
    def test_other_statuses(self, status: int) -> None:
        """Other non-2xx statuses are UNKNOWN_HTTP_ERROR."""
        error = classify_status(status)

        assert error is not None
        assert error.kind == ErrorKind.UNKNOWN_HTTP_ERROR
        assert error.fatal is False


class TestClassifyPayload:
    """Tests for response body validation."""

    def test_valid_body(self) -> None:
        """A mapping with an item list is valid."""
        assert classify_payload({"Items": []}) is None

    def test_missing_items(self) -> None:
        """A body without the item list is a format error."""
        error = classify_payload({"title": "ranking"})

        assert error is not None
        assert error.kind == ErrorKind.RESPONSE_FORMAT_ERROR
        assert error.retryable is False

    def test_items_not_a_list(self) -> None:
        """A non-list item collection is a format error."""
        error = classify_payload({"Items": "oops"})

        assert error is not None
        assert error.kind == ErrorKind.RESPONSE_FORMAT_ERROR

    def test_not_an_object(self) -> None:
        """A non-mapping body is a format error."""
        error = classify_payload(["a", "b"])

        assert error is not None
        assert error.kind == ErrorKind.RESPONSE_FORMAT_ERROR

    def test_custom_items_key(self) -> None:
        """The item key is configurable."""
        assert classify_payload({"items": []}, items_key="items") is None


class TestClassifyResponse:
    """Tests for combined status and body classification."""

    def test_valid_response(self) -> None:
        """A 200 with an item list is valid."""
        assert classify_response(200, {"Items": [{"Item": {}}]}) is None

    def test_status_takes_precedence(self) -> None:
        """A failing status wins over body validation."""
        error = classify_response(503, {"title": "no items"})

        assert error is not None
        assert error.kind == ErrorKind.SYSTEM_ERROR

    def test_malformed_success_body(self) -> None:
        """A 200 without items is a format error."""
        error = classify_response(200, {"error": "none"})

        assert error is not None
        assert error.kind == ErrorKind.RESPONSE_FORMAT_ERROR


class TestClassifyException:
    """Tests for exception classification."""

    def test_fetch_error_passes_through(self) -> None:
        """An already-classified error is returned unchanged."""
        original = FetchError(kind=ErrorKind.SYSTEM_ERROR, message="boom")

        assert classify_exception(original) is original

    def test_httpx_timeout(self) -> None:
        """httpx timeouts are retryable TIMEOUT_ERRORs."""
        error = classify_exception(httpx.ReadTimeout("read timed out"))

        assert error.kind == ErrorKind.TIMEOUT_ERROR
        assert error.retryable is True

    def test_builtin_timeout(self) -> None:
        """Builtin TimeoutError is a TIMEOUT_ERROR."""
        assert classify_exception(TimeoutError()).kind == ErrorKind.TIMEOUT_ERROR

    def test_timeout_message(self) -> None:
        """A timeout marker in the message is enough."""
        error = classify_exception(RuntimeError("ETIMEDOUT while reading"))

        assert error.kind == ErrorKind.TIMEOUT_ERROR

    def test_httpx_connect_error(self) -> None:
        """httpx connect errors are CONNECTION_ERRORs."""
        error = classify_exception(httpx.ConnectError("[Errno 111] refused"))

        assert error.kind == ErrorKind.CONNECTION_ERROR
        assert error.retryable is True

    def test_connection_message(self) -> None:
        """Connection markers in the message map to CONNECTION_ERROR."""
        error = classify_exception(RuntimeError("read ECONNRESET"))

        assert error.kind == ErrorKind.CONNECTION_ERROR

    def test_builtin_connection_error(self) -> None:
        """Builtin ConnectionError subclasses are CONNECTION_ERRORs."""
        error = classify_exception(ConnectionResetError())

        assert error.kind == ErrorKind.CONNECTION_ERROR

    def test_httpx_transport_error(self) -> None:
        """Other httpx transport errors are NETWORK_ERRORs."""
        error = classify_exception(httpx.RemoteProtocolError("peer closed"))

        assert error.kind == ErrorKind.NETWORK_ERROR
        assert error.retryable is True

    def test_network_message(self) -> None:
        """Network markers in the message map to NETWORK_ERROR."""
        error = classify_exception(RuntimeError("network is unreachable"))

        assert error.kind == ErrorKind.NETWORK_ERROR

    def test_http_status_error(self) -> None:
        """httpx.HTTPStatusError is classified from its response."""
        request = httpx.Request("GET", "https://example.com/ranking")
        response = httpx.Response(429, request=request, json={"error": "too_many"})
        exc = httpx.HTTPStatusError("429", request=request, response=response)

        error = classify_exception(exc)

        assert error.kind == ErrorKind.RATE_LIMIT_ERROR
        assert error.status_code == 429

    def test_json_decode_error(self) -> None:
        """Undecodable bodies are DATA_PARSING_ERRORs."""
        try:
            json.loads("<html>")
        except json.JSONDecodeError as e:
            error = classify_exception(e)

        assert error.kind == ErrorKind.DATA_PARSING_ERROR
        assert error.retryable is False

    def test_unknown(self) -> None:
        """Anything else is a non-retryable UNKNOWN_ERROR."""
        error = classify_exception(KeyError("price"))

        assert error.kind == ErrorKind.UNKNOWN_ERROR
        assert error.retryable is False
        assert error.fatal is False


class TestClassificationIdempotence:
    """Classifying the same signal twice yields the same outcome."""

    @pytest.mark.parametrize(
        ("status", "body"),
        [
            (401, None),
            (429, None),
            (400, wrong_parameter("page out of range")),
            (502, "Bad Gateway"),
            (404, None),
            (200, {"nothing": True}),
        ],
    )
    def test_response_idempotent(self, status: int, body: object) -> None:
        """Response classification is deterministic."""
        first = classify_response(status, body)
        second = classify_response(status, body)

        assert first is not None
        assert second is not None
        assert (first.kind, first.retryable) == (second.kind, second.retryable)

    def test_exception_idempotent(self) -> None:
        """Exception classification is deterministic."""
        exc = httpx.ConnectTimeout("connect timed out")

        first = classify_exception(exc)
        second = classify_exception(exc)

        assert (first.kind, first.retryable) == (second.kind, second.retryable)


class TestErrorClassifier:
    """Tests for the ErrorClassifier wrapper."""

    def test_uses_configured_items_key(self) -> None:
        """The classifier validates against its own item key."""
        classifier = ErrorClassifier(items_key="products")

        assert classifier.items_key == "products"
        assert classifier.classify_response(200, {"products": []}) is None
        error = classifier.classify_response(200, {"Items": []})
        assert error is not None
        assert error.kind == ErrorKind.RESPONSE_FORMAT_ERROR

    def test_classify_exception(self) -> None:
        """Exceptions are delegated to classify_exception."""
        classifier = ErrorClassifier()

        error = classifier.classify_exception(httpx.ConnectError("refused"))

        assert error.kind == ErrorKind.CONNECTION_ERROR
