"""Error taxonomy for fetch operations."""

from enum import Enum
from typing import Any


class ErrorKind(str, Enum):
    """Classification of fetch failures.

    - NETWORK_ERROR: Generic transport failure
    - CONNECTION_ERROR: Could not establish a connection
    - TIMEOUT_ERROR: Request timed out
    - RATE_LIMIT_ERROR: 429 Too Many Requests
    - AUTHENTICATION_ERROR: 401/403 from the API
    - PARAMETER_ERROR: Rejected query parameter
    - INVALID_PAGE_ERROR: Rejected page number
    - INVALID_FILTER_ERROR: Rejected genre/demographic filter
    - RESPONSE_FORMAT_ERROR: Body is not the expected structure
    - DATA_PARSING_ERROR: Body could not be decoded
    - SYSTEM_ERROR: Upstream 5xx
    - UNKNOWN_HTTP_ERROR: Other non-2xx status
    - UNKNOWN_ERROR: Unclassified failure
    """

    NETWORK_ERROR = "NETWORK_ERROR"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    TIMEOUT_ERROR = "TIMEOUT_ERROR"
    RATE_LIMIT_ERROR = "RATE_LIMIT_ERROR"
    AUTHENTICATION_ERROR = "AUTHENTICATION_ERROR"
    PARAMETER_ERROR = "PARAMETER_ERROR"
    INVALID_PAGE_ERROR = "INVALID_PAGE_ERROR"
    INVALID_FILTER_ERROR = "INVALID_FILTER_ERROR"
    RESPONSE_FORMAT_ERROR = "RESPONSE_FORMAT_ERROR"
    DATA_PARSING_ERROR = "DATA_PARSING_ERROR"
    SYSTEM_ERROR = "SYSTEM_ERROR"
    UNKNOWN_HTTP_ERROR = "UNKNOWN_HTTP_ERROR"
    UNKNOWN_ERROR = "UNKNOWN_ERROR"


RETRYABLE_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.NETWORK_ERROR,
        ErrorKind.CONNECTION_ERROR,
        ErrorKind.TIMEOUT_ERROR,
        ErrorKind.RATE_LIMIT_ERROR,
        ErrorKind.SYSTEM_ERROR,
    }
)

PARAMETER_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.PARAMETER_ERROR,
        ErrorKind.INVALID_PAGE_ERROR,
        ErrorKind.INVALID_FILTER_ERROR,
    }
)

# Kinds that halt a batch when stop_on_fatal_error is enabled
FATAL_KINDS: frozenset[ErrorKind] = frozenset(
    {
        ErrorKind.AUTHENTICATION_ERROR,
        ErrorKind.RESPONSE_FORMAT_ERROR,
        ErrorKind.DATA_PARSING_ERROR,
        *PARAMETER_KINDS,
    }
)


def is_retryable_kind(kind: ErrorKind) -> bool:
    """Return the default retryability of an error kind."""
    return kind in RETRYABLE_KINDS


def is_fatal_kind(kind: ErrorKind) -> bool:
    """Return whether an error kind aborts a batch."""
    return kind in FATAL_KINDS


class FetchError(Exception):
    """Classified failure of a fetch operation.

    Carries the error kind plus the raw signal it was derived from. All
    attributes are read-only once constructed.
    """

    def __init__(  # noqa: PLR0913
        self,
        kind: ErrorKind,
        message: str,
        status_code: int | None = None,
        retryable: bool | None = None,
        raw_payload: Any = None,
        cause: "FetchError | None" = None,
    ) -> None:
        """Initialize the fetch error.

        Args:
            kind: Classification of the error.
            message: Human-readable error message.
            status_code: HTTP status code if the failure came from a response.
            retryable: Override for the kind's default retryability.
            raw_payload: Response body or other raw signal, for diagnostics.
            cause: Underlying classified error, if this one wraps another.
        """
        super().__init__(message)
        self._kind = kind
        self._message = message
        self._status_code = status_code
        self._retryable = is_retryable_kind(kind) if retryable is None else retryable
        self._raw_payload = raw_payload
        self._cause = cause

    @property
    def kind(self) -> ErrorKind:
        """Get the error kind."""
        return self._kind

    @property
    def message(self) -> str:
        """Get the error message."""
        return self._message

    @property
    def status_code(self) -> int | None:
        """Get the HTTP status code, if any."""
        return self._status_code

    @property
    def retryable(self) -> bool:
        """Check whether the operation may be retried."""
        return self._retryable

    @property
    def raw_payload(self) -> Any:
        """Get the raw payload the error was classified from."""
        return self._raw_payload

    @property
    def cause(self) -> "FetchError | None":
        """Get the wrapped error, if any."""
        return self._cause

    @property
    def fatal(self) -> bool:
        """Check whether this error aborts a batch."""
        return is_fatal_kind(self._kind)

    def to_dict(self) -> dict[str, str | int | bool | None]:
        """Convert error to dictionary for logging/serialization.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "kind": self._kind.value,
            "message": self._message,
            "status_code": self._status_code,
            "retryable": self._retryable,
            "cause_kind": self._cause.kind.value if self._cause else None,
        }

    def __repr__(self) -> str:
        return (
            f"FetchError(kind={self._kind.value}, status_code={self._status_code}, "
            f"retryable={self._retryable}, message={self._message!r})"
        )
