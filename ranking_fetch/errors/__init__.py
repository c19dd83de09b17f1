"""Error taxonomy and classification for fetch operations."""

from ranking_fetch.errors.classifier import (
    ErrorClassifier,
    classify_exception,
    classify_payload,
    classify_response,
    classify_status,
)
from ranking_fetch.errors.models import (
    FATAL_KINDS,
    PARAMETER_KINDS,
    RETRYABLE_KINDS,
    ErrorKind,
    FetchError,
    is_fatal_kind,
    is_retryable_kind,
)


__all__ = [
    # Classifier
    "ErrorClassifier",
    "classify_exception",
    "classify_payload",
    "classify_response",
    "classify_status",
    # Models
    "ErrorKind",
    "FetchError",
    "FATAL_KINDS",
    "PARAMETER_KINDS",
    "RETRYABLE_KINDS",
    "is_fatal_kind",
    "is_retryable_kind",
]
