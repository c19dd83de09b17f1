"""Query parameter redaction utilities for logging."""

from collections.abc import Mapping
from typing import Any


# Query parameters that must never appear in logs
SENSITIVE_PARAMS = frozenset(
    {
        "applicationid",
        "affiliateid",
        "access_key",
        "apikey",
        "api_key",
        "token",
    }
)

REDACTED_VALUE = "[REDACTED]"


def redact_params(params: Mapping[str, Any]) -> dict[str, Any]:
    """Redact credential-bearing query parameters for logging.

    Args:
        params: Original query parameters.

    Returns:
        New dictionary with sensitive values redacted.
    """
    return {
        key: REDACTED_VALUE if is_sensitive_param(key) else value
        for key, value in params.items()
    }


def is_sensitive_param(name: str) -> bool:
    """Check if a query parameter name is sensitive.

    Args:
        name: The parameter name to check.

    Returns:
        True if the parameter should be redacted.
    """
    return name.lower() in SENSITIVE_PARAMS
