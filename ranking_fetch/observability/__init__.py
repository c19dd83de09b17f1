"""Structured logging setup."""

from ranking_fetch.observability.logging import (
    bind_run_context,
    clear_run_context,
    configure_from_settings,
    configure_logging,
    get_logger,
    redact_credentials,
)


__all__ = [
    "bind_run_context",
    "clear_run_context",
    "configure_from_settings",
    "configure_logging",
    "get_logger",
    "redact_credentials",
]
