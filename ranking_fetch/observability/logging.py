"""Structured logging for fetch runs."""

import logging
import sys
from collections.abc import Mapping, MutableMapping
from typing import TYPE_CHECKING, Any, TextIO

import structlog

from ranking_fetch.source.redact import REDACTED_VALUE, is_sensitive_param


if TYPE_CHECKING:
    from ranking_fetch.settings.app import AppSettings

# Loggers of libraries that log every HTTP request at INFO
NOISY_LOGGERS = ("httpx", "httpcore")


def redact_credentials(
    _logger: Any,
    _method_name: str,
    event_dict: MutableMapping[str, Any],
) -> MutableMapping[str, Any]:
    """Structlog processor masking credential-named fields.

    Top-level keys and keys of mapping values (such as ``params``) are
    checked against the sensitive parameter names.
    """
    for key, value in list(event_dict.items()):
        if is_sensitive_param(key):
            event_dict[key] = REDACTED_VALUE
        elif isinstance(value, Mapping):
            event_dict[key] = {
                k: REDACTED_VALUE if is_sensitive_param(str(k)) else v
                for k, v in value.items()
            }
    return event_dict


def configure_logging(
    level: int = logging.INFO,
    output: TextIO = sys.stderr,
    json_format: bool = True,
) -> None:
    """Configure structlog for fetch runs.

    Args:
        level: Minimum level to emit.
        output: Output stream (default: stderr).
        json_format: Render JSON lines instead of console output.
    """
    processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso"),
        redact_credentials,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
        structlog.processors.JSONRenderer(sort_keys=True)
        if json_format
        else structlog.dev.ConsoleRenderer(colors=False),
    ]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(level),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(file=output),
        cache_logger_on_first_use=False,
    )

    logging.basicConfig(format="%(message)s", stream=output, level=level)
    # Request URLs carry the application id
    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(max(level, logging.WARNING))


def configure_from_settings(
    settings: "AppSettings",
    output: TextIO = sys.stderr,
) -> None:
    """Configure logging from RANKING_LOG_LEVEL and RANKING_LOG_JSON."""
    configure_logging(
        level=settings.log_level_value,
        output=output,
        json_format=settings.log_json,
    )


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    """Get a bound logger instance."""
    logger: structlog.stdlib.BoundLogger = structlog.get_logger(name)
    return logger


def bind_run_context(run_id: str, **context: Any) -> None:
    """Bind a run id (and any extra fields) to every later log line.

    Args:
        run_id: Unique run identifier.
        **context: Extra fields such as the profile name.
    """
    structlog.contextvars.bind_contextvars(run_id=run_id, **context)


def clear_run_context() -> None:
    """Drop all bound run context."""
    structlog.contextvars.clear_contextvars()
