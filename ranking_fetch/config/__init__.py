"""Fetch profile configuration."""

from ranking_fetch.config.loader import ConfigLoader, ConfigValidationError
from ranking_fetch.config.schemas import FetchProfile


__all__ = [
    "ConfigLoader",
    "ConfigValidationError",
    "FetchProfile",
]
