"""Data models for retry behavior."""

import random
from typing import Annotated

from pydantic import BaseModel, ConfigDict, Field, model_validator

from ranking_fetch.retry.constants import (
    DEFAULT_BACKOFF_FACTOR,
    DEFAULT_INITIAL_DELAY_MS,
    DEFAULT_MAX_DELAY_MS,
    DEFAULT_MAX_RETRIES,
    JITTER_FRACTION,
)


class RetryPolicy(BaseModel):
    """Configuration for retry behavior.

    Controls how many times to retry and the backoff strategy.
    Uses exponential backoff:
    delay = min(initial_delay_ms * (backoff_factor ^ attempt), max_delay_ms)
    """

    model_config = ConfigDict(frozen=True, extra="forbid")

    max_retries: Annotated[int, Field(ge=0, le=20)] = DEFAULT_MAX_RETRIES
    initial_delay_ms: Annotated[float, Field(ge=0, le=600000)] = (
        DEFAULT_INITIAL_DELAY_MS
    )
    max_delay_ms: Annotated[float, Field(ge=0, le=3600000)] = DEFAULT_MAX_DELAY_MS
    backoff_factor: Annotated[float, Field(ge=1.0, le=10.0)] = DEFAULT_BACKOFF_FACTOR
    jitter: bool = True

    @model_validator(mode="after")
    def validate_delay_bounds(self) -> "RetryPolicy":
        """Ensure the delay cap is not below the initial delay."""
        if self.max_delay_ms < self.initial_delay_ms:
            msg = (
                f"max_delay_ms ({self.max_delay_ms}) must be >= "
                f"initial_delay_ms ({self.initial_delay_ms})"
            )
            raise ValueError(msg)
        return self

    @property
    def max_attempts(self) -> int:
        """Get the total number of attempts allowed."""
        return self.max_retries + 1

    def base_delay_ms(self, attempt: int) -> float:
        """Calculate the capped backoff delay without jitter.

        Args:
            attempt: Zero-based attempt index that just failed.

        Returns:
            Delay in milliseconds.
        """
        # float pow raises OverflowError for very large attempt counts
        try:
            delay = self.initial_delay_ms * (self.backoff_factor**attempt)
        except OverflowError:
            return self.max_delay_ms
        return min(delay, self.max_delay_ms)

    def get_delay_ms(self, attempt: int, rng: random.Random | None = None) -> float:
        """Calculate delay before the next retry attempt.

        Args:
            attempt: Zero-based attempt index that just failed.
            rng: Random source for jitter (defaults to the module RNG).

        Returns:
            Delay in milliseconds, within +/-10% of the base delay when
            jitter is enabled.
        """
        delay = self.base_delay_ms(attempt)
        if not self.jitter:
            return delay

        uniform = rng.uniform if rng is not None else random.uniform
        return delay * (1.0 + uniform(-JITTER_FRACTION, JITTER_FRACTION))
