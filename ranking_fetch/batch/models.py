"""Data models for batch aggregation."""

from dataclasses import dataclass
from enum import Enum
from typing import Annotated, Any

from pydantic import BaseModel, ConfigDict, Field

from ranking_fetch.errors.models import FetchError


DEFAULT_MIN_SUCCESS_RATE = 0.8
DEFAULT_MAX_CONSECUTIVE_ERRORS = 3


class BatchOptions(BaseModel):
    """Partial-success and early-abort policy for a batch."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    min_success_rate: Annotated[float, Field(ge=0.0, le=1.0)] = (
        DEFAULT_MIN_SUCCESS_RATE
    )
    max_consecutive_errors: Annotated[int, Field(ge=1)] = (
        DEFAULT_MAX_CONSECUTIVE_ERRORS
    )
    stop_on_fatal_error: bool = True


class AbortReason(str, Enum):
    """Why a batch stopped before running every operation.

    - FATAL_ERROR: A fatal error kind with stop_on_fatal_error enabled
    - CONSECUTIVE_ERRORS: max_consecutive_errors failures in a row
    """

    FATAL_ERROR = "FATAL_ERROR"
    CONSECUTIVE_ERRORS = "CONSECUTIVE_ERRORS"


def compute_success_rate(total_requested: int, error_count: int) -> float:
    """Calculate the fraction of requested operations that succeeded.

    Args:
        total_requested: Operations attempted.
        error_count: Operations that failed.

    Returns:
        Success rate in [0, 1]; 1.0 when nothing was requested.
    """
    if total_requested <= 0:
        return 1.0
    return (total_requested - error_count) / total_requested


@dataclass(frozen=True)
class BatchResult:
    """Aggregated outcome of a batch of page fetches.

    Items from successful operations are kept in operation order.
    """

    items: list[Any]
    errors: list[FetchError]
    total_requested: int
    success_rate: float
    success: bool
    aborted: bool = False
    abort_reason: AbortReason | None = None
    cancelled: bool = False

    @classmethod
    def build(  # noqa: PLR0913
        cls,
        items: list[Any],
        errors: list[FetchError],
        total_requested: int,
        min_success_rate: float,
        abort_reason: AbortReason | None = None,
        cancelled: bool = False,
    ) -> "BatchResult":
        """Create a result, deriving success_rate and success.

        Args:
            items: Collected items in operation order.
            errors: Errors of failed operations in operation order.
            total_requested: Operations attempted.
            min_success_rate: Threshold for a successful batch.
            abort_reason: Set when the batch stopped early.
            cancelled: Whether cancellation cut the batch short.

        Returns:
            BatchResult instance.
        """
        success_rate = compute_success_rate(total_requested, len(errors))
        aborted = abort_reason is not None
        return cls(
            items=items,
            errors=errors,
            total_requested=total_requested,
            success_rate=success_rate,
            success=success_rate >= min_success_rate and not aborted and not cancelled,
            aborted=aborted,
            abort_reason=abort_reason,
            cancelled=cancelled,
        )

    @property
    def error_count(self) -> int:
        """Get the number of failed operations."""
        return len(self.errors)

    def to_dict(self) -> dict[str, object]:
        """Summarize the result for logging/serialization.

        Returns:
            Dictionary without the item payloads.
        """
        return {
            "item_count": len(self.items),
            "total_requested": self.total_requested,
            "error_count": len(self.errors),
            "success_rate": round(self.success_rate, 4),
            "success": self.success,
            "aborted": self.aborted,
            "abort_reason": self.abort_reason.value if self.abort_reason else None,
            "cancelled": self.cancelled,
            "errors": [error.to_dict() for error in self.errors],
        }
