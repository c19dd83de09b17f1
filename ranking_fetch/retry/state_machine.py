"""State machine for a single retried operation."""

from enum import Enum

import structlog


logger = structlog.get_logger()


class RetryState(str, Enum):
    """State of an operation under retry.

    - IDLE: Not yet started
    - ATTEMPTING: Operation call in progress
    - WAITING_BACKOFF: Suspended before the next attempt
    - SUCCEEDED: Operation returned a result
    - FAILED: Retries exhausted or error not retryable
    """

    IDLE = "IDLE"
    ATTEMPTING = "ATTEMPTING"
    WAITING_BACKOFF = "WAITING_BACKOFF"
    SUCCEEDED = "SUCCEEDED"
    FAILED = "FAILED"


_VALID_TRANSITIONS: dict[RetryState, set[RetryState]] = {
    RetryState.IDLE: {RetryState.ATTEMPTING, RetryState.FAILED},
    RetryState.ATTEMPTING: {
        RetryState.SUCCEEDED,
        RetryState.WAITING_BACKOFF,
        RetryState.FAILED,
    },
    # Cancellation during backoff fails without another attempt
    RetryState.WAITING_BACKOFF: {RetryState.ATTEMPTING, RetryState.FAILED},
    RetryState.SUCCEEDED: set(),
    RetryState.FAILED: set(),
}


class RetryStateTransitionError(Exception):
    """Raised when an illegal state transition is attempted."""

    def __init__(self, from_state: RetryState, to_state: RetryState) -> None:
        """Initialize the transition error.

        Args:
            from_state: Current state.
            to_state: Attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Illegal retry state transition: {from_state.value} -> {to_state.value}"
        )


class RetryStateMachine:
    """Tracks the lifecycle of one retried operation."""

    def __init__(self, label: str | None = None) -> None:
        """Initialize the state machine.

        Args:
            label: Operation label for logging.
        """
        self._state = RetryState.IDLE
        self._log = logger.bind(component="retry", operation=label)

    @property
    def state(self) -> RetryState:
        """Get the current state."""
        return self._state

    @property
    def is_terminal(self) -> bool:
        """Check if current state is terminal."""
        return self._state in (RetryState.SUCCEEDED, RetryState.FAILED)

    def can_transition_to(self, target: RetryState) -> bool:
        """Check if a transition to the target state is valid."""
        return target in _VALID_TRANSITIONS.get(self._state, set())

    def transition_to(self, target: RetryState) -> None:
        """Transition to a new state.

        Args:
            target: The target state.

        Raises:
            RetryStateTransitionError: If the transition is invalid.
        """
        if not self.can_transition_to(target):
            self._log.error(
                "illegal_state_transition",
                from_state=self._state.value,
                to_state=target.value,
            )
            raise RetryStateTransitionError(self._state, target)

        old_state = self._state
        self._state = target
        self._log.debug(
            "state_transition",
            from_state=old_state.value,
            to_state=target.value,
        )

    def to_attempting(self) -> None:
        """Transition to ATTEMPTING state."""
        self.transition_to(RetryState.ATTEMPTING)

    def to_waiting(self) -> None:
        """Transition to WAITING_BACKOFF state."""
        self.transition_to(RetryState.WAITING_BACKOFF)

    def to_succeeded(self) -> None:
        """Transition to SUCCEEDED state."""
        self.transition_to(RetryState.SUCCEEDED)

    def to_failed(self) -> None:
        """Transition to FAILED state."""
        self.transition_to(RetryState.FAILED)
