"""Discovery cycle state machine."""

from enum import Enum, auto
from typing import ClassVar

import structlog


logger = structlog.get_logger()


class CycleState(Enum):
    """Discovery cycle lifecycle states.

    State transitions:
        CYCLE_PENDING -> CYCLE_FETCHED: Feed body received
        CYCLE_FETCHED -> CYCLE_PARSED: Records parsed
        CYCLE_PARSED -> CYCLE_RANKED: Filter, score and rank complete
        CYCLE_PENDING/FETCHED/PARSED -> CYCLE_FAILED: Failure at any stage
    """

    CYCLE_PENDING = auto()
    CYCLE_FETCHED = auto()
    CYCLE_PARSED = auto()
    CYCLE_RANKED = auto()
    CYCLE_FAILED = auto()


class CycleStateError(Exception):
    """Raised when an invalid cycle state transition is attempted."""

    def __init__(self, from_state: CycleState, to_state: CycleState) -> None:
        """Initialize the error.

        Args:
            from_state: The current state.
            to_state: The attempted target state.
        """
        self.from_state = from_state
        self.to_state = to_state
        super().__init__(
            f"Invalid cycle state transition: {from_state.name} -> {to_state.name}"
        )


class CycleStateMachine:
    """State machine for one fetch-and-rank cycle."""

    VALID_TRANSITIONS: ClassVar[dict[CycleState, set[CycleState]]] = {
        CycleState.CYCLE_PENDING: {CycleState.CYCLE_FETCHED, CycleState.CYCLE_FAILED},
        CycleState.CYCLE_FETCHED: {CycleState.CYCLE_PARSED, CycleState.CYCLE_FAILED},
        CycleState.CYCLE_PARSED: {CycleState.CYCLE_RANKED, CycleState.CYCLE_FAILED},
        CycleState.CYCLE_RANKED: set(),
        CycleState.CYCLE_FAILED: set(),
    }

    def __init__(self, cycle_id: str) -> None:
        """Initialize the state machine in CYCLE_PENDING state.

        Args:
            cycle_id: Unique cycle identifier for logging.
        """
        self._cycle_id = cycle_id
        self._state = CycleState.CYCLE_PENDING
        self._log = logger.bind(cycle_id=cycle_id, component="pipeline")

    @property
    def state(self) -> CycleState:
        """Get the current state."""
        return self._state

    def can_transition(self, to_state: CycleState) -> bool:
        """Check if a transition to the given state is valid."""
        return to_state in self.VALID_TRANSITIONS.get(self._state, set())

    def transition(self, to_state: CycleState) -> None:
        """Transition to a new state.

        Args:
            to_state: The target state.

        Raises:
            CycleStateError: If the transition is invalid.
        """
        if not self.can_transition(to_state):
            self._log.error(
                "invariant_violation",
                error_type="illegal_state_transition",
                from_state=self._state.name,
                to_state=to_state.name,
            )
            raise CycleStateError(self._state, to_state)

        old_state = self._state
        self._state = to_state
        self._log.debug(
            "cycle_state_transition",
            from_state=old_state.name,
            to_state=to_state.name,
        )

    def is_terminal(self) -> bool:
        """Check if the cycle has finished, successfully or not."""
        return self._state in (CycleState.CYCLE_RANKED, CycleState.CYCLE_FAILED)
