"""Linear publish state machine.

Enforces:
- Only forward transitions from the VALID_TRANSITIONS table
- FAILED reachable from any non-terminal state, and absorbing
- Every transition kept in order for the run narrative
"""

from __future__ import annotations

import logging

from manifold_publish.models.stages import (
    VALID_TRANSITIONS,
    PublishState,
    StageTransition,
)

logger = logging.getLogger(__name__)


class InvalidTransitionError(RuntimeError):
    """Raised when a requested state transition is not valid."""


class PublishStateMachine:
    """Tracks one publish run from START to DONE or FAILED."""

    def __init__(self) -> None:
        self._state = PublishState.START
        self._history: list[StageTransition] = []
        self._failed_stage: str | None = None

    @property
    def state(self) -> PublishState:
        return self._state

    @property
    def history(self) -> list[StageTransition]:
        return list(self._history)

    @property
    def failed_stage(self) -> str | None:
        return self._failed_stage

    @property
    def is_terminal(self) -> bool:
        return not VALID_TRANSITIONS[self._state]

    def transition(
        self, target_state: PublishState, stage_id: str | None = None
    ) -> StageTransition:
        """Move to *target_state*, recording the step."""
        allowed = VALID_TRANSITIONS.get(self._state, set())
        if target_state not in allowed:
            raise InvalidTransitionError(
                f"Cannot transition from {self._state.value} to {target_state.value}. "
                f"Allowed: {sorted(s.value for s in allowed)}"
            )

        record = StageTransition(
            from_state=self._state, to_state=target_state, stage_id=stage_id
        )
        self._history.append(record)
        logger.debug("%s -> %s (%s)", self._state.value, target_state.value, stage_id)
        self._state = target_state
        return record

    def fail(self, stage_id: str) -> StageTransition:
        """Enter the absorbing FAILED state, remembering which stage failed."""
        record = self.transition(PublishState.FAILED, stage_id)
        self._failed_stage = stage_id
        return record
