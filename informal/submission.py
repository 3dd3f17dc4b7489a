"""Submit-attempt state machine for the informal form-state engine.

Each ``Form.submit()`` call is tracked by a ``SubmitAttempt`` that enforces
the attempt's phase transitions:

    checking -> rejected_invalid
    checking -> submitting -> succeeded
                           -> failed

Usage:
    >>> attempt = SubmitAttempt()
    >>> attempt.phase
    <SubmitPhase.CHECKING: 'checking'>
    >>> attempt.transition_to(SubmitPhase.SUBMITTING)
    >>> attempt.can_transition_to(SubmitPhase.REJECTED_INVALID)
    False
"""

import uuid
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set

from informal.errors import InvalidPhaseTransitionError
from informal.types import SubmitPhase


VALID_TRANSITIONS: Dict[SubmitPhase, Set[SubmitPhase]] = {
    SubmitPhase.CHECKING: {
        SubmitPhase.SUBMITTING,
        SubmitPhase.REJECTED_INVALID,
    },
    SubmitPhase.SUBMITTING: {
        SubmitPhase.SUCCEEDED,
        SubmitPhase.FAILED,
    },
    # Terminal phases
    SubmitPhase.SUCCEEDED: set(),
    SubmitPhase.FAILED: set(),
    SubmitPhase.REJECTED_INVALID: set(),
}


def _new_attempt_id() -> str:
    return f"att_{uuid.uuid4().hex[:16]}"


@dataclass
class SubmitAttempt:
    """One submission attempt and its outcome.

    Attributes:
        attempt_id: Unique identifier for this attempt
        phase: Current phase
        result: Value the submit function produced, once succeeded
        error: Exception the submit function raised, once failed
    """

    attempt_id: str = field(default_factory=_new_attempt_id)
    phase: SubmitPhase = SubmitPhase.CHECKING
    result: Optional[Any] = None
    error: Optional[BaseException] = None
    _history: List[SubmitPhase] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self):
        self._history.append(self.phase)

    def can_transition_to(self, target_phase: SubmitPhase) -> bool:
        return target_phase in VALID_TRANSITIONS.get(self.phase, set())

    def transition_to(self, target_phase: SubmitPhase) -> None:
        """Move to ``target_phase``.

        Raises:
            InvalidPhaseTransitionError: If the transition is not allowed
        """
        if not self.can_transition_to(target_phase):
            raise InvalidPhaseTransitionError(
                current_phase=self.phase,
                target_phase=target_phase,
                message=(
                    f"Invalid submit phase transition: cannot transition from "
                    f"'{self.phase.value}' to '{target_phase.value}'. "
                    f"Valid transitions from '{self.phase.value}' are: "
                    f"{', '.join(sorted(p.value for p in VALID_TRANSITIONS[self.phase]))}"
                    if VALID_TRANSITIONS[self.phase]
                    else f"Invalid submit phase transition: '{self.phase.value}' is a "
                    f"terminal phase, no transitions are allowed."
                ),
            )
        self.phase = target_phase
        self._history.append(target_phase)

    def succeed(self, result: Any) -> None:
        self.transition_to(SubmitPhase.SUCCEEDED)
        self.result = result

    def fail(self, error: BaseException) -> None:
        self.transition_to(SubmitPhase.FAILED)
        self.error = error

    def is_terminal(self) -> bool:
        return len(VALID_TRANSITIONS[self.phase]) == 0

    @property
    def history(self) -> List[SubmitPhase]:
        """Phases this attempt passed through, in order."""
        return list(self._history)

    def to_dict(self) -> Dict[str, Any]:
        """Serialize the attempt to a dictionary."""
        return {
            "attemptId": self.attempt_id,
            "phase": self.phase.value,
            "history": [p.value for p in self._history],
        }


__all__ = [
    "SubmitAttempt",
    "VALID_TRANSITIONS",
]
