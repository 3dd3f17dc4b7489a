"""Contract-violation errors for the informal form-state engine.

Only programmer errors are raised by the engine. Validation failures are
ordinary state (``FieldState.messages``) and submission failures are captured
by ``Form.submit()``, so neither appears here.
"""

from typing import List, Sequence

from informal.types import SubmitPhase


class ContractViolation(Exception):
    """Base class for misuse of the engine by its caller."""


class InvalidFieldSpecError(ContractViolation, ValueError):
    """Raised when a field registration payload has the wrong shape.

    Attributes:
        problems: One human-readable line per offending part of the payload

    Examples:
        >>> err = InvalidFieldSpecError(["name: '' is too short"])
        >>> err.problems
        ["name: '' is too short"]
    """

    def __init__(self, problems: Sequence[str]):
        self.problems: List[str] = list(problems)
        super().__init__("Invalid field spec: " + "; ".join(self.problems))


class DuplicateFieldError(ContractViolation, ValueError):
    """Raised when registering a field whose name is already registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(
            f"Field '{name}' is already registered; remove it before registering it again"
        )


class UnknownFieldError(ContractViolation, KeyError):
    """Raised when a field event targets a name that is not registered."""

    def __init__(self, name: str):
        self.name = name
        super().__init__(name)

    def __str__(self) -> str:
        return f"Field '{self.name}' is not registered"


class ReentrantUpdateError(ContractViolation, RuntimeError):
    """Raised when a subscriber calls ``update()`` while being notified."""


class InvalidPhaseTransitionError(ContractViolation):
    """Raised when a submit attempt is moved to a phase it cannot reach.

    Attributes:
        current_phase: The phase before the attempted transition
        target_phase: The phase that was attempted
    """

    def __init__(self, current_phase: SubmitPhase, target_phase: SubmitPhase, message: str):
        self.current_phase = current_phase
        self.target_phase = target_phase
        super().__init__(message)


__all__ = [
    "ContractViolation",
    "InvalidFieldSpecError",
    "DuplicateFieldError",
    "UnknownFieldError",
    "ReentrantUpdateError",
    "InvalidPhaseTransitionError",
]
