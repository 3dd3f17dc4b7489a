"""Unit tests for the submit-attempt phase machine.

Tests cover:
- Initialization and attempt identifiers
- Valid and invalid phase transitions
- Terminal phase detection
- Outcome recording and serialization
"""

import pytest

from informal.errors import InvalidPhaseTransitionError
from informal.submission import VALID_TRANSITIONS, SubmitAttempt
from informal.types import SubmitPhase


class TestSubmitAttemptInitialization:
    """Test attempt defaults."""

    def test_starts_checking(self):
        """Should start in the checking phase with a fresh identifier."""
        attempt = SubmitAttempt()
        assert attempt.phase == SubmitPhase.CHECKING
        assert attempt.history == [SubmitPhase.CHECKING]
        assert attempt.attempt_id.startswith("att_")

    def test_unique_ids(self):
        """Should give every attempt its own identifier."""
        assert SubmitAttempt().attempt_id != SubmitAttempt().attempt_id


class TestPhaseTransitions:
    """Test phase transitions."""

    def test_checking_to_rejected_invalid(self):
        """Should end an invalid attempt in a terminal phase."""
        attempt = SubmitAttempt()
        attempt.transition_to(SubmitPhase.REJECTED_INVALID)
        assert attempt.is_terminal()

    def test_success_path(self):
        """Should record the result and the phases of a successful attempt."""
        attempt = SubmitAttempt()
        attempt.transition_to(SubmitPhase.SUBMITTING)
        attempt.succeed({"id": 1})
        assert attempt.phase == SubmitPhase.SUCCEEDED
        assert attempt.result == {"id": 1}
        assert attempt.history == [
            SubmitPhase.CHECKING, SubmitPhase.SUBMITTING, SubmitPhase.SUCCEEDED,
        ]

    def test_failure_path(self):
        """Should record the error of a failed attempt."""
        error = RuntimeError("network error")
        attempt = SubmitAttempt()
        attempt.transition_to(SubmitPhase.SUBMITTING)
        attempt.fail(error)
        assert attempt.phase == SubmitPhase.FAILED
        assert attempt.error is error

    def test_cannot_succeed_without_submitting(self):
        """Should refuse to succeed before submitting."""
        attempt = SubmitAttempt()
        with pytest.raises(InvalidPhaseTransitionError) as exc_info:
            attempt.succeed("x")
        assert exc_info.value.current_phase == SubmitPhase.CHECKING
        assert exc_info.value.target_phase == SubmitPhase.SUCCEEDED
        assert attempt.result is None

    @pytest.mark.parametrize("terminal", [
        SubmitPhase.SUCCEEDED, SubmitPhase.FAILED, SubmitPhase.REJECTED_INVALID,
    ])
    def test_terminal_phases_have_no_exits(self, terminal):
        """Should refuse any transition out of a terminal phase."""
        assert VALID_TRANSITIONS[terminal] == set()
        attempt = SubmitAttempt(phase=terminal)
        with pytest.raises(InvalidPhaseTransitionError, match="terminal phase"):
            attempt.transition_to(SubmitPhase.SUBMITTING)

    def test_every_phase_listed(self):
        """Should list transitions for every phase."""
        assert set(VALID_TRANSITIONS) == set(SubmitPhase)


class TestSerialization:
    """Test to_dict."""

    def test_to_dict(self):
        """Should serialize the identifier, phase and history."""
        attempt = SubmitAttempt(attempt_id="att_1")
        attempt.transition_to(SubmitPhase.SUBMITTING)
        assert attempt.to_dict() == {
            "attemptId": "att_1",
            "phase": "submitting",
            "history": ["checking", "submitting"],
        }
