"""Core type definitions for the informal form-state engine.

This module defines the enumerations shared by the models, the transforms and
the form container:
- FormStatus: Lifecycle of the form's submission status
- SubmitPhase: Phases a single submit() call passes through
- SubmitOverlap: Policy for submit() calls issued while another is in flight

The enums subclass ``str`` so that snapshots serialize to plain strings.
"""

from enum import Enum


class FormStatus(str, Enum):
    """Submission status of a form.

    ``initial`` until the first valid submit, ``pending`` while the external
    submit function runs, then ``fulfilled`` or ``rejected`` until the next
    attempt.
    """
    INITIAL = "initial"
    PENDING = "pending"
    FULFILLED = "fulfilled"
    REJECTED = "rejected"


class SubmitPhase(str, Enum):
    """Phases of a single submit attempt.

    Terminal phases: succeeded, failed, rejected_invalid.
    """
    CHECKING = "checking"
    SUBMITTING = "submitting"
    SUCCEEDED = "succeeded"
    FAILED = "failed"
    REJECTED_INVALID = "rejected_invalid"


class SubmitOverlap(str, Enum):
    """What to do with a submit() issued while another attempt is submitting."""
    ALLOW = "allow"
    REJECT = "reject"


__all__ = [
    "FormStatus",
    "SubmitPhase",
    "SubmitOverlap",
]
