"""Immutable state records for the informal form-state engine.

A form is described by one ``FormState`` holding a mapping of ``FieldState``
records. Both are frozen dataclasses: every event produces new instances via
``dataclasses.replace`` and a snapshot handed to subscribers is never changed
afterwards. The ``fields`` dict inside a snapshot is likewise never mutated by
the engine; callers must treat it as read-only.
"""

import re
from dataclasses import dataclass, field
from typing import Any, Callable, Dict, Optional, Pattern, Sequence, Tuple, Union

from typing_extensions import NotRequired, TypedDict

from informal.types import FormStatus

Predicate = Callable[[str], bool]
RuleTest = Union[Pattern[str], Predicate]


@dataclass(frozen=True)
class ValidationRule:
    """A single validation rule: a test plus the message shown when it fails.

    The test is satisfied when a pattern is found anywhere in the value, or
    when a predicate returns a truthy result for the value. A plain string is
    compiled into a pattern.

    Attributes:
        test: Compiled regular expression or ``(value) -> bool`` callable
        message: Arbitrary payload reported while the rule fails

    Examples:
        >>> rule = ValidationRule(test=r".+", message="required")
        >>> rule.is_satisfied("")
        False
        >>> ValidationRule(test=str.isdigit, message="digits only").is_satisfied("42")
        True
    """
    test: RuleTest
    message: Any = None

    def __post_init__(self):
        if isinstance(self.test, str):
            object.__setattr__(self, "test", re.compile(self.test))

    def is_satisfied(self, value: str) -> bool:
        if isinstance(self.test, re.Pattern):
            return self.test.search(value) is not None
        return bool(self.test(value))

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> "ValidationRule":
        """Create ValidationRule from dict."""
        return cls(test=data["test"], message=data.get("message"))


class FieldSpec(TypedDict):
    """Registration payload accepted by ``add_field``."""
    name: str
    defaultValue: NotRequired[Optional[str]]
    validations: NotRequired[Sequence[Union[ValidationRule, Dict[str, Any]]]]


@dataclass(frozen=True)
class FieldState:
    """State of one registered field.

    Attributes:
        name: Field name, unique within its form
        value: Current value
        default_value: Baseline for dirtiness; fixed at registration
        validations: Rules fixed at registration
        valid: True iff no rule fails against ``value``
        messages: Messages of the failing rules, in rule order
        active: True while focused
        visited: True once blurred at least once
        edited: True once the value has been changed at least once
        dirty: True iff ``value != default_value``
        submitted: True once the owning form attempted a submission
    """
    name: str
    value: str = ""
    default_value: str = ""
    validations: Tuple[ValidationRule, ...] = ()
    valid: bool = True
    messages: Tuple[Any, ...] = ()
    active: bool = False
    visited: bool = False
    edited: bool = False
    dirty: bool = False
    submitted: bool = False

    @property
    def pristine(self) -> bool:
        return not self.dirty

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization. Rules are not included."""
        return {
            "name": self.name,
            "value": self.value,
            "defaultValue": self.default_value,
            "valid": self.valid,
            "messages": list(self.messages),
            "active": self.active,
            "visited": self.visited,
            "edited": self.edited,
            "dirty": self.dirty,
            "submitted": self.submitted,
        }


@dataclass(frozen=True)
class FormState:
    """A snapshot of the whole form.

    Attributes:
        status: Submission status
        submitted: True once any submission has been attempted
        valid: True iff every field is valid (True with zero fields)
        data: Result of the most recent successful submission
        error: Error of the most recent failed submission
        fields: Mapping of field name to FieldState

    Examples:
        >>> state = FormState()
        >>> state.status
        <FormStatus.INITIAL: 'initial'>
        >>> state.valid, state.fields
        (True, {})
    """
    status: FormStatus = FormStatus.INITIAL
    submitted: bool = False
    valid: bool = True
    data: Optional[Any] = None
    error: Optional[Any] = None
    fields: Dict[str, FieldState] = field(default_factory=dict)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dict for serialization."""
        result: Dict[str, Any] = {
            "status": self.status.value if isinstance(self.status, FormStatus) else self.status,
            "submitted": self.submitted,
            "valid": self.valid,
            "fields": {name: f.to_dict() for name, f in self.fields.items()},
        }
        if self.data is not None:
            result["data"] = self.data
        if self.error is not None:
            result["error"] = self.error
        return result


__all__ = [
    "Predicate",
    "RuleTest",
    "ValidationRule",
    "FieldSpec",
    "FieldState",
    "FormState",
]
