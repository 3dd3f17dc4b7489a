"""Validation engine for the informal form-state engine.

Two concerns live here:
- ``validate_field`` recomputes a field's validity and failure messages from
  its rules. It is pure and total; failing rules are state, never errors.
- ``check_field_spec`` checks the *shape* of a field registration payload
  before it enters the form, using a Draft 7 JSON Schema validator extended
  with types for compiled patterns, predicates and rule objects. A malformed
  payload is a contract violation and raises ``InvalidFieldSpecError``.
"""

import re
from dataclasses import replace
from typing import Any, Dict, List, Mapping, Tuple

from jsonschema import Draft7Validator, validators

from informal.errors import InvalidFieldSpecError
from informal.models import FieldSpec, FieldState, ValidationRule


def _is_array(checker, instance) -> bool:
    return isinstance(instance, (list, tuple))


def _is_regex(checker, instance) -> bool:
    return isinstance(instance, re.Pattern)


def _is_predicate(checker, instance) -> bool:
    return callable(instance)


def _is_rule(checker, instance) -> bool:
    return isinstance(instance, ValidationRule)


_TYPE_CHECKER = Draft7Validator.TYPE_CHECKER.redefine_many({
    "array": _is_array,
    "regex": _is_regex,
    "predicate": _is_predicate,
    "rule": _is_rule,
})

FieldSpecValidator = validators.extend(Draft7Validator, type_checker=_TYPE_CHECKER)

RULE_SCHEMA: Dict[str, Any] = {
    "anyOf": [
        {"type": "rule"},
        {
            "type": "object",
            "required": ["test"],
            "properties": {
                "test": {
                    "anyOf": [
                        {"type": "regex"},
                        {"type": "string", "format": "regex"},
                        {"type": "predicate"},
                    ]
                },
            },
        },
    ]
}

FIELD_SPEC_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "required": ["name"],
    "additionalProperties": False,
    "properties": {
        "name": {"type": "string", "minLength": 1},
        "defaultValue": {"type": ["string", "null"]},
        "validations": {"type": ["array", "null"], "items": RULE_SCHEMA},
    },
}

_spec_validator = FieldSpecValidator(
    FIELD_SPEC_SCHEMA, format_checker=Draft7Validator.FORMAT_CHECKER
)


def check_field_spec(spec: FieldSpec) -> None:
    """Check the shape of a field registration payload.

    Args:
        spec: Payload with ``name`` and optional ``defaultValue`` and
            ``validations``

    Raises:
        InvalidFieldSpecError: Listing every problem found

    Examples:
        >>> check_field_spec({"name": "email", "validations": [{"test": r"@"}]})
        >>> check_field_spec({"name": "email", "defaultValue": None})
    """
    if not isinstance(spec, Mapping):
        raise InvalidFieldSpecError([f"<spec>: expected a mapping, got {type(spec).__name__}"])

    problems: List[str] = []
    for error in _spec_validator.iter_errors(dict(spec)):
        path = ".".join(str(p) for p in error.absolute_path) or "<spec>"
        problems.append(f"{path}: {error.message}")
    if problems:
        raise InvalidFieldSpecError(problems)


def build_rules(validations) -> Tuple[ValidationRule, ...]:
    """Normalize rule objects and rule dicts into a tuple of ValidationRule."""
    if not validations:
        return ()
    return tuple(
        rule if isinstance(rule, ValidationRule) else ValidationRule.from_dict(rule)
        for rule in validations
    )


def validate_field(field: FieldState) -> FieldState:
    """Recompute ``valid`` and ``messages`` for a field.

    Every rule is evaluated against the current value; messages of failing
    rules are collected in rule order.

    Examples:
        >>> f = FieldState(name="n", validations=(ValidationRule(r".+", "required"),))
        >>> validate_field(f).messages
        ('required',)
    """
    messages = tuple(
        rule.message for rule in field.validations if not rule.is_satisfied(field.value)
    )
    return replace(field, messages=messages, valid=not messages)


__all__ = [
    "FIELD_SPEC_SCHEMA",
    "FieldSpecValidator",
    "check_field_spec",
    "build_rules",
    "validate_field",
]
