"""State transforms for the informal form-state engine.

Every event is expressed as a factory returning a ``Transform``: a pure
function from the previous ``FormState`` to the next one. Transforms never
mutate their input; the ``fields`` dict is copied whenever a field changes.

Field transforms finish with a form-level revalidation so that
``FormState.valid`` always equals the conjunction of the fields' validity.
Form transforms handle the submit lifecycle and fan the ``submitted`` flag out
to every field.

Usage:
    >>> state = FormState()
    >>> state = add_field({"name": "email", "validations": [{"test": r"@", "message": "bad"}]})(state)
    >>> state.valid
    False
    >>> state = on_field_change("email", "a@b.c")(state)
    >>> state.valid, state.fields["email"].dirty
    (True, True)
"""

from dataclasses import replace
from typing import Any, Callable, Dict

from informal.errors import DuplicateFieldError, UnknownFieldError
from informal.models import FieldSpec, FieldState, FormState
from informal.types import FormStatus
from informal.validation import build_rules, check_field_spec, validate_field

Transform = Callable[[FormState], FormState]


# Helpers

def _validate_form(state: FormState) -> FormState:
    valid = all(f.valid for f in state.fields.values())
    if valid == state.valid:
        return state
    return replace(state, valid=valid)


def _adjust_field(
    state: FormState, name: str, fn: Callable[[FieldState], FieldState]
) -> FormState:
    if name not in state.fields:
        raise UnknownFieldError(name)
    fields = dict(state.fields)
    fields[name] = fn(fields[name])
    return replace(state, fields=fields)


def _mark_fields_submitted(state: FormState) -> FormState:
    fields = {name: replace(f, submitted=True) for name, f in state.fields.items()}
    return replace(state, submitted=True, fields=fields)


def _init_field(spec: FieldSpec) -> FieldState:
    default_value = spec.get("defaultValue") or ""
    field = FieldState(
        name=spec["name"],
        value=default_value,
        default_value=default_value,
        validations=build_rules(spec.get("validations")),
    )
    return validate_field(field)


def get_form_values(state: FormState) -> Dict[str, str]:
    """Project a snapshot onto ``{name: current value}``."""
    return {name: f.value for name, f in state.fields.items()}


# Field transforms

def add_field(spec: FieldSpec) -> Transform:
    """Register a field.

    The payload shape is checked eagerly, when the transform is built.

    Args:
        spec: ``{"name": ..., "defaultValue": ..., "validations": [...]}``

    Raises:
        InvalidFieldSpecError: If the payload is malformed (on call)
        DuplicateFieldError: If the name is already registered (on apply)
    """
    check_field_spec(spec)
    field = _init_field(spec)

    def transform(state: FormState) -> FormState:
        if field.name in state.fields:
            raise DuplicateFieldError(field.name)
        fields = dict(state.fields)
        fields[field.name] = field
        return _validate_form(replace(state, fields=fields))

    return transform


def remove_field(name: str) -> Transform:
    """Unregister a field. Removing an unknown name only revalidates."""
    def transform(state: FormState) -> FormState:
        if name not in state.fields:
            return _validate_form(state)
        fields = {k: f for k, f in state.fields.items() if k != name}
        return _validate_form(replace(state, fields=fields))

    return transform


def on_field_change(name: str, value: str) -> Transform:
    def change(field: FieldState) -> FieldState:
        field = validate_field(replace(field, value=value))
        return replace(field, dirty=field.value != field.default_value, edited=True)

    def transform(state: FormState) -> FormState:
        return _validate_form(_adjust_field(state, name, change))

    return transform


def on_field_focus(name: str) -> Transform:
    def transform(state: FormState) -> FormState:
        return _adjust_field(state, name, lambda f: replace(f, active=True))

    return transform


def on_field_blur(name: str) -> Transform:
    def transform(state: FormState) -> FormState:
        return _adjust_field(state, name, lambda f: replace(f, active=False, visited=True))

    return transform


# Form transforms

def on_form_submit_invalid() -> Transform:
    """Record a submission attempt on an invalid form. Status is untouched."""
    return _mark_fields_submitted


def on_form_submit() -> Transform:
    def transform(state: FormState) -> FormState:
        return replace(_mark_fields_submitted(state), status=FormStatus.PENDING)

    return transform


def on_form_submit_success(data: Any, clear_error: bool = True) -> Transform:
    """Store the submission result.

    Args:
        data: Value the external submit function produced
        clear_error: Also drop the error of an earlier failed attempt
    """
    def transform(state: FormState) -> FormState:
        if clear_error:
            return replace(state, status=FormStatus.FULFILLED, data=data, error=None)
        return replace(state, status=FormStatus.FULFILLED, data=data)

    return transform


def on_form_submit_error(error: Any, clear_data: bool = True) -> Transform:
    """Store the submission error.

    Args:
        error: Exception raised by the external submit function
        clear_data: Also drop the data of an earlier successful attempt
    """
    def transform(state: FormState) -> FormState:
        if clear_data:
            return replace(state, status=FormStatus.REJECTED, error=error, data=None)
        return replace(state, status=FormStatus.REJECTED, error=error)

    return transform


__all__ = [
    "Transform",
    "get_form_values",
    "add_field",
    "remove_field",
    "on_field_change",
    "on_field_focus",
    "on_field_blur",
    "on_form_submit_invalid",
    "on_form_submit",
    "on_form_submit_success",
    "on_form_submit_error",
]
