"""Adapter bindings for the informal form-state engine.

These helpers sit between a form and whatever drives it (a UI toolkit, a
terminal prompt, a test). They only call the public ``Form`` API:
``FieldBinding`` registers one field, translates interaction calls into
field transforms and tracks that field's slice of each snapshot;
``FormBinding`` tracks whole snapshots. Both can run what they track through
a ``mapper(value, form)`` to derive an adapter-specific view.
"""

from typing import Any, Callable, Mapping, Optional, Sequence, Union

from informal.form import Form
from informal.models import FieldState, FormState, ValidationRule
from informal.transforms import on_field_blur, on_field_change, on_field_focus


class FieldBinding:
    """Registers a field on a form and exposes its interaction surface.

    The field is registered on construction and removed by ``close()``.
    Usable as a context manager.

    Attributes:
        name: Name of the bound field
        state: Latest FieldState, or None once the field has been removed
        mapped: Latest ``mapper(state, form)`` output (the state itself
            without a mapper)

    Examples:
        >>> form = Form(lambda values: values)
        >>> with FieldBinding(form, "email", validations=[{"test": r"@", "message": "bad"}]) as email:
        ...     email.set_value("me@example.com")
        ...     email.state.valid
        True
        >>> form.get_state().fields
        {}
    """

    def __init__(
        self,
        form: Form,
        name: str,
        default_value: Optional[str] = None,
        validations: Sequence[Union[ValidationRule, Mapping[str, Any]]] = (),
        mapper: Optional[Callable[[FieldState, Form], Any]] = None,
        on_change: Optional[Callable[[Any], None]] = None,
    ):
        self.form = form
        self.name = name
        self._mapper = mapper
        self._on_change = on_change
        self._closed = False

        form.register(name, default_value=default_value, validations=validations)
        self._store(form.get_state().fields[name])
        self._subscription = form.subscribe(self._receive)

    def _store(self, state: Optional[FieldState]) -> None:
        self.state = state
        if state is None or self._mapper is None:
            self.mapped = state
        else:
            self.mapped = self._mapper(state, self.form)

    def _receive(self, state: FormState) -> None:
        self._store(state.fields.get(self.name))
        if self._on_change is not None and self.state is not None:
            self._on_change(self.mapped)

    def set_value(self, value: str) -> None:
        self.form.update(on_field_change(self.name, value))

    def focus(self) -> None:
        self.form.update(on_field_focus(self.name))

    def blur(self) -> None:
        self.form.update(on_field_blur(self.name))

    def close(self) -> None:
        """Remove the field and unsubscribe. Safe to call twice.

        If removing the field fails, the binding stays open and ``close()``
        can be retried.
        """
        if self._closed:
            return
        self.form.unregister(self.name)
        self._closed = True
        self._subscription()
        self._store(None)

    def __enter__(self) -> "FieldBinding":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


class FormBinding:
    """Tracks whole-form snapshots.

    Reads the current snapshot once on construction, then follows every
    update. ``mapped`` holds ``mapper(state, form)``.

    Attributes:
        state: Latest FormState
        mapped: Latest mapper output (the state itself without a mapper)
    """

    def __init__(
        self,
        form: Form,
        mapper: Optional[Callable[[FormState, Form], Any]] = None,
        on_change: Optional[Callable[[Any], None]] = None,
    ):
        self.form = form
        self._mapper = mapper
        self._on_change = on_change
        self._store(form.get_state())
        self._subscription = form.subscribe(self._receive)

    def _store(self, state: FormState) -> None:
        self.state = state
        self.mapped = self._mapper(state, self.form) if self._mapper else state

    def _receive(self, state: FormState) -> None:
        self._store(state)
        if self._on_change is not None:
            self._on_change(self.mapped)

    async def submit(self) -> Any:
        return await self.form.submit()

    def close(self) -> None:
        self._subscription()

    def __enter__(self) -> "FormBinding":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()


__all__ = [
    "FieldBinding",
    "FormBinding",
]
