"""informal: a form-state engine.

informal keeps one authoritative model of a form's fields and their validity:
- Pure transforms turn events (registration, edits, focus, submit lifecycle)
  into new immutable snapshots
- A form container serializes every change through a single ``update``
- A subscription broker hands each snapshot to observers in order
- ``submit()`` brackets an external async submit function

Basic usage:
    >>> import asyncio
    >>> from informal import Form
    >>> from informal.transforms import on_field_change
    >>> form = Form(lambda values: values)
    >>> form.register("name", validations=[{"test": r".+", "message": "required"}])
    >>> form.get_state().fields["name"].messages
    ('required',)
    >>> form.update(on_field_change("name", "John"))
    >>> asyncio.run(form.submit())
    {'name': 'John'}
"""

__version__ = "0.1.0"
__author__ = "informal contributors"

# Version info
VERSION = (0, 1, 0)

# Core exports
from informal.errors import ContractViolation
from informal.form import Form, FormOptions
from informal.models import FieldState, FormState, ValidationRule
from informal.types import FormStatus, SubmitOverlap

# Package metadata
__all__ = [
    "__version__",
    "VERSION",
    "ContractViolation",
    "Form",
    "FormOptions",
    "FieldState",
    "FormState",
    "ValidationRule",
    "FormStatus",
    "SubmitOverlap",
]
