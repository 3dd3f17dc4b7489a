"""Form container for the informal form-state engine.

The ``Form`` owns the only writable reference to the form's ``FormState``
and a ``SubscriptionBroker``. Every state change, whether field registration,
edits, focus changes or the submit lifecycle, goes through ``Form.update``,
which applies a transform, stores the result and notifies subscribers with
the new snapshot, in that order.

Usage:
    >>> import asyncio
    >>> async def send(values):
    ...     return {"saved": values}
    >>> from informal.transforms import on_field_change
    >>> form = Form(send)
    >>> form.register("name", validations=[{"test": r".+", "message": "required"}])
    >>> form.update(on_field_change("name", "John"))
    >>> asyncio.run(form.submit())
    {'saved': {'name': 'John'}}
    >>> form.get_state().status
    <FormStatus.FULFILLED: 'fulfilled'>
"""

import inspect
import logging
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Mapping, Optional, Sequence, Union

from informal.errors import ContractViolation, ReentrantUpdateError
from informal.models import FieldSpec, FormState, ValidationRule
from informal.submission import SubmitAttempt
from informal.subscriptions import Listener, Subscription, SubscriptionBroker
from informal.transforms import (
    Transform,
    add_field,
    get_form_values,
    on_form_submit,
    on_form_submit_error,
    on_form_submit_invalid,
    on_form_submit_success,
    remove_field,
)
from informal.types import SubmitOverlap, SubmitPhase

logger = logging.getLogger("informal.form")
field_logger = logging.getLogger("informal.field")

SubmitFunction = Callable[[Mapping[str, str]], Union[Awaitable[Any], Any]]


@dataclass(frozen=True)
class FormOptions:
    """Behaviour switches for a Form.

    Attributes:
        clear_stale_result: Drop ``error`` on success and ``data`` on failure
        overlap: Policy for submit() calls made while another is submitting
        logger_name: Logger used for the diagnostic and error channel
    """
    clear_stale_result: bool = True
    overlap: SubmitOverlap = SubmitOverlap.ALLOW
    logger_name: str = "informal.form"


class Form:
    """Single-writer owner of one form's state.

    The container is meant to be driven from one thread or one event loop.
    ``submit()`` is the only suspension point; other events keep flowing
    through ``update()`` while the external submit function runs.

    Attributes:
        options: FormOptions in effect for this form
    """

    def __init__(self, on_submit: SubmitFunction, options: Optional[FormOptions] = None):
        """Initialize the form with an empty field map.

        Args:
            on_submit: Called with ``{name: value}`` on a valid submit; may be
                a coroutine function or return an awaitable

        Raises:
            ContractViolation: If ``on_submit`` is not callable
        """
        if not callable(on_submit):
            raise ContractViolation("on_submit must be callable")
        self.options = options or FormOptions()
        self._on_submit = on_submit
        self._state = FormState()
        self._broker: SubscriptionBroker[FormState] = SubscriptionBroker()
        self._notifying = False
        self._in_flight = 0
        self._last_attempt: Optional[SubmitAttempt] = None
        self._logger = (
            logger if self.options.logger_name == logger.name
            else logging.getLogger(self.options.logger_name)
        )

    def get_state(self) -> FormState:
        """Return the current snapshot. Callers must not mutate it."""
        return self._state

    def update(self, transform: Transform) -> None:
        """Apply ``transform``, store the result and notify subscribers.

        Raises:
            ReentrantUpdateError: If called from inside a subscriber
        """
        if self._notifying:
            raise ReentrantUpdateError("update() called while notifying subscribers")
        self._state = transform(self._state)
        self._logger.debug("Form state updated %r", self._state)

        self._notifying = True
        try:
            self._broker.publish(self._state)
        finally:
            self._notifying = False

    def subscribe(self, listener: Listener) -> Subscription:
        """Register ``listener`` for every future snapshot.

        Returns:
            Handle that unsubscribes when called
        """
        return self._broker.subscribe(listener)

    def register(
        self,
        name: str,
        default_value: Optional[str] = None,
        validations: Sequence[Union[ValidationRule, Mapping[str, Any]]] = (),
    ) -> None:
        field_logger.debug("Adding field `%s` to form", name)
        spec: FieldSpec = {
            "name": name,
            "defaultValue": default_value,
            "validations": list(validations or ()),
        }
        self.update(add_field(spec))

    def unregister(self, name: str) -> None:
        field_logger.debug("Removing field `%s` from form", name)
        self.update(remove_field(name))

    @property
    def last_attempt(self) -> Optional[SubmitAttempt]:
        return self._last_attempt

    @property
    def pending_attempts(self) -> int:
        return self._in_flight

    async def submit(self) -> Any:
        """Attempt to submit the form.

        An invalid form is marked submitted and the external function is not
        called. A valid form goes ``pending`` and then ``fulfilled`` or
        ``rejected`` depending on the external function's outcome. A failure
        is logged and captured in state; it is never raised from here.

        Returns:
            The submit result on success, the raised exception on failure,
            None for an invalid form or a rejected overlapping attempt
        """
        if self.options.overlap is SubmitOverlap.REJECT and self._in_flight:
            self._logger.warning("Form submission ignored: another submission is pending")
            return None

        attempt = SubmitAttempt()
        self._last_attempt = attempt
        self._logger.debug("Attempting to submit form (%s)", attempt.attempt_id)

        if not self._state.valid:
            self._logger.debug("Form was not submitted due to invalid fields")
            attempt.transition_to(SubmitPhase.REJECTED_INVALID)
            self.update(on_form_submit_invalid())
            return None

        attempt.transition_to(SubmitPhase.SUBMITTING)
        self.update(on_form_submit())

        clear = self.options.clear_stale_result
        self._in_flight += 1
        try:
            result = await self._call_submit(get_form_values(self._state))
        except Exception as error:
            self._logger.error("Form submission failed: %s", error, exc_info=error)
            attempt.fail(error)
            self.update(on_form_submit_error(error, clear_data=clear))
            return error
        finally:
            self._in_flight -= 1

        self._logger.debug("Form submitted successfully")
        attempt.succeed(result)
        self.update(on_form_submit_success(result, clear_error=clear))
        return result

    async def _call_submit(self, values: Mapping[str, str]) -> Any:
        result = self._on_submit(values)
        if inspect.isawaitable(result):
            result = await result
        return result

    def close(self) -> None:
        """Drop every subscription. The form must not be used afterwards."""
        self._broker.clear()


__all__ = [
    "Form",
    "FormOptions",
    "SubmitFunction",
]
