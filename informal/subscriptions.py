"""Subscription broker for the informal form-state engine.

The broker follows the observer pattern: callbacks are registered under a
stable integer token and every published snapshot is delivered to all of
them, synchronously, in registration order.

Features:
- Token-keyed registry (O(1) removal, insertion order preserved)
- Callable ``Subscription`` handles; unsubscribing twice is a no-op
- Delivery over a copy of the registry, so (un)subscribing from a callback
  only affects later notifications
"""

import itertools
from typing import Callable, Dict, Generic, List, TypeVar

T = TypeVar("T")

Listener = Callable[[T], None]
"""Type alias for subscriber callbacks.

Listeners are called synchronously with the new snapshot. They must not
mutate it.
"""


class Subscription:
    """Handle returned by ``SubscriptionBroker.subscribe``.

    Calling the handle (or ``unsubscribe()``) removes exactly this
    registration, even if the same callback is registered more than once.

    Attributes:
        token: Registry key of this subscription
    """

    def __init__(self, broker: "SubscriptionBroker", token: int):
        self._broker = broker
        self.token = token

    @property
    def active(self) -> bool:
        return self._broker.is_subscribed(self.token)

    def unsubscribe(self) -> None:
        self._broker.unsubscribe(self.token)

    def __call__(self) -> None:
        self.unsubscribe()

    def __repr__(self) -> str:
        return f"Subscription(token={self.token}, active={self.active})"


class SubscriptionBroker(Generic[T]):
    """Ordered registry of listeners with synchronous fan-out.

    Examples:
        >>> broker = SubscriptionBroker()
        >>> seen = []
        >>> unsubscribe = broker.subscribe(seen.append)
        >>> broker.publish("a")
        >>> unsubscribe()
        >>> broker.publish("b")
        >>> seen
        ['a']
    """

    def __init__(self):
        self._listeners: Dict[int, Listener] = {}
        self._tokens = itertools.count(1)

    def subscribe(self, listener: Listener) -> Subscription:
        """Register a listener and return its handle."""
        token = next(self._tokens)
        self._listeners[token] = listener
        return Subscription(self, token)

    def unsubscribe(self, token: int) -> None:
        self._listeners.pop(token, None)

    def is_subscribed(self, token: int) -> bool:
        return token in self._listeners

    def publish(self, snapshot: T) -> None:
        """Deliver ``snapshot`` to every listener in registration order.

        A listener exception propagates to the caller and skips the
        remaining listeners.
        """
        listeners: List[Listener] = list(self._listeners.values())
        for listener in listeners:
            listener(snapshot)

    def clear(self) -> None:
        self._listeners.clear()

    def __len__(self) -> int:
        return len(self._listeners)


__all__ = [
    "Listener",
    "Subscription",
    "SubscriptionBroker",
]
