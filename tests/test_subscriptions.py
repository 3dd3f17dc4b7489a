"""Unit tests for the subscription broker.

Tests cover:
- Delivery order and fidelity
- Subscription handles and removal by token
- (Un)subscribing during delivery
- Listener exceptions
"""

import pytest

from informal.subscriptions import Subscription, SubscriptionBroker


class TestPublish:
    """Test snapshot delivery."""

    def test_registration_order(self):
        """Listeners are called once each, in registration order."""
        broker = SubscriptionBroker()
        calls = []
        for i in range(5):
            broker.subscribe(lambda snapshot, i=i: calls.append((i, snapshot)))
        snapshot = object()
        broker.publish(snapshot)
        assert [i for i, _ in calls] == [0, 1, 2, 3, 4]
        assert all(s is snapshot for _, s in calls)

    def test_no_listeners(self):
        """Publishing without listeners does nothing."""
        SubscriptionBroker().publish("x")

    def test_listener_exception_propagates(self):
        """An exception stops delivery and reaches the publisher."""
        broker = SubscriptionBroker()
        seen = []

        def boom(snapshot):
            raise ValueError("listener failed")

        broker.subscribe(boom)
        broker.subscribe(seen.append)
        with pytest.raises(ValueError):
            broker.publish(1)
        assert seen == []


class TestSubscriptionHandles:
    """Test unsubscription through handles."""

    def test_handle_is_callable(self):
        """Should unsubscribe when the handle is called."""
        broker = SubscriptionBroker()
        seen = []
        handle = broker.subscribe(seen.append)
        assert isinstance(handle, Subscription)
        assert handle.active is True
        handle()
        assert handle.active is False
        broker.publish(1)
        assert seen == []

    def test_unsubscribe_twice_is_noop(self):
        """Should ignore a second unsubscribe."""
        broker = SubscriptionBroker()
        handle = broker.subscribe(lambda s: None)
        handle.unsubscribe()
        handle.unsubscribe()
        assert len(broker) == 0

    def test_same_callback_twice(self):
        """Each registration is independent, even for the same callback."""
        broker = SubscriptionBroker()
        seen = []
        first = broker.subscribe(seen.append)
        broker.subscribe(seen.append)
        broker.publish("a")
        first()
        broker.publish("b")
        assert seen == ["a", "a", "b"]

    def test_removal_keeps_other_order(self):
        """Removing one listener keeps the order of the others."""
        broker = SubscriptionBroker()
        calls = []
        handles = [broker.subscribe(lambda s, i=i: calls.append(i)) for i in range(4)]
        handles[1]()
        broker.publish(None)
        assert calls == [0, 2, 3]

    def test_tokens_are_unique(self):
        """Should hand out a distinct token per subscription."""
        broker = SubscriptionBroker()
        tokens = {broker.subscribe(lambda s: None).token for _ in range(10)}
        assert len(tokens) == 10

    def test_clear(self):
        """Should drop every listener and deactivate their handles."""
        broker = SubscriptionBroker()
        handle = broker.subscribe(lambda s: None)
        broker.clear()
        assert len(broker) == 0
        assert handle.active is False


class TestChangesDuringDelivery:
    """Test subscribing and unsubscribing from inside a listener."""

    def test_unsubscribe_during_delivery(self):
        """A listener removed mid-delivery still receives the current snapshot."""
        broker = SubscriptionBroker()
        calls = []
        handles = []

        def first(snapshot):
            calls.append("first")
            handles[1]()

        handles.append(broker.subscribe(first))
        handles.append(broker.subscribe(lambda s: calls.append("second")))
        broker.publish(1)
        broker.publish(2)
        assert calls == ["first", "second", "first"]

    def test_subscribe_during_delivery(self):
        """A listener added mid-delivery starts with the next snapshot."""
        broker = SubscriptionBroker()
        late = []

        def first(snapshot):
            if snapshot == 1:
                broker.subscribe(late.append)

        broker.subscribe(first)
        broker.publish(1)
        broker.publish(2)
        assert late == [2]
