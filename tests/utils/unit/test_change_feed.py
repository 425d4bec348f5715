"""
Unit Tests: ChangeFeed

Subscription matching, unsubscribe semantics and fault isolation.
"""

from enums.change_event_type import ChangeEventType
from enums.order_status import OrderStatus
from models.order import OrderDTO
from utils.change_feed import ChangeFeed, RowChangeEvent


def _event(event_type=ChangeEventType.UPDATE, table="orders", **row) -> RowChangeEvent:
    row.setdefault("id", 1)
    row.setdefault("user_id", "customer-1")
    row.setdefault("status", OrderStatus.CONFIRMED)
    return RowChangeEvent(table=table, event_type=event_type, new=OrderDTO(**row))


class TestSubscriptionMatching:

    def test_filter_on_column_value(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe("orders", received.append, event_type=ChangeEventType.UPDATE, user_id="customer-1")

        feed.publish(_event(user_id="customer-1"))
        feed.publish(_event(user_id="customer-2"))

        assert [event.new.user_id for event in received] == ["customer-1"]

    def test_event_type_filter(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe("orders", received.append, event_type=ChangeEventType.UPDATE)

        feed.publish(_event(event_type=ChangeEventType.INSERT))

        assert received == []

    def test_other_table_ignored(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe("orders", received.append)

        assert feed.publish(_event(table="order_items")) == 0
        assert received == []

    def test_unfiltered_subscription_gets_all_event_types(self):
        feed = ChangeFeed()
        received = []
        feed.subscribe("orders", received.append)

        feed.publish(_event(event_type=ChangeEventType.INSERT))
        feed.publish(_event(event_type=ChangeEventType.UPDATE))

        assert len(received) == 2


class TestUnsubscribe:

    def test_unsubscribed_handler_not_called(self):
        feed = ChangeFeed()
        received = []
        subscription = feed.subscribe("orders", received.append)

        subscription.unsubscribe()
        feed.publish(_event())

        assert received == []
        assert subscription.active is False
        assert feed.subscription_count == 0

    def test_unsubscribe_twice_is_harmless(self):
        feed = ChangeFeed()
        subscription = feed.subscribe("orders", lambda event: None)

        subscription.unsubscribe()
        subscription.unsubscribe()

        assert feed.subscription_count == 0

    def test_handler_may_unsubscribe_during_delivery(self):
        feed = ChangeFeed()
        received = []

        def once(event):
            received.append(event)
            subscription.unsubscribe()

        subscription = feed.subscribe("orders", once)
        feed.publish(_event())
        feed.publish(_event())

        assert len(received) == 1


class TestFaultIsolation:

    def test_failing_handler_does_not_block_others(self, caplog):
        feed = ChangeFeed()
        received = []

        def broken(event):
            raise RuntimeError("view already destroyed")

        feed.subscribe("orders", broken)
        feed.subscribe("orders", received.append)

        delivered = feed.publish(_event())

        assert delivered == 1
        assert len(received) == 1
        assert "view already destroyed" in caplog.text
