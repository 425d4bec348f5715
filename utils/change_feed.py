"""
Row change notifications for the order store.

Writers never talk to the feed directly: db.py captures inserted/updated rows
during flush and publishes them here once the transaction has committed.
Readers subscribe with a table name, an optional event type and column
equality filters, e.g.

    subscription = feed.subscribe("orders", on_update, event_type=ChangeEventType.UPDATE,
                                  user_id=owner_id)
    ...
    subscription.unsubscribe()

Delivery is best-effort and synchronous: a handler that raises is logged and
skipped, the remaining subscribers still receive the event.
"""

import logging
from typing import Any, Callable

from pydantic import BaseModel

from enums.change_event_type import ChangeEventType

logger = logging.getLogger(__name__)


class RowChangeEvent(BaseModel):
    table: str
    event_type: ChangeEventType
    new: Any  # DTO with the committed row state


ChangeHandler = Callable[[RowChangeEvent], None]


class Subscription:
    def __init__(self, feed: "ChangeFeed", table: str, handler: ChangeHandler,
                 event_type: ChangeEventType | None, filters: dict[str, Any]):
        self._feed = feed
        self.table = table
        self.handler = handler
        self.event_type = event_type
        self.filters = filters

    @property
    def active(self) -> bool:
        return self._feed.is_subscribed(self)

    def matches(self, event: RowChangeEvent) -> bool:
        if event.table != self.table:
            return False
        if self.event_type is not None and event.event_type != self.event_type:
            return False
        return all(getattr(event.new, column, None) == value for column, value in self.filters.items())

    def unsubscribe(self) -> None:
        self._feed.unsubscribe(self)

    def __repr__(self) -> str:
        event_type = self.event_type.value if self.event_type else "*"
        return f"Subscription({self.table}, {event_type}, {self.filters})"


class ChangeFeed:
    def __init__(self):
        self._subscriptions: list[Subscription] = []

    def subscribe(self, table: str, handler: ChangeHandler,
                  event_type: ChangeEventType | None = None, **filters: Any) -> Subscription:
        subscription = Subscription(self, table, handler, event_type, filters)
        self._subscriptions.append(subscription)
        logger.debug(f"Subscribed {subscription!r}")
        return subscription

    def unsubscribe(self, subscription: Subscription) -> None:
        # Unsubscribing twice is harmless (view teardown may race with owner change)
        if subscription in self._subscriptions:
            self._subscriptions.remove(subscription)
            logger.debug(f"Unsubscribed {subscription!r}")

    def is_subscribed(self, subscription: Subscription) -> bool:
        return subscription in self._subscriptions

    @property
    def subscription_count(self) -> int:
        return len(self._subscriptions)

    def publish(self, event: RowChangeEvent) -> int:
        """
        Deliver an event to every matching subscriber.

        Returns:
            Number of handlers that received the event without raising
        """
        delivered = 0
        # Copy: handlers may unsubscribe while we iterate
        for subscription in list(self._subscriptions):
            if not subscription.matches(event):
                continue
            try:
                subscription.handler(event)
                delivered += 1
            except Exception as e:
                logger.error(f"Change handler {subscription!r} failed for {event.table} "
                             f"{event.event_type.value}: {e}")
        return delivered
