"""
Customer order history with live status updates.

The view keeps an in-memory list of the signed-in user's orders:
- open() loads the list and subscribes to status updates for that owner
- a pushed status change patches the matching order in place (no re-fetch)
- an optional background task re-fetches periodically, so a missed push
  (dropped connection etc.) only leaves the list stale until the next pass
- when the session owner changes the subscription is moved to the new owner
  and the list is reloaded; close() tears everything down
"""

import asyncio
import contextlib
import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import config
import db
from enums.change_event_type import ChangeEventType
from enums.order_status import OrderStatus
from exceptions.order import OrderFetchException
from models.order import Order, OrderWithItemsDTO
from models.user import UserIdentityDTO
from services.order_management import OrderManagementService
from services.session_context import SessionContext
from utils.change_feed import ChangeFeed, RowChangeEvent, Subscription

logger = logging.getLogger(__name__)


class MyOrdersView:
    def __init__(self, session_context: SessionContext, change_feed: ChangeFeed | None = None,
                 session_maker: async_sessionmaker[AsyncSession] | None = None):
        self._session_context = session_context
        self._change_feed = change_feed or db.change_feed
        self._session_maker = session_maker or db.session_maker
        self._orders: list[OrderWithItemsDTO] = []
        self._owner_id: str | None = None
        self._subscription: Subscription | None = None
        self._reconcile_task: asyncio.Task | None = None
        self._reload_task: asyncio.Task | None = None
        # Pushes seen while a full load is in flight: order id -> (sequence, status)
        self._pending_pushes: dict[int, tuple[int, OrderStatus]] = {}
        self._push_sequence = 0
        self._loads_in_flight = 0
        self._active = False
        self.is_loading = False

    @property
    def orders(self) -> list[OrderWithItemsDTO]:
        return list(self._orders)

    @property
    def owner_id(self) -> str | None:
        return self._owner_id

    @property
    def is_subscribed(self) -> bool:
        return self._subscription is not None and self._subscription.active

    async def open(self, reconcile_interval: int | None = None) -> list[OrderWithItemsDTO]:
        """Activate the view for the current owner and load their orders."""
        self._active = True
        self._session_context.subscribe(self._on_session_change)
        self.attach(self._session_context.user_id)
        orders = await self.load()
        self.start_reconciliation(reconcile_interval)
        return orders

    async def close(self) -> None:
        self._active = False
        self._session_context.unsubscribe(self._on_session_change)
        self.detach()
        await self.stop_reconciliation()
        await self._cancel_reload()
        self._orders = []

    def attach(self, owner_id: str | None) -> None:
        """Subscribe to status updates for owner_id (replacing any previous subscription)."""
        self.detach()
        self._owner_id = owner_id
        if owner_id is None:
            return
        self._subscription = self._change_feed.subscribe(
            Order.__tablename__,
            self._apply_change,
            event_type=ChangeEventType.UPDATE,
            user_id=owner_id
        )

    def detach(self) -> None:
        if self._subscription is not None:
            self._subscription.unsubscribe()
            self._subscription = None

    async def load(self) -> list[OrderWithItemsDTO]:
        """
        Full fetch of the owner's orders (newest first, with line items).

        Raises:
            OrderFetchException: If the store could not be read
        """
        owner_id = self._owner_id
        if owner_id is None:
            self._orders = []
            return []

        self.is_loading = True
        started_at = self._push_sequence
        self._loads_in_flight += 1
        try:
            async with self._session_maker() as session:
                orders = await OrderManagementService.get_order_list(owner_id, session)
        finally:
            self._loads_in_flight -= 1
            self.is_loading = self._loads_in_flight > 0

        # The owner may have changed (or the view closed) while we were waiting
        if owner_id != self._owner_id:
            logger.debug(f"Discarding order list for previous owner {owner_id}")
        else:
            # The rows may predate a status pushed during the fetch
            orders = self._reapply_pushes(orders, started_at)
            self._orders = orders
        if self._loads_in_flight == 0:
            self._pending_pushes = {}
        return orders

    def _reapply_pushes(self, orders: list[OrderWithItemsDTO], since: int) -> list[OrderWithItemsDTO]:
        pushed = {order_id: status for order_id, (sequence, status) in self._pending_pushes.items()
                  if sequence > since}
        return [order.model_copy(update={"status": pushed[order.id]}) if order.id in pushed else order
                for order in orders]

    async def reconcile(self) -> list[OrderWithItemsDTO]:
        return await self.load()

    def start_reconciliation(self, interval: int | None = None) -> None:
        if interval is None:
            interval = config.ORDER_VIEW_RECONCILE_SECONDS
        if interval <= 0 or self._reconcile_task is not None:
            return
        self._reconcile_task = asyncio.get_running_loop().create_task(self._reconcile_loop(interval))

    async def stop_reconciliation(self) -> None:
        if self._reconcile_task is None:
            return
        self._reconcile_task.cancel()
        with contextlib.suppress(asyncio.CancelledError):
            await self._reconcile_task
        self._reconcile_task = None

    async def wait_until_loaded(self) -> None:
        """Wait for a reload triggered by a session change, if one is running."""
        if self._reload_task is not None:
            await self._reload_task

    async def _reconcile_loop(self, interval: int) -> None:
        while True:
            await asyncio.sleep(interval)
            try:
                await self.reconcile()
            except OrderFetchException as e:
                # Keep the current list, next pass tries again
                logger.warning(f"Order view reconciliation failed: {e}")

    def _apply_change(self, event: RowChangeEvent) -> None:
        changed = event.new
        if self._loads_in_flight:
            self._push_sequence += 1
            self._pending_pushes[changed.id] = (self._push_sequence, changed.status)
        for index, order in enumerate(self._orders):
            if order.id == changed.id:
                self._orders[index] = order.model_copy(update={"status": changed.status})
                logger.debug(f"Order {changed.id} status pushed: {changed.status.value}")
                return
        # Not in the list yet (e.g. placed elsewhere): the next full load picks it up
        logger.debug(f"Ignoring status push for unknown order {changed.id}")

    def _on_session_change(self, user: UserIdentityDTO | None) -> None:
        new_owner_id = user.id if user else None
        if not self._active or new_owner_id == self._owner_id:
            return
        self.attach(new_owner_id)
        self._orders = []
        if self._reload_task is not None and not self._reload_task.done():
            self._reload_task.cancel()
        if new_owner_id is not None:
            self._reload_task = asyncio.get_running_loop().create_task(self._reload_after_session_change())

    async def _reload_after_session_change(self) -> None:
        try:
            await self.load()
        except OrderFetchException as e:
            logger.error(f"Could not load orders after session change: {e}")

    async def _cancel_reload(self) -> None:
        if self._reload_task is not None and not self._reload_task.done():
            self._reload_task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await self._reload_task
        self._reload_task = None
