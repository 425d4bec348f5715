import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Callable

from exceptions.cart import InvalidCartStateException
from models.cart import CartLineDTO
from models.catalogItem import CatalogItemDTO
from repositories.catalog import CatalogRepository

logger = logging.getLogger(__name__)

CatalogLookup = Callable[[str], CatalogItemDTO | None]


class CartStore:
    """
    Session-local shopping cart: catalog item id -> quantity.

    Invariant: every stored quantity is >= 1. Decrementing to zero deletes the
    key, so "absent" and "zero" are indistinguishable to every query.

    The store has exactly one owner (the client session) and is mutated
    synchronously, so it needs no locking. The ordered units are taken out after a
    successful checkout and the cart is emptied on sign-out.
    """

    def __init__(self, catalog_lookup: CatalogLookup = CatalogRepository.get_by_id):
        self._entries: dict[str, int] = {}
        self._catalog_lookup = catalog_lookup
        self._checkout_in_progress = False

    def add(self, item_id: str) -> int:
        """Increment the quantity of item_id by one. Returns the new quantity."""
        quantity = self._entries.get(item_id, 0) + 1
        self._entries[item_id] = quantity
        logger.debug(f"Cart: +1 item {item_id} (now {quantity})")
        return quantity

    def remove(self, item_id: str) -> int:
        """
        Decrement the quantity of item_id by one.

        The entry is deleted when it would drop to zero; removing an item that
        is not in the cart is a no-op.

        Returns:
            The remaining quantity (0 if the entry is gone)
        """
        quantity = self._entries.get(item_id, 0)
        if quantity <= 1:
            self._entries.pop(item_id, None)
            return 0
        self._entries[item_id] = quantity - 1
        return quantity - 1

    def remove_all(self, item_id: str) -> int:
        """Drop every unit of item_id. Returns how many were removed."""
        removed = self._entries.pop(item_id, 0)
        if removed:
            logger.debug(f"Cart: removed all {removed} of item {item_id}")
        return removed

    def get_quantity(self, item_id: str) -> int:
        return self._entries.get(item_id, 0)

    def get_entries(self) -> dict[str, int]:
        return dict(self._entries)

    def is_empty(self) -> bool:
        return self.total_item_count() == 0

    def total_item_count(self) -> int:
        return sum(self._entries.values())

    def total_amount(self) -> int:
        total = 0
        for item_id, quantity in self._entries.items():
            catalog_item = self._catalog_lookup(item_id)
            if catalog_item is None:
                logger.warning(f"Cart entry {item_id} no longer resolves in the catalog, skipped in total")
                continue
            total += catalog_item.price * quantity
        return total

    def get_lines(self) -> list[CartLineDTO]:
        """Cart entries resolved against the catalog, in the order they were first added."""
        lines = []
        for item_id, quantity in self._entries.items():
            catalog_item = self._catalog_lookup(item_id)
            if catalog_item is not None:
                lines.append(CartLineDTO(item=catalog_item, quantity=quantity))
        return lines

    def clear(self) -> None:
        self._entries = {}

    def remove_ordered(self, ordered: dict[str, int]) -> None:
        """
        Take a submitted snapshot (item id -> quantity) out of the cart.

        Units added after the snapshot was taken stay in the cart. Entries that
        no longer resolve in the catalog are dropped, they can never be ordered.
        """
        for item_id, quantity in ordered.items():
            remaining = self._entries.get(item_id, 0) - quantity
            if remaining >= 1:
                self._entries[item_id] = remaining
            else:
                self._entries.pop(item_id, None)
        for item_id in [item_id for item_id in self._entries if self._catalog_lookup(item_id) is None]:
            del self._entries[item_id]

    @property
    def checkout_in_progress(self) -> bool:
        return self._checkout_in_progress

    @asynccontextmanager
    async def checkout_guard(self) -> AsyncIterator[None]:
        """
        Hold the cart for one order submission.

        There is no idempotency key on the order store, so a second submission
        while the first is suspended on I/O would insert a duplicate order.

        Raises:
            InvalidCartStateException: If a submission is already in flight
        """
        if self._checkout_in_progress:
            raise InvalidCartStateException("an order submission is already in progress")
        self._checkout_in_progress = True
        try:
            yield
        finally:
            self._checkout_in_progress = False
