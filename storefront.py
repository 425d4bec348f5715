"""
Storefront composition root.

Builds the per-client object graph (cart, session context, order views)
around an external identity provider and admin authorizer:

    await Storefront.startup()
    storefront = Storefront(identity_provider)
    await storefront.start()
    storefront.cart.add("1")
    order_id = await storefront.place_order(delivery)
    ...
    await storefront.close()
"""

import logging

from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import db
from enums.payment_method import PaymentMethod
from models.catalogItem import CatalogItemDTO
from models.checkout import CheckoutTotalsDTO, DeliveryDetailsDTO
from repositories.catalog import CatalogRepository
from services.admin import AdminOrdersView
from services.cart import CartStore
from services.my_orders import MyOrdersView
from services.order import OrderService
from services.pricing import PricingService
from services.session_context import IdentityProvider, SessionContext
from utils.change_feed import ChangeFeed
from utils.logging_config import setup_logging
from utils.permission_utils import AdminAuthorizer, ConfigAdminAuthorizer

logger = logging.getLogger(__name__)


class Storefront:
    def __init__(self, identity_provider: IdentityProvider, authorizer: AdminAuthorizer | None = None,
                 session_maker: async_sessionmaker[AsyncSession] | None = None,
                 change_feed: ChangeFeed | None = None):
        self.session_maker = session_maker or db.session_maker
        self.cart = CartStore()
        self.session_context = SessionContext(identity_provider, self.cart)
        self.my_orders = MyOrdersView(self.session_context, change_feed=change_feed,
                                      session_maker=self.session_maker)
        self.admin_orders = AdminOrdersView(self.session_context, authorizer or ConfigAdminAuthorizer(),
                                            session_maker=self.session_maker)

    @staticmethod
    async def startup():
        """Process-wide setup, once before the first Storefront is started."""
        setup_logging()
        await db.create_db_and_tables()
        logger.info("Storefront database ready")

    async def start(self) -> None:
        await self.session_context.start()

    async def close(self) -> None:
        await self.my_orders.close()
        self.admin_orders.close()
        self.session_context.close()

    @staticmethod
    def get_catalog(category: str | None = None) -> tuple[CatalogItemDTO, ...]:
        items = CatalogRepository.get_all()
        if category is None or category == CatalogRepository.get_categories()[0]:
            return items
        return tuple(item for item in items if item.category == category)

    def get_checkout_totals(self) -> CheckoutTotalsDTO:
        return PricingService.calculate_totals(self.cart.total_amount())

    async def place_order(self, delivery: DeliveryDetailsDTO,
                          payment_method: PaymentMethod | str | None = None) -> int:
        """Submit the cart for the signed-in user. See OrderService.submit_order for errors."""
        async with self.session_maker() as session:
            return await OrderService.submit_order(
                self.cart, self.session_context.user_id, delivery, session, payment_method
            )
