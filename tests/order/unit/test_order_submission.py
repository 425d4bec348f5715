"""
Unit Tests: OrderService.submit_order()

Runs against an in-memory SQLite store and covers:
- happy path (order row + line items, ordered units taken out of the cart)
- rejections before any write (signed out, empty cart, missing delivery fields)
- rollback on a failed line-item write (no orphan order, cart kept)
- change feed INSERT event only after commit
"""

import pytest
from unittest.mock import AsyncMock, patch
from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError

from enums.change_event_type import ChangeEventType
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from exceptions.auth import NotAuthenticatedException
from exceptions.cart import EmptyCartException, InvalidCartStateException
from exceptions.delivery import MissingDeliveryDetailsException
from exceptions.order import OrderSubmissionException
from models.catalogItem import CatalogItemDTO
from models.order import Order
from models.orderItem import OrderItem
from repositories.order import OrderRepository
from repositories.orderItem import OrderItemRepository
from services.cart import CartStore
from services.order import OrderService

CATALOG = {
    "itemA": CatalogItemDTO(id="itemA", name="Item A", description="", price=100,
                            image="a.jpg", category="Test", rating=4.5),
    "itemB": CatalogItemDTO(id="itemB", name="Item B", description="", price=50,
                            image="b.jpg", category="Test", rating=4.0),
}


@pytest.fixture
def cart():
    cart = CartStore(catalog_lookup=CATALOG.get)
    cart.add("itemA")
    cart.add("itemA")
    cart.add("itemB")
    return cart


async def _count(session, model) -> int:
    result = await session.execute(select(func.count()).select_from(model))
    return result.scalar_one()


class TestSubmitOrderSuccess:

    @pytest.mark.asyncio
    async def test_creates_order_with_line_items(self, cart, delivery_details, test_session):
        # Act
        order_id = await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        # Assert
        order = await OrderRepository.get_by_id(order_id, test_session)
        assert order.user_id == "customer-1"
        assert order.status == OrderStatus.PENDING
        assert order.total_amount == 300  # 100*2 + 50*1 + 50 delivery
        assert order.payment_method == PaymentMethod.COD
        assert order.delivery_address == "House 12, Road 5, Dhanmondi"
        assert order.delivery_city == "Dhaka"
        assert order.delivery_zip == "1205"
        assert order.phone == "01712345678"
        assert order.created_at is not None

        items = await OrderItemRepository.get_by_order_id(order_id, test_session)
        assert {(item.food_id, item.quantity, item.price) for item in items} == {
            ("itemA", 2, 100),
            ("itemB", 1, 50),
        }
        assert {item.food_name for item in items} == {"Item A", "Item B"}

    @pytest.mark.asyncio
    async def test_cart_cleared_after_success(self, cart, delivery_details, test_session):
        await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)
        assert cart.is_empty()
        assert cart.checkout_in_progress is False

    @pytest.mark.asyncio
    async def test_items_added_during_submission_stay_in_cart(self, cart, delivery_details, test_session):
        real_create_many = OrderItemRepository.create_many

        async def add_while_writing(items, session):
            # Customer keeps shopping while the insert is suspended
            cart.add("itemA")
            cart.add("itemB")
            cart.add("itemB")
            return await real_create_many(items, session)

        with patch('services.order.OrderItemRepository.create_many', side_effect=add_while_writing):
            order_id = await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        items = await OrderItemRepository.get_by_order_id(order_id, test_session)
        assert {(item.food_id, item.quantity) for item in items} == {("itemA", 2), ("itemB", 1)}
        assert cart.get_entries() == {"itemA": 1, "itemB": 2}

    @pytest.mark.asyncio
    async def test_total_matches_line_items_plus_fee(self, cart, delivery_details, test_session):
        order_id = await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        order = await OrderRepository.get_by_id(order_id, test_session)
        items = await OrderItemRepository.get_by_order_id(order_id, test_session)
        assert order.total_amount == sum(item.line_total for item in items) + 50

    @pytest.mark.asyncio
    async def test_explicit_payment_method(self, cart, delivery_details, test_session):
        order_id = await OrderService.submit_order(cart, "customer-1", delivery_details, test_session,
                                                   payment_method="card")
        order = await OrderRepository.get_by_id(order_id, test_session)
        assert order.payment_method == PaymentMethod.CARD

    @pytest.mark.asyncio
    async def test_insert_published_after_commit(self, cart, delivery_details, test_session, change_feed):
        received = []
        change_feed.subscribe("orders", received.append, event_type=ChangeEventType.INSERT)

        order_id = await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        assert len(received) == 1
        assert received[0].new.id == order_id
        assert received[0].new.status == OrderStatus.PENDING


class TestSubmitOrderRejected:

    @pytest.mark.asyncio
    async def test_signed_out_user_rejected(self, cart, delivery_details, test_session):
        with pytest.raises(NotAuthenticatedException):
            await OrderService.submit_order(cart, None, delivery_details, test_session)

        assert await _count(test_session, Order) == 0
        assert cart.total_item_count() == 3

    @pytest.mark.asyncio
    async def test_empty_cart_rejected_without_write(self, delivery_details, test_session):
        cart = CartStore(catalog_lookup=CATALOG.get)

        with pytest.raises(EmptyCartException):
            await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        assert await _count(test_session, Order) == 0
        assert await _count(test_session, OrderItem) == 0

    @pytest.mark.asyncio
    async def test_cart_with_only_unknown_items_rejected(self, delivery_details, test_session):
        cart = CartStore(catalog_lookup=CATALOG.get)
        cart.add("discontinued")

        with pytest.raises(EmptyCartException):
            await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        assert await _count(test_session, Order) == 0

    @pytest.mark.asyncio
    async def test_missing_delivery_fields_listed(self, cart, delivery_details, test_session):
        delivery = delivery_details.model_copy(update={"city": "   ", "phone": None})

        with pytest.raises(MissingDeliveryDetailsException) as exc_info:
            await OrderService.submit_order(cart, "customer-1", delivery, test_session)

        assert exc_info.value.missing_fields == ["city", "phone"]
        assert await _count(test_session, Order) == 0
        assert cart.total_item_count() == 3

    @pytest.mark.asyncio
    async def test_unknown_payment_method_rejected(self, cart, delivery_details, test_session):
        with pytest.raises(OrderSubmissionException, match="unsupported payment method"):
            await OrderService.submit_order(cart, "customer-1", delivery_details, test_session,
                                            payment_method="bitcoin")

        assert await _count(test_session, Order) == 0

    @pytest.mark.asyncio
    async def test_concurrent_submission_rejected(self, cart, delivery_details, test_session):
        async with cart.checkout_guard():
            with pytest.raises(InvalidCartStateException):
                await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        assert await _count(test_session, Order) == 0
        assert cart.total_item_count() == 3


class TestSubmitOrderStoreFailure:

    @pytest.mark.asyncio
    @patch('services.order.OrderItemRepository.create_many', new_callable=AsyncMock)
    async def test_line_item_failure_rolls_back_order(
        self,
        mock_create_many,
        cart,
        delivery_details,
        test_session,
        change_feed
    ):
        # Arrange
        mock_create_many.side_effect = SQLAlchemyError("disk I/O error")
        received = []
        change_feed.subscribe("orders", received.append)

        # Act
        with pytest.raises(OrderSubmissionException, match="please try again"):
            await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        # Assert: no orphan order, nothing published, cart intact for retry
        assert await _count(test_session, Order) == 0
        assert received == []
        assert cart.get_entries() == {"itemA": 2, "itemB": 1}
        assert cart.checkout_in_progress is False

    @pytest.mark.asyncio
    async def test_retry_after_failure_succeeds(self, cart, delivery_details, test_session):
        with patch('services.order.OrderItemRepository.create_many',
                   new_callable=AsyncMock, side_effect=SQLAlchemyError("locked")):
            with pytest.raises(OrderSubmissionException):
                await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        order_id = await OrderService.submit_order(cart, "customer-1", delivery_details, test_session)

        assert await _count(test_session, Order) == 1
        assert len(await OrderItemRepository.get_by_order_id(order_id, test_session)) == 2
