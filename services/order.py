import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

import config
from db import session_commit, session_rollback
from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from exceptions.auth import NotAuthenticatedException
from exceptions.cart import EmptyCartException
from exceptions.delivery import MissingDeliveryDetailsException
from exceptions.order import OrderSubmissionException
from models.checkout import DeliveryDetailsDTO
from models.order import OrderDTO
from models.orderItem import OrderItemDTO
from repositories.order import OrderRepository
from repositories.orderItem import OrderItemRepository
from services.cart import CartStore
from services.pricing import PricingService

logger = logging.getLogger(__name__)


class OrderService:

    @staticmethod
    def build_line_items(cart: CartStore) -> list[OrderItemDTO]:
        """
        Snapshot the cart into line items (one per distinct catalog item).

        Name, image and unit price are copied from the catalog so the order
        keeps showing what was bought even if the menu changes later.
        """
        return [
            OrderItemDTO(
                food_id=line.item.id,
                food_name=line.item.name,
                food_image=line.item.image,
                quantity=line.quantity,
                price=line.item.price
            )
            for line in cart.get_lines()
        ]

    @staticmethod
    def resolve_payment_method(payment_method: PaymentMethod | str | None, user_id: str) -> PaymentMethod:
        if payment_method is None or payment_method == "":
            return config.DEFAULT_PAYMENT_METHOD
        try:
            return PaymentMethod(payment_method)
        except ValueError:
            raise OrderSubmissionException(user_id, f"unsupported payment method '{payment_method}'")

    @staticmethod
    async def submit_order(
        cart: CartStore,
        user_id: str | None,
        delivery: DeliveryDetailsDTO,
        session: AsyncSession,
        payment_method: PaymentMethod | str | None = None
    ) -> int:
        """
        Turn the current cart into a persisted order.

        Flow:
        1. Validate: signed in, cart not empty, delivery details complete
        2. Price the cart (subtotal + flat delivery fee)
        3. Insert the order row (status pending) and get its id
        4. Insert one line item per cart entry, same transaction
        5. Commit, then take the ordered units out of the cart

        Nothing is written if validation fails. If the write fails the
        transaction is rolled back and the cart is left as it was, so the
        user can simply retry.

        Args:
            cart: The session's cart store
            user_id: Identity provider id of the signed-in user (None if signed out)
            delivery: Delivery address and phone from the checkout form
            session: Database session
            payment_method: Payment tag, defaults to config.DEFAULT_PAYMENT_METHOD

        Returns:
            Id of the new order

        Raises:
            NotAuthenticatedException: No signed-in user
            EmptyCartException: Nothing to order
            MissingDeliveryDetailsException: Required delivery fields missing or blank
            InvalidCartStateException: A submission for this cart is already in flight
            OrderSubmissionException: The order could not be written
        """
        if user_id is None:
            raise NotAuthenticatedException("place an order")
        if cart.is_empty():
            raise EmptyCartException(user_id)
        missing_fields = delivery.missing_fields()
        if missing_fields:
            raise MissingDeliveryDetailsException(missing_fields)
        method = OrderService.resolve_payment_method(payment_method, user_id)

        async with cart.checkout_guard():
            line_items = OrderService.build_line_items(cart)
            if not line_items:
                # Only entries that no longer resolve in the catalog
                raise EmptyCartException(user_id)

            totals = PricingService.calculate_totals(cart.total_amount())
            PricingService.verify_order_total(totals.total, line_items)

            order_dto = OrderDTO(
                user_id=user_id,
                status=OrderStatus.PENDING,
                total_amount=totals.total,
                delivery_address=delivery.street.strip(),
                delivery_city=delivery.city.strip(),
                delivery_state=delivery.state.strip(),
                delivery_zip=delivery.zip_code.strip(),
                phone=delivery.phone.strip(),
                payment_method=method
            )

            try:
                order_id = await OrderRepository.create(order_dto, session)
                await OrderItemRepository.create_many(
                    [item.model_copy(update={"order_id": order_id}) for item in line_items],
                    session
                )
                await session_commit(session)
            except SQLAlchemyError as e:
                await session_rollback(session)
                logger.error(f"❌ Order submission failed for user {user_id}: {e}")
                raise OrderSubmissionException(user_id, "the order could not be saved, please try again") from e

        cart.remove_ordered({item.food_id: item.quantity for item in line_items})
        logger.info(
            f"✅ Order {order_id} placed by user {user_id}: {len(line_items)} line(s), "
            f"total {PricingService.format_amount(totals.total)} ({method.value})"
        )
        return order_id
