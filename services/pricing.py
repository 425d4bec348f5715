import logging

import config
from exceptions.order import InvalidOrderTotalException
from models.checkout import CheckoutTotalsDTO
from models.orderItem import OrderItemDTO

logger = logging.getLogger(__name__)


class PricingService:
    """Checkout arithmetic. All amounts are whole currency units, nothing is ever divided."""

    @staticmethod
    def get_delivery_fee(subtotal: int) -> int:
        """Flat delivery fee, charged only when there is something to deliver."""
        return config.DELIVERY_FEE if subtotal > 0 else 0

    @staticmethod
    def calculate_totals(subtotal: int) -> CheckoutTotalsDTO:
        delivery_fee = PricingService.get_delivery_fee(subtotal)
        return CheckoutTotalsDTO(
            subtotal=subtotal,
            delivery_fee=delivery_fee,
            total=subtotal + delivery_fee
        )

    @staticmethod
    def verify_order_total(total_amount: int, line_items: list[OrderItemDTO]) -> None:
        """
        Recompute an order total from its line-item snapshots.

        Guards the write path against a total that was computed from a
        different cart state than the line items being stored.

        Raises:
            InvalidOrderTotalException: If total_amount != sum(price * quantity) + delivery fee
        """
        subtotal = sum(item.price * item.quantity for item in line_items)
        expected = PricingService.calculate_totals(subtotal).total
        if expected != total_amount:
            logger.error(f"Order total mismatch: computed {expected}, submitted {total_amount}")
            raise InvalidOrderTotalException(expected=expected, actual=total_amount)

    @staticmethod
    def format_amount(amount: int) -> str:
        """
        Render an amount with the currency glyph.

        Examples:
            450 → ৳450
            1200 → ৳1200
        """
        return f"{config.CURRENCY_SYMBOL}{amount}"
