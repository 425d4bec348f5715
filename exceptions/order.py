"""
Order-related exceptions.
"""

from .base import StorefrontException


class OrderException(StorefrontException):
    pass


class OrderNotFoundException(OrderException):
    def __init__(self, order_id: int):
        super().__init__(f"Order {order_id} not found", order_id=order_id)
        self.order_id = order_id


class InvalidOrderStateException(OrderException):
    """Status change outside the intended progression, raised in strict mode only."""

    def __init__(self, order_id: int, current_state: str, requested_state: str):
        super().__init__(
            f"Order {order_id} cannot move from '{current_state}' to '{requested_state}'",
            order_id=order_id, current_state=current_state, requested_state=requested_state
        )
        self.order_id = order_id
        self.current_state = current_state
        self.requested_state = requested_state


class InvalidOrderStatusException(OrderException):
    """Value is not part of the OrderStatus vocabulary."""

    def __init__(self, status: str):
        super().__init__(f"Unknown order status '{status}'", status=status)
        self.status = status


class InvalidOrderTotalException(OrderException):
    """Total does not equal the line items plus delivery fee."""

    def __init__(self, expected: int, actual: int):
        super().__init__(f"Order total mismatch: expected {expected}, got {actual}",
                         expected=expected, actual=actual)
        self.expected = expected
        self.actual = actual


class OrderSubmissionException(OrderException):
    """Checkout failed after validation; the cart is left as it was."""

    def __init__(self, user_id: str, reason: str):
        super().__init__(f"Could not place order: {reason}", user_id=user_id, reason=reason)
        self.user_id = user_id
        self.reason = reason


class OrderStatusUpdateException(OrderException):
    def __init__(self, order_id: int, reason: str):
        super().__init__(f"Failed to update status of order {order_id}: {reason}",
                         order_id=order_id, reason=reason)
        self.order_id = order_id
        self.reason = reason


class OrderFetchException(OrderException):
    def __init__(self, reason: str, user_id: str | None = None):
        super().__init__(f"Failed to load orders: {reason}", user_id=user_id, reason=reason)
        self.user_id = user_id
        self.reason = reason
