"""
Cart-related exceptions.
"""

from .base import StorefrontException


class CartException(StorefrontException):
    pass


class EmptyCartException(CartException):
    """Checkout attempted with nothing (resolvable) in the cart."""

    def __init__(self, user_id: str):
        super().__init__("Your cart is empty", user_id=user_id)
        self.user_id = user_id


class InvalidCartStateException(CartException):
    """The cart cannot take part in the requested operation right now."""

    def __init__(self, reason: str):
        super().__init__(f"Cart unavailable: {reason}", reason=reason)
        self.reason = reason
