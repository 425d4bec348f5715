"""
Delivery-details exceptions.
"""

from .base import StorefrontException


class DeliveryException(StorefrontException):
    pass


class MissingDeliveryDetailsException(DeliveryException):
    """Required checkout fields are missing or blank; nothing was written."""

    def __init__(self, missing_fields: list[str]):
        super().__init__(f"Missing delivery details: {', '.join(missing_fields)}", missing_fields=missing_fields)
        self.missing_fields = missing_fields
