from enum import Enum


class PaymentMethod(str, Enum):
    """
    Payment method tag collected at checkout.

    Stored as-is on the order, no gateway is involved for either value.
    """

    COD = "cod"     # Cash on delivery
    CARD = "card"   # Card payment on delivery
