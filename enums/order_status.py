from enum import Enum


class OrderStatus(str, Enum):
    PENDING = "pending"                      # Placed, not yet seen by the kitchen
    CONFIRMED = "confirmed"                  # Accepted by an admin
    PREPARING = "preparing"                  # Being cooked
    OUT_FOR_DELIVERY = "out_for_delivery"    # Handed to the rider
    DELIVERED = "delivered"                  # Received by the customer (terminal)
    CANCELLED = "cancelled"                  # Cancelled from any non-terminal state (terminal)

    @property
    def is_terminal(self) -> bool:
        return self in (OrderStatus.DELIVERED, OrderStatus.CANCELLED)
