"""
ORM models of the order store.

Importing the package registers both tables on Base.metadata, so
create_all() and the Order <-> OrderItem relationship resolve.
"""

from models.base import Base
from models.order import Order
from models.orderItem import OrderItem

__all__ = ['Base', 'Order', 'OrderItem']
