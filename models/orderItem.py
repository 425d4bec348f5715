from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, ForeignKey, CheckConstraint, Index
from sqlalchemy.orm import relationship

from models.base import Base


class OrderItem(Base):
    __tablename__ = 'order_items'

    __table_args__ = (
        CheckConstraint('quantity > 0', name='ck_order_item_positive_quantity'),
        CheckConstraint('price > 0', name='ck_order_item_positive_price'),
        Index('ix_order_items_order_id', 'order_id'),
        # One line per catalog item within an order
        Index('ix_order_items_unique', 'order_id', 'food_id', unique=True),
    )

    id = Column(Integer, primary_key=True)
    order_id = Column(Integer, ForeignKey('orders.id', ondelete='CASCADE'), nullable=False)

    # Snapshot of the catalog item at purchase time, decoupled from the live catalog
    food_id = Column(String, nullable=False)
    food_name = Column(String, nullable=False)
    food_image = Column(String, nullable=True)
    quantity = Column(Integer, nullable=False)
    price = Column(Integer, nullable=False)  # Unit price at purchase

    order = relationship("Order", back_populates="items")


class OrderItemDTO(BaseModel):
    id: int | None = None
    order_id: int | None = None
    food_id: str | None = None
    food_name: str | None = None
    food_image: str | None = None
    quantity: int | None = None
    price: int | None = None

    @property
    def line_total(self) -> int:
        return self.price * self.quantity
