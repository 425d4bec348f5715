from datetime import datetime

from pydantic import BaseModel
from sqlalchemy import Column, Integer, String, DateTime, CheckConstraint, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from enums.order_status import OrderStatus
from enums.payment_method import PaymentMethod
from models.base import Base
from models.orderItem import OrderItemDTO


def _enum_values(enum_cls) -> list[str]:
    # Persist the lowercase wire values ("out_for_delivery"), not the member names
    return [member.value for member in enum_cls]


class Order(Base):
    __tablename__ = 'orders'

    id = Column(Integer, primary_key=True, unique=True)
    # Opaque id from the identity provider, no local users table
    user_id = Column(String, nullable=False)
    status = Column(SQLEnum(OrderStatus, values_callable=_enum_values, native_enum=False, validate_strings=True),
                    nullable=False, default=OrderStatus.PENDING)
    total_amount = Column(Integer, nullable=False)
    created_at = Column(DateTime, nullable=False, default=datetime.now)

    # Delivery details, immutable after creation
    delivery_address = Column(String, nullable=False)
    delivery_city = Column(String, nullable=False)
    delivery_state = Column(String, nullable=False)
    delivery_zip = Column(String, nullable=False)
    phone = Column(String, nullable=False)

    # Payment method tag only, no gateway
    payment_method = Column(SQLEnum(PaymentMethod, values_callable=_enum_values, native_enum=False,
                                    validate_strings=True),
                            nullable=False, default=PaymentMethod.COD)

    items = relationship('OrderItem', back_populates='order', cascade='all, delete-orphan', passive_deletes=True)

    __table_args__ = (
        CheckConstraint('total_amount > 0', name='check_order_total_amount_positive'),
        Index('ix_orders_user_created', 'user_id', 'created_at'),
    )


class OrderDTO(BaseModel):
    id: int | None = None
    user_id: str | None = None
    status: OrderStatus | None = None
    total_amount: int | None = None
    created_at: datetime | None = None
    delivery_address: str | None = None
    delivery_city: str | None = None
    delivery_state: str | None = None
    delivery_zip: str | None = None
    phone: str | None = None
    payment_method: PaymentMethod | None = None


class OrderWithItemsDTO(OrderDTO):
    """Order joined with its line items, as shown in the order lists."""
    items: list[OrderItemDTO] = []

    @property
    def item_count(self) -> int:
        return len(self.items)

    @property
    def item_names(self) -> str:
        return ", ".join(item.food_name for item in self.items)
