import logging

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from enums.order_status import OrderStatus
from models.order import Order, OrderDTO

logger = logging.getLogger(__name__)


class OrderRepository:
    @staticmethod
    async def create(order_dto: OrderDTO, session: AsyncSession) -> int:
        """
        Insert an order row and return the assigned id.

        Only flushes, the caller owns the transaction (line items go into the same one).
        """
        order = Order(**order_dto.model_dump(exclude_none=True))
        session.add(order)
        await session_flush(session)
        return order.id

    @staticmethod
    async def get_by_id(order_id: int, session: AsyncSession) -> OrderDTO | None:
        stmt = select(Order).where(Order.id == order_id)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is not None:
            return OrderDTO.model_validate(order, from_attributes=True)
        else:
            return None

    @staticmethod
    async def get_by_user_id(user_id: str, session: AsyncSession) -> list[OrderDTO]:
        # id breaks ties between orders created within the same timestamp
        stmt = (select(Order)
                .where(Order.user_id == user_id)
                .order_by(Order.created_at.desc(), Order.id.desc()))
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def get_all(session: AsyncSession) -> list[OrderDTO]:
        stmt = select(Order).order_by(Order.created_at.desc(), Order.id.desc())
        orders = await session_execute(stmt, session)
        return [OrderDTO.model_validate(order, from_attributes=True) for order in orders.scalars().all()]

    @staticmethod
    async def update_status(order_id: int, status: OrderStatus, session: AsyncSession) -> OrderDTO | None:
        """
        Overwrite the status of an order (last write wins).

        Goes through the ORM instance rather than a bulk UPDATE so the change is
        picked up by the row change feed on commit. Only flushes.

        Returns:
            Updated OrderDTO, or None if the order does not exist
        """
        stmt = select(Order).where(Order.id == order_id)
        order = await session_execute(stmt, session)
        order = order.scalar()
        if order is None:
            return None
        order.status = status
        await session_flush(session)
        return OrderDTO.model_validate(order, from_attributes=True)
