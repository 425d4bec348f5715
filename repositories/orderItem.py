from collections import defaultdict

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from db import session_execute, session_flush
from models.orderItem import OrderItem, OrderItemDTO


class OrderItemRepository:
    @staticmethod
    async def create_many(order_items: list[OrderItemDTO], session: AsyncSession) -> None:
        for order_item_dto in order_items:
            order_item = OrderItem(**order_item_dto.model_dump(exclude_none=True))
            session.add(order_item)
        await session_flush(session)

    @staticmethod
    async def get_by_order_id(order_id: int, session: AsyncSession) -> list[OrderItemDTO]:
        stmt = select(OrderItem).where(OrderItem.order_id == order_id).order_by(OrderItem.id)
        order_items = await session_execute(stmt, session)
        return [OrderItemDTO.model_validate(order_item, from_attributes=True) for order_item in order_items.scalars().all()]

    @staticmethod
    async def get_by_order_ids(order_ids: list[int], session: AsyncSession) -> dict[int, list[OrderItemDTO]]:
        """
        Batch-load line items for several orders with a single query.

        Returns:
            Mapping order_id -> line items; orders without items are absent
        """
        if not order_ids:
            return {}
        stmt = select(OrderItem).where(OrderItem.order_id.in_(order_ids)).order_by(OrderItem.id)
        order_items = await session_execute(stmt, session)
        items_by_order = defaultdict(list)
        for order_item in order_items.scalars().all():
            items_by_order[order_item.order_id].append(OrderItemDTO.model_validate(order_item, from_attributes=True))
        return dict(items_by_order)
