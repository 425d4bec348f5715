"""
Order Management Service

Unified order listing for both the customer's order history and the admin
dashboard. Both views show the same joined structure (order + line items),
newest first; the only difference is the owner scope.

Usage:
    # Customer context
    await OrderManagementService.get_order_list(user_id="c0ffee", session=session)

    # Admin context
    await OrderManagementService.get_order_list(user_id=None, session=session)
"""

import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from enums.order_status import OrderStatus
from enums.view_entity import ViewEntity
from exceptions.order import OrderFetchException
from models.order import OrderWithItemsDTO
from repositories.order import OrderRepository
from repositories.orderItem import OrderItemRepository

logger = logging.getLogger(__name__)


class OrderManagementService:
    """Unified order listing for customer and admin views"""

    STATUS_LABELS = {
        ViewEntity.USER: {
            OrderStatus.PENDING: "Pending",
            OrderStatus.CONFIRMED: "Confirmed",
            OrderStatus.PREPARING: "Preparing",
            OrderStatus.OUT_FOR_DELIVERY: "On the way",
            OrderStatus.DELIVERED: "Delivered",
            OrderStatus.CANCELLED: "Cancelled",
        },
        ViewEntity.ADMIN: {
            OrderStatus.PENDING: "Pending",
            OrderStatus.CONFIRMED: "Confirmed",
            OrderStatus.PREPARING: "Preparing",
            OrderStatus.OUT_FOR_DELIVERY: "Out for Delivery",
            OrderStatus.DELIVERED: "Delivered",
            OrderStatus.CANCELLED: "Cancelled",
        },
    }

    @staticmethod
    async def get_order_list(user_id: str | None, session: AsyncSession) -> list[OrderWithItemsDTO]:
        """
        Load orders with their line items, newest first.

        Args:
            user_id: Owner to restrict to, or None for every order (admin)
            session: Database session

        Returns:
            Orders joined with their line items

        Raises:
            OrderFetchException: If the store could not be read
        """
        try:
            if user_id is None:
                orders = await OrderRepository.get_all(session)
            else:
                orders = await OrderRepository.get_by_user_id(user_id, session)
            items_by_order = await OrderItemRepository.get_by_order_ids([order.id for order in orders], session)
        except SQLAlchemyError as e:
            scope = f"user {user_id}" if user_id else "all users"
            logger.error(f"Error fetching orders for {scope}: {e}")
            raise OrderFetchException("the order store is unavailable", user_id=user_id) from e

        return [
            OrderWithItemsDTO(**order.model_dump(), items=items_by_order.get(order.id, []))
            for order in orders
        ]

    @staticmethod
    def get_status_label(status: OrderStatus | str | None, entity: ViewEntity = ViewEntity.USER) -> str:
        # Rows written before a status existed render as pending
        if status is None:
            status = OrderStatus.PENDING
        try:
            status = OrderStatus(status)
        except ValueError:
            return str(status)
        return OrderManagementService.STATUS_LABELS[entity][status]
