import logging

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

import db
from db import session_commit, session_rollback
from enums.order_status import OrderStatus
from exceptions.auth import AdminAccessDeniedException, NotAuthenticatedException
from exceptions.order import InvalidOrderStatusException, OrderNotFoundException, OrderStatusUpdateException
from models.order import OrderDTO, OrderWithItemsDTO
from repositories.order import OrderRepository
from services.order_management import OrderManagementService
from services.session_context import SessionContext
from utils.order_state_machine import OrderStateMachine
from utils.permission_utils import AdminAuthorizer

logger = logging.getLogger(__name__)


class AdminOrderService:

    @staticmethod
    def parse_status(status: OrderStatus | str) -> OrderStatus:
        try:
            return OrderStatus(status)
        except ValueError:
            raise InvalidOrderStatusException(str(status))

    @staticmethod
    async def set_status(
        order_id: int,
        status: OrderStatus | str,
        session: AsyncSession,
        admin_id: str | None = None
    ) -> OrderDTO:
        """
        Write a new status into an order.

        Any status of the vocabulary is accepted at any time unless strict
        transitions are configured (see OrderStateMachine). Concurrent writers
        are not coordinated: the last write wins.

        Returns:
            The updated order

        Raises:
            InvalidOrderStatusException: status is not part of OrderStatus
            OrderNotFoundException: No such order
            InvalidOrderStateException: Off-path transition in strict mode
            OrderStatusUpdateException: The store rejected the write
        """
        new_status = AdminOrderService.parse_status(status)
        try:
            current = await OrderRepository.get_by_id(order_id, session)
            if current is None:
                raise OrderNotFoundException(order_id)
            OrderStateMachine.check_transition(order_id, current.status, new_status, admin_id=admin_id)
            updated = await OrderRepository.update_status(order_id, new_status, session)
            if updated is None:
                raise OrderNotFoundException(order_id)
            await session_commit(session)
        except SQLAlchemyError as e:
            await session_rollback(session)
            logger.error(f"❌ Failed to set status of order {order_id} to {new_status.value}: {e}")
            raise OrderStatusUpdateException(order_id, "the order store rejected the update") from e
        return updated


class AdminOrdersView:
    """
    Admin dashboard: every order of every user, with a status selector per order.

    open() asks the authorizer again on each entry; the verdict is not cached
    beyond the opened view.
    """

    def __init__(self, session_context: SessionContext, authorizer: AdminAuthorizer,
                 session_maker: async_sessionmaker[AsyncSession] | None = None):
        self._session_context = session_context
        self._authorizer = authorizer
        self._session_maker = session_maker or db.session_maker
        self._orders: list[OrderWithItemsDTO] = []
        self._admin_id: str | None = None

    @property
    def orders(self) -> list[OrderWithItemsDTO]:
        return list(self._orders)

    @property
    def is_open(self) -> bool:
        return self._admin_id is not None

    async def open(self) -> list[OrderWithItemsDTO]:
        """
        Raises:
            NotAuthenticatedException: Nobody is signed in
            AdminAccessDeniedException: Signed-in user is not an admin
            OrderFetchException: Orders could not be loaded
        """
        self._admin_id = None
        user_id = self._session_context.user_id
        if user_id is None:
            raise NotAuthenticatedException("open the admin dashboard")
        if not await self._authorizer.is_admin(user_id):
            logger.warning(f"User {user_id} denied access to the admin dashboard")
            raise AdminAccessDeniedException(user_id)
        self._admin_id = user_id
        return await self.load()

    def close(self) -> None:
        self._admin_id = None
        self._orders = []

    async def load(self) -> list[OrderWithItemsDTO]:
        self._ensure_open()
        async with self._session_maker() as session:
            self._orders = await OrderManagementService.get_order_list(None, session)
        return self.orders

    async def set_status(self, order_id: int, status: OrderStatus | str) -> OrderDTO:
        """
        Persist a new status and patch the local list without re-fetching.

        On any failure the local list is left untouched and the exception propagates.
        """
        self._ensure_open()
        async with self._session_maker() as session:
            updated = await AdminOrderService.set_status(order_id, status, session, admin_id=self._admin_id)
        self._orders = [
            order.model_copy(update={"status": updated.status}) if order.id == order_id else order
            for order in self._orders
        ]
        logger.info(f"Order {order_id} status changed to {updated.status.value} by admin {self._admin_id}")
        return updated

    def _ensure_open(self) -> None:
        if self._admin_id is None:
            raise AdminAccessDeniedException(self._session_context.user_id or "anonymous")
