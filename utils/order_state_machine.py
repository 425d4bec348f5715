"""
Order State Machine describing the intended order status progression.

Admins may set any status at any time (last write wins), so by default the
machine is advisory: an off-path transition is accepted and logged as a
warning. With config.ORDER_STATUS_STRICT_TRANSITIONS enabled the same check
rejects the transition instead.
"""

import logging
from typing import Dict, List, Optional, Set

import config
from enums.order_status import OrderStatus
from exceptions.order import InvalidOrderStateException

logger = logging.getLogger(__name__)


class OrderStatusTransition:
    """Represents an intended status transition with metadata"""

    def __init__(self, from_status: OrderStatus, to_status: OrderStatus, description: str = ""):
        self.from_status = from_status
        self.to_status = to_status
        self.description = description

    def __repr__(self):
        return f"{self.from_status.value} -> {self.to_status.value}"


class OrderStateMachine:
    """
    Intended status transitions:
    - pending -> confirmed -> preparing -> out_for_delivery -> delivered
    - any non-terminal status -> cancelled

    Terminal (in intent): delivered, cancelled
    """

    VALID_TRANSITIONS: List[OrderStatusTransition] = [
        OrderStatusTransition(OrderStatus.PENDING, OrderStatus.CONFIRMED, "Order accepted by the kitchen"),
        OrderStatusTransition(OrderStatus.CONFIRMED, OrderStatus.PREPARING, "Cooking started"),
        OrderStatusTransition(OrderStatus.PREPARING, OrderStatus.OUT_FOR_DELIVERY, "Handed to the rider"),
        OrderStatusTransition(OrderStatus.OUT_FOR_DELIVERY, OrderStatus.DELIVERED, "Delivered to the customer"),
    ] + [
        OrderStatusTransition(status, OrderStatus.CANCELLED, "Order cancelled")
        for status in OrderStatus if not status.is_terminal
    ]

    _transition_map: Dict[OrderStatus, Set[OrderStatus]] = {}
    _transition_descriptions: Dict[tuple, str] = {}

    @classmethod
    def _build_transition_map(cls):
        if cls._transition_map:
            return  # Already built

        for transition in cls.VALID_TRANSITIONS:
            cls._transition_map.setdefault(transition.from_status, set()).add(transition.to_status)
            cls._transition_descriptions[(transition.from_status, transition.to_status)] = transition.description

    @classmethod
    def is_valid_transition(cls, from_status: OrderStatus, to_status: OrderStatus) -> bool:
        """
        Check if a status transition follows the intended progression.

        Setting the current status again counts as valid (no-op).
        """
        cls._build_transition_map()

        if from_status == to_status:
            return True

        return to_status in cls._transition_map.get(from_status, set())

    @classmethod
    def get_valid_transitions(cls, from_status: OrderStatus) -> List[OrderStatus]:
        cls._build_transition_map()
        return sorted(cls._transition_map.get(from_status, set()), key=lambda status: list(OrderStatus).index(status))

    @classmethod
    def get_transition_description(cls, from_status: OrderStatus, to_status: OrderStatus) -> str:
        cls._build_transition_map()
        return cls._transition_descriptions.get(
            (from_status, to_status),
            f"Transition from {from_status.value} to {to_status.value}"
        )

    @classmethod
    def is_final_status(cls, status: OrderStatus) -> bool:
        return status.is_terminal

    @classmethod
    def check_transition(cls, order_id: int, from_status: Optional[OrderStatus], to_status: OrderStatus,
                         admin_id: Optional[str] = None, strict: Optional[bool] = None) -> bool:
        """
        Check a status change against the intended progression and write an audit log line.

        Args:
            order_id: ID of the order being transitioned
            from_status: Current order status (None is treated as pending)
            to_status: Requested status
            admin_id: Admin performing the change
            strict: Reject off-path transitions; defaults to config.ORDER_STATUS_STRICT_TRANSITIONS

        Returns:
            True if the transition follows the intended progression, False if it
            does not but was allowed (advisory mode)

        Raises:
            InvalidOrderStateException: Off-path transition in strict mode
        """
        if strict is None:
            strict = config.ORDER_STATUS_STRICT_TRANSITIONS
        from_status = from_status or OrderStatus.PENDING
        performer = f"admin {admin_id}" if admin_id else "system"

        if cls.is_valid_transition(from_status, to_status):
            logger.info(f"ORDER_STATUS_TRANSITION: Order {order_id} {from_status.value} -> {to_status.value} "
                        f"by {performer}: {cls.get_transition_description(from_status, to_status)}")
            return True

        if strict:
            logger.error(f"Rejected status transition for order {order_id}: "
                         f"{from_status.value} -> {to_status.value} by {performer}")
            raise InvalidOrderStateException(order_id, from_status.value, to_status.value)

        logger.warning(f"ORDER_STATUS_TRANSITION: Order {order_id} {from_status.value} -> {to_status.value} "
                       f"by {performer} is outside the usual progression, applying anyway")
        return False
