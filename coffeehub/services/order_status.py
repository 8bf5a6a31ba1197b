"""Order lifecycle.

    PENDING -> PREPARING -> READY -> COMPLETED
    PENDING -> CANCELLED

Transitions only move forward and no state is entered twice. COMPLETED and
CANCELLED are terminal.
"""
from typing import Optional
from models.order import OrderStatus

NEXT_STATUS = {
    OrderStatus.PENDING: OrderStatus.PREPARING,
    OrderStatus.PREPARING: OrderStatus.READY,
    OrderStatus.READY: OrderStatus.COMPLETED,
}

ALLOWED_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.PREPARING, OrderStatus.CANCELLED},
    OrderStatus.PREPARING: {OrderStatus.READY},
    OrderStatus.READY: {OrderStatus.COMPLETED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}


def next_status(status) -> Optional[OrderStatus]:
    """The single forward action offered for ``status``, or None when terminal."""
    return NEXT_STATUS.get(OrderStatus(status))


def is_terminal(status) -> bool:
    return not ALLOWED_TRANSITIONS[OrderStatus(status)]


def can_cancel(status) -> bool:
    return OrderStatus.CANCELLED in ALLOWED_TRANSITIONS[OrderStatus(status)]


def can_transition(current, target) -> bool:
    return OrderStatus(target) in ALLOWED_TRANSITIONS[OrderStatus(current)]
