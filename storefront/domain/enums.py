# storefront/domain/enums.py
from enum import Enum

from storefront.domain.errors import InvalidTransitionError


class OrderStatus(str, Enum):
    PENDING = "pending"
    PROCESSING = "processing"
    SHIPPED = "shipped"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"
    REFUNDED = "refunded"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    REFUNDED = "refunded"


ALLOWED_TRANSITIONS: dict[OrderStatus, frozenset[OrderStatus]] = {
    OrderStatus.PENDING: frozenset({OrderStatus.PROCESSING, OrderStatus.CANCELLED}),
    OrderStatus.PROCESSING: frozenset(
        {OrderStatus.SHIPPED, OrderStatus.CANCELLED, OrderStatus.REFUNDED}
    ),
    OrderStatus.SHIPPED: frozenset({OrderStatus.DELIVERED}),
    OrderStatus.DELIVERED: frozenset({OrderStatus.REFUNDED}),
    OrderStatus.CANCELLED: frozenset(),
    OrderStatus.REFUNDED: frozenset(),
}

PROGRESS_PERCENTAGE = {
    OrderStatus.PENDING: 25,
    OrderStatus.PROCESSING: 50,
    OrderStatus.SHIPPED: 75,
    OrderStatus.DELIVERED: 100,
    OrderStatus.CANCELLED: 0,
    OrderStatus.REFUNDED: 0,
}


def can_transition(current: str, target: str) -> bool:
    current, target = OrderStatus(current), OrderStatus(target)
    if current == target:
        return True
    return target in ALLOWED_TRANSITIONS[current]


def ensure_transition(current: str, target: str) -> OrderStatus:
    """
    Validate a status change before it is written.
    Same-status updates pass (metadata-only updates).
    """
    try:
        target_status = OrderStatus(target)
    except ValueError:
        raise InvalidTransitionError(f"Unknown order status '{target}'")

    if not can_transition(current, target_status):
        raise InvalidTransitionError(
            f"Order cannot move from '{current}' to '{target_status.value}'"
        )
    return target_status


def progress_percentage(status: str) -> int:
    try:
        return PROGRESS_PERCENTAGE[OrderStatus(status)]
    except ValueError:
        return 0
