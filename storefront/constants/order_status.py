from enum import Enum


class OrderStatus(str, Enum):
    pending = "pending"
    paid = "paid"
    shipped = "shipped"
    cancelled = "cancelled"


# pending is reserved; checkout creates orders directly as paid
ALLOWED_TRANSITIONS = {
    OrderStatus.pending: [OrderStatus.paid, OrderStatus.cancelled],
    OrderStatus.paid: [OrderStatus.shipped, OrderStatus.cancelled],
    OrderStatus.shipped: [],
    OrderStatus.cancelled: [],
}

TERMINAL_STATUSES = frozenset(
    status for status, targets in ALLOWED_TRANSITIONS.items() if not targets
)

# statuses that trigger a customer email when entered
NOTIFY_CUSTOMER_STATUSES = frozenset({OrderStatus.shipped, OrderStatus.cancelled})
