import logging
from datetime import datetime
from typing import List, Tuple

from sqlmodel import Session

from storefront.constants.order_status import (
    ALLOWED_TRANSITIONS,
    TERMINAL_STATUSES,
    OrderStatus,
)
from storefront.errors import InvalidStatusTransition
from storefront.models.order import Order
from storefront.services.inventory_service import restock_order_items
from storefront.services.order_event_service import STATUS_CHANGED, log_order_event

logger = logging.getLogger(__name__)


def _as_status(value) -> OrderStatus:
    if isinstance(value, OrderStatus):
        return value
    return OrderStatus(value)


def can_transition(current, target) -> bool:
    try:
        current, target = _as_status(current), _as_status(target)
    except ValueError:
        return False
    return target in ALLOWED_TRANSITIONS.get(current, [])


def allowed_statuses_for_update(order: Order) -> List[str]:
    current = _as_status(order.status)
    return [current.value, *(s.value for s in ALLOWED_TRANSITIONS.get(current, []))]


def transition_order_status(
    session: Session,
    order: Order,
    new_status,
    *,
    actor: str = "admin",
) -> Tuple[str, str]:
    """Move ``order`` to ``new_status`` and return ``(old, new)``.

    Same-status requests on a non-terminal order are a no-op. Everything
    outside ALLOWED_TRANSITIONS raises InvalidStatusTransition, including any
    request against a shipped or cancelled order. Cancelling puts the items
    back in stock within the same commit.
    """
    old_status = order.status
    attempted = new_status.value if isinstance(new_status, OrderStatus) else str(new_status)

    try:
        current = _as_status(old_status)
    except ValueError:
        raise InvalidStatusTransition(old_status, attempted)

    if current in TERMINAL_STATUSES:
        raise InvalidStatusTransition(old_status, attempted)

    if attempted == old_status:
        return old_status, old_status

    if not can_transition(current, attempted):
        raise InvalidStatusTransition(old_status, attempted)

    try:
        order.status = attempted
        order.updated_at = datetime.utcnow()
        session.add(order)

        if attempted == OrderStatus.cancelled.value:
            restock_order_items(session, order)

        log_order_event(
            session,
            order_id=order.id,
            event_type=STATUS_CHANGED,
            label=f"Status changed from {old_status} to {attempted}",
            created_by=actor,
            meta={"from": old_status, "to": attempted},
        )

        session.commit()
    except Exception:
        session.rollback()
        raise

    session.refresh(order)
    logger.info(f"Order {order.public_id} status {old_status} -> {attempted} by {actor}")

    return old_status, attempted
