from datetime import date, datetime, time, timedelta
from typing import Optional

from sqlalchemy import func, or_
from sqlmodel import Session, select

from storefront.constants.order_status import OrderStatus
from storefront.errors import OrderNotFound
from storefront.models.order import Order
from storefront.models.order_item import OrderItem


def get_order_by_reference(session: Session, public_id: str) -> Order:
    order = session.exec(
        select(Order).where(Order.public_id == public_id)
    ).first()

    if not order:
        raise OrderNotFound(public_id)

    return order


def _items_count():
    return (
        select(func.count(OrderItem.id))
        .where(OrderItem.order_id == Order.id)
        .correlate(Order)
        .scalar_subquery()
        .label("items_count")
    )


def orders_for_user_query(user_id: int):
    return (
        select(Order, _items_count())
        .where(Order.user_id == user_id)
        .order_by(Order.created_at.desc(), Order.id.desc())
    )


def admin_orders_query(
    *,
    q: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
):
    query = select(Order, _items_count())

    q = (q or "").strip()
    if q:
        like = f"%{q}%"
        query = query.where(or_(Order.public_id.ilike(like), Order.email.ilike(like)))

    if status:
        query = query.where(Order.status == status.value)

    # date_to is inclusive of the whole day
    if date_from:
        query = query.where(Order.created_at >= datetime.combine(date_from, time.min))
    if date_to:
        query = query.where(Order.created_at < datetime.combine(date_to + timedelta(days=1), time.min))

    return query.order_by(Order.created_at.desc(), Order.id.desc())
