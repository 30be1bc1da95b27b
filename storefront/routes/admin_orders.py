# -------- ADMIN ORDERS --------
from datetime import date
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, Query
from sqlmodel import Session

from storefront.constants.order_status import OrderStatus
from storefront.database import get_session
from storefront.dependencies.admin import require_admin
from storefront.errors import InvalidStatusTransition, OrderNotFound
from storefront.models.user import User
from storefront.schemas.orders_schemas import (
    AdminOrderOut,
    OrderEventOut,
    OrderPage,
    OrderStatusOut,
    OrderStatusUpdateIn,
    serialize_order,
    serialize_order_row,
)
from storefront.services.email_service import order_status_message, send_email
from storefront.services.order_service import admin_orders_query, get_order_by_reference
from storefront.services.order_status_service import (
    allowed_statuses_for_update,
    transition_order_status,
)
from storefront.utils.pagination import paginate

router = APIRouter()


def _load_order(session: Session, public_id: str):
    try:
        return get_order_by_reference(session, public_id)
    except OrderNotFound:
        raise HTTPException(404, "Order not found")


@router.get("", response_model=OrderPage)
def list_orders(
    page: int = 1,
    limit: int = 20,
    q: Optional[str] = None,
    status: Optional[OrderStatus] = None,
    date_from: Optional[date] = Query(None),
    date_to: Optional[date] = Query(None),
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    query = admin_orders_query(q=q, status=status, date_from=date_from, date_to=date_to)

    return paginate(
        session=session,
        query=query,
        page=page,
        limit=limit,
        serialize=serialize_order_row,
    )


@router.get("/{public_id}", response_model=AdminOrderOut)
def order_details(
    public_id: str,
    session: Session = Depends(get_session),
    _: User = Depends(require_admin),
):
    order = _load_order(session, public_id)

    return {
        **serialize_order(order),
        "id": order.id,
        "user_id": order.user_id,
        "allowed_statuses": allowed_statuses_for_update(order),
        "events": [OrderEventOut.model_validate(e) for e in order.events],
    }


@router.patch("/{public_id}/status", response_model=OrderStatusOut)
def update_order_status(
    public_id: str,
    payload: OrderStatusUpdateIn,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    admin: User = Depends(require_admin),
):
    order = _load_order(session, public_id)

    try:
        old_status, new_status = transition_order_status(
            session,
            order,
            payload.status,
            actor=f"admin:{admin.id}",
        )
    except InvalidStatusTransition as e:
        raise HTTPException(400, str(e))

    if old_status == new_status:
        return {
            "message": "Order status is unchanged",
            "public_id": order.public_id,
            "old_status": old_status,
            "new_status": new_status,
        }

    message = order_status_message(order, old_status)
    if message:
        background_tasks.add_task(send_email, **message)

    return {
        "message": "Order status updated",
        "public_id": order.public_id,
        "old_status": old_status,
        "new_status": new_status,
    }
