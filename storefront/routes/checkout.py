from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlmodel import Session

from storefront.database import get_session
from storefront.errors import (
    InsufficientStock,
    OrderNotFound,
    PaymentMethodInvalid,
    ProductsUnavailable,
    ValidationError,
)
from storefront.models.user import User
from storefront.schemas.checkout_schemas import CheckoutRequest
from storefront.schemas.orders_schemas import OrderOut, serialize_order
from storefront.services.checkout_service import place_order
from storefront.services.email_service import order_placed_message, send_email
from storefront.services.order_service import get_order_by_reference
from storefront.utils.token import get_optional_user

router = APIRouter()


@router.post("", response_model=OrderOut, status_code=201)
def checkout(
    payload: CheckoutRequest,
    background_tasks: BackgroundTasks,
    session: Session = Depends(get_session),
    current_user: Optional[User] = Depends(get_optional_user),
):
    try:
        order = place_order(
            session,
            customer=payload.customer,
            shipping_address=payload.shipping_address,
            cart_lines=payload.items,
            payment=payload.payment,
            user=current_user,
        )
    except ValidationError as e:
        raise HTTPException(422, detail={"message": str(e), "errors": e.fields})
    except (ProductsUnavailable, InsufficientStock) as e:
        raise HTTPException(409, detail={"field": e.field, "message": str(e)})
    except PaymentMethodInvalid as e:
        raise HTTPException(422, detail={"field": e.field, "message": str(e)})

    # confirmation email goes out after the response; cart clearing is the client's job
    background_tasks.add_task(send_email, **order_placed_message(order))

    return serialize_order(order)


@router.get("/orders/{public_id}", response_model=OrderOut)
def order_confirmation(
    public_id: str,
    session: Session = Depends(get_session),
    current_user: Optional[User] = Depends(get_optional_user),
):
    try:
        order = get_order_by_reference(session, public_id)
    except OrderNotFound:
        raise HTTPException(404, "Order not found")

    # orders linked to an account are only visible to that account
    if order.user_id is not None:
        if not current_user or current_user.id != order.user_id:
            raise HTTPException(404, "Order not found")

    return serialize_order(order)
