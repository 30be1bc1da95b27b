from fastapi import APIRouter, Depends, Query
from sqlmodel import Session

from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.orders_schemas import OrderPage, serialize_order_row
from storefront.services.order_service import orders_for_user_query
from storefront.utils.pagination import paginate
from storefront.utils.token import get_current_user

router = APIRouter()


@router.get("", response_model=OrderPage)
def my_orders(
    page: int = Query(1),
    limit: int = Query(10),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return paginate(
        session=session,
        query=orders_for_user_query(current_user.id),
        page=page,
        limit=limit,
        serialize=serialize_order_row,
    )
