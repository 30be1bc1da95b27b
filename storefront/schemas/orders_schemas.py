from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, ConfigDict

from storefront.constants.order_status import OrderStatus


class OrderItemOut(BaseModel):
    product_id: Optional[int]
    name: str
    slug: Optional[str]
    sku: Optional[str]
    variant_key: Optional[str]
    selected_options: Optional[Dict[str, str]]
    qty: int
    unit_price_cents: int
    line_total_cents: int
    unit_price: str
    line_total: str


class OrderOut(BaseModel):
    public_id: str
    status: str
    email: str
    customer_name: str
    phone: Optional[str]
    shipping_address: Optional[dict]
    payment_brand: Optional[str]
    payment_last_four: Optional[str]

    currency: str
    subtotal_cents: int
    shipping_cents: int
    tax_cents: int
    total_cents: int

    subtotal: str
    shipping: str
    tax: str
    total: str

    items: List[OrderItemOut]
    placed_at: Optional[datetime]


class OrderEventOut(BaseModel):
    event_type: str
    label: str
    meta: Optional[dict]
    created_by: str
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class AdminOrderOut(OrderOut):
    id: int
    user_id: Optional[int]
    allowed_statuses: List[str]
    events: List[OrderEventOut]


class OrderListItem(BaseModel):
    public_id: str
    status: str
    email: str
    customer_name: str
    total: str
    total_cents: int
    items_count: int
    placed_at: Optional[datetime]


class OrderPage(BaseModel):
    total_items: int
    total_pages: int
    current_page: int
    limit: int
    results: List[OrderListItem]


class OrderStatusUpdateIn(BaseModel):
    status: OrderStatus


class OrderStatusOut(BaseModel):
    message: str
    public_id: str
    old_status: str
    new_status: str


def serialize_order_item(item) -> dict:
    return {
        "product_id": item.product_id,
        "name": item.product_name,
        "slug": item.product_slug,
        "sku": item.product_sku,
        "variant_key": item.variant_key,
        "selected_options": item.selected_options,
        "qty": item.quantity,
        "unit_price_cents": item.unit_price_cents,
        "line_total_cents": item.line_total_cents,
        "unit_price": item.unit_price,
        "line_total": item.line_total,
    }


def serialize_order(order) -> dict:
    return {
        "public_id": order.public_id,
        "status": order.status,
        "email": order.email,
        "customer_name": order.customer_name,
        "phone": order.phone,
        "shipping_address": order.shipping_address_snapshot,
        "payment_brand": order.payment_brand,
        "payment_last_four": order.payment_last_four,
        "currency": order.currency,
        "subtotal_cents": order.subtotal_cents,
        "shipping_cents": order.shipping_cents,
        "tax_cents": order.tax_cents,
        "total_cents": order.total_cents,
        "subtotal": order.subtotal,
        "shipping": order.shipping_total,
        "tax": order.tax_total,
        "total": order.total,
        "items": [serialize_order_item(i) for i in order.items],
        "placed_at": order.placed_at or order.created_at,
    }


def serialize_order_row(row) -> dict:
    order, items_count = row
    return {
        "public_id": order.public_id,
        "status": order.status,
        "email": order.email,
        "customer_name": order.customer_name,
        "total": order.total,
        "total_cents": order.total_cents,
        "items_count": items_count,
        "placed_at": order.placed_at or order.created_at,
    }
