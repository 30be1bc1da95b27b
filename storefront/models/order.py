from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, JSON
from typing import List, Optional, TYPE_CHECKING
from datetime import datetime

from storefront.constants.order_status import OrderStatus
from storefront.utils.money import format_minor_units

if TYPE_CHECKING:
    from storefront.models.order_item import OrderItem
    from storefront.models.order_event import OrderEvent
    from storefront.models.user import User


class Order(SQLModel, table=True):
    __tablename__ = "orders"
    id: Optional[int] = Field(default=None, primary_key=True)
    public_id: str = Field(index=True, unique=True, max_length=40)

    # null for guest checkouts
    user_id: Optional[int] = Field(default=None, foreign_key="user.id", index=True)

    status: str = Field(default=OrderStatus.pending.value, index=True)

    # customer snapshot
    email: str = Field(index=True)
    customer_name: str
    first_name: str
    last_name: str = ""
    phone: Optional[str] = None

    # shipping snapshot, independent of any address book
    address1: str
    address2: Optional[str] = None
    city: str
    postal_code: str
    country: str
    shipping_address_snapshot: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    payment_method_id: Optional[int] = Field(default=None, foreign_key="payment_method.id")
    payment_brand: Optional[str] = None
    payment_last_four: Optional[str] = None

    # money, integer minor units
    currency: str = Field(default="EUR", max_length=3)
    subtotal_cents: int
    shipping_cents: int
    tax_cents: int
    total_cents: int

    placed_at: Optional[datetime] = None
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    # relationships
    user: Optional["User"] = Relationship()
    items: List["OrderItem"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderItem.id"},
    )
    events: List["OrderEvent"] = Relationship(
        back_populates="order",
        sa_relationship_kwargs={"order_by": "OrderEvent.created_at"},
    )

    @property
    def subtotal(self) -> str:
        return format_minor_units(self.subtotal_cents)

    @property
    def shipping_total(self) -> str:
        return format_minor_units(self.shipping_cents)

    @property
    def tax_total(self) -> str:
        return format_minor_units(self.tax_cents)

    @property
    def total(self) -> str:
        return format_minor_units(self.total_cents)

    @property
    def is_guest(self) -> bool:
        return self.user_id is None
