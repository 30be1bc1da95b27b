from sqlmodel import SQLModel, Field, Relationship
from sqlalchemy import Column, ForeignKey, Integer, JSON
from typing import Optional, TYPE_CHECKING

from storefront.utils.money import format_minor_units

if TYPE_CHECKING:
    from storefront.models.order import Order


class OrderItem(SQLModel, table=True):
    __tablename__ = "order_items"
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="orders.id", index=True)

    # survives product deletion
    product_id: Optional[int] = Field(
        default=None,
        sa_column=Column(
            Integer,
            ForeignKey("product.id", ondelete="SET NULL"),
            nullable=True,
            index=True,
        ),
    )

    # snapshot, immune to later catalog edits
    product_name: str
    product_slug: Optional[str] = None
    product_sku: Optional[str] = None
    variant_key: Optional[str] = None
    selected_options: Optional[dict] = Field(default=None, sa_column=Column(JSON))

    quantity: int
    unit_price_cents: int
    line_total_cents: int

    order: Optional["Order"] = Relationship(back_populates="items")

    @property
    def unit_price(self) -> str:
        return format_minor_units(self.unit_price_cents)

    @property
    def line_total(self) -> str:
        return format_minor_units(self.line_total_cents)
