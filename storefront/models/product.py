from sqlmodel import SQLModel, Field
from sqlalchemy import CheckConstraint
from typing import Optional
from decimal import Decimal
from datetime import datetime


class Product(SQLModel, table=True):
    __table_args__ = (CheckConstraint("stock >= 0", name="ck_product_stock_non_negative"),)
    id: Optional[int] = Field(default=None, primary_key=True)
    name: str
    slug: str = Field(index=True, unique=True)
    sku: Optional[str] = None
    description: Optional[str] = None

    #Shop Details
    price: Decimal = Field(max_digits=10, decimal_places=2)
    stock: int = Field(default=0)
    is_active: bool = Field(default=True, index=True)

    #timestamps
    created_at: datetime = Field(default_factory=datetime.utcnow)
    updated_at: datetime = Field(default_factory=datetime.utcnow)

    @property
    def in_stock(self) -> bool:
        return self.stock > 0
