from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime


class PaymentMethod(SQLModel, table=True):
    __tablename__ = "payment_method"
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)

    label: Optional[str] = None
    card_holder_name: str
    brand: str
    last_four: str = Field(max_length=4)
    expiry_month: int
    expiry_year: int
    is_default: bool = Field(default=False)

    created_at: datetime = Field(default_factory=datetime.utcnow)
