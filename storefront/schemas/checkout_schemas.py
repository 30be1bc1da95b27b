# storefront/schemas/checkout_schemas.py
import re
from datetime import datetime
from typing import Dict, List, Optional

from pydantic import BaseModel, EmailStr, Field, field_validator, model_validator

from storefront.config import settings

ALLOWED_OPTION_KEYS = (
    "brand",
    "model",
    "product_type",
    "clothing_size",
    "shoe_size",
    "color",
    "material",
)


def squish(value):
    if isinstance(value, str):
        return re.sub(r"\s+", " ", value).strip()
    return value


def _blank_to_none(value):
    value = squish(value)
    if value == "":
        return None
    return value


class CartLineIn(BaseModel):
    product_id: int = Field(..., gt=0)
    quantity: int = Field(..., gt=0)
    variant_key: Optional[str] = Field(default=None, max_length=120)
    selected_options: Optional[Dict[str, str]] = None

    @field_validator("quantity")
    @classmethod
    def cap_quantity(cls, value: int) -> int:
        if value > settings.max_line_quantity:
            raise ValueError(f"Quantity may not exceed {settings.max_line_quantity}")
        return value

    @field_validator("variant_key", mode="before")
    @classmethod
    def clean_variant_key(cls, value):
        return _blank_to_none(value)

    @field_validator("selected_options", mode="before")
    @classmethod
    def clean_selected_options(cls, value):
        if not isinstance(value, dict):
            return None

        normalized = {}
        for key in ALLOWED_OPTION_KEYS:
            item = value.get(key)
            if isinstance(item, (str, int, float)) and not isinstance(item, bool):
                item = str(item).strip()
                if item:
                    normalized[key] = item[:120]

        return normalized or None


class CustomerIn(BaseModel):
    full_name: str = Field(..., min_length=1, max_length=120)
    email: EmailStr
    phone: Optional[str] = Field(default=None, max_length=30)

    @field_validator("full_name", mode="before")
    @classmethod
    def clean_name(cls, value):
        return squish(value)

    @field_validator("email", mode="before")
    @classmethod
    def clean_email(cls, value):
        value = squish(value)
        return value.lower() if isinstance(value, str) else value

    @field_validator("phone", mode="before")
    @classmethod
    def clean_phone(cls, value):
        return _blank_to_none(value)


class ShippingAddressIn(BaseModel):
    line1: str = Field(..., min_length=1, max_length=255)
    line2: Optional[str] = Field(default=None, max_length=255)
    city: str = Field(..., min_length=1, max_length=120)
    postal_code: str = Field(..., min_length=1, max_length=20)
    country: str = Field(..., min_length=1, max_length=120)

    @field_validator("line1", "city", "postal_code", "country", mode="before")
    @classmethod
    def clean_required(cls, value):
        return squish(value)

    @field_validator("line2", mode="before")
    @classmethod
    def clean_optional(cls, value):
        return _blank_to_none(value)

    def snapshot(self) -> dict:
        return {
            "line1": self.line1,
            "line2": self.line2,
            "city": self.city,
            "state": None,
            "postal_code": self.postal_code,
            "country": self.country,
        }


class CardDetailsIn(BaseModel):
    card_holder_name: str = Field(..., min_length=1, max_length=120)
    card_number: str
    cvc: str
    expiry_month: int = Field(..., ge=1, le=12)
    expiry_year: int

    @field_validator("card_holder_name", mode="before")
    @classmethod
    def clean_holder(cls, value):
        return squish(value)

    @field_validator("card_number", "cvc", mode="before")
    @classmethod
    def digits_only(cls, value):
        if value is None:
            return value
        return re.sub(r"\D+", "", str(value))

    @field_validator("card_number")
    @classmethod
    def check_card_number(cls, value: str) -> str:
        if len(value) != 16:
            raise ValueError("Card number must be exactly 16 digits.")
        return value

    @field_validator("cvc")
    @classmethod
    def check_cvc(cls, value: str) -> str:
        if not 3 <= len(value) <= 4:
            raise ValueError("CVC must be 3 or 4 digits.")
        return value

    @field_validator("expiry_year")
    @classmethod
    def check_expiry_year(cls, value: int) -> int:
        this_year = datetime.utcnow().year
        if not this_year <= value <= this_year + 25:
            raise ValueError("Expiry year is invalid.")
        return value

    @property
    def last_four(self) -> str:
        return self.card_number[-4:]


class PaymentSelectionIn(BaseModel):
    """Either a stored payment method id or fresh card fields, never both."""

    payment_method_id: Optional[int] = Field(default=None, gt=0)
    card: Optional[CardDetailsIn] = None


class CheckoutRequest(BaseModel):
    customer: CustomerIn
    shipping_address: ShippingAddressIn
    items: List[CartLineIn] = Field(..., min_length=1)
    payment: PaymentSelectionIn
    accepted: bool = False

    @model_validator(mode="after")
    def must_accept(self):
        if not self.accepted:
            raise ValueError("You must confirm checkout before continuing.")
        return self
