import logging
from dataclasses import dataclass
from typing import Optional

from sqlmodel import Session

from storefront.errors import PaymentMethodInvalid
from storefront.models.payment_method import PaymentMethod
from storefront.models.user import User
from storefront.schemas.checkout_schemas import PaymentSelectionIn

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaymentSnapshot:
    brand: str
    last_four: str
    payment_method_id: Optional[int] = None


def detect_card_brand(card_number: str) -> str:
    if card_number.startswith("4"):
        return "visa"
    if card_number[:2] in {"51", "52", "53", "54", "55"} or "2221" <= card_number[:4] <= "2720":
        return "mastercard"
    if card_number[:2] in {"34", "37"}:
        return "amex"
    if card_number.startswith("6011") or card_number.startswith("65"):
        return "discover"
    return "card"


def resolve_stored_payment_method(
    session: Session,
    payment_method_id: int,
    owner: Optional[User],
) -> PaymentMethod:
    """Return the stored payment method if ``owner`` owns it.

    Guests never own stored methods. Missing and foreign ids fail the same way.
    """
    if owner is None:
        raise PaymentMethodInvalid()

    method = session.get(PaymentMethod, payment_method_id)
    if not method or method.user_id != owner.id:
        logger.warning(
            f"User {owner.id} referenced payment method {payment_method_id} they do not own"
        )
        raise PaymentMethodInvalid()

    return method


def resolve_payment_selection(
    session: Session,
    selection: Optional[PaymentSelectionIn],
    owner: Optional[User],
) -> PaymentSnapshot:
    has_stored = selection is not None and selection.payment_method_id is not None
    has_card = selection is not None and selection.card is not None

    # exactly one payment form
    if has_stored == has_card:
        raise PaymentMethodInvalid()

    if has_stored:
        method = resolve_stored_payment_method(session, selection.payment_method_id, owner)
        return PaymentSnapshot(
            brand=method.brand,
            last_four=method.last_four,
            payment_method_id=method.id,
        )

    card = selection.card
    return PaymentSnapshot(
        brand=detect_card_brand(card.card_number),
        last_four=card.last_four,
    )
