import logging
import secrets
import string
from typing import Callable, Optional

from sqlmodel import Session, select

from storefront.models.order import Order

logger = logging.getLogger(__name__)

ALPHABET = string.ascii_uppercase + string.digits
MAX_ATTEMPTS = 20


def random_token(length: int) -> str:
    return "".join(secrets.choice(ALPHABET) for _ in range(length))


def reference_exists(session: Session, public_id: str) -> bool:
    return session.exec(
        select(Order.id).where(Order.public_id == public_id)
    ).first() is not None


def generate_public_reference(
    session: Session,
    *,
    prefix: str = "ORD-",
    length: int = 10,
    token_factory: Optional[Callable[[int], str]] = None,
) -> str:
    """Return an unused public order reference such as ``ORD-7K2QX9B4LM``.

    Collisions are checked against existing orders and regenerated.
    """
    token_factory = token_factory or random_token

    for attempt in range(1, MAX_ATTEMPTS + 1):
        public_id = f"{prefix}{token_factory(length)}"
        if not reference_exists(session, public_id):
            return public_id
        logger.warning(f"Public reference collision on {public_id} (attempt {attempt})")

    raise RuntimeError(f"Could not generate a unique order reference in {MAX_ATTEMPTS} attempts")
