import logging
from typing import Dict, Iterable

from sqlmodel import Session, select

from storefront.models.product import Product

logger = logging.getLogger(__name__)


def lock_products_for_update(session: Session, product_ids: Iterable[int]) -> Dict[int, Product]:
    """Fetch the active products among ``product_ids`` under a row lock.

    The lock (SELECT ... FOR UPDATE) is held until the caller's transaction
    ends. Rows are locked in id order so two checkouts touching overlapping
    products always queue in the same order.
    """
    ids = sorted(set(product_ids))
    if not ids:
        return {}

    products = session.exec(
        select(Product)
        .where(Product.id.in_(ids), Product.is_active == True)  # noqa: E712
        .order_by(Product.id)
        .with_for_update()
        .execution_options(populate_existing=True)
    ).all()

    logger.info(f"Locked {len(products)}/{len(ids)} products for checkout")

    return {p.id: p for p in products}
