import logging
from datetime import datetime
from typing import Dict

from sqlalchemy import update
from sqlmodel import Session

from storefront.errors import InsufficientStock
from storefront.models.order import Order
from storefront.models.product import Product

logger = logging.getLogger(__name__)


def decrement_stock(session: Session, quantities_by_product_id: Dict[int, int]):
    """Take the ordered quantities off the shelf.

    Must run inside the checkout transaction after every check has passed.
    The ``stock >= quantity`` condition keeps stock from going negative even
    where the database ignores FOR UPDATE.
    """
    for product_id in sorted(quantities_by_product_id):
        quantity = quantities_by_product_id[product_id]

        result = session.execute(
            update(Product)
            .where(Product.id == product_id, Product.stock >= quantity)
            .values(stock=Product.stock - quantity, updated_at=datetime.utcnow())
        )

        if result.rowcount != 1:
            product = session.get(Product, product_id, populate_existing=True)
            remaining = product.stock if product else 0
            name = product.name if product else f"#{product_id}"
            raise InsufficientStock(name, remaining)

        logger.info(f"Decremented stock of product {product_id} by {quantity}")


def restock_order_items(session: Session, order: Order) -> int:
    """Put the quantities of a cancelled order back on the shelf."""
    restocked = 0

    for item in order.items:
        if item.product_id is None:
            continue

        session.execute(
            update(Product)
            .where(Product.id == item.product_id)
            .values(stock=Product.stock + item.quantity, updated_at=datetime.utcnow())
        )
        restocked += 1
        logger.info(f"Restocked product {item.product_id} with {item.quantity} from order {order.public_id}")

    return restocked
