# storefront/services/checkout_service.py
import logging
from datetime import datetime
from typing import Dict, List, Optional, Sequence

from sqlmodel import Session

from storefront.config import Settings, settings as default_settings
from storefront.constants.order_status import OrderStatus
from storefront.errors import InsufficientStock, ProductsUnavailable, ValidationError
from storefront.models.order import Order
from storefront.models.order_item import OrderItem
from storefront.models.user import User
from storefront.schemas.checkout_schemas import (
    CartLineIn,
    CustomerIn,
    PaymentSelectionIn,
    ShippingAddressIn,
)
from storefront.services.catalog_service import lock_products_for_update
from storefront.services.inventory_service import decrement_stock
from storefront.services.order_event_service import ORDER_PLACED, log_order_event
from storefront.services.payment_method_service import resolve_payment_selection
from storefront.services.pricing import compute_totals, price_line
from storefront.services.public_reference import generate_public_reference

logger = logging.getLogger(__name__)


def aggregate_quantities(cart_lines: Sequence[CartLineIn]) -> Dict[int, int]:
    """Sum requested quantities per product id, in order of first appearance."""
    quantities: Dict[int, int] = {}
    for line in cart_lines:
        quantities[line.product_id] = quantities.get(line.product_id, 0) + line.quantity
    return quantities


def split_full_name(full_name: str) -> Dict[str, str]:
    parts = full_name.split()
    if not parts:
        return {"first_name": full_name, "last_name": ""}
    return {"first_name": parts[0], "last_name": " ".join(parts[1:])}


def _validate_input(
    customer: Optional[CustomerIn],
    shipping_address: Optional[ShippingAddressIn],
    cart_lines: Sequence[CartLineIn],
    config: Settings,
):
    errors: Dict[str, str] = {}

    if customer is None or not (customer.full_name or "").strip():
        errors["customer.full_name"] = "Please enter your full name."
    if customer is None or not customer.email:
        errors["customer.email"] = "Please enter your email address."

    if shipping_address is None:
        errors["shipping_address"] = "Please enter your delivery address."
    else:
        for field in ("line1", "city", "postal_code", "country"):
            if not (getattr(shipping_address, field) or "").strip():
                errors[f"shipping_address.{field}"] = f"Please enter your {field.replace('_', ' ')}."

    if not cart_lines:
        errors["items"] = "Please add at least one item to checkout."
    for index, line in enumerate(cart_lines or []):
        if line.product_id is None or line.product_id <= 0:
            errors[f"items.{index}.product_id"] = "Unknown product."
        if not isinstance(line.quantity, int) or not 1 <= line.quantity <= config.max_line_quantity:
            errors[f"items.{index}.quantity"] = (
                f"Quantity must be between 1 and {config.max_line_quantity}."
            )

    if errors:
        raise ValidationError(errors)


def place_order(
    session: Session,
    *,
    customer: CustomerIn,
    shipping_address: ShippingAddressIn,
    cart_lines: List[CartLineIn],
    payment: Optional[PaymentSelectionIn],
    user: Optional[User] = None,
    config: Settings = default_settings,
) -> Order:
    """
    Turn a client-supplied cart into exactly one paid order.

    1. Validates input (no transaction yet)
    2. Locks the requested active products
    3. Checks availability and stock against aggregated quantities
    4. Prices every line from current catalog prices
    5. Creates the order, its items and decrements stock
    6. Commits, or rolls back everything on any failure
    """
    _validate_input(customer, shipping_address, cart_lines, config)

    quantities = aggregate_quantities(cart_lines)

    try:
        payment_snapshot = resolve_payment_selection(session, payment, user)

        products = lock_products_for_update(session, quantities.keys())

        if len(products) != len(quantities):
            logger.warning(
                f"Checkout rejected: requested products {sorted(quantities)}, "
                f"available {sorted(products)}"
            )
            raise ProductsUnavailable()

        for product_id, quantity in quantities.items():
            product = products[product_id]
            if product.stock < quantity:
                logger.warning(
                    f"Checkout rejected: {product.name} has {product.stock}, requested {quantity}"
                )
                raise InsufficientStock(product.name, product.stock)

        priced_lines = []
        for line in cart_lines:
            product = products[line.product_id]
            unit_price_cents, line_total_cents = price_line(product.price, line.quantity)
            priced_lines.append((line, product, unit_price_cents, line_total_cents))

        totals = compute_totals(
            (line_total for *_, line_total in priced_lines),
            tax_rate=config.tax_rate,
            flat_shipping_cents=config.flat_shipping_cents,
        )

        public_id = generate_public_reference(
            session,
            prefix=config.public_reference_prefix,
            length=config.public_reference_length,
        )

        name_parts = split_full_name(customer.full_name)
        now = datetime.utcnow()

        order = Order(
            public_id=public_id,
            user_id=user.id if user else None,
            status=OrderStatus.paid.value,

            email=customer.email,
            customer_name=customer.full_name,
            first_name=name_parts["first_name"],
            last_name=name_parts["last_name"],
            phone=customer.phone,

            address1=shipping_address.line1,
            address2=shipping_address.line2,
            city=shipping_address.city,
            postal_code=shipping_address.postal_code,
            country=shipping_address.country,
            shipping_address_snapshot=shipping_address.snapshot(),

            payment_method_id=payment_snapshot.payment_method_id,
            payment_brand=payment_snapshot.brand,
            payment_last_four=payment_snapshot.last_four,

            currency=config.currency,
            subtotal_cents=totals.subtotal_cents,
            shipping_cents=totals.shipping_cents,
            tax_cents=totals.tax_cents,
            total_cents=totals.total_cents,

            placed_at=now,
            created_at=now,
            updated_at=now,
        )
        session.add(order)
        session.flush()

        # one item per original cart line, variants kept apart
        for line, product, unit_price_cents, line_total_cents in priced_lines:
            session.add(OrderItem(
                order_id=order.id,
                product_id=product.id,
                product_name=product.name,
                product_slug=product.slug,
                product_sku=product.sku,
                variant_key=line.variant_key,
                selected_options=dict(line.selected_options) if line.selected_options else None,
                quantity=line.quantity,
                unit_price_cents=unit_price_cents,
                line_total_cents=line_total_cents,
            ))
        session.flush()

        decrement_stock(session, quantities)

        log_order_event(
            session,
            order_id=order.id,
            event_type=ORDER_PLACED,
            label="Order placed",
            created_by=f"user:{user.id}" if user else "guest",
            meta={"total_cents": totals.total_cents, "items": len(priced_lines)},
        )

        session.commit()

    except Exception:
        session.rollback()
        raise

    session.refresh(order)

    logger.info(
        f"Order {order.public_id} placed: {len(priced_lines)} line(s), "
        f"total {order.total} {order.currency}"
    )

    return order
