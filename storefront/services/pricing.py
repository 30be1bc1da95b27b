# storefront/services/pricing.py
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable, Tuple

from storefront.utils.money import to_decimal, to_minor_units


@dataclass(frozen=True)
class Totals:
    subtotal_cents: int
    shipping_cents: int
    tax_cents: int
    total_cents: int


def price_line(unit_price, quantity: int) -> Tuple[int, int]:
    """Return (unit_price_cents, line_total_cents) for one cart line.

    The unit price is rounded to cents first; the line total is then exact
    integer multiplication, so it always equals quantity * unit price.
    """
    unit_price_cents = to_minor_units(unit_price)
    return unit_price_cents, unit_price_cents * quantity


def tax_for(subtotal_cents: int, tax_rate) -> int:
    tax = Decimal(subtotal_cents) * to_decimal(tax_rate)
    return int(tax.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def shipping_for(subtotal_cents: int, flat_shipping_cents: int) -> int:
    return flat_shipping_cents if subtotal_cents > 0 else 0


def compute_totals(
    line_totals_cents: Iterable[int],
    *,
    tax_rate,
    flat_shipping_cents: int,
) -> Totals:
    subtotal = sum(line_totals_cents)
    shipping = shipping_for(subtotal, flat_shipping_cents)
    tax = tax_for(subtotal, tax_rate)

    return Totals(
        subtotal_cents=subtotal,
        shipping_cents=shipping,
        tax_cents=tax,
        total_cents=subtotal + shipping + tax,
    )
