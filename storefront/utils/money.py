from decimal import Decimal, ROUND_HALF_UP

CENT = Decimal("0.01")


def to_decimal(value) -> Decimal:
    # floats go through str()
    if isinstance(value, Decimal):
        return value
    return Decimal(str(value))


def to_minor_units(amount) -> int:
    """Convert a currency amount to integer cents, rounding half up to 2 places."""
    quantized = to_decimal(amount).quantize(CENT, rounding=ROUND_HALF_UP)
    return int(quantized * 100)


def format_minor_units(cents) -> str:
    if cents is None:
        return "0.00"
    return f"{(Decimal(int(cents)) / 100).quantize(CENT)}"
