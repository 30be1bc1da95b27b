"""Business failures raised by the checkout and order services.

Routes translate these into HTTP responses; nothing here knows about HTTP.
"""


class CheckoutError(Exception):
    """Base exception for all storefront business errors."""

    pass


class ValidationError(CheckoutError):
    """Raised when customer, address, cart or payment input is malformed."""

    def __init__(self, fields: dict[str, str]):
        self.fields = dict(fields)
        summary = "; ".join(f"{k}: {v}" for k, v in self.fields.items())
        super().__init__(f"Invalid checkout input ({summary})")


class ProductsUnavailable(CheckoutError):
    """Raised when a requested product no longer exists or was deactivated."""

    field = "items"

    def __init__(self):
        super().__init__("One or more selected products are no longer available.")


class InsufficientStock(CheckoutError):
    """Raised when a product has fewer units left than were requested."""

    field = "items"

    def __init__(self, product_name: str, remaining: int):
        self.product_name = product_name
        self.remaining = remaining
        super().__init__(
            f'"{product_name}" has only {remaining} item(s) left in stock.'
        )


class PaymentMethodInvalid(CheckoutError):
    """Raised for a foreign stored payment method or an ambiguous payment form.

    The message never reveals whether the referenced method exists.
    """

    field = "payment_method_id"

    def __init__(self):
        super().__init__("The selected payment method is invalid.")


class InvalidStatusTransition(CheckoutError):
    """Raised when an order status change is outside the allowed edges."""

    def __init__(self, current: str, attempted: str):
        self.current = current
        self.attempted = attempted
        super().__init__(
            f"Invalid status change from {current} to {attempted}"
        )


class OrderNotFound(CheckoutError):
    """Raised when no order matches the public reference."""

    def __init__(self, reference: str):
        self.reference = reference
        super().__init__(f"Order not found: {reference}")
