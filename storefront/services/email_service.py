import logging
import re

import requests

from storefront.config import settings
from storefront.constants.order_status import NOTIFY_CUSTOMER_STATUSES, OrderStatus
from storefront.models.order import Order
from storefront.utils.template import render_template

logger = logging.getLogger(__name__)

BREVO_API_URL = "https://api.brevo.com/v3/smtp/email"


def is_valid_email(email):
    if not email:
        return False

    return re.match(r"[^@]+@[^@]+\.[^@]+", email) is not None


def send_email(to: str, subject: str, html: str) -> bool:
    """
    Send email via Brevo. Never raises; returns whether Brevo accepted it.
    """
    if not settings.BREVO_API_KEY:
        logger.info(f"Email disabled, skipping '{subject}' to {to}")
        return False

    if not is_valid_email(to):
        logger.warning(f"No valid email found: {to}")
        return False

    payload = {
        "sender": {
            "email": settings.MAIL_FROM,
            "name": settings.STORE_NAME,
        },
        "to": [{"email": to}],
        "subject": subject,
        "htmlContent": html,
    }

    headers = {
        "api-key": settings.BREVO_API_KEY,
        "Content-Type": "application/json",
    }

    try:
        response = requests.post(
            BREVO_API_URL,
            json=payload,
            headers=headers,
            timeout=10,
        )

        if response.status_code >= 400:
            logger.error(
                f"Brevo email failed ({response.status_code}): {response.text}"
            )
            return False

        logger.info(f"Brevo email sent to {to}")
        return True

    except requests.RequestException:
        logger.exception("Brevo email exception")
        return False


def order_placed_message(order: Order) -> dict:
    """Build the confirmation email while the order is still attached to a session."""
    html = render_template(
        "emails/order_placed.html",
        order=order,
        store_name=settings.STORE_NAME,
    )
    return dict(
        to=order.email,
        subject=f"Order Confirmed {order.public_id}",
        html=html,
    )


def order_status_message(order: Order, previous_status: str):
    if OrderStatus(order.status) not in NOTIFY_CUSTOMER_STATUSES:
        return None

    html = render_template(
        "emails/order_status_updated.html",
        order=order,
        previous_status=previous_status,
        store_name=settings.STORE_NAME,
    )
    return dict(
        to=order.email,
        subject=f"Your order status has been updated - {order.public_id}",
        html=html,
    )
