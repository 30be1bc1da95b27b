"""Tests for the order status lifecycle."""

import pytest

from storefront.constants.order_status import OrderStatus
from storefront.errors import InvalidStatusTransition
from storefront.models.product import Product
from storefront.services.order_status_service import (
    allowed_statuses_for_update,
    can_transition,
    transition_order_status,
)


@pytest.fixture
def paid_order(checkout, make_product):
    product = make_product(stock=5)
    return checkout([{"product_id": product.id, "quantity": 2}])


class TestCanTransition:
    @pytest.mark.parametrize("current, target", [
        ("pending", "paid"),
        ("pending", "cancelled"),
        ("paid", "shipped"),
        ("paid", "cancelled"),
    ])
    def test_allowed(self, current, target):
        assert can_transition(current, target)

    @pytest.mark.parametrize("current, target", [
        ("paid", "pending"),
        ("shipped", "paid"),
        ("shipped", "cancelled"),
        ("cancelled", "paid"),
        ("pending", "shipped"),
        ("paid", "refunded"),
    ])
    def test_rejected(self, current, target):
        assert not can_transition(current, target)


class TestTransitionOrderStatus:
    def test_paid_to_shipped(self, session, paid_order):
        old, new = transition_order_status(session, paid_order, OrderStatus.shipped)

        assert (old, new) == ("paid", "shipped")
        assert paid_order.status == "shipped"

        event = paid_order.events[-1]
        assert event.event_type == "status_changed"
        assert event.meta == {"from": "paid", "to": "shipped"}
        assert event.created_by == "admin"

    def test_cancel_restocks_items(self, session, paid_order):
        product_id = paid_order.items[0].product_id
        assert session.get(Product, product_id).stock == 3

        transition_order_status(session, paid_order, "cancelled", actor="admin:7")

        assert session.get(Product, product_id, populate_existing=True).stock == 5
        assert paid_order.events[-1].created_by == "admin:7"

    def test_same_status_is_a_no_op(self, session, paid_order):
        events_before = len(paid_order.events)

        assert transition_order_status(session, paid_order, "paid") == ("paid", "paid")
        assert len(paid_order.events) == events_before

    def test_backwards_transition_rejected(self, session, paid_order):
        with pytest.raises(InvalidStatusTransition) as exc:
            transition_order_status(session, paid_order, OrderStatus.pending)

        assert str(exc.value) == "Invalid status change from paid to pending"
        assert paid_order.status == "paid"

    @pytest.mark.parametrize("terminal", ["shipped", "cancelled"])
    def test_terminal_orders_are_frozen(self, session, paid_order, terminal):
        transition_order_status(session, paid_order, terminal)

        for target in ("pending", "paid", "shipped", "cancelled"):
            with pytest.raises(InvalidStatusTransition):
                transition_order_status(session, paid_order, target)

    def test_allowed_statuses_for_update(self, session, paid_order):
        assert allowed_statuses_for_update(paid_order) == ["paid", "shipped", "cancelled"]

        transition_order_status(session, paid_order, "shipped")

        assert allowed_statuses_for_update(paid_order) == ["shipped"]
