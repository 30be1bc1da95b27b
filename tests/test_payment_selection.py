"""Tests for resolving the payment part of a checkout."""

import pytest
from pydantic import ValidationError as PydanticValidationError

from storefront.errors import PaymentMethodInvalid
from storefront.schemas.checkout_schemas import CardDetailsIn, PaymentSelectionIn
from storefront.services.payment_method_service import (
    detect_card_brand,
    resolve_payment_selection,
)


class TestCardDetails:
    def test_separators_are_stripped(self, card):
        details = CardDetailsIn(**card(card_number="4242-4242 4242-4242"))
        assert details.card_number == "4242424242424242"
        assert details.last_four == "4242"

    @pytest.mark.parametrize("number", ["4242", "42424242424242424242", ""])
    def test_card_number_must_be_sixteen_digits(self, card, number):
        with pytest.raises(PydanticValidationError):
            CardDetailsIn(**card(card_number=number))

    def test_expired_year_rejected(self, card):
        with pytest.raises(PydanticValidationError):
            CardDetailsIn(**card(expiry_year=2001))

    def test_bad_month_rejected(self, card):
        with pytest.raises(PydanticValidationError):
            CardDetailsIn(**card(expiry_month=13))


class TestDetectBrand:
    @pytest.mark.parametrize("number, brand", [
        ("4242424242424242", "visa"),
        ("5555555555554444", "mastercard"),
        ("2223003122003222", "mastercard"),
        ("6011111111111117", "discover"),
        ("9999999999999999", "card"),
    ])
    def test_brands(self, number, brand):
        assert detect_card_brand(number) == brand


class TestResolvePaymentSelection:
    def test_fresh_card(self, session, card):
        snapshot = resolve_payment_selection(
            session,
            PaymentSelectionIn(card=CardDetailsIn(**card(card_number="5555555555554444"))),
            None,
        )
        assert snapshot.brand == "mastercard"
        assert snapshot.last_four == "4444"
        assert snapshot.payment_method_id is None

    def test_owned_stored_method(self, session, make_user, make_payment_method):
        user = make_user()
        method = make_payment_method(user, last_four="1881")

        snapshot = resolve_payment_selection(
            session, PaymentSelectionIn(payment_method_id=method.id), user
        )

        assert snapshot.payment_method_id == method.id
        assert snapshot.last_four == "1881"

    def test_both_forms_rejected(self, session, card, make_user, make_payment_method):
        user = make_user()
        method = make_payment_method(user)

        with pytest.raises(PaymentMethodInvalid):
            resolve_payment_selection(
                session,
                PaymentSelectionIn(payment_method_id=method.id, card=CardDetailsIn(**card())),
                user,
            )

    def test_neither_form_rejected(self, session):
        with pytest.raises(PaymentMethodInvalid):
            resolve_payment_selection(session, PaymentSelectionIn(), None)

    def test_unknown_and_foreign_methods_fail_alike(self, session, make_user, make_payment_method):
        owner = make_user()
        other = make_user()
        method = make_payment_method(owner)

        with pytest.raises(PaymentMethodInvalid) as foreign:
            resolve_payment_selection(session, PaymentSelectionIn(payment_method_id=method.id), other)
        with pytest.raises(PaymentMethodInvalid) as unknown:
            resolve_payment_selection(session, PaymentSelectionIn(payment_method_id=9999), other)

        assert str(foreign.value) == str(unknown.value)

    def test_missing_selection_rejected(self, session, make_user):
        with pytest.raises(PaymentMethodInvalid):
            resolve_payment_selection(session, None, make_user())
