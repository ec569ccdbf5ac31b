"""Tests for address and payment validation and form binding."""

from storefront.adapters.cli.forms import MappingFormData
from storefront.core.models import Order
from storefront.core.validation import PROMO_CODE_FIELD, bind_order, validate_order

VALID_FIELDS = {
    "FirstName": "Ada",
    "LastName": "Lovelace",
    "Address": "12 St James's Square",
    "City": "London",
    "State": "London",
    "PostalCode": "SW1Y 4JH",
    "Country": "United Kingdom",
    "Phone": "+44 20 7946 0000",
    "Email": "ada@example.com",
}


def test_valid_form_binds_without_errors() -> None:
    order = bind_order(MappingFormData(VALID_FIELDS))

    assert not order.has_errors
    assert order.first_name == "Ada"
    assert order.email == "ada@example.com"
    assert order.username == ""


def test_empty_form_reports_every_required_field() -> None:
    order = bind_order(MappingFormData({}))

    assert set(order.validation_errors) == set(VALID_FIELDS)
    assert order.validation_errors["FirstName"] == "First Name is required"


def test_whitespace_only_field_is_missing() -> None:
    order = bind_order(MappingFormData({**VALID_FIELDS, "City": "   "}))

    assert order.validation_errors == {"City": "City is required"}


def test_too_long_field_rejected() -> None:
    order = bind_order(MappingFormData({**VALID_FIELDS, "PostalCode": "1" * 11}))

    assert "PostalCode" in order.validation_errors


def test_malformed_email_and_phone_rejected() -> None:
    errors = validate_order(
        Order(
            first_name="Ada",
            last_name="Lovelace",
            address="Somewhere",
            city="London",
            state="London",
            postal_code="SW1",
            country="UK",
            phone="call me",
            email="not-an-email",
        )
    )

    assert set(errors) == {"Email", "Phone"}


def test_username_is_never_bound_from_form() -> None:
    order = bind_order(MappingFormData({**VALID_FIELDS, "Username": "Mallory"}))

    assert order.username == ""


def test_repeated_form_values_use_first() -> None:
    form = MappingFormData({PROMO_CODE_FIELD: ["FREE", "OTHER"], "City": []})

    assert form.get_field(PROMO_CODE_FIELD) == "FREE"
    assert form.get_field("City") is None
    assert form.get_field("Missing") is None


def test_non_string_form_values_read_as_text() -> None:
    form = MappingFormData({"PostalCode": 12345, "Phone": [5550100], "City": []})

    assert form.get_field("PostalCode") == "12345"
    assert form.get_field("Phone") == "5550100"
    assert form.get_field("City") is None


def test_repeated_field_first_value_wins() -> None:
    form = MappingFormData({"Email": ["ada@example.com", "other@example.com"]})

    assert form.get_field("Email") == "ada@example.com"
