"""Field validation and form binding for the address and payment step.

Binding turns raw form data into an Order and attaches every field-level
problem to it, so the checkout service only has to ask whether the order
carries errors.
"""

import re

from .models import Order
from .ports import FormDataPort

PROMO_CODE_FIELD = "PromoCode"

# form field -> (Order attribute, label, max length)
ORDER_FIELDS: dict[str, tuple[str, str, int]] = {
    "FirstName": ("first_name", "First Name", 160),
    "LastName": ("last_name", "Last Name", 160),
    "Address": ("address", "Address", 70),
    "City": ("city", "City", 40),
    "State": ("state", "State", 40),
    "PostalCode": ("postal_code", "Postal Code", 10),
    "Country": ("country", "Country", 40),
    "Phone": ("phone", "Phone", 24),
    "Email": ("email", "Email Address", 254),
}

_EMAIL_PATTERN = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9.-]+\.[A-Za-z]{2,}$")
_PHONE_PATTERN = re.compile(r"^[0-9+()\-. ]+$")


def validate_order(order: Order) -> dict[str, str]:
    """Check the address and payment fields of an order.

    Returns:
        Mapping of form field name to error message. Empty if valid.
    """
    errors: dict[str, str] = {}
    for form_name, (attribute, label, max_length) in ORDER_FIELDS.items():
        value = getattr(order, attribute).strip()
        if not value:
            errors[form_name] = f"{label} is required"
        elif len(value) > max_length:
            errors[form_name] = f"{label} must be at most {max_length} characters"

    if "Email" not in errors and not _EMAIL_PATTERN.match(order.email.strip()):
        errors["Email"] = "Email is not a valid e-mail address"
    if "Phone" not in errors and not _PHONE_PATTERN.match(order.phone.strip()):
        errors["Phone"] = "Phone is not a valid phone number"

    return errors


def bind_order(form: FormDataPort) -> Order:
    """Build an Order from submitted form data and attach validation errors.

    The owning username is never bound from the form; it comes from the
    authenticated identity at submission time.
    """
    values = {
        attribute: (form.get_field(form_name) or "")
        for form_name, (attribute, _label, _max) in ORDER_FIELDS.items()
    }
    order = Order(**values)
    for field_name, message in validate_order(order).items():
        order.add_error(field_name, message)
    return order
