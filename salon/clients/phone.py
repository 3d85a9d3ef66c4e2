"""
Phone number handling for clients.

The canonical form is the digits of an Israeli mobile number, 05XXXXXXXX.
"""
import re

from django.core.exceptions import ValidationError
from django.utils.translation import gettext_lazy as _

SEPARATORS_RE = re.compile(r"[-\s()]")
MOBILE_RE = re.compile(r"^05\d{8}$")


def canonical_phone(raw):
    """
    Strip separators and validate.

    Raises:
        ValidationError: empty or not a 10-digit mobile starting with 05
    """
    if not raw or not str(raw).strip():
        raise ValidationError(_("Please enter a phone number."), code="required")

    digits = SEPARATORS_RE.sub("", str(raw))
    if digits.startswith("+972"):
        digits = "0" + digits[4:]

    if not MOBILE_RE.match(digits):
        raise ValidationError(
            _("Invalid phone number - must be a 10-digit Israeli mobile number starting with 05."),
            code="invalid_phone",
        )
    return digits


def international_phone(phone):
    """05XXXXXXXX -> +9725XXXXXXXX"""
    if phone.startswith("+"):
        return phone
    return f"+972{phone.lstrip('0')}"
