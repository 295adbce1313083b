"""
Phone number normalization.

Parent numbers are stored as typed ("+91 98765-43210", "098765 43210").
Before sending they are reduced to the canonical 10-digit local form;
providers add the country code they need.
"""

from __future__ import annotations

import re

from django.conf import settings

from notifications.exceptions import InvalidPhoneNumberError

LOCAL_NUMBER_LENGTH = 10

_NON_DIGITS = re.compile(r"\D")


def _country_code() -> str:
    return str(getattr(settings, "SMS_DEFAULT_COUNTRY_CODE", "91")).lstrip("+")


def normalize_phone(raw: str | None) -> str:
    """
    Reduce a phone number to its 10-digit local form.

    Strips formatting, a leading country code and a trunk "0".

    Raises:
        InvalidPhoneNumberError: If no valid 10-digit number remains
    """
    digits = _NON_DIGITS.sub("", raw or "")
    country_code = _country_code()

    if len(digits) == LOCAL_NUMBER_LENGTH + len(country_code) and digits.startswith(country_code):
        digits = digits[len(country_code):]
    elif len(digits) == LOCAL_NUMBER_LENGTH + 1 and digits.startswith("0"):
        digits = digits[1:]

    if len(digits) != LOCAL_NUMBER_LENGTH:
        raise InvalidPhoneNumberError(
            f"Invalid phone number: {raw!r}",
            details={"phone": raw},
        )
    return digits


def to_international(local_number: str, with_plus: bool = True) -> str:
    """Prefix a normalized local number with the default country code."""
    prefix = "+" if with_plus else ""
    return f"{prefix}{_country_code()}{local_number}"
