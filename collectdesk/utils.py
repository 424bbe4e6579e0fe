"""Shared validation helpers."""

import re
from decimal import Decimal, InvalidOperation

_EMAIL_RE = re.compile(r'^[^@\s]+@[^@\s]+\.[^@\s]+$')
_PHONE_RE = re.compile(r'^[\d+\-\s()]+$')

CENTS = Decimal("0.01")


def is_valid_email(value: str) -> bool:
    """Return True if *value* looks like a valid email address."""
    return bool(value and _EMAIL_RE.match(value.strip()))


def is_valid_full_name(value: str) -> bool:
    """Return True if *value* is 2–100 characters once trimmed."""
    return bool(value) and 2 <= len(value.strip()) <= 100


def is_valid_phone(value: str) -> bool:
    """Return True if *value* is 8–20 characters of digits, +, -, spaces or parentheses.

    Leading and trailing whitespace is ignored.  Unlike the length check the
    character check is strict: letters anywhere make the number invalid.
    """
    if not value:
        return False
    value = value.strip()
    return 8 <= len(value) <= 20 and bool(_PHONE_RE.match(value))


def parse_money(value) -> Decimal | None:
    """Parse a price-like value into a two-place Decimal.

    Accepts ints, decimal strings and Decimals.  Floats go through ``str``
    first so ``25.1`` stays ``25.10`` instead of its binary expansion.
    Returns None for anything that is not a finite number.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(str(value).strip())
        if not amount.is_finite():
            return None
        return amount.quantize(CENTS)
    except (InvalidOperation, ValueError):
        return None
