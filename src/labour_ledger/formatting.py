"""Display-only formatting helpers for amounts and phone numbers."""

from __future__ import annotations

import re
from decimal import ROUND_HALF_UP, Decimal

CURRENCY_SYMBOL = "₹"
_NON_DIGITS = re.compile(r"\D")


def _group_indian(digits: str) -> str:
    """Group an integer digit string the en-IN way (12,34,567)."""
    if len(digits) <= 3:
        return digits
    head, tail = digits[:-3], digits[-3:]
    groups = []
    while len(head) > 2:
        groups.insert(0, head[-2:])
        head = head[:-2]
    if head:
        groups.insert(0, head)
    return ",".join(groups) + "," + tail


def format_currency(amount: Decimal | int | float) -> str:
    """Format a signed amount as rupees with 0 to 2 fraction digits.

    >>> format_currency(Decimal("123456.5"))
    '₹1,23,456.5'
    """
    value = Decimal(str(amount)).quantize(Decimal("0.01"), rounding=ROUND_HALF_UP)
    sign = "-" if value < 0 else ""
    integer, _, fraction = f"{abs(value):.2f}".partition(".")
    fraction = fraction.rstrip("0")
    text = _group_indian(integer)
    if fraction:
        text = f"{text}.{fraction}"
    return f"{sign}{CURRENCY_SYMBOL}{text}"


def normalize_phone(phone: str) -> str:
    """Strip everything but digits."""
    return _NON_DIGITS.sub("", phone or "")


def format_phone(phone: str) -> str:
    """Format a 10-digit number as ``+91 XXXXX XXXXX``; others are returned as-is."""
    cleaned = normalize_phone(phone)
    if len(cleaned) == 10:
        return f"+91 {cleaned[:5]} {cleaned[5:]}"
    return phone
