"""Effective wage for a day of attendance."""

from __future__ import annotations

from decimal import Decimal

from labour_ledger.calculators.types import AttendanceStatus

_ZERO = Decimal("0")
_HALF = Decimal("2")


def effective_amount(status: AttendanceStatus | str, base_amount: Decimal) -> Decimal:
    """Return the wage credited for one day.

    Present days earn the full base wage, half days earn half of it and
    absent days earn nothing. ``base_amount`` is not range-checked here.

    Raises:
        ValidationError: If ``status`` is not a known attendance status
    """
    status = AttendanceStatus.parse(status)
    if status is AttendanceStatus.PRESENT:
        return base_amount
    if status is AttendanceStatus.HALF_DAY:
        return base_amount / _HALF
    return _ZERO
