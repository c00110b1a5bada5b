"""Type definitions shared by the ledger calculations."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, Protocol, Sequence
from uuid import UUID

from labour_ledger.errors import ValidationError


class AttendanceStatus(str, Enum):
    """Closed set of attendance states."""

    PRESENT = "present"
    ABSENT = "absent"
    HALF_DAY = "half-day"

    @classmethod
    def parse(cls, value: str | AttendanceStatus) -> AttendanceStatus:
        """Return the enum member for ``value``.

        Raises:
            ValidationError: If the value is not one of the three states
        """
        try:
            return cls(value)
        except ValueError:
            allowed = ", ".join(s.value for s in cls)
            raise ValidationError(
                f"Invalid attendance status '{value}' (expected one of: {allowed})",
                field="status",
            ) from None


class EntryKind(str, Enum):
    """Ledger event types."""

    ATTENDANCE = "attendance"
    PAYMENT = "payment"


class BalanceState(str, Enum):
    """Who owes whom, by the sign of a worker balance.

    A positive balance means the ledger owner owes the worker (wages accrued
    exceed payments made); a negative balance means the worker owes the
    owner. This is the only place the sign is interpreted.
    """

    I_OWE = "i_owe"
    WORKER_OWES = "worker_owes"
    SETTLED = "settled"

    @classmethod
    def of(cls, balance: Decimal) -> BalanceState:
        if balance > 0:
            return cls.I_OWE
        if balance < 0:
            return cls.WORKER_OWES
        return cls.SETTLED


@dataclass(frozen=True)
class BalanceStatus:
    """Classified balance with its display label and style hint."""

    status: BalanceState
    message: str
    style_class: str


class LedgerEntryLike(Protocol):
    """Anything that can be replayed onto a balance."""

    kind: EntryKind
    entry_date: date
    amount: Decimal
    sequence: int


@dataclass(frozen=True)
class ReportFilters:
    """Caller-side scoping for dashboards, reports and exports."""

    worker_id: UUID | None = None
    category: str | None = None
    subcategory: str | None = None
    date_from: date | None = None
    date_to: date | None = None

    def __post_init__(self) -> None:
        if self.date_from and self.date_to and self.date_from > self.date_to:
            raise ValidationError("date_from must not be after date_to", field="date_from")

    @property
    def range_label(self) -> str | None:
        """Human-readable date scope, or None when events are not date-filtered."""
        if self.date_from and self.date_to:
            return f"{self.date_from.isoformat()} to {self.date_to.isoformat()}"
        if self.date_from:
            return f"From {self.date_from.isoformat()}"
        if self.date_to:
            return f"Until {self.date_to.isoformat()}"
        return None

    def as_dict(self) -> dict[str, Any]:
        return {
            "worker_id": str(self.worker_id) if self.worker_id else None,
            "category": self.category,
            "subcategory": self.subcategory,
            "date_from": self.date_from.isoformat() if self.date_from else None,
            "date_to": self.date_to.isoformat() if self.date_to else None,
        }


@dataclass
class LedgerSnapshot:
    """Materialized, already-filtered view handed to the aggregator and exporters."""

    workers: Sequence[Any]
    events: Sequence[Any]
    filters: ReportFilters = field(default_factory=ReportFilters)

    @property
    def range_label(self) -> str | None:
        return self.filters.range_label
