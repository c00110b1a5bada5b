"""Dashboard and report statistics.

The aggregator does no filtering of its own: callers pass the workers and
events they want summarized. Wage totals are the sum of stored effective
amounts, never recomputed from base wages.
"""

from __future__ import annotations

from dataclasses import asdict, dataclass
from decimal import Decimal
from typing import Any, Iterable

from labour_ledger.calculators.types import AttendanceStatus, BalanceState, EntryKind

_ZERO = Decimal("0")


@dataclass(frozen=True)
class SummaryStats:
    """Aggregated totals over a scoped set of workers and events."""

    total_owed_by_owner: Decimal
    total_owed_to_owner: Decimal
    total_wages_given: Decimal
    total_payments_made: Decimal
    active_workers: int
    workers_count: int
    present_days: int
    absent_days: int
    half_days: int
    total_attendance_days: int
    total_transactions: int

    @property
    def net_balance(self) -> Decimal:
        return self.total_owed_by_owner - self.total_owed_to_owner

    @property
    def net_amount(self) -> Decimal:
        return self.total_wages_given - self.total_payments_made

    def to_dict(self) -> dict[str, Any]:
        data = asdict(self)
        data["net_balance"] = self.net_balance
        data["net_amount"] = self.net_amount
        return data


def summarize(workers: Iterable[Any], events: Iterable[Any]) -> SummaryStats:
    """Roll up worker balances and event amounts."""
    workers = list(workers)
    events = list(events)

    owed_by_owner = _ZERO
    owed_to_owner = _ZERO
    active = 0
    for worker in workers:
        state = BalanceState.of(worker.current_balance)
        if state is BalanceState.I_OWE:
            owed_by_owner += worker.current_balance
        elif state is BalanceState.WORKER_OWES:
            owed_to_owner += abs(worker.current_balance)
        if state is not BalanceState.SETTLED:
            active += 1

    attendance = [e for e in events if e.kind == EntryKind.ATTENDANCE]
    payments = [e for e in events if e.kind == EntryKind.PAYMENT]
    statuses = [AttendanceStatus(e.status) for e in attendance]

    return SummaryStats(
        total_owed_by_owner=owed_by_owner,
        total_owed_to_owner=owed_to_owner,
        total_wages_given=sum((e.amount for e in attendance), _ZERO),
        total_payments_made=sum((e.amount for e in payments), _ZERO),
        active_workers=active,
        workers_count=len(workers),
        present_days=statuses.count(AttendanceStatus.PRESENT),
        absent_days=statuses.count(AttendanceStatus.ABSENT),
        half_days=statuses.count(AttendanceStatus.HALF_DAY),
        total_attendance_days=len(attendance),
        total_transactions=len(events),
    )
