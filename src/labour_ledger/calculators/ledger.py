"""Balance arithmetic for the worker ledger.

Storage-agnostic: these functions operate on any object shaped like
``LedgerEntryLike`` and are shared by every path that produces a balance.
Replaying the opening balance over the ordered history is the reference
definition of a worker's balance; incremental recording must agree with it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import Decimal
from typing import Any, Iterable

from labour_ledger.calculators.types import EntryKind, LedgerEntryLike


def balance_delta(kind: EntryKind | str, amount: Decimal) -> Decimal:
    """Signed effect of an event on the balance owed to the worker."""
    kind = EntryKind(kind)
    if kind is EntryKind.ATTENDANCE:
        return amount
    return -amount


def apply_entry(balance: Decimal, kind: EntryKind | str, amount: Decimal) -> Decimal:
    """Balance after applying one event."""
    return balance + balance_delta(kind, amount)


def ordering_key(entry: LedgerEntryLike) -> tuple[date, int]:
    """Chronological order: calendar date, then recording sequence."""
    return entry.entry_date, entry.sequence


def sort_entries(entries: Iterable[Any]) -> list[Any]:
    return sorted(entries, key=ordering_key)


@dataclass(frozen=True)
class ReplayStep:
    """One event with the balance snapshot a replay assigns to it."""

    entry: Any
    balance_after: Decimal

    @property
    def is_stale(self) -> bool:
        """True if the stored snapshot differs from the replayed one."""
        return self.entry.balance_after != self.balance_after


@dataclass
class ReplayResult:
    """Outcome of replaying a worker's history."""

    opening_balance: Decimal
    closing_balance: Decimal
    steps: list[ReplayStep] = field(default_factory=list)

    @property
    def stale_steps(self) -> list[ReplayStep]:
        return [s for s in self.steps if s.is_stale]


def replay(opening_balance: Decimal, entries: Iterable[Any]) -> ReplayResult:
    """Replay events in chronological order from the opening balance."""
    balance = opening_balance
    steps: list[ReplayStep] = []
    for entry in sort_entries(entries):
        balance = apply_entry(balance, entry.kind, entry.amount)
        steps.append(ReplayStep(entry=entry, balance_after=balance))
    return ReplayResult(
        opening_balance=opening_balance,
        closing_balance=balance,
        steps=steps,
    )

