"""Ledger calculations: wages, balances, replay and summaries."""

from labour_ledger.calculators.balance import classify
from labour_ledger.calculators.ledger import (
    ReplayResult,
    ReplayStep,
    apply_entry,
    balance_delta,
    replay,
    sort_entries,
)
from labour_ledger.calculators.summary import SummaryStats, summarize
from labour_ledger.calculators.types import (
    AttendanceStatus,
    BalanceState,
    BalanceStatus,
    EntryKind,
    LedgerSnapshot,
    ReportFilters,
)
from labour_ledger.calculators.wage import effective_amount

__all__ = [
    "AttendanceStatus",
    "BalanceState",
    "BalanceStatus",
    "EntryKind",
    "LedgerSnapshot",
    "ReplayResult",
    "ReplayStep",
    "ReportFilters",
    "SummaryStats",
    "apply_entry",
    "balance_delta",
    "classify",
    "effective_amount",
    "replay",
    "sort_entries",
    "summarize",
]
