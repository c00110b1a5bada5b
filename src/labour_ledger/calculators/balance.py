"""Balance classification for display."""

from __future__ import annotations

from decimal import Decimal

from labour_ledger.calculators.types import BalanceState, BalanceStatus
from labour_ledger.formatting import format_currency

STYLE_CLASSES: dict[BalanceState, str] = {
    BalanceState.I_OWE: "text-red-600 bg-red-50 border-red-200",
    BalanceState.WORKER_OWES: "text-green-600 bg-green-50 border-green-200",
    BalanceState.SETTLED: "text-gray-600 bg-gray-50 border-gray-200",
}


def classify(balance: Decimal) -> BalanceStatus:
    """Classify a worker balance into owes/owed/settled with a label."""
    state = BalanceState.of(balance)
    if state is BalanceState.I_OWE:
        message = f"I owe {format_currency(balance)}"
    elif state is BalanceState.WORKER_OWES:
        message = f"Worker owes {format_currency(abs(balance))}"
    else:
        message = "Settled"
    return BalanceStatus(status=state, message=message, style_class=STYLE_CLASSES[state])
