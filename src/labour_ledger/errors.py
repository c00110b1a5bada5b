"""Typed errors raised by the ledger services.

Every error carries a machine-readable ``code`` so the API layer can
translate it without parsing messages.
"""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from uuid import UUID


class LedgerError(Exception):
    """Base class for all ledger errors."""

    code = "LEDGER_ERROR"


class ValidationError(LedgerError):
    """Raised when a required field is missing or malformed."""

    code = "VALIDATION_ERROR"

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class DuplicateEntryError(LedgerError):
    """Raised when attendance is already recorded for a worker on a date."""

    code = "DUPLICATE_ENTRY"

    def __init__(self, worker_id: UUID, entry_date: date):
        self.worker_id = worker_id
        self.entry_date = entry_date
        super().__init__(
            f"Attendance already recorded for worker {worker_id} on {entry_date.isoformat()}"
        )


class NotFoundError(LedgerError):
    """Raised when a referenced entity does not exist for the owner."""

    code = "NOT_FOUND"

    def __init__(self, entity: str, entity_id: UUID | str):
        self.entity = entity
        self.entity_id = entity_id
        super().__init__(f"{entity} {entity_id} not found")


class ConsistencyError(LedgerError):
    """Raised when the stored balance disagrees with a replay of the history."""

    code = "CONSISTENCY_ERROR"

    def __init__(self, worker_id: UUID, stored_balance: Decimal, replayed_balance: Decimal):
        self.worker_id = worker_id
        self.stored_balance = stored_balance
        self.replayed_balance = replayed_balance
        super().__init__(
            f"Worker {worker_id} stored balance {stored_balance} "
            f"does not match replayed balance {replayed_balance}"
        )


class ConcurrentUpdateError(LedgerError):
    """Raised when another transaction changed the worker after it was read."""

    code = "CONCURRENT_UPDATE"

    def __init__(self, worker_id: UUID):
        self.worker_id = worker_id
        super().__init__(f"Worker {worker_id} was modified concurrently; retry the request")
