"""ORM models for the labour ledger."""

from labour_ledger.models.base import MONEY, Base, TimestampMixin
from labour_ledger.models.ledger import AttendanceEntry, Payment
from labour_ledger.models.worker import Worker

__all__ = [
    "MONEY",
    "Base",
    "TimestampMixin",
    "Worker",
    "AttendanceEntry",
    "Payment",
]
