"""Attendance and payment events recorded against a worker."""

from __future__ import annotations

from datetime import date
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import CheckConstraint, Date, ForeignKey, Integer, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labour_ledger.calculators.types import EntryKind
from labour_ledger.models.base import MONEY, Base, TimestampMixin

if TYPE_CHECKING:
    from labour_ledger.models.worker import Worker


class AttendanceEntry(Base, TimestampMixin):
    """One day's attendance for a worker; ``amount`` is the effective wage."""

    __tablename__ = "attendance_entry"

    kind = EntryKind.ATTENDANCE

    attendance_entry_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    worker_id: Mapped[UUID] = mapped_column(
        ForeignKey("worker.worker_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    status: Mapped[str] = mapped_column(String, nullable=False)
    base_amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    balance_after: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        UniqueConstraint("worker_id", "entry_date", name="attendance_worker_date_unique"),
        CheckConstraint(
            "status IN ('present', 'absent', 'half-day')",
            name="attendance_status_check",
        ),
        CheckConstraint("base_amount >= 0", name="attendance_base_amount_check"),
        CheckConstraint("amount >= 0", name="attendance_amount_check"),
    )

    # Relationships
    worker: Mapped[Worker] = relationship(back_populates="attendance_entries")

    @property
    def entry_id(self) -> UUID:
        return self.attendance_entry_id


class Payment(Base, TimestampMixin):
    """Money handed to a worker, reducing the balance owed to them."""

    __tablename__ = "payment"

    kind = EntryKind.PAYMENT

    payment_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    worker_id: Mapped[UUID] = mapped_column(
        ForeignKey("worker.worker_id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    owner_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    entry_date: Mapped[date] = mapped_column(Date, nullable=False)
    amount: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    note: Mapped[str | None] = mapped_column(Text, nullable=True)
    balance_after: Mapped[Decimal] = mapped_column(MONEY, nullable=False)
    sequence: Mapped[int] = mapped_column(Integer, nullable=False)

    __table_args__ = (
        CheckConstraint("amount > 0", name="payment_amount_positive"),
    )

    # Relationships
    worker: Mapped[Worker] = relationship(back_populates="payments")

    @property
    def entry_id(self) -> UUID:
        return self.payment_id
