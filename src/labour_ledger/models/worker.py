"""Worker master record."""

from __future__ import annotations

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING
from uuid import UUID, uuid4

from sqlalchemy import DateTime, Integer, String, UniqueConstraint, func
from sqlalchemy.orm import Mapped, mapped_column, relationship

from labour_ledger.models.base import MONEY, Base, TimestampMixin, utcnow

if TYPE_CHECKING:
    from labour_ledger.models.ledger import AttendanceEntry, Payment


class Worker(Base, TimestampMixin):
    """A day-labour worker and the cached running balance of their ledger.

    ``opening_balance`` is written once at creation. ``current_balance`` is
    only written by the ledger service and must always equal a replay of the
    worker's events on top of the opening balance.
    ``version_id`` is bumped on every write; a flush against a stale copy
    fails instead of overwriting a concurrent update.
    """

    __tablename__ = "worker"

    worker_id: Mapped[UUID] = mapped_column(primary_key=True, default=uuid4)
    owner_id: Mapped[UUID] = mapped_column(nullable=False, index=True)
    name: Mapped[str] = mapped_column(String, nullable=False)
    phone: Mapped[str] = mapped_column(String(10), nullable=False)
    category: Mapped[str] = mapped_column(String, nullable=False)
    subcategory: Mapped[str] = mapped_column(String, nullable=False)
    opening_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    current_balance: Mapped[Decimal] = mapped_column(MONEY, nullable=False, default=Decimal("0"))
    last_sequence: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    version_id: Mapped[int] = mapped_column(Integer, nullable=False)
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=utcnow,
        server_default=func.now(),
        onupdate=utcnow,
        nullable=False,
    )

    __table_args__ = (
        UniqueConstraint("owner_id", "phone", name="worker_owner_phone_unique"),
    )
    __mapper_args__ = {"version_id_col": version_id}

    # Relationships
    attendance_entries: Mapped[list[AttendanceEntry]] = relationship(
        back_populates="worker",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )
    payments: Mapped[list[Payment]] = relationship(
        back_populates="worker",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )

    def next_sequence(self) -> int:
        """Reserve the next event sequence number for this worker."""
        self.last_sequence = (self.last_sequence or 0) + 1
        return self.last_sequence
