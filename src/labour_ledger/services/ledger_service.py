"""Ledger service: records attendance and payments against worker balances.

Every write runs as one unit inside the caller's transaction:

1. lock the worker (``acquire_worker_lock``) and reload its balance
2. check for a duplicate attendance date
3. compute the delta and the new running balance
4. insert the event with its ``balance_after`` snapshot
5. write the new ``current_balance``

Methods flush but never commit; the caller commits or rolls back, so a
failure at any step leaves nothing behind. The worker's version column
rejects a flush against a stale balance, and the ``(worker_id, entry_date)``
unique constraint rejects a second writer racing on the same attendance day.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from decimal import Decimal
from typing import Any, Union
from uuid import UUID

from sqlalchemy import exists, select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from labour_ledger.calculators.ledger import apply_entry, replay, sort_entries
from labour_ledger.calculators.types import AttendanceStatus, EntryKind
from labour_ledger.calculators.wage import effective_amount
from labour_ledger.errors import (
    ConsistencyError,
    DuplicateEntryError,
    NotFoundError,
    ValidationError,
)
from labour_ledger.models import AttendanceEntry, Payment, Worker
from labour_ledger.services.worker_service import WorkerService, parse_amount

logger = logging.getLogger(__name__)

LedgerEntry = Union[AttendanceEntry, Payment]


@dataclass(frozen=True)
class RecordResult:
    """Result of recording one event."""

    entry: LedgerEntry
    worker: Worker
    previous_balance: Decimal
    rebased_entries: int = 0

    @property
    def balance_after(self) -> Decimal:
        return self.entry.balance_after

    @property
    def exceeds_balance(self) -> bool:
        """Advisory only: a payment larger than what was owed to the worker."""
        return self.entry.kind is EntryKind.PAYMENT and self.entry.amount > self.previous_balance


@dataclass
class ReconciliationResult:
    """Stored balance compared with a replay of the worker's history."""

    worker_id: UUID
    stored_balance: Decimal
    replayed_balance: Decimal
    stale_entries: list[UUID] = field(default_factory=list)
    repaired: bool = False

    @property
    def drift(self) -> Decimal:
        return self.stored_balance - self.replayed_balance

    @property
    def is_consistent(self) -> bool:
        return self.drift == 0 and not self.stale_entries


def _require_date(value: Any, field_name: str = "entry_date") -> date:
    if value is None or value == "":
        raise ValidationError(f"{field_name} is required", field=field_name)
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    try:
        return date.fromisoformat(str(value))
    except ValueError:
        raise ValidationError(
            f"{field_name} must be an ISO 8601 calendar date", field=field_name
        ) from None


class LedgerService:
    """Records events and keeps ``Worker.current_balance`` equal to a replay.

    All operations take the acting ``owner_id`` explicitly; a worker or event
    belonging to another owner is reported as not found.
    """

    def __init__(self, session: AsyncSession):
        self.session = session
        self.workers = WorkerService(session)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    async def record_attendance(
        self,
        owner_id: UUID,
        worker_id: UUID,
        entry_date: date | str,
        status: AttendanceStatus | str,
        base_amount: Decimal | int | str,
        note: str | None = None,
    ) -> RecordResult:
        """Record one day of attendance and credit the effective wage.

        Raises:
            ValidationError: Bad date, status, or a negative/missing base amount
            NotFoundError: Unknown worker
            DuplicateEntryError: Attendance already recorded for that date
            ConcurrentUpdateError: The worker changed under an unlocked backend
        """
        entry_date = _require_date(entry_date)
        status = AttendanceStatus.parse(status)
        base = parse_amount(base_amount, "base_amount")
        if base < 0:
            raise ValidationError("base_amount must not be negative", field="base_amount")

        worker = await self.workers.get_worker(owner_id, worker_id, for_update=True)

        if await self.attendance_exists(worker_id, entry_date):
            raise DuplicateEntryError(worker_id, entry_date)

        amount = effective_amount(status, base)
        previous = worker.current_balance
        new_balance = apply_entry(previous, EntryKind.ATTENDANCE, amount)

        entry = AttendanceEntry(
            worker_id=worker_id,
            owner_id=owner_id,
            entry_date=entry_date,
            status=status.value,
            base_amount=base,
            amount=amount,
            note=(note or "").strip() or None,
            balance_after=new_balance,
            sequence=worker.next_sequence(),
        )
        rebased = await self._append(worker, entry, new_balance)

        logger.info(
            "Recorded %s attendance for worker %s on %s: +%s -> %s",
            status.value,
            worker_id,
            entry_date,
            amount,
            worker.current_balance,
        )
        return RecordResult(entry=entry, worker=worker, previous_balance=previous, rebased_entries=rebased)

    async def record_payment(
        self,
        owner_id: UUID,
        worker_id: UUID,
        entry_date: date | str,
        amount: Decimal | int | str,
        note: str | None = None,
    ) -> RecordResult:
        """Record a payment to a worker.

        Payments may take the balance below zero; that is reported through
        ``RecordResult.exceeds_balance`` and never rejected.

        Raises:
            ValidationError: Bad date or a missing/non-positive amount
            NotFoundError: Unknown worker
            ConcurrentUpdateError: The worker changed under an unlocked backend
        """
        entry_date = _require_date(entry_date)
        value = parse_amount(amount, "amount")
        if value <= 0:
            raise ValidationError("amount must be greater than zero", field="amount")

        worker = await self.workers.get_worker(owner_id, worker_id, for_update=True)

        previous = worker.current_balance
        new_balance = apply_entry(previous, EntryKind.PAYMENT, value)

        entry = Payment(
            worker_id=worker_id,
            owner_id=owner_id,
            entry_date=entry_date,
            amount=value,
            note=(note or "").strip() or None,
            balance_after=new_balance,
            sequence=worker.next_sequence(),
        )
        rebased = await self._append(worker, entry, new_balance)

        logger.info(
            "Recorded payment for worker %s on %s: -%s -> %s",
            worker_id,
            entry_date,
            value,
            worker.current_balance,
        )
        return RecordResult(entry=entry, worker=worker, previous_balance=previous, rebased_entries=rebased)

    async def delete_attendance_entry(self, owner_id: UUID, attendance_entry_id: UUID) -> Worker:
        """Remove an attendance entry and replay the worker's balances."""
        return await self._delete_entry(owner_id, AttendanceEntry, attendance_entry_id)

    async def delete_payment(self, owner_id: UUID, payment_id: UUID) -> Worker:
        """Remove a payment and replay the worker's balances."""
        return await self._delete_entry(owner_id, Payment, payment_id)

    # ------------------------------------------------------------------
    # Consistency
    # ------------------------------------------------------------------

    async def recompute_worker(self, owner_id: UUID, worker_id: UUID) -> ReconciliationResult:
        """Replay a worker's history and rewrite every snapshot and the balance."""
        worker = await self.workers.get_worker(owner_id, worker_id, for_update=True)
        history = await self.list_history(owner_id, worker_id)

        result = self._reconcile(worker, history)
        if not result.is_consistent:
            logger.warning(
                "Repairing worker %s: stored %s, replayed %s, %d stale snapshot(s)",
                worker_id,
                result.stored_balance,
                result.replayed_balance,
                len(result.stale_entries),
            )
            self._apply_replay(worker, history)
            await self.workers.flush(worker)
            result.repaired = True
        return result

    async def recompute_all(self, owner_id: UUID) -> list[ReconciliationResult]:
        """Recompute every worker of an owner."""
        results = []
        for worker in await self.workers.list_workers(owner_id):
            results.append(await self.recompute_worker(owner_id, worker.worker_id))
        return results

    async def verify_worker(self, owner_id: UUID, worker_id: UUID) -> ReconciliationResult:
        """Compare the stored balance with a replay, without writing."""
        worker = await self.workers.get_worker(owner_id, worker_id)
        history = await self.list_history(owner_id, worker_id)
        result = self._reconcile(worker, history)
        if not result.is_consistent:
            logger.warning(
                "Worker %s drifted: stored %s, replayed %s",
                worker_id,
                result.stored_balance,
                result.replayed_balance,
            )
        return result

    async def verify_all(self, owner_id: UUID) -> list[ReconciliationResult]:
        results = []
        for worker in await self.workers.list_workers(owner_id):
            results.append(await self.verify_worker(owner_id, worker.worker_id))
        return results

    async def assert_consistent(self, owner_id: UUID, worker_id: UUID) -> None:
        """Raise ConsistencyError if the worker's stored balance has drifted."""
        result = await self.verify_worker(owner_id, worker_id)
        if not result.is_consistent:
            raise ConsistencyError(worker_id, result.stored_balance, result.replayed_balance)

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    async def attendance_exists(self, worker_id: UUID, entry_date: date) -> bool:
        query = select(
            exists().where(
                AttendanceEntry.worker_id == worker_id,
                AttendanceEntry.entry_date == entry_date,
            )
        )
        return bool(await self.session.scalar(query))

    async def list_history(self, owner_id: UUID, worker_id: UUID) -> list[LedgerEntry]:
        """A worker's events in chronological order."""
        return await self.list_events(owner_id, worker_ids=[worker_id])

    async def list_attendance(
        self,
        owner_id: UUID,
        *,
        worker_ids: list[UUID] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[AttendanceEntry]:
        return await self._list(AttendanceEntry, owner_id, worker_ids, date_from, date_to)

    async def list_payments(
        self,
        owner_id: UUID,
        *,
        worker_ids: list[UUID] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[Payment]:
        return await self._list(Payment, owner_id, worker_ids, date_from, date_to)

    async def list_events(
        self,
        owner_id: UUID,
        *,
        worker_ids: list[UUID] | None = None,
        date_from: date | None = None,
        date_to: date | None = None,
    ) -> list[LedgerEntry]:
        """Attendance entries and payments merged in chronological order."""
        attendance = await self.list_attendance(
            owner_id, worker_ids=worker_ids, date_from=date_from, date_to=date_to
        )
        payments = await self.list_payments(
            owner_id, worker_ids=worker_ids, date_from=date_from, date_to=date_to
        )
        return sort_entries([*attendance, *payments])

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    async def _append(self, worker: Worker, entry: LedgerEntry, new_balance: Decimal) -> int:
        """Insert an event and move the worker balance in one flush.

        Returns count of later events whose snapshots were rebased.
        """
        rebased = 0
        if await self._has_later_entries(worker.worker_id, entry.entry_date):
            # Back-dated: snapshots of the events after it must be replayed.
            history = await self.list_history(worker.owner_id, worker.worker_id)
            self.session.add(entry)
            changed = self._apply_replay(worker, [*history, entry])
            rebased = sum(1 for e in changed if e is not entry)
        else:
            self.session.add(entry)
            worker.current_balance = new_balance

        try:
            await self.workers.flush(worker)
        except IntegrityError as exc:
            if isinstance(entry, AttendanceEntry):
                raise DuplicateEntryError(entry.worker_id, entry.entry_date) from exc
            raise
        return rebased

    async def _has_later_entries(self, worker_id: UUID, entry_date: date) -> bool:
        for model in (AttendanceEntry, Payment):
            found = await self.session.scalar(
                select(exists().where(model.worker_id == worker_id, model.entry_date > entry_date))
            )
            if found:
                return True
        return False

    def _apply_replay(self, worker: Worker, history: list[LedgerEntry]) -> list[LedgerEntry]:
        """Write replayed snapshots and balance; returns the events that changed."""
        result = replay(worker.opening_balance, history)
        changed = []
        for step in result.stale_steps:
            step.entry.balance_after = step.balance_after
            changed.append(step.entry)
        worker.current_balance = result.closing_balance
        return changed

    def _reconcile(self, worker: Worker, history: list[LedgerEntry]) -> ReconciliationResult:
        result = replay(worker.opening_balance, history)
        return ReconciliationResult(
            worker_id=worker.worker_id,
            stored_balance=worker.current_balance,
            replayed_balance=result.closing_balance,
            stale_entries=[step.entry.entry_id for step in result.stale_steps],
        )

    async def _delete_entry(self, owner_id: UUID, model: type, entry_id: UUID) -> Worker:
        pk = model.__mapper__.primary_key[0]
        entry = await self.session.scalar(
            select(model).where(pk == entry_id, model.owner_id == owner_id)
        )
        if entry is None:
            raise NotFoundError(model.__name__, entry_id)

        worker = await self.workers.get_worker(owner_id, entry.worker_id, for_update=True)
        await self.session.delete(entry)
        await self.session.flush()

        history = await self.list_history(owner_id, worker.worker_id)
        self._apply_replay(worker, history)
        await self.workers.flush(worker)

        logger.info(
            "Deleted %s %s; worker %s balance now %s",
            model.__name__,
            entry_id,
            worker.worker_id,
            worker.current_balance,
        )
        return worker

    async def _list(
        self,
        model: type,
        owner_id: UUID,
        worker_ids: list[UUID] | None,
        date_from: date | None,
        date_to: date | None,
    ) -> list[Any]:
        query = select(model).where(model.owner_id == owner_id)
        if worker_ids is not None:
            query = query.where(model.worker_id.in_(worker_ids))
        if date_from is not None:
            query = query.where(model.entry_date >= date_from)
        if date_to is not None:
            query = query.where(model.entry_date <= date_to)

        result = await self.session.execute(query.order_by(model.entry_date, model.sequence))
        return list(result.scalars().all())
