"""Worker registry: CRUD over worker master records."""

from __future__ import annotations

import logging
from decimal import Decimal, InvalidOperation
from typing import Any
from uuid import UUID

from sqlalchemy import delete, func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm.exc import StaleDataError

from labour_ledger.catalog import validate_classification
from labour_ledger.database import acquire_worker_lock
from labour_ledger.errors import ConcurrentUpdateError, NotFoundError, ValidationError
from labour_ledger.formatting import normalize_phone
from labour_ledger.models import AttendanceEntry, Payment, Worker

logger = logging.getLogger(__name__)


def parse_amount(value: Any, field: str) -> Decimal:
    """Coerce a required amount to Decimal.

    Raises:
        ValidationError: If the value is missing or not a number
    """
    if value is None or value == "":
        raise ValidationError(f"{field} is required", field=field)
    if isinstance(value, float):
        value = str(value)
    try:
        amount = Decimal(value)
    except (InvalidOperation, TypeError, ValueError):
        raise ValidationError(f"{field} must be a number", field=field) from None
    if not amount.is_finite():
        raise ValidationError(f"{field} must be a finite number", field=field)
    return amount


class WorkerService:
    """Service for worker master records.

    Rules:
    - phone is stored as 10 digits and is unique among an owner's workers
    - subcategory must belong to the chosen category
    - opening_balance is set once; current_balance starts equal to it and is
      afterwards only changed by the ledger service
    - deleting a worker deletes all of its attendance entries and payments
    """

    UPDATABLE_FIELDS = frozenset({"name", "phone", "category", "subcategory"})

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create_worker(
        self,
        owner_id: UUID,
        *,
        name: str,
        phone: str,
        category: str,
        subcategory: str,
        opening_balance: Decimal | int | str = Decimal("0"),
    ) -> Worker:
        """Create a worker with an immutable opening balance.

        Raises:
            ValidationError: If any field is missing, malformed or the phone is taken
        """
        name = self._validate_name(name)
        phone = self._validate_phone(phone)
        validate_classification(category, subcategory)
        opening = parse_amount(opening_balance, "opening_balance")
        await self._ensure_phone_available(owner_id, phone)

        worker = Worker(
            owner_id=owner_id,
            name=name,
            phone=phone,
            category=category,
            subcategory=subcategory,
            opening_balance=opening,
            current_balance=opening,
            last_sequence=0,
        )
        self.session.add(worker)
        await self.session.flush()

        logger.info("Created worker %s for owner %s", worker.worker_id, owner_id)
        return worker

    async def get_worker(
        self,
        owner_id: UUID,
        worker_id: UUID,
        *,
        for_update: bool = False,
    ) -> Worker:
        """Load a worker owned by ``owner_id``.

        With ``for_update`` other writers of this worker wait until the
        transaction ends, and the cached balance and version are refreshed
        from the database.

        Raises:
            NotFoundError: If the worker does not exist for this owner
        """
        query = select(Worker).where(
            Worker.worker_id == worker_id,
            Worker.owner_id == owner_id,
        )
        if for_update:
            await acquire_worker_lock(self.session, worker_id)
            query = query.execution_options(populate_existing=True)

        result = await self.session.execute(query)
        worker = result.scalar_one_or_none()
        if worker is None:
            raise NotFoundError("Worker", worker_id)
        return worker

    async def list_workers(
        self,
        owner_id: UUID,
        *,
        worker_id: UUID | None = None,
        category: str | None = None,
        subcategory: str | None = None,
    ) -> list[Worker]:
        """List an owner's workers ordered by name, optionally filtered."""
        query = select(Worker).where(Worker.owner_id == owner_id)
        if worker_id:
            query = query.where(Worker.worker_id == worker_id)
        if category:
            query = query.where(Worker.category == category)
        if subcategory:
            query = query.where(Worker.subcategory == subcategory)

        result = await self.session.execute(query.order_by(Worker.name, Worker.created_at))
        return list(result.scalars().all())

    async def update_worker(self, owner_id: UUID, worker_id: UUID, **changes: Any) -> Worker:
        """Update name, phone, category or subcategory.

        Raises:
            ValidationError: If a field outside UPDATABLE_FIELDS is given
                (opening_balance included) or a value is invalid
            NotFoundError: If the worker does not exist for this owner
        """
        rejected = sorted(set(changes) - self.UPDATABLE_FIELDS)
        if rejected:
            raise ValidationError(
                f"Field(s) cannot be updated: {', '.join(rejected)}",
                field=rejected[0],
            )

        worker = await self.get_worker(owner_id, worker_id)

        if "name" in changes:
            worker.name = self._validate_name(changes["name"])
        if "phone" in changes:
            phone = self._validate_phone(changes["phone"])
            if phone != worker.phone:
                await self._ensure_phone_available(owner_id, phone, exclude_id=worker_id)
            worker.phone = phone

        category = changes.get("category", worker.category)
        subcategory = changes.get("subcategory", worker.subcategory)
        if "category" in changes or "subcategory" in changes:
            validate_classification(category, subcategory)
            worker.category = category
            worker.subcategory = subcategory

        await self.flush(worker)
        return worker

    async def delete_worker(self, owner_id: UUID, worker_id: UUID) -> int:
        """Delete a worker and every event recorded against them.

        Returns count of deleted events.
        """
        worker = await self.get_worker(owner_id, worker_id, for_update=True)

        deleted = 0
        for model in (AttendanceEntry, Payment):
            result = await self.session.execute(
                delete(model).where(model.worker_id == worker_id)
            )
            deleted += result.rowcount or 0

        await self.session.delete(worker)
        await self.flush(worker)

        logger.info("Deleted worker %s and %d event(s)", worker_id, deleted)
        return deleted

    async def flush(self, worker: Worker) -> None:
        """Flush pending changes to ``worker`` and its events.

        Raises:
            ConcurrentUpdateError: If another transaction wrote the worker since it was loaded
        """
        worker_id = worker.worker_id
        try:
            await self.session.flush()
        except StaleDataError as exc:
            raise ConcurrentUpdateError(worker_id) from exc

    def _validate_name(self, name: str | None) -> str:
        name = (name or "").strip()
        if not name:
            raise ValidationError("Name is required", field="name")
        return name

    def _validate_phone(self, phone: str | None) -> str:
        if not phone or not str(phone).strip():
            raise ValidationError("Phone number is required", field="phone")
        digits = normalize_phone(str(phone))
        if len(digits) != 10:
            raise ValidationError("Phone number must be 10 digits", field="phone")
        return digits

    async def _ensure_phone_available(
        self,
        owner_id: UUID,
        phone: str,
        exclude_id: UUID | None = None,
    ) -> None:
        query = select(func.count()).select_from(Worker).where(
            Worker.owner_id == owner_id,
            Worker.phone == phone,
        )
        if exclude_id is not None:
            query = query.where(Worker.worker_id != exclude_id)
        if (await self.session.scalar(query) or 0) > 0:
            raise ValidationError("Phone number already exists", field="phone")
