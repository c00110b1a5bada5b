"""Tests for worker master data."""

from decimal import Decimal
from uuid import uuid4

import pytest

from labour_ledger.errors import NotFoundError, ValidationError
from labour_ledger.services.ledger_service import LedgerService
from labour_ledger.services.worker_service import WorkerService


class TestCreateWorker:
    async def test_create_sets_current_to_opening(self, session, owner_id):
        worker = await WorkerService(session).create_worker(
            owner_id,
            name="  Suresh ",
            phone="98765 43210",
            category="Household",
            subcategory="Cook",
            opening_balance="1200",
        )

        assert worker.name == "Suresh"
        assert worker.phone == "9876543210"
        assert worker.opening_balance == Decimal("1200")
        assert worker.current_balance == Decimal("1200")
        assert worker.last_sequence == 0

    async def test_phone_must_be_ten_digits(self, session, owner_id):
        with pytest.raises(ValidationError) as exc_info:
            await WorkerService(session).create_worker(
                owner_id,
                name="Suresh",
                phone="12345",
                category="Household",
                subcategory="Cook",
            )

        assert exc_info.value.field == "phone"
        assert str(exc_info.value) == "Phone number must be 10 digits"

    async def test_name_required(self, session, owner_id):
        with pytest.raises(ValidationError) as exc_info:
            await WorkerService(session).create_worker(
                owner_id,
                name="   ",
                phone="9876543210",
                category="Household",
                subcategory="Cook",
            )

        assert exc_info.value.field == "name"

    async def test_phone_unique_per_owner(self, session, owner_id, make_worker):
        await make_worker(phone="9876543210")

        with pytest.raises(ValidationError) as exc_info:
            await make_worker(name="Other", phone="9876543210")

        assert str(exc_info.value) == "Phone number already exists"

    async def test_same_phone_allowed_for_another_owner(self, session, make_worker):
        await make_worker(phone="9876543210")
        other = await make_worker(phone="9876543210", owner=uuid4())

        assert other.phone == "9876543210"

    async def test_subcategory_checked_against_category(self, make_worker):
        with pytest.raises(ValidationError) as exc_info:
            await make_worker(category="Household", subcategory="Mason")

        assert exc_info.value.field == "subcategory"

    async def test_bad_opening_balance(self, make_worker):
        with pytest.raises(ValidationError) as exc_info:
            await make_worker(opening_balance="lots")

        assert exc_info.value.field == "opening_balance"


class TestReadWorkers:
    async def test_other_owner_cannot_see_worker(self, session, make_worker):
        worker = await make_worker()

        with pytest.raises(NotFoundError):
            await WorkerService(session).get_worker(uuid4(), worker.worker_id)

    async def test_list_ordered_by_name_and_filtered(self, session, owner_id, make_worker):
        await make_worker(name="Vijay")
        await make_worker(name="Anil", category="Household", subcategory="Driver")
        await make_worker(name="Mohan")

        service = WorkerService(session)
        names = [w.name for w in await service.list_workers(owner_id)]
        household = await service.list_workers(owner_id, category="Household")

        assert names == ["Anil", "Mohan", "Vijay"]
        assert [w.name for w in household] == ["Anil"]


class TestUpdateWorker:
    async def test_update_fields(self, session, owner_id, make_worker):
        worker = await make_worker()

        updated = await WorkerService(session).update_worker(
            owner_id,
            worker.worker_id,
            name="Ramesh Kumar",
            phone="9123456789",
            category="General Labor",
            subcategory="Part-time",
        )

        assert updated.name == "Ramesh Kumar"
        assert updated.phone == "9123456789"
        assert updated.subcategory == "Part-time"

    async def test_opening_balance_is_immutable(self, session, owner_id, make_worker):
        worker = await make_worker(opening_balance="100")

        with pytest.raises(ValidationError) as exc_info:
            await WorkerService(session).update_worker(
                owner_id, worker.worker_id, opening_balance=Decimal("500")
            )

        assert exc_info.value.field == "opening_balance"
        assert worker.opening_balance == Decimal("100")

    async def test_update_to_taken_phone_rejected(self, session, owner_id, make_worker):
        await make_worker(phone="9000000001")
        worker = await make_worker(phone="9000000002")

        with pytest.raises(ValidationError):
            await WorkerService(session).update_worker(
                owner_id, worker.worker_id, phone="9000000001"
            )


class TestDeleteWorker:
    async def test_delete_removes_events(self, session, owner_id, make_worker):
        worker = await make_worker()
        ledger = LedgerService(session)
        await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-01", "present", 500)
        await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-02", "absent", 500)
        await ledger.record_payment(owner_id, worker.worker_id, "2024-01-02", 300)

        deleted = await WorkerService(session).delete_worker(owner_id, worker.worker_id)

        assert deleted == 3
        assert await ledger.list_events(owner_id) == []
        with pytest.raises(NotFoundError):
            await WorkerService(session).get_worker(owner_id, worker.worker_id)
