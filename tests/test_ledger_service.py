"""Tests for recording attendance and payments against worker balances."""

from datetime import date
from decimal import Decimal
from uuid import uuid4

import pytest

from labour_ledger.calculators import BalanceState, classify
from labour_ledger.errors import (
    ConsistencyError,
    DuplicateEntryError,
    NotFoundError,
    ValidationError,
)
from labour_ledger.services.ledger_service import LedgerService


@pytest.fixture
def ledger(session) -> LedgerService:
    return LedgerService(session)


class TestRecordingScenario:
    """One worker through present, half-day, absent, payment and a duplicate."""

    async def test_full_sequence(self, ledger, owner_id, make_worker):
        worker = await make_worker(opening_balance=0)
        wid = worker.worker_id

        # A: present
        result = await ledger.record_attendance(owner_id, wid, date(2024, 1, 1), "present", 500)
        assert result.entry.amount == Decimal("500")
        assert worker.current_balance == Decimal("500")
        status = classify(worker.current_balance)
        assert status.status is BalanceState.I_OWE
        assert status.message == "I owe ₹500"

        # B: half-day
        result = await ledger.record_attendance(owner_id, wid, date(2024, 1, 2), "half-day", 500)
        assert result.entry.amount == Decimal("250")
        assert worker.current_balance == Decimal("750")

        # C: absent
        result = await ledger.record_attendance(owner_id, wid, date(2024, 1, 3), "absent", 500)
        assert result.entry.amount == Decimal("0")
        assert result.entry.balance_after == Decimal("750")
        assert worker.current_balance == Decimal("750")

        # D: payment beyond what is owed
        result = await ledger.record_payment(owner_id, wid, date(2024, 1, 4), 1000)
        assert worker.current_balance == Decimal("-250")
        assert result.exceeds_balance is True
        status = classify(worker.current_balance)
        assert status.status is BalanceState.WORKER_OWES
        assert status.message == "Worker owes ₹250"

        # E: duplicate attendance date
        with pytest.raises(DuplicateEntryError) as exc_info:
            await ledger.record_attendance(owner_id, wid, date(2024, 1, 1), "present", 500)
        assert exc_info.value.entry_date == date(2024, 1, 1)
        assert worker.current_balance == Decimal("-250")

        history = await ledger.list_history(owner_id, wid)
        assert [e.balance_after for e in history] == [
            Decimal("500"),
            Decimal("750"),
            Decimal("750"),
            Decimal("-250"),
        ]
        assert [e.sequence for e in history] == [1, 2, 3, 4]

    async def test_opening_balance_is_starting_point(self, ledger, owner_id, make_worker):
        worker = await make_worker(opening_balance="-300")

        await ledger.record_attendance(owner_id, worker.worker_id, "2024-02-01", "present", 400)

        assert worker.current_balance == Decimal("100")

    async def test_payment_within_balance_not_flagged(self, ledger, owner_id, make_worker):
        worker = await make_worker(opening_balance=1000)

        result = await ledger.record_payment(owner_id, worker.worker_id, "2024-02-01", 400)

        assert result.exceeds_balance is False
        assert result.previous_balance == Decimal("1000")
        assert result.balance_after == Decimal("600")

    async def test_note_is_trimmed(self, ledger, owner_id, make_worker):
        worker = await make_worker()

        result = await ledger.record_payment(
            owner_id, worker.worker_id, "2024-02-01", 50, note="  advance  "
        )
        blank = await ledger.record_payment(
            owner_id, worker.worker_id, "2024-02-02", 50, note="   "
        )

        assert result.entry.note == "advance"
        assert blank.entry.note is None

    async def test_payment_and_attendance_share_a_date(self, ledger, owner_id, make_worker):
        worker = await make_worker()
        day = date(2024, 3, 1)

        await ledger.record_payment(owner_id, worker.worker_id, day, 100)
        await ledger.record_attendance(owner_id, worker.worker_id, day, "present", 500)

        history = await ledger.list_history(owner_id, worker.worker_id)
        assert [e.kind.value for e in history] == ["payment", "attendance"]
        assert worker.current_balance == Decimal("400")


class TestValidation:
    async def test_unknown_worker(self, ledger, owner_id):
        with pytest.raises(NotFoundError):
            await ledger.record_attendance(owner_id, uuid4(), "2024-01-01", "present", 500)

    async def test_worker_of_other_owner(self, ledger, make_worker):
        worker = await make_worker()

        with pytest.raises(NotFoundError):
            await ledger.record_payment(uuid4(), worker.worker_id, "2024-01-01", 100)

    async def test_bad_status(self, ledger, owner_id, make_worker):
        worker = await make_worker()

        with pytest.raises(ValidationError) as exc_info:
            await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-01", "sick", 500)

        assert exc_info.value.field == "status"

    async def test_negative_base_amount(self, ledger, owner_id, make_worker):
        worker = await make_worker()

        with pytest.raises(ValidationError) as exc_info:
            await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-01", "present", -1)

        assert exc_info.value.field == "base_amount"

    @pytest.mark.parametrize("amount", [0, -50, None, "abc"])
    async def test_payment_amount_must_be_positive(self, ledger, owner_id, make_worker, amount):
        worker = await make_worker()

        with pytest.raises(ValidationError) as exc_info:
            await ledger.record_payment(owner_id, worker.worker_id, "2024-01-01", amount)

        assert exc_info.value.field == "amount"
        assert worker.current_balance == Decimal("0")

    @pytest.mark.parametrize("entry_date", [None, "", "01/02/2024"])
    async def test_entry_date_required(self, ledger, owner_id, make_worker, entry_date):
        worker = await make_worker()

        with pytest.raises(ValidationError) as exc_info:
            await ledger.record_payment(owner_id, worker.worker_id, entry_date, 100)

        assert exc_info.value.field == "entry_date"


class TestBackDating:
    """Events recorded out of date order rebase the later snapshots."""

    async def test_back_dated_attendance_rebases_later_events(
        self, ledger, owner_id, make_worker
    ):
        worker = await make_worker()
        wid = worker.worker_id
        await ledger.record_attendance(owner_id, wid, date(2024, 1, 3), "present", 500)
        await ledger.record_payment(owner_id, wid, date(2024, 1, 5), 200)

        result = await ledger.record_attendance(owner_id, wid, date(2024, 1, 1), "present", 100)

        assert result.rebased_entries == 2
        assert result.entry.balance_after == Decimal("100")
        assert worker.current_balance == Decimal("400")

        history = await ledger.list_history(owner_id, wid)
        assert [e.entry_date for e in history] == [
            date(2024, 1, 1),
            date(2024, 1, 3),
            date(2024, 1, 5),
        ]
        assert [e.balance_after for e in history] == [
            Decimal("100"),
            Decimal("600"),
            Decimal("400"),
        ]
        assert (await ledger.verify_worker(owner_id, wid)).is_consistent

    async def test_in_order_recording_rebases_nothing(self, ledger, owner_id, make_worker):
        worker = await make_worker()

        first = await ledger.record_attendance(
            owner_id, worker.worker_id, "2024-01-01", "present", 500
        )
        second = await ledger.record_payment(owner_id, worker.worker_id, "2024-01-01", 100)

        assert first.rebased_entries == 0
        assert second.rebased_entries == 0


class TestDeleteEntries:
    async def test_delete_attendance_replays_balance(self, ledger, owner_id, make_worker):
        worker = await make_worker()
        wid = worker.worker_id
        await ledger.record_attendance(owner_id, wid, "2024-01-01", "present", 100)
        middle = await ledger.record_attendance(owner_id, wid, "2024-01-03", "present", 500)
        await ledger.record_payment(owner_id, wid, "2024-01-05", 200)

        updated = await ledger.delete_attendance_entry(owner_id, middle.entry.entry_id)

        assert updated.current_balance == Decimal("-100")
        history = await ledger.list_history(owner_id, wid)
        assert [e.balance_after for e in history] == [Decimal("100"), Decimal("-100")]

    async def test_delete_payment(self, ledger, owner_id, make_worker):
        worker = await make_worker()
        await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-01", "present", 500)
        paid = await ledger.record_payment(owner_id, worker.worker_id, "2024-01-02", 200)

        updated = await ledger.delete_payment(owner_id, paid.entry.entry_id)

        assert updated.current_balance == Decimal("500")

    async def test_delete_unknown_entry(self, ledger, owner_id):
        with pytest.raises(NotFoundError):
            await ledger.delete_payment(owner_id, uuid4())


class TestConsistency:
    async def test_verify_clean_history(self, ledger, owner_id, make_worker):
        worker = await make_worker(opening_balance=100)
        await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-01", "half-day", 333)

        result = await ledger.verify_worker(owner_id, worker.worker_id)

        assert result.is_consistent
        assert result.replayed_balance == Decimal("266.5")
        await ledger.assert_consistent(owner_id, worker.worker_id)

    async def test_drifted_balance_detected_and_repaired(
        self, session, ledger, owner_id, make_worker
    ):
        worker = await make_worker()
        await ledger.record_attendance(owner_id, worker.worker_id, "2024-01-01", "present", 500)
        worker.current_balance = Decimal("999")
        await session.flush()

        verified = await ledger.verify_worker(owner_id, worker.worker_id)
        assert verified.is_consistent is False
        assert verified.drift == Decimal("499")

        with pytest.raises(ConsistencyError) as exc_info:
            await ledger.assert_consistent(owner_id, worker.worker_id)
        assert exc_info.value.replayed_balance == Decimal("500")

        repaired = await ledger.recompute_worker(owner_id, worker.worker_id)
        assert repaired.repaired is True
        assert worker.current_balance == Decimal("500")
        assert (await ledger.verify_worker(owner_id, worker.worker_id)).is_consistent

    async def test_stale_snapshot_reported(self, session, ledger, owner_id, make_worker):
        worker = await make_worker()
        result = await ledger.record_attendance(
            owner_id, worker.worker_id, "2024-01-01", "present", 500
        )
        result.entry.balance_after = Decimal("1")
        await session.flush()

        verified = await ledger.verify_worker(owner_id, worker.worker_id)

        assert verified.drift == Decimal("0")
        assert verified.stale_entries == [result.entry.entry_id]
        assert verified.is_consistent is False

    async def test_recompute_all(self, ledger, owner_id, make_worker):
        await make_worker(name="A")
        await make_worker(name="B")

        results = await ledger.recompute_all(owner_id)

        assert len(results) == 2
        assert not any(r.repaired for r in results)


class TestListing:
    async def test_list_events_date_range(self, ledger, owner_id, make_worker):
        worker = await make_worker()
        for day in (1, 2, 3):
            await ledger.record_attendance(
                owner_id, worker.worker_id, date(2024, 1, day), "present", 100
            )
        await ledger.record_payment(owner_id, worker.worker_id, date(2024, 1, 2), 50)

        events = await ledger.list_events(
            owner_id, date_from=date(2024, 1, 2), date_to=date(2024, 1, 2)
        )

        assert len(events) == 2
        assert await ledger.attendance_exists(worker.worker_id, date(2024, 1, 3))
        assert not await ledger.attendance_exists(worker.worker_id, date(2024, 1, 4))
