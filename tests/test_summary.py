"""Tests for dashboard summary aggregation."""

from datetime import date
from decimal import Decimal

from labour_ledger.calculators import AttendanceStatus, summarize


class TestSummarize:
    """Test summary statistics over scoped workers and events."""

    def test_empty(self):
        stats = summarize([], [])

        assert stats.total_owed_by_owner == Decimal("0")
        assert stats.total_owed_to_owner == Decimal("0")
        assert stats.active_workers == 0
        assert stats.workers_count == 0
        assert stats.total_transactions == 0

    def test_balances_split_by_sign(self, make_fake_worker):
        workers = [
            make_fake_worker("1500"),
            make_fake_worker("-200"),
            make_fake_worker("0"),
            make_fake_worker("300"),
        ]

        stats = summarize(workers, [])

        assert stats.total_owed_by_owner == Decimal("1800")
        assert stats.total_owed_to_owner == Decimal("200")
        assert stats.active_workers == 3
        assert stats.workers_count == 4
        assert stats.net_balance == Decimal("1600")

    def test_event_totals_use_stored_amounts(self, make_attendance, make_payment):
        day = date(2024, 1, 1)
        events = [
            make_attendance(day, "500", 1),
            make_attendance(date(2024, 1, 2), "250", 2, status=AttendanceStatus.HALF_DAY),
            make_attendance(date(2024, 1, 3), "0", 3, status=AttendanceStatus.ABSENT),
            make_payment(date(2024, 1, 3), "600", 4),
        ]

        stats = summarize([], events)

        assert stats.total_wages_given == Decimal("750")
        assert stats.total_payments_made == Decimal("600")
        assert stats.present_days == 1
        assert stats.half_days == 1
        assert stats.absent_days == 1
        assert stats.total_attendance_days == 3
        assert stats.total_transactions == 4
        assert stats.net_amount == Decimal("150")

    def test_to_dict_includes_derived_totals(self, make_fake_worker):
        data = summarize([make_fake_worker("100")], []).to_dict()

        assert data["net_balance"] == Decimal("100")
        assert data["net_amount"] == Decimal("0")
        assert data["active_workers"] == 1
