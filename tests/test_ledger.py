"""Tests for PaymentLedger."""

from dataclasses import replace
from datetime import datetime, timedelta
from typing import Callable

import pytest

from community_fees.billing import PaymentLedger
from community_fees.exceptions import StorageError, ValidationError
from community_fees.models.base import YearMonth
from community_fees.models.community import PaymentRecord, ParkingTier
from community_fees.storage import MemoryStorage
from community_fees.store import CommunityDataStore

RecordFactory = Callable[..., PaymentRecord]


class TestSubmit:
    """Tests for submit and the override path."""

    def test_submit_appends(self, ledger: PaymentLedger, make_record: RecordFactory) -> None:
        first = make_record(start="2024-01")
        second = make_record(start="2024-02")

        assert ledger.submit(first) is first
        ledger.submit(second)

        assert list(ledger.store.payments.values()) == [first, second]

    def test_same_key_overrides(self, ledger: PaymentLedger, make_record: RecordFactory) -> None:
        ledger.submit(make_record(resident_id="13-5", start="2024-01", total=800))
        ledger.submit(make_record(resident_id="13-5", start="2024-01", total=500))

        records = [p for p in ledger.store.payments.values() if p.resident_id == "13-5"]
        assert len(records) == 1
        assert records[0].total == 500

    def test_override_keeps_position(self, ledger: PaymentLedger, make_record: RecordFactory) -> None:
        ledger.submit(make_record(start="2024-01"))
        ledger.submit(make_record(start="2024-02"))
        replacement = make_record(start="2024-01", total=1600)

        ledger.submit(replacement)

        assert list(ledger.store.payments.values())[0] is replacement
        assert len(ledger.store.payments) == 2

    def test_unknown_resident_is_noop(
        self, ledger: PaymentLedger, make_record: RecordFactory
    ) -> None:
        assert ledger.submit(make_record(resident_id="99-99")) is None
        assert ledger.store.payments == {}

    def test_resident_update_saved_with_record(
        self, ledger: PaymentLedger, make_record: RecordFactory
    ) -> None:
        resident = ledger.store.residents["13-5"]
        update = replace(resident, car_parking=ParkingTier.SMALL, car_count=1)

        ledger.submit(make_record(), update)

        reloaded = CommunityDataStore(storage=ledger.store.storage).load()
        assert reloaded.residents["13-5"].car_count == 1
        assert ("13-5", 2024, 1) in reloaded.payments

    def test_mismatched_resident_update_rejected(
        self, ledger: PaymentLedger, make_record: RecordFactory
    ) -> None:
        other = ledger.store.residents["15-2"]
        with pytest.raises(ValidationError):
            ledger.submit(make_record(resident_id="13-5"), other)
        assert ledger.store.payments == {}

    def test_failed_write_rolls_back(
        self, make_record: RecordFactory, failing_storage: MemoryStorage
    ) -> None:
        storage = failing_storage
        store = CommunityDataStore(storage=storage).load()
        ledger = PaymentLedger(store)
        original = make_record(total=800)
        ledger.submit(original)
        resident = store.residents["13-5"]

        storage.fail = True
        with pytest.raises(StorageError):
            ledger.submit(make_record(total=500), replace(resident, car_count=3))

        assert store.payments[("13-5", 2024, 1)] is original
        assert store.residents["13-5"] is resident


class TestQueries:
    """Tests for lock, coverage and history queries."""

    def test_is_period_locked(self, ledger: PaymentLedger, make_record: RecordFactory) -> None:
        ledger.submit(make_record(start="2024-01", end="2024-06"))

        assert ledger.is_period_locked("13-5", 2024, 1)
        assert not ledger.is_period_locked("13-5", 2024, 3)
        assert not ledger.is_period_locked("15-5", 2024, 1)

    @pytest.mark.parametrize(
        ("target", "expected"),
        [
            (YearMonth(2023, 12), False),
            (YearMonth(2024, 1), True),
            (YearMonth(2024, 3), True),
            (YearMonth(2024, 6), True),
            (YearMonth(2024, 7), False),
        ],
    )
    def test_is_paid_for_calendar_month(
        self,
        ledger: PaymentLedger,
        make_record: RecordFactory,
        target: YearMonth,
        expected: bool,
    ) -> None:
        ledger.submit(make_record(start="2024-01", end="2024-06"))
        assert ledger.is_paid_for_calendar_month("13-5", target) is expected

    def test_coverage_across_year_boundary(
        self, ledger: PaymentLedger, make_record: RecordFactory
    ) -> None:
        ledger.submit(make_record(start="2023-11", end="2024-02"))
        assert ledger.is_paid_for_calendar_month("13-5", YearMonth(2024, 1))
        assert not ledger.is_paid_for_calendar_month("13-5", YearMonth(2024, 3))

    def test_coverage_is_per_resident(
        self, ledger: PaymentLedger, make_record: RecordFactory
    ) -> None:
        ledger.submit(make_record(resident_id="13-5", start="2024-01", end="2024-12"))
        assert not ledger.is_paid_for_calendar_month("13-6", YearMonth(2024, 5))

    def test_records_for_resident_newest_first(
        self, ledger: PaymentLedger, make_record: RecordFactory, now: datetime
    ) -> None:
        older = make_record(start="2024-01", paid_at=now - timedelta(days=40))
        newer = make_record(start="2024-02", paid_at=now)
        ledger.submit(newer)
        ledger.submit(older)
        ledger.submit(make_record(resident_id="15-1", start="2024-01"))

        assert ledger.records_for_resident("13-5") == [newer, older]

    def test_latest(self, ledger: PaymentLedger, make_record: RecordFactory, now: datetime) -> None:
        assert ledger.latest() is None
        newest = make_record(start="2023-01", paid_at=now)
        ledger.submit(newest)
        ledger.submit(make_record(start="2024-01", paid_at=now - timedelta(days=1)))

        assert ledger.latest() is newest


class TestDeleteAndRecency:
    """Tests for deletion and the recency window."""

    def test_delete(self, ledger: PaymentLedger, make_record: RecordFactory) -> None:
        ledger.submit(make_record())

        assert ledger.delete("13-5", 2024, 1) is True
        assert not ledger.is_period_locked("13-5", 2024, 1)
        assert CommunityDataStore(storage=ledger.store.storage).load().payments == {}

    def test_delete_missing_is_noop(self, ledger: PaymentLedger) -> None:
        assert ledger.delete("13-5", 2024, 1) is False

    def test_deletion_cutoff_is_midnight(self, ledger: PaymentLedger, now: datetime) -> None:
        assert ledger.deletion_cutoff(now) == datetime(2024, 3, 12, 0, 0, 0)

    def test_recent_payments_window(
        self, ledger: PaymentLedger, make_record: RecordFactory, now: datetime
    ) -> None:
        inside = make_record(start="2024-01", paid_at=datetime(2024, 3, 12, 0, 0, 0))
        outside = make_record(start="2024-02", paid_at=datetime(2024, 3, 11, 23, 59, 59))
        today = make_record(start="2024-03", paid_at=now)
        for record in (inside, outside, today):
            ledger.submit(record)

        assert ledger.recent_payments(now) == [today, inside]
        assert ledger.is_recent(inside, now)
        assert not ledger.is_recent(outside, now)

    def test_recent_payments_skip_missing_residents(
        self, ledger: PaymentLedger, make_record: RecordFactory, now: datetime
    ) -> None:
        ledger.submit(make_record())
        del ledger.store.residents["13-5"]
        assert ledger.recent_payments(now) == []
