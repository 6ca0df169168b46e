"""Tests for PaymentEntry."""

from datetime import date, datetime

import pytest

from community_fees.billing import PaymentEntry, PeriodForm
from community_fees.exceptions import ValidationError
from community_fees.models.base import PeriodRange, YearMonth
from community_fees.models.community import (
    FeeCategory,
    FeeConfig,
    ParkingConfig,
    ParkingTier,
    Resident,
)


def _entry() -> PaymentEntry:
    form = PeriodForm.starting(YearMonth(2024, 1))
    form.set_end(FeeCategory.MANAGEMENT, YearMonth(2024, 3))
    return PaymentEntry.from_form(
        "13-5",
        form,
        motorcycle=ParkingConfig(small_count=1),
        car=ParkingConfig(large_count=1),
    )


class TestPaymentEntry:
    """Tests for building records and resident updates."""

    def test_key_from_management_start(self) -> None:
        assert _entry().key == ("13-5", 2024, 1)

    def test_preview(self) -> None:
        breakdown = _entry().preview(FeeConfig())
        assert breakdown.management == 2400
        assert breakdown.motorcycle == 100
        assert breakdown.car == 1800
        assert breakdown.total == 4300

    def test_build_record(self) -> None:
        paid_at = datetime(2024, 1, 5, 9, 0)
        record = _entry().build_record(FeeConfig(), paid_at=paid_at)

        assert record.key == ("13-5", 2024, 1)
        assert record.total == 4300
        assert record.paid_at == paid_at
        assert (record.management_start, record.management_end) == ("2024-01", "2024-03")
        assert (record.car_start, record.car_end) == ("2024-01", "2024-01")

    def test_build_resident_update(self) -> None:
        resident = Resident.for_unit("13", 5)
        entry = _entry()

        updated = entry.build_resident_update(resident)

        assert updated.motorcycle_parking == ParkingTier.SMALL
        assert updated.motorcycle_count == 1
        assert updated.car_parking == ParkingTier.LARGE
        assert updated.car_count == 1
        assert updated.last_parking_config.car == ParkingConfig(large_count=1)
        assert updated.last_payment_periods == entry.periods
        assert resident.last_payment_periods is None

    def test_update_snapshot_is_independent(self) -> None:
        entry = _entry()
        updated = entry.build_resident_update(Resident.for_unit("13", 5))

        entry.periods.management.end = YearMonth(2024, 12)
        entry.car.large_count = 3

        assert updated.last_payment_periods.management.end == YearMonth(2024, 3)
        assert updated.last_parking_config.car.large_count == 1

    def test_prefilled_without_history(self) -> None:
        entry = PaymentEntry.prefilled(Resident.for_unit("13", 5), date(2024, 5, 2))
        assert entry.periods.management == PeriodRange.single(YearMonth(2024, 5))
        assert entry.car == ParkingConfig()

    def test_prefilled_from_last_payment(self) -> None:
        resident = _entry().build_resident_update(Resident.for_unit("13", 5))

        entry = PaymentEntry.prefilled(resident, date(2024, 5, 2))

        assert entry.periods.management == PeriodRange(YearMonth(2024, 1), YearMonth(2024, 3))
        assert entry.motorcycle == ParkingConfig(small_count=1)
        entry.motorcycle.small_count = 4
        assert resident.last_parking_config.motorcycle.small_count == 1

    def test_negative_count_set_after_construction_refused(self) -> None:
        entry = _entry()
        entry.car.small_count = -1

        with pytest.raises(ValidationError):
            entry.build_record(FeeConfig())
