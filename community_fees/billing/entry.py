"""Payment entry: turns form input into a payment record and resident update."""

from dataclasses import dataclass, field, replace
from datetime import date, datetime

from community_fees.billing.calculator import FeeBreakdown, calculate_fees
from community_fees.billing.periods import PeriodForm
from community_fees.models.community import (
    FeeConfig,
    ParkingConfig,
    ParkingSnapshot,
    PaymentRecord,
    PeriodSelection,
    Resident,
)


@dataclass
class PaymentEntry:
    """A payment being prepared for one resident."""

    resident_id: str
    periods: PeriodSelection
    motorcycle: ParkingConfig = field(default_factory=ParkingConfig)
    car: ParkingConfig = field(default_factory=ParkingConfig)

    @classmethod
    def from_form(
        cls,
        resident_id: str,
        form: PeriodForm,
        motorcycle: ParkingConfig | None = None,
        car: ParkingConfig | None = None,
    ) -> "PaymentEntry":
        return cls(
            resident_id=resident_id,
            periods=form.selection(),
            motorcycle=motorcycle or ParkingConfig(),
            car=car or ParkingConfig(),
        )

    @classmethod
    def prefilled(cls, resident: Resident, today: date | None = None) -> "PaymentEntry":
        """Entry pre-filled from the resident's last payment, else this month."""
        form = PeriodForm.for_today(today)
        form.prefill(resident)
        snapshot = resident.last_parking_config or ParkingSnapshot()
        return cls.from_form(
            resident.resident_id,
            form,
            motorcycle=replace(snapshot.motorcycle),
            car=replace(snapshot.car),
        )

    @property
    def key(self) -> tuple[str, int, int]:
        """Natural key of the record this entry produces."""
        start = self.periods.management.start
        return (self.resident_id, start.year, start.month)

    def preview(self, rates: FeeConfig) -> FeeBreakdown:
        return calculate_fees(self.periods, self.motorcycle, self.car, rates)

    def build_record(self, rates: FeeConfig, paid_at: datetime | None = None) -> PaymentRecord:
        """Build the payment record, computing fees from ``rates``."""
        self.motorcycle.validate()
        self.car.validate()
        fees = self.preview(rates)
        _, year, month = self.key
        return PaymentRecord(
            resident_id=self.resident_id,
            year=year,
            month=month,
            management_fee=fees.management,
            motorcycle_fee=fees.motorcycle,
            car_fee=fees.car,
            total=fees.total,
            paid_at=paid_at or datetime.now(),
            management_start=str(self.periods.management.start),
            management_end=str(self.periods.management.end),
            motorcycle_start=str(self.periods.motorcycle.start),
            motorcycle_end=str(self.periods.motorcycle.end),
            car_start=str(self.periods.car.start),
            car_end=str(self.periods.car.end),
        )

    def build_resident_update(self, resident: Resident) -> Resident:
        """Resident with current parking and the cached snapshot refreshed."""
        return replace(
            resident,
            motorcycle_parking=self.motorcycle.tier,
            motorcycle_count=self.motorcycle.total,
            car_parking=self.car.tier,
            car_count=self.car.total,
            last_parking_config=ParkingSnapshot(
                motorcycle=replace(self.motorcycle),
                car=replace(self.car),
            ),
            last_payment_periods=PeriodSelection(
                management=replace(self.periods.management),
                motorcycle=replace(self.periods.motorcycle),
                car=replace(self.periods.car),
            ),
        )
