"""Payment record model."""

from dataclasses import dataclass
from datetime import datetime

from community_fees.models.base import PeriodRange, YearMonth


@dataclass
class PaymentRecord:
    """One billing transaction for one resident.

    ``(resident_id, year, month)`` is the natural key; year and month come
    from the start of the management period. Period boundaries are stored
    as ``"YYYY-MM"`` strings.
    """

    resident_id: str
    year: int
    month: int
    management_fee: int
    motorcycle_fee: int
    car_fee: int
    total: int
    paid_at: datetime
    management_start: str
    management_end: str
    motorcycle_start: str
    motorcycle_end: str
    car_start: str
    car_end: str

    @property
    def key(self) -> tuple[str, int, int]:
        return (self.resident_id, self.year, self.month)

    @property
    def management_period(self) -> PeriodRange:
        return PeriodRange(
            start=YearMonth.parse(self.management_start),
            end=YearMonth.parse(self.management_end),
        )

    @property
    def motorcycle_period(self) -> PeriodRange:
        return PeriodRange(
            start=YearMonth.parse(self.motorcycle_start),
            end=YearMonth.parse(self.motorcycle_end),
        )

    @property
    def car_period(self) -> PeriodRange:
        return PeriodRange(start=YearMonth.parse(self.car_start), end=YearMonth.parse(self.car_end))

    @classmethod
    def from_dict(cls, data: dict) -> "PaymentRecord":
        return cls(
            resident_id=data["resident_id"],
            year=int(data["year"]),
            month=int(data["month"]),
            management_fee=int(data["management_fee"]),
            motorcycle_fee=int(data["motorcycle_fee"]),
            car_fee=int(data["car_fee"]),
            total=int(data["total"]),
            paid_at=datetime.fromisoformat(data["paid_at"]),
            management_start=_month(data["management_start"]),
            management_end=_month(data["management_end"]),
            motorcycle_start=_month(data["motorcycle_start"]),
            motorcycle_end=_month(data["motorcycle_end"]),
            car_start=_month(data["car_start"]),
            car_end=_month(data["car_end"]),
        )


def _month(value: str) -> str:
    """Validate and normalize a ``"YYYY-MM"`` boundary."""
    return str(YearMonth.parse(value))
