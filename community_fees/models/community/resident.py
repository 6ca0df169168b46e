"""Resident (unit) model."""

from dataclasses import dataclass, field

from community_fees.exceptions import ValidationError
from community_fees.models.base import PeriodRange
from community_fees.models.community.enums import ParkingTier

ADDRESS_NUMBERS = (
    "13", "13-1", "15", "15-1", "17", "17-1",
    "19", "19-1", "21", "21-1", "21-2", "21-3", "23", "23-1", "23-2", "23-3",
)
FLOORS = tuple(range(1, 11))


def build_resident_id(address_number: str, floor: int | str, suffix: str | None = None) -> str:
    """Build the unit key, e.g. ``"13-5"`` or ``"21-2-3"``."""
    number = f"{address_number}-{suffix}" if suffix else address_number
    return f"{number}-{floor}"


@dataclass
class ParkingConfig:
    """Number of parking units rented, per tier."""

    small_count: int = 0
    large_count: int = 0

    def __post_init__(self) -> None:
        self.validate()

    def validate(self) -> None:
        """Raise ValidationError if either count is negative."""
        if self.small_count < 0 or self.large_count < 0:
            raise ValidationError("Parking unit counts cannot be negative")

    @property
    def total(self) -> int:
        return self.small_count + self.large_count

    @property
    def tier(self) -> ParkingTier:
        if self.large_count > 0:
            return ParkingTier.LARGE
        if self.small_count > 0:
            return ParkingTier.SMALL
        return ParkingTier.NONE

    @classmethod
    def from_dict(cls, data: dict) -> "ParkingConfig":
        return cls(small_count=int(data["small_count"]), large_count=int(data["large_count"]))


@dataclass
class ParkingSnapshot:
    """Parking configuration used on the last confirmed payment."""

    motorcycle: ParkingConfig = field(default_factory=ParkingConfig)
    car: ParkingConfig = field(default_factory=ParkingConfig)

    @classmethod
    def from_dict(cls, data: dict) -> "ParkingSnapshot":
        return cls(
            motorcycle=ParkingConfig.from_dict(data["motorcycle"]),
            car=ParkingConfig.from_dict(data["car"]),
        )


@dataclass
class PeriodSelection:
    """One billed range per fee category."""

    management: PeriodRange
    motorcycle: PeriodRange
    car: PeriodRange

    @classmethod
    def from_dict(cls, data: dict) -> "PeriodSelection":
        return cls(
            management=PeriodRange.from_dict(data["management"]),
            motorcycle=PeriodRange.from_dict(data["motorcycle"]),
            car=PeriodRange.from_dict(data["car"]),
        )


@dataclass
class Resident:
    """A residential unit, keyed by address number and floor."""

    resident_id: str
    address_number: str
    floor: int  # 1-10
    motorcycle_parking: ParkingTier = ParkingTier.NONE
    motorcycle_count: int = 0
    car_parking: ParkingTier = ParkingTier.NONE
    car_count: int = 0
    # Pre-fill for the next payment entry
    last_parking_config: ParkingSnapshot | None = None
    last_payment_periods: PeriodSelection | None = None

    @classmethod
    def for_unit(cls, address_number: str, floor: int) -> "Resident":
        return cls(
            resident_id=build_resident_id(address_number, floor),
            address_number=address_number,
            floor=floor,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "Resident":
        parking = data.get("last_parking_config")
        periods = data.get("last_payment_periods")
        floor = int(data["floor"])
        resident_id = build_resident_id(data["address_number"], floor)
        if data["resident_id"] != resident_id:
            raise ValidationError(
                f"Resident id {data['resident_id']!r} does not match unit {resident_id!r}"
            )
        return cls(
            resident_id=data["resident_id"],
            address_number=data["address_number"],
            floor=floor,
            motorcycle_parking=ParkingTier(data.get("motorcycle_parking", "none")),
            motorcycle_count=int(data.get("motorcycle_count", 0)),
            car_parking=ParkingTier(data.get("car_parking", "none")),
            car_count=int(data.get("car_count", 0)),
            last_parking_config=ParkingSnapshot.from_dict(parking) if parking else None,
            last_payment_periods=PeriodSelection.from_dict(periods) if periods else None,
        )
