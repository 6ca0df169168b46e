"""Fee rate table."""

from dataclasses import dataclass, field
from datetime import datetime


def _rate(value: object) -> int:
    """Whole, non-negative rate; raises ValueError otherwise."""
    if isinstance(value, bool) or not isinstance(value, (int, str)):
        raise ValueError(f"Invalid rate {value!r}")
    rate = int(value)
    if rate < 0:
        raise ValueError(f"Rate cannot be negative, got {rate}")
    return rate


@dataclass
class TierRates:
    """Monthly rate per parking unit, by tier."""

    small: int
    large: int

    @classmethod
    def from_dict(cls, data: dict) -> "TierRates":
        return cls(small=_rate(data["small"]), large=_rate(data["large"]))


@dataclass
class FeeConfig:
    """Global monthly rate table, editable by managers."""

    management: int = 800
    motorcycle: TierRates = field(default_factory=lambda: TierRates(small=100, large=200))
    car: TierRates = field(default_factory=lambda: TierRates(small=1200, large=1800))
    last_modified_by: str | None = None
    last_modified_at: datetime | None = None

    @property
    def rates(self) -> tuple[int, ...]:
        """Every rate in the table, management first."""
        return (
            self.management,
            self.motorcycle.small,
            self.motorcycle.large,
            self.car.small,
            self.car.large,
        )

    @classmethod
    def from_dict(cls, data: dict) -> "FeeConfig":
        """Load a persisted table.

        Raises
        ------
        ValueError
            A rate is not a whole, non-negative number.
        KeyError
            A rate is missing.
        """
        modified_at = data.get("last_modified_at")
        return cls(
            management=_rate(data["management"]),
            motorcycle=TierRates.from_dict(data["motorcycle"]),
            car=TierRates.from_dict(data["car"]),
            last_modified_by=data.get("last_modified_by"),
            last_modified_at=datetime.fromisoformat(modified_at) if modified_at else None,
        )
