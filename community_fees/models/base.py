"""Base value types shared across the domain."""

from dataclasses import dataclass

from community_fees.exceptions import ValidationError


@dataclass(frozen=True, order=True)
class YearMonth:
    """A calendar month, ordered chronologically."""

    year: int
    month: int  # 1-12

    def __post_init__(self) -> None:
        if not 1 <= self.month <= 12:
            raise ValidationError(f"Month must be between 1 and 12, got {self.month}")

    @classmethod
    def parse(cls, value: str) -> "YearMonth":
        """Parse a ``"YYYY-MM"`` string."""
        try:
            year, month = value.split("-")
            return cls(int(year), int(month))
        except (AttributeError, ValueError) as exc:
            raise ValidationError(f"Invalid year-month {value!r}, expected YYYY-MM") from exc

    @property
    def index(self) -> int:
        """Absolute month number, ``year * 12 + month``."""
        return self.year * 12 + self.month

    def shift(self, months: int) -> "YearMonth":
        """Return the month ``months`` later (or earlier when negative)."""
        zero_based = self.year * 12 + (self.month - 1) + months
        return YearMonth(zero_based // 12, zero_based % 12 + 1)

    def __str__(self) -> str:
        return f"{self.year}-{self.month:02d}"


@dataclass
class PeriodRange:
    """Inclusive range of billed months for one fee category."""

    start: YearMonth
    end: YearMonth

    def contains(self, target: YearMonth) -> bool:
        return self.start.index <= target.index <= self.end.index

    @classmethod
    def single(cls, month: YearMonth) -> "PeriodRange":
        return cls(start=month, end=month)

    @classmethod
    def from_dict(cls, data: dict) -> "PeriodRange":
        return cls(start=YearMonth.parse(data["start"]), end=YearMonth.parse(data["end"]))
