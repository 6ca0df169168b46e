"""Editable billing periods with start/end auto-correction."""

from dataclasses import dataclass, field, replace
from datetime import date

from community_fees.models.base import PeriodRange, YearMonth
from community_fees.models.community import FeeCategory, PeriodSelection, Resident


@dataclass
class PeriodForm:
    """Start and end month per fee category, as edited on the entry form.

    Moving a start past its end drags the end along (and vice versa); the
    category is then listed in ``corrected`` until its next clean edit.
    """

    management: PeriodRange
    motorcycle: PeriodRange
    car: PeriodRange
    corrected: set[FeeCategory] = field(default_factory=set)

    @classmethod
    def starting(cls, month: YearMonth) -> "PeriodForm":
        """Form with every category set to the single month ``month``."""
        return cls(
            management=PeriodRange.single(month),
            motorcycle=PeriodRange.single(month),
            car=PeriodRange.single(month),
        )

    @classmethod
    def for_today(cls, today: date | None = None) -> "PeriodForm":
        today = today or date.today()
        return cls.starting(YearMonth(today.year, today.month))

    def range_for(self, category: FeeCategory) -> PeriodRange:
        return getattr(self, FeeCategory(category).value)

    def set_start(self, category: FeeCategory, value: YearMonth) -> bool:
        """Set a start month, snapping the end forward if needed.

        Returns True when the end was snapped.
        """
        period = self.range_for(category)
        period.start = value
        if value > period.end:
            period.end = value
            self.corrected.add(FeeCategory(category))
            return True
        self.corrected.discard(FeeCategory(category))
        return False

    def set_end(self, category: FeeCategory, value: YearMonth) -> bool:
        """Set an end month, snapping the start back if needed.

        Returns True when the start was snapped.
        """
        period = self.range_for(category)
        period.end = value
        if value < period.start:
            period.start = value
            self.corrected.add(FeeCategory(category))
            return True
        self.corrected.discard(FeeCategory(category))
        return False

    def prefill(self, resident: Resident) -> bool:
        """Load the periods cached on the resident's last payment, if any."""
        cached = resident.last_payment_periods
        if cached is None:
            return False
        self.management = replace(cached.management)
        self.motorcycle = replace(cached.motorcycle)
        self.car = replace(cached.car)
        self.corrected.clear()
        return True

    def selection(self) -> PeriodSelection:
        """Snapshot of the current ranges."""
        return PeriodSelection(
            management=replace(self.management),
            motorcycle=replace(self.motorcycle),
            car=replace(self.car),
        )
