"""Domain models for community fee management."""

from community_fees.models.base import PeriodRange, YearMonth

__all__ = ["PeriodRange", "YearMonth"]
