"""Fee calculator.

Pure functions: identical inputs always give identical outputs and no
result is cached. Ranges are not validated; a reversed range bills zero
months for its category.
"""

from dataclasses import dataclass

from community_fees.models.base import YearMonth
from community_fees.models.community import FeeConfig, ParkingConfig, PeriodSelection, TierRates


def month_span(start: YearMonth, end: YearMonth) -> int:
    """Inclusive number of months from ``start`` to ``end``.

    Returns 0 when ``end`` is before ``start``.

    Examples
    --------
    >>> month_span(YearMonth(2024, 1), YearMonth(2024, 3))
    3
    >>> month_span(YearMonth(2024, 6), YearMonth(2024, 1))
    0
    """
    diff = (end.year - start.year) * 12 + (end.month - start.month)
    return diff + 1 if diff >= 0 else 0


def parking_fee(config: ParkingConfig, rates: TierRates, months: int) -> int:
    """Monthly parking charge for all units times the billed months."""
    return (config.small_count * rates.small + config.large_count * rates.large) * months


@dataclass(frozen=True)
class FeeBreakdown:
    """Billed amount and month count per fee category."""

    management: int
    motorcycle: int
    car: int
    management_months: int
    motorcycle_months: int
    car_months: int

    @property
    def total(self) -> int:
        return self.management + self.motorcycle + self.car


def calculate_fees(
    periods: PeriodSelection,
    motorcycle: ParkingConfig,
    car: ParkingConfig,
    rates: FeeConfig,
) -> FeeBreakdown:
    """Compute the fee breakdown for one payment.

    Parameters
    ----------
    periods : PeriodSelection
        Billed range for each category.
    motorcycle : ParkingConfig
        Motorcycle units rented, by tier.
    car : ParkingConfig
        Car units rented, by tier.
    rates : FeeConfig
        Monthly rate table.

    Returns
    -------
    FeeBreakdown
        Amounts and month counts per category.
    """
    management_months = month_span(periods.management.start, periods.management.end)
    motorcycle_months = month_span(periods.motorcycle.start, periods.motorcycle.end)
    car_months = month_span(periods.car.start, periods.car.end)

    return FeeBreakdown(
        management=rates.management * management_months,
        motorcycle=parking_fee(motorcycle, rates.motorcycle, motorcycle_months),
        car=parking_fee(car, rates.car, car_months),
        management_months=management_months,
        motorcycle_months=motorcycle_months,
        car_months=car_months,
    )
