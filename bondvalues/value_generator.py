"""Daily bond value series from yearly rates of return."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_EVEN, Decimal

_CENT = Decimal("0.01")


def _two_decimal_places(value: float) -> float:
    return float(Decimal(value).quantize(_CENT, rounding=ROUND_HALF_EVEN))


@dataclass
class ValueGenerator:
    """Accumulates yearly return rates and turns them into daily values."""

    initial_value: float
    yearly_returns: list[float] = field(default_factory=list)

    def add_yearly_return(self, return_rate: float) -> None:
        """Append the return rate of the next bond year."""
        self.yearly_returns.append(return_rate)

    def calculate_daily_bond_values(self, start_date: date) -> list[float]:
        """Return the value for the start day and every day of each bond year.

        Interest accrues linearly within a year and is capitalised at its end;
        every daily value is rounded to two decimal places.
        """
        values = [self.initial_value]
        current_value = self.initial_value

        for year, rate in enumerate(self.yearly_returns):
            year_start = start_date.replace(year=start_date.year + year)
            year_end = year_start.replace(year=year_start.year + 1)
            days_in_year = (year_end - year_start).days

            values.extend(
                _two_decimal_places(current_value + current_value * (day / days_in_year) * rate)
                for day in range(1, days_in_year + 1)
            )
            current_value = values[-1]

        return values