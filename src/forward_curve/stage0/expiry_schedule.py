"""Contract expiry schedule calculation.

Every declared maturity expires on the third Friday of its delivery month,
the standard monthly futures/options convention. Curve positions derive
their time-to-maturity from that date, so expiry correctness is
foundational.

Declared maturities carry a month and a year, but the curve resolves the
absolute year of each contract from the observation date: the grid starts
in the observation year and rolls into the next year once, the first time
the month number goes down. Grids spanning more than twelve months in a
non-monotonic order cannot be resolved by this rule.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date, timedelta
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from ..utils.month_codes import format_contract, format_maturity_id, maturity_label

FRIDAY = 4


@dataclass(frozen=True)
class ContractMonth:
    """A delivery month resolved to an absolute year."""

    month: int
    year: int

    @property
    def maturity_id(self) -> str:
        return format_maturity_id(self.year, self.month)


@dataclass
class ExpiryCalculator:
    """Calculate contract expiry dates and time-to-maturity.

    Parameters
    ----------
    occurrence : int
        Which Friday of the month the contract expires on. Monthly
        commodity futures use the third.
    """

    occurrence: int = 3

    def third_friday(self, year: int, month: int) -> date:
        """Third Friday of a month, scanning forward from the 1st."""
        return self.nth_weekday(year, month, FRIDAY, self.occurrence)

    def nth_weekday(self, year: int, month: int, weekday: int, n: int) -> date:
        if not 1 <= month <= 12:
            raise ValueError(f"Invalid month: {month}")
        if n < 1:
            raise ValueError("n must be >= 1")

        day = date(year, month, 1)
        seen = 0
        while day.month == month:
            if day.weekday() == weekday:
                seen += 1
                if seen == n:
                    return day
            day += timedelta(days=1)
        raise ValueError(f"Month {year}-{month:02d} has fewer than {n} matching weekdays")

    def infer_rollover_years(self, base_year: int, months: Iterable[int]) -> list[ContractMonth]:
        """Resolve each delivery month to an absolute year.

        The running year starts at ``base_year`` and increments every time a
        month number is lower than the one before it, so ``[11, 12, 1, 2]``
        anchored at 2024 gives Nov/Dec 2024 and Jan/Feb 2025.
        """
        resolved: list[ContractMonth] = []
        year = int(base_year)
        previous: Optional[int] = None
        for month in months:
            month = int(month)
            if previous is not None and month < previous:
                year += 1
            resolved.append(ContractMonth(month=month, year=year))
            previous = month
        return resolved

    def time_to_maturity(self, observation_date: date, expiry_date: date) -> int:
        """Whole days from observation to expiry, rounded up.

        Negative when the contract has already expired at ``observation_date``.
        """
        delta = pd.Timestamp(expiry_date) - pd.Timestamp(observation_date)
        return int(math.ceil(delta / pd.Timedelta(days=1)))

    def compute_expiry(self, contract: ContractMonth) -> date:
        return self.third_friday(contract.year, contract.month)


def build_expiry_table(
    start_year: int,
    end_year: int,
    symbol: Optional[str] = None,
) -> pd.DataFrame:
    """Build the monthly expiry table for a range of years."""
    calc = ExpiryCalculator()

    records = []
    for year in range(start_year, end_year + 1):
        for month in range(1, 13):
            record = {
                "maturity_id": format_maturity_id(year, month),
                "year": year,
                "month": month,
                "label": maturity_label(year, month),
                "expiry_date": calc.third_friday(year, month),
            }
            if symbol:
                record["contract"] = format_contract(symbol.upper(), year, month)
            records.append(record)

    df = pd.DataFrame(records)
    if len(df) == 0:
        return df

    df = df.sort_values("expiry_date").reset_index(drop=True)
    return df


def save_expiry_table(df: pd.DataFrame, output_path: str | Path) -> Path:
    """Save expiry table to CSV."""
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    df.to_csv(out, index=False)
    return out
