"""Forward curve construction for one observation date.

Key principles:
- The curve is read from the merged table row whose date equals the
  observation date exactly; there is no interpolation to nearby dates.
- Maturities are walked in registry order and their absolute years are
  resolved from the observation year (single year wrap).
- A maturity without a price on that date is left out of the curve.
- Spot, when present, always comes first with zero time-to-maturity.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date, datetime
from typing import Iterable, Optional

import pandas as pd

from ..errors import DateNotFound, InvalidInput
from ..stage0.expiry_schedule import ExpiryCalculator
from ..stage0.maturity_registry import DeliveryDate
from .series_merger import SPOT, MergedRow

LOGGER = logging.getLogger(__name__)

SPOT_LABEL = "Spot"


@dataclass(frozen=True)
class CurvePoint:
    maturity: str
    display_label: str
    price: float
    time_to_maturity_days: int
    expiry_date: Optional[date] = None

    @property
    def is_spot(self) -> bool:
        return self.maturity == SPOT


def coerce_observation_date(value: date | datetime | str) -> date:
    """Accept a date, datetime or ISO-like string; day precision only."""
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str) and value.strip():
        try:
            return pd.Timestamp(value.strip()).date()
        except ValueError:
            pass
    raise InvalidInput(f"Select a valid date (got {value!r})")


def available_dates(rows: list[MergedRow]) -> list[date]:
    return [r.date for r in rows]


class CurveBuilder:
    """Build ordered :class:`CurvePoint` sequences from merged rows."""

    def __init__(self, expiry_calc: Optional[ExpiryCalculator] = None):
        self.expiry_calc = expiry_calc or ExpiryCalculator()

    def find_row(self, observation_date: date, rows: list[MergedRow]) -> MergedRow:
        for row in rows:
            if row.date == observation_date:
                return row
        raise DateNotFound(observation_date)

    def build(
        self,
        observation_date: date | datetime | str,
        rows: list[MergedRow],
        registry: Iterable[DeliveryDate],
    ) -> list[CurvePoint]:
        """Build the curve for ``observation_date``.

        Raises:
            InvalidInput: observation date missing or unparseable
            DateNotFound: no merged row for that exact date
        """
        obs = coerce_observation_date(observation_date)
        row = self.find_row(obs, rows)

        points: list[CurvePoint] = []
        if row.has_spot and row.spot is not None:
            points.append(CurvePoint(maturity=SPOT, display_label=SPOT_LABEL, price=row.spot, time_to_maturity_days=0))

        deliveries = sorted(registry, key=lambda d: d.id)
        resolved = self.expiry_calc.infer_rollover_years(obs.year, [d.month for d in deliveries])

        for delivery, contract in zip(deliveries, resolved):
            price = row.prices.get(delivery.id)
            if price is None:
                continue
            expiry = self.expiry_calc.compute_expiry(contract)
            points.append(
                CurvePoint(
                    maturity=delivery.id,
                    display_label=delivery.label,
                    price=price,
                    time_to_maturity_days=self.expiry_calc.time_to_maturity(obs, expiry),
                    expiry_date=expiry,
                )
            )

        LOGGER.info("Curve for %s: %d points", obs.isoformat(), len(points))
        return points


def build_curve(
    observation_date: date | datetime | str,
    rows: list[MergedRow],
    registry: Iterable[DeliveryDate],
    expiry_calc: Optional[ExpiryCalculator] = None,
) -> list[CurvePoint]:
    """Convenience wrapper around :meth:`CurveBuilder.build`."""
    return CurveBuilder(expiry_calc).build(observation_date, rows, registry)


def curve_to_frame(points: list[CurvePoint]) -> pd.DataFrame:
    """Tabular maturity / price / time-to-maturity breakdown."""
    columns = ["maturity", "label", "price", "time_to_maturity_days", "expiry_date"]
    return pd.DataFrame.from_records(
        [
            {
                "maturity": p.maturity,
                "label": p.display_label,
                "price": p.price,
                "time_to_maturity_days": p.time_to_maturity_days,
                "expiry_date": p.expiry_date,
            }
            for p in points
        ],
        columns=columns,
    )
