"""Normalization of raw tabular rows into date-indexed price series.

Rows arrive as string-typed mappings (one per CSV line). A row survives only
when both its date and price fields are present and parse cleanly; every
other row is dropped without raising, so an empty series is a valid result.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Iterator, Mapping, Optional

import pandas as pd

LOGGER = logging.getLogger(__name__)

DEFAULT_DATE_FIELD = "Date"
DEFAULT_PRICE_FIELD = "Price"

# Anything that is not part of a plain decimal number ("$", ",", " USD", ...)
_PRICE_NOISE = re.compile(r"[^0-9.\-]+")
# Leading decimal number of the cleaned text; trailing junk is ignored.
_LEADING_NUMBER = re.compile(r"-?(?:\d+\.?\d*|\.\d+)")
# pandas resolves keywords such as "now" and "today"; real dates carry digits.
_HAS_DIGIT = re.compile(r"\d")


@dataclass(frozen=True)
class PricePoint:
    date: date
    price: float


@dataclass
class PriceSeries:
    """Price observations owned by one source (a file name or ``"spot"``).

    At most one point per date is kept; the last one parsed wins.
    """

    name: str
    points: list[PricePoint] = field(default_factory=list)

    def __post_init__(self) -> None:
        by_date: dict[date, PricePoint] = {}
        for p in self.points:
            by_date[p.date] = p
        self.points = list(by_date.values())

    @classmethod
    def from_points(cls, name: str, points: Iterable[PricePoint]) -> "PriceSeries":
        return cls(name=name, points=list(points))

    def __len__(self) -> int:
        return len(self.points)

    def __iter__(self) -> Iterator[PricePoint]:
        return iter(self.points)

    @property
    def is_empty(self) -> bool:
        return not self.points

    def dates(self) -> set[date]:
        return {p.date for p in self.points}

    def price_on(self, on: date) -> Optional[float]:
        for p in self.points:
            if p.date == on:
                return p.price
        return None

    def to_pandas(self) -> pd.Series:
        """Prices indexed by date (python ``date`` objects)."""
        return pd.Series(
            [p.price for p in self.points],
            index=pd.Index([p.date for p in self.points], name="date"),
            name=self.name,
            dtype="float64",
        )


@dataclass
class ParseStats:
    rows_read: int = 0
    rows_kept: int = 0
    missing_fields: int = 0
    bad_dates: int = 0
    bad_prices: int = 0

    @property
    def rows_dropped(self) -> int:
        return self.rows_read - self.rows_kept


def parse_price(raw: object) -> Optional[float]:
    """Normalize a price field.

    Every character that is not a digit, ``.`` or ``-`` is stripped and the
    leading decimal number is taken, so ``"$1,234.50"`` gives ``1234.5``.
    Returns None when no finite number can be read.
    """
    if raw is None:
        return None
    text = str(raw)
    if not text.strip():
        return None

    cleaned = _PRICE_NOISE.sub("", text)
    match = _LEADING_NUMBER.match(cleaned)
    if not match:
        return None

    value = float(match.group(0))
    if not math.isfinite(value):
        return None
    return value


def parse_date(raw: object) -> Optional[date]:
    """Parse a date field to a calendar date, or None if unparseable."""
    if raw is None:
        return None
    text = str(raw).strip()
    if not text or not _HAS_DIGIT.search(text):
        return None
    try:
        ts = pd.to_datetime(text, errors="coerce")
    except (ValueError, TypeError, OverflowError):
        return None
    if ts is None or pd.isna(ts):
        return None
    return ts.date()


def _lookup(row: Mapping[str, object], field_name: str) -> object:
    """Fetch a field by name, ignoring case and surrounding whitespace."""
    if field_name in row:
        return row[field_name]
    wanted = field_name.strip().lower()
    for key, value in row.items():
        if isinstance(key, str) and key.strip().lower() == wanted:
            return value
    return None


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    if isinstance(value, float) and math.isnan(value):
        return True
    return isinstance(value, str) and not value.strip()


class PriceSeriesParser:
    """Turn raw ``{Date, Price}`` rows into a :class:`PriceSeries`."""

    def __init__(
        self,
        date_field: str = DEFAULT_DATE_FIELD,
        price_field: str = DEFAULT_PRICE_FIELD,
    ):
        self.date_field = date_field
        self.price_field = price_field

    def parse(self, raw_rows: Iterable[Mapping[str, object]], name: str = "") -> PriceSeries:
        series, _ = self.parse_with_stats(raw_rows, name=name)
        return series

    def parse_with_stats(
        self,
        raw_rows: Iterable[Mapping[str, object]],
        name: str = "",
    ) -> tuple[PriceSeries, ParseStats]:
        stats = ParseStats()
        points: list[PricePoint] = []

        for row in raw_rows:
            stats.rows_read += 1
            raw_date = _lookup(row, self.date_field)
            raw_price = _lookup(row, self.price_field)
            if _is_blank(raw_date) or _is_blank(raw_price):
                stats.missing_fields += 1
                continue

            d = parse_date(raw_date)
            if d is None:
                stats.bad_dates += 1
                continue

            price = parse_price(raw_price)
            if price is None:
                stats.bad_prices += 1
                continue

            points.append(PricePoint(date=d, price=price))

        series = PriceSeries.from_points(name, points)
        stats.rows_kept = len(points)
        if stats.rows_dropped:
            LOGGER.debug(
                "%s: dropped %d of %d rows (missing=%d, bad dates=%d, bad prices=%d)",
                name or "<rows>",
                stats.rows_dropped,
                stats.rows_read,
                stats.missing_fields,
                stats.bad_dates,
                stats.bad_prices,
            )
        return series, stats
