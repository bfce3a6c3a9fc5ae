"""Join per-maturity price series into one date-indexed wide table.

Key principles:
- One row per distinct date observed in any input (union, not intersection).
- Rows are ordered most recent date first.
- Lookup is by exact date only. A maturity without an observation on a date
  is ``None`` in that row; nothing is forward- or back-filled.
- Every declared maturity id is a key of every row.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from datetime import date
from typing import Iterable, Mapping, Optional

import pandas as pd

from ..errors import UnassignedFiles
from ..stage1.price_parser import PriceSeries

LOGGER = logging.getLogger(__name__)

SPOT = "spot"


@dataclass(frozen=True)
class MergedRow:
    """One date of the merged table.

    ``prices`` maps every maturity id (ascending) to its price or None.
    ``spot`` is meaningful only when ``has_spot`` is set, i.e. a spot series
    was supplied to the merge.
    """

    date: date
    prices: dict[str, Optional[float]] = field(default_factory=dict)
    spot: Optional[float] = None
    has_spot: bool = False

    def get(self, key: str) -> Optional[float]:
        if key == SPOT:
            return self.spot
        return self.prices.get(key)

    def to_dict(self) -> dict[str, object]:
        out: dict[str, object] = {"date": self.date.isoformat()}
        if self.has_spot:
            out[SPOT] = self.spot
        out.update(self.prices)
        return out


def _as_optional(value: object) -> Optional[float]:
    if value is None:
        return None
    value = float(value)
    return None if math.isnan(value) else value


class SeriesMerger:
    """Merge N maturity series (+ optional spot) into :class:`MergedRow` s."""

    def validate_assignments(
        self,
        assignments: Mapping[str, str],
        series: Mapping[str, PriceSeries],
        maturity_ids: Optional[Iterable[str]] = None,
    ) -> None:
        """Raise UnassignedFiles listing every file without a usable maturity."""
        declared = set(maturity_ids) if maturity_ids is not None else None
        unassigned = []
        for name in series:
            maturity_id = assignments.get(name)
            if not maturity_id:
                unassigned.append(name)
            elif declared is not None and maturity_id not in declared:
                unassigned.append(name)
        if unassigned:
            raise UnassignedFiles(unassigned)

    def merge(
        self,
        assignments: Mapping[str, str],
        series: Mapping[str, PriceSeries],
        spot: Optional[PriceSeries] = None,
        maturity_ids: Optional[Iterable[str]] = None,
    ) -> list[MergedRow]:
        """Build the merged table.

        Args:
            assignments: file name -> maturity id
            series: file name -> parsed series
            spot: optional spot series; an empty series counts as absent
            maturity_ids: declared maturities; each becomes a key of every row

        Returns:
            Rows in descending date order (empty list when there is no data)
        """
        maturity_ids = list(maturity_ids) if maturity_ids is not None else None
        self.validate_assignments(assignments, series, maturity_ids)

        columns: dict[str, pd.Series] = {}
        for file_name, maturity_id in assignments.items():
            if not maturity_id:
                continue
            if file_name not in series:
                LOGGER.warning("Missing data for file %s, skipping", file_name)
                continue

            observed = series[file_name].to_pandas()
            if maturity_id in columns:
                LOGGER.warning("Several files assigned to %s; %s takes precedence", maturity_id, file_name)
                observed = observed.combine_first(columns[maturity_id])
            columns[maturity_id] = observed

        ids = sorted(set(maturity_ids or []) | set(columns))
        has_spot = spot is not None and not spot.is_empty

        frames = {k: s for k, s in columns.items() if len(s)}
        if has_spot:
            frames[SPOT] = spot.to_pandas()
        if not frames:
            return []

        panel = pd.concat(frames, axis=1, join="outer")
        panel = panel.reindex(columns=([SPOT] if has_spot else []) + ids)
        panel = panel.sort_index(ascending=False)

        rows = []
        for d, values in zip(panel.index, panel.itertuples(index=False, name=None)):
            record = dict(zip(panel.columns, values))
            rows.append(
                MergedRow(
                    date=d,
                    prices={mid: _as_optional(record[mid]) for mid in ids},
                    spot=_as_optional(record[SPOT]) if has_spot else None,
                    has_spot=has_spot,
                )
            )

        LOGGER.info("Merged %d dates across %d maturities%s", len(rows), len(ids), " + spot" if has_spot else "")
        return rows


def merge_series(
    assignments: Mapping[str, str],
    series: Mapping[str, PriceSeries],
    spot: Optional[PriceSeries] = None,
    maturity_ids: Optional[Iterable[str]] = None,
) -> list[MergedRow]:
    """Convenience wrapper around :meth:`SeriesMerger.merge`."""
    return SeriesMerger().merge(assignments, series, spot=spot, maturity_ids=maturity_ids)


def merged_rows_to_frame(rows: list[MergedRow]) -> pd.DataFrame:
    """Wide DataFrame: ``date``, ``spot`` (if supplied), then maturity ids sorted."""
    if not rows:
        return pd.DataFrame(columns=["date"])

    ids = sorted(rows[0].prices)
    columns = ["date"] + ([SPOT] if rows[0].has_spot else []) + ids
    records = []
    for row in rows:
        record: dict[str, object] = {"date": row.date}
        if row.has_spot:
            record[SPOT] = row.spot
        for mid in ids:
            record[mid] = row.prices.get(mid)
        records.append(record)
    return pd.DataFrame.from_records(records, columns=columns)


def preview(rows: list[MergedRow], n: int = 5) -> list[MergedRow]:
    """The ``n`` most recent rows."""
    return rows[:n]
