"""Curve-construction session.

A :class:`CurveSession` is the single owner of the mutable workflow state:
declared maturities, loaded series, file assignments, the optional spot
series, and the last merged table and curve. Operations that fail leave the
previous state untouched.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import date, datetime
from pathlib import Path
from typing import Iterable, Optional

from .config import CurveConfig
from .errors import EmptyMergeResult, InvalidInput
from .stage0.expiry_schedule import ExpiryCalculator
from .stage0.maturity_registry import DeliveryDate, MaturityRegistry
from .stage1.file_loader import LoadReport, load_price_files, read_price_file
from .stage1.price_parser import PriceSeries, PriceSeriesParser
from .stage2.curve_builder import CurveBuilder, CurvePoint
from .stage2.export import export_merged_csv
from .stage2.series_merger import SPOT, MergedRow, SeriesMerger, preview

LOGGER = logging.getLogger(__name__)


@dataclass
class CurveSession:
    """One user's forward-curve workflow."""

    commodity: str = ""
    currency: str = ""
    parser: PriceSeriesParser = field(default_factory=PriceSeriesParser)
    max_workers: int = 4
    expiry_calc: ExpiryCalculator = field(default_factory=ExpiryCalculator)

    registry: MaturityRegistry = field(default_factory=MaturityRegistry, init=False)
    series: dict[str, PriceSeries] = field(default_factory=dict, init=False)
    assignments: dict[str, str] = field(default_factory=dict, init=False)
    spot: Optional[PriceSeries] = field(default=None, init=False)
    merged: list[MergedRow] = field(default_factory=list, init=False)
    curve: list[CurvePoint] = field(default_factory=list, init=False)

    # ------------------------------------------------------------------
    # Maturities
    # ------------------------------------------------------------------

    def add_maturity(self, month: int | str | None, year: int | str | None) -> DeliveryDate:
        return self.registry.add(month, year)

    def remove_maturity(self, maturity_id: str) -> None:
        """Remove a maturity and unassign every file mapped to it."""
        self.registry.remove(maturity_id)
        for name, assigned in self.assignments.items():
            if assigned == maturity_id:
                self.assignments[name] = ""
                LOGGER.info("Unassigned %s (maturity %s removed)", name, maturity_id)

    # ------------------------------------------------------------------
    # Series
    # ------------------------------------------------------------------

    def load_files(self, paths: Iterable[str | Path]) -> LoadReport:
        """Load a new file set, replacing the previous one.

        Files that fail to load are reported and left out; the others are
        kept. Every loaded file starts unassigned.
        """
        if len(self.registry) == 0:
            raise InvalidInput("Define maturities before loading files")

        report = load_price_files(paths, parser=self.parser, max_workers=self.max_workers)
        self.series = dict(report.series)
        self.assignments = {name: "" for name in self.series}
        return report

    def add_series(self, name: str, series: PriceSeries) -> None:
        """Add an already-parsed series (unassigned)."""
        self.series[name] = series
        self.assignments.setdefault(name, "")

    def load_spot(self, path: str | Path) -> PriceSeries:
        series, stats = read_price_file(path, parser=self.parser, name=SPOT)
        LOGGER.info("Processed spot file %s: %d points (%d rows dropped)", Path(path).name, len(series), stats.rows_dropped)
        self.spot = series
        return series

    def set_spot(self, series: Optional[PriceSeries]) -> None:
        self.spot = series

    def clear_spot(self) -> None:
        self.spot = None

    # ------------------------------------------------------------------
    # Assignments
    # ------------------------------------------------------------------

    def assign(self, file_name: str, maturity_id: str) -> None:
        if file_name not in self.series:
            raise InvalidInput(f"Unknown file: {file_name}")
        if maturity_id and maturity_id not in self.registry:
            raise InvalidInput(f"Unknown maturity: {maturity_id}")
        self.assignments[file_name] = maturity_id or ""

    def unassigned_files(self) -> list[str]:
        return [
            name
            for name in self.series
            if not self.assignments.get(name) or self.assignments[name] not in self.registry
        ]

    # ------------------------------------------------------------------
    # Merge / curve
    # ------------------------------------------------------------------

    def merge(self) -> list[MergedRow]:
        """Rebuild the merged table from the current file set.

        Raises:
            UnassignedFiles: some files lack a declared maturity
            EmptyMergeResult: the merge produced no rows
        """
        rows = SeriesMerger().merge(
            self.assignments,
            self.series,
            spot=self.spot,
            maturity_ids=self.registry.ids(),
        )
        if not rows:
            raise EmptyMergeResult()

        self.merged = rows
        return rows

    def preview(self, n: int = 5) -> list[MergedRow]:
        return preview(self.merged, n)

    def build_curve(self, observation_date: date | datetime | str) -> list[CurvePoint]:
        if not self.merged:
            raise InvalidInput("Merge the data before building a curve")
        points = CurveBuilder(self.expiry_calc).build(observation_date, self.merged, self.registry)
        self.curve = points
        return points

    def export_csv(self, output_path: str | Path) -> Path:
        if not self.merged:
            raise InvalidInput("Nothing to export: merge the data first")
        return export_merged_csv(self.merged, output_path)

    # ------------------------------------------------------------------
    # Construction
    # ------------------------------------------------------------------

    @classmethod
    def from_config(cls, config: CurveConfig) -> tuple["CurveSession", LoadReport]:
        """Build a session with maturities declared, files loaded and assigned."""
        session = cls(
            commodity=config.commodity,
            currency=config.currency,
            parser=PriceSeriesParser(config.date_field, config.price_field),
            max_workers=config.max_workers,
        )
        for maturity_id in config.maturities:
            session.registry.add_id(maturity_id)

        report = session.load_files([path for path, _ in config.files])
        for path, maturity_id in config.files:
            if path.name in session.series and maturity_id:
                session.assign(path.name, maturity_id)

        if config.spot is not None:
            session.load_spot(config.spot)
        return session, report
