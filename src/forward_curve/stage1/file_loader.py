"""CSV loading for per-maturity price files.

Files are read and parsed concurrently (each parse is independent), and the
batch only returns once every file has completed. A failure in one file is
recorded against that file and never cancels or corrupts its siblings.
"""

from __future__ import annotations

import concurrent.futures
import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, Optional

import pandas as pd

from .price_parser import ParseStats, PriceSeries, PriceSeriesParser

LOGGER = logging.getLogger(__name__)


@dataclass
class LoadReport:
    """Outcome of loading a batch of files, keyed by file name."""

    series: dict[str, PriceSeries] = field(default_factory=dict)
    stats: dict[str, ParseStats] = field(default_factory=dict)
    failures: dict[str, str] = field(default_factory=dict)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def empty_files(self) -> list[str]:
        return [name for name, s in self.series.items() if s.is_empty]


def read_raw_rows(path: str | Path) -> list[dict[str, str]]:
    """Read a delimited text file into string-typed row mappings.

    An empty file yields no rows rather than an error.
    """
    try:
        df = pd.read_csv(
            path,
            dtype=str,
            keep_default_na=False,
            skip_blank_lines=True,
            encoding="utf-8",
        )
    except pd.errors.EmptyDataError:
        return []
    return df.to_dict(orient="records")


def read_price_file(
    path: str | Path,
    parser: Optional[PriceSeriesParser] = None,
    name: Optional[str] = None,
) -> tuple[PriceSeries, ParseStats]:
    """Read and parse one price file.

    Args:
        path: CSV file with (at least) date and price columns
        parser: Parser to apply; defaults to ``Date``/``Price`` fields
        name: Series identifier; defaults to the file name

    Returns:
        Tuple of (series, parse statistics)
    """
    path = Path(path)
    parser = parser or PriceSeriesParser()
    rows = read_raw_rows(path)
    return parser.parse_with_stats(rows, name=name or path.name)


def load_price_files(
    paths: Iterable[str | Path],
    parser: Optional[PriceSeriesParser] = None,
    max_workers: int = 4,
) -> LoadReport:
    """Load a batch of price files concurrently.

    Args:
        paths: Files to load; each series is keyed by its file name
        parser: Shared parser (stateless, safe across threads)
        max_workers: Thread pool size

    Returns:
        LoadReport with one entry per file, in input order
    """
    parser = parser or PriceSeriesParser()
    paths = [Path(p) for p in paths]
    report = LoadReport()
    if not paths:
        return report

    names = [p.name for p in paths]
    duplicates = sorted({n for n in names if names.count(n) > 1})
    if duplicates:
        LOGGER.warning("Duplicate file names, the last one wins: %s", ", ".join(duplicates))

    outcomes: dict[Path, tuple[PriceSeries, ParseStats] | Exception] = {}
    with concurrent.futures.ThreadPoolExecutor(max_workers=max(1, max_workers)) as executor:
        future_to_path = {executor.submit(read_price_file, p, parser): p for p in paths}

        for future in concurrent.futures.as_completed(future_to_path):
            path = future_to_path[future]
            try:
                outcomes[path] = future.result()
            except (ValueError, KeyError, pd.errors.EmptyDataError, OSError) as exc:
                outcomes[path] = exc

    for path in paths:
        outcome = outcomes[path]
        if isinstance(outcome, Exception):
            report.failures[path.name] = str(outcome)
            report.series.pop(path.name, None)
            report.stats.pop(path.name, None)
            LOGGER.error("Error reading %s: %s", path.name, outcome)
            continue

        series, stats = outcome
        report.failures.pop(path.name, None)
        report.series[path.name] = series
        report.stats[path.name] = stats
        LOGGER.info("Processed %s: %d points (%d rows dropped)", path.name, len(series), stats.rows_dropped)

    return report
