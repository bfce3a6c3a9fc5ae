"""Delimited-text export of the merged table.

Columns are ``date``, ``spot`` (only when a spot series was merged) and the
maturity ids in lexicographic order. Rows keep the merged (descending date)
order. Missing prices are written as empty cells.
"""

from __future__ import annotations

from pathlib import Path

from .series_merger import MergedRow, merged_rows_to_frame

DEFAULT_EXPORT_NAME = "merged_prices.csv"


def merged_rows_to_csv(rows: list[MergedRow]) -> str:
    df = merged_rows_to_frame(rows)
    if "date" in df.columns and len(df):
        df["date"] = df["date"].map(lambda d: d.isoformat())
    return df.to_csv(index=False, na_rep="")


def export_merged_csv(rows: list[MergedRow], output_path: str | Path) -> Path:
    """Write the merged table to CSV."""
    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)
    out.write_text(merged_rows_to_csv(rows), encoding="utf-8")
    return out
