"""Stage 2: Series merging, curve construction and export."""

from .series_merger import (
    SPOT,
    MergedRow,
    SeriesMerger,
    merge_series,
    merged_rows_to_frame,
    preview,
)
from .curve_builder import (
    CurveBuilder,
    CurvePoint,
    available_dates,
    build_curve,
    coerce_observation_date,
    curve_to_frame,
)
from .export import (
    export_merged_csv,
    merged_rows_to_csv,
)

__all__ = [
    "SPOT",
    "MergedRow",
    "SeriesMerger",
    "merge_series",
    "merged_rows_to_frame",
    "preview",
    "CurveBuilder",
    "CurvePoint",
    "available_dates",
    "build_curve",
    "coerce_observation_date",
    "curve_to_frame",
    "export_merged_csv",
    "merged_rows_to_csv",
]
