"""Stage 1: Ingestion - raw rows to normalized price series."""

from .price_parser import (
    ParseStats,
    PricePoint,
    PriceSeries,
    PriceSeriesParser,
    parse_date,
    parse_price,
)
from .file_loader import (
    LoadReport,
    load_price_files,
    read_price_file,
    read_raw_rows,
)

__all__ = [
    "ParseStats",
    "PricePoint",
    "PriceSeries",
    "PriceSeriesParser",
    "parse_date",
    "parse_price",
    "LoadReport",
    "load_price_files",
    "read_price_file",
    "read_raw_rows",
]
