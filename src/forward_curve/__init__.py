"""Forward curve builder: per-maturity price series to forward curves."""

from .errors import (
    DateNotFound,
    DuplicateMaturity,
    EmptyMergeResult,
    ForwardCurveError,
    InvalidInput,
    UnassignedFiles,
)
from .session import CurveSession

__version__ = "0.1.0"

__all__ = [
    "CurveSession",
    "DateNotFound",
    "DuplicateMaturity",
    "EmptyMergeResult",
    "ForwardCurveError",
    "InvalidInput",
    "UnassignedFiles",
]
