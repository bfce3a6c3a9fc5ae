"""Exception taxonomy for the forward curve engine.

Every error derives from ``ValueError`` so callers that only guard against
bad input keep working.
"""

from __future__ import annotations

from datetime import date
from typing import Iterable


class ForwardCurveError(ValueError):
    """Base class for all user-correctable engine errors."""


class InvalidInput(ForwardCurveError):
    """A required field is missing or malformed."""


class DuplicateMaturity(ForwardCurveError):
    def __init__(self, maturity_id: str):
        self.maturity_id = maturity_id
        super().__init__(f"Maturity {maturity_id} already exists")


class UnassignedFiles(ForwardCurveError):
    """Merge requested while some series still lack a maturity."""

    def __init__(self, names: Iterable[str]):
        self.names = list(names)
        super().__init__(
            "Assign a maturity to every file before merging: " + ", ".join(self.names)
        )


class DateNotFound(ForwardCurveError):
    def __init__(self, observation_date: date):
        self.observation_date = observation_date
        super().__init__(f"No data found for {observation_date.isoformat()}")


class EmptyMergeResult(ForwardCurveError):
    def __init__(self, message: str = "No data could be merged. Check the file format."):
        super().__init__(message)
