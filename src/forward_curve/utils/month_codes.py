"""Delivery month utilities.

Standard CME month codes:
F=Jan, G=Feb, H=Mar, J=Apr, K=May, M=Jun
N=Jul, Q=Aug, U=Sep, V=Oct, X=Nov, Z=Dec

Maturities are identified by a zero-padded ``YYYY-MM`` id, so lexicographic
order on ids equals chronological order.
"""

from dataclasses import dataclass
from typing import Optional
import re

# Month code mappings
MONTH_CODE_TO_NUMBER: dict[str, int] = {
    "F": 1,   # January
    "G": 2,   # February
    "H": 3,   # March
    "J": 4,   # April
    "K": 5,   # May
    "M": 6,   # June
    "N": 7,   # July
    "Q": 8,   # August
    "U": 9,   # September
    "V": 10,  # October
    "X": 11,  # November
    "Z": 12,  # December
}

MONTH_NUMBER_TO_CODE: dict[int, str] = {v: k for k, v in MONTH_CODE_TO_NUMBER.items()}

# Month names for display
MONTH_NUMBER_TO_NAME: dict[int, str] = {
    1: "January",
    2: "February",
    3: "March",
    4: "April",
    5: "May",
    6: "June",
    7: "July",
    8: "August",
    9: "September",
    10: "October",
    11: "November",
    12: "December",
}


@dataclass(frozen=True)
class MaturityInfo:
    """Parsed maturity id."""

    year: int            # e.g., 2024
    month: int           # e.g., 12
    maturity_id: str     # e.g., "2024-12"

    @property
    def month_code(self) -> str:
        return MONTH_NUMBER_TO_CODE[self.month]

    def __str__(self) -> str:
        return self.maturity_id


# Pattern to match maturity ids like "2024-12" or "2024-1"
MATURITY_ID_PATTERN = re.compile(r"^\s*(\d{1,4})-(\d{1,2})\s*$")


def format_maturity_id(year: int, month: int) -> str:
    """Format a maturity id from components.

    Args:
        year: Full year like 2024
        month: Month number 1-12

    Returns:
        Maturity id like "2024-03"
    """
    if month not in MONTH_NUMBER_TO_NAME:
        raise ValueError(f"Invalid month: {month}")
    return f"{year:04d}-{month:02d}"


def parse_maturity_id(maturity_id: str) -> Optional[MaturityInfo]:
    """Parse a maturity id into its components.

    Examples:
        >>> parse_maturity_id("2024-12")
        MaturityInfo(year=2024, month=12, maturity_id='2024-12')
        >>> parse_maturity_id("2025-1")
        MaturityInfo(year=2025, month=1, maturity_id='2025-01')
    """
    match = MATURITY_ID_PATTERN.match(str(maturity_id))
    if not match:
        return None

    year = int(match.group(1))
    month = int(match.group(2))
    if year <= 0 or month not in MONTH_NUMBER_TO_NAME:
        return None

    return MaturityInfo(year=year, month=month, maturity_id=format_maturity_id(year, month))


def maturity_label(year: int, month: int) -> str:
    """Human-readable label, e.g. ``"December 2024"``."""
    name = MONTH_NUMBER_TO_NAME.get(month)
    if name is None:
        raise ValueError(f"Invalid month: {month}")
    return f"{name} {year}"


def format_contract(symbol: str, year: int, month: int) -> str:
    """Format a CME-style contract code, e.g. ``("W", 2024, 12) -> "WZ24"``."""
    month_code = MONTH_NUMBER_TO_CODE.get(month)
    if month_code is None:
        raise ValueError(f"Invalid month: {month}")
    year_short = year % 100
    return f"{symbol}{month_code}{year_short:02d}"
