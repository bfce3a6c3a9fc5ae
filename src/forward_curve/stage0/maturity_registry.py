"""Registry of user-declared delivery months."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterator, Optional

from ..errors import DuplicateMaturity, InvalidInput
from ..utils.month_codes import format_maturity_id, maturity_label, parse_maturity_id

LOGGER = logging.getLogger(__name__)

# Ids are zero-padded four-digit years so string order stays chronological.
MAX_YEAR = 9999


@dataclass(frozen=True)
class DeliveryDate:
    """One declared futures maturity."""

    month: int   # 1..12
    year: int    # e.g., 2024
    id: str      # e.g., "2024-12"
    label: str   # e.g., "December 2024"

    @classmethod
    def create(cls, month: int, year: int) -> "DeliveryDate":
        return cls(
            month=month,
            year=year,
            id=format_maturity_id(year, month),
            label=maturity_label(year, month),
        )


def _coerce_int(value: object, field_name: str) -> int:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise InvalidInput(f"Select a {field_name}")
    if isinstance(value, bool):
        raise InvalidInput(f"Invalid {field_name}: {value!r}")
    if isinstance(value, int):
        return value
    text = str(value).strip()
    if not text.isdigit():
        raise InvalidInput(f"Invalid {field_name}: {value!r}")
    return int(text)


class MaturityRegistry:
    """Owns the declared maturities, enumerated in ascending id order."""

    def __init__(self) -> None:
        self._entries: dict[str, DeliveryDate] = {}

    def add(self, month: int | str | None, year: int | str | None) -> DeliveryDate:
        """Declare a maturity.

        Raises:
            InvalidInput: month or year missing or out of range
            DuplicateMaturity: the ``YYYY-MM`` id is already registered
        """
        month_num = _coerce_int(month, "month")
        year_num = _coerce_int(year, "year")
        if not 1 <= month_num <= 12:
            raise InvalidInput(f"Invalid month: {month!r}")
        if not 1 <= year_num <= MAX_YEAR:
            raise InvalidInput(f"Invalid year: {year!r}")

        entry = DeliveryDate.create(month_num, year_num)
        if entry.id in self._entries:
            raise DuplicateMaturity(entry.id)

        self._entries[entry.id] = entry
        LOGGER.info("Added maturity %s", entry.label)
        return entry

    def add_id(self, maturity_id: str) -> DeliveryDate:
        """Declare a maturity from a ``YYYY-MM`` id."""
        info = parse_maturity_id(maturity_id)
        if info is None:
            raise InvalidInput(f"Invalid maturity id: {maturity_id!r} (expected YYYY-MM)")
        return self.add(info.month, info.year)

    def remove(self, maturity_id: str) -> Optional[DeliveryDate]:
        """Remove a maturity; no-op when it is absent."""
        removed = self._entries.pop(maturity_id, None)
        if removed is not None:
            LOGGER.info("Removed maturity %s", removed.label)
        return removed

    def get(self, maturity_id: str) -> Optional[DeliveryDate]:
        return self._entries.get(maturity_id)

    def list(self) -> list[DeliveryDate]:
        return [self._entries[k] for k in sorted(self._entries)]

    def ids(self) -> list[str]:
        return sorted(self._entries)

    def __contains__(self, maturity_id: object) -> bool:
        return maturity_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[DeliveryDate]:
        return iter(self.list())
