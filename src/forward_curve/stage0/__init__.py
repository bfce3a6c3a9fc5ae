"""Stage 0: Metadata - expiry schedules and declared maturities."""

from .expiry_schedule import (
    ContractMonth,
    ExpiryCalculator,
    build_expiry_table,
    save_expiry_table,
)
from .maturity_registry import (
    DeliveryDate,
    MaturityRegistry,
)

__all__ = [
    "ContractMonth",
    "ExpiryCalculator",
    "build_expiry_table",
    "save_expiry_table",
    "DeliveryDate",
    "MaturityRegistry",
]
