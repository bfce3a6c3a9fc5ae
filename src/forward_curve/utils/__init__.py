"""Shared utilities for the forward curve engine."""

from .month_codes import (
    MONTH_CODE_TO_NUMBER,
    MONTH_NUMBER_TO_CODE,
    MONTH_NUMBER_TO_NAME,
    MaturityInfo,
    format_contract,
    format_maturity_id,
    maturity_label,
    parse_maturity_id,
)

__all__ = [
    "MONTH_CODE_TO_NUMBER",
    "MONTH_NUMBER_TO_CODE",
    "MONTH_NUMBER_TO_NAME",
    "MaturityInfo",
    "format_contract",
    "format_maturity_id",
    "maturity_label",
    "parse_maturity_id",
]
