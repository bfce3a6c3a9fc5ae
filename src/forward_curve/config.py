from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional

import yaml

from .errors import InvalidInput


@dataclass(frozen=True)
class CurveConfig:
    # Product metadata (display only)
    commodity: str = ""
    currency: str = ""

    # CSV field names
    date_field: str = "Date"
    price_field: str = "Price"

    # File loading fan-out
    max_workers: int = 4

    # Declared maturities ("YYYY-MM") and file -> maturity id assignments
    maturities: tuple[str, ...] = ()
    files: tuple[tuple[Path, str], ...] = ()
    spot: Optional[Path] = None

    # Optional outputs
    observation_date: Optional[str] = None
    export_path: Optional[Path] = None
    plot_path: Optional[Path] = None


def load_config(config_path: str | Path) -> dict:
    """Load configuration from YAML file."""
    with open(config_path) as f:
        return yaml.safe_load(f) or {}


def _resolve(base: Path, value: Optional[str]) -> Optional[Path]:
    if not value:
        return None
    p = Path(value)
    return p if p.is_absolute() else base / p


def parse_config(raw: dict, base_dir: str | Path = ".") -> CurveConfig:
    """Validate a raw config mapping and build a :class:`CurveConfig`.

    Relative paths resolve against ``base_dir``.
    """
    base = Path(base_dir)

    maturities = raw.get("maturities")
    if not maturities:
        raise InvalidInput("Config missing required 'maturities' list")
    files = raw.get("files")
    if not files or not isinstance(files, dict):
        raise InvalidInput("Config missing required 'files' mapping (path: maturity id)")

    product = raw.get("product", {}) or {}
    parsing = raw.get("parsing", {}) or {}
    loader = raw.get("loader", {}) or {}
    output = raw.get("output", {}) or {}

    observation_date = raw.get("observation_date")
    return CurveConfig(
        commodity=str(product.get("commodity", "")),
        currency=str(product.get("currency", "")),
        date_field=str(parsing.get("date_field", "Date")),
        price_field=str(parsing.get("price_field", "Price")),
        max_workers=int(loader.get("max_workers", 4)),
        maturities=tuple(str(m) for m in maturities),
        files=tuple((_resolve(base, str(path)), str(mid or "")) for path, mid in files.items()),
        spot=_resolve(base, raw.get("spot")),
        observation_date=str(observation_date) if observation_date else None,
        export_path=_resolve(base, output.get("export")),
        plot_path=_resolve(base, output.get("plot")),
    )


def read_config(config_path: str | Path) -> CurveConfig:
    path = Path(config_path)
    return parse_config(load_config(path), base_dir=path.parent)
