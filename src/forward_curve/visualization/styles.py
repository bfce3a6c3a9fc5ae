"""Visualization styles and colors for forward curve charts."""

from typing import Dict, Any, Tuple
import matplotlib as mpl
from matplotlib import font_manager as fm


def _configure_fonts() -> None:
    """Select an available font to avoid hard failures in minimal environments."""
    preferred = [
        "DejaVu Sans",
        "Liberation Sans",
        "Arial",
        "Helvetica",
    ]
    available = {f.name for f in fm.fontManager.ttflist}
    if not available:
        return

    chosen = next((name for name in preferred if name in available), sorted(available)[0])
    mpl.rcParams["font.family"] = chosen
    mpl.rcParams["font.sans-serif"] = [chosen]


_configure_fonts()

CURVE_PALETTE: Dict[str, str] = {
    "forward": "#2C3E50",       # Dark blue-gray (curve line)
    "spot": "#E67E22",          # Orange (spot marker)
    "neutral": "#95A5A6",       # Light gray (grid)
    "contango": "#27AE60",
    "backwardation": "#C0392B",
    "flat": "#2C3E50",
}

# Default savefig settings (applies to fig.savefig())
FIGURE_DEFAULTS: Dict[str, Any] = {
    "dpi": 150,
    "bbox_inches": "tight",
    "facecolor": "white",
    "edgecolor": "none",
    "pad_inches": 0.1,
}

FONT_SETTINGS: Dict[str, Any] = {
    "title_size": 14,
    "label_size": 12,
    "tick_size": 10,
    "legend_size": 10,
    "annotation_size": 9,
}

LAYOUT_SETTINGS: Dict[str, Any] = {
    "spine_linewidth": 1.0,
    "grid_alpha": 0.3,
    "grid_linestyle": "--",
    "line_width": 2.0,
    "marker_size": 6,
}

CURVE_FIGSIZE: Tuple[float, float] = (10, 5)


def apply_style(ax, title: str = "", xlabel: str = "", ylabel: str = "") -> None:
    """Apply consistent styling to an axis."""
    if title:
        ax.set_title(title, fontsize=FONT_SETTINGS["title_size"], fontweight="bold", pad=12)
    if xlabel:
        ax.set_xlabel(xlabel, fontsize=FONT_SETTINGS["label_size"])
    if ylabel:
        ax.set_ylabel(ylabel, fontsize=FONT_SETTINGS["label_size"])
    ax.tick_params(labelsize=FONT_SETTINGS["tick_size"])
    ax.grid(True, alpha=LAYOUT_SETTINGS["grid_alpha"], linestyle=LAYOUT_SETTINGS["grid_linestyle"],
            color=CURVE_PALETTE["neutral"])
    ax.spines["top"].set_visible(False)
    ax.spines["right"].set_visible(False)
    ax.spines["left"].set_linewidth(LAYOUT_SETTINGS["spine_linewidth"])
    ax.spines["bottom"].set_linewidth(LAYOUT_SETTINGS["spine_linewidth"])


def curve_shape(prices: list[float]) -> str:
    """``"contango"`` when the far end is above the near end, else ``"backwardation"``."""
    if len(prices) < 2 or prices[-1] == prices[0]:
        return "flat"
    return "contango" if prices[-1] > prices[0] else "backwardation"
