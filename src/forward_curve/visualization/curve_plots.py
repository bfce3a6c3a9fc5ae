"""Forward curve chart: x = maturity label, y = price."""

from __future__ import annotations

from pathlib import Path
from typing import Optional

from ..stage2.curve_builder import CurvePoint
from .styles import (
    CURVE_FIGSIZE,
    CURVE_PALETTE,
    FIGURE_DEFAULTS,
    FONT_SETTINGS,
    LAYOUT_SETTINGS,
    apply_style,
    curve_shape,
)


def plot_forward_curve(
    points: list[CurvePoint],
    output_path: str | Path,
    commodity: str = "",
    currency: str = "",
    observation_label: Optional[str] = None,
) -> Path:
    """Render a curve to an image file."""
    import matplotlib

    matplotlib.use("Agg")
    import matplotlib.pyplot as plt

    if not points:
        raise ValueError("Cannot plot an empty curve")

    out = Path(output_path)
    out.parent.mkdir(parents=True, exist_ok=True)

    labels = [p.display_label for p in points]
    prices = [p.price for p in points]
    x = list(range(len(points)))

    shape = curve_shape([p.price for p in points if not p.is_spot])
    color = CURVE_PALETTE.get(shape, CURVE_PALETTE["forward"])

    fig, ax = plt.subplots(figsize=CURVE_FIGSIZE)
    ax.plot(
        x,
        prices,
        color=color,
        linewidth=LAYOUT_SETTINGS["line_width"],
        marker="o",
        markersize=LAYOUT_SETTINGS["marker_size"],
        label="Forward price",
    )
    spot_idx = [i for i, p in enumerate(points) if p.is_spot]
    if spot_idx:
        ax.scatter(
            spot_idx,
            [prices[i] for i in spot_idx],
            color=CURVE_PALETTE["spot"],
            s=60,
            zorder=3,
            label="Spot",
        )

    ax.set_xticks(x)
    ax.set_xticklabels(labels, rotation=45, ha="right")

    title = f"{commodity} forward curve" if commodity else "Forward curve"
    if observation_label:
        title = f"{title} ({observation_label})"
    ylabel = f"Price ({currency})" if currency else "Price"
    apply_style(ax, title=title, xlabel="Maturity", ylabel=ylabel)
    ax.legend(fontsize=FONT_SETTINGS["legend_size"], frameon=False)

    fig.tight_layout()
    fig.savefig(out, **FIGURE_DEFAULTS)
    plt.close(fig)
    return out
