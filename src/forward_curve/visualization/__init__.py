"""Visualization module for forward curves."""

from .curve_plots import plot_forward_curve
from .styles import CURVE_PALETTE, FIGURE_DEFAULTS

__all__ = ["plot_forward_curve", "CURVE_PALETTE", "FIGURE_DEFAULTS"]
