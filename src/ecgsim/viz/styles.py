"""Matplotlib styles for ecgsim visualisations."""

from __future__ import annotations

import matplotlib.pyplot as plt

# ECG paper: faint minor grid every 5 px, pink major grid every 5 minor cells.
SMALL_CELL = 5
BIG_CELL = SMALL_CELL * 5
SMALL_COLOR = "#f7f7f7"
BIG_COLOR = "#ffdfe0"
TRACE_COLOR = "#ff3b3b"

BASE_STYLE = {
    "figure.facecolor": "white",
    "axes.titlesize": "large",
    "axes.labelsize": "medium",
    "lines.linewidth": 2.0,
    "lines.solid_joinstyle": "round",
    "lines.solid_capstyle": "round",
}


def apply_style(extra: dict | None = None) -> None:
    """Apply a consistent matplotlib style.

    Parameters
    ----------
    extra:
        Optional dictionary of rcParams that override the base style.
    """
    style = BASE_STYLE.copy()
    if extra:
        style.update(extra)
    plt.rcParams.update(style)
