"""Draw ECG traces on a paper-style grid with matplotlib."""

from __future__ import annotations

import time
from itertools import count
from pathlib import Path
from typing import Callable, Dict

import matplotlib.pyplot as plt
import numpy as np

from ..core.display import DisplayGeometry, amplitude_to_y, index_to_x
from ..session import FrameCallback, FrameSnapshot
from ..types import TimeSeries
from .styles import BIG_CELL, BIG_COLOR, SMALL_CELL, SMALL_COLOR, TRACE_COLOR, apply_style


def draw_grid(ax: plt.Axes, geometry: DisplayGeometry) -> None:
    """Draw the minor and major grid and fix ``ax`` to pixel coordinates.

    The y axis is inverted so that pixel rows grow downwards.
    """
    width, height = geometry.width, geometry.height
    for x in np.arange(0, width + 1, SMALL_CELL):
        ax.axvline(x, color=SMALL_COLOR, linewidth=0.5, zorder=0)
    for y in np.arange(0, height + 1, SMALL_CELL):
        ax.axhline(y, color=SMALL_COLOR, linewidth=0.5, zorder=0)
    for x in np.arange(0, width + 1, BIG_CELL):
        ax.axvline(x, color=BIG_COLOR, linewidth=1.0, alpha=0.6, zorder=1)
    for y in np.arange(0, height + 1, BIG_CELL):
        ax.axhline(y, color=BIG_COLOR, linewidth=1.0, alpha=0.6, zorder=1)
    ax.set_xlim(0, width)
    ax.set_ylim(height, 0)
    ax.set_xticks([])
    ax.set_yticks([])


class EcgPlot:
    """Renderer that redraws one line per :class:`FrameSnapshot`.

    Instances are callables suitable as a session ``renderer``.
    """

    def __init__(self, geometry: DisplayGeometry, *, title: str | None = None, ax: plt.Axes | None = None):
        apply_style()
        if ax is None:
            dpi = 100
            fig, ax = plt.subplots(figsize=(geometry.width / dpi, geometry.height / dpi), dpi=dpi)
        self.ax = ax
        self.figure = ax.figure
        self.geometry = geometry
        draw_grid(ax, geometry)
        if title:
            ax.set_title(title)
        (self.line,) = ax.plot([], [], color=TRACE_COLOR, zorder=2)

    def __call__(self, snapshot: FrameSnapshot) -> None:
        n = len(snapshot)
        if n < 2:
            return
        x = index_to_x(np.arange(n), n, self.geometry.width)
        self.line.set_data(x, snapshot.y)
        self.figure.canvas.draw_idle()


def plot_trace(
    series: TimeSeries,
    geometry: DisplayGeometry | None = None,
    *,
    gain: float = 1.0,
    title: str | None = None,
) -> plt.Figure:
    """Render a recorded trace across the full width of the grid."""
    if geometry is None:
        geometry = DisplayGeometry()
    plot = EcgPlot(geometry, title=title)
    n = len(series)
    if n >= 2:
        plot.line.set_data(index_to_x(np.arange(n), n, geometry.width), amplitude_to_y(series.values, geometry, gain))
    return plot.figure


def save_or_show(fig: plt.Figure, save: str | Path | None = None, show: bool = False) -> None:
    """Save ``fig`` to ``save`` or display it interactively.

    If ``save`` is ``None`` the figure will only be shown when ``show`` is
    True.  When both are unset the figure is shown by default to give quick
    feedback during inspection.
    """
    if save:
        fig.savefig(save, bbox_inches="tight")
    if show or not save:
        plt.show()


class TimerScheduler:
    """Frame scheduler backed by a matplotlib canvas timer.

    Callbacks registered through :meth:`request` fire once, on the next timer
    event, with the reading of ``clock`` in seconds.
    """

    def __init__(self, figure: plt.Figure, interval_ms: int = 16, clock: Callable[[], float] = time.monotonic):
        self.clock = clock
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = count()
        self._timer = figure.canvas.new_timer(interval=interval_ms)
        self._timer.add_callback(self._fire)
        self._started = False

    def request(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        if not self._started:
            self._timer.start()
            self._started = True
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)
        if not self._pending and self._started:
            self._timer.stop()
            self._started = False

    def _fire(self) -> None:
        callbacks = list(self._pending.values())
        self._pending.clear()
        now = self.clock()
        for cb in callbacks:
            cb(now)
        if not self._pending and self._started:
            self._timer.stop()
            self._started = False
