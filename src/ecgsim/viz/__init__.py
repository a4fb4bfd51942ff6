"""Matplotlib renderers for ecgsim."""

from .plot_ecg import EcgPlot, TimerScheduler, draw_grid, plot_trace, save_or_show
from .styles import apply_style

__all__ = ["EcgPlot", "TimerScheduler", "draw_grid", "plot_trace", "save_or_show", "apply_style"]
