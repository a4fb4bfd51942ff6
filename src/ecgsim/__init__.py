"""Synthetic ECG signal engine."""

from .config import Settings, load_settings
from .core import SignalGenerator, build_beat_template, simulate
from .session import ManualScheduler, Session, run_for

__version__ = "0.1.0"

__all__ = [
    "Settings",
    "load_settings",
    "SignalGenerator",
    "build_beat_template",
    "simulate",
    "ManualScheduler",
    "Session",
    "run_for",
]
