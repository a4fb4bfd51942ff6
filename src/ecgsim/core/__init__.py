"""Core algorithms and data structures for ecgsim."""

from .buffer import SampleBuffer, buffer_capacity
from .display import DisplayGeometry, amplitude_to_y, index_to_x
from .generator import SignalGenerator, SimClock, simulate
from .schedule import BeatSchedule, RandomSource, beat_interval
from .template import GaussianWave, QRST_WAVES, build_beat_template

__all__ = [
    "SampleBuffer",
    "buffer_capacity",
    "DisplayGeometry",
    "amplitude_to_y",
    "index_to_x",
    "SignalGenerator",
    "SimClock",
    "simulate",
    "BeatSchedule",
    "RandomSource",
    "beat_interval",
    "GaussianWave",
    "QRST_WAVES",
    "build_beat_template",
]
