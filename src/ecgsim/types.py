"""Common type helpers for ecgsim.

This module defines the lightweight containers exchanged between the signal
generator, the session and the renderers.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import NamedTuple

import numpy as np


class Sample(NamedTuple):
    """A single emitted sample at a simulated time instant."""

    amplitude: float
    timestamp: float


@dataclass
class TimeSeries:
    """Container for paired time and value arrays."""

    times: np.ndarray
    values: np.ndarray

    def __post_init__(self) -> None:
        self.times = np.asarray(self.times, dtype=float)
        self.values = np.asarray(self.values, dtype=float)
        if self.times.shape != self.values.shape:
            raise ValueError("times and values must have the same length")

    def __len__(self) -> int:
        return int(self.times.size)

    @classmethod
    def empty(cls) -> "TimeSeries":
        return cls(np.empty(0), np.empty(0))

    @classmethod
    def concatenate(cls, parts: list["TimeSeries"]) -> "TimeSeries":
        """Join ``parts`` end to end, preserving their order."""

        if not parts:
            return cls.empty()
        return cls(
            np.concatenate([p.times for p in parts]),
            np.concatenate([p.values for p in parts]),
        )

    @property
    def duration(self) -> float:
        """Return the span between the first and last timestamp in seconds."""

        if self.times.size < 2:
            return 0.0
        return float(self.times[-1] - self.times[0])
