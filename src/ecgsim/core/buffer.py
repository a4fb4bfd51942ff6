"""Fixed capacity rolling sample buffer."""

from __future__ import annotations

import math

import numpy as np

from ..types import Sample

MIN_CAPACITY = 64


def buffer_capacity(sampling_rate: float, display_seconds: float) -> int:
    """Return ``max(64, floor(sampling_rate * display_seconds))``.

    ``ValueError`` is raised if either argument is not positive.
    """

    if not sampling_rate > 0:
        raise ValueError("sampling_rate must be positive")
    if not display_seconds > 0:
        raise ValueError("display_seconds must be positive")
    return max(MIN_CAPACITY, int(math.floor(sampling_rate * display_seconds)))


class SampleBuffer:
    """Ring buffer of ``(amplitude, timestamp)`` pairs.

    The buffer starts zero-filled and always holds exactly ``capacity``
    samples; each :meth:`append` overwrites the oldest entry.  Readers get
    chronological copies through :meth:`snapshot` so they never observe the
    write cursor.
    """

    def __init__(self, capacity: int):
        if capacity <= 0:
            raise ValueError("capacity must be positive")
        self.capacity = int(capacity)
        self._values = np.zeros(self.capacity, dtype=float)
        self._times = np.zeros(self.capacity, dtype=float)
        self._head = 0  # index of the oldest sample

    def __len__(self) -> int:
        return self.capacity

    def append(self, amplitude: float, timestamp: float) -> None:
        self._values[self._head] = amplitude
        self._times[self._head] = timestamp
        self._head = (self._head + 1) % self.capacity

    def clear(self) -> None:
        """Zero-fill values and timestamps."""

        self._values.fill(0.0)
        self._times.fill(0.0)
        self._head = 0

    def latest(self) -> Sample:
        i = (self._head - 1) % self.capacity
        return Sample(float(self._values[i]), float(self._times[i]))

    def snapshot(self) -> tuple[np.ndarray, np.ndarray]:
        """Return ``(amplitudes, timestamps)`` oldest first."""

        h = self._head
        values = np.concatenate((self._values[h:], self._values[:h]))
        times = np.concatenate((self._times[h:], self._times[:h]))
        return values, times

    def amplitudes(self) -> np.ndarray:
        return self.snapshot()[0]
