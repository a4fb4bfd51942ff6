from __future__ import annotations

"""Heartbeat timing.

Beats are spaced by ``60 / max(20, heart_rate)`` seconds with a small
uniform jitter of five percent of that interval.  The schedule is expressed
in simulated seconds since the start of a session.
"""

from dataclasses import dataclass
from typing import Protocol

MIN_HEART_RATE = 20.0
JITTER_FRACTION = 0.05
FIRST_BEAT_RANGE = (0.2, 0.8)


class RandomSource(Protocol):
    """Anything that returns uniform floats in ``[0, 1)`` from ``random()``.

    :class:`random.Random` satisfies this protocol.
    """

    def random(self) -> float: ...


def beat_interval(heart_rate: float) -> float:
    """Return seconds between beats, flooring ``heart_rate`` at 20 bpm."""

    return 60.0 / max(MIN_HEART_RATE, float(heart_rate))


@dataclass
class BeatSchedule:
    """Next beat onset plus the spacing parameters derived from heart rate.

    Attributes
    ----------
    interval:
        Nominal seconds between beat onsets.
    jitter:
        Full width of the uniform timing perturbation in seconds.
    next_beat_time:
        Simulated time of the upcoming (or current) beat onset.
    beats:
        Number of beat onsets scheduled so far, the first one included.
    """

    interval: float
    jitter: float
    next_beat_time: float = 0.0
    beats: int = 0

    @classmethod
    def for_heart_rate(cls, heart_rate: float, rng: RandomSource) -> "BeatSchedule":
        """Create a schedule whose first beat lands 20-80% of an interval in."""

        interval = beat_interval(heart_rate)
        lo, hi = FIRST_BEAT_RANGE
        first = interval * (lo + (hi - lo) * rng.random())
        return cls(
            interval=interval,
            jitter=JITTER_FRACTION * interval,
            next_beat_time=first,
            beats=1,
        )

    def window_end(self, window_seconds: float) -> float:
        return self.next_beat_time + window_seconds

    def contains(self, t: float, window_seconds: float) -> bool:
        """Return ``True`` while ``t`` lies inside the current beat window."""

        return self.next_beat_time <= t < self.window_end(window_seconds)

    def advance(self, window_seconds: float, rng: RandomSource) -> float:
        """Schedule the following beat and return its onset time.

        The new onset never precedes the end of the window that just closed.
        """

        end = self.window_end(window_seconds)
        step = self.interval + (rng.random() - 0.5) * self.jitter
        self.next_beat_time = max(self.next_beat_time + step, end)
        self.beats += 1
        return self.next_beat_time
