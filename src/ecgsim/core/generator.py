from __future__ import annotations

"""Fixed timestep ECG sample generator.

:class:`SignalGenerator` turns variable real-time intervals into samples at a
fixed simulated rate.  Every sample is the sum of

* a slow sinusoidal baseline wander,
* uniform noise in ``[-0.01, 0.01]``,
* the beat template, while the sample falls inside a beat window, scaled by a
  small random amplitude jitter.

Intervals that do not cover a whole sample period are carried over to the
next tick, so the number of samples emitted over a run depends only on the
total elapsed time and not on how it was split into frames.
"""

import logging
import math
import random
from dataclasses import dataclass

import numpy as np

from ..config import Settings
from ..types import TimeSeries
from .buffer import SampleBuffer, buffer_capacity
from .schedule import BeatSchedule, RandomSource
from .template import build_beat_template

logger = logging.getLogger(__name__)

BASELINE_RATE = 0.5  # phase units per simulated second
BASELINE_AMPLITUDE = 0.1 * 0.8
NOISE_WIDTH = 0.02
AMPLITUDE_JITTER = 0.05

# Tolerance for floating point sample-grid arithmetic.
_EPS = 1e-9


@dataclass
class SimClock:
    """Simulated time bookkeeping.

    Attributes
    ----------
    samples:
        Samples emitted since the last reset.
    time_since_start:
        Simulated seconds covered by those samples.
    pending:
        Elapsed seconds received but not yet worth a full sample.
    last_frame_timestamp:
        Host clock reading of the previous frame, ``None`` before the first.
    """

    samples: int = 0
    time_since_start: float = 0.0
    pending: float = 0.0
    last_frame_timestamp: float | None = None


class SignalGenerator:
    """Produce a synthetic ECG trace into a rolling :class:`SampleBuffer`.

    Parameters
    ----------
    heart_rate, sampling_rate, display_seconds, max_tick_seconds:
        Individual overrides.  Any value set here takes precedence over the
        corresponding entry of ``settings``.
    settings:
        Optional :class:`~ecgsim.config.Settings` instance providing defaults.
    rng:
        Random source for phase, noise and jitter.  Defaults to
        :class:`random.Random` seeded with ``settings.engine.seed``.
    """

    def __init__(
        self,
        heart_rate: float | None = None,
        sampling_rate: float | None = None,
        *,
        settings: Settings | None = None,
        rng: RandomSource | None = None,
        max_tick_seconds: float | None = None,
        display_seconds: float | None = None,
    ) -> None:
        if settings is None:
            settings = Settings()

        self.heart_rate = float(settings.signal.heart_rate if heart_rate is None else heart_rate)
        self.sampling_rate = float(
            settings.signal.sampling_rate if sampling_rate is None else sampling_rate
        )
        self.display_seconds = float(
            settings.display.display_seconds if display_seconds is None else display_seconds
        )
        self.max_tick_seconds = float(
            settings.engine.max_tick_seconds if max_tick_seconds is None else max_tick_seconds
        )
        if not self.sampling_rate > 0 or not math.isfinite(self.sampling_rate):
            raise ValueError("sampling_rate must be a positive finite number")
        if not self.max_tick_seconds > 0:
            raise ValueError("max_tick_seconds must be positive")

        self.rng: RandomSource = random.Random(settings.engine.seed) if rng is None else rng
        self.time_per_sample = 1.0 / self.sampling_rate
        self.template = build_beat_template(self.sampling_rate)
        self.window_seconds = self.template.size * self.time_per_sample
        self.buffer = SampleBuffer(buffer_capacity(self.sampling_rate, self.display_seconds))
        self.reset()

    # ------------------------------------------------------------------
    # State
    # ------------------------------------------------------------------

    def reset(self) -> None:
        """Zero the buffer and clock, then draw a new phase and first beat."""

        self.buffer.clear()
        self.clock = SimClock()
        self.phase = self.rng.random() * 2.0 * math.pi
        self.schedule = BeatSchedule.for_heart_rate(self.heart_rate, self.rng)
        logger.debug(
            "generator reset: interval=%.4fs first beat at %.4fs",
            self.schedule.interval,
            self.schedule.next_beat_time,
        )

    @property
    def time_since_start(self) -> float:
        return self.clock.time_since_start

    @property
    def in_beat(self) -> bool:
        """Whether the most recent sample fell inside a beat window."""

        return self.schedule.contains(self.clock.time_since_start, self.window_seconds)

    # ------------------------------------------------------------------
    # Generation
    # ------------------------------------------------------------------

    def tick(self, elapsed_seconds: float) -> TimeSeries:
        """Advance simulated time by ``elapsed_seconds`` and emit samples.

        Returns the newly emitted samples; the rolling buffer is updated in
        place.  ``elapsed_seconds`` above ``max_tick_seconds`` is clamped and
        the excess discarded.
        """

        if not math.isfinite(elapsed_seconds):
            raise ValueError(f"elapsed_seconds must be finite, got {elapsed_seconds!r}")
        if elapsed_seconds < 0:
            raise ValueError("elapsed_seconds must not be negative")
        if elapsed_seconds > self.max_tick_seconds:
            logger.debug(
                "dropping %.3fs of backlog (tick of %.3fs capped at %.3fs)",
                elapsed_seconds - self.max_tick_seconds,
                elapsed_seconds,
                self.max_tick_seconds,
            )
            elapsed_seconds = self.max_tick_seconds
        if elapsed_seconds == 0:
            return TimeSeries.empty()

        budget = self.clock.pending + elapsed_seconds
        count = int(math.floor(budget * self.sampling_rate + _EPS))
        self.clock.pending = max(0.0, budget - count * self.time_per_sample)
        if count == 0:
            return TimeSeries.empty()

        times = np.empty(count, dtype=float)
        values = np.empty(count, dtype=float)
        for j in range(count):
            self.clock.samples += 1
            t_now = self.clock.samples * self.time_per_sample
            value = self._sample_at(t_now)
            self.buffer.append(value, t_now)
            times[j] = t_now
            values[j] = value
        self.clock.time_since_start = self.clock.samples * self.time_per_sample
        return TimeSeries(times, values)

    def _sample_at(self, t_now: float) -> float:
        self.phase += self.time_per_sample * BASELINE_RATE
        baseline = BASELINE_AMPLITUDE * math.sin(self.phase)
        noise = (self.rng.random() - 0.5) * NOISE_WIDTH

        schedule = self.schedule
        beat_value = 0.0
        if schedule.contains(t_now, self.window_seconds):
            index = int(math.floor((t_now - schedule.next_beat_time) / self.time_per_sample + _EPS))
            index = min(max(index, 0), self.template.size - 1)
            beat_value = float(self.template[index])

        # Window-end check follows the template read on every sample.
        if t_now >= schedule.window_end(self.window_seconds):
            nxt = schedule.advance(self.window_seconds, self.rng)
            logger.debug("beat %d scheduled at %.4fs", schedule.beats, nxt)

        jitter = 1.0 + (self.rng.random() - 0.5) * AMPLITUDE_JITTER
        return baseline + noise + beat_value * jitter


def simulate(
    duration: float,
    fps: float | None = None,
    *,
    settings: Settings | None = None,
    rng: RandomSource | None = None,
    heart_rate: float | None = None,
    sampling_rate: float | None = None,
) -> TimeSeries:
    """Run a fresh generator for ``duration`` seconds of fixed ``1/fps`` ticks.

    Returns every emitted sample, not only the final rolling window.
    """

    if settings is None:
        settings = Settings()
    if fps is None:
        fps = settings.engine.fps
    if duration < 0:
        raise ValueError("duration must not be negative")
    if not fps > 0:
        raise ValueError("fps must be positive")

    frame = 1.0 / fps
    gen = SignalGenerator(
        heart_rate,
        sampling_rate,
        settings=settings,
        rng=rng,
        max_tick_seconds=max(settings.engine.max_tick_seconds, frame),
    )
    frames = int(round(duration * fps))
    parts = [gen.tick(frame) for _ in range(frames)]
    return TimeSeries.concatenate(parts)


__all__ = ["SimClock", "SignalGenerator", "simulate"]
