from __future__ import annotations

"""Session lifecycle for a frame-driven ECG display.

A :class:`Session` owns one :class:`~ecgsim.core.SignalGenerator` and drives
it from a host "next frame" primitive.  The host is abstracted as a
:class:`FrameScheduler`: ``request`` registers a one-shot callback that will
receive a monotonically increasing timestamp in seconds, ``cancel`` withdraws
it.  Each frame the session converts the timestamp delta into elapsed time,
ticks the generator and hands a :class:`FrameSnapshot` to the renderer.
"""

import logging
from dataclasses import dataclass
from itertools import count
from typing import Any, Callable, Dict, Optional, Protocol

import numpy as np

from .config import Settings
from .core.display import DisplayGeometry, amplitude_to_y
from .core.generator import SignalGenerator
from .core.schedule import RandomSource

logger = logging.getLogger(__name__)

FrameCallback = Callable[[float], Any]

_SIGNAL_KEYS = {"heart_rate", "sampling_rate", "gain"}
_DISPLAY_KEYS = {"width", "height", "display_seconds"}
# Changes to these require a new generator rather than a reset of the old one.
_GENERATOR_KEYS = {"heart_rate", "sampling_rate", "display_seconds"}


class FrameScheduler(Protocol):
    """Host primitive that calls back once per display refresh."""

    def request(self, callback: FrameCallback) -> Any: ...

    def cancel(self, handle: Any) -> None: ...


class ManualScheduler:
    """Scheduler whose frames are fired explicitly by the caller.

    Used for headless runs and tests: :meth:`fire` delivers ``timestamp`` to
    every callback registered since the previous call.
    """

    def __init__(self) -> None:
        self._pending: Dict[int, FrameCallback] = {}
        self._ids = count()

    def request(self, callback: FrameCallback) -> int:
        handle = next(self._ids)
        self._pending[handle] = callback
        return handle

    def cancel(self, handle: int) -> None:
        self._pending.pop(handle, None)

    @property
    def pending(self) -> int:
        return len(self._pending)

    def fire(self, timestamp: float) -> int:
        """Invoke and clear pending callbacks; return how many ran."""

        callbacks = list(self._pending.values())
        self._pending.clear()
        for cb in callbacks:
            cb(timestamp)
        return len(callbacks)


@dataclass(frozen=True)
class FrameSnapshot:
    """Read-only view of the rolling buffer handed to renderers."""

    amplitudes: np.ndarray
    timestamps: np.ndarray
    y: np.ndarray
    geometry: DisplayGeometry
    gain: float
    time_since_start: float

    def __len__(self) -> int:
        return int(self.amplitudes.size)


Renderer = Callable[[FrameSnapshot], Any]


class Session:
    """Drive a :class:`SignalGenerator` from frame callbacks until stopped.

    Parameters
    ----------
    settings:
        Optional :class:`~ecgsim.config.Settings`; defaults are used otherwise.
    renderer:
        Callable receiving a :class:`FrameSnapshot` after every frame.
    scheduler:
        Host frame primitive.  Defaults to a :class:`ManualScheduler`.
    rng:
        Random source forwarded to the generator.
    """

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        renderer: Optional[Renderer] = None,
        scheduler: Optional[FrameScheduler] = None,
        rng: RandomSource | None = None,
    ) -> None:
        self.settings = settings if settings is not None else Settings()
        self.renderer = renderer
        self.scheduler: FrameScheduler = scheduler if scheduler is not None else ManualScheduler()
        self._rng = rng
        self._handle: Any = None
        self.running = False
        self.frames = 0
        self.generator = self._build_generator(self.settings)
        self.geometry = DisplayGeometry.from_settings(self.settings)

    def _build_generator(self, settings: Settings) -> SignalGenerator:
        return SignalGenerator(settings=settings, rng=self._rng)

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------

    def start(self) -> None:
        """Reset state and register for the first frame."""

        if self.running:
            return
        self.reset()
        self.running = True
        self._handle = self.scheduler.request(self.on_frame)
        logger.info(
            "session started: heart_rate=%s sampling_rate=%s capacity=%d",
            self.settings.signal.heart_rate,
            self.settings.signal.sampling_rate,
            self.generator.buffer.capacity,
        )

    def stop(self) -> None:
        """Cancel the pending frame; later callbacks are ignored."""

        if self._handle is not None:
            self.scheduler.cancel(self._handle)
            self._handle = None
        if self.running:
            logger.info("session stopped after %d frames", self.frames)
        self.running = False

    def reset(self, **changes: Any) -> None:
        """Apply configuration ``changes`` and restart the signal from zero.

        Recognised keys are ``heart_rate``, ``sampling_rate``, ``gain``,
        ``width``, ``height`` and ``display_seconds``.  Invalid values raise
        :class:`pydantic.ValidationError` and leave the session untouched.
        """

        unknown = set(changes) - _SIGNAL_KEYS - _DISPLAY_KEYS
        if unknown:
            raise KeyError(f"unknown session options: {', '.join(sorted(unknown))}")

        if not changes:
            self.generator.reset()
            self.frames = 0
            return

        data = self.settings.model_dump()
        for key, value in changes.items():
            section = "signal" if key in _SIGNAL_KEYS else "display"
            data[section][key] = value
        settings = Settings.model_validate(data)
        geometry = DisplayGeometry.from_settings(settings)
        if _GENERATOR_KEYS & set(changes):
            generator = self._build_generator(settings)
        else:
            generator = self.generator
            generator.reset()

        self.settings = settings
        self.geometry = geometry
        self.generator = generator
        self.frames = 0
        logger.info("session reconfigured: %s", changes)

    # ------------------------------------------------------------------
    # Frames
    # ------------------------------------------------------------------

    def on_frame(self, timestamp: float) -> FrameSnapshot | None:
        """Handle one host frame at ``timestamp`` seconds."""

        if not self.running:
            return None
        self._handle = None

        clock = self.generator.clock
        last = clock.last_frame_timestamp
        if last is None:
            elapsed = 0.0
            clock.last_frame_timestamp = timestamp
        else:
            elapsed = max(0.0, timestamp - last)
            clock.last_frame_timestamp = max(last, timestamp)

        self.generator.tick(elapsed)
        self.frames += 1
        snap = self.snapshot()
        if self.renderer is not None:
            self.renderer(snap)
        if self.running:
            self._handle = self.scheduler.request(self.on_frame)
        return snap

    def snapshot(self) -> FrameSnapshot:
        amplitudes, timestamps = self.generator.buffer.snapshot()
        gain = self.settings.signal.gain
        return FrameSnapshot(
            amplitudes=amplitudes,
            timestamps=timestamps,
            y=amplitude_to_y(amplitudes, self.geometry, gain),
            geometry=self.geometry,
            gain=gain,
            time_since_start=self.generator.time_since_start,
        )


def run_for(session: Session, duration: float, fps: float | None = None, start: float = 0.0) -> FrameSnapshot:
    """Drive ``session`` headlessly for ``duration`` seconds at ``fps``.

    The session must use a :class:`ManualScheduler`.  It is started if needed
    and left running; the last frame's snapshot is returned.
    """

    scheduler = session.scheduler
    if not isinstance(scheduler, ManualScheduler):
        raise TypeError("run_for requires a session driven by ManualScheduler")
    if fps is None:
        fps = session.settings.engine.fps
    if not fps > 0:
        raise ValueError("fps must be positive")

    session.start()
    frames = int(round(duration * fps))
    # The first frame only primes the clock.
    for i in range(frames + 1):
        scheduler.fire(start + i / fps)
    return session.snapshot()


__all__ = [
    "FrameScheduler",
    "ManualScheduler",
    "FrameSnapshot",
    "Session",
    "run_for",
]
