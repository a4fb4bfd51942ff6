from __future__ import annotations

"""Amplitude to pixel mapping.

The generator emits millivolt-like units.  Renderers that draw on a pixel
surface with a downward y axis convert with

.. math::

   y = c - a \\cdot p \\cdot g

where ``c`` is the vertical centre, ``p`` the pixels per millivolt and ``g``
the display gain.
"""

from dataclasses import dataclass

import numpy as np

from ..config import Settings


@dataclass(frozen=True)
class DisplayGeometry:
    """Pixel extent of the drawing surface."""

    width: float = 800.0
    height: float = 300.0

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("width and height must be positive")

    @classmethod
    def from_settings(cls, settings: Settings | None = None) -> "DisplayGeometry":
        if settings is None:
            settings = Settings()
        return cls(float(settings.display.width), float(settings.display.height))

    @property
    def center(self) -> float:
        return self.height / 2.0

    @property
    def pixels_per_millivolt(self) -> float:
        # Three millivolt-ish bands fill the height with 20% headroom.
        return (self.height / 3.0) / 1.2


def amplitude_to_y(amplitude, geometry: DisplayGeometry | None = None, gain: float = 1.0):
    """Map ``amplitude`` (scalar or array) to a vertical pixel coordinate."""

    if geometry is None:
        geometry = DisplayGeometry()
    y = geometry.center - np.asarray(amplitude, dtype=float) * geometry.pixels_per_millivolt * gain
    if np.ndim(y) == 0:
        return float(y)
    return y


def index_to_x(index, count: int, width: float):
    """Spread ``count`` buffer positions evenly over ``[0, width]``."""

    if count < 2:
        raise ValueError("count must be at least 2")
    x = np.asarray(index, dtype=float) / (count - 1) * width
    if np.ndim(x) == 0:
        return float(x)
    return x


__all__ = ["DisplayGeometry", "amplitude_to_y", "index_to_x"]
