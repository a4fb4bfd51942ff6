from __future__ import annotations

"""Beat template construction.

A beat template is one cardiac cycle's QRS complex and T wave, sampled at the
engine's sampling rate.  Each deflection is modelled as a Gaussian bump

.. math::

   g(t) = a \\exp\\left(-\\tfrac{1}{2}\\left(\\frac{t - \\mu}{\\sigma}\\right)^2\\right)

and the sum of all bumps is normalised so that its largest magnitude is one.
The gain applied at display time restores physical scale.
"""

import math
from dataclasses import dataclass
from typing import Sequence

import numpy as np

from ..config import Settings

TEMPLATE_DURATION = 0.35


@dataclass(frozen=True)
class GaussianWave:
    """One deflection of the beat template.

    Parameters
    ----------
    name:
        Conventional wave label (``"Q"``, ``"R"`` ...).
    mu:
        Centre of the bump in seconds from the start of the template.
    sigma:
        Width of the bump in seconds.
    amp:
        Signed peak amplitude before normalisation.
    """

    name: str
    mu: float
    sigma: float
    amp: float

    def evaluate(self, t: np.ndarray) -> np.ndarray:
        return self.amp * np.exp(-0.5 * ((t - self.mu) / self.sigma) ** 2)


QRST_WAVES: tuple[GaussianWave, ...] = (
    GaussianWave("Q", 0.06, 0.008, -0.08),
    GaussianWave("R", 0.10, 0.006, 1.0),
    GaussianWave("S", 0.12, 0.007, -0.25),
    GaussianWave("T", 0.22, 0.030, 0.25),
)


def template_length(sampling_rate: float, duration: float = TEMPLATE_DURATION) -> int:
    """Return the number of samples covering ``duration`` at ``sampling_rate``."""

    if not sampling_rate > 0:
        raise ValueError("sampling_rate must be positive")
    return int(math.ceil(duration * sampling_rate))


def build_beat_template(
    sampling_rate: float | None = None,
    *,
    settings: Settings | None = None,
    waves: Sequence[GaussianWave] = QRST_WAVES,
    duration: float = TEMPLATE_DURATION,
) -> np.ndarray:
    """Build a normalised beat template.

    Parameters
    ----------
    sampling_rate:
        Samples per second.  Defaults to ``settings.signal.sampling_rate``.
    settings:
        Optional :class:`~ecgsim.config.Settings` providing defaults.
    waves:
        Deflections summed into the template.
    duration:
        Template span in seconds.

    Returns
    -------
    numpy.ndarray
        Read-only array of length ``ceil(duration * sampling_rate)`` with
        values in ``[-1, 1]``.  An empty ``waves`` sequence yields zeros.
    """

    if sampling_rate is None:
        if settings is None:
            settings = Settings()
        sampling_rate = settings.signal.sampling_rate

    n = template_length(sampling_rate, duration)
    t = (np.arange(n, dtype=float) / n) * duration
    out = np.zeros(n, dtype=float)
    for wave in waves:
        out += wave.evaluate(t)

    peak = float(np.max(np.abs(out))) if n else 0.0
    if peak > 0:
        out /= peak
    out.flags.writeable = False
    return out


__all__ = [
    "TEMPLATE_DURATION",
    "GaussianWave",
    "QRST_WAVES",
    "template_length",
    "build_beat_template",
]
