"""Beat detection helpers for recorded traces."""

from __future__ import annotations

from dataclasses import dataclass

import numpy as np
from scipy.signal import find_peaks

from .types import TimeSeries


@dataclass(frozen=True)
class RateStats:
    """Summary of the beats found in a trace."""

    beats: int
    mean_rr: float
    bpm: float


def detect_r_peaks(
    series: TimeSeries,
    sampling_rate: float,
    *,
    height: float = 0.5,
    refractory: float = 0.25,
) -> np.ndarray:
    """Return the times of R peaks in ``series``.

    Peaks must exceed ``height`` and be at least ``refractory`` seconds apart.
    """

    if not sampling_rate > 0:
        raise ValueError("sampling_rate must be positive")
    if len(series) == 0:
        return np.empty(0)
    distance = max(1, int(refractory * sampling_rate))
    idx, _ = find_peaks(series.values, height=height, distance=distance)
    return series.times[idx]


def rr_intervals(peak_times: np.ndarray) -> np.ndarray:
    return np.diff(np.asarray(peak_times, dtype=float))


def heart_rate_stats(series: TimeSeries, sampling_rate: float, **kwargs) -> RateStats:
    """Count beats in ``series`` and estimate the mean R-R interval.

    ``mean_rr`` and ``bpm`` are ``nan`` when fewer than two beats are found.
    """

    peaks = detect_r_peaks(series, sampling_rate, **kwargs)
    rr = rr_intervals(peaks)
    if rr.size == 0:
        return RateStats(beats=int(peaks.size), mean_rr=float("nan"), bpm=float("nan"))
    mean_rr = float(np.mean(rr))
    return RateStats(beats=int(peaks.size), mean_rr=mean_rr, bpm=60.0 / mean_rr)
