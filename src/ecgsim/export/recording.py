from __future__ import annotations

"""Read and write recorded traces and beat templates."""

from pathlib import Path

import numpy as np

from ..types import TimeSeries


def save_series(series: TimeSeries, path: str | Path) -> Path:
    """Persist ``series`` according to the suffix of ``path``.

    ``.npz`` archives hold ``times`` and ``values`` entries, ``.npy`` files a
    ``(n, 2)`` array and ``.csv`` files a ``time,value`` table with header.
    """

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".npz":
        np.savez(p, times=series.times, values=series.values)
    elif suffix == ".npy":
        np.save(p, np.column_stack([series.times, series.values]))
    elif suffix == ".csv":
        np.savetxt(
            p,
            np.column_stack([series.times, series.values]),
            delimiter=",",
            header="time,value",
            comments="",
        )
    else:
        raise ValueError(f"unsupported output format: {p.suffix or '<none>'}")
    return p


def load_series(path: str | Path) -> TimeSeries:
    """Load a trace previously written by :func:`save_series`."""

    p = Path(path)
    suffix = p.suffix.lower()
    if suffix == ".npz":
        data = np.load(p)
        return TimeSeries(data["times"], data["values"])
    if suffix == ".npy":
        arr = np.load(p)
    elif suffix == ".csv":
        arr = np.loadtxt(p, delimiter=",", skiprows=1)
    else:
        raise ValueError(f"unsupported input format: {p.suffix or '<none>'}")
    if arr.ndim == 1:
        # Single-sample edge case
        arr = arr[None, :]
    return TimeSeries(arr[:, 0], arr[:, 1])


def save_template(template: np.ndarray, path: str | Path) -> Path:
    """Write a beat template as ``.npy`` or a single-column ``.csv``."""

    p = Path(path)
    if p.suffix.lower() == ".csv":
        np.savetxt(p, np.asarray(template), delimiter=",")
    else:
        np.save(p, np.asarray(template))
    return p


__all__ = ["save_series", "load_series", "save_template"]
