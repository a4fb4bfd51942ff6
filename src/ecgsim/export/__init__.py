"""Export helpers for recorded traces."""

from .recording import load_series, save_series, save_template

__all__ = ["save_series", "load_series", "save_template"]
