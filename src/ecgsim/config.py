from __future__ import annotations

"""Configuration utilities for ecgsim.

This module defines a hierarchical configuration schema using Pydantic models.
The :class:`Settings` container groups the signal parameters, the display
geometry, the engine limits and a few visualisation options.  Instances can be
populated from environment variables or from YAML/JSON files with matching
nested keys.
"""

import json
from pathlib import Path
from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic_settings import BaseSettings, SettingsConfigDict

try:  # pragma: no cover - optional dependency
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


# Heart rates used by the demo rhythm buttons.
RHYTHM_PRESETS: dict[str, float] = {
    "normal": 72.0,
    "tachycardia": 140.0,
}


class SectionModel(BaseModel):
    """Base model for configuration subsections that ignores unknown fields."""

    model_config = ConfigDict(extra="ignore", validate_assignment=True)


# ---------------------------------------------------------------------------
# Settings schema
# ---------------------------------------------------------------------------


class SignalSettings(SectionModel):
    """Physiological and amplitude parameters of the simulated trace."""

    heart_rate: float = Field(60.0, allow_inf_nan=False)
    sampling_rate: float = Field(500.0, gt=0, allow_inf_nan=False)
    gain: float = Field(1.0, allow_inf_nan=False)


class DisplaySettings(SectionModel):
    """Pixel geometry of the drawing surface and visible time window."""

    width: int = Field(800, gt=0)
    height: int = Field(300, gt=0)
    display_seconds: float = Field(8.0, gt=0, allow_inf_nan=False)


class EngineSettings(SectionModel):
    """Limits and defaults for driving the signal generator."""

    max_tick_seconds: float = Field(0.25, gt=0, allow_inf_nan=False)
    fps: float = Field(60.0, gt=0, allow_inf_nan=False)
    seed: int | None = None


class VizSettings(SectionModel):
    """Configuration for the matplotlib renderer."""

    title: str = "ECG"
    save: str | None = None


class Settings(BaseSettings):
    """Container for all runtime configuration sections."""

    signal: SignalSettings = Field(default_factory=SignalSettings)
    display: DisplaySettings = Field(default_factory=DisplaySettings)
    engine: EngineSettings = Field(default_factory=EngineSettings)
    viz: VizSettings = Field(default_factory=VizSettings)

    model_config = SettingsConfigDict(
        env_prefix="ECGSIM_",
        env_nested_delimiter="__",
        extra="ignore",
    )

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from ``ECGSIM_*`` environment variables only."""

        return cls()

    def with_preset(self, name: str) -> "Settings":
        """Return a copy of these settings using the heart rate of preset ``name``."""

        try:
            heart_rate = RHYTHM_PRESETS[name]
        except KeyError:
            known = ", ".join(sorted(RHYTHM_PRESETS))
            raise ValueError(f"unknown rhythm preset {name!r} (expected one of: {known})") from None
        data = self.model_dump()
        data["signal"]["heart_rate"] = heart_rate
        return Settings.model_validate(data)


# ---------------------------------------------------------------------------
# Loading utilities
# ---------------------------------------------------------------------------


def load_settings(path: str | Path) -> Settings:
    """Load settings from a JSON or YAML file."""

    p = Path(path)
    text = p.read_text()
    if p.suffix.lower() in {".yaml", ".yml"}:
        if yaml is None:
            raise RuntimeError("PyYAML is required to load YAML files")
        data: Any = yaml.safe_load(text) or {}
    else:
        data = json.loads(text)
    if not isinstance(data, dict):
        raise TypeError("Configuration file must define a mapping")
    return Settings.model_validate(data)


__all__ = [
    "RHYTHM_PRESETS",
    "SignalSettings",
    "DisplaySettings",
    "EngineSettings",
    "VizSettings",
    "Settings",
    "load_settings",
]
