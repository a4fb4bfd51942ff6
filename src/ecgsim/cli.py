from __future__ import annotations

"""Command line interface for ecgsim using Typer."""

from pathlib import Path
from typing import Dict, List, Optional

import json
import math
import logging

import numpy as np
import typer
from pydantic import ValidationError

from .analysis import heart_rate_stats
from .config import RHYTHM_PRESETS, Settings, load_settings
from .core import build_beat_template, simulate as simulate_trace
from .export import save_series, save_template
from .session import Session, run_for
from .utils.logging import get_logger, level_for

app = typer.Typer(help="Synthetic ECG signal engine")
logger = logging.getLogger(__name__)


def _parse_override_value(raw: str) -> object:
    lower = raw.lower()
    if lower in {"true", "false"}:
        return lower == "true"
    if lower in {"null", "none"}:
        return None
    try:
        return int(raw)
    except ValueError:
        pass
    try:
        return float(raw)
    except ValueError:
        pass
    return raw


def _ensure_path(settings: Settings, keys: List[str]) -> None:
    current: object = settings
    for key in keys:
        if not hasattr(current, key):
            raise typer.BadParameter(f"unknown configuration key: {'.'.join(keys)}", param_hint="--set")
        current = getattr(current, key)


def _apply_override(data: Dict[str, object], keys: List[str], value: object) -> None:
    target = data
    for key in keys[:-1]:
        existing = target.get(key)
        if not isinstance(existing, dict):
            existing = {}
            target[key] = existing
        target = existing
    target[keys[-1]] = value


@app.callback()
def init(
    ctx: typer.Context,
    config: Optional[Path] = typer.Option(
        None,
        "--config",
        dir_okay=False,
        file_okay=True,
        exists=False,
        help="Path to a YAML or JSON configuration file.",
    ),
    set_overrides: List[str] = typer.Option(
        [],
        "--set",
        help="Override configuration values using dotted paths, e.g. signal.heart_rate=90",
    ),
    preset: Optional[str] = typer.Option(
        None,
        "--preset",
        help=f"Rhythm preset ({', '.join(sorted(RHYTHM_PRESETS))}); applied before --set.",
    ),
    verbose: int = typer.Option(0, "--verbose", "-v", count=True, help="Increase log verbosity."),
) -> None:
    """Initialise the Typer context with validated settings."""

    get_logger("ecgsim", level_for(verbose))

    if config is not None and not config.exists():
        raise typer.BadParameter(f"configuration file not found: {config}", param_hint="--config")

    try:
        settings = load_settings(config) if config else Settings.from_env()
    except (RuntimeError, TypeError, json.JSONDecodeError, ValidationError) as exc:
        raise typer.BadParameter(f"failed to load configuration: {exc}", param_hint="--config")

    if preset is not None:
        try:
            settings = settings.with_preset(preset)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--preset")

    if set_overrides:
        data = settings.model_dump()
        for override in set_overrides:
            if "=" not in override:
                raise typer.BadParameter("overrides must be of the form --set section.key=value", param_hint="--set")
            key, raw_value = override.split("=", 1)
            if not key:
                raise typer.BadParameter("override key cannot be empty", param_hint="--set")
            keys = key.split(".")
            _ensure_path(settings, keys)
            _apply_override(data, keys, _parse_override_value(raw_value))
        try:
            settings = Settings.model_validate(data)
        except ValidationError as exc:
            raise typer.BadParameter(f"invalid configuration override: {exc}", param_hint="--set")

    logger.debug("effective settings: %s", settings.model_dump())
    ctx.obj = settings


@app.command()
def template(
    ctx: typer.Context,
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the template (.npy or .csv)."),
) -> None:
    """Build the normalised beat template for the configured sampling rate."""

    cfg: Settings = ctx.obj
    tmpl = build_beat_template(settings=cfg)
    if output:
        save_template(tmpl, output)
        typer.echo(f"saved {tmpl.size}-sample template to {output}")
        return
    peak = int(np.argmax(tmpl))
    typer.echo(
        f"samples={tmpl.size} rate={cfg.signal.sampling_rate:g}Hz "
        f"peak_index={peak} min={float(tmpl.min()):.3f} max={float(tmpl.max()):.3f}"
    )


@app.command()
def simulate(
    ctx: typer.Context,
    duration: float = typer.Option(10.0, "--duration", "-d", min=0.0, help="Simulated seconds."),
    fps: Optional[float] = typer.Option(None, "--fps", help="Frame rate of the driving clock."),
    output: Optional[Path] = typer.Option(None, "--output", "-o", help="Write the trace (.npz, .npy, .csv)."),
) -> None:
    """Run the generator headlessly and report beat statistics.

    The whole run is recorded, not only the final display window.  Frames are
    spaced evenly at ``--fps`` (default ``engine.fps``).
    """

    cfg: Settings = ctx.obj
    fps = cfg.engine.fps if fps is None else fps
    if not fps > 0 or not math.isfinite(fps):
        raise typer.BadParameter("fps must be a positive finite number", param_hint="--fps")

    series = simulate_trace(duration, fps, settings=cfg)
    stats = heart_rate_stats(series, cfg.signal.sampling_rate)
    typer.echo(
        f"samples={len(series)} duration={series.duration:.3f}s beats={stats.beats} "
        f"mean_rr={stats.mean_rr:.3f}s bpm={stats.bpm:.1f}"
    )
    if output:
        try:
            save_series(series, output)
        except ValueError as exc:
            raise typer.BadParameter(str(exc), param_hint="--output")
        typer.echo(f"saved trace to {output}")


@app.command()
def plot(
    ctx: typer.Context,
    duration: float = typer.Option(10.0, "--duration", "-d", min=0.0, help="Seconds to run before drawing."),
    save: Optional[Path] = typer.Option(None, "--save", "-s", help="Image path; defaults to viz.save."),
    show: bool = typer.Option(False, "--show", help="Display the figure interactively."),
) -> None:
    """Render the display window after a headless run on the ECG grid."""

    from .viz import EcgPlot, save_or_show

    cfg: Settings = ctx.obj
    session = Session(cfg)
    snapshot = run_for(session, duration)
    session.stop()

    renderer = EcgPlot(session.geometry, title=cfg.viz.title)
    renderer(snapshot)
    target = save or cfg.viz.save
    save_or_show(renderer.figure, target, show)
    if target:
        typer.echo(f"saved plot to {target}")


@app.command()
def live(
    ctx: typer.Context,
    interval_ms: int = typer.Option(16, "--interval-ms", min=1, help="Frame timer period."),
) -> None:  # pragma: no cover - interactive
    """Open an animated window driven by the wall clock."""

    import matplotlib.pyplot as plt

    from .viz import EcgPlot, TimerScheduler

    cfg: Settings = ctx.obj
    session = Session(cfg)
    renderer = EcgPlot(session.geometry, title=cfg.viz.title)
    session.renderer = renderer
    session.scheduler = TimerScheduler(renderer.figure, interval_ms=interval_ms)
    renderer.figure.canvas.mpl_connect("close_event", lambda _evt: session.stop())
    session.start()
    plt.show()
    session.stop()


def main() -> None:
    """Execute the Typer application."""

    app()


if __name__ == "__main__":
    main()
