import json
import re

import numpy as np
from typer.testing import CliRunner

from ecgsim.cli import app

runner = CliRunner()


def _field(output, name):
    m = re.search(rf"{name}=([-\d.]+)", output)
    assert m, output
    return float(m.group(1))


def test_template_summary():
    result = runner.invoke(app, ["template"])
    assert result.exit_code == 0, result.output
    assert "samples=175" in result.output
    assert "peak_index=50" in result.output


def test_template_output(tmp_path):
    out = tmp_path / "tmpl.npy"
    result = runner.invoke(app, ["--set", "signal.sampling_rate=1000", "template", "-o", str(out)])
    assert result.exit_code == 0, result.output
    assert np.load(out).size == 350


def test_simulate_with_preset(tmp_path):
    out = tmp_path / "trace.csv"
    result = runner.invoke(
        app,
        ["--preset", "tachycardia", "--set", "engine.seed=4", "simulate", "-d", "10", "-o", str(out)],
    )
    assert result.exit_code == 0, result.output
    assert 22 <= _field(result.output, "beats") <= 24
    assert 4990 <= _field(result.output, "samples") <= 5000
    assert out.exists()
    assert out.read_text().startswith("time,value")


def test_simulate_from_config_file(tmp_path):
    cfg = tmp_path / "cfg.json"
    cfg.write_text(json.dumps({"signal": {"heart_rate": 60, "sampling_rate": 250}, "engine": {"seed": 1}}))
    result = runner.invoke(app, ["--config", str(cfg), "simulate", "-d", "20"])
    assert result.exit_code == 0, result.output
    assert abs(_field(result.output, "mean_rr") - 1.0) < 0.03


def test_simulate_rejects_bad_output(tmp_path):
    result = runner.invoke(app, ["simulate", "-d", "1", "-o", str(tmp_path / "trace.txt")])
    assert result.exit_code == 2


def test_simulate_rejects_bad_fps():
    result = runner.invoke(app, ["simulate", "--fps", "0"])
    assert result.exit_code == 2


def test_unknown_override_key():
    result = runner.invoke(app, ["--set", "signal.volume=3", "template"])
    assert result.exit_code == 2


def test_invalid_override_value():
    result = runner.invoke(app, ["--set", "signal.sampling_rate=0", "template"])
    assert result.exit_code == 2


def test_unknown_preset():
    result = runner.invoke(app, ["--preset", "flutter", "template"])
    assert result.exit_code == 2


def test_missing_config(tmp_path):
    result = runner.invoke(app, ["--config", str(tmp_path / "nope.yaml"), "template"])
    assert result.exit_code == 2


def test_plot_saves_image(tmp_path):
    out = tmp_path / "ecg.png"
    result = runner.invoke(app, ["--set", "engine.seed=0", "plot", "-d", "2", "--save", str(out)])
    assert result.exit_code == 0, result.output
    assert out.exists()


def test_non_finite_overrides_rejected():
    for args in [
        ["--set", "signal.sampling_rate=inf", "template"],
        ["--set", "display.display_seconds=inf", "simulate", "-d", "1"],
        ["--set", "signal.heart_rate=nan", "simulate", "-d", "1"],
        ["--set", "engine.max_tick_seconds=inf", "simulate", "-d", "1"],
    ]:
        result = runner.invoke(app, args)
        assert result.exit_code == 2, (args, result.output)


def test_simulate_rejects_infinite_fps():
    result = runner.invoke(app, ["simulate", "--fps", "inf"])
    assert result.exit_code == 2


def test_environment_configures_cli(monkeypatch):
    monkeypatch.setenv("ECGSIM_SIGNAL__SAMPLING_RATE", "1000")
    result = runner.invoke(app, ["template"])
    assert result.exit_code == 0, result.output
    assert "samples=350" in result.output
