import json

import pytest
from pydantic import ValidationError

from ecgsim.config import RHYTHM_PRESETS, Settings, load_settings


def test_defaults():
    s = Settings()
    assert s.signal.heart_rate == 60
    assert s.signal.sampling_rate == 500
    assert s.signal.gain == 1.0
    assert (s.display.width, s.display.height) == (800, 300)
    assert s.display.display_seconds == 8
    assert s.engine.max_tick_seconds == 0.25
    assert s.engine.seed is None


def test_from_env(monkeypatch):
    monkeypatch.setenv("ECGSIM_SIGNAL__HEART_RATE", "90")
    monkeypatch.setenv("ECGSIM_ENGINE__SEED", "3")
    s = Settings.from_env()
    assert s.signal.heart_rate == 90
    assert s.engine.seed == 3


def test_load_settings_json(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text(json.dumps({"signal": {"sampling_rate": 250}, "display": {"display_seconds": 4}}))
    s = load_settings(p)
    assert s.signal.sampling_rate == 250
    assert s.display.display_seconds == 4


def test_load_settings_rejects_non_mapping(tmp_path):
    p = tmp_path / "cfg.json"
    p.write_text("[1, 2]")
    with pytest.raises(TypeError):
        load_settings(p)


try:
    import yaml  # type: ignore
except Exception:  # pragma: no cover
    yaml = None


@pytest.mark.skipif(yaml is None, reason="PyYAML not installed")
def test_load_settings_yaml(tmp_path):
    p = tmp_path / "cfg.yaml"
    p.write_text("signal:\n  heart_rate: 140\n  gain: 1.4\ndisplay:\n  width: 900\n")
    s = load_settings(p)
    assert s.signal.heart_rate == 140
    assert s.signal.gain == 1.4
    assert s.display.width == 900


@pytest.mark.parametrize(
    "data",
    [
        {"signal": {"sampling_rate": 0}},
        {"signal": {"sampling_rate": -500}},
        {"display": {"display_seconds": 0}},
        {"display": {"height": -1}},
        {"engine": {"max_tick_seconds": 0}},
    ],
)
def test_invalid_values_rejected(data):
    with pytest.raises(ValidationError):
        Settings.model_validate(data)


def test_assignment_is_validated():
    s = Settings()
    with pytest.raises(ValidationError):
        s.signal.sampling_rate = 0


def test_presets():
    s = Settings().with_preset("tachycardia")
    assert s.signal.heart_rate == RHYTHM_PRESETS["tachycardia"] == 140
    assert Settings().with_preset("normal").signal.heart_rate == 72
    with pytest.raises(ValueError):
        Settings().with_preset("fibrillation")


def test_preset_keeps_other_sections():
    s = Settings()
    s.signal.gain = 2.0
    s.display.width = 900
    p = s.with_preset("normal")
    assert p.signal.gain == 2.0
    assert p.display.width == 900
    assert s.signal.heart_rate == 60


@pytest.mark.parametrize(
    "section, key",
    [
        ("signal", "sampling_rate"),
        ("signal", "heart_rate"),
        ("signal", "gain"),
        ("display", "display_seconds"),
        ("engine", "max_tick_seconds"),
        ("engine", "fps"),
    ],
)
@pytest.mark.parametrize("value", [float("inf"), float("nan")])
def test_non_finite_values_rejected(section, key, value):
    with pytest.raises(ValidationError):
        Settings.model_validate({section: {key: value}})
