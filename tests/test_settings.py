from pathlib import Path

import pytest

from layerfit.host.document import AnchorPosition, ResampleMethod
from layerfit.host.units import RulerUnits
from layerfit.inputs import ResizeDefaults
from layerfit.settings.user import UserSettings


def test_defaults() -> None:
    cfg = UserSettings()
    assert cfg.prompt_user is False
    assert (cfg.default_width, cfg.default_height, cfg.default_constrain) == (80, 80, True)
    assert cfg.anchor is AnchorPosition.MIDDLECENTER
    assert cfg.resample is ResampleMethod.BICUBIC
    assert cfg.ruler_units is RulerUnits.INCHES


def test_resize_defaults_prefer_explicit_values() -> None:
    cfg = UserSettings(default_width=120, default_height=None, default_constrain=False)

    assert cfg.resize_defaults() == ResizeDefaults(120, None, False, False)
    assert cfg.resize_defaults(width="", height=60, constrain="true", prompt_user=True) == (
        ResizeDefaults("", 60, "true", True)
    )


@pytest.mark.parametrize(
    "field, value",
    [
        ("default_width", 0),
        ("default_height", -10),
        ("anchor", "somewhere"),
        ("resample", "blurry"),
        ("ruler_units", "furlongs"),
    ],
)
def test_validation_errors(field: str, value: object) -> None:
    with pytest.raises(ValueError):
        UserSettings(**{field: value})


def test_load_without_any_file_uses_defaults() -> None:
    assert UserSettings.load() == UserSettings()


def test_load_explicit_file(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text(
        "default_width: 300\ndefault_height: null\nanchor: topleft\nruler_units: cm\n",
        encoding="utf-8",
    )

    cfg = UserSettings.load(path)

    assert cfg.default_width == 300
    assert cfg.default_height is None
    assert cfg.anchor is AnchorPosition.TOPLEFT
    assert cfg.ruler_units is RulerUnits.CM
    assert cfg.default_constrain is True


def test_load_empty_file(tmp_path: Path) -> None:
    path = tmp_path / "empty.yaml"
    path.write_text("", encoding="utf-8")

    assert UserSettings.load(path) == UserSettings()


def test_load_searches_default_paths(tmp_path: Path) -> None:
    (tmp_path / "layerfit.yaml").write_text("prompt_user: true\n", encoding="utf-8")

    assert UserSettings.load().prompt_user is True


def test_load_from_environment(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    path = tmp_path / "env.yaml"
    path.write_text("default_height: 33\n", encoding="utf-8")
    monkeypatch.setenv("LAYERFIT_CONFIG", str(path))

    assert UserSettings.load().default_height == 33


def test_environment_path_must_exist(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LAYERFIT_CONFIG", str(tmp_path / "gone.yaml"))

    with pytest.raises(FileNotFoundError, match="LAYERFIT_CONFIG"):
        UserSettings.load()


def test_explicit_missing_file(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        UserSettings.load(tmp_path / "missing.yaml")


def test_variables_are_interpolated(monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
    monkeypatch.setenv("LAYERFIT_WIDTH", "640")
    path = tmp_path / "cfg.yaml"
    path.write_text("default_width: ${LAYERFIT_WIDTH}\n", encoding="utf-8")

    assert UserSettings.load(path).default_width == 640


def test_invalid_values_raise_runtime_error(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("default_width: wide\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Invalid configuration"):
        UserSettings.load(path)


def test_malformed_yaml_raises_runtime_error(tmp_path: Path) -> None:
    path = tmp_path / "cfg.yaml"
    path.write_text("anchor: [topleft\n", encoding="utf-8")

    with pytest.raises(RuntimeError, match="Unable to read config YAML"):
        UserSettings.load(path)


def test_sample_config_is_valid() -> None:
    sample = Path(__file__).resolve().parent.parent / "config-sample.yaml"
    assert UserSettings.load(sample) == UserSettings()
