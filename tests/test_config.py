import json

import pytest

from crop_studio.config import CropperConfig, load_config
from crop_studio.core import OutputFormat


@pytest.fixture(autouse=True)
def no_ffmpeg_override(monkeypatch):
    monkeypatch.delenv("FFMPEG_PATH", raising=False)


def write_config(tmp_path, data):
    path = tmp_path / "crop_studio.json"
    path.write_text(json.dumps(data), encoding="utf-8")
    return path


def test_defaults_without_file(tmp_path):
    assert load_config() == CropperConfig()
    assert load_config(tmp_path / "missing.json") == CropperConfig()


def test_overrides_are_applied(tmp_path):
    path = write_config(
        tmp_path,
        {
            "min_crop_px": 48,
            "preview": {"max_w": 320, "interval_ms": 40},
            "output": {"width": 1280, "height": 720, "format": "WEBM"},
            "ffmpeg": "/opt/ffmpeg/bin/ffmpeg",
        },
    )
    config = load_config(path)
    assert config.min_crop_px == 48
    assert config.preview_max_w == 320
    assert config.preview_max_h == 180
    assert config.preview_interval_ms == 40
    assert (config.default_output_w, config.default_output_h) == (1280, 720)
    assert config.default_format is OutputFormat.WEBM
    assert config.ffmpeg == "/opt/ffmpeg/bin/ffmpeg"


@pytest.mark.parametrize(
    "data",
    [
        {"trim_step": True},
        {"trim_step": 0},
        {"preview": [280, 180]},
        {"output": {"format": "gif"}},
        {"ffmpeg": "  "},
    ],
)
def test_invalid_values_are_rejected(tmp_path, data):
    with pytest.raises(ValueError):
        load_config(write_config(tmp_path, data))


def test_root_must_be_an_object(tmp_path):
    with pytest.raises(ValueError):
        load_config(write_config(tmp_path, [1, 2]))


def test_ffmpeg_path_env_wins_when_it_exists(tmp_path, monkeypatch):
    binary = tmp_path / "ffmpeg"
    binary.write_text("", encoding="utf-8")
    monkeypatch.setenv("FFMPEG_PATH", str(binary))
    assert load_config().ffmpeg == str(binary)

    monkeypatch.setenv("FFMPEG_PATH", str(tmp_path / "nope"))
    assert load_config().ffmpeg == "ffmpeg"


@pytest.mark.parametrize("interval", [0.5, 0.999])
def test_sub_millisecond_interval_is_rejected(tmp_path, interval):
    with pytest.raises(ValueError):
        load_config(write_config(tmp_path, {"preview": {"interval_ms": interval}}))


def test_ratio_presets_are_read_from_file(tmp_path):
    presets = {"source": "Source", "21:9": "Ultrawide 21:9", "custom": "Custom"}
    config = load_config(write_config(tmp_path, {"ratio_presets": presets}))
    assert config.ratio_presets == presets


@pytest.mark.parametrize(
    "presets",
    [
        {"widescreen": "Wide"},
        {"16:0": "Broken"},
        {"16:9": ""},
        {},
    ],
)
def test_invalid_ratio_presets_are_rejected(tmp_path, presets):
    with pytest.raises(ValueError):
        load_config(write_config(tmp_path, {"ratio_presets": presets}))
