"""Runtime settings for crop studio.

`load_config` reads an optional JSON file into an immutable `CropperConfig`.
Every key is optional; missing keys fall back to the defaults below. Example:

    {
      "min_crop_px": 36,
      "trim_step": 0.1,
      "preview": { "max_w": 280, "max_h": 180, "interval_ms": 66 },
      "output": { "width": 640, "height": 360, "format": "mp4" },
      "ratio_presets": { "source": "Source", "21:9": "Ultrawide 21:9", "custom": "Custom" },
      "ffmpeg": "ffmpeg"
    }

The ``FFMPEG_PATH`` environment variable overrides ``ffmpeg`` when it points
at an existing file.
"""

from __future__ import annotations

import json
import math
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict

from .core import (
    CUSTOM_RATIO,
    MIN_CROP_PX,
    RATIO_PRESETS,
    SOURCE_RATIO,
    TRIM_EPSILON,
    TRIM_STEP,
    OutputFormat,
)


@dataclass(frozen=True)
class CropperConfig:
    min_crop_px: float = MIN_CROP_PX
    trim_step: float = TRIM_STEP
    trim_epsilon: float = TRIM_EPSILON
    preview_max_w: int = 280
    preview_max_h: int = 180
    preview_interval_ms: int = 66
    playback_poll_ms: int = 250
    default_output_w: int = 640
    default_output_h: int = 360
    default_format: OutputFormat = OutputFormat.MP4
    ffmpeg: str = "ffmpeg"
    ratio_presets: Dict[str, str] = field(default_factory=lambda: dict(RATIO_PRESETS))


def _opt_obj(raw: Dict[str, Any], key: str) -> Dict[str, Any]:
    v = raw.get(key)
    if v is None:
        return {}
    if not isinstance(v, dict):
        raise ValueError(f"Invalid '{key}' (expected object)")
    return v


def _opt_num(v: Any, key: str, default: float, *, minimum: float = 0.0) -> float:
    """
    Optional positive number with default.

    Booleans are rejected even though they are ints in Python, so `true` in
    JSON does not silently become 1.
    """
    if v is None:
        return default
    if isinstance(v, bool) or not isinstance(v, (int, float)):
        raise ValueError(f"Invalid '{key}' (expected number)")
    if v <= minimum:
        raise ValueError(f"Invalid '{key}' (must be > {minimum})")
    return float(v)


def _opt_int(v: Any, key: str, default: int, *, minimum: int = 1) -> int:
    value = _opt_num(v, key, default)
    if value < minimum:
        raise ValueError(f"Invalid '{key}' (must be >= {minimum})")
    return int(value)


def _opt_presets(v: Any, default: Dict[str, str]) -> Dict[str, str]:
    """Ratio presets as ``{mode: label}``; modes are "source", "custom" or "W:H"."""
    if v is None:
        return dict(default)
    if not isinstance(v, dict) or not v:
        raise ValueError("Invalid 'ratio_presets' (expected non-empty object)")
    presets: Dict[str, str] = {}
    for mode, label in v.items():
        if mode not in (SOURCE_RATIO, CUSTOM_RATIO) and not _is_ratio(mode):
            raise ValueError(f"Invalid ratio preset {mode!r} (expected 'W:H')")
        presets[mode] = _opt_str(label, f"ratio_presets.{mode}", mode)
    return presets


def _is_ratio(mode: str) -> bool:
    parts = mode.split(":")
    if len(parts) != 2:
        return False
    try:
        return all(math.isfinite(float(p)) and float(p) > 0 for p in parts)
    except ValueError:
        return False


def _opt_str(v: Any, key: str, default: str) -> str:
    if v is None:
        return default
    if not isinstance(v, str) or not v.strip():
        raise ValueError(f"Invalid '{key}' (expected non-empty string)")
    return v.strip()


def resolve_ffmpeg(configured: str) -> str:
    """Prefer ``FFMPEG_PATH`` when it names an existing file."""
    custom = os.environ.get("FFMPEG_PATH")
    if custom and Path(custom).exists():
        return custom
    return configured


def load_config(path: Path | None = None) -> CropperConfig:
    """Load settings from ``path`` (if given and present) on top of the defaults."""
    raw: Dict[str, Any] = {}
    if path is not None and path.exists():
        raw = json.loads(path.read_text(encoding="utf-8"))
        if not isinstance(raw, dict):
            raise ValueError("Config root must be a JSON object")

    defaults = CropperConfig()
    preview = _opt_obj(raw, "preview")
    output = _opt_obj(raw, "output")

    fmt_name = _opt_str(output.get("format"), "output.format", defaults.default_format.value)
    try:
        fmt = OutputFormat(fmt_name.lower())
    except ValueError:
        raise ValueError(f"Invalid 'output.format': {fmt_name!r}") from None

    return CropperConfig(
        min_crop_px=_opt_num(raw.get("min_crop_px"), "min_crop_px", defaults.min_crop_px),
        trim_step=_opt_num(raw.get("trim_step"), "trim_step", defaults.trim_step),
        trim_epsilon=_opt_num(raw.get("trim_epsilon"), "trim_epsilon", defaults.trim_epsilon),
        preview_max_w=_opt_int(preview.get("max_w"), "preview.max_w", defaults.preview_max_w),
        preview_max_h=_opt_int(preview.get("max_h"), "preview.max_h", defaults.preview_max_h),
        preview_interval_ms=_opt_int(preview.get("interval_ms"), "preview.interval_ms", defaults.preview_interval_ms),
        playback_poll_ms=_opt_int(raw.get("playback_poll_ms"), "playback_poll_ms", defaults.playback_poll_ms),
        default_output_w=_opt_int(output.get("width"), "output.width", defaults.default_output_w),
        default_output_h=_opt_int(output.get("height"), "output.height", defaults.default_output_h),
        default_format=fmt,
        ffmpeg=resolve_ffmpeg(_opt_str(raw.get("ffmpeg"), "ffmpeg", defaults.ffmpeg)),
        ratio_presets=_opt_presets(raw.get("ratio_presets"), defaults.ratio_presets),
    )
