"""Core, UI-agnostic data structures and numeric helpers for crop studio.

This module contains:
  - Data structures shared across the app
  - Pure helpers for clamping, even rounding and ratio parsing
  - Timecode formatting and parsing for the trim controls

It intentionally has no dependencies on Tkinter, VLC, or other UI layers.
"""

from __future__ import annotations

import math
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Tuple
from urllib.parse import unquote, urlparse


MIN_CROP_PX = 36
TRIM_STEP = 0.1
TRIM_EPSILON = 0.001

SOURCE_RATIO = "source"
CUSTOM_RATIO = "custom"

RATIO_PRESETS: dict[str, str] = {
    SOURCE_RATIO: "Source",
    "16:9": "YouTube 16:9",
    "9:16": "Reel / TikTok 9:16",
    "4:3": "Classic 4:3",
    "3:4": "Portrait 3:4",
    "1:1": "Square 1:1",
    "2.39:1": "CinemaScope 2.39:1",
    CUSTOM_RATIO: "Custom",
}


class OutputFormat(str, Enum):
    MP4 = "mp4"
    WEBM = "webm"
    MOV = "mov"
    AVI = "avi"


@dataclass(frozen=True)
class VideoIntrinsics:
    """Native size and duration of the loaded video."""

    width: int
    height: int
    duration: float = 0.0

    @property
    def ratio(self) -> float:
        return self.width / self.height


@dataclass(frozen=True)
class Rect:
    """Axis-aligned rectangle; used in both source and display space."""

    x: float
    y: float
    w: float
    h: float

    @property
    def right(self) -> float:
        return self.x + self.w

    @property
    def bottom(self) -> float:
        return self.y + self.h

    @property
    def center(self) -> Tuple[float, float]:
        return self.x + self.w / 2, self.y + self.h / 2

    def rounded(self) -> Tuple[int, int, int, int]:
        return round_half_up(self.x), round_half_up(self.y), round_half_up(self.w), round_half_up(self.h)


@dataclass
class OutputSpec:
    """Target output resolution and container format."""

    w: int = 640
    h: int = 360
    format: OutputFormat = OutputFormat.MP4

    @property
    def ratio(self) -> float:
        return self.w / self.h if self.h else 0.0


@dataclass(frozen=True)
class TrimRange:
    start: float = 0.0
    end: float = 0.0


@dataclass(frozen=True)
class ExportRequest:
    """Everything the exporter needs; crop and output are integer pixels."""

    input_path: str
    output_path: str
    crop: Tuple[int, int, int, int]
    output_size: Tuple[int, int]
    format: OutputFormat
    trim: TrimRange | None = None

    def to_payload(self) -> dict[str, Any]:
        """Wire form of the request; ``trim`` is left out entirely when unset."""
        x, y, width, height = self.crop
        out_w, out_h = self.output_size
        payload: dict[str, Any] = {
            "input_path": self.input_path,
            "output_path": self.output_path,
            "crop": {"x": x, "y": y, "width": width, "height": height},
            "output": {"width": out_w, "height": out_h, "format": self.format.value},
        }
        if self.trim is not None:
            payload["trim"] = {"start": self.trim.start, "end": self.trim.end}
        return payload


def clamp(value: float, minimum: float, maximum: float) -> float:
    """Clamp ``value`` into ``[minimum, maximum]``; ``minimum`` wins on inversion."""
    return max(minimum, min(maximum, value))


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def round_even(value: float) -> int:
    """Round to the nearest integer, then down to an even number no smaller than 2."""
    safe = max(2, round_half_up(value))
    return safe - (safe % 2)


def parse_ratio(value: str) -> float:
    """Parse ``"W:H"`` into ``W / H``; anything malformed yields ``1.0``."""
    parts = str(value).split(":")
    if len(parts) != 2:
        return 1.0
    try:
        width = float(parts[0])
        height = float(parts[1])
    except ValueError:
        return 1.0
    if not math.isfinite(width) or not math.isfinite(height) or height == 0:
        return 1.0
    return width / height


def format_timecode(seconds: float) -> str:
    """Format seconds as ``HH:MM:SS.mmm``."""
    if seconds is None or not math.isfinite(seconds):
        return "--:--"
    total_ms = max(0, round_half_up(seconds * 1000))
    ms = total_ms % 1000
    total_sec = total_ms // 1000
    sec = total_sec % 60
    total_min = total_sec // 60
    minutes = total_min % 60
    hours = total_min // 60
    return f"{hours:02d}:{minutes:02d}:{sec:02d}.{ms:03d}"


def parse_timecode(value: Any) -> float | None:
    """Parse ``HH:MM:SS.mmm``, ``MM:SS`` or plain seconds; ``None`` when invalid."""
    if value is None:
        return None
    text = str(value).strip()
    if not text:
        return None
    try:
        if ":" in text:
            parts = text.split(":")
            if len(parts) > 3:
                return None
            numbers = [float(part) for part in parts]
            if len(numbers) == 3:
                hours, minutes, secs = numbers
            else:
                hours = 0.0
                minutes, secs = numbers
            total = hours * 3600 + minutes * 60 + secs
        else:
            total = float(text)
    except ValueError:
        return None
    return total if math.isfinite(total) else None


def normalize_selection(result: Any) -> str | None:
    """Reduce a dialog or drop result to a single path string.

    Accepts a plain string, a sequence (first item wins), a mapping with a
    ``path``/``paths``/``url`` entry, or ``None`` for a cancelled selection.
    """
    if not result:
        return None
    if isinstance(result, (str, Path)):
        text = str(result).strip()
        return text or None
    if isinstance(result, Mapping):
        if isinstance(result.get("path"), str):
            return normalize_selection(result["path"])
        if result.get("paths"):
            return normalize_selection(result["paths"])
        if isinstance(result.get("url"), str):
            return normalize_selection(result["url"])
        return None
    if isinstance(result, (list, tuple)):
        return normalize_selection(result[0])
    return None


def is_durable_path(reference: str) -> bool:
    """True for a local file path ffmpeg can read later; False for URLs."""
    if "://" in reference and not reference.lower().startswith("file://"):
        return False
    return True


def local_path(reference: str) -> str:
    if reference.lower().startswith("file://"):
        return unquote(urlparse(reference).path)
    return reference


def full_frame_crop(image_width: int, image_height: int) -> Rect:
    """Return a crop rectangle that covers the full frame."""
    return Rect(0.0, 0.0, float(image_width), float(image_height))


def intrinsics_from_probe(metadata: Mapping[str, Any]) -> VideoIntrinsics:
    """Build intrinsics from ffprobe JSON; the first video stream wins."""
    streams = metadata.get("streams") or []
    video_streams = [s for s in streams if s.get("codec_type", "video") == "video"]
    if not video_streams:
        raise RuntimeError("No video stream found in file.")
    stream = video_streams[0]
    width = int(stream.get("width") or 0)
    height = int(stream.get("height") or 0)
    if width <= 0 or height <= 0:
        raise RuntimeError("Video stream reports an empty frame size.")
    try:
        duration = float(metadata.get("format", {}).get("duration", 0.0))
    except (TypeError, ValueError):
        duration = 0.0
    if not math.isfinite(duration) or duration < 0:
        duration = 0.0
    return VideoIntrinsics(width, height, duration)


def describe_video(name: str | Path, intrinsics: VideoIntrinsics) -> str:
    """Return a human-readable info string for the loaded video."""
    label = Path(str(name)).name or str(name)
    return (
        f"Loaded: {label}\n"
        f"{intrinsics.width}x{intrinsics.height} • {format_timecode(intrinsics.duration)}"
    )
