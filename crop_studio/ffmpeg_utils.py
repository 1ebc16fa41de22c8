"""Helpers for interacting with ffmpeg and ffprobe."""
from __future__ import annotations

import json
import logging
import shutil
import subprocess
from collections import deque
from pathlib import Path
from typing import Any, Callable, Dict, List

from .core import ExportRequest, OutputFormat, format_timecode


logger = logging.getLogger(__name__)

FORMAT_ARGS: Dict[OutputFormat, List[str]] = {
    OutputFormat.MP4: [
        "-c:v", "libx264", "-preset", "veryfast", "-crf", "18", "-pix_fmt", "yuv420p",
        "-c:a", "aac",
    ],
    OutputFormat.MOV: [
        "-c:v", "libx264", "-preset", "veryfast", "-crf", "18", "-pix_fmt", "yuv420p",
        "-c:a", "aac", "-movflags", "+faststart",
    ],
    OutputFormat.WEBM: ["-c:v", "libvpx-vp9", "-b:v", "0", "-crf", "32", "-c:a", "libopus"],
    OutputFormat.AVI: ["-c:v", "mpeg4", "-q:v", "3", "-c:a", "mp3"],
}

ERROR_TAIL_LINES = 12


class ExportError(RuntimeError):
    """ffmpeg could not produce the requested file."""


def ensure_ffmpeg_available(ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe") -> None:
    """Raise a helpful error when ffmpeg is not on PATH."""
    if shutil.which(ffmpeg) is None:
        raise EnvironmentError(
            "ffmpeg is required but was not found on PATH. Install ffmpeg and try again."
        )
    if shutil.which(ffprobe) is None:
        raise EnvironmentError(
            "ffprobe is required but was not found on PATH. Install ffmpeg and try again."
        )


def ffprobe_for(ffmpeg: str) -> str:
    """Return the ffprobe that sits next to a custom ffmpeg binary, if any."""
    path = Path(ffmpeg)
    if path.parent != Path("."):
        candidate = path.with_name(path.name.replace("ffmpeg", "ffprobe"))
        if candidate.exists():
            return str(candidate)
    return "ffprobe"


def run_command(args: list[str]) -> subprocess.CompletedProcess:
    """Run a subprocess command and return the completed process."""
    return subprocess.run(args, capture_output=True, text=True, check=False)


def probe_video(video_path: Path | str, ffprobe: str = "ffprobe") -> Dict[str, Any]:
    """Return basic video metadata using ffprobe."""
    if shutil.which(ffprobe) is None:
        raise EnvironmentError(
            "ffprobe is required but was not found on PATH. Install ffmpeg and try again."
        )
    result = run_command(
        [
            ffprobe,
            "-v",
            "error",
            "-show_entries",
            "format=duration",
            "-show_streams",
            "-print_format",
            "json",
            str(video_path),
        ]
    )
    if result.returncode != 0:
        raise RuntimeError(f"Could not probe video: {result.stderr.strip()}")
    return json.loads(result.stdout)


def extract_frame(video_path: Path | str, output_path: Path, timestamp: float = 0.0, ffmpeg: str = "ffmpeg") -> None:
    """Extract a single frame at the given timestamp for preview purposes."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    args = [
        ffmpeg,
        "-y",
        "-ss",
        f"{max(0.0, timestamp):.3f}",
        "-i",
        str(video_path),
        "-vframes",
        "1",
        str(output_path),
    ]
    result = run_command(args)
    if result.returncode != 0:
        raise RuntimeError(f"Could not extract frame: {result.stderr.strip()}")


def make_even(value: int) -> int:
    adjusted = max(2, int(value))
    return adjusted - (adjusted % 2)


def even_offset(value: int) -> int:
    adjusted = max(0, int(value))
    return adjusted - (adjusted % 2)


def build_filter(request: ExportRequest) -> str:
    """Crop (bounded to the input frame) and then scale to the output size."""
    x, y, width, height = request.crop
    cx, cy = even_offset(x), even_offset(y)
    cw, ch = make_even(width), make_even(height)
    ow, oh = (make_even(v) for v in request.output_size)
    return (
        f"crop=w=min({cw}\\,in_w):h=min({ch}\\,in_h)"
        f":x=min(max({cx}\\,0)\\,in_w-min({cw}\\,in_w))"
        f":y=min(max({cy}\\,0)\\,in_h-min({ch}\\,in_h)),"
        f"scale={ow}:{oh}"
    )


def build_export_args(request: ExportRequest, ffmpeg: str = "ffmpeg") -> list[str]:
    """Build the ffmpeg command line for ``request``."""
    _, _, width, height = request.crop
    if width <= 0 or height <= 0:
        raise ExportError("Crop size is empty.")
    out_w, out_h = request.output_size
    if out_w <= 0 or out_h <= 0:
        raise ExportError("Output size is empty.")

    args = [ffmpeg, "-y"]
    if request.trim is not None:
        start = max(0.0, request.trim.start)
        end = max(start, request.trim.end)
        duration = end - start
        if duration <= 0:
            raise ExportError("Trim duration must be greater than 0.")
        args += ["-ss", f"{start:.3f}", "-i", request.input_path, "-t", f"{duration:.3f}"]
    else:
        args += ["-i", request.input_path]

    args += ["-map", "0:v:0", "-map", "0:a?", "-vf", build_filter(request)]
    args += FORMAT_ARGS.get(request.format, FORMAT_ARGS[OutputFormat.MP4])
    args += ["-progress", "pipe:1", "-nostats", "-loglevel", "error", request.output_path]
    return args


def crop_video(
    request: ExportRequest,
    ffmpeg: str = "ffmpeg",
    progress_callback: Callable[[str], None] | None = None,
) -> None:
    """Run the export described by ``request``; raise ``ExportError`` on failure."""
    if shutil.which(ffmpeg) is None:
        raise ExportError("ffmpeg is required but was not found on PATH. Install ffmpeg and try again.")
    args = build_export_args(request, ffmpeg)
    Path(request.output_path).parent.mkdir(parents=True, exist_ok=True)
    logger.info("Running: %s", subprocess.list2cmdline(args))

    process = subprocess.Popen(
        args,
        stdout=subprocess.PIPE,
        stderr=subprocess.STDOUT,
        text=True,
        bufsize=1,
    )
    assert process.stdout is not None

    tail: deque[str] = deque(maxlen=ERROR_TAIL_LINES)
    for line in process.stdout:
        cleaned = line.strip()
        if not cleaned:
            continue
        if cleaned.startswith("out_time_ms="):
            try:
                out_time_us = int(cleaned.split("=", 1)[1])
            except ValueError:
                continue
            if progress_callback:
                progress_callback(f"Processing timestamp: {format_timecode(out_time_us / 1_000_000)}")
        elif cleaned.startswith("progress="):
            if cleaned.split("=", 1)[1] == "end" and progress_callback:
                progress_callback("ffmpeg processing complete.")
        elif "=" in cleaned and " " not in cleaned:
            # Remaining -progress key=value pairs (bitrate, fps, ...).
            continue
        else:
            tail.append(cleaned)
    process.wait()
    if process.returncode != 0:
        message = "\n".join(tail) or f"exit code {process.returncode}"
        raise ExportError(f"ffmpeg failed:\n{message}")
