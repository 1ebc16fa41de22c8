import subprocess

import pytest

from crop_studio import ffmpeg_utils
from crop_studio.core import ExportRequest, OutputFormat, TrimRange
from crop_studio.ffmpeg_utils import (
    ExportError,
    build_export_args,
    build_filter,
    crop_video,
    even_offset,
    make_even,
    probe_video,
)


def make_request(**overrides):
    values = dict(
        input_path="/videos/match.mp4",
        output_path="/out/match_cropped.mp4",
        crop=(420, 0, 1080, 1080),
        output_size=(1080, 1080),
        format=OutputFormat.MP4,
        trim=None,
    )
    values.update(overrides)
    return ExportRequest(**values)


def test_make_even():
    assert make_even(0) == 2
    assert make_even(5) == 4
    assert make_even(1080) == 1080


def test_even_offset_allows_zero():
    assert even_offset(0) == 0
    assert even_offset(1) == 0
    assert even_offset(421) == 420
    assert even_offset(-3) == 0


def test_filter_crops_then_scales():
    expected = (
        r"crop=w=min(1080\,in_w):h=min(1080\,in_h)"
        r":x=min(max(420\,0)\,in_w-min(1080\,in_w))"
        r":y=min(max(0\,0)\,in_h-min(1080\,in_h)),"
        r"scale=1080:1080"
    )
    assert build_filter(make_request()) == expected


def test_args_without_trim():
    args = build_export_args(make_request())
    assert args[:4] == ["ffmpeg", "-y", "-i", "/videos/match.mp4"]
    assert "-ss" not in args and "-t" not in args
    assert args[args.index("-vf") + 1] == build_filter(make_request())
    assert "libx264" in args
    assert args[-1] == "/out/match_cropped.mp4"


def test_args_with_trim_seek_before_input():
    args = build_export_args(make_request(trim=TrimRange(10.0, 25.5)))
    assert args[2:8] == ["-ss", "10.000", "-i", "/videos/match.mp4", "-t", "15.500"]


def test_webm_uses_vp9_and_opus():
    args = build_export_args(make_request(format=OutputFormat.WEBM, output_path="/out/a.webm"))
    assert "libvpx-vp9" in args
    assert "libopus" in args


@pytest.mark.parametrize(
    "overrides",
    [
        {"crop": (0, 0, 0, 100)},
        {"output_size": (0, 1080)},
        {"trim": TrimRange(5.0, 5.0)},
    ],
)
def test_invalid_requests_are_rejected(overrides):
    with pytest.raises(ExportError):
        build_export_args(make_request(**overrides))


def test_probe_failure_raises_runtime_error(monkeypatch):
    monkeypatch.setattr(ffmpeg_utils.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(
        ffmpeg_utils,
        "run_command",
        lambda args: subprocess.CompletedProcess(args, 1, stdout="", stderr="moov atom not found\n"),
    )
    with pytest.raises(RuntimeError, match="Could not probe video: moov atom not found"):
        probe_video("/videos/broken.mp4")


def test_probe_without_ffprobe(monkeypatch):
    monkeypatch.setattr(ffmpeg_utils.shutil, "which", lambda name: None)
    with pytest.raises(EnvironmentError):
        probe_video("/videos/match.mp4")


def test_crop_video_without_ffmpeg(monkeypatch):
    monkeypatch.setattr(ffmpeg_utils.shutil, "which", lambda name: None)
    with pytest.raises(ExportError, match="ffmpeg is required"):
        crop_video(make_request())


class FakeProcess:
    def __init__(self, lines, returncode):
        self.stdout = iter(lines)
        self.returncode = None
        self._final = returncode

    def wait(self):
        self.returncode = self._final
        return self.returncode


def test_crop_video_reports_progress_and_error_tail(monkeypatch, tmp_path):
    lines = [
        "frame=12\n",
        "out_time_ms=1500000\n",
        "progress=continue\n",
        "[libx264 @ 0x1] Unknown encoder setting\n",
        "Conversion failed!\n",
    ]
    launched = []

    def fake_popen(args, **kwargs):
        launched.append(args)
        return FakeProcess(lines, 1)

    monkeypatch.setattr(ffmpeg_utils.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(ffmpeg_utils.subprocess, "Popen", fake_popen)

    messages = []
    request = make_request(output_path=str(tmp_path / "out" / "clip.mp4"))
    with pytest.raises(ExportError) as excinfo:
        crop_video(request, progress_callback=messages.append)

    assert messages == ["Processing timestamp: 00:00:01.500"]
    assert "Unknown encoder setting" in str(excinfo.value)
    assert "Conversion failed!" in str(excinfo.value)
    assert "frame=12" not in str(excinfo.value)
    assert launched[0][-1] == request.output_path
    assert (tmp_path / "out").is_dir()


def test_crop_video_success_signals_completion(monkeypatch, tmp_path):
    monkeypatch.setattr(ffmpeg_utils.shutil, "which", lambda name: f"/usr/bin/{name}")
    monkeypatch.setattr(
        ffmpeg_utils.subprocess,
        "Popen",
        lambda args, **kwargs: FakeProcess(["out_time_ms=2000000\n", "progress=end\n"], 0),
    )
    messages = []
    crop_video(make_request(output_path=str(tmp_path / "clip.mp4")), progress_callback=messages.append)
    assert messages[-1] == "ffmpeg processing complete."
