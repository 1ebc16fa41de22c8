"""VLC-backed media source: playback, seeking and frame sampling."""
from __future__ import annotations

import logging
import platform
import tempfile
from pathlib import Path

from PIL import Image
import vlc

from .core import VideoIntrinsics, intrinsics_from_probe, is_durable_path
from .ffmpeg_utils import extract_frame, probe_video
from .preview import FrameCache


logger = logging.getLogger(__name__)


class MediaSource:
    """Wraps a VLC player rendering into a native window handle.

    Intrinsics come from ffprobe because VLC only reports the frame size once
    decoding has started. Frames are sampled through VLC snapshots, with an
    ffmpeg single-frame extract as the fallback when VLC cannot snapshot. A
    sampled frame is reused until the playback position moves.
    """

    def __init__(self, ffmpeg: str = "ffmpeg", ffprobe: str = "ffprobe") -> None:
        self.ffmpeg = ffmpeg
        self.ffprobe = ffprobe
        # Suppress the on-video title overlay and reduce log noise.
        self.vlc_instance = vlc.Instance("--no-video-title-show", "--quiet")
        self.media_player: vlc.MediaPlayer | None = None
        self.reference: str | None = None
        self._window_handle: int | None = None
        self._temp_dir = Path(tempfile.mkdtemp(prefix="crop_studio_"))
        self._snapshot_path = self._temp_dir / "frame.png"
        self._frames = FrameCache(self._position_ms, self._grab_frame)
        self._extract_failed = False

    def attach(self, window_handle: int) -> None:
        """Render video into the native window ``window_handle``."""
        self._window_handle = window_handle
        self._bind_window()

    def _bind_window(self) -> None:
        if not self.media_player or self._window_handle is None:
            return
        system = platform.system()
        try:
            if system == "Windows":
                self.media_player.set_hwnd(self._window_handle)
            elif system == "Linux":
                self.media_player.set_xwindow(self._window_handle)
            elif system == "Darwin":
                self.media_player.set_nsobject(self._window_handle)
        except Exception:  # noqa: BLE001
            # VLC falls back to its own window.
            logger.warning("Could not embed VLC output; using a separate window")

    def load(self, reference: str) -> VideoIntrinsics:
        """Open ``reference`` (path or URL) paused; raise ``RuntimeError`` if undecodable."""
        self.release()
        intrinsics = intrinsics_from_probe(probe_video(reference, self.ffprobe))
        self.media_player = self.vlc_instance.media_player_new()
        self._bind_window()
        if is_durable_path(reference):
            media = self.vlc_instance.media_new_path(reference)
        else:
            media = self.vlc_instance.media_new(reference)
        self.media_player.set_media(media)
        self.reference = reference
        self._frames.invalidate()
        self._extract_failed = False
        return intrinsics

    def release(self) -> None:
        # Keep going on failure so the file handle is always dropped.
        if self.media_player:
            try:
                self.media_player.stop()
                self.media_player.release()
            except Exception:  # noqa: BLE001
                logger.debug("VLC release failed", exc_info=True)
            self.media_player = None
        self.reference = None

    def play(self) -> None:
        if self.media_player:
            self.media_player.play()

    def pause(self) -> None:
        if self.media_player:
            self.media_player.set_pause(1)

    def is_playing(self) -> bool:
        return bool(self.media_player and self.media_player.is_playing())

    def seek(self, seconds: float) -> None:
        if self.media_player:
            self.media_player.set_time(int(max(0.0, seconds) * 1000))

    def current_time(self) -> float:
        if not self.media_player:
            return 0.0
        current_ms = self.media_player.get_time()
        return current_ms / 1000 if current_ms >= 0 else 0.0

    def has_ended(self) -> bool:
        if not self.media_player:
            return False
        return self.media_player.get_state() in (vlc.State.Ended, vlc.State.Error)

    def set_muted(self, muted: bool) -> None:
        if self.media_player:
            self.media_player.audio_set_mute(muted)

    def current_frame(self) -> Image.Image | None:
        """Sample the frame on screen; ``None`` until one has been decoded."""
        if not self.media_player or not self.reference:
            return None
        return self._frames.get()

    def _position_ms(self) -> int:
        return self.media_player.get_time() if self.media_player else -1

    def _grab_frame(self) -> Image.Image | None:
        try:
            if self.media_player.video_take_snapshot(0, str(self._snapshot_path), 0, 0) == 0:
                with Image.open(self._snapshot_path) as image:
                    return image.convert("RGB")
        except OSError:
            logger.debug("VLC snapshot unreadable", exc_info=True)
        if self._frames.frame is None and not self._extract_failed:
            return self._extract_frame()
        return None

    def _extract_frame(self) -> Image.Image | None:
        try:
            extract_frame(self.reference, self._snapshot_path, self.current_time(), self.ffmpeg)
        except RuntimeError:
            logger.debug("ffmpeg frame extract failed", exc_info=True)
            self._extract_failed = True
            return None
        with Image.open(self._snapshot_path) as image:
            return image.convert("RGB")
