"""Continuously refreshed preview of the cropped frame."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol

from PIL import Image

from .core import OutputSpec, Rect, VideoIntrinsics, round_half_up


logger = logging.getLogger(__name__)


class Scheduler(Protocol):
    """The subset of ``tk.Misc`` used to drive the render loop."""

    def after(self, ms: int, func: Callable[[], None]) -> Any: ...

    def after_cancel(self, id: Any) -> None: ...


@dataclass(frozen=True)
class PreviewSize:
    """Logical preview size plus the pixel density it is rendered at."""

    css_w: float
    css_h: float
    dpr: float = 1.0

    @property
    def pixel_size(self) -> tuple[int, int]:
        return (
            max(2, round_half_up(self.css_w * self.dpr)),
            max(2, round_half_up(self.css_h * self.dpr)),
        )


def compute_preview_size(
    output: OutputSpec,
    max_w: float = 280,
    max_h: float = 180,
    dpr: float = 1.0,
) -> PreviewSize:
    """Fit the output ratio inside the preview box."""
    ratio = output.ratio or 1.0
    css_w = float(max_w)
    css_h = css_w / ratio
    if css_h > max_h:
        css_h = float(max_h)
        css_w = css_h * ratio
    return PreviewSize(css_w, css_h, dpr if dpr > 0 else 1.0)


def render_crop(
    frame: Image.Image,
    crop: Rect,
    intrinsics: VideoIntrinsics,
    size: PreviewSize,
) -> Image.Image:
    """Draw the crop region of ``frame`` scaled into a preview-sized image.

    ``frame`` may be a downscaled sample of the video, so the crop is mapped
    from intrinsic pixels onto the frame's own size first.
    """
    sx = frame.width / intrinsics.width
    sy = frame.height / intrinsics.height
    box = (crop.x * sx, crop.y * sy, crop.right * sx, crop.bottom * sy)
    return frame.resize(size.pixel_size, Image.Resampling.BILINEAR, box=box)


class PreviewRenderer:
    """Samples the current media frame on a fixed cadence and renders the crop.

    The loop only reads the session; it never waits for playback, so a paused
    video still shows the correct still frame.
    """

    def __init__(
        self,
        session,
        frame_source: Callable[[], Optional[Image.Image]],
        sink: Callable[[Image.Image], None],
        scheduler: Scheduler,
        interval_ms: int = 66,
    ) -> None:
        self.session = session
        self.frame_source = frame_source
        self.sink = sink
        self.scheduler = scheduler
        self.interval_ms = interval_ms
        self._job: Any = None
        self._running = False

    @property
    def running(self) -> bool:
        return self._running

    def start(self) -> None:
        if self._running:
            return
        self._running = True
        self._job = self.scheduler.after(self.interval_ms, self._tick)

    def stop(self) -> None:
        self._running = False
        if self._job is not None:
            self.scheduler.after_cancel(self._job)
            self._job = None

    def _tick(self) -> None:
        self._job = None
        if not self._running:
            return
        self.render_once()
        self._job = self.scheduler.after(self.interval_ms, self._tick)

    def render_once(self) -> Image.Image | None:
        session = self.session
        if session.intrinsics is None:
            return None
        frame = self.frame_source()
        if frame is None:
            return None
        image = render_crop(frame, session.crop, session.intrinsics, session.preview_size)
        self.sink(image)
        return image


class FrameCache:
    """Reuses the last sampled frame while the media clock has not moved.

    ``grab`` is the expensive part (a snapshot written to disk and decoded), so
    a paused video is sampled once per position instead of once per tick.
    """

    def __init__(self, clock: Callable[[], Any], grab: Callable[[], Optional[Image.Image]]) -> None:
        self._clock = clock
        self._grab = grab
        self._stamp: Any = None
        self.frame: Image.Image | None = None

    def invalidate(self) -> None:
        self._stamp = None
        self.frame = None

    def get(self) -> Image.Image | None:
        stamp = self._clock()
        if self.frame is not None and stamp == self._stamp:
            return self.frame
        frame = self._grab()
        if frame is not None:
            self.frame = frame
            self._stamp = stamp
        return self.frame
