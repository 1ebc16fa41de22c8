"""Mapping between display (canvas) coordinates and source video pixels.

The video is letterboxed inside the viewport: one uniform scale that fits the
whole frame, centred with equal margins on the unused axis.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Tuple

from .core import Rect, VideoIntrinsics, clamp


@dataclass(frozen=True)
class DisplayMetrics:
    scale: float
    w: float
    h: float
    offset_x: float
    offset_y: float


def compute_display_metrics(
    intrinsics: VideoIntrinsics,
    viewport_width: float,
    viewport_height: float,
) -> DisplayMetrics:
    """Compute how the video is letterboxed inside the viewport."""
    scale = min(viewport_width / intrinsics.width, viewport_height / intrinsics.height)
    if scale <= 0:
        # Collapsed viewport (e.g. widget not yet mapped); keep the mapping invertible.
        scale = 1.0
    display_w = intrinsics.width * scale
    display_h = intrinsics.height * scale
    offset_x = (viewport_width - display_w) / 2
    offset_y = (viewport_height - display_h) / 2
    return DisplayMetrics(scale, display_w, display_h, offset_x, offset_y)


class CoordinateMapper:
    """Converts rectangles and points between source and display space."""

    def __init__(self, intrinsics: VideoIntrinsics, viewport_width: float, viewport_height: float) -> None:
        self.intrinsics = intrinsics
        self.metrics = compute_display_metrics(intrinsics, viewport_width, viewport_height)

    def to_display(self, rect: Rect) -> Rect:
        d = self.metrics
        return Rect(
            d.offset_x + rect.x * d.scale,
            d.offset_y + rect.y * d.scale,
            rect.w * d.scale,
            rect.h * d.scale,
        )

    def to_source(self, rect: Rect) -> Rect:
        """Inverse of :meth:`to_display`, clamped inside the video frame."""
        d = self.metrics
        width = self.intrinsics.width
        height = self.intrinsics.height
        w = min(rect.w / d.scale, width)
        h = min(rect.h / d.scale, height)
        x = (rect.x - d.offset_x) / d.scale
        y = (rect.y - d.offset_y) / d.scale
        return Rect(clamp(x, 0.0, width - w), clamp(y, 0.0, height - h), w, h)

    def point_to_source(self, x: float, y: float) -> Tuple[float, float]:
        """Map a display point to source pixels without clamping."""
        d = self.metrics
        return (x - d.offset_x) / d.scale, (y - d.offset_y) / d.scale

    def point_to_display(self, x: float, y: float) -> Tuple[float, float]:
        d = self.metrics
        return d.offset_x + x * d.scale, d.offset_y + y * d.scale
