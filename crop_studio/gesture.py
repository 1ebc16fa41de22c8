"""Pointer gesture state machine for the crop overlay.

States are ``idle`` and ``dragging``. A drag starts on pointer-down over the
crop box (``move``) or one of its handles (``resize``), applies every
pointer-move relative to the snapshot taken at pointer-down, and ends on
pointer-up or when pointer capture is lost.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional, Tuple

from .core import Rect
from .crop_engine import HANDLES, move_rect, resize_rect
from .mapper import CoordinateMapper


logger = logging.getLogger(__name__)

DragMode = Literal["move", "resize"]


@dataclass(frozen=True)
class DragState:
    """Snapshot of an active drag; all deltas apply to ``start_rect``."""

    mode: DragMode
    handle: Optional[str]
    start_pointer: Tuple[float, float]
    start_rect: Rect


class CropGesture:
    """Turns display-space pointer events into source-space crop rectangles.

    ``ratio_provider`` is queried on every move so a ratio change mid-session
    is honoured by the next gesture step.
    """

    def __init__(self, ratio_provider: Callable[[], float | None], min_size: float) -> None:
        self._ratio_provider = ratio_provider
        self._min_size = min_size
        self.drag: DragState | None = None

    @property
    def active(self) -> bool:
        return self.drag is not None

    def pointer_down(self, x: float, y: float, handle: str | None, crop: Rect, mapper: CoordinateMapper) -> bool:
        """Start a gesture; refused while another one is in progress."""
        if self.drag is not None:
            return False
        if handle is not None and handle not in HANDLES:
            raise ValueError(f"Unknown resize handle: {handle!r}")
        self.drag = DragState(
            mode="resize" if handle else "move",
            handle=handle,
            start_pointer=mapper.point_to_source(x, y),
            start_rect=crop,
        )
        logger.debug("Drag start: %s %s", self.drag.mode, handle or "")
        return True

    def pointer_move(self, x: float, y: float, mapper: CoordinateMapper) -> Rect | None:
        """Return the crop for the current pointer position, or ``None`` when idle."""
        drag = self.drag
        if drag is None:
            return None
        px, py = mapper.point_to_source(x, y)
        dx = px - drag.start_pointer[0]
        dy = py - drag.start_pointer[1]
        intrinsics = mapper.intrinsics
        bounds = Rect(0.0, 0.0, float(intrinsics.width), float(intrinsics.height))
        if drag.mode == "move":
            return move_rect(drag.start_rect, dx, dy, bounds)
        return resize_rect(
            drag.start_rect,
            drag.handle,
            dx,
            dy,
            bounds,
            self._ratio_provider(),
            self._min_size,
        )

    def pointer_up(self) -> None:
        if self.drag is not None:
            logger.debug("Drag end: %s", self.drag.mode)
        self.drag = None

    # Capture loss ends the gesture exactly like a release.
    cancel = pointer_up
