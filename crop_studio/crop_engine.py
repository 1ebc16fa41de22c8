"""Pure crop-box math: move, anchored resize and ratio fitting.

All functions take and return :class:`~crop_studio.core.Rect` values in a
single coordinate space (the session uses source pixels) and never mutate
their inputs.
"""

from __future__ import annotations

from typing import Tuple

from .core import MIN_CROP_PX, Rect, clamp, round_even, round_half_up


HANDLES = ("n", "s", "e", "w", "ne", "nw", "se", "sw")


def move_rect(rect: Rect, dx: float, dy: float, bounds: Rect) -> Rect:
    """Translate ``rect`` by ``(dx, dy)``, clamping each axis into ``bounds``."""
    x = clamp(rect.x + dx, bounds.x, bounds.x + bounds.w - rect.w)
    y = clamp(rect.y + dy, bounds.y, bounds.y + bounds.h - rect.h)
    return Rect(x, y, rect.w, rect.h)


def _couple(width: float, height: float, ratio: float, width_driven: bool) -> Tuple[float, float]:
    if width_driven:
        return width, width / ratio
    return height * ratio, height


def resize_rect(
    rect: Rect,
    handle: str,
    dx: float,
    dy: float,
    bounds: Rect,
    ratio: float | None = None,
    min_size: float = MIN_CROP_PX,
) -> Rect:
    """Resize ``rect`` by dragging ``handle``, keeping the opposite side fixed.

    ``handle`` is a compass handle (``"n"``, ``"se"``, ...). When ``ratio`` is
    given and the handle is a corner, the axis with the larger pointer delta
    drives the size and the other axis follows the ratio. Sizes are clamped to
    ``min_size`` and to whatever fits between the anchor and ``bounds``; the
    ratio-coupled axis is re-derived after clamping so a bound never skews the
    ratio.

    When the minimum size cannot fit between the anchor and the bound, the
    bound wins. When both axes are bound-limited the ratio-reconciled maxima
    make the width authoritative.
    """
    if handle not in HANDLES:
        raise ValueError(f"Unknown resize handle: {handle!r}")
    has_w = "w" in handle
    has_e = "e" in handle
    has_n = "n" in handle
    has_s = "s" in handle
    resize_x = has_w or has_e
    resize_y = has_n or has_s
    use_ratio = bool(ratio) and ratio > 0 and resize_x and resize_y
    width_driven = use_ratio and abs(dx) > abs(dy)

    anchor_x = rect.x + rect.w if has_w else rect.x
    anchor_y = rect.y + rect.h if has_n else rect.y

    new_w = rect.w
    new_h = rect.h
    if resize_x:
        new_w = rect.w + (dx if has_e else -dx)
    if resize_y:
        new_h = rect.h + (dy if has_s else -dy)
    if use_ratio:
        new_w, new_h = _couple(new_w, new_h, ratio, width_driven)

    min_w = min_h = float(min_size)
    if use_ratio:
        # Raised so the ratio-derived axis also stays above the minimum.
        min_w = max(min_size, min_size * ratio)
        min_h = max(min_size, min_size / ratio)
    new_w = max(new_w, min_w)
    new_h = max(new_h, min_h)

    if resize_x:
        limit_w = anchor_x - bounds.x if has_w else bounds.x + bounds.w - anchor_x
    else:
        limit_w = rect.w
    if resize_y:
        limit_h = anchor_y - bounds.y if has_n else bounds.y + bounds.h - anchor_y
    else:
        limit_h = rect.h

    max_w, max_h = limit_w, limit_h
    if use_ratio and max_h > 0:
        if max_w / max_h > ratio:
            max_w = max_h * ratio
        else:
            max_h = max_w / ratio

    if resize_x:
        new_w = min(new_w, max_w)
    if resize_y:
        new_h = min(new_h, max_h)

    if use_ratio:
        new_w, new_h = _couple(new_w, new_h, ratio, width_driven)
        # Float noise from the division must not step over the bound.
        new_w = min(new_w, limit_w)
        new_h = min(new_h, limit_h)

    x = (anchor_x - new_w if has_w else anchor_x) if resize_x else rect.x
    y = (anchor_y - new_h if has_n else anchor_y) if resize_y else rect.y
    return Rect(x, y, new_w, new_h)


def fit_size_to_ratio(max_w: float, max_h: float, ratio: float) -> Tuple[int, int]:
    """Largest even ``(w, h)`` with ``ratio`` that fits inside ``max_w x max_h``."""
    w = round_half_up(max_w)
    h = round_half_up(w / ratio)
    if h > max_h:
        h = round_half_up(max_h)
        w = round_half_up(h * ratio)
    return round_even(w), round_even(h)


def fit_rect_to_ratio(
    rect: Rect,
    ratio: float,
    frame_w: float,
    frame_h: float,
    min_size: float = MIN_CROP_PX,
) -> Rect:
    """Re-shape ``rect`` to ``ratio`` around its centre, kept inside the frame.

    The current width is kept when possible, but never below what the minimum
    size needs on both axes; whichever axis overflows the frame is shrunk
    first. When the frame, the ratio and the minimum cannot all hold (a very
    thin custom output), the frame and the minimum win and the ratio gives.
    """
    center_x, center_y = rect.center
    w = max(rect.w, min_size, min_size * ratio)
    h = w / ratio
    if h > frame_h:
        h = frame_h
        w = h * ratio
    if w > frame_w:
        w = frame_w
        h = w / ratio
    w = max(w, min(min_size, frame_w))
    h = max(h, min(min_size, frame_h))
    x = clamp(center_x - w / 2, 0.0, frame_w - w)
    y = clamp(center_y - h / 2, 0.0, frame_h - h)
    return Rect(x, y, w, h)
