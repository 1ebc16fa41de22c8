"""Trim range bookkeeping: start/end inside the duration with a minimum gap."""

from __future__ import annotations

import logging
import math

from .core import TRIM_EPSILON, TRIM_STEP, TrimRange, clamp


logger = logging.getLogger(__name__)

# Tolerance for float noise in gap comparisons (e.g. 120 - 119.9).
_GAP_TOLERANCE = 1e-9


class TrimEngine:
    """Owns the trim interval for the loaded video."""

    def __init__(self, step: float = TRIM_STEP, epsilon: float = TRIM_EPSILON) -> None:
        self.step = step
        self.epsilon = epsilon
        self.duration = 0.0
        self.range = TrimRange()

    @property
    def enabled(self) -> bool:
        return math.isfinite(self.duration) and self.duration > 0

    @property
    def min_gap(self) -> float:
        return min(self.step, self.duration)

    @property
    def start(self) -> float:
        return self.range.start

    @property
    def end(self) -> float:
        return self.range.end

    def load(self, duration: float) -> None:
        """Reset for a newly loaded video."""
        self.duration = duration if math.isfinite(duration) and duration > 0 else 0.0
        self.range = TrimRange(0.0, self.duration)

    def clear(self) -> None:
        self.duration = 0.0
        self.range = TrimRange()

    def reset_to_full(self) -> None:
        if not self.enabled:
            return
        self.range = TrimRange(0.0, self.duration)

    def set_start(self, value: float) -> None:
        if not self.enabled or not math.isfinite(value):
            return
        start = clamp(value, 0.0, self.duration)
        end = self.range.end
        if end - start < self.min_gap - _GAP_TOLERANCE:
            start = max(0.0, end - self.min_gap)
        self._commit(start, end)

    def set_end(self, value: float) -> None:
        if not self.enabled or not math.isfinite(value):
            return
        end = clamp(value, 0.0, self.duration)
        start = self.range.start
        if end - start < self.min_gap - _GAP_TOLERANCE:
            end = min(self.duration, start + self.min_gap)
        self._commit(start, end)

    def _commit(self, start: float, end: float) -> None:
        gap = self.min_gap
        start = clamp(start, 0.0, self.duration)
        end = clamp(end, 0.0, self.duration)
        if end - start < gap - _GAP_TOLERANCE:
            # At a timeline extremity the other bound has to give way.
            if start + gap <= self.duration:
                end = start + gap
            else:
                start = max(0.0, end - gap)
        self.range = TrimRange(start, end)
        logger.debug("Trim set to %.3f-%.3f", start, end)

    def is_full(self) -> bool:
        return (
            abs(self.range.start) <= self.epsilon
            and abs(self.range.end - self.duration) <= self.epsilon
        )

    def payload(self) -> TrimRange | None:
        """Return the trim to request, or ``None`` when nothing is trimmed."""
        if not self.enabled or self.is_full():
            return None
        return self.range
