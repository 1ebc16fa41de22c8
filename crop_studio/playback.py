"""Two-way binding between the timeline scrubber and the media clock."""

from __future__ import annotations

import logging
from typing import Callable, Protocol

from .core import clamp, format_timecode


logger = logging.getLogger(__name__)


class Seekable(Protocol):
    def seek(self, seconds: float) -> None: ...


class PlaybackSync:
    """Keeps the scrubber value and the media position in step.

    While the user drags the scrubber, time updates coming from the player
    are ignored for the displayed value; releasing the scrubber commits the
    dragged position as a single seek.
    """

    def __init__(self, media: Seekable, on_change: Callable[[float, float], None] | None = None) -> None:
        self.media = media
        self.on_change = on_change
        self.duration = 0.0
        self.value = 0.0
        self.seeking = False

    @property
    def enabled(self) -> bool:
        return self.duration > 0

    def readout(self) -> str:
        total = format_timecode(self.duration) if self.enabled else "--:--"
        return f"{format_timecode(self.value)} / {total}"

    def reset(self, duration: float) -> None:
        self.duration = max(0.0, duration)
        self.value = 0.0
        self.seeking = False
        self._notify()

    def media_time_updated(self, seconds: float) -> None:
        """Player reported a new position."""
        if not self.enabled or self.seeking:
            return
        self.value = clamp(seconds, 0.0, self.duration)
        self._notify()

    def begin_scrub(self) -> None:
        if self.enabled:
            self.seeking = True

    def scrub_to(self, seconds: float) -> None:
        if not self.enabled:
            return
        self.seeking = True
        self.value = clamp(seconds, 0.0, self.duration)
        self._notify()

    def end_scrub(self) -> None:
        if not self.seeking:
            return
        self.seeking = False
        logger.debug("Seek to %.3f", self.value)
        self.media.seek(self.value)
        self._notify()

    def _notify(self) -> None:
        if self.on_change is not None:
            self.on_change(self.value, self.duration)
