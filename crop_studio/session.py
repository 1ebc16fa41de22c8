"""Single owned state for one editing session.

`CropSession` holds the loaded video, crop rectangle, output settings, ratio
mode, trim range and export guard. The UI calls its methods in response to
events and then re-reads whatever it displays; nothing here touches Tk or VLC.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Callable

from .config import CropperConfig
from .core import (
    CUSTOM_RATIO,
    SOURCE_RATIO,
    ExportRequest,
    OutputFormat,
    OutputSpec,
    Rect,
    VideoIntrinsics,
    full_frame_crop,
    is_durable_path,
    local_path,
    parse_ratio,
    round_even,
)
from .crop_engine import fit_rect_to_ratio, fit_size_to_ratio
from .gesture import CropGesture
from .mapper import CoordinateMapper
from .preview import compute_preview_size
from .trim import TrimEngine


logger = logging.getLogger(__name__)

PREVIEW_ONLY_MESSAGE = "Loaded for preview only. Use Open Video to pick a local file before exporting."


class ExportRefused(RuntimeError):
    """Export cannot be attempted in the current session state."""


class CropSession:
    def __init__(self, config: CropperConfig | None = None) -> None:
        self.config = config or CropperConfig()
        self.intrinsics: VideoIntrinsics | None = None
        self.input_path: str | None = None
        self.source_name: str | None = None
        self.preview_only = False

        self.crop = Rect(0.0, 0.0, 0.0, 0.0)
        self.output = OutputSpec(
            self.config.default_output_w,
            self.config.default_output_h,
            self.config.default_format,
        )
        self.ratio_mode = SOURCE_RATIO
        self.lock_ratio = True
        self.muted = True

        self.trim = TrimEngine(self.config.trim_step, self.config.trim_epsilon)
        self.gesture = CropGesture(self.active_ratio, self.config.min_crop_px)
        self.viewport: tuple[float, float] = (0.0, 0.0)
        self.mapper: CoordinateMapper | None = None
        self.dpr = 1.0
        self._update_preview_size()

        self.busy = False
        self.status = ""
        self.status_is_error = False

    @property
    def has_video(self) -> bool:
        return self.intrinsics is not None

    @property
    def media_reference(self) -> str | None:
        """What the player should open: the decoded local path, or the URL as given."""
        return self.input_path or self.source_name

    def set_status(self, message: str, is_error: bool = False) -> None:
        self.status = message
        self.status_is_error = is_error
        if message:
            (logger.warning if is_error else logger.info)(message)

    # Loading -------------------------------------------------------------
    def open_reference(self, reference: str) -> None:
        """Start loading a dialog/drop result; URLs load as preview only."""
        if is_durable_path(reference):
            self.open_path(local_path(reference))
        else:
            self.open_preview(reference)

    def open_path(self, path: str) -> None:
        self._begin_load(path)
        self.input_path = path
        self.preview_only = False
        self.set_status("")

    def open_preview(self, name: str) -> None:
        self._begin_load(name)
        self.input_path = None
        self.preview_only = True
        self.set_status(PREVIEW_ONLY_MESSAGE, is_error=True)

    def _begin_load(self, name: str) -> None:
        self.intrinsics = None
        self.mapper = None
        self.gesture.pointer_up()
        self.trim.clear()
        self.source_name = name
        logger.info("Loading %s", name)

    def media_loaded(self, intrinsics: VideoIntrinsics) -> None:
        """Metadata is available: seed the mapper and trim, apply source defaults."""
        self.intrinsics = intrinsics
        self.trim.load(intrinsics.duration)
        self._update_mapper()
        self.apply_source_defaults()
        logger.info(
            "Loaded %dx%d, %.3fs", intrinsics.width, intrinsics.height, intrinsics.duration
        )

    def media_failed(self, message: str) -> None:
        """The media could not be decoded; the session stays usable for another file."""
        self.intrinsics = None
        self.mapper = None
        self.trim.clear()
        self.set_status(f"Could not load video: {message}", is_error=True)

    def apply_source_defaults(self) -> None:
        self.ratio_mode = SOURCE_RATIO
        intrinsics = self.intrinsics
        if intrinsics is not None:
            self.output.w = round_even(intrinsics.width)
            self.output.h = round_even(intrinsics.height)
        self.reset_crop()
        self._update_preview_size()

    # Display ---------------------------------------------------------------
    def set_viewport(self, width: float, height: float) -> None:
        self.viewport = (float(width), float(height))
        self._update_mapper()

    def _update_mapper(self) -> None:
        width, height = self.viewport
        if self.intrinsics is None or width <= 0 or height <= 0:
            self.mapper = None
            return
        self.mapper = CoordinateMapper(self.intrinsics, width, height)

    def display_crop(self) -> Rect | None:
        if self.mapper is None:
            return None
        return self.mapper.to_display(self.crop)

    def set_preview_density(self, dpr: float) -> None:
        self.dpr = dpr if dpr > 0 else 1.0
        self._update_preview_size()

    def _update_preview_size(self) -> None:
        self.preview_size = compute_preview_size(
            self.output,
            self.config.preview_max_w,
            self.config.preview_max_h,
            self.dpr,
        )

    # Ratio and output coupling ----------------------------------------------
    def active_ratio(self) -> float:
        intrinsics = self.intrinsics
        if intrinsics is None:
            return 1.0
        if self.ratio_mode == SOURCE_RATIO:
            return intrinsics.ratio
        if self.ratio_mode == CUSTOM_RATIO:
            ratio = self.output.ratio
            return ratio if ratio > 0 else intrinsics.ratio
        return parse_ratio(self.ratio_mode)

    def set_ratio_mode(self, mode: str) -> None:
        if mode not in (SOURCE_RATIO, CUSTOM_RATIO) and ":" not in mode:
            raise ValueError(f"Unknown ratio mode: {mode!r}")
        self.ratio_mode = mode
        intrinsics = self.intrinsics
        if intrinsics is None:
            return
        if mode == SOURCE_RATIO:
            self.output.w = round_even(intrinsics.width)
            self.output.h = round_even(intrinsics.height)
        elif mode != CUSTOM_RATIO:
            self.output.w, self.output.h = fit_size_to_ratio(
                intrinsics.width, intrinsics.height, parse_ratio(mode)
            )
        self.set_crop_to_ratio(self.active_ratio())
        self._update_preview_size()
        logger.info("Ratio %s -> output %dx%d", mode, self.output.w, self.output.h)

    def set_output_width(self, value: float) -> None:
        current_ratio = self.output.ratio or 1.0
        new_w = round_even(value)
        new_h = self.output.h
        if self.lock_ratio:
            new_h = round_even(new_w / current_ratio)
        self._apply_output_edit(new_w, new_h)

    def set_output_height(self, value: float) -> None:
        current_ratio = self.output.ratio or 1.0
        new_h = round_even(value)
        new_w = self.output.w
        if self.lock_ratio:
            new_w = round_even(new_h * current_ratio)
        self._apply_output_edit(new_w, new_h)

    def _apply_output_edit(self, width: int, height: int) -> None:
        self.ratio_mode = CUSTOM_RATIO
        self.output.w = width
        self.output.h = height
        self.set_crop_to_ratio(self.active_ratio())
        self._update_preview_size()

    def set_format(self, fmt: OutputFormat | str) -> None:
        self.output.format = OutputFormat(fmt)

    def toggle_lock_ratio(self) -> bool:
        self.lock_ratio = not self.lock_ratio
        return self.lock_ratio

    def toggle_muted(self) -> bool:
        self.muted = not self.muted
        return self.muted

    def set_crop_to_ratio(self, ratio: float) -> None:
        intrinsics = self.intrinsics
        if intrinsics is None:
            return
        self.crop = fit_rect_to_ratio(
            self.crop, ratio, intrinsics.width, intrinsics.height, self.config.min_crop_px
        )

    def reset_crop(self) -> None:
        intrinsics = self.intrinsics
        if intrinsics is None:
            return
        self.crop = full_frame_crop(intrinsics.width, intrinsics.height)

    # Gestures ------------------------------------------------------------
    def pointer_down(self, x: float, y: float, handle: str | None = None) -> bool:
        if self.mapper is None:
            return False
        return self.gesture.pointer_down(x, y, handle, self.crop, self.mapper)

    def pointer_move(self, x: float, y: float) -> bool:
        if self.mapper is None:
            return False
        rect = self.gesture.pointer_move(x, y, self.mapper)
        if rect is None:
            return False
        self.crop = rect
        return True

    def pointer_up(self) -> None:
        self.gesture.pointer_up()

    # Export --------------------------------------------------------------
    def export_block_reason(self) -> str | None:
        if self.busy:
            return "An export is already running."
        if self.preview_only:
            return PREVIEW_ONLY_MESSAGE
        if not self.input_path:
            return "Please select a video file first."
        if self.intrinsics is None:
            return "The video has not finished loading."
        return None

    def default_output_name(self) -> str:
        stem = Path(self.input_path).stem if self.input_path else "cropped"
        return f"{stem}_cropped.{self.output.format.value}"

    def build_export_request(self, destination: str | Path) -> ExportRequest:
        return ExportRequest(
            input_path=str(self.input_path),
            output_path=str(destination),
            crop=self.crop.rounded(),
            output_size=(int(self.output.w), int(self.output.h)),
            format=self.output.format,
            trim=self.trim.payload(),
        )

    def start_export(self, destination: str | Path) -> ExportRequest:
        """Mark the session busy and return the request to hand to the exporter."""
        reason = self.export_block_reason()
        if reason:
            self.set_status(reason, is_error=True)
            raise ExportRefused(reason)
        request = self.build_export_request(destination)
        self.busy = True
        self.set_status("Exporting…")
        logger.info("Export request: %s", request.to_payload())
        return request

    def finish_export(self, error: str | None = None) -> None:
        self.busy = False
        if error:
            self.set_status(error, is_error=True)
        else:
            self.set_status("Export complete.")

    @staticmethod
    def run_exporter(request: ExportRequest, exporter: Callable[[ExportRequest], None]) -> str | None:
        """Run ``exporter`` and return its failure message, or ``None`` on success.

        Safe to call off the Tk thread: it touches no session state. The caller
        hands the result to :meth:`finish_export` on the Tk thread.
        """
        try:
            exporter(request)
        except Exception as exc:  # noqa: BLE001
            logger.exception("Export failed")
            return str(exc) or exc.__class__.__name__
        return None
