"""Tkinter-based UI for interactive video cropping and trimming."""
from __future__ import annotations

import argparse
import logging
import queue
import threading
from pathlib import Path
from typing import Sequence

import tkinter as tk
from tkinter import filedialog, messagebox, simpledialog, ttk
from PIL import Image, ImageTk
from tkinterdnd2 import DND_FILES, TkinterDnD

from .config import CropperConfig, load_config
from .core import (
    OutputFormat,
    describe_video,
    format_timecode,
    normalize_selection,
    parse_timecode,
)
from .crop_engine import HANDLES
from .ffmpeg_utils import crop_video, ensure_ffmpeg_available, ffprobe_for
from .media import MediaSource
from .playback import PlaybackSync
from .preview import PreviewRenderer
from .session import CropSession, ExportRefused


logger = logging.getLogger(__name__)

VIDEO_FILETYPES = [
    ("Video files", ".mp4 .m4v .mov .avi .mkv .webm .mpg .mpeg .3gp"),
    ("All files", "*.*"),
]
HANDLE_SIZE = 10
CROP_COLOR = "#00e5ff"


class QueueLogHandler(logging.Handler):
    """Collects log lines from any thread; the Tk loop drains them into the log box."""

    def __init__(self, sink: "queue.Queue[str]") -> None:
        super().__init__(level=logging.INFO)
        self.sink = sink
        self.setFormatter(logging.Formatter("%(asctime)s %(message)s", "%H:%M:%S"))

    def emit(self, record: logging.LogRecord) -> None:
        try:
            self.sink.put_nowait(self.format(record))
        except Exception:  # noqa: BLE001
            self.handleError(record)


def create_root() -> tuple[tk.Tk, bool]:
    """Create the Tk root, with OS file drop support when tkdnd loads."""
    try:
        return TkinterDnD.Tk(), True
    except (RuntimeError, tk.TclError) as exc:
        logger.warning("File drop unavailable: %s", exc)
        return tk.Tk(), False


class VideoCropperApp:
    def __init__(self, root: tk.Tk, config: CropperConfig, *, dnd_available: bool = False):
        self.root = root
        self.root.title("Crop Studio")
        self.config = config
        self.session = CropSession(config)
        self.media = MediaSource(config.ffmpeg, ffprobe_for(config.ffmpeg))
        self.playback = PlaybackSync(self.media, on_change=self._on_playback_change)
        self.current_image: Image.Image | None = None
        self.photo_image: ImageTk.PhotoImage | None = None
        self.preview_photo: ImageTk.PhotoImage | None = None
        self.playback_job: str | None = None
        self.log_job: str | None = None
        self._syncing_widgets = False
        self._log_queue: "queue.Queue[str]" = queue.Queue()
        self._log_handler = QueueLogHandler(self._log_queue)
        logging.getLogger("crop_studio").addHandler(self._log_handler)

        self._build_ui()
        self.media.attach(self._window_handle())
        self.session.set_preview_density(self.root.winfo_fpixels("1i") / 96)
        self.renderer = PreviewRenderer(
            self.session,
            self._sample_frame,
            self._show_preview,
            self.root,
            config.preview_interval_ms,
        )
        if dnd_available:
            self._bind_drop()
        self._check_ffmpeg()
        self.root.protocol("WM_DELETE_WINDOW", self.close)
        self.renderer.start()
        self._poll_playback()
        self._drain_log()
        self._refresh_all()

    # UI construction -----------------------------------------------------
    def _build_ui(self) -> None:
        container = ttk.Frame(self.root, padding=12)
        container.pack(fill=tk.BOTH, expand=True)

        top_bar = ttk.Frame(container)
        top_bar.pack(fill=tk.X, pady=(0, 10))
        ttk.Button(top_bar, text="Open Video", command=self._choose_video).pack(side=tk.LEFT)
        ttk.Button(top_bar, text="Reset Crop", command=self._reset_crop).pack(side=tk.LEFT, padx=6)
        self.sound_button = ttk.Button(top_bar, text="Sound On", command=self._toggle_sound)
        self.sound_button.pack(side=tk.LEFT)
        self.export_button = ttk.Button(top_bar, text="Export…", command=self._export)
        self.export_button.pack(side=tk.LEFT, padx=6)
        self.file_pill = ttk.Label(top_bar, text="No file selected")
        self.file_pill.pack(side=tk.LEFT, padx=(10, 0))

        content = ttk.Frame(container)
        content.pack(fill=tk.BOTH, expand=True)

        left_panel = ttk.Frame(content)
        left_panel.pack(side=tk.LEFT, fill=tk.BOTH, expand=True)

        video_container = tk.Frame(left_panel, width=900, height=520, bg="#000000")
        video_container.pack(fill=tk.BOTH, expand=True)

        # Render target for VLC; the canvas on top shows sampled frames and the crop box.
        self.video_panel = tk.Frame(video_container, bg="#000000")
        self.video_panel.pack(fill=tk.BOTH, expand=True)

        self.canvas = tk.Canvas(video_container, highlightthickness=0, bd=0, bg="#000000")
        self.canvas.place(relx=0, rely=0, relwidth=1, relheight=1)
        self.canvas.bind("<ButtonPress-1>", self._on_press)
        self.canvas.bind("<B1-Motion>", self._on_drag)
        self.canvas.bind("<ButtonRelease-1>", self._on_release)
        self.canvas.bind("<Configure>", self._on_canvas_resize)
        self.canvas.create_text(
            450, 260, text="Drop a video here or use Open Video", fill="#888", tags=("hint",)
        )

        controls = ttk.Frame(left_panel)
        controls.pack(fill=tk.X, pady=(8, 0))
        self.play_button = ttk.Button(controls, text="Play", command=self._toggle_playback, width=10)
        self.play_button.pack(side=tk.LEFT, padx=(0, 8))
        self.timeline_var = tk.DoubleVar(value=0.0)
        self.timeline = ttk.Scale(
            controls,
            from_=0.0,
            to=0.0,
            orient=tk.HORIZONTAL,
            variable=self.timeline_var,
            command=self._on_scrub,
        )
        self.timeline.pack(side=tk.LEFT, fill=tk.X, expand=True)
        self.timeline.bind("<ButtonPress-1>", lambda _e: self.playback.begin_scrub())
        self.timeline.bind("<ButtonRelease-1>", lambda _e: self.playback.end_scrub())
        self.time_label = ttk.Label(controls, text="--:-- / --:--")
        self.time_label.pack(side=tk.LEFT, padx=(8, 0))

        sidebar = ttk.Frame(content, width=300)
        sidebar.pack(side=tk.RIGHT, fill=tk.Y, padx=(12, 0))

        self.info_label = ttk.Label(sidebar, text="Load a video to start", wraplength=280, justify=tk.LEFT)
        self.info_label.pack(anchor=tk.W, pady=(0, 10))

        ttk.Label(sidebar, text="Aspect ratio").pack(anchor=tk.W)
        ratio_grid = ttk.Frame(sidebar)
        ratio_grid.pack(anchor=tk.W, pady=(4, 8))
        self.ratio_var = tk.StringVar(value=self.session.ratio_mode)
        for index, (mode, label) in enumerate(self.config.ratio_presets.items()):
            ttk.Radiobutton(
                ratio_grid,
                text=label,
                value=mode,
                variable=self.ratio_var,
                command=self._on_ratio_selected,
            ).grid(row=index // 2, column=index % 2, sticky=tk.W, padx=(0, 8))

        ttk.Label(sidebar, text="Format").pack(anchor=tk.W)
        format_row = ttk.Frame(sidebar)
        format_row.pack(anchor=tk.W, pady=(4, 8))
        self.format_var = tk.StringVar(value=self.session.output.format.value)
        for fmt in OutputFormat:
            ttk.Radiobutton(
                format_row,
                text=fmt.value.upper(),
                value=fmt.value,
                variable=self.format_var,
                command=lambda: self.session.set_format(self.format_var.get()),
            ).pack(side=tk.LEFT, padx=(0, 6))

        ttk.Label(sidebar, text="Output size (px)").pack(anchor=tk.W)
        size_row = ttk.Frame(sidebar)
        size_row.pack(anchor=tk.W, pady=(4, 8))
        self.out_w_var = tk.StringVar()
        self.out_h_var = tk.StringVar()
        out_w = ttk.Entry(size_row, textvariable=self.out_w_var, width=7)
        out_w.pack(side=tk.LEFT)
        ttk.Label(size_row, text="x").pack(side=tk.LEFT, padx=4)
        out_h = ttk.Entry(size_row, textvariable=self.out_h_var, width=7)
        out_h.pack(side=tk.LEFT)
        for entry, setter in ((out_w, self.session.set_output_width), (out_h, self.session.set_output_height)):
            handler = lambda _e, entry=entry, setter=setter: self._commit_output(entry, setter)
            entry.bind("<Return>", handler)
            entry.bind("<FocusOut>", handler)
        self.lock_button = ttk.Button(size_row, command=self._toggle_lock, width=10)
        self.lock_button.pack(side=tk.LEFT, padx=(8, 0))

        self.preview_canvas = tk.Canvas(sidebar, highlightthickness=0, bd=0, bg="#000000")
        self.preview_canvas.pack(anchor=tk.W, pady=(4, 2))
        self.preview_meta = ttk.Label(sidebar, text="No video")
        self.preview_meta.pack(anchor=tk.W, pady=(0, 8))

        ttk.Label(sidebar, text="Trim").pack(anchor=tk.W)
        self.trim_start_var = tk.DoubleVar(value=0.0)
        self.trim_end_var = tk.DoubleVar(value=0.0)
        self.trim_start_text = tk.StringVar(value=format_timecode(0))
        self.trim_end_text = tk.StringVar(value=format_timecode(0))
        self.trim_widgets: list[tk.Widget] = []
        for label, var, text_var, setter in (
            ("Start", self.trim_start_var, self.trim_start_text, self.session.trim.set_start),
            ("End", self.trim_end_var, self.trim_end_text, self.session.trim.set_end),
        ):
            row = ttk.Frame(sidebar)
            row.pack(fill=tk.X)
            ttk.Label(row, text=label, width=5).pack(side=tk.LEFT)
            scale = ttk.Scale(
                row,
                from_=0.0,
                to=0.0,
                orient=tk.HORIZONTAL,
                variable=var,
                command=lambda value, setter=setter: self._on_trim_change(setter, float(value)),
            )
            scale.pack(side=tk.LEFT, fill=tk.X, expand=True)
            entry = ttk.Entry(row, textvariable=text_var, width=13)
            entry.pack(side=tk.LEFT, padx=(4, 0))
            handler = lambda _e, text_var=text_var, setter=setter: self._commit_trim_text(text_var, setter)
            entry.bind("<Return>", handler)
            entry.bind("<FocusOut>", handler)
            self.trim_widgets += [scale, entry]
        self.reset_trim_button = ttk.Button(sidebar, text="Reset Trim", command=self._reset_trim)
        self.reset_trim_button.pack(anchor=tk.W, pady=(4, 0))
        self.trim_widgets.append(self.reset_trim_button)
        self.trim_meta = ttk.Label(sidebar, text="Duration --:--", wraplength=280, justify=tk.LEFT)
        self.trim_meta.pack(anchor=tk.W, pady=(2, 8))

        self.status_label = ttk.Label(sidebar, text="", wraplength=280, justify=tk.LEFT)
        self.status_label.pack(anchor=tk.W)
        self.busy_bar = ttk.Progressbar(sidebar, mode="indeterminate", length=200)

        self.log_box = tk.Text(sidebar, height=8, width=36, state=tk.DISABLED)
        self.log_box.pack(fill=tk.BOTH, expand=True, pady=(6, 0))

    def _window_handle(self) -> int:
        # Ensure the Tk widget has a valid native window handle.
        self.root.update_idletasks()
        return self.video_panel.winfo_id()

    def _bind_drop(self) -> None:
        self.root.drop_target_register(DND_FILES)
        self.root.dnd_bind("<<Drop>>", self._on_drop)

    def _check_ffmpeg(self) -> None:
        try:
            ensure_ffmpeg_available(self.config.ffmpeg, ffprobe_for(self.config.ffmpeg))
        except EnvironmentError as exc:
            self.session.set_status(str(exc), is_error=True)

    # Loading -------------------------------------------------------------
    def _choose_video(self) -> None:
        try:
            selected = filedialog.askopenfilename(title="Select a video", filetypes=VIDEO_FILETYPES)
        except tk.TclError:
            logger.warning("File dialog unavailable; asking for a path instead")
            selected = simpledialog.askstring("Open video", "Path or URL of the video:", parent=self.root)
        path = normalize_selection(selected)
        if path:
            self._load_reference(path)

    def _on_drop(self, event) -> str | None:
        data = getattr(event, "data", "")
        if not data:
            return None
        try:
            # Tcl's list splitter handles braces and spaces in file paths.
            items = self.root.tk.splitlist(data)
        except tk.TclError:
            items = [data]
        path = normalize_selection(list(items))
        if path:
            self._load_reference(path.strip("{}\""))
        return event.action

    def _load_reference(self, reference: str) -> None:
        self._stop_playback()
        self.session.open_reference(reference)
        self.current_image = None
        try:
            intrinsics = self.media.load(self.session.media_reference)
        except (RuntimeError, OSError, ValueError) as exc:
            self.session.media_failed(str(exc))
            self.playback.reset(0.0)
            self._refresh_all()
            return
        self.session.media_loaded(intrinsics)
        self.session.set_viewport(self.canvas.winfo_width(), self.canvas.winfo_height())
        self.media.set_muted(self.session.muted)
        self.playback.reset(intrinsics.duration)
        self.timeline.configure(to=max(intrinsics.duration, 0.01))
        self.info_label.config(text=describe_video(self.session.media_reference, intrinsics))
        self.canvas.delete("hint")
        self._start_playback()
        self._refresh_all()

    # Event handlers ------------------------------------------------------
    def _hit_test(self, x: float, y: float) -> tuple[bool, str | None]:
        rect = self.session.display_crop()
        if rect is None:
            return False, None
        for handle, (hx, hy) in self._handle_points(rect).items():
            if abs(x - hx) <= HANDLE_SIZE and abs(y - hy) <= HANDLE_SIZE:
                return True, handle
        inside = rect.x <= x <= rect.right and rect.y <= y <= rect.bottom
        return inside, None

    @staticmethod
    def _handle_points(rect) -> dict[str, tuple[float, float]]:
        mid_x = rect.x + rect.w / 2
        mid_y = rect.y + rect.h / 2
        xs = {"w": rect.x, "e": rect.right, "": mid_x}
        ys = {"n": rect.y, "s": rect.bottom, "": mid_y}
        points = {}
        for handle in HANDLES:
            vertical = handle[0] if handle[0] in "ns" else ""
            horizontal = handle[-1] if handle[-1] in "ew" else ""
            points[handle] = (xs[horizontal], ys[vertical])
        return points

    def _on_press(self, event) -> None:
        hit, handle = self._hit_test(event.x, event.y)
        if hit:
            self.session.pointer_down(event.x, event.y, handle)

    def _on_drag(self, event) -> None:
        if self.session.pointer_move(event.x, event.y):
            self._draw_overlay()

    def _on_release(self, _event) -> None:
        self.session.pointer_up()

    def _on_canvas_resize(self, event) -> None:
        # The viewport changes the mapping; end any gesture that was in flight.
        self.session.pointer_up()
        self.session.set_viewport(event.width, event.height)
        self.canvas.coords("hint", event.width / 2, event.height / 2)
        self._draw_canvas()

    def _on_ratio_selected(self) -> None:
        self.session.set_ratio_mode(self.ratio_var.get())
        self._refresh_output()
        self._draw_overlay()

    def _commit_output(self, entry: ttk.Entry, setter) -> None:
        try:
            value = int(entry.get())
        except ValueError:
            self._refresh_output()
            return
        output = self.session.output
        if value == (output.w if setter == self.session.set_output_width else output.h):
            return
        setter(value)
        self._refresh_output()
        self._draw_overlay()

    def _toggle_lock(self) -> None:
        self.session.toggle_lock_ratio()
        self._refresh_output()

    def _toggle_sound(self) -> None:
        self.media.set_muted(self.session.toggle_muted())
        self._refresh_sound()

    def _reset_crop(self) -> None:
        self.session.reset_crop()
        self._draw_overlay()

    def _on_trim_change(self, setter, value: float) -> None:
        if self._syncing_widgets:
            return
        setter(value)
        self._refresh_trim()

    def _commit_trim_text(self, text_var: tk.StringVar, setter) -> None:
        value = parse_timecode(text_var.get())
        if value is not None:
            setter(value)
        self._refresh_trim()

    def _reset_trim(self) -> None:
        self.session.trim.reset_to_full()
        self._refresh_trim()

    def _on_scrub(self, value: str) -> None:
        if self._syncing_widgets:
            return
        self.playback.scrub_to(float(value))

    def _on_playback_change(self, value: float, duration: float) -> None:
        self._syncing_widgets = True
        try:
            if not self.playback.seeking:
                self.timeline_var.set(value)
        finally:
            self._syncing_widgets = False
        self.time_label.config(text=self.playback.readout())

    # Playback ------------------------------------------------------------
    def _toggle_playback(self) -> None:
        if not self.session.has_video:
            messagebox.showinfo("Select a video", "Please open a video before playing.")
            return
        if self.media.is_playing():
            self._stop_playback()
        else:
            self._start_playback()

    def _start_playback(self) -> None:
        self.media.play()
        self.play_button.config(text="Pause")

    def _stop_playback(self) -> None:
        self.media.pause()
        self.play_button.config(text="Play")

    def _poll_playback(self) -> None:
        if self.session.has_video:
            self.playback.media_time_updated(self.media.current_time())
            if self.media.has_ended():
                self.play_button.config(text="Play")
        self.playback_job = self.root.after(self.config.playback_poll_ms, self._poll_playback)

    # Preview -------------------------------------------------------------
    def _sample_frame(self) -> Image.Image | None:
        frame = self.media.current_frame()
        if frame is not None and frame is not self.current_image:
            self.current_image = frame
            self._draw_canvas()
        return frame

    def _show_preview(self, image: Image.Image) -> None:
        # Tk canvases are sized in device pixels, so the density-scaled render is drawn 1:1.
        self.preview_photo = ImageTk.PhotoImage(image)
        self.preview_canvas.delete("all")
        self.preview_canvas.create_image(0, 0, anchor=tk.NW, image=self.preview_photo)

    # Drawing -------------------------------------------------------------
    def _draw_canvas(self) -> None:
        mapper = self.session.mapper
        self.canvas.delete("frame")
        if self.current_image is not None and mapper is not None:
            d = mapper.metrics
            size = (max(1, int(d.w)), max(1, int(d.h)))
            resized = self.current_image.resize(size, Image.Resampling.BILINEAR)
            self.photo_image = ImageTk.PhotoImage(resized)
            self.canvas.create_image(d.offset_x, d.offset_y, anchor=tk.NW, image=self.photo_image, tags=("frame",))
            self.canvas.tag_lower("frame")
        self._draw_overlay()

    def _draw_overlay(self) -> None:
        self.canvas.delete("overlay")
        rect = self.session.display_crop()
        if rect is None:
            return
        self.canvas.create_rectangle(
            rect.x, rect.y, rect.right, rect.bottom, outline=CROP_COLOR, width=2, tags=("overlay",)
        )
        half = HANDLE_SIZE / 2
        for hx, hy in self._handle_points(rect).values():
            self.canvas.create_rectangle(
                hx - half, hy - half, hx + half, hy + half, fill=CROP_COLOR, outline="", tags=("overlay",)
            )
        x, y, w, h = self.session.crop.rounded()
        self.canvas.create_text(
            rect.x + 8, rect.y + 12, anchor=tk.W, text=f"{w}x{h} @ {x},{y}", fill="white", tags=("overlay",)
        )

    # State -> widgets ------------------------------------------------------
    def _refresh_all(self) -> None:
        self._refresh_output()
        self._refresh_trim()
        self._refresh_sound()
        self._refresh_status()
        self.file_pill.config(text=Path(self.session.source_name).name if self.session.source_name else "No file selected")
        self.time_label.config(text=self.playback.readout())
        self._draw_canvas()

    def _refresh_output(self) -> None:
        session = self.session
        self.ratio_var.set(session.ratio_mode)
        self.format_var.set(session.output.format.value)
        self.out_w_var.set(str(session.output.w))
        self.out_h_var.set(str(session.output.h))
        self.lock_button.config(text="Locked" if session.lock_ratio else "Unlocked")
        width, height = session.preview_size.pixel_size
        self.preview_canvas.config(width=width, height=height)
        self.preview_meta.config(
            text=f"Output {session.output.w} x {session.output.h}" if session.has_video else "No video"
        )

    def _refresh_trim(self) -> None:
        trim = self.session.trim
        self._syncing_widgets = True
        try:
            for widget in self.trim_widgets:
                if isinstance(widget, ttk.Scale):
                    widget.configure(to=trim.duration)
                widget.state(["!disabled"] if trim.enabled else ["disabled"])
            self.trim_start_var.set(trim.start)
            self.trim_end_var.set(trim.end)
        finally:
            self._syncing_widgets = False
        self.trim_start_text.set(format_timecode(trim.start))
        self.trim_end_text.set(format_timecode(trim.end))
        if trim.enabled:
            self.trim_meta.config(
                text=f"Duration {format_timecode(trim.duration)} · "
                f"Keep {format_timecode(trim.start)} - {format_timecode(trim.end)}"
            )
        else:
            self.trim_meta.config(text="Duration --:--")

    def _refresh_sound(self) -> None:
        self.sound_button.config(text="Sound On" if self.session.muted else "Mute")

    def _refresh_status(self) -> None:
        session = self.session
        self.status_label.config(
            text=session.status, foreground="#c2411c" if session.status_is_error else ""
        )
        if session.busy:
            self.busy_bar.pack(anchor=tk.W, pady=(4, 0), after=self.status_label)
            self.busy_bar.start(12)
        else:
            self.busy_bar.stop()
            self.busy_bar.pack_forget()
        enabled = session.has_video and not session.preview_only and not session.busy
        self.export_button.state(["!disabled"] if enabled else ["disabled"])

    def _drain_log(self) -> None:
        lines = []
        while True:
            try:
                lines.append(self._log_queue.get_nowait())
            except queue.Empty:
                break
        if lines:
            self.log_box.configure(state=tk.NORMAL)
            self.log_box.insert(tk.END, "\n".join(lines) + "\n")
            self.log_box.configure(state=tk.DISABLED)
            self.log_box.see(tk.END)
        self.log_job = self.root.after(100, self._drain_log)

    # Export --------------------------------------------------------------
    def _export(self) -> None:
        session = self.session
        if not session.input_path and not session.preview_only:
            self._choose_video()
        reason = session.export_block_reason()
        if reason:
            session.set_status(reason, is_error=True)
            self._refresh_status()
            return
        fmt = session.output.format.value
        try:
            save_path = filedialog.asksaveasfilename(
                title="Export cropped video",
                initialfile=session.default_output_name(),
                defaultextension=f".{fmt}",
                filetypes=[(fmt.upper(), f".{fmt}"), ("All files", "*.*")],
            )
        except tk.TclError:
            save_path = simpledialog.askstring("Export", "Output file path:", parent=self.root)
        output = normalize_selection(save_path)
        if not output:
            return
        try:
            request = session.start_export(output)
        except ExportRefused:
            self._refresh_status()
            return
        self._refresh_status()
        thread = threading.Thread(target=self._run_export, args=(request,), daemon=True)
        thread.start()

    def _run_export(self, request) -> None:
        error: str | None = "Export interrupted."
        try:
            error = self.session.run_exporter(
                request, lambda req: crop_video(req, self.config.ffmpeg, progress_callback=logger.info)
            )
        finally:
            # Schedule UI update on the Tk main thread.
            self.root.after(0, lambda: self._finish_export(error))

    def _finish_export(self, error: str | None) -> None:
        self.session.finish_export(error)
        self._refresh_status()

    def close(self) -> None:
        self.renderer.stop()
        for job in (self.playback_job, self.log_job):
            if job:
                self.root.after_cancel(job)
        logging.getLogger("crop_studio").removeHandler(self._log_handler)
        self.media.release()
        self.root.destroy()


def run(argv: Sequence[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Crop and trim a video visually.")
    parser.add_argument("video", nargs="?", help="Video to open on start")
    parser.add_argument("--config", type=Path, help="JSON settings file")
    parser.add_argument("--debug", action="store_true", help="Verbose logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.debug else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    config = load_config(args.config)

    root, dnd_available = create_root()
    style = ttk.Style(root)
    style.theme_use("clam")
    style.configure("TFrame", background="#111")
    style.configure("TLabel", background="#111", foreground="#f5f5f5")
    style.configure("TRadiobutton", background="#111", foreground="#f5f5f5")
    style.configure("TButton", padding=6)
    app = VideoCropperApp(root, config, dnd_available=dnd_available)
    if args.video:
        root.after(100, lambda: app._load_reference(args.video))
    root.geometry("1280x720")
    root.mainloop()


if __name__ == "__main__":
    run()
