"""Minimal Tkinter UI with live preview for PixelShade.

Provides a desktop UI to:
- Load an image
- Adjust pixel size, brightness, contrast and shadow radius with sliders
- See a live preview that re-renders as the sliders move
- Save the most recent render as a PNG, byte for byte

Slider changes are debounced and handed to a `RenderScheduler`, which runs
at most one render at a time and only ever shows the newest result.
"""
from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from PIL import Image, ImageTk

import tkinter as tk
from tkinter import ttk, filedialog, messagebox

from .params import (
    BRIGHTNESS_RANGE,
    CONTRAST_RANGE,
    DEFAULT_PARAMETERS,
    PIXEL_SIZE_RANGE,
    SHADOW_RADIUS_RANGE,
    RenderParameters,
)
from .renderer import OutputImage
from .scheduler import RenderScheduler
from .utils.loader import ImageHandle, SourceImage, save_bytes
from .utils.resize import fit_within

logger = logging.getLogger(__name__)

DEFAULT_SAVE_NAME = "pixelated-image.png"


def _fit_preview(im: Image.Image, max_w: int, max_h: int) -> Image.Image:
    w, h = im.size
    new_w, new_h = fit_within(w, h, max_w, max_h)
    if (new_w, new_h) == (w, h):
        return im
    # Use nearest so pixel edges stay crisp in preview
    return im.resize((new_w, new_h), resample=Image.NEAREST)


@dataclass
class UIState:
    image_path: Optional[Path] = None
    debounce_ms: int = 60
    canvas_size: tuple[int, int] = (800, 600)


class App:
    def __init__(self, root: tk.Tk) -> None:
        self.root = root
        self.root.title("PixelShade")
        self.state = UIState()
        self.scheduler = RenderScheduler(on_result=self._on_render_done)

        self.var_pixel = tk.IntVar(value=DEFAULT_PARAMETERS.pixel_size)
        self.var_brightness = tk.DoubleVar(value=DEFAULT_PARAMETERS.brightness)
        self.var_contrast = tk.DoubleVar(value=DEFAULT_PARAMETERS.contrast)
        self.var_shadow = tk.IntVar(value=DEFAULT_PARAMETERS.shadow_radius)

        self._pending_update: Optional[str] = None
        self._preview_imgtk: Optional[ImageTk.PhotoImage] = None
        self._build_ui()

    def _build_ui(self) -> None:
        frm = ttk.Frame(self.root, padding=8)
        frm.grid(row=0, column=0, sticky="nsew")
        self.root.columnconfigure(0, weight=1)
        self.root.rowconfigure(0, weight=1)

        top = ttk.Frame(frm)
        top.grid(row=0, column=0, sticky="ew", pady=(0, 8))

        ttk.Button(top, text="Open…", command=self.on_open).grid(row=0, column=0, padx=(0, 8))

        sliders = [
            ("Pixel size", self.var_pixel, PIXEL_SIZE_RANGE, 1),
            ("Brightness", self.var_brightness, BRIGHTNESS_RANGE, 0.1),
            ("Contrast", self.var_contrast, CONTRAST_RANGE, 0.1),
            ("Shadow", self.var_shadow, SHADOW_RADIUS_RANGE, 1),
        ]
        for col, (label, var, (lo, hi), res) in enumerate(sliders):
            ttk.Label(top, text=label).grid(row=0, column=1 + 2 * col)
            tk.Scale(
                top,
                from_=lo,
                to=hi,
                resolution=res,
                orient=tk.HORIZONTAL,
                variable=var,
                length=140,
                command=lambda _v: self.on_params_changed(),
            ).grid(row=0, column=2 + 2 * col, padx=(4, 12))

        ttk.Button(top, text="Save PNG…", command=self.on_save).grid(row=0, column=9)

        w, h = self.state.canvas_size
        self.canvas = tk.Canvas(frm, bg="#222", width=w, height=h)
        self.canvas.grid(row=1, column=0, sticky="nsew")
        frm.rowconfigure(1, weight=1)
        frm.columnconfigure(0, weight=1)

    def current_params(self) -> RenderParameters:
        return RenderParameters.clamped(
            pixel_size=self.var_pixel.get(),
            brightness=self.var_brightness.get(),
            contrast=self.var_contrast.get(),
            shadow_radius=self.var_shadow.get(),
        )

    def on_open(self) -> None:
        path = filedialog.askopenfilename(title="Open image")
        if not path:
            return
        logger.info("Opening %s", path)
        self.state.image_path = Path(path)
        handle = ImageHandle(path)
        # Source first: an update against the old source would render it again.
        self.scheduler.set_source(handle)
        self.scheduler.update(self.current_params())
        # Decode callbacks run on the decode thread; hand over to Tk.
        handle.when_loaded(lambda src: self.root.after(0, lambda: self._show_source(src)))
        handle.when_failed(lambda e: self.root.after(0, lambda: messagebox.showerror("Open failed", str(e))))
        handle.decode_async()

    def _show_source(self, source: SourceImage) -> None:
        # The original is shown until the first render arrives.
        if self.scheduler.latest is not None or self.scheduler.source is not source:
            return
        self._draw(Image.fromarray(source.pixels))
        self.canvas.create_text(10, 10, anchor="nw", fill="#fff", text="Generating pixel art…")

    def on_save(self) -> None:
        out = self.scheduler.latest
        if out is None:
            messagebox.showinfo("No image", "Open an image first.")
            return
        path = filedialog.asksaveasfilename(
            defaultextension=".png",
            initialfile=DEFAULT_SAVE_NAME,
            filetypes=[("PNG", ".png"), ("All", "*.*")],
        )
        if not path:
            return
        try:
            save_bytes(out.to_png(), path)
        except OSError as e:
            messagebox.showerror("Save failed", str(e))
            return
        messagebox.showinfo("Saved", f"Wrote {path}")

    def on_params_changed(self) -> None:
        # Debounce slider drags to avoid recomputing too frequently
        if self._pending_update is not None:
            self.root.after_cancel(self._pending_update)
        self._pending_update = self.root.after(self.state.debounce_ms, self._push_params)

    def _push_params(self) -> None:
        self._pending_update = None
        self.scheduler.update(self.current_params())

    def _on_render_done(self, out: OutputImage) -> None:
        # Called on the render thread; hand over to Tk.
        self.root.after(0, lambda: self._update_canvas(out))

    def _update_canvas(self, out: OutputImage) -> None:
        if self.scheduler.latest is not out:
            return
        self._draw(out.to_pil())

    def _draw(self, im: Image.Image) -> None:
        w = max(1, self.canvas.winfo_width())
        h = max(1, self.canvas.winfo_height())
        imgtk = ImageTk.PhotoImage(_fit_preview(im, w, h))
        self._preview_imgtk = imgtk  # keep reference to prevent GC
        self.canvas.delete("all")
        x = max(0, (w - imgtk.width()) // 2)
        y = max(0, (h - imgtk.height()) // 2)
        self.canvas.create_image(x, y, anchor="nw", image=imgtk)


def run_ui() -> None:
    logging.basicConfig(level=logging.INFO)
    root = tk.Tk()
    App(root)
    root.minsize(640, 480)
    root.mainloop()


if __name__ == "__main__":  # pragma: no cover
    run_ui()
