from __future__ import annotations

import math
import tkinter as tk
from datetime import datetime
from tkinter import ttk
from typing import Callable

from .breathing import breath_frame, clamp_cadence
from .models import MAX_CADENCE_SECONDS, MIN_CADENCE_SECONDS

PANEL_BG = "#1f2a28"
PROMPT_FG = "#c9d8d2"
PETAL_FILL = "#5fb89a"
PETAL_OUTLINE = "#9fd9c3"
FRAME_MS = 33
CANVAS_SIZE = 160


class BreathingPanel(tk.Toplevel):
    """Floating guided-breathing panel shown near the top of the screen."""

    def __init__(
        self,
        master: tk.Misc,
        cadence_seconds: float,
        on_done: Callable[[datetime], None],
        on_cadence_changed: Callable[[float], None] | None = None,
        on_dismiss: Callable[[], None] | None = None,
    ):
        super().__init__(master)
        self.started_at = datetime.now()
        self._on_done = on_done
        self._on_cadence_changed = on_cadence_changed
        self._on_dismiss = on_dismiss
        self._dismissed = False
        self._job: str | None = None
        self.cadence_var = tk.DoubleVar(value=clamp_cadence(cadence_seconds))

        self.overrideredirect(True)
        self.attributes("-topmost", True)
        self.configure(bg=PANEL_BG, padx=24, pady=18)

        self.prompt_label = tk.Label(
            self, text="", bg=PANEL_BG, fg=PANEL_BG, font=("Helvetica", 15), width=16
        )
        self.prompt_label.pack(pady=(0, 10))

        self.canvas = tk.Canvas(
            self, width=CANVAS_SIZE, height=CANVAS_SIZE, bg=PANEL_BG, highlightthickness=0
        )
        self.canvas.pack()

        cadence_row = tk.Frame(self, bg=PANEL_BG)
        cadence_row.pack(fill="x", pady=(10, 6))
        tk.Label(cadence_row, text="Pace (s)", bg=PANEL_BG, fg=PROMPT_FG, font=("Helvetica", 10)).pack(side="left")
        tk.Scale(
            cadence_row,
            from_=MIN_CADENCE_SECONDS,
            to=MAX_CADENCE_SECONDS,
            orient=tk.HORIZONTAL,
            resolution=0.5,
            variable=self.cadence_var,
            showvalue=True,
            length=140,
            bg=PANEL_BG,
            fg=PROMPT_FG,
            highlightthickness=0,
            command=self._cadence_moved,
        ).pack(side="left", padx=(6, 0))

        ttk.Button(self, text="Done breathing", command=self._done).pack(pady=(6, 0))

        self.bind("<Escape>", lambda e: self.dismiss())
        self._place_near_top()
        self.focus_force()
        self._tick()

    def _place_near_top(self) -> None:
        self.update_idletasks()
        width = self.winfo_reqwidth()
        x = (self.winfo_screenwidth() - width) // 2
        self.geometry(f"+{max(0, x)}+32")

    def _cadence_moved(self, _value: str) -> None:
        if self._on_cadence_changed is not None:
            self._on_cadence_changed(clamp_cadence(self.cadence_var.get()))

    def _tick(self) -> None:
        if self._dismissed:
            return
        elapsed = (datetime.now() - self.started_at).total_seconds()
        frame = breath_frame(elapsed, self.cadence_var.get())
        self._draw_petals(frame.expansion, elapsed)
        opacity = max(frame.inhale_opacity, frame.exhale_opacity)
        self.prompt_label.configure(text=frame.prompt, fg=_mix_hex(PANEL_BG, PROMPT_FG, opacity))
        self._job = self.after(FRAME_MS, self._tick)

    def _draw_petals(self, expansion: float, elapsed: float) -> None:
        self.canvas.delete("all")
        center = CANVAS_SIZE / 2
        petal = 22 + 10 * expansion
        orbit = 12 + 34 * expansion
        rotation = elapsed * 6.0
        for index in range(6):
            angle = math.radians(rotation + index * 60)
            cx = center + orbit * math.cos(angle)
            cy = center + orbit * math.sin(angle)
            self.canvas.create_oval(
                cx - petal, cy - petal, cx + petal, cy + petal,
                fill=PETAL_FILL, outline=PETAL_OUTLINE, stipple="gray50",
            )

    def _done(self) -> None:
        if self._dismissed:
            return
        self._on_done(self.started_at)
        self.dismiss()

    def dismiss(self) -> None:
        if self._dismissed:
            return
        self._dismissed = True
        if self._job is not None:
            self.after_cancel(self._job)
            self._job = None
        self.destroy()
        if self._on_dismiss is not None:
            self._on_dismiss()


def _mix_hex(start_hex: str, end_hex: str, ratio: float) -> str:
    ratio = max(0.0, min(1.0, ratio))
    start = _hex_to_rgb(start_hex)
    end = _hex_to_rgb(end_hex)
    mixed = tuple(int(round(a + (b - a) * ratio)) for a, b in zip(start, end))
    return "#{:02x}{:02x}{:02x}".format(*mixed)


def _hex_to_rgb(value: str) -> tuple[int, int, int]:
    text = value.lstrip("#")
    return int(text[0:2], 16), int(text[2:4], 16), int(text[4:6], 16)
