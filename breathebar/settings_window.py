from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable

from .models import MAX_CADENCE_SECONDS, MIN_CADENCE_SECONDS, Weekday
from .schedule import format_clock
from .settings import SettingsStore, form_changes

CARD_BG = "#fff7ed"
TITLE_FG = "#3e332d"
LABEL_FG = "#6e6056"


class ScheduleForm(tk.Frame):
    """Work days, work hours, pace and app toggles bound to a SettingsStore."""

    def __init__(self, master: tk.Misc, store: SettingsStore):
        super().__init__(master, bg=CARD_BG)
        self._store = store

        config = store.get()
        self.day_vars: dict[Weekday, tk.BooleanVar] = {
            day: tk.BooleanVar(value=day in config.work_days) for day in Weekday
        }
        self.start_var = tk.StringVar(value=format_clock(config.start_minute_of_day))
        self.end_var = tk.StringVar(value=format_clock(config.end_minute_of_day))
        self.cadence_var = tk.DoubleVar(value=config.cadence_seconds)
        self.launch_at_login_var = tk.BooleanVar(value=config.launch_at_login)
        self.log_to_health_var = tk.BooleanVar(value=config.log_to_health)
        self.status_var = tk.StringVar(value="")

        self._build()

    def _section(self, row: int, text: str) -> None:
        tk.Label(self, text=text, bg=CARD_BG, fg=TITLE_FG, font=("Helvetica", 12, "bold")).grid(
            row=row, column=0, columnspan=7, sticky="w", pady=(12 if row else 0, 4)
        )

    def _build(self) -> None:
        self._section(0, "Work days")
        for column, day in enumerate(Weekday):
            ttk.Checkbutton(self, text=day.short_name, variable=self.day_vars[day]).grid(
                row=1, column=column, sticky="w", padx=(0, 4)
            )

        self._section(2, "Work hours")
        hours = tk.Frame(self, bg=CARD_BG)
        hours.grid(row=3, column=0, columnspan=7, sticky="w")
        tk.Label(hours, text="Start", bg=CARD_BG, fg=LABEL_FG).pack(side="left", padx=(0, 4))
        ttk.Entry(hours, textvariable=self.start_var, width=6).pack(side="left", padx=(0, 12))
        tk.Label(hours, text="End", bg=CARD_BG, fg=LABEL_FG).pack(side="left", padx=(0, 4))
        ttk.Entry(hours, textvariable=self.end_var, width=6).pack(side="left")

        self._section(4, "Breathing")
        pace = tk.Frame(self, bg=CARD_BG)
        pace.grid(row=5, column=0, columnspan=7, sticky="w")
        tk.Label(pace, text="Pace (s per breath)", bg=CARD_BG, fg=LABEL_FG).pack(side="left", padx=(0, 6))
        tk.Scale(
            pace,
            from_=MIN_CADENCE_SECONDS,
            to=MAX_CADENCE_SECONDS,
            orient=tk.HORIZONTAL,
            resolution=0.5,
            variable=self.cadence_var,
            length=180,
            bg=CARD_BG,
            highlightthickness=0,
        ).pack(side="left")

        ttk.Checkbutton(self, text="Launch at Login", variable=self.launch_at_login_var).grid(
            row=6, column=0, columnspan=7, sticky="w", pady=(12, 2)
        )
        ttk.Checkbutton(
            self, text="Log breathing sessions as mindful minutes", variable=self.log_to_health_var
        ).grid(row=7, column=0, columnspan=7, sticky="w", pady=2)

        tk.Label(self, textvariable=self.status_var, bg=CARD_BG, fg=LABEL_FG).grid(
            row=8, column=0, columnspan=7, sticky="w", pady=(8, 0)
        )

    def save(self) -> bool:
        try:
            changes = form_changes(
                start_text=self.start_var.get(),
                end_text=self.end_var.get(),
                work_days=[day for day, var in self.day_vars.items() if var.get()],
                cadence_seconds=self.cadence_var.get(),
                launch_at_login=self.launch_at_login_var.get(),
                log_to_health=self.log_to_health_var.get(),
            )
        except ValueError as exc:
            self.status_var.set(str(exc))
            return False
        self._store.update(**changes)
        self.status_var.set("Settings saved.")
        return True


class SettingsWindow(tk.Toplevel):
    def __init__(
        self,
        master: tk.Misc,
        store: SettingsStore,
        on_close: Callable[[], None] | None = None,
    ):
        super().__init__(master)
        self.title("BreatheBar Settings")
        self.resizable(False, False)
        self.configure(bg=CARD_BG, padx=14, pady=12)
        self._on_close = on_close

        self.form = ScheduleForm(self, store)
        self.form.pack(fill="both", expand=True)

        actions = tk.Frame(self, bg=CARD_BG)
        actions.pack(anchor="e", pady=(8, 0))
        ttk.Button(actions, text="Save", command=self.form.save).pack(side="left", padx=(0, 6))
        ttk.Button(actions, text="Close", command=self.close).pack(side="left")

        self.protocol("WM_DELETE_WINDOW", self.close)
        self.lift()
        self.focus_force()

    def close(self) -> None:
        self.destroy()
        if self._on_close is not None:
            self._on_close()
