from __future__ import annotations

import tkinter as tk
from tkinter import ttk
from typing import Callable

from .settings import SettingsStore
from .settings_window import CARD_BG, LABEL_FG, TITLE_FG, ScheduleForm

WELCOME_TEXT = (
    "A quiet companion that sits in your menu bar and pulses once an hour to "
    "remind you to breathe. No notifications, no interruptions. Just a subtle "
    "nudge when you're ready."
)


class OnboardingWindow(tk.Toplevel):
    """Welcome page followed by the schedule form; finishing or closing completes onboarding."""

    def __init__(
        self,
        master: tk.Misc,
        store: SettingsStore,
        on_complete: Callable[[], None],
    ):
        super().__init__(master)
        self.title("Welcome to BreatheBar")
        self.resizable(False, False)
        self.configure(bg=CARD_BG, padx=18, pady=16)
        self._store = store
        self._on_complete = on_complete
        self._completed = False
        self.page = 0

        self.body = tk.Frame(self, bg=CARD_BG)
        self.body.pack(fill="both", expand=True)

        self.welcome_page = tk.Frame(self.body, bg=CARD_BG)
        tk.Label(
            self.welcome_page, text="Welcome to BreatheBar", bg=CARD_BG, fg=TITLE_FG,
            font=("Helvetica", 18, "bold"),
        ).pack(pady=(8, 10))
        tk.Label(
            self.welcome_page, text=WELCOME_TEXT, bg=CARD_BG, fg=LABEL_FG,
            wraplength=340, justify="center",
        ).pack(pady=(0, 8))

        self.form = ScheduleForm(self.body, store)

        ttk.Separator(self, orient=tk.HORIZONTAL).pack(fill="x", pady=(12, 8))
        footer = tk.Frame(self, bg=CARD_BG)
        footer.pack(fill="x")
        self.back_button = ttk.Button(footer, text="Back", command=self._back)
        self.next_button = ttk.Button(footer, text="Next", command=self._next)
        self.next_button.pack(side="right")

        self.protocol("WM_DELETE_WINDOW", self.complete)
        self._show_page(0)
        self.lift()
        self.focus_force()

    def _show_page(self, page: int) -> None:
        self.page = page
        self.welcome_page.pack_forget()
        self.form.pack_forget()
        self.back_button.pack_forget()
        if page == 0:
            self.welcome_page.pack(fill="both", expand=True)
            self.next_button.configure(text="Next")
        else:
            self.form.pack(fill="both", expand=True)
            self.back_button.pack(side="left")
            self.next_button.configure(text="Get Started")

    def _back(self) -> None:
        self._show_page(0)

    def _next(self) -> None:
        if self.page == 0:
            self._show_page(1)
            return
        if self.form.save():
            self.complete()

    def complete(self) -> None:
        if self._completed:
            return
        self._completed = True
        self._store.update(has_completed_onboarding=True)
        self.destroy()
        self._on_complete()
