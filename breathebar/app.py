from __future__ import annotations

import argparse
import logging
import queue
import sqlite3
import tkinter as tk
from datetime import datetime
from tkinter import messagebox

from . import __version__
from .breathing import breath_frame
from .database import BreatheBarDatabase
from .health import MindfulSessionLogger
from .icon import render_icon
from .login_item import LaunchAgentLoginItem
from .models import ReminderSnapshot, ScheduleConfig
from .onboarding import OnboardingWindow
from .panel import BreathingPanel
from .paths import database_path, ensure_directories, settings_path
from .reminder import ReminderMachine
from .schedule import describe_work_days, evaluate, format_clock, next_reminder_at, next_trigger_at
from .settings import SettingsStore
from .settings_window import SettingsWindow
from .ticker import DEFAULT_INTERVAL_SECONDS, ReminderTicker, clamp_interval
from .tray import TrayIcon

logger = logging.getLogger(__name__)

DRAIN_MS = 250
ICON_FRAME_MS = 120
ABOUT_TEXT = (
    "BreatheBar pulses in your menu bar near the end of every work hour "
    "to remind you to take a few slow breaths."
)


class BreatheBarApp(tk.Tk):
    def __init__(self, interval_seconds: float = DEFAULT_INTERVAL_SECONDS, debug: bool = False):
        super().__init__()
        self.withdraw()
        self.title("BreatheBar")

        ensure_directories()
        self.store = SettingsStore(settings_path())
        self.machine = ReminderMachine(self.store.get)
        self.ticker = ReminderTicker(
            self.machine,
            schedule_after=self.after,
            cancel_after=self.after_cancel,
            interval_seconds=interval_seconds,
        )
        self.login_item = LaunchAgentLoginItem()
        self.session_logger = MindfulSessionLogger.for_path(database_path())
        self.events: queue.Queue[tuple[str, object]] = queue.Queue()

        self.panel: BreathingPanel | None = None
        self.settings_window: SettingsWindow | None = None
        self.onboarding_window: OnboardingWindow | None = None
        self._icon_job: str | None = None
        self._icon_started_at: datetime | None = None

        snapshot = self.machine.snapshot()
        self.tray = TrayIcon(self._post_action, snapshot, render_icon(snapshot), debug=debug)

        self.store.subscribe(self._on_settings_changed)
        self.machine.subscribe(self._on_state_changed)
        self.login_item.apply_async(self.store.get().launch_at_login)

        self.protocol("WM_DELETE_WINDOW", self._quit)
        self.after(DRAIN_MS, self._drain_events)

    def start(self) -> None:
        self.tray.run()
        self.ticker.start()
        self._refresh_tray(self.machine.snapshot())
        self._show_onboarding_if_needed()
        logger.info("BreatheBar %s started.", __version__)

    # ----- Tray actions (posted from the tray thread) -----
    def _post_action(self, name: str) -> None:
        self.events.put(("action", name))

    def _drain_events(self) -> None:
        while True:
            try:
                kind, payload = self.events.get_nowait()
            except queue.Empty:
                break
            if kind == "action":
                self._handle_action(str(payload))
        self.after(DRAIN_MS, self._drain_events)

    def _handle_action(self, name: str) -> None:
        if name == "done":
            self._finish_session(self.panel.started_at if self.panel is not None else None)
            self._close_panel()
        elif name == "breathe":
            self._open_panel()
        elif name == "toggle_primed":
            self.machine.toggle_primed()
        elif name == "settings":
            self._open_settings()
        elif name == "about":
            messagebox.showinfo("About BreatheBar", f"BreatheBar {__version__}\n\n{ABOUT_TEXT}")
        elif name == "test_animation":
            self.machine.set_breathing(not self.machine.is_breathing_active)
        elif name == "quit":
            self._quit()
        else:
            logger.warning("Unknown tray action: %s", name)

    # ----- Reminder state -----
    def _on_state_changed(self, snapshot: ReminderSnapshot) -> None:
        self._refresh_tray(snapshot)
        if snapshot.is_breathing_active and self._icon_job is None:
            self._icon_started_at = datetime.now()
            self._animate_icon()
        elif not snapshot.is_breathing_active:
            self._stop_icon_animation()
            if self.panel is not None and not snapshot.is_primed:
                self._close_panel()

    def _refresh_tray(self, snapshot: ReminderSnapshot) -> None:
        self.tray.update(snapshot, render_icon(snapshot), self._tooltip(snapshot, self.store.get()))

    def _tooltip(self, snapshot: ReminderSnapshot, config: ScheduleConfig) -> str:
        if snapshot.is_breathing_active:
            return "Breathe. Then click Done."
        upcoming = next_reminder_at(config, datetime.now(), snapshot.triggered_this_hour)
        if not snapshot.is_primed or upcoming is None:
            return f"BreatheBar: {snapshot.status_label}"
        return f"BreatheBar: next reminder {upcoming.strftime('%a %H:%M')}"

    def _animate_icon(self) -> None:
        snapshot = self.machine.snapshot()
        if not snapshot.is_breathing_active:
            self._icon_job = None
            return
        started = self._icon_started_at or datetime.now()
        elapsed = (datetime.now() - started).total_seconds()
        frame = breath_frame(elapsed, self.store.get().cadence_seconds)
        self.tray.set_image(render_icon(snapshot, expansion=frame.expansion, elapsed=elapsed))
        self._icon_job = self.after(ICON_FRAME_MS, self._animate_icon)

    def _stop_icon_animation(self) -> None:
        if self._icon_job is not None:
            self.after_cancel(self._icon_job)
            self._icon_job = None
        self._icon_started_at = None

    # ----- Breathing panel -----
    def _open_panel(self) -> None:
        if self.panel is not None:
            self.panel.lift()
            return
        self.panel = BreathingPanel(
            self,
            cadence_seconds=self.store.get().cadence_seconds,
            on_done=self._finish_session,
            on_cadence_changed=lambda value: self.store.update(cadence_seconds=value),
            on_dismiss=self._on_panel_dismissed,
        )

    def _close_panel(self) -> None:
        if self.panel is not None:
            self.panel.dismiss()

    def _on_panel_dismissed(self) -> None:
        self.panel = None

    def _finish_session(self, started_at: datetime | None) -> None:
        session = self.machine.mark_done(started_at=started_at)
        config = self.store.get()
        if session is None or not config.log_to_health or not session.is_loggable:
            return
        # Fire and forget; the result never feeds back into the schedule.
        self.session_logger.log_session_async(session)

    # ----- Settings & onboarding -----
    def _open_settings(self) -> None:
        if self.settings_window is not None:
            self.settings_window.lift()
            return
        self.settings_window = SettingsWindow(self, self.store, on_close=self._on_settings_closed)

    def _on_settings_closed(self) -> None:
        self.settings_window = None

    def _on_settings_changed(self, previous: ScheduleConfig, current: ScheduleConfig) -> None:
        if previous.launch_at_login != current.launch_at_login:
            self.login_item.apply_async(current.launch_at_login)
        if current.log_to_health and not previous.log_to_health:
            self._request_session_log_access()
        self._refresh_tray(self.machine.snapshot())

    def _request_session_log_access(self) -> None:
        if not self.session_logger.request_authorization():
            logger.warning("Mindful session logging is unavailable; sessions will not be recorded.")

    def _show_onboarding_if_needed(self) -> None:
        if self.store.get().has_completed_onboarding:
            return
        if self.onboarding_window is not None:
            self.onboarding_window.lift()
            return
        self.onboarding_window = OnboardingWindow(self, self.store, on_complete=self._on_onboarding_complete)

    def _on_onboarding_complete(self) -> None:
        self.onboarding_window = None
        if self.store.get().log_to_health and not self.session_logger.is_authorized:
            self._request_session_log_access()

    def _quit(self) -> None:
        self.ticker.stop()
        self._stop_icon_animation()
        self.tray.stop()
        self.destroy()


def _check_cli() -> int:
    store = SettingsStore(settings_path())
    config = store.get()
    now = datetime.now()
    window = evaluate(config, now)
    upcoming = next_trigger_at(config, now)
    print(f"settings={store.path}")
    print(
        f"work_days={describe_work_days(config.work_days)} "
        f"hours={format_clock(config.start_minute_of_day)}-{format_clock(config.end_minute_of_day)}"
    )
    print(f"now={now.strftime('%a %Y-%m-%d %H:%M')} within_work_hours={window.within_work_hours} "
          f"within_trigger_window={window.within_trigger_window}")
    print(f"next_reminder={upcoming.strftime('%a %Y-%m-%d %H:%M') if upcoming else 'never'}")
    db_file = database_path()
    if db_file.exists():
        try:
            db = BreatheBarDatabase(db_file)
            sessions = db.list_sessions_for_date(now.date())
            total = db.total_mindful_seconds(now.date())
        except sqlite3.Error as exc:
            logger.warning("Mindful session store unavailable: %s", exc)
        else:
            print(f"mindful_today={total}s sessions={len(sessions)}")
    return 0


def main(argv: list[str] | None = None) -> int:
    parser = argparse.ArgumentParser(prog="breathebar")
    parser.add_argument("--check", action="store_true", help="Print the current schedule evaluation and exit")
    parser.add_argument(
        "--interval",
        type=float,
        default=DEFAULT_INTERVAL_SECONDS,
        help="Seconds between schedule checks (1-60)",
    )
    parser.add_argument("--debug", action="store_true", help="Add a Test Animation menu item")
    parser.add_argument("--verbose", action="store_true", help="Log debug messages")
    parser.add_argument("--version", action="store_true", help="Print app version and exit")
    args = parser.parse_args(argv)
    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )
    if args.version:
        print(__version__)
        return 0
    if args.check:
        return _check_cli()
    app = BreatheBarApp(interval_seconds=clamp_interval(args.interval), debug=args.debug)
    app.start()
    app.mainloop()
    return 0
