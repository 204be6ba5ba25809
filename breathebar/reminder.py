from __future__ import annotations

import logging
from dataclasses import asdict
from datetime import datetime
from typing import Callable

from .models import MindfulSession, ReminderSnapshot, ReminderState, ScheduleConfig
from .schedule import evaluate

logger = logging.getLogger(__name__)

Clock = Callable[[], datetime]
ConfigSource = Callable[[], ScheduleConfig]
StateListener = Callable[[ReminderSnapshot], None]


class ReminderMachine:
    """
    Hourly breathing reminder state.
    Ticker calls tick(); menu / panel call mark_done() and toggle_primed().
    All calls are expected on the same (UI) thread.
    """

    def __init__(self, config_source: ConfigSource, clock: Clock = datetime.now):
        self._config_source = config_source
        self._clock = clock
        self._state = ReminderState()
        self._listeners: list[StateListener] = []

    # ----- Observation -----
    def snapshot(self) -> ReminderSnapshot:
        return ReminderSnapshot(**asdict(self._state))

    @property
    def is_primed(self) -> bool:
        return self._state.is_primed

    @property
    def is_breathing_active(self) -> bool:
        return self._state.is_breathing_active

    def subscribe(self, listener: StateListener) -> Callable[[], None]:
        self._listeners.append(listener)

        def _unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return _unsubscribe

    # ----- Scheduler -----
    def tick(self, now: datetime | None = None) -> bool:
        """
        Apply the schedule rules for ``now``.
        Returns True if any state field changed.
        """
        now = now or self._clock()
        before = self.snapshot()
        self._apply_rules(now)
        return self._emit_if_changed(before)

    def _apply_rules(self, now: datetime) -> None:
        state = self._state
        today = now.date()
        window = evaluate(self._config_source(), now)

        if not window.within_work_hours and state.is_primed and state.auto_unprimed_day != today:
            logger.info("Workday ended. Unpriming.")
            state.is_primed = False
            self._stop_breathing()
            state.auto_unprimed_day = today
        elif window.within_work_hours and not state.is_primed and state.auto_primed_day != today:
            logger.info("Workday started. Priming.")
            state.is_primed = True
            state.auto_primed_day = today

        if (
            state.is_primed
            and window.within_trigger_window
            and not state.is_breathing_active
            and not state.triggered_this_hour
        ):
            logger.info("Time to breathe!")
            state.is_breathing_active = True
            state.triggered_this_hour = True
            state.breathing_started_at = now

        if state.triggered_this_hour and not window.within_trigger_window:
            # Window has passed; the next hour may trigger again.
            logger.debug("Getting ready to remind about breathing again.")
            state.triggered_this_hour = False

    # ----- User actions -----
    def mark_done(
        self,
        now: datetime | None = None,
        started_at: datetime | None = None,
    ) -> MindfulSession | None:
        """
        End the current reminder.
        ``started_at`` is the moment the user actually began breathing (the
        panel opening); without it the reminder start is used. Returns the
        session, or None if there is nothing to report.
        """
        now = now or self._clock()
        before = self.snapshot()
        start = started_at or self._state.breathing_started_at
        logger.info("Done breathing.")
        self._stop_breathing()
        self._emit_if_changed(before)
        if start is None or start > now:
            return None
        return MindfulSession(start=start, end=now)

    def toggle_primed(self, now: datetime | None = None) -> bool:
        now = now or self._clock()
        before = self.snapshot()
        state = self._state
        state.is_primed = not state.is_primed
        if not state.is_primed:
            logger.info("Unpriming...")
            self._stop_breathing()
            state.auto_primed_day = now.date()
        else:
            logger.info("Priming...")
            state.auto_unprimed_day = now.date()
        self._emit_if_changed(before)
        return state.is_primed

    def set_breathing(self, active: bool, now: datetime | None = None) -> None:
        """Force the breathing flag; used by the debug "Test Animation" item."""
        now = now or self._clock()
        before = self.snapshot()
        if active and not self._state.is_breathing_active:
            self._state.is_breathing_active = True
            self._state.breathing_started_at = now
        elif not active:
            self._stop_breathing()
        self._emit_if_changed(before)

    # ----- Internals -----
    def _stop_breathing(self) -> None:
        self._state.is_breathing_active = False
        self._state.breathing_started_at = None

    def _emit_if_changed(self, before: ReminderSnapshot) -> bool:
        after = self.snapshot()
        if after == before:
            return False
        for listener in list(self._listeners):
            try:
                listener(after)
            except Exception:  # noqa: BLE001
                logger.exception("Reminder listener failed")
        return True
