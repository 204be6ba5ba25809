from __future__ import annotations

import logging
from datetime import datetime
from typing import Any, Callable

from .reminder import Clock, ReminderMachine

logger = logging.getLogger(__name__)

DEFAULT_INTERVAL_SECONDS = 5.0
MIN_INTERVAL_SECONDS = 1.0
MAX_INTERVAL_SECONDS = 60.0

# Matches tk's ``widget.after(ms, func)`` / ``widget.after_cancel(id)``.
ScheduleAfter = Callable[[int, Callable[[], None]], Any]
CancelAfter = Callable[[Any], None]


def clamp_interval(interval_seconds: float) -> float:
    return max(MIN_INTERVAL_SECONDS, min(MAX_INTERVAL_SECONDS, float(interval_seconds)))


class ReminderTicker:
    """Drives ReminderMachine.tick() from the UI event loop at a fixed interval."""

    def __init__(
        self,
        machine: ReminderMachine,
        schedule_after: ScheduleAfter,
        cancel_after: CancelAfter | None = None,
        interval_seconds: float = DEFAULT_INTERVAL_SECONDS,
        clock: Clock = datetime.now,
    ):
        self._machine = machine
        self._schedule_after = schedule_after
        self._cancel_after = cancel_after
        self._interval_seconds = clamp_interval(interval_seconds)
        self._clock = clock
        self._pending: Any = None
        self._running = False

    @property
    def interval_seconds(self) -> float:
        return self._interval_seconds

    @property
    def is_running(self) -> bool:
        return self._running

    def start(self) -> bool:
        if self._running:
            return False
        self._running = True
        logger.debug("Reminder ticker started (every %.1fs)", self._interval_seconds)
        self._run_tick()
        return True

    def stop(self) -> None:
        if not self._running:
            return
        self._running = False
        pending = self._pending
        self._pending = None
        if pending is not None and self._cancel_after is not None:
            self._cancel_after(pending)
        logger.debug("Reminder ticker stopped")

    def tick_once(self) -> bool:
        return self._machine.tick(self._clock())

    def _run_tick(self) -> None:
        self._pending = None
        if not self._running:
            return
        try:
            self.tick_once()
        except Exception:  # noqa: BLE001
            logger.exception("Reminder tick failed")
        finally:
            if self._running:
                self._pending = self._schedule_after(int(self._interval_seconds * 1000), self._run_tick)
