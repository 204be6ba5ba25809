from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import IntEnum

MINUTES_PER_DAY = 24 * 60
TRIGGER_MINUTE = 55
MIN_LOGGED_SESSION_SECONDS = 60
MIN_CADENCE_SECONDS = 2.0
MAX_CADENCE_SECONDS = 10.0


class Weekday(IntEnum):
    MONDAY = 1
    TUESDAY = 2
    WEDNESDAY = 3
    THURSDAY = 4
    FRIDAY = 5
    SATURDAY = 6
    SUNDAY = 7

    @classmethod
    def of(cls, instant: date) -> Weekday:
        return cls(instant.isoweekday())

    @property
    def short_name(self) -> str:
        return self.name[:3].title()


DEFAULT_WORK_DAYS = frozenset(
    {Weekday.MONDAY, Weekday.TUESDAY, Weekday.WEDNESDAY, Weekday.THURSDAY, Weekday.FRIDAY}
)


@dataclass(frozen=True)
class ScheduleConfig:
    start_minute_of_day: int = 8 * 60
    end_minute_of_day: int = 17 * 60
    work_days: frozenset[Weekday] = DEFAULT_WORK_DAYS
    cadence_seconds: float = 5.0
    launch_at_login: bool = False
    log_to_health: bool = False
    has_completed_onboarding: bool = False


@dataclass(frozen=True)
class ScheduleWindow:
    within_work_hours: bool
    within_trigger_window: bool


@dataclass
class ReminderState:
    is_primed: bool = True
    is_breathing_active: bool = False
    triggered_this_hour: bool = False
    # Last calendar day an automatic (un)prime happened; a manual toggle on
    # the same day is left alone.
    auto_primed_day: date | None = None
    auto_unprimed_day: date | None = None
    breathing_started_at: datetime | None = None


@dataclass(frozen=True)
class ReminderSnapshot:
    is_primed: bool
    is_breathing_active: bool
    triggered_this_hour: bool
    auto_primed_day: date | None
    auto_unprimed_day: date | None
    breathing_started_at: datetime | None

    @property
    def status_label(self) -> str:
        if self.is_breathing_active:
            return "Time to breathe"
        if self.is_primed:
            return "Waiting for the next reminder"
        return "Reminders paused"


@dataclass(frozen=True)
class MindfulSession:
    start: datetime
    end: datetime

    @property
    def duration_seconds(self) -> float:
        return max(0.0, (self.end - self.start).total_seconds())

    @property
    def is_loggable(self) -> bool:
        return self.duration_seconds >= MIN_LOGGED_SESSION_SECONDS


@dataclass(frozen=True)
class MindfulSessionRecord:
    id: int
    started_at: datetime
    ended_at: datetime
    duration_seconds: int
