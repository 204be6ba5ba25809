from __future__ import annotations

from datetime import datetime, timedelta

from .models import MINUTES_PER_DAY, TRIGGER_MINUTE, ScheduleConfig, ScheduleWindow, Weekday

LOOKAHEAD_HOURS = 8 * 24


def evaluate(config: ScheduleConfig, instant: datetime) -> ScheduleWindow:
    within_work_hours = is_within_work_hours(config, instant)
    return ScheduleWindow(
        within_work_hours=within_work_hours,
        within_trigger_window=within_work_hours and instant.minute >= TRIGGER_MINUTE,
    )


def is_within_work_hours(config: ScheduleConfig, instant: datetime) -> bool:
    if Weekday.of(instant) not in config.work_days:
        return False
    current = minute_of_day(instant)
    return config.start_minute_of_day <= current < config.end_minute_of_day


def minute_of_day(instant: datetime) -> int:
    return instant.hour * 60 + instant.minute


def next_trigger_at(config: ScheduleConfig, after: datetime) -> datetime | None:
    """Return the first whole minute after ``after`` that lies in a trigger window.

    Only the trigger minutes of each hour are probed, so the search stays cheap
    enough to run on every tooltip refresh. ``None`` means the configuration can
    never trigger (no work days, or no work hour reaching minute 55).
    """
    hour_start = after.replace(minute=0, second=0, microsecond=0)
    for offset in range(LOOKAHEAD_HOURS + 1):
        base = hour_start + timedelta(hours=offset)
        for minute in range(TRIGGER_MINUTE, 60):
            candidate = base.replace(minute=minute)
            if candidate <= after:
                continue
            if evaluate(config, candidate).within_trigger_window:
                return candidate
    return None


def next_reminder_at(
    config: ScheduleConfig,
    now: datetime,
    triggered_this_hour: bool = False,
) -> datetime | None:
    """Like next_trigger_at, but an hour that already fired is skipped."""
    after = now
    if triggered_this_hour:
        after = now.replace(minute=0, second=0, microsecond=0) + timedelta(hours=1) - timedelta(seconds=1)
    return next_trigger_at(config, after)


def parse_clock(value: str) -> int:
    text = (value or "").strip()
    parts = text.split(":")
    if len(parts) != 2:
        raise ValueError(f"Expected HH:MM, got {value!r}")
    try:
        hours = int(parts[0])
        minutes = int(parts[1])
    except ValueError:
        raise ValueError(f"Expected HH:MM, got {value!r}") from None
    if not (0 <= hours < 24 and 0 <= minutes < 60):
        raise ValueError(f"Time out of range: {value!r}")
    return hours * 60 + minutes


def format_clock(minutes: int) -> str:
    value = int(minutes) % MINUTES_PER_DAY
    hours, mins = divmod(value, 60)
    return f"{hours:02d}:{mins:02d}"


def describe_work_days(days) -> str:
    ordered = sorted(days)
    if not ordered:
        return "No work days"
    return ", ".join(Weekday(day).short_name for day in ordered)
