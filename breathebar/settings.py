"""
Settings storage for BreatheBar
Persists the ScheduleConfig as a JSON blob and notifies listeners on change
"""

from __future__ import annotations

import json
import logging
import math
from pathlib import Path
from typing import Any, Callable

from .models import (
    MAX_CADENCE_SECONDS,
    MIN_CADENCE_SECONDS,
    MINUTES_PER_DAY,
    ScheduleConfig,
    Weekday,
)
from .schedule import parse_clock

logger = logging.getLogger(__name__)

SettingsListener = Callable[[ScheduleConfig, ScheduleConfig], None]


def config_to_dict(config: ScheduleConfig) -> dict[str, Any]:
    return {
        "start_minute_of_day": config.start_minute_of_day,
        "end_minute_of_day": config.end_minute_of_day,
        "work_days": sorted(int(day) for day in config.work_days),
        "cadence_seconds": config.cadence_seconds,
        "launch_at_login": config.launch_at_login,
        "log_to_health": config.log_to_health,
        "has_completed_onboarding": config.has_completed_onboarding,
    }


def config_from_dict(raw: Any) -> ScheduleConfig:
    """Build a config from decoded JSON; each bad or missing field falls back to its default."""
    defaults = ScheduleConfig()
    if not isinstance(raw, dict):
        return defaults
    return ScheduleConfig(
        start_minute_of_day=_minute_field(raw.get("start_minute_of_day"), defaults.start_minute_of_day),
        end_minute_of_day=_minute_field(raw.get("end_minute_of_day"), defaults.end_minute_of_day),
        work_days=_work_days_field(raw.get("work_days"), defaults.work_days),
        cadence_seconds=_cadence_field(raw.get("cadence_seconds"), defaults.cadence_seconds),
        launch_at_login=_bool_field(raw.get("launch_at_login"), defaults.launch_at_login),
        log_to_health=_bool_field(raw.get("log_to_health"), defaults.log_to_health),
        has_completed_onboarding=_bool_field(
            raw.get("has_completed_onboarding"), defaults.has_completed_onboarding
        ),
    )


class SettingsStore:
    """Load, update and save the schedule configuration"""

    def __init__(self, settings_file: Path):
        self._settings_file = Path(settings_file)
        self._listeners: list[SettingsListener] = []
        self._config = self._load()

    @property
    def path(self) -> Path:
        return self._settings_file

    def get(self) -> ScheduleConfig:
        return self._config

    def subscribe(self, listener: SettingsListener) -> None:
        self._listeners.append(listener)

    def update(self, **changes: Any) -> ScheduleConfig:
        """Apply field changes, save, and notify listeners if anything changed"""
        previous = self._config
        updated = config_from_dict({**config_to_dict(previous), **_normalize_changes(changes)})
        if updated == previous:
            return previous
        self._config = updated
        self.save()
        for listener in list(self._listeners):
            try:
                listener(previous, updated)
            except Exception:  # noqa: BLE001
                logger.exception("Settings listener failed")
        return updated

    def save(self) -> bool:
        try:
            self._settings_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self._settings_file, "w", encoding="utf-8") as f:
                json.dump(config_to_dict(self._config), f, indent=2)
            return True
        except OSError as exc:
            logger.warning("Error saving settings to %s: %s", self._settings_file, exc)
            return False

    def _load(self) -> ScheduleConfig:
        if not self._settings_file.exists():
            return ScheduleConfig()
        try:
            with open(self._settings_file, "r", encoding="utf-8") as f:
                return config_from_dict(json.load(f))
        except (OSError, ValueError) as exc:
            logger.warning("Error loading settings from %s: %s", self._settings_file, exc)
            return ScheduleConfig()


def _normalize_changes(changes: dict[str, Any]) -> dict[str, Any]:
    known = set(config_to_dict(ScheduleConfig()))
    unknown = set(changes) - known
    if unknown:
        raise TypeError(f"Unknown settings: {', '.join(sorted(unknown))}")
    normalized = dict(changes)
    if "work_days" in normalized:
        normalized["work_days"] = [int(day) for day in normalized["work_days"]]
    return normalized


def _minute_field(value: Any, default: int) -> int:
    if isinstance(value, bool) or not isinstance(value, int):
        return default
    if not 0 <= value < MINUTES_PER_DAY:
        return default
    return value


def _work_days_field(value: Any, default: frozenset[Weekday]) -> frozenset[Weekday]:
    if not isinstance(value, (list, tuple, set, frozenset)):
        return default
    days: set[Weekday] = set()
    for item in value:
        if isinstance(item, bool) or not isinstance(item, int):
            continue
        try:
            days.add(Weekday(item))
        except ValueError:
            continue
    return frozenset(days)


def _cadence_field(value: Any, default: float) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return default
    try:
        cadence = float(value)
    except OverflowError:
        return default
    if not math.isfinite(cadence) or cadence <= 0:
        return default
    return cadence


def _bool_field(value: Any, default: bool) -> bool:
    if isinstance(value, bool):
        return value
    return default


def form_changes(
    start_text: str,
    end_text: str,
    work_days,
    cadence_seconds: float,
    launch_at_login: bool,
    log_to_health: bool,
) -> dict[str, Any]:
    """Validate settings-form input and return the changes for SettingsStore.update"""
    start = parse_clock(start_text)
    end = parse_clock(end_text)
    if end < start:
        raise ValueError("End time must not be before start time.")
    cadence = float(cadence_seconds)
    if not MIN_CADENCE_SECONDS <= cadence <= MAX_CADENCE_SECONDS:
        raise ValueError(
            f"Pace must be between {MIN_CADENCE_SECONDS:g} and {MAX_CADENCE_SECONDS:g} seconds."
        )
    return {
        "start_minute_of_day": start,
        "end_minute_of_day": end,
        "work_days": sorted(Weekday(int(day)) for day in work_days),
        "cadence_seconds": cadence,
        "launch_at_login": bool(launch_at_login),
        "log_to_health": bool(log_to_health),
    }
