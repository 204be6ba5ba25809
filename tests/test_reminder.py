from __future__ import annotations

import unittest
from datetime import datetime, timedelta

from breathebar.models import ReminderSnapshot, ScheduleConfig
from breathebar.reminder import ReminderMachine
from breathebar.schedule import next_reminder_at

WEDNESDAY = datetime(2026, 1, 7)
THURSDAY = datetime(2026, 1, 8)


def _at(day: datetime, hour: int, minute: int, second: int = 0) -> datetime:
    return day.replace(hour=hour, minute=minute, second=second)


class ReminderMachineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.config = ScheduleConfig()
        self.machine = ReminderMachine(lambda: self.config)

    def test_initial_state(self) -> None:
        snap = self.machine.snapshot()
        self.assertTrue(snap.is_primed)
        self.assertFalse(snap.is_breathing_active)
        self.assertFalse(snap.triggered_this_hour)
        self.assertIsNone(snap.auto_primed_day)
        self.assertIsNone(snap.auto_unprimed_day)

    def test_scenario_enter_breathing_at_55(self) -> None:
        self.assertFalse(self.machine.tick(_at(WEDNESDAY, 9, 54, 59)))
        self.assertFalse(self.machine.is_breathing_active)

        self.assertTrue(self.machine.tick(_at(WEDNESDAY, 9, 55)))
        snap = self.machine.snapshot()
        self.assertTrue(snap.is_breathing_active)
        self.assertTrue(snap.triggered_this_hour)
        self.assertEqual(snap.breathing_started_at, _at(WEDNESDAY, 9, 55))

    def test_scenario_breathing_persists_until_done(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        self.assertFalse(self.machine.tick(_at(WEDNESDAY, 9, 59, 59)))
        self.assertTrue(self.machine.is_breathing_active)

        self.assertTrue(self.machine.tick(_at(WEDNESDAY, 10, 0)))
        snap = self.machine.snapshot()
        self.assertFalse(snap.triggered_this_hour)
        self.assertTrue(snap.is_breathing_active)

        self.machine.mark_done(now=_at(WEDNESDAY, 10, 2))
        self.assertFalse(self.machine.is_breathing_active)

    def test_scenario_manual_unprime_sticks_until_next_day(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 0))
        self.assertFalse(self.machine.toggle_primed(now=_at(WEDNESDAY, 9, 30)))
        self.assertEqual(self.machine.snapshot().auto_primed_day, WEDNESDAY.date())

        now = _at(WEDNESDAY, 9, 30)
        while now <= _at(WEDNESDAY, 17, 30):
            self.machine.tick(now)
            snap = self.machine.snapshot()
            self.assertFalse(snap.is_primed)
            self.assertFalse(snap.is_breathing_active)
            now += timedelta(seconds=30)
        self.assertIsNone(self.machine.snapshot().auto_unprimed_day)

        self.assertTrue(self.machine.tick(_at(THURSDAY, 8, 5)))
        snap = self.machine.snapshot()
        self.assertTrue(snap.is_primed)
        self.assertEqual(snap.auto_primed_day, THURSDAY.date())

    def test_scenario_done_early_is_not_reprompted(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        self.machine.mark_done(now=_at(WEDNESDAY, 9, 56))
        snap = self.machine.snapshot()
        self.assertFalse(snap.is_breathing_active)
        self.assertTrue(snap.is_primed)
        self.assertTrue(snap.triggered_this_hour)

        self.assertFalse(self.machine.tick(_at(WEDNESDAY, 9, 57)))
        self.assertFalse(self.machine.is_breathing_active)

        self.machine.tick(_at(WEDNESDAY, 10, 0))
        self.assertFalse(self.machine.snapshot().triggered_this_hour)

        self.machine.tick(_at(WEDNESDAY, 10, 55))
        self.assertTrue(self.machine.is_breathing_active)

    def test_next_reminder_after_done_is_the_one_that_fires(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        self.machine.mark_done(now=_at(WEDNESDAY, 9, 56))
        upcoming = next_reminder_at(
            self.config, _at(WEDNESDAY, 9, 56), self.machine.snapshot().triggered_this_hour
        )
        self.assertEqual(upcoming, _at(WEDNESDAY, 10, 55))

        now = _at(WEDNESDAY, 9, 56)
        while now < upcoming:
            self.machine.tick(now)
            self.assertFalse(self.machine.is_breathing_active)
            now += timedelta(seconds=30)
        self.machine.tick(upcoming)
        self.assertTrue(self.machine.is_breathing_active)

    def test_tick_is_idempotent(self) -> None:
        instant = _at(WEDNESDAY, 9, 55)
        self.assertTrue(self.machine.tick(instant))
        before = self.machine.snapshot()
        self.assertFalse(self.machine.tick(instant))
        self.assertEqual(self.machine.snapshot(), before)

    def test_workday_end_unprimes_once_per_day(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 17, 30))
        snap = self.machine.snapshot()
        self.assertFalse(snap.is_primed)
        self.assertEqual(snap.auto_unprimed_day, WEDNESDAY.date())

        self.assertTrue(self.machine.toggle_primed(now=_at(WEDNESDAY, 17, 40)))
        self.machine.tick(_at(WEDNESDAY, 17, 45))
        self.assertTrue(self.machine.is_primed)

    def test_unprime_at_workday_end_stops_breathing(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 16, 55))
        self.assertTrue(self.machine.is_breathing_active)

        self.machine.tick(_at(WEDNESDAY, 17, 0))
        snap = self.machine.snapshot()
        self.assertFalse(snap.is_primed)
        self.assertFalse(snap.is_breathing_active)
        self.assertFalse(snap.triggered_this_hour)

    def test_trigger_outside_work_hours_never_breathes(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 17, 55))
        snap = self.machine.snapshot()
        self.assertFalse(snap.is_primed)
        self.assertFalse(snap.is_breathing_active)

    def test_unprimed_machine_does_not_trigger(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 0))
        self.machine.toggle_primed(now=_at(WEDNESDAY, 9, 10))
        self.machine.tick(_at(WEDNESDAY, 9, 56))
        self.assertFalse(self.machine.is_breathing_active)
        self.assertFalse(self.machine.snapshot().triggered_this_hour)

    def test_toggle_off_stops_breathing(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        self.machine.toggle_primed(now=_at(WEDNESDAY, 9, 56))
        snap = self.machine.snapshot()
        self.assertFalse(snap.is_primed)
        self.assertFalse(snap.is_breathing_active)

    def test_mark_done_returns_session(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        session = self.machine.mark_done(now=_at(WEDNESDAY, 9, 57))
        self.assertIsNotNone(session)
        self.assertEqual(session.duration_seconds, 120)
        self.assertTrue(session.is_loggable)

    def test_mark_done_prefers_panel_start(self) -> None:
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        session = self.machine.mark_done(
            now=_at(WEDNESDAY, 9, 57),
            started_at=_at(WEDNESDAY, 9, 56, 30),
        )
        self.assertEqual(session.duration_seconds, 30)
        self.assertFalse(session.is_loggable)

    def test_mark_done_without_session(self) -> None:
        self.assertIsNone(self.machine.mark_done(now=_at(WEDNESDAY, 9, 0)))

    def test_listeners_notified_only_on_change(self) -> None:
        seen: list[ReminderSnapshot] = []
        unsubscribe = self.machine.subscribe(seen.append)

        self.machine.tick(_at(WEDNESDAY, 9, 0))
        self.assertEqual(seen, [])

        self.machine.tick(_at(WEDNESDAY, 9, 55))
        self.assertEqual(len(seen), 1)
        self.assertTrue(seen[0].is_breathing_active)

        self.machine.tick(_at(WEDNESDAY, 9, 56))
        self.assertEqual(len(seen), 1)

        unsubscribe()
        self.machine.mark_done(now=_at(WEDNESDAY, 9, 57))
        self.assertEqual(len(seen), 1)

    def test_failing_listener_does_not_break_tick(self) -> None:
        def _boom(snapshot: ReminderSnapshot) -> None:
            raise RuntimeError("renderer crashed")

        seen: list[ReminderSnapshot] = []
        self.machine.subscribe(_boom)
        self.machine.subscribe(seen.append)
        with self.assertLogs("breathebar.reminder", level="ERROR"):
            self.assertTrue(self.machine.tick(_at(WEDNESDAY, 9, 55)))
        self.assertEqual(len(seen), 1)

    def test_set_breathing_for_test_animation(self) -> None:
        self.machine.set_breathing(True, now=_at(WEDNESDAY, 12, 0))
        self.assertTrue(self.machine.is_breathing_active)
        self.assertFalse(self.machine.snapshot().triggered_this_hour)
        self.machine.set_breathing(False, now=_at(WEDNESDAY, 12, 1))
        self.assertFalse(self.machine.is_breathing_active)

    def test_config_changes_are_read_every_tick(self) -> None:
        self.config = ScheduleConfig(start_minute_of_day=10 * 60)
        self.machine.tick(_at(WEDNESDAY, 9, 55))
        self.assertFalse(self.machine.is_primed)
        self.assertFalse(self.machine.is_breathing_active)


if __name__ == "__main__":
    unittest.main()
