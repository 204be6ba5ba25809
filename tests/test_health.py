from __future__ import annotations

import tempfile
import unittest
from datetime import date, datetime
from pathlib import Path

from breathebar.database import BreatheBarDatabase
from breathebar.health import MindfulSessionLogger
from breathebar.models import MindfulSession

LONG_SESSION = MindfulSession(datetime(2026, 1, 7, 9, 55), datetime(2026, 1, 7, 9, 57))
SHORT_SESSION = MindfulSession(datetime(2026, 1, 7, 9, 55), datetime(2026, 1, 7, 9, 55, 40))


class MindfulSessionLoggerTests(unittest.TestCase):
    def test_store_is_opened_lazily(self) -> None:
        opened: list[int] = []

        with tempfile.TemporaryDirectory() as tmp_dir:
            def _factory() -> BreatheBarDatabase:
                opened.append(1)
                return BreatheBarDatabase(Path(tmp_dir) / "breathebar.sqlite3")

            session_logger = MindfulSessionLogger(_factory)
            self.assertEqual(opened, [])
            self.assertFalse(session_logger.is_authorized)

            self.assertTrue(session_logger.log_session(LONG_SESSION))
            self.assertTrue(session_logger.log_session(LONG_SESSION))
            self.assertEqual(opened, [1])
            self.assertTrue(session_logger.is_authorized)

    def test_short_sessions_are_skipped(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "breathebar.sqlite3"
            session_logger = MindfulSessionLogger.for_path(path)
            self.assertFalse(session_logger.log_session(SHORT_SESSION))
            self.assertTrue(session_logger.log_session(LONG_SESSION))
            rows = BreatheBarDatabase(path).list_sessions_for_date(date(2026, 1, 7))
            self.assertEqual(len(rows), 1)
            self.assertEqual(rows[0].duration_seconds, 120)

    def test_failure_disables_logging(self) -> None:
        calls: list[int] = []

        def _factory() -> BreatheBarDatabase:
            calls.append(1)
            raise PermissionError("store locked")

        session_logger = MindfulSessionLogger(_factory)
        with self.assertLogs("breathebar.health", level="WARNING"):
            self.assertFalse(session_logger.request_authorization())
        self.assertFalse(session_logger.is_available)
        self.assertFalse(session_logger.log_session(LONG_SESSION))
        self.assertEqual(calls, [1])

    def test_async_logging(self) -> None:
        with tempfile.TemporaryDirectory() as tmp_dir:
            path = Path(tmp_dir) / "breathebar.sqlite3"
            session_logger = MindfulSessionLogger.for_path(path)
            thread = session_logger.log_session_async(LONG_SESSION)
            thread.join(timeout=10)
            self.assertFalse(thread.is_alive())
            self.assertEqual(BreatheBarDatabase(path).total_mindful_seconds(date(2026, 1, 7)), 120)


if __name__ == "__main__":
    unittest.main()
