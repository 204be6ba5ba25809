from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Callable

from .database import BreatheBarDatabase
from .models import MindfulSession

logger = logging.getLogger(__name__)

DatabaseFactory = Callable[[], BreatheBarDatabase]


class MindfulSessionLogger:
    """
    Records completed breathing sessions.
    The store is opened lazily on first use ("authorization"); if that or a
    write fails, logging is disabled for the rest of the process.
    """

    def __init__(self, database_factory: DatabaseFactory):
        self._database_factory = database_factory
        self._db: BreatheBarDatabase | None = None
        self._disabled = False
        self._lock = threading.Lock()

    @classmethod
    def for_path(cls, db_file: Path) -> MindfulSessionLogger:
        return cls(lambda: BreatheBarDatabase(db_file))

    @property
    def is_available(self) -> bool:
        return not self._disabled

    @property
    def is_authorized(self) -> bool:
        return self._db is not None

    def request_authorization(self) -> bool:
        with self._lock:
            return self._ensure_database() is not None

    def log_session(self, session: MindfulSession) -> bool:
        if not session.is_loggable:
            logger.debug("Skipping short session (%.0fs)", session.duration_seconds)
            return False
        with self._lock:
            db = self._ensure_database()
            if db is None:
                return False
            try:
                db.insert_mindful_session(session)
            except sqlite3.Error as exc:
                logger.warning("Mindful session save error: %s", exc)
                self._disable()
                return False
        logger.info("Logged mindful session %.0fs", session.duration_seconds)
        return True

    def log_session_async(self, session: MindfulSession) -> threading.Thread:
        thread = threading.Thread(
            target=self.log_session,
            args=(session,),
            name="breathebar-session-log",
            daemon=True,
        )
        thread.start()
        return thread

    def _ensure_database(self) -> BreatheBarDatabase | None:
        if self._disabled:
            return None
        if self._db is None:
            try:
                self._db = self._database_factory()
            except (OSError, sqlite3.Error) as exc:
                logger.warning("Mindful session store unavailable: %s", exc)
                self._disable()
                return None
        return self._db

    def _disable(self) -> None:
        self._disabled = True
        self._db = None
