from __future__ import annotations

import sqlite3
import threading
from contextlib import contextmanager
from datetime import date, datetime
from pathlib import Path

from .models import MindfulSession, MindfulSessionRecord


class BreatheBarDatabase:
    def __init__(self, db_file: Path):
        self._db_file = Path(db_file)
        self._db_file.parent.mkdir(parents=True, exist_ok=True)
        self._lock = threading.Lock()
        self._init_schema()

    @property
    def path(self) -> Path:
        return self._db_file

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(self._db_file, timeout=30)
        conn.row_factory = sqlite3.Row
        conn.execute("PRAGMA journal_mode=WAL")
        conn.execute("PRAGMA synchronous=NORMAL")
        return conn

    @contextmanager
    def _connection(self):
        conn = self._connect()
        try:
            yield conn
        finally:
            conn.close()

    def _init_schema(self) -> None:
        with self._lock, self._connection() as conn:
            conn.executescript(
                """
                CREATE TABLE IF NOT EXISTS mindful_sessions (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    started_at TEXT NOT NULL,
                    ended_at TEXT NOT NULL,
                    duration_seconds INTEGER NOT NULL
                );

                CREATE INDEX IF NOT EXISTS idx_mindful_sessions_started_at
                ON mindful_sessions(started_at);
                """
            )
            conn.commit()

    def insert_mindful_session(self, session: MindfulSession) -> int:
        with self._lock, self._connection() as conn:
            cursor = conn.execute(
                """
                INSERT INTO mindful_sessions(started_at, ended_at, duration_seconds)
                VALUES (?, ?, ?)
                """,
                (
                    session.start.isoformat(),
                    session.end.isoformat(),
                    int(round(session.duration_seconds)),
                ),
            )
            conn.commit()
            return int(cursor.lastrowid)

    def list_sessions_for_date(self, day: date) -> list[MindfulSessionRecord]:
        with self._lock, self._connection() as conn:
            rows = conn.execute(
                """
                SELECT id, started_at, ended_at, duration_seconds
                FROM mindful_sessions
                WHERE substr(started_at, 1, 10) = ?
                ORDER BY started_at ASC
                """,
                (day.isoformat(),),
            ).fetchall()
        return [self._row_to_record(row) for row in rows]

    def total_mindful_seconds(self, day: date) -> int:
        with self._lock, self._connection() as conn:
            row = conn.execute(
                """
                SELECT COALESCE(SUM(duration_seconds), 0) AS total
                FROM mindful_sessions
                WHERE substr(started_at, 1, 10) = ?
                """,
                (day.isoformat(),),
            ).fetchone()
        return int(row["total"]) if row is not None else 0

    @staticmethod
    def _row_to_record(row: sqlite3.Row) -> MindfulSessionRecord:
        return MindfulSessionRecord(
            id=int(row["id"]),
            started_at=datetime.fromisoformat(str(row["started_at"])),
            ended_at=datetime.fromisoformat(str(row["ended_at"])),
            duration_seconds=int(row["duration_seconds"]),
        )
