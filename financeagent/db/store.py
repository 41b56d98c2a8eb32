"""SQLite data store for FinanceAgent."""

import sqlite3
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional

from financeagent.models import Message, Wakeup


class DataStore:
    """SQLite-based data store for FinanceAgent."""

    REQUIRED_TABLES = [
        "session_state",
        "schedules",
        "messages",
    ]

    def __init__(self, db_path: Path):
        """Initialize the data store.

        Args:
            db_path: Path to the SQLite database file.
        """
        self.db_path = db_path
        self._ensure_db_dir()
        self._init_schema()

    def _ensure_db_dir(self) -> None:
        """Ensure the database directory exists."""
        self.db_path.parent.mkdir(parents=True, exist_ok=True)

    def _get_connection(self) -> sqlite3.Connection:
        """Get a database connection."""
        conn = sqlite3.connect(self.db_path, timeout=10)
        conn.row_factory = sqlite3.Row
        return conn

    def _init_schema(self) -> None:
        """Initialize database schema on first run."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()

            # Key-value state, one namespace per session
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS session_state (
                    session_id TEXT NOT NULL,
                    key TEXT NOT NULL,
                    value TEXT NOT NULL,
                    updated_at TEXT NOT NULL,
                    PRIMARY KEY (session_id, key)
                )
            """)

            # Pending wake-ups
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS schedules (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL,
                    alert_id TEXT NOT NULL,
                    run_at TEXT NOT NULL
                )
            """)

            # Conversation transcript
            cursor.execute("""
                CREATE TABLE IF NOT EXISTS messages (
                    id INTEGER PRIMARY KEY AUTOINCREMENT,
                    session_id TEXT NOT NULL,
                    role TEXT NOT NULL,
                    text TEXT NOT NULL,
                    created_at TEXT NOT NULL
                )
            """)

            conn.commit()
        finally:
            conn.close()

    def get_tables(self) -> list[str]:
        """Get list of all tables in the database."""
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT name FROM sqlite_master WHERE type='table' AND name NOT LIKE 'sqlite_%'"
            )
            return [row["name"] for row in cursor.fetchall()]
        finally:
            conn.close()

    # ==================== Session State ====================

    def get_state(self, session_id: str, key: str) -> Optional[str]:
        """Get a raw state value.

        Args:
            session_id: Session the value belongs to.
            key: State key.

        Returns:
            The stored value, or None if the key has never been written.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                "SELECT value FROM session_state WHERE session_id = ? AND key = ?",
                (session_id, key),
            )
            row = cursor.fetchone()
            return row["value"] if row else None
        finally:
            conn.close()

    def set_state(self, session_id: str, key: str, value: str) -> None:
        """Write a raw state value, replacing any previous one.

        Args:
            session_id: Session the value belongs to.
            key: State key.
            value: Serialized value.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT OR REPLACE INTO session_state (session_id, key, value, updated_at)
                VALUES (?, ?, ?, ?)
                """,
                (session_id, key, value, datetime.now().isoformat()),
            )
            conn.commit()
        finally:
            conn.close()

    def update_state(
        self,
        session_id: str,
        key: str,
        update: Callable[[Optional[str]], Optional[str]],
    ) -> Optional[str]:
        """Atomically read, transform and write a state value.

        The read and the write happen inside one ``BEGIN IMMEDIATE``
        transaction, so concurrent updates from other connections or
        processes are serialized by SQLite's write lock.

        Args:
            session_id: Session the value belongs to.
            key: State key.
            update: Called with the current value (None if unset). Returns
                the new value, or None to leave the row unchanged.

        Returns:
            The value written, or None if nothing was written.
        """
        conn = self._get_connection()
        conn.isolation_level = None
        try:
            cursor = conn.cursor()
            cursor.execute("BEGIN IMMEDIATE")
            try:
                cursor.execute(
                    "SELECT value FROM session_state WHERE session_id = ? AND key = ?",
                    (session_id, key),
                )
                row = cursor.fetchone()
                value = update(row["value"] if row else None)
                if value is not None:
                    cursor.execute(
                        """
                        INSERT OR REPLACE INTO session_state (session_id, key, value, updated_at)
                        VALUES (?, ?, ?, ?)
                        """,
                        (session_id, key, value, datetime.now().isoformat()),
                    )
                cursor.execute("COMMIT")
            except Exception:
                cursor.execute("ROLLBACK")
                raise
            return value
        finally:
            conn.close()

    # ==================== Schedules ====================

    def add_schedule(self, session_id: str, alert_id: str, run_at: datetime) -> int:
        """Persist a pending wake-up.

        Args:
            session_id: Session the alert belongs to.
            alert_id: Alert to re-check.
            run_at: Earliest time the wake-up may fire.

        Returns:
            The ID of the saved schedule.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO schedules (session_id, alert_id, run_at)
                VALUES (?, ?, ?)
                """,
                (session_id, alert_id, run_at.isoformat()),
            )
            conn.commit()
            return cursor.lastrowid or 0
        finally:
            conn.close()

    def get_schedules(self, session_id: str) -> list[Wakeup]:
        """Get pending wake-ups for a session, earliest first.

        Args:
            session_id: Session to list.

        Returns:
            List of pending wake-ups.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, session_id, alert_id, run_at
                FROM schedules
                WHERE session_id = ?
                ORDER BY run_at, id
                """,
                (session_id,),
            )
            return [
                Wakeup(
                    id=row["id"],
                    session_id=row["session_id"],
                    alert_id=row["alert_id"],
                    run_at=datetime.fromisoformat(row["run_at"]),
                )
                for row in cursor.fetchall()
            ]
        finally:
            conn.close()

    def delete_schedule(self, schedule_id: int) -> None:
        """Delete a wake-up once it has been handled.

        Args:
            schedule_id: ID of the schedule to delete.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute("DELETE FROM schedules WHERE id = ?", (schedule_id,))
            conn.commit()
        finally:
            conn.close()

    # ==================== Messages ====================

    def add_message(self, message: Message) -> int:
        """Append a message to a session transcript.

        Args:
            message: Message to save.

        Returns:
            The ID of the saved message.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                INSERT INTO messages (session_id, role, text, created_at)
                VALUES (?, ?, ?, ?)
                """,
                (
                    message.session_id,
                    message.role,
                    message.text,
                    message.created_at.isoformat(),
                ),
            )
            conn.commit()
            return cursor.lastrowid or 0
        finally:
            conn.close()

    def get_messages(
        self,
        session_id: str,
        limit: Optional[int] = None,
        role: Optional[str] = None,
    ) -> list[Message]:
        """Get a session transcript in chronological order.

        Args:
            session_id: Session to read.
            limit: Optional maximum number of most recent messages.
            role: Optional filter, "user" or "assistant".

        Returns:
            List of messages, oldest first.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            cursor.execute(
                """
                SELECT id, session_id, role, text, created_at
                FROM messages
                WHERE session_id = ? AND (? IS NULL OR role = ?)
                ORDER BY id DESC
                LIMIT ?
                """,
                (session_id, role, role, limit if limit is not None else -1),
            )
            rows = list(reversed(cursor.fetchall()))
            return [
                Message(
                    id=row["id"],
                    session_id=row["session_id"],
                    role=row["role"],
                    text=row["text"],
                    created_at=datetime.fromisoformat(row["created_at"]),
                )
                for row in rows
            ]
        finally:
            conn.close()

    # ==================== Stats ====================

    def get_stats(self) -> dict:
        """Get database statistics.

        Returns:
            Dictionary with table record counts.
        """
        conn = self._get_connection()
        try:
            cursor = conn.cursor()
            stats = {}
            for table in self.REQUIRED_TABLES:
                cursor.execute(f"SELECT COUNT(*) as count FROM {table}")
                stats[table] = cursor.fetchone()["count"]
            return stats
        finally:
            conn.close()
