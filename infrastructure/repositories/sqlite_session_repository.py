import sqlite3
import logging
from datetime import datetime, timezone
from typing import Mapping, Optional

log = logging.getLogger(__name__)


class SQLiteSessionStore:
    """
    Durable key/value session store (access token, refresh token, user JSON).

    Rows are scoped by ``session_id`` so several browser sessions can share
    one database file without seeing each other's credentials.
    """

    def __init__(self, db_path: str, session_id: str):
        if not session_id:
            raise ValueError("session_id is required")
        self.db_path = db_path
        self.session_id = session_id
        self.init_db()

    def _conn(self):
        return sqlite3.connect(self.db_path)

    def _get_current_version(self, conn) -> int:
        row = conn.execute("SELECT version FROM schema_info").fetchone()
        return row[0] if row else 0

    def _migrate_v1(self, conn):
        """Baseline schema (v1)."""
        conn.execute("""
            CREATE TABLE IF NOT EXISTS session_values (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL
            )
        """)

    def _migrate_v2(self, conn):
        """Per-session rows. Unscoped v1 credentials are dropped, their owners log in again."""
        conn.execute("DROP TABLE IF EXISTS session_values")
        conn.execute("""
            CREATE TABLE session_values (
                session_id TEXT NOT NULL,
                key TEXT NOT NULL,
                value TEXT NOT NULL,
                updated_at TEXT NOT NULL,
                PRIMARY KEY (session_id, key)
            )
        """)

    def init_db(self):
        MIGRATIONS = [self._migrate_v1, self._migrate_v2]

        with self._conn() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS schema_info (
                    version INTEGER NOT NULL
                )
            """)
            current_version = self._get_current_version(conn)

            has_version_row = conn.execute("SELECT COUNT(*) FROM schema_info").fetchone()[0] > 0
            if not has_version_row:
                conn.execute("INSERT INTO schema_info (version) VALUES (?)", (current_version,))

            for i in range(current_version, len(MIGRATIONS)):
                target_version = i + 1
                try:
                    MIGRATIONS[i](conn)
                    conn.execute("UPDATE schema_info SET version = ?", (target_version,))
                except sqlite3.Error as e:
                    raise RuntimeError(f"Session store migration to v{target_version} failed: {e}") from e

            conn.commit()

    def get(self, key: str) -> Optional[str]:
        with self._conn() as conn:
            row = conn.execute(
                "SELECT value FROM session_values WHERE session_id = ? AND key = ?",
                (self.session_id, key),
            ).fetchone()
            return row[0] if row else None

    def set(self, key: str, value: str) -> None:
        self.set_many({key: value})

    def set_many(self, values: Mapping[str, str]) -> None:
        now_iso = datetime.now(timezone.utc).isoformat()
        with self._conn() as conn:
            conn.executemany("""
                INSERT INTO session_values (session_id, key, value, updated_at)
                VALUES (?, ?, ?, ?)
                ON CONFLICT(session_id, key) DO UPDATE SET value = excluded.value, updated_at = excluded.updated_at
            """, [(self.session_id, k, v, now_iso) for k, v in values.items()])
            conn.commit()

    def delete(self, key: str) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM session_values WHERE session_id = ? AND key = ?", (self.session_id, key))
            conn.commit()

    def clear(self) -> None:
        with self._conn() as conn:
            conn.execute("DELETE FROM session_values WHERE session_id = ?", (self.session_id,))
            conn.commit()
        log.info(f"Session {self.session_id[:8]} cleared from {self.db_path}")
