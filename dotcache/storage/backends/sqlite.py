"""SQLite storage backend partitioned by domain."""

import sqlite3
import threading
from pathlib import Path

from dotcache.exceptions import BackendUnavailableError

from .base import StorageBackend


class SQLiteBackend(StorageBackend):
    """Legacy store keyed by ``(domain, namespace)``.

    Several domains can share one database file; each backend instance only
    sees rows for its own domain.
    """

    name = "sqlite"

    def __init__(self, db_path: Path, domain: str = "localhost"):
        self.db_path = Path(db_path)
        self.domain = domain
        self._lock = threading.RLock()
        self.conn: sqlite3.Connection | None = None

    def __repr__(self) -> str:
        return f"SQLiteBackend({str(self.db_path)!r}, domain={self.domain!r})"

    @property
    def connection(self) -> sqlite3.Connection:
        """Get the connection, opening it on first use."""
        if self.conn is None:
            self.initialize()
        assert self.conn is not None
        return self.conn

    def initialize(self) -> None:
        """Open the database and create the schema."""
        conn = None
        try:
            self.db_path.parent.mkdir(parents=True, exist_ok=True)
            conn = sqlite3.connect(str(self.db_path), check_same_thread=False)
            conn.row_factory = sqlite3.Row
            conn.executescript("""
                CREATE TABLE IF NOT EXISTS storage (
                    domain TEXT NOT NULL,
                    key TEXT NOT NULL,
                    data TEXT NOT NULL,
                    updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP,
                    PRIMARY KEY (domain, key)
                );
            """)
            conn.commit()
        except (OSError, sqlite3.Error) as e:
            if conn is not None:
                conn.close()
            raise BackendUnavailableError(self.name, str(e)) from e
        self.conn = conn

    def _query(self, sql: str, params: tuple = ()) -> list[sqlite3.Row]:
        with self._lock:
            try:
                return self.connection.execute(sql, params).fetchall()
            except sqlite3.Error as e:
                raise BackendUnavailableError(self.name, str(e)) from e

    def _execute(self, sql: str, params: tuple = ()) -> int:
        """Run a statement, commit, and return the affected row count."""
        with self._lock:
            try:
                cursor = self.connection.execute(sql, params)
                self.connection.commit()
                return cursor.rowcount
            except sqlite3.Error as e:
                raise BackendUnavailableError(self.name, str(e)) from e

    def read(self, namespace: str) -> str | None:
        rows = self._query(
            "SELECT data FROM storage WHERE domain = ? AND key = ?",
            (self.domain, namespace),
        )
        return rows[0]["data"] if rows else None

    def write(self, namespace: str, payload: str) -> None:
        self._execute(
            """
            INSERT INTO storage (domain, key, data) VALUES (?, ?, ?)
            ON CONFLICT(domain, key) DO UPDATE SET
                data = excluded.data,
                updated_at = CURRENT_TIMESTAMP
            """,
            (self.domain, namespace, payload),
        )

    def delete(self, namespace: str) -> bool:
        count = self._execute(
            "DELETE FROM storage WHERE domain = ? AND key = ?",
            (self.domain, namespace),
        )
        return count > 0

    def exists(self, namespace: str) -> bool:
        rows = self._query(
            "SELECT 1 FROM storage WHERE domain = ? AND key = ? LIMIT 1",
            (self.domain, namespace),
        )
        return bool(rows)

    def keys(self) -> list[str]:
        rows = self._query(
            "SELECT key FROM storage WHERE domain = ? ORDER BY key", (self.domain,)
        )
        return [row["key"] for row in rows]

    def clear(self) -> None:
        """Clear all rows for this domain."""
        self._execute("DELETE FROM storage WHERE domain = ?", (self.domain,))

    def close(self) -> None:
        """Close database connection."""
        if self.conn:
            self.conn.close()
            self.conn = None
