"""
Base repository with SQLite connection management.

Each operation opens a short-lived connection; the context managers commit
or roll back and always close it.
"""

import sqlite3
from contextlib import contextmanager
from typing import Generator, Optional, Tuple

from database import get_connection

ConnectionPair = Tuple[sqlite3.Connection, sqlite3.Cursor]


class BaseRepository:
    """
    Base class for all repositories.

    Args:
        db_path: SQLite file to use. Defaults to get_database_path() at the
            time each connection is opened, so SNAKE_DB_PATH changes apply.
    """

    def __init__(self, db_path: Optional[str] = None):
        self.db_path = db_path

    def _open(self) -> ConnectionPair:
        conn = get_connection(self.db_path)
        return conn, conn.cursor()

    @contextmanager
    def connection(self, auto_commit: bool = True) -> Generator[ConnectionPair, None, None]:
        """
        Yield (connection, cursor) for a write.

        Commits on a clean exit when auto_commit is set, rolls back and
        re-raises on error.

        Example:
            with self.connection() as (conn, cursor):
                cursor.execute("DELETE FROM local_storage WHERE key = ?", (key,))
        """
        conn, cursor = self._open()
        try:
            yield conn, cursor
            if auto_commit:
                conn.commit()
        except Exception:
            conn.rollback()
            raise
        finally:
            cursor.close()
            conn.close()

    @contextmanager
    def read_connection(self) -> Generator[ConnectionPair, None, None]:
        """Yield (connection, cursor) for queries. Nothing is committed."""
        conn, cursor = self._open()
        try:
            yield conn, cursor
        finally:
            cursor.close()
            conn.close()
