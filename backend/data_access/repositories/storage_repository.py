"""
Local storage repository - a persistent string key/value table.
"""

from typing import Optional

from .base import BaseRepository


class StorageRepository(BaseRepository):
    """
    Repository for the local_storage table.

    Mirrors the browser localStorage contract: values are strings, a missing
    key reads as None.
    """

    def get_item(self, key: str) -> Optional[str]:
        with self.read_connection() as (conn, cursor):
            cursor.execute("SELECT value FROM local_storage WHERE key = ?", (key,))
            row = cursor.fetchone()
            return row['value'] if row is not None else None

    def set_item(self, key: str, value) -> None:
        with self.connection() as (conn, cursor):
            cursor.execute(
                """
                INSERT INTO local_storage (key, value, updated_at)
                VALUES (?, ?, CURRENT_TIMESTAMP)
                ON CONFLICT(key) DO UPDATE SET
                    value = excluded.value,
                    updated_at = CURRENT_TIMESTAMP
                """,
                (key, str(value))
            )

    def remove_item(self, key: str) -> bool:
        """Delete a key. Returns True when a row was removed."""
        with self.connection() as (conn, cursor):
            cursor.execute("DELETE FROM local_storage WHERE key = ?", (key,))
            return cursor.rowcount > 0
