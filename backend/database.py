"""
Database configuration and schema management for the snake game.

The game keeps its persistent state (currently only the high score) in a
small SQLite key/value table that plays the role of browser local storage.
"""

import logging
import os
import sqlite3
from pathlib import Path
from typing import Optional

logger = logging.getLogger(__name__)


def get_database_path() -> str:
    """
    Determine the database path.

    Returns:
        Path to the SQLite database file.
        - SNAKE_DB_PATH when set
        - backend/snake.db otherwise
    """
    env_path = os.getenv('SNAKE_DB_PATH')
    if env_path:
        db_path = env_path
        parent = os.path.dirname(db_path)
        if parent:
            os.makedirs(parent, exist_ok=True)
    else:
        backend_dir = Path(__file__).parent
        db_path = str(backend_dir / 'snake.db')

    return db_path


def get_connection(db_path: Optional[str] = None) -> sqlite3.Connection:
    """
    Get a database connection with appropriate settings.

    Args:
        db_path: Explicit SQLite file; get_database_path() when omitted.

    Returns:
        sqlite3.Connection: Database connection with row factory enabled.
    """
    conn = sqlite3.connect(db_path or get_database_path())
    conn.row_factory = sqlite3.Row  # Enable column access by name
    return conn


def init_database(db_path: Optional[str] = None) -> None:
    """
    Initialize the database schema.
    Safe to call multiple times (uses IF NOT EXISTS).
    """
    conn = get_connection(db_path)
    cursor = conn.cursor()

    try:
        cursor.execute("""
            CREATE TABLE IF NOT EXISTS local_storage (
                key TEXT PRIMARY KEY,
                value TEXT NOT NULL,
                updated_at TIMESTAMP DEFAULT CURRENT_TIMESTAMP
            )
        """)
        conn.commit()
        logger.debug("Local storage schema ready at %s", db_path or get_database_path())

    except Exception as e:
        conn.rollback()
        logger.error(f"Error initializing database: {e}")
        raise
    finally:
        conn.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO)
    init_database()
    print(f"Database ready at: {get_database_path()}")
