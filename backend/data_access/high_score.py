"""
High score persistence.

The high score is a single integer kept under HIGH_SCORE_KEY in local
storage. It is read once at startup and written whenever the running score
beats it.
"""

import logging
from typing import Optional

from database import init_database
from domain.constants import HIGH_SCORE_KEY
from .repositories import StorageRepository

logger = logging.getLogger(__name__)


class HighScoreStore:
    """Loads and saves the persisted high score."""

    def __init__(
        self,
        repository: Optional[StorageRepository] = None,
        key: str = HIGH_SCORE_KEY,
        db_path: Optional[str] = None
    ):
        if repository is None:
            init_database(db_path)
            repository = StorageRepository(db_path)
        self.repository = repository
        self.key = key

    def load(self) -> int:
        """Return the stored high score, 0 when absent or unreadable."""
        raw = self.repository.get_item(self.key)
        if raw is None:
            return 0
        try:
            return max(0, int(float(raw)))
        except (ValueError, OverflowError):
            logger.warning("Ignoring malformed high score %r under key %s", raw, self.key)
            return 0

    def save(self, score: int) -> None:
        self.repository.set_item(self.key, int(score))
        logger.info("New high score saved: %d", score)

    def clear(self) -> bool:
        return self.repository.remove_item(self.key)


class MemoryHighScoreStore:
    """Non-persistent store for headless runs and tests."""

    def __init__(self, initial: int = 0):
        self.value = initial

    def load(self) -> int:
        return self.value

    def save(self, score: int) -> None:
        self.value = int(score)

    def clear(self) -> bool:
        had_value = self.value != 0
        self.value = 0
        return had_value
