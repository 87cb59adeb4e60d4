"""
Data access layer for the snake game's local persistent storage.
"""

from .high_score import HighScoreStore, MemoryHighScoreStore
from .repositories import StorageRepository

__all__ = [
    'HighScoreStore',
    'MemoryHighScoreStore',
    'StorageRepository',
]
