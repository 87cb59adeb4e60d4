"""
Domain entities for the snake game engine.

This module contains the core game entities that are independent of
infrastructure concerns (storage, rendering, windowing).
"""

from .constants import (
    UP, DOWN, LEFT, RIGHT, VALID_MOVES, OPPOSITES, TILE_COUNT,
    SCORE_INCREMENT, HIGH_SCORE_KEY,
)
from .snake import Snake
from .game_state import GameState

__all__ = [
    'UP', 'DOWN', 'LEFT', 'RIGHT', 'VALID_MOVES', 'OPPOSITES', 'TILE_COUNT',
    'SCORE_INCREMENT', 'HIGH_SCORE_KEY',
    'Snake',
    'GameState',
]
