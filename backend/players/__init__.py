"""
Autopilot players for the snake game.

Players pick the next direction from a GameState snapshot; they drive
headless simulations and demo replays.
"""

from .base import Player
from .random_player import RandomPlayer
from .greedy_player import GreedyPlayer
from .variant_registry import get_player_class, list_variants, AVAILABLE_VARIANTS

__all__ = [
    'Player',
    'RandomPlayer',
    'GreedyPlayer',
    'get_player_class',
    'list_variants',
    'AVAILABLE_VARIANTS',
]
