"""
Base player interface for the game engine.
"""

import random
from typing import List, Optional

from domain.constants import DELTAS, OPPOSITES
from domain.game_state import GameState


class Player:
    """
    Base class/interface for autopilot logic.

    A player returns the next direction for the snake given the current
    game state. Autopilots drive headless runs and demo replays.
    """

    def __init__(self, rng: Optional[random.Random] = None):
        self.rng = rng or random.Random()

    def get_move(self, game_state: GameState) -> str:
        """
        Return a move direction given the current game state.

        Args:
            game_state: Current state of the game

        Returns:
            One of: "UP", "DOWN", "LEFT", "RIGHT"
        """
        raise NotImplementedError

    @staticmethod
    def safe_moves(game_state: GameState) -> List[str]:
        """
        Directions that neither leave the board nor hit the body.

        The reverse of the current direction is never offered since the
        engine would ignore it. The tail still counts as an obstacle because
        the engine checks collisions before the tail moves.
        """
        head_x, head_y = game_state.snake_positions[0]
        body = set(game_state.snake_positions)
        moves: List[str] = []
        for move, (dx, dy) in DELTAS.items():
            if move == OPPOSITES[game_state.direction]:
                continue
            new_x, new_y = head_x + dx, head_y + dy
            if not (0 <= new_x < game_state.tile_count and 0 <= new_y < game_state.tile_count):
                continue
            if (new_x, new_y) in body:
                continue
            moves.append(move)
        return moves
