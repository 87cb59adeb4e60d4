"""
Greedy player implementation - heads for the food along safe moves.
"""

from domain.constants import DELTAS
from domain.game_state import GameState
from .base import Player


class GreedyPlayer(Player):
    """
    Picks the safe move that brings the head closest (Manhattan distance)
    to the food. Ties are broken at random.
    """

    def get_move(self, game_state: GameState) -> str:
        valid_moves = self.safe_moves(game_state)
        if not valid_moves:
            return game_state.direction
        if game_state.food is None:
            return self.rng.choice(valid_moves)

        head_x, head_y = game_state.snake_positions[0]
        food_x, food_y = game_state.food

        def distance(move: str) -> int:
            dx, dy = DELTAS[move]
            return abs(head_x + dx - food_x) + abs(head_y + dy - food_y)

        best = min(distance(m) for m in valid_moves)
        return self.rng.choice([m for m in valid_moves if distance(m) == best])
