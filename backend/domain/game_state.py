"""
GameState entity - a snapshot of the game at a point in time.
"""

from typing import List, Tuple, Optional

from .constants import (
    INITIAL_SPEED_MS,
    START_DIRECTION,
    STATUS_OVER,
    STATUS_PAUSED,
    STATUS_READY,
    STATUS_RUNNING,
    TILE_COUNT,
)

STATUS_TEXT = {
    STATUS_READY: "Press SPACE to start",
    STATUS_RUNNING: "Playing",
    STATUS_PAUSED: "Paused",
}


def describe_status(status: str, score: int) -> str:
    """Human readable status line shown under the board."""
    if status == STATUS_OVER:
        return f"Game over! Score: {score}"
    return STATUS_TEXT[status]


class GameState:
    """
    A snapshot of the game at a specific point in time.

    Attributes:
        tick: how many moves have been applied (0-based)
        snake_positions: list of (x, y), head first
        food: (x, y) of the food, or None once the board is full
        direction: direction the snake is travelling
        score, high_score: current and best score
        speed_ms, speed_level: tick interval and its level
        status: 'ready', 'running', 'paused' or 'over'
        tile_count: board size in tiles per side
    """

    def __init__(
        self,
        tick: int,
        snake_positions: List[Tuple[int, int]],
        food: Optional[Tuple[int, int]],
        direction: str,
        score: int,
        high_score: int,
        speed_ms: int,
        speed_level: int,
        status: str,
        tile_count: int,
        death_reason: Optional[str] = None
    ):
        self.tick = tick
        self.snake_positions = snake_positions
        self.food = food
        self.direction = direction
        self.score = score
        self.high_score = high_score
        self.speed_ms = speed_ms
        self.speed_level = speed_level
        self.status = status
        self.tile_count = tile_count
        self.death_reason = death_reason

    @property
    def is_over(self) -> bool:
        return self.status == STATUS_OVER

    @property
    def status_text(self) -> str:
        return describe_status(self.status, self.score)

    def print_board(self) -> str:
        """
        Returns a string representation of the board with:
        . = empty space
        F = food
        H = snake head
        T = snake body/tail
        Row 0 is printed first, matching the on-screen orientation.
        """
        board = [['.' for _ in range(self.tile_count)] for _ in range(self.tile_count)]

        if self.food is not None:
            fx, fy = self.food
            board[fy][fx] = 'F'

        for pos_idx, (x, y) in enumerate(self.snake_positions):
            if not (0 <= x < self.tile_count and 0 <= y < self.tile_count):
                continue
            board[y][x] = 'H' if pos_idx == 0 else 'T'

        result = [f"{y:2d} {' '.join(board[y])}" for y in range(self.tile_count)]
        # Column labels use the last digit so wide boards stay aligned
        result.append("   " + " ".join(str(i % 10) for i in range(self.tile_count)))

        return "\n".join(result)

    def to_dict(self) -> dict:
        """JSON-friendly representation used for replays."""
        return {
            "tick": self.tick,
            "snake_positions": [list(p) for p in self.snake_positions],
            "food": list(self.food) if self.food is not None else None,
            "direction": self.direction,
            "score": self.score,
            "high_score": self.high_score,
            "speed_ms": self.speed_ms,
            "speed_level": self.speed_level,
            "status": self.status,
            "tile_count": self.tile_count,
            "death_reason": self.death_reason,
        }

    @classmethod
    def from_dict(cls, data: dict) -> "GameState":
        food = data.get("food")
        return cls(
            tick=data.get("tick", 0),
            snake_positions=[tuple(p) for p in data.get("snake_positions", [])],
            food=tuple(food) if food is not None else None,
            direction=data.get("direction", START_DIRECTION),
            score=data.get("score", 0),
            high_score=data.get("high_score", 0),
            speed_ms=data.get("speed_ms", INITIAL_SPEED_MS),
            speed_level=data.get("speed_level", 1),
            status=data.get("status", STATUS_READY),
            tile_count=data.get("tile_count", TILE_COUNT),
            death_reason=data.get("death_reason"),
        )

    def __repr__(self):
        return (
            f"<GameState tick={self.tick}, food={self.food}, "
            f"length={len(self.snake_positions)}, score={self.score}, status={self.status}>"
        )
