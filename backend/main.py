import argparse
import json
import logging
import os
import random
import sqlite3
import time
import uuid
from datetime import datetime, timezone
from typing import Callable, Dict, List, Optional, Tuple

from dotenv import load_dotenv

from data_access import HighScoreStore, MemoryHighScoreStore
from domain.constants import (
    DELTAS,
    INITIAL_SPEED_MS,
    MIN_SPEED_MS,
    OPPOSITES,
    SCORE_INCREMENT,
    SPEED_LEVEL_SCORE_STEP,
    SPEED_STEP_MS,
    START_DIRECTION,
    START_POSITION,
    STATUS_OVER,
    STATUS_PAUSED,
    STATUS_READY,
    STATUS_RUNNING,
    TILE_COUNT,
    VALID_MOVES,
)
from domain.game_state import GameState, describe_status
from domain.snake import Snake

load_dotenv()

logger = logging.getLogger(__name__)

REPLAY_DIR = os.path.join(os.path.dirname(os.path.abspath(__file__)), "completed_games")

class SnakeGame:
    """
    Manages:
      - Board (tile_count x tile_count)
      - The snake and its queued direction
      - Food
      - Score, speed level and the persisted high score
      - Run status (ready / running / paused / over)
      - History for replay

    The engine never sleeps or draws; a client drives it by calling step()
    once per tick and redrawing from get_current_state().
    """

    def __init__(
        self,
        tile_count: int = TILE_COUNT,
        high_score_store=None,
        rng: Optional[random.Random] = None,
        on_speed_change: Optional[Callable[[int], None]] = None,
        game_id: Optional[str] = None,
        record_history: bool = False
    ):
        if tile_count <= START_POSITION[0] or tile_count <= START_POSITION[1]:
            raise ValueError(f"Board of {tile_count} tiles cannot hold the start position {START_POSITION}.")

        self.tile_count = tile_count
        self.high_score_store = high_score_store if high_score_store is not None else MemoryHighScoreStore()
        self.rng = rng or random.Random()
        self.on_speed_change = on_speed_change
        self.game_id = game_id or str(uuid.uuid4())
        self.start_time = time.time()

        self.high_score = self.high_score_store.load()

        self.record = record_history
        self.history: List[GameState] = []

        self._reset_state()

    def _reset_state(self):
        self.status = STATUS_READY
        self.snake = Snake([START_POSITION])
        self.direction = START_DIRECTION
        self.next_direction = START_DIRECTION
        self.score = 0
        self.speed_ms = INITIAL_SPEED_MS
        self.speed_level = 1
        self.tick = 0
        self.food: Optional[Tuple[int, int]] = self.generate_food()
        self.history = []
        if self.record:
            self.record_history()

    # -------------------------------------------------------------------
    # Controls
    # -------------------------------------------------------------------

    @property
    def running(self) -> bool:
        return self.status == STATUS_RUNNING

    @property
    def is_over(self) -> bool:
        return self.status == STATUS_OVER

    @property
    def status_text(self) -> str:
        return describe_status(self.status, self.score)

    def queue_direction(self, direction: str) -> bool:
        """
        Queue the direction for the next step.

        A direction opposite to the one currently travelled is ignored.
        Returns True when the direction was accepted.
        """
        if direction not in VALID_MOVES:
            raise ValueError(f"Invalid direction: {direction!r}")
        if direction == OPPOSITES[self.direction]:
            return False
        self.next_direction = direction
        return True

    def start(self):
        """Start (or resume) the game. A finished game is reset first."""
        if self.status == STATUS_OVER:
            self.reset()
        if self.status != STATUS_RUNNING:
            self.status = STATUS_RUNNING
            logger.info("Game %s started", self.game_id)

    def pause(self):
        if self.status == STATUS_RUNNING:
            self.status = STATUS_PAUSED
            logger.info("Game %s paused at tick %d", self.game_id, self.tick)

    def toggle_pause(self):
        if self.status == STATUS_RUNNING:
            self.pause()
        else:
            self.start()

    def reset(self):
        previous_speed = self.speed_ms
        self._reset_state()
        self.update_score()
        if previous_speed != self.speed_ms and self.on_speed_change:
            self.on_speed_change(self.speed_ms)

    # -------------------------------------------------------------------
    # Simulation
    # -------------------------------------------------------------------

    def generate_food(self) -> Optional[Tuple[int, int]]:
        """
        Return a random cell not occupied by the snake.

        Returns None when the snake fills the whole board.
        """
        if len(self.snake) >= self.tile_count * self.tile_count:
            return None
        while True:
            cell = (
                self.rng.randrange(self.tile_count),
                self.rng.randrange(self.tile_count)
            )
            if not self.snake.occupies(cell):
                return cell

    def next_head(self, direction: str) -> Tuple[int, int]:
        dx, dy = DELTAS[direction]
        hx, hy = self.snake.head
        return hx + dx, hy + dy

    def in_bounds(self, cell: Tuple[int, int]) -> bool:
        x, y = cell
        return 0 <= x < self.tile_count and 0 <= y < self.tile_count

    def step(self) -> bool:
        """
        Apply one move:
          1) Take the queued direction
          2) Compute the new head
          3) Wall or body collision ends the game (body left untouched)
          4) Grow on food (score, new food, speed, then high score), else drop the tail

        Only a running game moves. Returns True if the snake is still alive
        afterwards.
        """
        if self.status == STATUS_OVER:
            return False
        if self.status != STATUS_RUNNING:
            return True

        self.direction = self.next_direction
        head = self.next_head(self.direction)

        if not self.in_bounds(head):
            self.game_over("wall")
            return False

        # The tail has not moved yet, so it counts as an obstacle
        if self.snake.occupies(head):
            self.game_over("self")
            return False

        self.snake.positions.appendleft(head)
        self.tick += 1

        if head == self.food:
            self.score += SCORE_INCREMENT
            self.food = self.generate_food()

            if self.score % SPEED_LEVEL_SCORE_STEP == 0:
                self.increase_speed()

            self.update_score()
            if self.food is None:
                logger.info("Board full after %d ticks", self.tick)
                self.game_over("board_full")
                return False
        else:
            self.snake.positions.pop()

        if self.record:
            self.record_history()
        return True

    def increase_speed(self):
        self.speed_level += 1
        self.speed_ms = max(MIN_SPEED_MS, self.speed_ms - SPEED_STEP_MS)
        logger.info("Speed level %d (%d ms per tick)", self.speed_level, self.speed_ms)
        if self.on_speed_change:
            self.on_speed_change(self.speed_ms)

    def update_score(self):
        """
        Persist the high score when the running score beats it.

        A failed write is logged; the game keeps the new high score in memory.
        """
        if self.score > self.high_score:
            self.high_score = self.score
            try:
                self.high_score_store.save(self.high_score)
            except (OSError, sqlite3.Error) as e:
                logger.error(f"Could not save high score {self.high_score}: {e}")

    def game_over(self, reason: str):
        self.status = STATUS_OVER
        self.snake.alive = False
        self.snake.death_reason = reason
        logger.info("Game %s over (%s). Score: %d", self.game_id, reason, self.score)
        if self.record:
            self.record_history()

    # -------------------------------------------------------------------
    # Snapshots and replays
    # -------------------------------------------------------------------

    def get_current_state(self) -> GameState:
        """
        Return a snapshot of the current board as a GameState.
        """
        return GameState(
            tick=self.tick,
            snake_positions=list(self.snake.positions),
            food=self.food,
            direction=self.direction,
            score=self.score,
            high_score=self.high_score,
            speed_ms=self.speed_ms,
            speed_level=self.speed_level,
            status=self.status,
            tile_count=self.tile_count,
            death_reason=self.snake.death_reason
        )

    def record_history(self):
        self.history.append(self.get_current_state())

    def print_board(self):
        print("\n" + self.get_current_state().print_board() + "\n")

    def serialize_history(self) -> Dict:
        return {
            "metadata": {
                "game_id": self.game_id,
                "start_time": datetime.fromtimestamp(self.start_time, tz=timezone.utc).isoformat(),
                "end_time": datetime.now(timezone.utc).isoformat(),
                "tile_count": self.tile_count,
                "final_score": self.score,
                "high_score": self.high_score,
                "death_reason": self.snake.death_reason,
                "ticks": self.tick,
            },
            "frames": [state.to_dict() for state in self.history]
        }

    def save_history_to_json(self, output_dir: str = REPLAY_DIR, filename: Optional[str] = None) -> str:
        if filename is None:
            filename = f"snake_game_{self.game_id}.json"
        os.makedirs(output_dir, exist_ok=True)
        path = os.path.join(output_dir, filename)
        with open(path, "w", encoding="utf-8") as f:
            json.dump(self.serialize_history(), f, indent=2)
        logger.info("Replay written to %s", path)
        return path


# -------------------------------
# Headless simulation
# -------------------------------

def run_simulation(player, game: SnakeGame, max_ticks: int = 2000) -> Dict:
    """
    Let an autopilot player drive a game until it ends or max_ticks is hit.

    Returns:
        A dictionary summarizing the run (game_id, score, ticks, death_reason).
    """
    game.start()
    while game.running and game.tick < max_ticks:
        game.queue_direction(player.get_move(game.get_current_state()))
        game.step()

    if game.running:
        game.pause()
        logger.info("Stopped game %s after %d ticks", game.game_id, game.tick)

    return {
        "game_id": game.game_id,
        "score": game.score,
        "high_score": game.high_score,
        "ticks": game.tick,
        "death_reason": game.snake.death_reason
    }


def main():
    from players import AVAILABLE_VARIANTS, get_player_class

    parser = argparse.ArgumentParser(
        description="Run a headless snake game driven by an autopilot player."
    )
    parser.add_argument("--player", type=str, default="greedy", choices=AVAILABLE_VARIANTS,
                        help="Autopilot that steers the snake")
    parser.add_argument("--tiles", type=int, default=TILE_COUNT,
                        help="Tiles per board side")
    parser.add_argument("--max-ticks", type=int, default=2000,
                        help="Stop after this many moves")
    parser.add_argument("--seed", type=int, default=None,
                        help="Random seed for food placement and the autopilot")
    parser.add_argument("--output-dir", type=str, default=REPLAY_DIR,
                        help="Directory for the JSON replay")
    parser.add_argument("--video", action="store_true",
                        help="Also render the replay to MP4")
    parser.add_argument("--persist-high-score", action="store_true",
                        help="Read and update the stored high score")
    parser.add_argument("--show-board", action="store_true",
                        help="Print the final board")

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    video_generator = None
    if args.video:
        from services.video_generator import SnakeVideoGenerator

        video_generator = SnakeVideoGenerator()
        try:
            video_generator.renderer.cell_size(args.tiles)
        except ValueError as e:
            parser.error(str(e))

    rng = random.Random(args.seed)
    store = HighScoreStore() if args.persist_high_score else MemoryHighScoreStore()
    game = SnakeGame(tile_count=args.tiles, high_score_store=store, rng=rng, record_history=True)
    player = get_player_class(args.player)(rng=rng)

    result = run_simulation(player, game, max_ticks=args.max_ticks)
    if args.show_board:
        game.print_board()

    replay_path = game.save_history_to_json(output_dir=args.output_dir)
    result["replay_path"] = replay_path

    if video_generator is not None:
        video_path = os.path.join(args.output_dir, f"{game.game_id}_replay.mp4")
        result["video_path"] = video_generator.generate_video(
            game.game_id,
            replay_data=game.serialize_history(),
            output_path=video_path
        )

    print("\nSimulation Result Summary:")
    print(json.dumps(result, indent=2))


if __name__ == "__main__":
    main()
