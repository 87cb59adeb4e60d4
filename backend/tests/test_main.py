"""
Tests for main.py - Snake game engine.

These tests pin down movement, collision, scoring, speed levels and high
score persistence of the engine.
"""

import pytest
import random
import sqlite3
import sys
import os
from collections import deque
from unittest.mock import Mock

# Add backend to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from main import SnakeGame, main, run_simulation
from data_access import HighScoreStore, MemoryHighScoreStore
from domain import Snake, GameState, UP, DOWN, LEFT, RIGHT, VALID_MOVES, SCORE_INCREMENT
from domain.constants import INITIAL_SPEED_MS, MIN_SPEED_MS
from players import GreedyPlayer


def make_game(**kwargs):
    kwargs.setdefault("rng", random.Random(1234))
    return SnakeGame(**kwargs)


def place(game, positions, direction, food):
    """Put the snake and food in a known configuration and start the game."""
    game.snake = Snake(positions)
    game.direction = direction
    game.next_direction = direction
    game.food = food
    game.start()


class TestSnake:
    """Tests for the Snake class."""

    def test_snake_initialization_with_single_position(self):
        """Snake initializes with a single position."""
        snake = Snake([(5, 5)])
        assert list(snake.positions) == [(5, 5)]
        assert snake.alive is True
        assert snake.death_reason is None

    def test_snake_head_property(self):
        """Snake.head returns the first position (head)."""
        snake = Snake([(5, 5), (4, 5), (3, 5)])
        assert snake.head == (5, 5)

    def test_snake_positions_is_deque(self):
        """Snake positions are stored as a deque for efficient operations."""
        snake = Snake([(5, 5)])
        assert isinstance(snake.positions, deque)

    def test_snake_occupies(self):
        snake = Snake([(5, 5), (4, 5)])
        assert snake.occupies((4, 5))
        assert not snake.occupies((6, 5))
        assert len(snake) == 2


class TestGameState:
    """Tests for the GameState class."""

    def make_state(self, **overrides):
        values = dict(
            tick=3,
            snake_positions=[(5, 5), (4, 5)],
            food=(2, 2),
            direction=RIGHT,
            score=20,
            high_score=40,
            speed_ms=150,
            speed_level=1,
            status="running",
            tile_count=10
        )
        values.update(overrides)
        return GameState(**values)

    def test_print_board_marks_head_body_and_food(self):
        """print_board shows H for the head, T for the body and F for food."""
        board = self.make_state().print_board()
        lines = board.split("\n")

        # Row 5 (printed sixth) holds the snake: body at x=4, head at x=5
        row5 = lines[5].split()
        assert row5[0] == "5"
        assert row5[1 + 4] == "T"
        assert row5[1 + 5] == "H"
        assert lines[2].split()[1 + 2] == "F"

    def test_print_board_without_food(self):
        """A full board has no food marker."""
        board = self.make_state(food=None).print_board()
        assert "F" not in board

    def test_status_text(self):
        assert self.make_state(status="ready").status_text == "Press SPACE to start"
        assert self.make_state(status="paused").status_text == "Paused"
        assert self.make_state(status="over", score=70).status_text == "Game over! Score: 70"

    def test_dict_conversion_keeps_fields(self):
        """to_dict/from_dict keep coordinates as tuples on the way back."""
        state = GameState.from_dict(self.make_state().to_dict())
        assert state.snake_positions == [(5, 5), (4, 5)]
        assert state.food == (2, 2)
        assert state.score == 20
        assert state.status == "running"

    def test_from_dict_defaults_match_new_game(self):
        state = GameState.from_dict({"snake_positions": [[10, 10]]})
        fresh = make_game().get_current_state()

        assert state.direction == fresh.direction
        assert state.speed_ms == fresh.speed_ms
        assert state.status == fresh.status
        assert state.tile_count == fresh.tile_count
        assert state.food is None

    def test_repr(self):
        repr_str = repr(self.make_state())
        assert "tick=3" in repr_str
        assert "score=20" in repr_str


class TestSnakeGameInitialization:
    """Tests for SnakeGame setup."""

    def test_initial_state(self):
        game = make_game()

        assert list(game.snake.positions) == [(10, 10)]
        assert game.direction == RIGHT
        assert game.next_direction == RIGHT
        assert game.score == 0
        assert game.speed_ms == INITIAL_SPEED_MS
        assert game.speed_level == 1
        assert game.status == "ready"
        assert game.running is False

    def test_initial_food_is_on_board_and_off_snake(self):
        for seed in range(20):
            game = make_game(rng=random.Random(seed))
            x, y = game.food
            assert 0 <= x < game.tile_count and 0 <= y < game.tile_count
            assert game.food != (10, 10)

    def test_high_score_loaded_from_store(self):
        game = make_game(high_score_store=MemoryHighScoreStore(120))
        assert game.high_score == 120

    def test_board_too_small_rejected(self):
        with pytest.raises(ValueError):
            SnakeGame(tile_count=8)

    def test_game_id_generated(self):
        game = make_game()
        assert game.game_id is not None
        assert len(game.game_id) == 36


class TestDirectionQueue:
    """Tests for queue_direction."""

    def test_reverse_direction_is_ignored(self):
        game = make_game()
        assert game.queue_direction(LEFT) is False
        assert game.next_direction == RIGHT

    def test_perpendicular_direction_is_queued(self):
        game = make_game()
        assert game.queue_direction(UP) is True
        assert game.next_direction == UP

    def test_reversal_is_checked_against_current_direction(self):
        """Only the direction being travelled blocks a reversal, not the queued one."""
        game = make_game()
        game.queue_direction(UP)
        assert game.queue_direction(DOWN) is True
        assert game.next_direction == DOWN

    def test_invalid_direction_raises(self):
        game = make_game()
        with pytest.raises(ValueError):
            game.queue_direction("SIDEWAYS")


class TestMovement:
    """Tests for step()."""

    def test_step_moves_head_and_drops_tail(self):
        game = make_game()
        place(game, [(5, 5), (4, 5), (3, 5)], RIGHT, food=(0, 0))

        assert game.step() is True
        assert list(game.snake.positions) == [(6, 5), (5, 5), (4, 5)]
        assert game.tick == 1

    def test_step_applies_queued_direction(self):
        game = make_game()
        place(game, [(5, 5)], RIGHT, food=(0, 0))
        game.queue_direction(UP)

        game.step()

        assert game.snake.head == (5, 4)
        assert game.direction == UP

    def test_y_grows_downward(self):
        game = make_game()
        place(game, [(5, 5)], RIGHT, food=(0, 0))
        game.queue_direction(DOWN)
        game.step()
        assert game.snake.head == (5, 6)

    def test_ready_game_does_not_move(self):
        game = make_game()

        assert game.step() is True
        assert game.snake.head == (10, 10)
        assert game.tick == 0
        assert game.status == "ready"

    def test_paused_game_does_not_move(self):
        game = make_game()
        place(game, [(5, 5)], RIGHT, food=(0, 0))
        game.pause()

        assert game.step() is True
        assert game.snake.head == (5, 5)
        assert game.tick == 0


class TestCollisions:
    """Boundary and self collisions end the game."""

    @pytest.mark.parametrize("head,direction", [
        ((19, 5), RIGHT),
        ((0, 5), LEFT),
        ((5, 0), UP),
        ((5, 19), DOWN),
    ])
    def test_wall_collision_ends_game(self, head, direction):
        game = make_game()
        place(game, [head], direction, food=(10, 10))

        assert game.step() is False
        assert game.status == "over"
        assert game.snake.alive is False
        assert game.snake.death_reason == "wall"
        assert list(game.snake.positions) == [head]

    def test_self_collision_ends_game(self):
        game = make_game()
        body = [(5, 5), (6, 5), (6, 6), (5, 6), (4, 6)]
        place(game, body, LEFT, food=(0, 0))
        game.queue_direction(DOWN)

        assert game.step() is False
        assert game.snake.death_reason == "self"
        assert list(game.snake.positions) == body

    def test_tail_cell_counts_as_collision(self):
        """The tail has not moved yet when the head arrives, so it is fatal."""
        game = make_game()
        place(game, [(5, 5), (5, 6), (6, 6), (6, 5)], UP, food=(0, 0))
        game.queue_direction(RIGHT)

        assert game.step() is False
        assert game.snake.death_reason == "self"

    def test_no_movement_after_game_over(self):
        game = make_game()
        place(game, [(19, 5), (18, 5)], RIGHT, food=(0, 0))
        game.step()
        positions = list(game.snake.positions)

        game.queue_direction(UP)
        assert game.step() is False
        assert list(game.snake.positions) == positions
        assert game.tick == 0

    def test_game_over_status_text(self):
        game = make_game()
        place(game, [(19, 5)], RIGHT, food=(0, 0))
        game.score = 30
        game.step()
        assert game.status_text == "Game over! Score: 30"


class TestEating:
    """Eating food grows the snake and scores."""

    def test_eating_scores_and_grows(self):
        game = make_game()
        place(game, [(5, 5), (4, 5)], RIGHT, food=(6, 5))

        game.step()

        assert game.score == SCORE_INCREMENT
        assert list(game.snake.positions) == [(6, 5), (5, 5), (4, 5)]

    def test_new_food_is_not_on_snake(self):
        for seed in range(30):
            game = make_game(rng=random.Random(seed))
            place(game, [(5, 5), (4, 5), (3, 5), (2, 5)], RIGHT, food=(6, 5))
            game.step()
            assert game.food is not None
            assert game.food not in game.snake.positions

    def test_high_score_saved_when_beaten(self):
        store = MemoryHighScoreStore(0)
        game = make_game(high_score_store=store)
        place(game, [(5, 5)], RIGHT, food=(6, 5))

        game.step()

        assert game.high_score == SCORE_INCREMENT
        assert store.value == SCORE_INCREMENT

    def test_high_score_not_lowered(self):
        store = MemoryHighScoreStore(100)
        store.save = Mock()
        game = make_game(high_score_store=store)
        place(game, [(5, 5)], RIGHT, food=(6, 5))

        game.step()

        assert game.high_score == 100
        store.save.assert_not_called()

    @pytest.mark.parametrize("error", [OSError("read-only file system"), sqlite3.OperationalError("database is locked")])
    def test_failed_high_score_save_keeps_game_consistent(self, error):
        store = MemoryHighScoreStore(0)
        store.save = Mock(side_effect=error)
        game = make_game(high_score_store=store)
        place(game, [(10, 10)], RIGHT, food=(11, 10))

        assert game.step() is True

        assert game.running is True
        assert game.score == SCORE_INCREMENT
        assert game.high_score == SCORE_INCREMENT
        assert list(game.snake.positions) == [(11, 10), (10, 10)]
        assert game.food is not None
        assert game.food not in game.snake.positions
        store.save.assert_called_once_with(SCORE_INCREMENT)

    def test_board_full_ends_game(self):
        """Eating the last free cell leaves nowhere for food: the game ends."""
        tiles = 11
        path = []
        for y in range(tiles):
            xs = range(tiles) if y % 2 == 0 else range(tiles - 1, -1, -1)
            path.extend((x, y) for x in xs)

        game = make_game(tile_count=tiles)
        place(game, list(reversed(path[:-1])), RIGHT, food=path[-1])

        assert game.step() is False
        assert game.food is None
        assert game.snake.death_reason == "board_full"
        assert len(game.snake) == tiles * tiles

    def test_generate_food_on_full_board(self):
        tiles = 11
        game = make_game(tile_count=tiles)
        game.snake = Snake([(x, y) for y in range(tiles) for x in range(tiles)])
        assert game.generate_food() is None


class TestSpeed:
    """Speed levels follow the score."""

    def test_speed_increases_every_fifty_points(self):
        on_speed_change = Mock()
        game = make_game(on_speed_change=on_speed_change)
        place(game, [(5, 5)], RIGHT, food=(6, 5))
        game.score = 40

        game.step()

        assert game.score == 50
        assert game.speed_level == 2
        assert game.speed_ms == INITIAL_SPEED_MS - 20
        on_speed_change.assert_called_once_with(INITIAL_SPEED_MS - 20)

    def test_speed_unchanged_between_levels(self):
        game = make_game()
        place(game, [(5, 5)], RIGHT, food=(6, 5))
        game.score = 20

        game.step()

        assert game.speed_level == 1
        assert game.speed_ms == INITIAL_SPEED_MS

    def test_speed_has_a_floor(self):
        game = make_game()
        game.speed_ms = 60
        game.increase_speed()
        assert game.speed_ms == MIN_SPEED_MS
        game.increase_speed()
        assert game.speed_ms == MIN_SPEED_MS
        assert game.speed_level == 3


class TestControls:
    """start / pause / reset."""

    def test_start_and_toggle_pause(self):
        game = make_game()
        game.start()
        assert game.running is True

        game.toggle_pause()
        assert game.status == "paused"
        assert game.status_text == "Paused"

        game.toggle_pause()
        assert game.running is True

    def test_reset_restores_initial_state(self):
        on_speed_change = Mock()
        game = make_game(on_speed_change=on_speed_change)
        game.start()
        place(game, [(5, 5), (4, 5)], UP, food=(0, 0))
        game.score = 90
        game.speed_ms = 110
        game.speed_level = 3

        game.reset()

        assert list(game.snake.positions) == [(10, 10)]
        assert game.direction == RIGHT
        assert game.score == 0
        assert game.speed_ms == INITIAL_SPEED_MS
        assert game.speed_level == 1
        assert game.status == "ready"
        on_speed_change.assert_called_once_with(INITIAL_SPEED_MS)

    def test_start_after_game_over_begins_fresh_game(self):
        game = make_game()
        place(game, [(19, 5)], RIGHT, food=(0, 0))
        game.score = 30
        game.step()
        assert game.is_over

        game.start()

        assert game.running is True
        assert game.score == 0
        assert list(game.snake.positions) == [(10, 10)]
        assert game.snake.alive is True


class TestHighScorePersistence:
    """The high score survives a restart."""

    def test_high_score_persists_across_games(self, tmp_path, monkeypatch):
        monkeypatch.setenv("SNAKE_DB_PATH", str(tmp_path / "snake.db"))

        first = make_game(high_score_store=HighScoreStore())
        place(first, [(5, 5)], RIGHT, food=(6, 5))
        first.step()
        assert first.high_score == SCORE_INCREMENT

        second = make_game(high_score_store=HighScoreStore())
        assert second.high_score == SCORE_INCREMENT


class TestHistory:
    """Replay recording."""

    def test_history_records_every_step(self):
        game = make_game(record_history=True)
        place(game, [(5, 5)], RIGHT, food=(0, 0))
        game.step()
        game.step()

        data = game.serialize_history()

        assert [frame["tick"] for frame in data["frames"]] == [0, 1, 2]
        assert data["frames"][-1]["snake_positions"] == [[7, 5]]
        assert data["metadata"]["game_id"] == game.game_id
        assert data["metadata"]["ticks"] == 2

    def test_history_records_game_over(self):
        game = make_game(record_history=True)
        place(game, [(19, 5)], RIGHT, food=(0, 0))
        game.step()

        data = game.serialize_history()
        assert data["frames"][-1]["status"] == "over"
        assert data["metadata"]["death_reason"] == "wall"

    def test_save_history_to_json(self, tmp_path):
        game = make_game(record_history=True)
        path = game.save_history_to_json(output_dir=str(tmp_path))
        assert os.path.basename(path) == f"snake_game_{game.game_id}.json"
        assert os.path.exists(path)


class TestRunSimulation:
    """Headless runs driven by an autopilot."""

    def test_simulation_stops_at_max_ticks_or_death(self):
        rng = random.Random(7)
        game = make_game(rng=rng)
        result = run_simulation(GreedyPlayer(rng=rng), game, max_ticks=40)

        assert result["game_id"] == game.game_id
        assert result["ticks"] <= 40
        assert game.running is False
        assert result["score"] % SCORE_INCREMENT == 0

    def test_simulation_moves_are_valid(self):
        rng = random.Random(3)
        game = make_game(rng=rng)
        player = GreedyPlayer(rng=rng)
        game.start()
        for _ in range(10):
            move = player.get_move(game.get_current_state())
            assert move in VALID_MOVES
            game.queue_direction(move)
            game.step()


class TestSimulationCli:
    """python main.py ..."""

    def test_writes_replay(self, tmp_path, monkeypatch, capsys):
        monkeypatch.setattr(sys, "argv", [
            "main.py", "--tiles", "12", "--max-ticks", "5", "--seed", "1", "--output-dir", str(tmp_path)
        ])

        main()

        replays = list(tmp_path.glob("snake_game_*.json"))
        assert len(replays) == 1
        assert "Simulation Result Summary" in capsys.readouterr().out

    def test_video_rejects_board_too_large_for_canvas(self, tmp_path, monkeypatch):
        monkeypatch.setattr(sys, "argv", [
            "main.py", "--tiles", "500", "--video", "--output-dir", str(tmp_path)
        ])

        with pytest.raises(SystemExit) as exc_info:
            main()

        assert exc_info.value.code == 2
        assert list(tmp_path.iterdir()) == []
