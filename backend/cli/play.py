#!/usr/bin/env python3
"""
Play snake in a desktop window.

Controls: arrow keys or WASD to steer, SPACE to start/pause, ESC to quit.
The on-screen buttons and touch swipes do the same. The high score is kept
in the local SQLite store (SNAKE_DB_PATH).
"""

import argparse
import logging
import os
import sys

sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))

from dotenv import load_dotenv  # noqa: E402

from client import SnakeClient  # noqa: E402
from data_access import HighScoreStore  # noqa: E402
from domain.constants import TILE_COUNT  # noqa: E402
from main import SnakeGame  # noqa: E402
from services.frame_renderer import DEFAULT_CANVAS_SIZE, FrameRenderer  # noqa: E402


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(description="Play snake")
    parser.add_argument("--size", type=int, default=DEFAULT_CANVAS_SIZE,
                        help="Board size in pixels")
    parser.add_argument("--tiles", type=int, default=TILE_COUNT,
                        help="Tiles per board side")
    parser.add_argument("--no-glow", action="store_true",
                        help="Skip the glow effect on slow machines")
    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format="%(asctime)s [%(levelname)s] %(message)s",
    )

    renderer = FrameRenderer(canvas_size=args.size, glow=not args.no_glow)
    try:
        renderer.cell_size(args.tiles)
    except ValueError as e:
        parser.error(str(e))

    game = SnakeGame(tile_count=args.tiles, high_score_store=HighScoreStore())
    SnakeClient(game, renderer).run()


if __name__ == "__main__":
    main()
