#!/usr/bin/env python3
"""
Render snake replays to MP4.

Usage:
    python generate_video.py <game_id>
    python generate_video.py --local <path_to_replay.json>
    python generate_video.py --all [--overwrite] [--limit N]

Examples:
    # Replay saved by main.py under completed_games/
    python generate_video.py 3f2a9c1e-...

    # Any replay file, bigger board and slower playback
    python generate_video.py --local ./snake_game_xyz.json --size 600 --fps 5

    # Every replay in completed_games/ that has no video yet
    python generate_video.py --all
"""

import os
import sys
import json
import argparse
import logging
from pathlib import Path
from typing import Dict, List, Optional

sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv  # noqa: E402

from main import REPLAY_DIR  # noqa: E402
from services.frame_renderer import DEFAULT_CANVAS_SIZE  # noqa: E402
from services.video_generator import (  # noqa: E402
    DEFAULT_FPS,
    SnakeVideoGenerator,
    get_video_local_path,
)

logger = logging.getLogger(__name__)

REPLAY_PREFIX = "snake_game_"


def extract_game_id_from_filename(file_path: str) -> str:
    """snake_game_<game_id>.json -> <game_id>; other names keep their stem."""
    stem = Path(file_path).stem
    if stem.startswith(REPLAY_PREFIX):
        return stem[len(REPLAY_PREFIX):]
    return stem


def load_local_replay(file_path: str) -> Dict:
    if not os.path.exists(file_path):
        raise FileNotFoundError(f"Replay file not found: {file_path}")

    with open(file_path, 'r', encoding='utf-8') as f:
        replay_data = json.load(f)

    logger.info(f"Loaded {file_path} with {len(replay_data.get('frames', []))} frames")
    return replay_data


def find_pending_replays(replay_dir: str, overwrite: bool = False) -> List[Path]:
    """Replay files in replay_dir, skipping those that already have a video."""
    pending = []
    for path in sorted(Path(replay_dir).glob(f"{REPLAY_PREFIX}*.json")):
        video_path = os.path.join(replay_dir, f"{extract_game_id_from_filename(str(path))}_replay.mp4")
        if overwrite or not os.path.exists(video_path):
            pending.append(path)
    return pending


def render_replay(generator: SnakeVideoGenerator, file_path: str, output: Optional[str] = None) -> str:
    game_id = extract_game_id_from_filename(file_path)
    if output is None:
        output = os.path.join(os.path.dirname(file_path) or ".", f"{game_id}_replay.mp4")
    return generator.generate_video(
        game_id=game_id,
        replay_data=load_local_replay(file_path),
        output_path=output
    )


def render_all(generator: SnakeVideoGenerator, replay_dir: str, overwrite: bool = False,
               limit: Optional[int] = None) -> Dict[str, int]:
    """Render every pending replay. A failed replay is logged and counted, the rest still run."""
    pending = find_pending_replays(replay_dir, overwrite=overwrite)
    if limit is not None:
        pending = pending[:limit]

    counts = {"ok": 0, "failed": 0}
    logger.info(f"{len(pending)} replay(s) to render in {replay_dir}")
    for path in pending:
        try:
            render_replay(generator, str(path))
            counts["ok"] += 1
        except (OSError, ValueError) as e:
            logger.error(f"Failed to render {path.name}: {e}")
            counts["failed"] += 1
    return counts


def main():
    load_dotenv()

    parser = argparse.ArgumentParser(
        description='Render snake replays to MP4',
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=__doc__
    )

    input_group = parser.add_mutually_exclusive_group(required=True)
    input_group.add_argument('game_id', nargs='?',
                             help='Game ID of a replay in completed_games/')
    input_group.add_argument('--local', type=str,
                             help='Path to a replay JSON file')
    input_group.add_argument('--all', action='store_true',
                             help='Render every replay in --replay-dir without a video')

    parser.add_argument('--output', '-o', type=str,
                        help='Output file for a single replay (default: next to the replay)')
    parser.add_argument('--replay-dir', type=str, default=REPLAY_DIR,
                        help='Directory scanned by --all')
    parser.add_argument('--overwrite', action='store_true',
                        help='With --all, re-render replays that already have a video')
    parser.add_argument('--limit', type=int,
                        help='With --all, render at most this many replays')
    parser.add_argument('--fps', type=int, default=DEFAULT_FPS,
                        help=f'Frames per second (default: {DEFAULT_FPS})')
    parser.add_argument('--size', type=int, default=DEFAULT_CANVAS_SIZE,
                        help=f'Board size in pixels (default: {DEFAULT_CANVAS_SIZE})')

    args = parser.parse_args()

    logging.basicConfig(
        level=logging.INFO,
        format='%(asctime)s [%(levelname)s] %(message)s'
    )

    generator = SnakeVideoGenerator(canvas_size=args.size, fps=args.fps)

    try:
        if args.all:
            counts = render_all(generator, args.replay_dir, overwrite=args.overwrite, limit=args.limit)
            logger.info(f"Done: {counts['ok']} rendered, {counts['failed']} failed")
            sys.exit(1 if counts["failed"] else 0)

        if args.local:
            video_path = render_replay(generator, args.local, output=args.output)
        else:
            video_path = generator.generate_video(
                game_id=args.game_id,
                output_path=args.output or get_video_local_path(args.game_id)
            )
        logger.info(f"[OK] Video generated successfully: {video_path}")

    except KeyboardInterrupt:
        logger.info("Cancelled by user")
        sys.exit(1)
    except (OSError, ValueError) as e:
        logger.error(f"Error: {e}")
        sys.exit(1)


if __name__ == '__main__':
    main()
