"""
Video Generation Service for Snake Game Replays

This service generates MP4 videos from game replay JSON files by:
1. Rendering each recorded frame with FrameRenderer (Pillow)
2. Encoding frames to video using MoviePy/FFmpeg
3. Saving the video next to the replay in completed_games
"""

import os
import json
import logging
import tempfile
from typing import Dict, Any, List, Tuple, Optional

import numpy as np
from moviepy import ImageSequenceClip

from domain.constants import INITIAL_SPEED_MS
from domain.game_state import GameState
from services.frame_renderer import DEFAULT_CANVAS_SIZE, FrameRenderer

logger = logging.getLogger(__name__)

backend_path = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))

# One frame per tick at the starting speed (150 ms)
DEFAULT_FPS = round(1000 / INITIAL_SPEED_MS)
# Hold the game-over frame for a moment
FINAL_FRAME_HOLD_SECONDS = 2


class SnakeVideoGenerator:
    """Generate MP4 videos from Snake game replays"""

    def __init__(
        self,
        canvas_size: int = DEFAULT_CANVAS_SIZE,
        fps: int = DEFAULT_FPS,
        renderer: Optional[FrameRenderer] = None
    ):
        self.fps = fps
        self.renderer = renderer or FrameRenderer(canvas_size=canvas_size)

    def _normalize_replay(self, replay_data: Any) -> Tuple[Dict[str, Any], List[GameState]]:
        """
        Accept either a full replay ({"metadata": ..., "frames": [...]}) or a
        bare list of frame dicts and return (metadata, states).
        """
        if isinstance(replay_data, list):
            metadata, frames = {}, replay_data
        else:
            metadata = replay_data.get("metadata", {}) or {}
            frames = replay_data.get("frames", []) or []

        states = [GameState.from_dict(frame) for frame in frames]
        return metadata, states

    def render_frames(self, states: List[GameState]) -> List[np.ndarray]:
        frames = []
        for i, state in enumerate(states):
            if i % 50 == 0:
                logger.info(f"Rendering frame {i + 1}/{len(states)}")
            frames.append(np.array(self.renderer.render_frame(state)))

        if frames:
            frames.extend([frames[-1]] * (self.fps * FINAL_FRAME_HOLD_SECONDS))
        return frames

    def generate_video(
        self,
        game_id: str,
        replay_data: Optional[Any] = None,
        output_path: Optional[str] = None
    ) -> str:
        """
        Generate a video from a game replay

        Args:
            game_id: The game ID to generate video for
            replay_data: Optional replay data (if None, will load from local completed_games)
            output_path: Optional output path (if None, uses temp file)

        Returns:
            Path to the generated video file
        """
        logger.info(f"Starting video generation for game {game_id}")

        if replay_data is None:
            replay_path = get_replay_local_path(game_id)
            if not os.path.exists(replay_path):
                raise ValueError(f"Could not find replay data for game {game_id} at {replay_path}")
            with open(replay_path, 'r', encoding='utf-8') as f:
                replay_data = json.load(f)

        metadata, states = self._normalize_replay(replay_data)
        if not states:
            raise ValueError(f"Replay for game {game_id} has no frames")

        frames = self.render_frames(states)
        logger.info(f"Rendered {len(states)} frames, creating video...")

        if output_path is None:
            output_path = os.path.join(tempfile.gettempdir(), f"{game_id}_replay.mp4")
        output_dir = os.path.dirname(output_path)
        if output_dir:
            os.makedirs(output_dir, exist_ok=True)

        clip = ImageSequenceClip(frames, fps=self.fps)
        clip.write_videofile(
            output_path,
            codec='libx264',
            audio=False,
            logger=None
        )

        logger.info(f"Video created successfully at {output_path}")
        return output_path


def get_replay_local_path(game_id: str) -> str:
    return os.path.join(backend_path, "completed_games", f"snake_game_{game_id}.json")


def get_video_local_path(game_id: str) -> str:
    """
    Get the local path for a game's video
    """
    return os.path.join(backend_path, "completed_games", f"{game_id}_replay.mp4")
