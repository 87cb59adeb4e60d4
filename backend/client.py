"""
Interactive snake window.

pygame provides the window, the event queue and the periodic timer; the
engine (SnakeGame) and the Pillow renderer do the rest. Each MOVE_EVENT
advances the game by one step and the frame is redrawn. The timer interval
follows the game's speed and is re-armed whenever the speed changes or the
game is paused.
"""

import logging
from typing import Callable, Dict, List, Optional, Tuple

import pygame

from controls import (
    apply_command,
    command_for_button,
    command_for_key,
    direction_for_swipe,
)
from main import SnakeGame
from services.frame_renderer import ColorScheme, FrameRenderer, hex_to_rgb

logger = logging.getLogger(__name__)

MOVE_EVENT = pygame.USEREVENT + 1
BUTTON_BAR_HEIGHT = 44
FPS_CAP = 60

# pygame key codes that have no printable character
SPECIAL_KEYS = {
    pygame.K_UP: "ArrowUp",
    pygame.K_DOWN: "ArrowDown",
    pygame.K_LEFT: "ArrowLeft",
    pygame.K_RIGHT: "ArrowRight",
    pygame.K_SPACE: " ",
}

# (button id, label) in on-screen order
BUTTONS = [
    ("start-btn", "Start"),
    ("pause-btn", "Pause"),
    ("reset-btn", "Reset"),
    ("left-btn", "<"),
    ("up-btn", "^"),
    ("down-btn", "v"),
    ("right-btn", ">"),
]


def key_name(event) -> Optional[str]:
    """Browser-style key name for a KEYDOWN event."""
    if event.key in SPECIAL_KEYS:
        return SPECIAL_KEYS[event.key]
    return getattr(event, "unicode", "") or None


def button_layout(width: int, top: int) -> Dict[str, Tuple[int, int, int, int]]:
    """Rectangles (x, y, w, h) of the on-screen buttons in a bar at `top`."""
    gap = 4
    button_width = (width - gap * (len(BUTTONS) + 1)) // len(BUTTONS)
    layout = {}
    for i, (button_id, _) in enumerate(BUTTONS):
        x = gap + i * (button_width + gap)
        layout[button_id] = (x, top + gap, button_width, BUTTON_BAR_HEIGHT - 2 * gap)
    return layout


class SnakeClient:
    """Event dispatch loop around a SnakeGame."""

    def __init__(
        self,
        game: SnakeGame,
        renderer: Optional[FrameRenderer] = None,
        set_timer: Callable[[int, int], None] = pygame.time.set_timer
    ):
        self.game = game
        self.renderer = renderer or FrameRenderer()
        self.set_timer = set_timer
        self.armed_ms = 0
        game.on_speed_change = self.on_speed_change
        self.touch_start: Optional[Tuple[float, float]] = None
        self.dirty = True

        board_width, board_height = self.renderer.size
        self.size = (board_width, board_height + BUTTON_BAR_HEIGHT)
        self.buttons = button_layout(board_width, board_height)

        self.screen = None
        self.font = None

    # -------------------------------------------------------------------
    # Timer
    # -------------------------------------------------------------------

    def sync_timer(self):
        """Arm the move timer at the game's speed while running, disarm otherwise."""
        wanted = self.game.speed_ms if self.game.running else 0
        if wanted != self.armed_ms:
            self.set_timer(MOVE_EVENT, wanted)
            self.armed_ms = wanted
            logger.debug("Move timer set to %d ms", wanted)

    def on_speed_change(self, speed_ms: int):
        """Re-arm the move timer as soon as the engine changes speed mid-game."""
        if self.game.running and speed_ms != self.armed_ms:
            self.set_timer(MOVE_EVENT, speed_ms)
            self.armed_ms = speed_ms

    # -------------------------------------------------------------------
    # Events
    # -------------------------------------------------------------------

    def button_at(self, pos) -> Optional[str]:
        px, py = pos
        for button_id, (x, y, w, h) in self.buttons.items():
            if x <= px < x + w and y <= py < y + h:
                return button_id
        return None

    def handle_event(self, event) -> bool:
        """
        Dispatch one pygame event. Returns False when the window should close.
        """
        if event.type == pygame.QUIT:
            return False

        if event.type == MOVE_EVENT:
            if self.game.running:
                self.game.step()
        elif event.type == pygame.KEYDOWN:
            if event.key == pygame.K_ESCAPE:
                return False
            apply_command(self.game, command_for_key(key_name(event)))
        elif event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
            apply_command(self.game, command_for_button(self.button_at(event.pos)))
        elif event.type == pygame.FINGERDOWN:
            self.touch_start = (event.x, event.y)
        elif event.type == pygame.FINGERMOTION and self.touch_start is not None:
            direction = direction_for_swipe(*self.touch_start, event.x, event.y)
            self.touch_start = None
            if direction is not None:
                self.game.queue_direction(direction)
        elif event.type == pygame.WINDOWFOCUSLOST:
            self.game.pause()

        self.sync_timer()
        self.dirty = True
        return True

    # -------------------------------------------------------------------
    # Drawing
    # -------------------------------------------------------------------

    def draw(self):
        frame = self.renderer.render_frame(self.game.get_current_state())
        surface = pygame.image.frombytes(frame.tobytes(), frame.size, "RGB")
        self.screen.fill(hex_to_rgb(ColorScheme.HUD_BACKGROUND))
        self.screen.blit(surface, (0, 0))

        for button_id, label in BUTTONS:
            rect = pygame.Rect(self.buttons[button_id])
            pygame.draw.rect(self.screen, hex_to_rgb(ColorScheme.BODY_END), rect, border_radius=4)
            pygame.draw.rect(self.screen, hex_to_rgb(ColorScheme.HEAD), rect, width=1, border_radius=4)
            text = self.font.render(label, True, hex_to_rgb(ColorScheme.HUD_TEXT))
            self.screen.blit(text, text.get_rect(center=rect.center))

        pygame.display.flip()

    def run(self):
        pygame.init()
        pygame.display.set_caption("Snake")
        self.screen = pygame.display.set_mode(self.size)
        self.font = pygame.font.SysFont(None, 22)
        clock = pygame.time.Clock()

        logger.info("High score: %d", self.game.high_score)
        running = True
        try:
            while running:
                events: List = pygame.event.get()
                for event in events:
                    if not self.handle_event(event):
                        running = False
                        break
                if self.dirty:
                    self.draw()
                    self.dirty = False
                clock.tick(FPS_CAP)
        finally:
            self.set_timer(MOVE_EVENT, 0)
            pygame.quit()
