"""
Input mapping for the snake game.

Translates keyboard keys, swipe gestures and on-screen buttons into engine
commands. Key names follow the browser KeyboardEvent.key vocabulary
("ArrowUp", "w", " ") so the same table serves any front end; the pygame
client converts its key codes to these names first.
"""

from typing import Optional

from domain.constants import UP, DOWN, LEFT, RIGHT

# Command names that are not directions
START_OR_PAUSE = "START_OR_PAUSE"
START = "START"
PAUSE = "PAUSE"
RESET = "RESET"

KEY_BINDINGS = {
    "ArrowUp": UP,
    "w": UP,
    "W": UP,
    "ArrowDown": DOWN,
    "s": DOWN,
    "S": DOWN,
    "ArrowLeft": LEFT,
    "a": LEFT,
    "A": LEFT,
    "ArrowRight": RIGHT,
    "d": RIGHT,
    "D": RIGHT,
    " ": START_OR_PAUSE,
}

BUTTON_BINDINGS = {
    "start-btn": START,
    "pause-btn": PAUSE,
    "reset-btn": RESET,
    "up-btn": UP,
    "down-btn": DOWN,
    "left-btn": LEFT,
    "right-btn": RIGHT,
}


def command_for_key(key: str) -> Optional[str]:
    """Return the command bound to a key, or None if the key is unbound."""
    return KEY_BINDINGS.get(key)


def command_for_button(button_id: str) -> Optional[str]:
    return BUTTON_BINDINGS.get(button_id)


def direction_for_swipe(start_x: float, start_y: float, end_x: float, end_y: float) -> Optional[str]:
    """
    Resolve a swipe to a direction along its dominant axis.

    Screen coordinates: y grows downward. A zero-length swipe returns None.
    """
    diff_x = start_x - end_x
    diff_y = start_y - end_y

    if diff_x == 0 and diff_y == 0:
        return None

    if abs(diff_x) > abs(diff_y):
        return LEFT if diff_x > 0 else RIGHT
    return UP if diff_y > 0 else DOWN


def apply_command(game, command: Optional[str]) -> bool:
    """
    Dispatch a command to a SnakeGame.

    Returns True when the command was recognised.
    """
    if command is None:
        return False

    if command in (UP, DOWN, LEFT, RIGHT):
        game.queue_direction(command)
    elif command == START_OR_PAUSE:
        if not game.running:
            game.start()
        else:
            game.toggle_pause()
    elif command == START:
        game.start()
    elif command == PAUSE:
        game.toggle_pause()
    elif command == RESET:
        game.reset()
    else:
        return False
    return True
