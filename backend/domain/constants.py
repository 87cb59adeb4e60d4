"""
Game constants for the snake game.
"""

# Movement directions
UP = "UP"
DOWN = "DOWN"
LEFT = "LEFT"
RIGHT = "RIGHT"
VALID_MOVES = {UP, DOWN, LEFT, RIGHT}

OPPOSITES = {
    UP: DOWN,
    DOWN: UP,
    LEFT: RIGHT,
    RIGHT: LEFT,
}

# Grid offsets, y grows downward like a canvas
DELTAS = {
    UP: (0, -1),
    DOWN: (0, 1),
    LEFT: (-1, 0),
    RIGHT: (1, 0),
}

# Board settings
TILE_COUNT = 20
START_POSITION = (10, 10)
START_DIRECTION = RIGHT

# Scoring and speed
SCORE_INCREMENT = 10
SPEED_LEVEL_SCORE_STEP = 50
INITIAL_SPEED_MS = 150
SPEED_STEP_MS = 20
MIN_SPEED_MS = 50

# Local storage key for the persisted high score
HIGH_SCORE_KEY = "snakeHighScore"

# Game status values
STATUS_READY = "ready"
STATUS_RUNNING = "running"
STATUS_PAUSED = "paused"
STATUS_OVER = "over"
