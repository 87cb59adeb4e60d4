"""
Frame rendering for the snake game.

Draws a GameState onto a Pillow image: the board (grid, snake, food), an
optional score panel below it, and the game-over overlay. The interactive
client blits these frames into its window and the video generator encodes
them to MP4, so both show exactly the same picture.
"""

import logging
from functools import lru_cache
from typing import Tuple

from PIL import Image, ImageDraw, ImageFilter, ImageFont

from domain.game_state import GameState

logger = logging.getLogger(__name__)

DEFAULT_CANVAS_SIZE = 400
HUD_HEIGHT = 64
# Head and body boxes are inset by 2 px, so smaller cells cannot be drawn
MIN_CELL_SIZE = 2


class ColorScheme:
    """Neon palette of the game board"""

    BACKGROUND = "#000000"
    # rgba(0, 255, 136, 0.1) flattened onto black
    GRID_LINE = "#001a0e"

    HEAD = "#00ff88"
    BODY_START = "#00cc6a"
    BODY_END = "#009955"
    BODY_OUTLINE = "#00ff88"
    FOOD = "#ff4757"

    HUD_BACKGROUND = "#0b0f14"
    HUD_TEXT = "#ffffff"
    HUD_ACCENT = "#00ff88"
    OVERLAY_ALPHA = 191  # 0.75 opacity
    OVERLAY_TEXT = "#ffffff"


def hex_to_rgb(hex_color: str) -> Tuple[int, int, int]:
    """Convert hex color to RGB tuple"""
    hex_color = hex_color.lstrip('#')
    return tuple(int(hex_color[i:i+2], 16) for i in (0, 2, 4))


def load_font(size: int):
    """Load a scalable font, falling back to Pillow's built-in one."""
    for name in ("DejaVuSans-Bold.ttf", "Arial.ttf", "/System/Library/Fonts/Helvetica.ttc"):
        try:
            return ImageFont.truetype(name, size)
        except OSError:
            continue
    return ImageFont.load_default()


@lru_cache(maxsize=8)
def gradient_tile(size: int) -> Image.Image:
    """A size x size square shaded diagonally from BODY_START to BODY_END."""
    start = hex_to_rgb(ColorScheme.BODY_START)
    end = hex_to_rgb(ColorScheme.BODY_END)
    tile = Image.new('RGB', (size, size))
    pixels = tile.load()
    span = max(1, 2 * (size - 1))
    for i in range(size):
        for j in range(size):
            t = (i + j) / span
            pixels[i, j] = tuple(int(s + (e - s) * t) for s, e in zip(start, end))
    return tile


class FrameRenderer:
    """Render snake game frames with Pillow"""

    def __init__(self, canvas_size: int = DEFAULT_CANVAS_SIZE, show_hud: bool = True, glow: bool = True):
        self.canvas_size = canvas_size
        self.show_hud = show_hud
        self.glow = glow

        self.font_large = load_font(max(12, canvas_size // 10))
        self.font_medium = load_font(max(10, canvas_size // 15))
        self.font_small = load_font(max(9, canvas_size // 24))

    @property
    def size(self) -> Tuple[int, int]:
        height = self.canvas_size + (HUD_HEIGHT if self.show_hud else 0)
        return self.canvas_size, height

    def cell_size(self, tile_count: int) -> int:
        """
        Pixel size of one tile.

        Raises:
            ValueError: If the board has too many tiles for the canvas.
        """
        size = self.canvas_size // tile_count
        if size < MIN_CELL_SIZE:
            max_tiles = self.canvas_size // MIN_CELL_SIZE
            raise ValueError(
                f"A {tile_count}x{tile_count} board does not fit a {self.canvas_size} px canvas "
                f"(at most {max_tiles} tiles per side)"
            )
        return size

    def render_frame(self, state: GameState) -> Image.Image:
        """Render a single frame of the game"""
        img = Image.new('RGB', self.size, hex_to_rgb(ColorScheme.BACKGROUND))

        self._draw_board(img, state)

        if state.is_over:
            self._draw_game_over(img, state.score)

        if self.show_hud:
            self._draw_hud(img, state)

        return img

    def _draw_board(self, img: Image.Image, state: GameState):
        draw = ImageDraw.Draw(img)
        grid = self.cell_size(state.tile_count)

        # Grid background
        for i in range(state.tile_count):
            for j in range(state.tile_count):
                draw.rectangle(
                    [i * grid, j * grid, (i + 1) * grid - 1, (j + 1) * grid - 1],
                    outline=hex_to_rgb(ColorScheme.GRID_LINE)
                )

        # Body first so the head is drawn on top
        body_tile = gradient_tile(max(1, grid - 1))
        for x, y in state.snake_positions[1:]:
            left, top = x * grid, y * grid
            img.paste(body_tile, (left, top))
            draw.rectangle(
                [left, top, left + grid - 2, top + grid - 2],
                outline=hex_to_rgb(ColorScheme.BODY_OUTLINE),
                width=1
            )

        if state.snake_positions:
            hx, hy = state.snake_positions[0]
            head_box = [hx * grid, hy * grid, hx * grid + grid - 2, hy * grid + grid - 2]
            if self.glow:
                self._draw_glow(img, head_box, ColorScheme.HEAD, radius=5, ellipse=False)
            ImageDraw.Draw(img).rectangle(head_box, fill=hex_to_rgb(ColorScheme.HEAD))

        if state.food is not None:
            fx, fy = state.food
            center_x = fx * grid + grid / 2
            center_y = fy * grid + grid / 2
            radius = max(1, grid / 2 - 2)
            food_box = [center_x - radius, center_y - radius, center_x + radius, center_y + radius]
            if self.glow:
                self._draw_glow(img, food_box, ColorScheme.FOOD, radius=7, ellipse=True)
            ImageDraw.Draw(img).ellipse(food_box, fill=hex_to_rgb(ColorScheme.FOOD))

    def _draw_glow(self, img: Image.Image, box, color: str, radius: int, ellipse: bool):
        """Blend a blurred copy of a shape under it"""
        layer = Image.new('L', img.size, 0)
        layer_draw = ImageDraw.Draw(layer)
        if ellipse:
            layer_draw.ellipse(box, fill=160)
        else:
            layer_draw.rectangle(box, fill=160)
        mask = layer.filter(ImageFilter.GaussianBlur(radius))
        img.paste(Image.new('RGB', img.size, hex_to_rgb(color)), (0, 0), mask)

    def _draw_game_over(self, img: Image.Image, score: int):
        board = (0, 0, self.canvas_size, self.canvas_size)
        overlay = Image.new('RGBA', (self.canvas_size, self.canvas_size), (0, 0, 0, ColorScheme.OVERLAY_ALPHA))
        base = img.crop(board).convert('RGBA')
        img.paste(Image.alpha_composite(base, overlay).convert('RGB'), board[:2])

        draw = ImageDraw.Draw(img)
        middle = self.canvas_size // 2
        self._draw_centered(draw, "GAME OVER", middle - 20, self.font_large, ColorScheme.OVERLAY_TEXT)
        self._draw_centered(draw, f"Final score: {score}", middle + 20, self.font_medium, ColorScheme.OVERLAY_TEXT)

    def _draw_centered(self, draw: ImageDraw.ImageDraw, text: str, center_y: int, font, color: str):
        bbox = draw.textbbox((0, 0), text, font=font)
        text_width = bbox[2] - bbox[0]
        text_height = bbox[3] - bbox[1]
        draw.text(
            (self.canvas_size // 2 - text_width // 2, center_y - text_height // 2),
            text,
            fill=hex_to_rgb(color),
            font=font
        )

    def _draw_hud(self, img: Image.Image, state: GameState):
        """Score, high score, speed level and status under the board"""
        draw = ImageDraw.Draw(img)
        top = self.canvas_size
        draw.rectangle(
            [0, top, self.canvas_size - 1, top + HUD_HEIGHT - 1],
            fill=hex_to_rgb(ColorScheme.HUD_BACKGROUND)
        )
        draw.line([0, top, self.canvas_size, top], fill=hex_to_rgb(ColorScheme.HUD_ACCENT), width=1)

        stats = f"Score: {state.score}   High: {state.high_score}   Level: {state.speed_level}"
        draw.text((10, top + 8), stats, fill=hex_to_rgb(ColorScheme.HUD_TEXT), font=self.font_small)
        draw.text((10, top + 8 + HUD_HEIGHT // 2), state.status_text, fill=hex_to_rgb(ColorScheme.HUD_ACCENT), font=self.font_small)
