"""
Rendering Engine
=================
Double-buffered terminal renderer with a Braille sub-pixel canvas for
vector outlines.

The simulation works in field units. Each terminal column spans
FIELD_UNITS_X units and each row FIELD_UNITS_Y units, so one Braille
dot (2x4 per cell) is 4x4 field units.
"""

from dataclasses import dataclass, field
from typing import List, Optional, Tuple
import random

from blessed import Terminal


# ANSI 256 palette indices
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208
NEON_PINK = 199

GRAY_LIGHT = 252
GRAY_MED = 245
GRAY_DARK = 238
GRAY_DARKER = 235

WHITE = 255
BLACK = 0

DEFAULT_FG = 7
NO_BG = -1  # terminal default background

FIELD_UNITS_X = 8
FIELD_UNITS_Y = 16
HUD_ROWS = 3


@dataclass
class Cell:
    """One screen cell. Equality compares glyph and both colors."""
    char: str = ' '
    fg_color: int = DEFAULT_FG
    bg_color: int = NO_BG

    @property
    def style(self) -> Tuple[int, int]:
        return self.fg_color, self.bg_color

    def reset(self, bg_color: int = NO_BG):
        self.char = ' '
        self.fg_color = DEFAULT_FG
        self.bg_color = bg_color


class DoubleBuffer:
    """
    Two cell grids. Drawing goes to the back grid; present() diffs it
    against the front grid and emits only the cells that changed.

    Adjacent changed cells on a row are written as one run, and color
    codes are only re-sent when the style changes.
    """

    def __init__(self, term: Terminal):
        self.term = term
        self.width = term.width
        self.height = term.height
        self.front: List[List[Cell]] = self._grid()
        self.back: List[List[Cell]] = self._grid()

    def _grid(self) -> List[List[Cell]]:
        return [[Cell() for _ in range(self.width)] for _ in range(self.height)]

    def resize(self, width: int, height: int):
        self.width = width
        self.height = height
        self.front = self._grid()
        self.back = self._grid()

    def clear_back(self, bg_color: int = NO_BG):
        for row in self.back:
            for cell in row:
                cell.reset(bg_color)

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG,
            bg_color: Optional[int] = None):
        """Write one cell. bg_color=None keeps whatever background is there."""
        if not (0 <= x < self.width and 0 <= y < self.height):
            return
        cell = self.back[y][x]
        cell.char = char
        cell.fg_color = fg_color
        if bg_color is not None:
            cell.bg_color = bg_color

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG,
                   bg_color: Optional[int] = None):
        for offset, char in enumerate(text):
            self.put(x + offset, y, char, fg_color, bg_color)

    def _style_codes(self, style: Tuple[int, int]) -> str:
        fg_color, bg_color = style
        codes = self.term.normal
        if bg_color >= 0:
            codes += self.term.on_color(bg_color)
        return codes + self.term.color(fg_color)

    def present(self) -> str:
        """Swap grids and return the escape output for what changed."""
        out = []
        style = None
        for y, (back_row, front_row) in enumerate(zip(self.back, self.front)):
            cursor_x = None
            for x, cell in enumerate(back_row):
                if cell == front_row[x]:
                    continue
                if cursor_x != x:
                    out.append(self.term.move_xy(x, y))
                if cell.style != style:
                    style = cell.style
                    out.append(self._style_codes(style))
                out.append(cell.char or ' ')
                cursor_x = x + 1

        self.front, self.back = self.back, self.front
        return ''.join(out)


class BrailleCanvas:
    """
    Dot grid drawn with Unicode Braille patterns, 2x4 dots per cell.

    canvas[row][col] holds the dot bits of one cell and colors[row][col]
    the color of the last dot set there.
    """

    # Dot bit for [dot_row][dot_col] within a cell
    BITS = (
        (0x01, 0x08),
        (0x02, 0x10),
        (0x04, 0x20),
        (0x40, 0x80),
    )
    BASE = 0x2800

    def __init__(self, char_width: int, char_height: int):
        self.char_width = max(0, char_width)
        self.char_height = max(0, char_height)
        self.pixel_width = self.char_width * 2
        self.pixel_height = self.char_height * 4
        self.canvas: List[List[int]] = []
        self.colors: List[List[int]] = []
        self.clear()

    def clear(self):
        self.canvas = [[0] * self.char_width for _ in range(self.char_height)]
        self.colors = [[WHITE] * self.char_width for _ in range(self.char_height)]

    def set_pixel(self, px: int, py: int, color: int = WHITE):
        """Light one dot. Dots off the canvas are dropped."""
        if px < 0 or py < 0 or px >= self.pixel_width or py >= self.pixel_height:
            return
        row, col = py >> 2, px >> 1
        self.canvas[row][col] |= self.BITS[py & 3][px & 1]
        self.colors[row][col] = color

    def draw_line(self, x0: int, y0: int, x1: int, y1: int, color: int = WHITE):
        """Bresenham line, both endpoints included."""
        dx = abs(x1 - x0)
        dy = abs(y1 - y0)
        step_x = 1 if x1 > x0 else -1
        step_y = 1 if y1 > y0 else -1
        err = dx - dy
        x, y = x0, y0
        while True:
            self.set_pixel(x, y, color)
            if x == x1 and y == y1:
                return
            doubled = err * 2
            if doubled > -dy:
                err -= dy
                x += step_x
            if doubled < dx:
                err += dx
                y += step_y

    def get_char(self, cx: int, cy: int) -> Tuple[str, int]:
        """Braille glyph and color for a cell; ('', WHITE) when it is blank."""
        if not (0 <= cx < self.char_width and 0 <= cy < self.char_height):
            return '', WHITE
        bits = self.canvas[cy][cx]
        if not bits:
            return '', WHITE
        return chr(self.BASE + bits), self.colors[cy][cx]

    def blit_to_buffer(self, buffer: DoubleBuffer, offset_x: int = 0, offset_y: int = 0):
        """Copy lit cells onto the buffer without covering text already there."""
        for cy, row in enumerate(self.canvas):
            by = cy + offset_y
            if not 0 <= by < buffer.height:
                continue
            for cx, bits in enumerate(row):
                bx = cx + offset_x
                if not bits or not 0 <= bx < buffer.width:
                    continue
                if buffer.back[by][bx].char == ' ':
                    buffer.put(bx, by, chr(self.BASE + bits), self.colors[cy][cx])


@dataclass
class GameRenderer:
    """
    Frame-level drawing on top of the buffer and the Braille canvas.

    Field-unit drawing goes through the canvas. Screen shake offsets
    everything above the HUD rows; the HUD itself never moves.
    """
    term: Terminal
    buffer: DoubleBuffer = field(init=False)
    braille: BrailleCanvas = field(init=False)

    shake_x: int = 0
    shake_y: int = 0
    shake_frames: int = 0
    shake_intensity: int = 2

    show_fps: bool = False
    current_fps: float = 60.0

    def __post_init__(self):
        self.buffer = DoubleBuffer(self.term)
        self.braille = BrailleCanvas(self.buffer.width, self.game_height)

    @property
    def width(self) -> int:
        return self.buffer.width

    @property
    def height(self) -> int:
        return self.buffer.height

    @property
    def game_height(self) -> int:
        """Rows available to the field, above the HUD."""
        return max(0, self.buffer.height - HUD_ROWS)

    @property
    def field_width(self) -> float:
        return float(self.width * FIELD_UNITS_X)

    @property
    def field_height(self) -> float:
        return float(self.game_height * FIELD_UNITS_Y)

    def sync_size(self) -> bool:
        """Follow the terminal size. True if it changed since the last call."""
        size = (self.term.width, self.term.height)
        if size == (self.buffer.width, self.buffer.height):
            return False
        self.resize(*size)
        return True

    def resize(self, width: int, height: int):
        self.buffer.resize(width, height)
        self.braille = BrailleCanvas(width, self.game_height)

    def trigger_shake(self, intensity: int = 2, frames: int = 3):
        self.shake_intensity = intensity
        self.shake_frames = max(self.shake_frames, frames)

    def update_effects(self):
        if self.shake_frames <= 0:
            self.shake_x = self.shake_y = 0
            return
        reach_y = max(1, self.shake_intensity // 2)
        self.shake_x = random.randint(-self.shake_intensity, self.shake_intensity)
        self.shake_y = random.randint(-reach_y, reach_y)
        self.shake_frames -= 1

    def begin_frame(self, bg_color: int = NO_BG):
        self.buffer.clear_back(bg_color)
        self.braille.clear()

    def end_frame(self) -> str:
        """Merge the Braille layer and return the terminal output for this frame."""
        self.braille.blit_to_buffer(self.buffer)
        self.update_effects()
        return self.buffer.present()

    # -------------------------------------------------------------------------
    # Cells
    # -------------------------------------------------------------------------

    def _shaken(self, x: int, y: int, with_shake: bool) -> Tuple[int, int]:
        if with_shake and y < self.game_height:
            return x + self.shake_x, y + self.shake_y
        return x, y

    def put(self, x: int, y: int, char: str, fg_color: int = DEFAULT_FG, with_shake: bool = True):
        x, y = self._shaken(x, y, with_shake)
        self.buffer.put(x, y, char, fg_color)

    def put_string(self, x: int, y: int, text: str, fg_color: int = DEFAULT_FG,
                   with_shake: bool = True):
        x, y = self._shaken(x, y, with_shake)
        self.buffer.put_string(x, y, text, fg_color)

    def put_centered(self, y: int, text: str, fg_color: int = DEFAULT_FG):
        """Centered UI text; ignores shake."""
        self.buffer.put_string(max(0, (self.width - len(text)) // 2), y, text, fg_color)

    def draw_box(self, x: int, y: int, w: int, h: int, color: int = GRAY_DARK,
                 char: str = '#', with_shake: bool = True):
        if w <= 0 or h <= 0:
            return
        right, bottom = x + w - 1, y + h - 1
        for cx in range(x, right + 1):
            self.put(cx, y, char, color, with_shake)
            self.put(cx, bottom, char, color, with_shake)
        for cy in range(y + 1, bottom):
            self.put(x, cy, char, color, with_shake)
            self.put(right, cy, char, color, with_shake)

    # -------------------------------------------------------------------------
    # Field units
    # -------------------------------------------------------------------------

    def field_to_pixel(self, fx: float, fy: float) -> Tuple[int, int]:
        """Braille dot under a field point, shake included."""
        px = int(fx * 2 / FIELD_UNITS_X) + self.shake_x * 2
        py = int(fy * 4 / FIELD_UNITS_Y) + self.shake_y * 4
        return px, py

    def field_to_cell(self, fx: float, fy: float) -> Tuple[int, int]:
        return int(fx / FIELD_UNITS_X), int(fy / FIELD_UNITS_Y)

    def plot(self, fx: float, fy: float, color: int = WHITE):
        self.braille.set_pixel(*self.field_to_pixel(fx, fy), color)

    def line(self, ax: float, ay: float, bx: float, by: float, color: int = WHITE):
        self.braille.draw_line(*self.field_to_pixel(ax, ay), *self.field_to_pixel(bx, by), color)

    def polyline(self, points: List[Tuple[float, float]], color: int = WHITE):
        """Closed outline through the points, last joined back to first."""
        for (ax, ay), (bx, by) in zip(points, points[1:] + points[:1]):
            self.line(ax, ay, bx, by, color)
