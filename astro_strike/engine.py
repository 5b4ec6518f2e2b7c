"""
Rendering Engine
=================
Frame buffer plus two interchangeable terminal renderers.

The escape-stream renderer walks the whole buffer and only emits a
color switch when the tag changes. The run-grouped renderer positions
the cursor per run instead, for terminals that cannot be trusted with
a single long escape stream.
"""

from dataclasses import dataclass
from enum import Enum, auto
from typing import Callable, Dict, Iterator, List, Optional, TextIO, Tuple

from blessed import Terminal


# ANSI 256 color constants
NEON_CYAN = 51
NEON_MAGENTA = 201
NEON_YELLOW = 226
NEON_GREEN = 46
NEON_RED = 196
NEON_ORANGE = 208

GRAY_LIGHT = 252
GRAY_DARK = 238

WHITE = 255


class ColorTag(Enum):
    """Semantic display color of a cell. Rendering only."""
    NONE = auto()
    STAR = auto()
    PLAYER = auto()
    BULLET = auto()
    ENEMY_T1 = auto()
    ENEMY_T2 = auto()
    HUD = auto()
    TITLE = auto()
    POWER_UP = auto()


# Tag -> (256-color code, basic 8-color code)
TAG_COLORS: Dict[ColorTag, Tuple[int, int]] = {
    ColorTag.NONE: (WHITE, 7),
    ColorTag.STAR: (GRAY_DARK, 7),
    ColorTag.PLAYER: (NEON_CYAN, 6),
    ColorTag.BULLET: (NEON_YELLOW, 3),
    ColorTag.ENEMY_T1: (NEON_GREEN, 2),
    ColorTag.ENEMY_T2: (NEON_RED, 1),
    ColorTag.HUD: (GRAY_LIGHT, 7),
    ColorTag.TITLE: (NEON_MAGENTA, 5),
    ColorTag.POWER_UP: (NEON_ORANGE, 3),
}

Palette = Dict[ColorTag, str]


@dataclass
class Cell:
    """A single cell in the frame buffer."""
    char: str = ' '
    tag: ColorTag = ColorTag.NONE

    def reset(self):
        """Reset to empty state."""
        self.char = ' '
        self.tag = ColorTag.NONE


class FrameBuffer:
    """
    Fixed-size grid of cells, stored row-major.

    Writes outside the grid are silently dropped.
    """

    def __init__(self, width: int, height: int):
        self.width = width
        self.height = height
        self.cells: List[Cell] = [Cell() for _ in range(width * height)]

    def in_bounds(self, x: int, y: int) -> bool:
        return 0 <= x < self.width and 0 <= y < self.height

    def clear(self):
        """Reset every cell in place."""
        for cell in self.cells:
            cell.reset()

    def set_cell(self, x: int, y: int, char: str, tag: ColorTag = ColorTag.NONE):
        """Put a character at an exact position."""
        if self.in_bounds(x, y):
            cell = self.cells[y * self.width + x]
            cell.char = char
            cell.tag = tag

    def get_cell(self, x: int, y: int) -> Optional[Cell]:
        if self.in_bounds(x, y):
            return self.cells[y * self.width + x]
        return None

    def draw_text(self, x: int, y: int, text: str, tag: ColorTag = ColorTag.NONE):
        """Write a string left to right, clipping each character."""
        for i, char in enumerate(text):
            self.set_cell(x + i, y, char, tag)

    def draw_centered(self, y: int, text: str, tag: ColorTag = ColorTag.NONE):
        self.draw_text(self.width // 2 - len(text) // 2, y, text, tag)

    def row(self, y: int) -> List[Cell]:
        start = y * self.width
        return self.cells[start:start + self.width]


# =============================================================================
# PALETTES
# =============================================================================

def build_palette(term: Terminal, rich: bool) -> Palette:
    """Resolve every color tag to the terminal's color-switch sequence."""
    index = 0 if rich else 1
    palette = {}
    for tag, codes in TAG_COLORS.items():
        palette[tag] = term.normal + term.color(codes[index])
    return palette


def detect_rich_color(term: Terminal) -> bool:
    """Can the terminal take a 256-color escape stream?"""
    return bool(term.does_styling) and term.number_of_colors >= 256


# =============================================================================
# RENDERERS
# =============================================================================

class EscapeStreamRenderer:
    """
    Full-screen redraw as one string.

    Color switches are emitted only on tag transitions, so the cost
    is proportional to the number of color changes, not cells.
    """

    def __init__(self, palette: Palette, reset: str, home: str = ''):
        self.palette = palette
        self.reset = reset
        self.home = home

    def render(self, buffer: FrameBuffer) -> str:
        parts = [self.home]
        current = None
        for y in range(buffer.height):
            if y > 0:
                parts.append('\n')
            for cell in buffer.row(y):
                if cell.tag is not current:
                    parts.append(self.palette[cell.tag])
                    current = cell.tag
                parts.append(cell.char)
        parts.append(self.reset)
        return ''.join(parts)

    def present(self, buffer: FrameBuffer, out: TextIO):
        out.write(self.render(buffer))
        out.flush()


class RunGroupedRenderer:
    """
    Full-screen redraw as cursor-positioned runs.

    Each row is split into maximal runs of one color tag; every run
    gets one positioning + color call followed by one text write.
    """

    def __init__(self, palette: Palette, move_xy: Callable[[int, int], str],
                 reset: str = ''):
        self.palette = palette
        self.move_xy = move_xy
        self.reset = reset

    def runs(self, buffer: FrameBuffer) -> Iterator[Tuple[int, int, ColorTag, str]]:
        """Yield (x, y, tag, text) for every same-color run."""
        for y in range(buffer.height):
            row = buffer.row(y)
            start = 0
            while start < len(row):
                tag = row[start].tag
                end = start + 1
                while end < len(row) and row[end].tag is tag:
                    end += 1
                text = ''.join(cell.char for cell in row[start:end])
                yield start, y, tag, text
                start = end

    def present(self, buffer: FrameBuffer, out: TextIO):
        for x, y, tag, text in self.runs(buffer):
            out.write(self.move_xy(x, y) + self.palette[tag])
            out.write(text)
        out.write(self.reset)
        out.flush()


def create_renderer(term: Terminal, rich: bool):
    """Pick the renderer strategy once, from the capability flag."""
    palette = build_palette(term, rich)
    if rich:
        return EscapeStreamRenderer(palette, term.normal, term.home)
    return RunGroupedRenderer(palette, term.move_xy, term.normal)
