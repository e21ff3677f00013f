"""
Stroke data returned by the parser.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum


class Pen(IntEnum):
    """Pen/tool types."""
    PAINTBRUSH = 0
    PENCIL = 1
    BALLPOINT = 2
    MARKER = 3
    FINELINER = 4
    HIGHLIGHTER = 5
    ERASER = 6
    MECHANICAL_PENCIL = 7
    ERASER_AREA = 8
    SELECTION = 9
    PAINTBRUSH_2 = 12
    MECHANICAL_PENCIL_2 = 13
    PENCIL_2 = 14
    BALLPOINT_2 = 15
    MARKER_2 = 16
    FINELINER_2 = 17
    HIGHLIGHTER_2 = 18
    CALLIGRAPHY = 21
    SHADER = 23
    SPRAY = 24


class PenColor(IntEnum):
    """Pen colors."""
    BLACK = 0
    GRAY = 1
    WHITE = 2
    YELLOW = 3
    GREEN = 4
    PINK = 5
    BLUE = 6
    RED = 7
    GRAY_OVERLAP = 8
    HIGHLIGHT = 9
    GREEN_2 = 10
    CYAN = 11
    MAGENTA = 12


@dataclass
class Point:
    """A single point in a stroke."""
    x: float
    y: float
    width: int
    pressure: int


@dataclass
class Stroke:
    """A stroke (line) with pen settings and points."""
    tool: int
    color: int
    thickness_scale: float
    points: list[Point] = field(default_factory=list)
    group_key: str = ""

    @property
    def pen(self) -> Pen | int:
        """Tool as a Pen, or the raw value for unknown pen types."""
        try:
            return Pen(self.tool)
        except ValueError:
            return self.tool

    @property
    def pen_color(self) -> PenColor | int:
        """Color as a PenColor, or the raw value for unknown colors."""
        try:
            return PenColor(self.color)
        except ValueError:
            return self.color
