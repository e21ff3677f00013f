"""
Shared constants for rendering reMarkable strokes.
"""

from .model import Pen, PenColor

# Device page size in pixels
RM_WIDTH = 1404
RM_PAGE_HEIGHT = 1872

DEFAULT_COLOR_HEX = "#000000"

# Color mapping - hex strings (CSS/SVG)
COLOR_MAP_HEX = {
    PenColor.BLACK: "#000000",
    PenColor.GRAY: "#808080",
    PenColor.WHITE: "#ffffff",
    PenColor.YELLOW: "#fbde5a",
    PenColor.GREEN: "#5ab95a",
    PenColor.PINK: "#ff7878",
    PenColor.BLUE: "#5566ff",
    PenColor.RED: "#ff4444",
    PenColor.GRAY_OVERLAP: "#808080",
    PenColor.HIGHLIGHT: "#ffff00",
    PenColor.GREEN_2: "#3baa3b",
    PenColor.CYAN: "#00c8ff",
    PenColor.MAGENTA: "#d040d0",
}

# Opacity by pen; anything else is opaque
PEN_OPACITY = {
    Pen.HIGHLIGHTER: 0.15,
    Pen.HIGHLIGHTER_2: 0.15,
    Pen.SHADER: 0.15,
    Pen.MARKER: 0.7,
    Pen.MARKER_2: 0.7,
    Pen.PENCIL: 0.6,
    Pen.PENCIL_2: 0.6,
}

# Width (multiplier, minimum) applied to the point width for each pen
PEN_WIDTH_RULES = {
    Pen.FINELINER: (0.8, 0.8),
    Pen.FINELINER_2: (0.8, 0.8),
    Pen.HIGHLIGHTER: (3.0, 8.0),
    Pen.HIGHLIGHTER_2: (3.0, 8.0),
    Pen.BALLPOINT: (0.7, 0.6),
    Pen.BALLPOINT_2: (0.7, 0.6),
    Pen.MECHANICAL_PENCIL: (0.5, 0.5),
    Pen.MECHANICAL_PENCIL_2: (0.5, 0.5),
    Pen.CALLIGRAPHY: (1.0, 1.0),
    Pen.MARKER: (1.5, 2.0),
    Pen.MARKER_2: (1.5, 2.0),
    Pen.SHADER: (2.5, 4.0),
}
DEFAULT_WIDTH_RULE = (1.0, 0.5)

# Pens drawn underneath regular strokes
HIGHLIGHTER_PENS = {Pen.HIGHLIGHTER, Pen.HIGHLIGHTER_2}

# Eraser pens
ERASER_PENS = {Pen.ERASER, Pen.ERASER_AREA}
