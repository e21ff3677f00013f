"""
reMarkable Strokes

Reconstruct the visible pen strokes of reMarkable v6 .rm files.

Usage:
    from rmstrokes import parse_file, render_to_file

    strokes = parse_file("file.rm")
    render_to_file(strokes, "output.svg")

CLI:
    python -m rmstrokes <input.rm> -o <output.svg>
"""

from .model import (
    Pen,
    PenColor,
    Point,
    Stroke,
)
from .reader import (
    CrdtId,
    RmParseError,
    HeaderMismatchError,
    OutOfBoundsError,
    TagMismatchError,
    MalformedSubblockError,
)
from .parser import (
    parse_bytes,
    parse_file,
)
from .rendering import (
    color_for_id,
    opacity_for_tool,
    stroke_width,
    is_eraser,
    is_highlighter,
    prepare_strokes,
)
from .renderer import (
    render_svg,
    render_to_file,
)

__all__ = [
    "Pen",
    "PenColor",
    "Point",
    "Stroke",
    "CrdtId",
    "RmParseError",
    "HeaderMismatchError",
    "OutOfBoundsError",
    "TagMismatchError",
    "MalformedSubblockError",
    "parse_bytes",
    "parse_file",
    "color_for_id",
    "opacity_for_tool",
    "stroke_width",
    "is_eraser",
    "is_highlighter",
    "prepare_strokes",
    "render_svg",
    "render_to_file",
]

__version__ = "0.1.0"
