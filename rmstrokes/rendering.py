"""
Rendering parameters for parsed strokes.

Maps the raw tool, color and width fields of a stroke to what a renderer
needs: a CSS color, an opacity and a per-point width in device pixels.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from .constants import (
    COLOR_MAP_HEX,
    DEFAULT_COLOR_HEX,
    DEFAULT_WIDTH_RULE,
    ERASER_PENS,
    HIGHLIGHTER_PENS,
    PEN_OPACITY,
    PEN_WIDTH_RULES,
)
from .model import Point, Stroke


def color_for_id(color_id: int) -> str:
    """Get the hex color for a pen color id."""
    return COLOR_MAP_HEX.get(color_id, DEFAULT_COLOR_HEX)


def opacity_for_tool(tool: int) -> float:
    """Get opacity for a tool."""
    return PEN_OPACITY.get(tool, 1.0)


def stroke_width(point: Point, thickness_scale: float, tool: int) -> float:
    """
    Width of a stroke at a point, in device pixels.

    Point widths are stored at roughly 4x device units; thickness_scale is
    the line weight picked on the device.
    """
    base = (point.width / 4.0) * thickness_scale
    multiplier, minimum = PEN_WIDTH_RULES.get(tool, DEFAULT_WIDTH_RULE)
    return max(base * multiplier, minimum)


def is_eraser(tool: int) -> bool:
    """Check if a tool is an eraser."""
    return tool in ERASER_PENS


def is_highlighter(tool: int) -> bool:
    """Check if a tool is a highlighter."""
    return tool in HIGHLIGHTER_PENS


# =============================================================================
# Render-ready strokes
# =============================================================================

@dataclass
class RenderPoint:
    x: float
    y: float
    w: float


@dataclass
class RenderStroke:
    """A stroke with its rendering parameters resolved."""
    color: str
    opacity: float
    tool: int
    thickness_scale: float
    is_eraser: bool
    is_highlighter: bool
    points: list[RenderPoint] = field(default_factory=list)


def prepare_stroke(stroke: Stroke) -> RenderStroke:
    return RenderStroke(
        color=color_for_id(stroke.color),
        opacity=opacity_for_tool(stroke.tool),
        tool=stroke.tool,
        thickness_scale=stroke.thickness_scale,
        is_eraser=is_eraser(stroke.tool),
        is_highlighter=is_highlighter(stroke.tool),
        points=[
            RenderPoint(p.x, p.y, stroke_width(p, stroke.thickness_scale, stroke.tool))
            for p in stroke.points
        ],
    )


def prepare_strokes(strokes: list[Stroke]) -> list[RenderStroke]:
    """Resolve rendering parameters for every stroke, keeping order."""
    return [prepare_stroke(stroke) for stroke in strokes]
