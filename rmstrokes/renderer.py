"""
SVG Renderer for reMarkable strokes.

Draws a page in device pixels. Strokes are layered the way the device
shows them: highlights at the bottom, pen strokes above, erasers on top.
"""

from __future__ import annotations

import math
from pathlib import Path
from typing import Optional, TextIO
import xml.etree.ElementTree as ET

from .config import RenderConfig
from .model import Stroke
from .rendering import RenderPoint, RenderStroke, prepare_strokes


# =============================================================================
# SVG Path Generation
# =============================================================================

def points_to_path(points: list[RenderPoint]) -> str:
    """
    Convert a list of points to an SVG path string.
    Uses quadratic bezier curves through midpoints for smooth lines.
    """
    if len(points) < 2:
        return ""

    # Start at first point
    path = f"M {points[0].x:.2f} {points[0].y:.2f}"

    if len(points) == 2:
        # Two points - straight line
        path += f" L {points[1].x:.2f} {points[1].y:.2f}"
        return path

    for i in range(1, len(points)):
        p0 = points[i - 1]
        p1 = points[i]
        mid_x = (p0.x + p1.x) / 2
        mid_y = (p0.y + p1.y) / 2

        if i == 1:
            # First segment: line to midpoint
            path += f" L {mid_x:.2f} {mid_y:.2f}"
        elif i == len(points) - 1:
            # Last segment: curve to end point
            path += f" Q {p0.x:.2f} {p0.y:.2f} {p1.x:.2f} {p1.y:.2f}"
        else:
            # Middle segments: curve through midpoint
            path += f" Q {p0.x:.2f} {p0.y:.2f} {mid_x:.2f} {mid_y:.2f}"

    return path


def mean_width(stroke: RenderStroke) -> float:
    return sum(p.w for p in stroke.points) / len(stroke.points)


def page_extents(strokes: list[RenderStroke], config: RenderConfig) -> tuple[float, float, float]:
    """
    Return (x_offset, width, height) of the page.

    X may be centred on 0 or absolute depending on the page type; Y can
    scroll past the default page height. Erasers don't widen the page.
    """
    min_x = math.inf
    max_y = float(config.page_height)
    for stroke in strokes:
        if stroke.is_eraser:
            continue
        for p in stroke.points:
            min_x = min(min_x, p.x)
            max_y = max(max_y, p.y)

    if config.x_offset is not None:
        x_offset = config.x_offset
    elif math.isinf(min_x):
        x_offset = 0.0
    else:
        x_offset = -min_x

    height = math.ceil(max_y) + config.bottom_margin
    return x_offset, float(config.page_width), float(height)


# =============================================================================
# SVG Document Generation
# =============================================================================

def _add_stroke(parent: ET.Element, stroke: RenderStroke, color: str, opacity: float) -> None:
    if not stroke.points:
        return

    if len(stroke.points) == 1:
        # Single point - draw a dot
        p = stroke.points[0]
        element = ET.SubElement(parent, "circle")
        element.set("cx", f"{p.x:.2f}")
        element.set("cy", f"{p.y:.2f}")
        element.set("r", f"{p.w / 2:.2f}")
        element.set("fill", color)
    else:
        element = ET.SubElement(parent, "path")
        element.set("d", points_to_path(stroke.points))
        element.set("stroke", color)
        element.set("stroke-width", f"{mean_width(stroke):.2f}")
        element.set("stroke-linecap", "round")
        element.set("stroke-linejoin", "round")
        element.set("fill", "none")

    if opacity < 1.0:
        element.set("opacity", f"{opacity:.2f}")


def render_svg(strokes: list[Stroke], output: TextIO,
               config: Optional[RenderConfig] = None) -> None:
    """
    Render strokes to SVG format.

    Args:
        strokes: Parsed strokes, in page order
        output: File-like object to write SVG to
        config: Page geometry and background (default: device page size)
    """
    config = config or RenderConfig()
    prepared = prepare_strokes(strokes)
    x_offset, width, height = page_extents(prepared, config)

    # Create SVG root
    svg = ET.Element("svg")
    svg.set("xmlns", "http://www.w3.org/2000/svg")
    svg.set("viewBox", f"0 0 {width:.2f} {height:.2f}")
    svg.set("width", f"{width:.2f}")
    svg.set("height", f"{height:.2f}")

    # Paper background
    bg = ET.SubElement(svg, "rect")
    bg.set("width", "100%")
    bg.set("height", "100%")
    bg.set("fill", config.background)

    page = ET.SubElement(svg, "g")
    page.set("transform", f"translate({x_offset:.2f} 0)")

    highlights = [s for s in prepared if s.is_highlighter and not s.is_eraser]
    regular = [s for s in prepared if not s.is_highlighter and not s.is_eraser]
    erasers = [s for s in prepared if s.is_eraser]

    g = ET.SubElement(page, "g")
    g.set("id", "highlights")
    g.set("style", "mix-blend-mode: multiply")
    for stroke in highlights:
        _add_stroke(g, stroke, stroke.color, stroke.opacity)

    g = ET.SubElement(page, "g")
    g.set("id", "strokes")
    for stroke in regular:
        _add_stroke(g, stroke, stroke.color, stroke.opacity)

    # Erasers paint over everything with the paper color
    g = ET.SubElement(page, "g")
    g.set("id", "erasers")
    for stroke in erasers:
        _add_stroke(g, stroke, config.background, 1.0)

    # Write to output
    tree = ET.ElementTree(svg)
    ET.indent(tree, space="  ")
    tree.write(output, encoding="unicode", xml_declaration=True)
    output.write("\n")


def render_to_file(strokes: list[Stroke], path: Path, **kwargs) -> None:
    """Render strokes to an SVG file."""
    with open(path, "w", encoding="utf-8") as f:
        render_svg(strokes, f, **kwargs)
