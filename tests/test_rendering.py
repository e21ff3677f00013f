import pytest

from rmstrokes.model import Pen, PenColor, Point, Stroke
from rmstrokes.rendering import (
    RenderPoint,
    color_for_id,
    is_eraser,
    is_highlighter,
    opacity_for_tool,
    prepare_strokes,
    stroke_width,
)


@pytest.mark.parametrize("color_id, expected", [
    (PenColor.BLACK, "#000000"),
    (PenColor.WHITE, "#ffffff"),
    (PenColor.BLUE, "#5566ff"),
    (PenColor.HIGHLIGHT, "#ffff00"),
    (12, "#d040d0"),
    (13, "#000000"),
    (-1, "#000000"),
])
def test_color_for_id(color_id, expected):
    assert color_for_id(color_id) == expected


@pytest.mark.parametrize("tool, expected", [
    (Pen.HIGHLIGHTER, 0.15),
    (Pen.HIGHLIGHTER_2, 0.15),
    (Pen.SHADER, 0.15),
    (Pen.MARKER, 0.7),
    (Pen.MARKER_2, 0.7),
    (Pen.PENCIL, 0.6),
    (Pen.PENCIL_2, 0.6),
    (Pen.BALLPOINT, 1.0),
    (99, 1.0),
])
def test_opacity_for_tool(tool, expected):
    assert opacity_for_tool(tool) == expected


def test_fineliner_width():
    # (4 / 4) * 1.0 = 1.0, then * 0.8 with a 0.8 floor
    assert stroke_width(Point(0.0, 0.0, 4, 0), 1.0, Pen.FINELINER) == pytest.approx(0.8)


@pytest.mark.parametrize("tool, width, scale, expected", [
    (Pen.FINELINER_2, 40, 1.0, 8.0),
    (Pen.HIGHLIGHTER, 4, 1.0, 8.0),
    (Pen.HIGHLIGHTER_2, 40, 1.0, 30.0),
    (Pen.BALLPOINT, 0, 1.0, 0.6),
    (Pen.BALLPOINT_2, 20, 2.0, 7.0),
    (Pen.MECHANICAL_PENCIL, 8, 1.0, 1.0),
    (Pen.MECHANICAL_PENCIL_2, 1, 1.0, 0.5),
    (Pen.CALLIGRAPHY, 2, 1.0, 1.0),
    (Pen.MARKER, 16, 1.0, 6.0),
    (Pen.MARKER_2, 1, 1.0, 2.0),
    (Pen.SHADER, 8, 1.0, 5.0),
    (Pen.SHADER, 0, 1.0, 4.0),
    (Pen.PAINTBRUSH, 12, 1.5, 4.5),
    (99, 0, 1.0, 0.5),
])
def test_stroke_width_per_tool(tool, width, scale, expected):
    assert stroke_width(Point(0.0, 0.0, width, 0), scale, tool) == pytest.approx(expected)


def test_tool_classification():
    assert is_eraser(Pen.ERASER)
    assert is_eraser(8)
    assert not is_eraser(Pen.PENCIL)
    assert is_highlighter(Pen.HIGHLIGHTER_2)
    assert not is_highlighter(Pen.SHADER)
    assert not is_highlighter(99)


def test_prepare_strokes():
    strokes = [
        Stroke(Pen.FINELINER, PenColor.RED, 1.0, [Point(1.0, 2.0, 4, 50)], "0:11"),
        Stroke(Pen.ERASER, PenColor.BLACK, 2.0, [Point(3.0, 4.0, 8, 0)], "0:11"),
    ]
    pen, eraser = prepare_strokes(strokes)

    assert pen.color == "#ff4444"
    assert pen.opacity == 1.0
    assert not pen.is_eraser
    assert pen.points == [RenderPoint(1.0, 2.0, pytest.approx(0.8))]

    assert eraser.is_eraser
    assert not eraser.is_highlighter
    assert eraser.thickness_scale == 2.0
    assert eraser.points[0].w == pytest.approx(4.0)
