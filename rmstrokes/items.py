"""
Scene item blocks: strokes and deletions.

Glyph (0x03), line (0x05) and 0x08 item blocks share one CRDT envelope.
Only line values carry stroke data, but any of them may be a tombstone
that deletes an item recorded earlier in the file.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Optional

from .model import Point, Stroke
from .reader import BinaryReader, CrdtId, MalformedSubblockError, TaggedBlockReader

_logger = logging.getLogger(__name__)

LINE_VALUE_TYPE = 0x03

POINT_SIZE_V2 = 14
POINT_SIZE_V1 = 24


@dataclass
class ItemEnvelope:
    """Header shared by all scene item blocks."""
    parent_id: CrdtId
    item_id: CrdtId
    left_id: CrdtId
    right_id: CrdtId
    deleted_length: int


@dataclass
class LiveLine:
    """Latest state of a line item and the node it belongs to."""
    stroke: Stroke
    parent_id: CrdtId


def read_item_envelope(reader: TaggedBlockReader) -> ItemEnvelope:
    return ItemEnvelope(
        parent_id=reader.read_id(1),
        item_id=reader.read_id(2),
        left_id=reader.read_id(3),
        right_id=reader.read_id(4),
        deleted_length=reader.read_int(5),
    )


def _round_half_up(value: float) -> int:
    if not math.isfinite(value):
        raise MalformedSubblockError(f"Point value is not finite: {value}")
    return math.floor(value + 0.5)


def read_point(stream: BinaryReader, version: int) -> Point:
    """
    Read a single point.

    Version 2+ packs points into 14 bytes (x, y, speed, width, direction,
    pressure). Older blocks use 24 bytes of floats with width and pressure
    normalised; they are rescaled to the v2 integer ranges.
    """
    x = stream.read_float32()
    y = stream.read_float32()
    if version >= 2:
        _speed = stream.read_uint16()
        width = stream.read_uint16()
        _direction = stream.read_uint8()
        pressure = stream.read_uint8()
    else:
        _speed = stream.read_float32()
        _direction = stream.read_float32()
        width = _round_half_up(stream.read_float32() * 4)
        pressure = _round_half_up(stream.read_float32() * 255)
    return Point(x, y, width, pressure)


def read_line(reader: TaggedBlockReader, version: int) -> Stroke:
    """Read stroke data from a line value subblock."""
    tool = reader.read_int(1)
    color = reader.read_int(2)
    thickness_scale = reader.read_double(3)
    _starting_length = reader.read_float(4)

    points_end = reader.read_subblock(5)
    points_length = points_end - reader.stream.tell()
    point_size = POINT_SIZE_V2 if version >= 2 else POINT_SIZE_V1
    num_points = points_length // point_size

    points = [read_point(reader.stream, version) for _ in range(num_points)]

    return Stroke(
        tool=tool,
        color=color,
        thickness_scale=thickness_scale,
        points=points,
    )


def read_scene_item_block(
    reader: TaggedBlockReader,
    version: int,
    live_lines: dict[CrdtId, LiveLine],
) -> Optional[ItemEnvelope]:
    """
    Read a scene item block and update the live lines.

    A tombstone removes the item. A line value replaces whatever was
    recorded for the item before; file order is causal order, so the
    latest block always wins.
    """
    item = read_item_envelope(reader)

    if item.deleted_length > 0:
        if live_lines.pop(item.item_id, None) is not None:
            _logger.debug("Deleted line %s", item.item_id)
        return item

    if not reader.has_subblock(6):
        return item

    value_end = reader.read_subblock(6)
    value_type = reader.stream.read_uint8()
    if value_type != LINE_VALUE_TYPE:
        reader.stream.seek(value_end)
        return item

    stroke = read_line(reader, version)

    # Skip timestamp, move id and anything newer firmware appends
    reader.stream.seek(value_end)

    # Re-insert so output order follows the latest write
    live_lines.pop(item.item_id, None)
    live_lines[item.item_id] = LiveLine(stroke, item.parent_id)
    return item
