"""
Group items and vertical stacking of sub-grouped pages.

On pages with typed text, handwriting is split into groups whose
coordinates are local to the group (Y near 0). The left-id chain of the
group items gives their top-to-bottom order; stacking the groups by their
bounding-box heights puts the strokes back where they appear on the page.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

from .items import ItemEnvelope, LiveLine, read_item_envelope
from .model import Stroke
from .reader import CrdtId, END_ID, TaggedBlockReader

_logger = logging.getLogger(__name__)

GROUP_VALUE_TYPE = 0x02


@dataclass
class GroupEntry:
    """A group item: its layer, left neighbour and scene tree node."""
    parent_id: CrdtId
    left_id: CrdtId
    node_ref: CrdtId


@dataclass
class Bounds:
    min_y: float
    max_y: float

    @property
    def height(self) -> float:
        return self.max_y - self.min_y


def read_group_item_block(
    reader: TaggedBlockReader,
    live_groups: dict[CrdtId, GroupEntry],
    live_lines: dict[CrdtId, LiveLine],
) -> Optional[ItemEnvelope]:
    """Read a group item block (0x04) and update the live groups."""
    item = read_item_envelope(reader)

    if item.deleted_length > 0:
        live_groups.pop(item.item_id, None)
        live_lines.pop(item.item_id, None)
        return item

    if not reader.has_subblock(6):
        return item

    value_end = reader.read_subblock(6)
    value_type = reader.stream.read_uint8()
    if value_type == GROUP_VALUE_TYPE:
        node_ref = reader.read_id(2)
        live_groups.pop(item.item_id, None)
        live_groups[item.item_id] = GroupEntry(item.parent_id, item.left_id, node_ref)

    reader.stream.seek(value_end)
    return item


def crdt_sort(items: dict[CrdtId, GroupEntry]) -> list[CrdtId]:
    """
    Order items by following their left-id chain from the start marker.

    Items the chain never reaches are appended in insertion order.
    """
    by_left = {entry.left_id: item_id for item_id, entry in items.items()}

    ordered = []
    used = set()
    key = by_left.get(END_ID)
    while key is not None and key not in used:
        used.add(key)
        ordered.append(key)
        key = by_left.get(key)

    unreached = [item_id for item_id in items if item_id not in used]
    if unreached:
        _logger.debug("Groups not on the left-id chain: %s", unreached)
    return ordered + unreached


def stroke_bounds(strokes: list[Stroke]) -> dict[str, Bounds]:
    """Vertical extent of the points of each group key."""
    bounds: dict[str, Bounds] = {}
    for stroke in strokes:
        if not stroke.group_key:
            continue
        b = bounds.setdefault(stroke.group_key, Bounds(float("inf"), float("-inf")))
        for p in stroke.points:
            b.min_y = min(b.min_y, p.y)
            b.max_y = max(b.max_y, p.y)
    return bounds


def group_offsets(
    strokes: list[Stroke],
    live_groups: dict[CrdtId, GroupEntry],
) -> dict[str, float]:
    """
    Compute the Y offset for each stroke-bearing group key.

    Groups are stacked top to bottom in left-id order, each starting where
    the previous one ended.
    """
    bounds = stroke_bounds(strokes)
    if len(bounds) <= 1:
        return {}

    with_strokes = {
        item_id: g for item_id, g in live_groups.items()
        if str(g.node_ref) in bounds
    }

    offsets: dict[str, float] = {}
    y_pos = 0.0
    for item_id in crdt_sort(with_strokes):
        key = str(with_strokes[item_id].node_ref)
        b = bounds[key]
        if b.min_y > b.max_y:
            continue  # no points
        offsets[key] = y_pos - b.min_y
        y_pos += b.height
    return offsets


def apply_group_offsets(
    strokes: list[Stroke],
    live_groups: dict[CrdtId, GroupEntry],
) -> None:
    """Shift the points of grouped strokes so the groups no longer overlap."""
    offsets = group_offsets(strokes, live_groups)
    for stroke in strokes:
        offset = offsets.get(stroke.group_key)
        if offset:
            for p in stroke.points:
                p.y += offset
