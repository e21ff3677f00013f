"""
reMarkable v6 .rm file parser

Reads the top-level blocks of a v6 file in a single pass, collects the
scene tree, live line items and groups, then resolves visibility and
group stacking to produce the final list of strokes.

Format Overview:
- Header: 43 bytes "reMarkable .lines file, version=6" + space padding
- Blocks: u32 length, u8 unknown, u8 min version, u8 current version,
  u8 block type, then `length` bytes of tagged values
- Files may be read while the device is still writing them, so a block
  that cannot be parsed is skipped rather than failing the whole file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import IntEnum
from pathlib import Path
from typing import Callable

from .groups import GroupEntry, apply_group_offsets, read_group_item_block
from .items import LiveLine, read_scene_item_block
from .model import Pen, PenColor, Stroke
from .reader import CrdtId, RmParseError, TaggedBlockReader
from .scene_tree import SceneTree

_logger = logging.getLogger(__name__)


# =============================================================================
# Constants
# =============================================================================

# Smallest amount of data worth trying to read another block from
MIN_BLOCK_BYTES = 4


class BlockType(IntEnum):
    """Top-level block types in v6 format."""
    MigrationInfo = 0x00
    SceneTree = 0x01
    TreeNode = 0x02
    GlyphItem = 0x03
    GroupItem = 0x04
    LineItem = 0x05
    TextItem = 0x06
    RootText = 0x07
    TombstoneItem = 0x08
    AuthorIds = 0x09
    PageInfo = 0x0A
    SceneInfo = 0x0D


# =============================================================================
# Block Dispatch
# =============================================================================

@dataclass
class ParseState:
    """Everything collected while reading one file."""
    tree: SceneTree = field(default_factory=SceneTree)
    live_lines: dict[CrdtId, LiveLine] = field(default_factory=dict)
    live_groups: dict[CrdtId, GroupEntry] = field(default_factory=dict)


BlockHandler = Callable[[TaggedBlockReader, ParseState, int], None]


def _read_tree(reader: TaggedBlockReader, state: ParseState, version: int) -> None:
    state.tree.read_tree_block(reader)


def _read_node(reader: TaggedBlockReader, state: ParseState, version: int) -> None:
    state.tree.read_node_block(reader)


def _read_item(reader: TaggedBlockReader, state: ParseState, version: int) -> None:
    read_scene_item_block(reader, version, state.live_lines)


def _read_group(reader: TaggedBlockReader, state: ParseState, version: int) -> None:
    read_group_item_block(reader, state.live_groups, state.live_lines)


BLOCK_HANDLERS: dict[int, BlockHandler] = {
    BlockType.SceneTree: _read_tree,
    BlockType.TreeNode: _read_node,
    BlockType.GlyphItem: _read_item,
    BlockType.LineItem: _read_item,
    BlockType.TombstoneItem: _read_item,
    BlockType.GroupItem: _read_group,
}


def read_blocks(reader: TaggedBlockReader, state: ParseState) -> int:
    """
    Read all blocks after the header into `state`.

    Every block is left at its declared end, whatever its handler read.
    Returns the number of blocks skipped because they could not be parsed.
    """
    stream = reader.stream
    skipped = 0

    while stream.remaining() > MIN_BLOCK_BYTES:
        header = reader.read_block_header()
        if header is None:
            break

        block_type, length, _min_version, current_version = header
        block_start = stream.tell()
        block_end = block_start + length

        handler = BLOCK_HANDLERS.get(block_type)
        if handler is not None:
            _logger.debug(
                "Reading block type 0x%02X v%d at %d (%d bytes)",
                block_type, current_version, block_start, length,
            )
            reader.block_end = block_end
            try:
                handler(reader, state, current_version)
            except RmParseError as e:
                skipped += 1
                _logger.warning(
                    "Skipping block type 0x%02X at %d: %s", block_type, block_start, e
                )
            finally:
                reader.block_end = None

        # Skip to end of block
        stream.seek(min(block_end, stream.size))

    return skipped


def resolve_strokes(state: ParseState) -> list[Stroke]:
    """Visible strokes in live order, with group stacking applied."""
    strokes = []
    for live in state.live_lines.values():
        if state.tree.is_visible(live.parent_id):
            live.stroke.group_key = str(live.parent_id)
            strokes.append(live.stroke)

    if state.live_groups:
        apply_group_offsets(strokes, state.live_groups)

    return strokes


def parse_bytes(data: bytes) -> list[Stroke]:
    """
    Parse the contents of a v6 .rm file and return its visible strokes.

    Raises HeaderMismatchError if the data is not a v6 file. Any other
    problem only drops the affected block.
    """
    reader = TaggedBlockReader(data)
    reader.read_header()

    state = ParseState()
    skipped = read_blocks(reader, state)
    strokes = resolve_strokes(state)

    _logger.debug(
        "Parsed %d strokes (%d live lines, %d groups, %d blocks skipped)",
        len(strokes), len(state.live_lines), len(state.live_groups), skipped,
    )
    return strokes


def parse_file(path: Path) -> list[Stroke]:
    """Parse a .rm file and extract its visible strokes."""
    with open(path, "rb") as f:
        return parse_bytes(f.read())


# =============================================================================
# CLI
# =============================================================================

def analyze_file(path: Path) -> None:
    """Analyze a .rm file and print summary."""
    print(f"File: {path.name}")
    print(f"Size: {path.stat().st_size} bytes")
    print()

    strokes = parse_file(path)
    total_points = sum(len(stroke.points) for stroke in strokes)
    groups = {stroke.group_key for stroke in strokes}

    print(f"Strokes: {len(strokes)}")
    print(f"Points: {total_points}")
    print(f"Groups: {len(groups)}")

    if strokes:
        print("\nPen types used:")
        for pen in sorted({stroke.pen for stroke in strokes}):
            name = pen.name if isinstance(pen, Pen) else f"Unknown({pen})"
            print(f"  - {name}")

        print("\nColors used:")
        for color in sorted({stroke.pen_color for stroke in strokes}):
            name = color.name if isinstance(color, PenColor) else f"Unknown({color})"
            print(f"  - {name}")
