"""
Scene tree structure and visibility.

Tree membership and visibility arrive in two different block types, in
any order. Both are recorded here and resolved once the whole file has
been read.
"""

from __future__ import annotations

import logging
from typing import Optional

from .reader import CrdtId, ROOT_ID, TagType, TaggedBlockReader, RmParseError

_logger = logging.getLogger(__name__)


class SceneTree:
    """Parent links and visibility flags keyed by node id."""

    def __init__(self):
        self.parents: dict[CrdtId, CrdtId] = {}
        self.visible: dict[CrdtId, bool] = {}

    def read_tree_block(self, reader: TaggedBlockReader) -> None:
        """
        Read a SceneTree block (0x01) and record the node's parent.

        Layout: node id (1), secondary id (2), is-update flag (3), then a
        subblock (4) holding the parent id at index 1. The is-update flag
        is not a visibility flag; visibility only comes from node blocks.
        """
        node_id = reader.read_id(1)

        if reader.check_tag(2, TagType.ID):
            reader.read_id(2)
        if reader.check_tag(3, TagType.Byte1):
            _is_update = reader.read_bool(3)

        if reader.has_subblock(4):
            end = reader.read_subblock(4, clamp=True)
            try:
                self.parents[node_id] = reader.read_id(1)
            except RmParseError as e:
                _logger.debug("No parent for node %s: %s", node_id, e)
            reader.stream.seek(end)

    def read_node_block(self, reader: TaggedBlockReader) -> None:
        """Read a TreeNode block (0x02) and record the node's visibility."""
        node_id = reader.read_id(1)

        # Name (LWW string) is not needed
        if reader.has_subblock(2):
            reader.skip_subblock(2)

        if reader.has_subblock(3):
            self.visible[node_id] = reader.read_lww_bool(3)

    def is_visible(self, key: Optional[CrdtId]) -> bool:
        """
        Effective visibility of a node.

        A node is hidden if it or any ancestor is explicitly hidden. Nodes
        with no parent link are treated as visible.
        """
        seen = set()
        while key is not None and key != ROOT_ID:
            if key in seen:
                _logger.warning("Cycle in scene tree at node %s", key)
                return True
            seen.add(key)
            if self.visible.get(key) is False:
                return False
            key = self.parents.get(key)
        return True
