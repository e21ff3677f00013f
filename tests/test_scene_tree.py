import struct

from rmstrokes.parser import parse_bytes
from rmstrokes.reader import CrdtId, ROOT_ID, TaggedBlockReader
from rmstrokes.scene_tree import SceneTree

from rmbuild import (
    LENGTH4,
    block,
    file_bytes,
    line_block,
    node_block,
    point_v2,
    subblock,
    tag,
    tagged_id,
    tree_block,
)

LAYER = CrdtId(0, 11)
GROUP_TUPLE = (2, 20)
GROUP = CrdtId(*GROUP_TUPLE)


def body(block_bytes):
    # Strip the 8-byte block header
    return TaggedBlockReader(block_bytes[8:])


def test_tree_block_records_parent():
    tree = SceneTree()
    tree.read_tree_block(body(tree_block((0, 11), (0, 1))))
    assert tree.parents == {LAYER: ROOT_ID}
    assert tree.visible == {}


def test_is_update_flag_is_not_visibility():
    tree = SceneTree()
    tree.read_tree_block(body(tree_block((0, 11), (0, 1), is_update=False)))
    assert tree.is_visible(LAYER)


def test_tree_block_without_optional_fields():
    tree = SceneTree()
    tree.read_tree_block(body(block(0x01, tagged_id(1, (0, 11)))))
    assert tree.parents == {}


def test_tree_block_with_empty_parent_subblock():
    data = tagged_id(1, (0, 11)) + subblock(4, b"") + tagged_id(9, (0, 0))
    reader = TaggedBlockReader(data)
    tree = SceneTree()
    tree.read_tree_block(reader)
    assert tree.parents == {}
    # Subblock boundary is still honoured
    assert reader.read_id(9) == CrdtId(0, 0)


def test_node_block_records_visibility():
    tree = SceneTree()
    tree.read_node_block(body(node_block((0, 11), visible=False)))
    assert tree.visible == {LAYER: False}


def test_node_block_without_visibility():
    tree = SceneTree()
    tree.read_node_block(body(node_block((0, 11))))
    assert tree.visible == {}


def test_root_and_missing_nodes_are_visible():
    tree = SceneTree()
    assert tree.is_visible(ROOT_ID)
    assert tree.is_visible(None)
    assert tree.is_visible(CrdtId(9, 9))


def test_hidden_ancestor_hides_descendants():
    tree = SceneTree()
    tree.parents = {GROUP: LAYER, LAYER: ROOT_ID}
    tree.visible = {LAYER: False, GROUP: True}
    assert not tree.is_visible(LAYER)
    assert not tree.is_visible(GROUP)


def test_root_cannot_be_hidden():
    tree = SceneTree()
    tree.parents = {LAYER: ROOT_ID}
    tree.visible = {ROOT_ID: False}
    assert tree.is_visible(LAYER)


def test_visible_without_entries_in_chain():
    tree = SceneTree()
    tree.parents = {GROUP: LAYER, LAYER: ROOT_ID}
    assert tree.is_visible(GROUP)


def test_parent_cycle_terminates():
    a, b = CrdtId(1, 1), CrdtId(1, 2)
    tree = SceneTree()
    tree.parents = {a: b, b: a}
    assert tree.is_visible(a)

    tree.visible = {b: False}
    assert not tree.is_visible(a)


def test_overstated_parent_subblock_still_records_parent():
    data = tagged_id(1, (0, 11)) + tag(4, LENGTH4) + struct.pack("<I", 100) + tagged_id(1, (0, 1))
    reader = TaggedBlockReader(data)
    reader.block_end = len(data)
    tree = SceneTree()
    tree.read_tree_block(reader)
    assert tree.parents == {LAYER: ROOT_ID}
    assert reader.stream.tell() == len(data)


def test_overstated_parent_subblock_keeps_layer_hidden():
    body = tagged_id(1, GROUP_TUPLE) + tag(4, LENGTH4) + struct.pack("<I", 100) + tagged_id(1, (0, 11))
    data = file_bytes(
        block(0x01, body),
        node_block((0, 11), visible=False),
        line_block(GROUP_TUPLE, (1, 1), [point_v2(0.0, 0.0)]),
    )
    assert parse_bytes(data) == []
