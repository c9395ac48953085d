"""
元素树与 Side 转换测试
"""

import pytest

from domain.map.models import Room, Side
from domain.map.side_codec import SideCodecError, decode_side, encode_side, get_sub_layers


def test_empty_tree_gives_empty_side():
    side = decode_side({})

    assert isinstance(side, Side)
    assert side.map.package == ""
    assert side.map.rooms == []
    assert side.map.fillers == []
    assert side.meta == {}


def test_encode_then_decode_preserves_document(side):
    """测试房间、实体、图块、填充块、样式与元数据都能往返"""
    side.map.style_fg = [{"__name": "parallax", "texture": "bgs/stars"}]
    side.editor_information = {"layerNames": {"entities": "Gameplay"}}

    restored = decode_side(encode_side(side))

    start, end = restored.map.rooms
    assert restored.map.package == "demo"
    assert start.name == "lvl_start"
    assert start.entities == side.map.rooms[0].entities
    assert start.triggers == side.map.rooms[0].triggers
    assert start.tiles_fg == "111\n1.1\n111"
    assert start.attributes == {"music": "level1"}
    assert (end.x, end.y, end.width, end.height) == (320, 0, 320, 184)
    assert end.decals_fg == [{"_name": "decal", "texture": "a.png"}]
    assert [(f.x, f.y, f.width, f.height) for f in restored.map.fillers] == [(0, 200, 4, 4)]
    assert restored.map.style_fg == [{"__name": "parallax", "texture": "bgs/stars"}]
    assert restored.meta == {"ForegroundTiles": "Graphics/fg.xml"}
    assert restored.editor_information == {"layerNames": {"entities": "Gameplay"}}


def test_encoded_room_element():
    tree = encode_side(Side())
    levels = tree["__children"][0]

    assert tree["__name"] == "Map"
    assert levels == {"__name": "levels", "__children": []}


def test_room_without_name_is_rejected():
    tree = {"__children": [{"__name": "levels", "__children": [{"__name": "level", "x": 0}]}]}

    with pytest.raises(SideCodecError):
        decode_side(tree)


def test_non_numeric_position_is_rejected():
    tree = {"__children": [{"__name": "levels", "__children": [{"__name": "level", "name": "a", "x": "left"}]}]}

    with pytest.raises(SideCodecError):
        decode_side(tree)


def test_non_object_root_is_rejected():
    with pytest.raises(SideCodecError):
        decode_side([])


def test_sub_layers(side):
    assert get_sub_layers(side.map) == {
        "entities": [0, 2],
        "triggers": [0],
        "decalsFg": [0],
        "decalsBg": [],
    }


def test_sub_layers_of_empty_map():
    assert get_sub_layers(None) == {"entities": [], "triggers": [], "decalsFg": [], "decalsBg": []}
    assert get_sub_layers(Side().map)["entities"] == []


def test_side_name_is_package():
    side = Side()
    side.map.package = "celeste"
    side.map.rooms.append(Room(name="lvl_a"))

    assert side.name == "celeste"


def _tree_with_entity(entity: dict) -> dict:
    room = {
        "__name": "level",
        "name": "lvl_a",
        "__children": [{"__name": "entities", "__children": [entity]}],
    }
    return {"__children": [{"__name": "levels", "__children": [room]}]}


def test_non_numeric_editor_layer_is_rejected():
    """测试子图层编号不是整数时在解码阶段失败"""
    with pytest.raises(SideCodecError):
        decode_side(_tree_with_entity({"__name": "spring", "_editorLayer": "top"}))


def test_editor_layer_is_normalized_to_int():
    side = decode_side(_tree_with_entity({"__name": "spring", "_editorLayer": 3.0}))

    assert side.map.rooms[0].entities[0]["_editorLayer"] == 3
    assert get_sub_layers(side.map)["entities"] == [3]


def test_sub_layers_ignore_non_integer_values():
    """测试代码中构造的非法编号归入子图层 0，而不是在提交时抛出异常"""
    side = Side()
    side.map.rooms.append(Room(name="lvl_a", entities=[{"_name": "spring", "_editorLayer": "top"}]))

    assert get_sub_layers(side.map)["entities"] == [0]
