# Side Codec - Element Tree <-> Side Conversion
"""
文档结构 (反)序列化

职责：
- 元素树（MapCoder 解码结果）→ Side
- Side → 元素树（供 MapCoder 编码）
- 统计各图层使用到的子图层编号

元素树结构：
    {
        "__name": "Map",
        "package": "demo",
        "__children": [
            {"__name": "levels", "__children": [<level>...]},
            {"__name": "Filler", "__children": [{"__name": "rect", "x": 0, "y": 0, "w": 4, "h": 4}]},
            {"__name": "Style", "__children": [
                {"__name": "Foregrounds", "__children": [...]},
                {"__name": "Backgrounds", "__children": [...]},
            ]},
            {"__name": "meta", ...},
            {"__name": "editorInformation", ...},
        ],
    }

    <level> = {
        "__name": "level", "name": "lvl_start", "x": 0, "y": 0, "width": 320, "height": 184,
        "__children": [
            {"__name": "entities", "__children": [{"__name": "player", "x": 16, "y": 16}]},
            {"__name": "triggers", "__children": [...]},
            {"__name": "fgdecals", "__children": [...]},
            {"__name": "bgdecals", "__children": [...]},
            {"__name": "solids", "innerText": "..."},
            {"__name": "bg", "innerText": "..."},
        ],
    }

空输入（{}）得到一个空但合法的 Side。
结构错误（类型不符、缺少必需属性）抛出 SideCodecError。
"""

from typing import Any, Dict, List

from domain.map.models import Filler, MapData, Room, Side


# ============================================================
# 常量
# ============================================================

EDITOR_LAYER_KEY = "_editorLayer"

# 图层名 → Room 属性名
LAYER_FIELDS = {
    "entities": "entities",
    "triggers": "triggers",
    "decalsFg": "decals_fg",
    "decalsBg": "decals_bg",
}

# 房间子元素名 → Room 属性名
_ROOM_ITEM_ELEMENTS = {
    "entities": "entities",
    "triggers": "triggers",
    "fgdecals": "decals_fg",
    "bgdecals": "decals_bg",
}

_ROOM_TILE_ELEMENTS = {
    "solids": "tiles_fg",
    "bg": "tiles_bg",
}

_ROOM_BASE_ATTRIBUTES = ("name", "x", "y", "width", "height")


class SideCodecError(ValueError):
    """元素树结构无法转换为 Side"""
    pass


# ============================================================
# 解码：元素树 → Side
# ============================================================

def _children(element: Dict[str, Any]) -> List[Dict[str, Any]]:
    children = element.get("__children", [])
    if not isinstance(children, list):
        raise SideCodecError(f"元素 {element.get('__name')!r} 的 __children 不是列表")
    for child in children:
        if not isinstance(child, dict):
            raise SideCodecError(f"元素 {element.get('__name')!r} 含有非对象子元素")
    return children


def _attributes(element: Dict[str, Any]) -> Dict[str, Any]:
    return {k: v for k, v in element.items() if k not in ("__name", "__children")}


def _decode_item(element: Dict[str, Any]) -> Dict[str, Any]:
    item = _attributes(element)
    item["_name"] = element.get("__name", "")

    # 子图层编号必须是整数
    if item.get(EDITOR_LAYER_KEY) is not None:
        item[EDITOR_LAYER_KEY] = _int_attribute(item, EDITOR_LAYER_KEY)

    return item


def _int_attribute(element: Dict[str, Any], key: str, default: int = 0) -> int:
    value = element.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise SideCodecError(f"属性 {key!r} 不是数字: {value!r}")
    return int(value)


def _decode_room(element: Dict[str, Any]) -> Room:
    if "name" not in element:
        raise SideCodecError("房间缺少 name 属性")

    room = Room(
        name=str(element["name"]),
        x=_int_attribute(element, "x"),
        y=_int_attribute(element, "y"),
        width=_int_attribute(element, "width", 320),
        height=_int_attribute(element, "height", 184),
        attributes={k: v for k, v in _attributes(element).items() if k not in _ROOM_BASE_ATTRIBUTES},
    )

    for child in _children(element):
        name = child.get("__name")
        if name in _ROOM_ITEM_ELEMENTS:
            setattr(room, _ROOM_ITEM_ELEMENTS[name], [_decode_item(c) for c in _children(child)])
        elif name in _ROOM_TILE_ELEMENTS:
            setattr(room, _ROOM_TILE_ELEMENTS[name], str(child.get("innerText", "")))

    return room


def _decode_filler(element: Dict[str, Any]) -> Filler:
    return Filler(
        x=_int_attribute(element, "x"),
        y=_int_attribute(element, "y"),
        width=_int_attribute(element, "w"),
        height=_int_attribute(element, "h"),
    )


def decode_side(data: Dict[str, Any]) -> Side:
    """
    元素树 → Side

    Raises:
        SideCodecError: 结构错误
    """
    if not isinstance(data, dict):
        raise SideCodecError(f"根元素必须是对象，实际为 {type(data).__name__}")

    side = Side(map=MapData(package=str(data.get("package", ""))))

    for child in _children(data):
        name = child.get("__name")

        if name == "levels":
            side.map.rooms = [_decode_room(c) for c in _children(child)]
        elif name == "Filler":
            side.map.fillers = [_decode_filler(c) for c in _children(child)]
        elif name == "Style":
            for style in _children(child):
                if style.get("__name") == "Foregrounds":
                    side.map.style_fg = list(_children(style))
                elif style.get("__name") == "Backgrounds":
                    side.map.style_bg = list(_children(style))
        elif name == "meta":
            side.meta = _attributes(child)
        elif name == "editorInformation":
            side.editor_information = _attributes(child)

    return side


# ============================================================
# 编码：Side → 元素树
# ============================================================

def _encode_item(item: Dict[str, Any]) -> Dict[str, Any]:
    element = {"__name": item.get("_name", "")}
    element.update({k: v for k, v in item.items() if k != "_name"})
    return element


def _encode_room(room: Room) -> Dict[str, Any]:
    element = {
        "__name": "level",
        "name": room.name,
        "x": room.x,
        "y": room.y,
        "width": room.width,
        "height": room.height,
    }
    element.update(room.attributes)

    children = []
    for element_name, attr in _ROOM_ITEM_ELEMENTS.items():
        children.append({
            "__name": element_name,
            "__children": [_encode_item(item) for item in getattr(room, attr)],
        })
    for element_name, attr in _ROOM_TILE_ELEMENTS.items():
        children.append({"__name": element_name, "innerText": getattr(room, attr)})

    element["__children"] = children
    return element


def encode_side(side: Side) -> Dict[str, Any]:
    """Side → 元素树"""
    map_data = side.map

    return {
        "__name": "Map",
        "package": map_data.package,
        "__children": [
            {
                "__name": "levels",
                "__children": [_encode_room(room) for room in map_data.rooms],
            },
            {
                "__name": "Filler",
                "__children": [
                    {"__name": "rect", "x": f.x, "y": f.y, "w": f.width, "h": f.height}
                    for f in map_data.fillers
                ],
            },
            {
                "__name": "Style",
                "__children": [
                    {"__name": "Foregrounds", "__children": list(map_data.style_fg)},
                    {"__name": "Backgrounds", "__children": list(map_data.style_bg)},
                ],
            },
            {"__name": "meta", **side.meta},
            {"__name": "editorInformation", **side.editor_information},
        ],
    }


# 任务链使用的入口（在工作线程中执行，失败即抛出）
decode_taskable = decode_side
encode_taskable = encode_side


# ============================================================
# 子图层
# ============================================================

def _sub_layer_of(item: Dict[str, Any]) -> int:
    """元素所在子图层；编号缺失或不是整数时归入子图层 0"""
    value = item.get(EDITOR_LAYER_KEY)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0
    return int(value)


def get_sub_layers(map_data: MapData) -> Dict[str, List[int]]:
    """
    统计每个图层用到的子图层编号

    未标注 _editorLayer 的元素属于子图层 0

    Returns:
        Dict: 图层名 → 升序子图层编号列表（没有元素的图层为空列表）
    """
    found: Dict[str, set] = {layer: set() for layer in LAYER_FIELDS}

    if map_data is None:
        return {layer: [] for layer in LAYER_FIELDS}

    for room in map_data.rooms:
        for layer, attr in LAYER_FIELDS.items():
            for item in getattr(room, attr):
                found[layer].add(_sub_layer_of(item))

    return {layer: sorted(values) for layer, values in found.items()}


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "EDITOR_LAYER_KEY",
    "LAYER_FIELDS",
    "SideCodecError",
    "decode_side",
    "encode_side",
    "decode_taskable",
    "encode_taskable",
    "get_sub_layers",
]
