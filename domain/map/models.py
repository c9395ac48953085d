# Map Models - Map Structure Entities
"""
地图结构实体

职责：
- 定义编辑器操作的地图结构：Side（文档根）、MapData、Room、Filler
- 提供选择项类型判定 item_type_of

设计原则：
- 使用 dataclass(eq=False)，实例按身份比较和哈希，可直接作为选择表的键
- 实体/触发器/贴花保持为普通 dict，字段名与文件中的属性一致

使用示例：
    from domain.map.models import Room, MapData, Side, item_type_of

    room = Room(name="lvl_start", width=320, height=184)
    side = Side(map=MapData(package="demo", rooms=[room]))

    item_type_of(room)  # "room"
"""

from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional


# ============================================================
# 选择项类型常量
# ============================================================

ITEM_TYPE_ROOM = "room"
ITEM_TYPE_FILLER = "filler"


# ============================================================
# 地图元素
# ============================================================

@dataclass(eq=False)
class Room:
    """
    房间

    Attributes:
        name: 房间名（通常带 lvl_ 前缀）
        x, y: 房间左上角位置（像素）
        width, height: 房间尺寸（像素）
        entities: 实体列表，每个实体为 dict，"_name" 为实体类型
        triggers: 触发器列表，结构同实体
        decals_fg: 前景贴花
        decals_bg: 背景贴花
        tiles_fg: 前景图块字符串（按行以换行分隔）
        tiles_bg: 背景图块字符串
        attributes: 其余房间属性（音乐、风、暗度等），原样往返
    """

    name: str = ""
    x: int = 0
    y: int = 0
    width: int = 320
    height: int = 184
    entities: List[Dict[str, Any]] = field(default_factory=list)
    triggers: List[Dict[str, Any]] = field(default_factory=list)
    decals_fg: List[Dict[str, Any]] = field(default_factory=list)
    decals_bg: List[Dict[str, Any]] = field(default_factory=list)
    tiles_fg: str = ""
    tiles_bg: str = ""
    attributes: Dict[str, Any] = field(default_factory=dict)


@dataclass(eq=False)
class Filler:
    """填充块（以 8 像素图块为单位的矩形）"""

    x: int = 0
    y: int = 0
    width: int = 0
    height: int = 0


@dataclass(eq=False)
class MapData:
    """
    地图

    Attributes:
        package: 地图包名
        rooms: 房间列表（保持文件中的顺序）
        fillers: 填充块列表
        style_fg: 前景样式元素
        style_bg: 背景样式元素
    """

    package: str = ""
    rooms: List[Room] = field(default_factory=list)
    fillers: List[Filler] = field(default_factory=list)
    style_fg: List[Dict[str, Any]] = field(default_factory=list)
    style_bg: List[Dict[str, Any]] = field(default_factory=list)


@dataclass(eq=False)
class Side:
    """
    文档根：地图 + 元数据 + 编辑器信息

    editor_information 只由编辑器读写（图层名等），随地图一起保存
    """

    map: MapData = field(default_factory=MapData)
    meta: Dict[str, Any] = field(default_factory=dict)
    editor_information: Dict[str, Any] = field(default_factory=dict)

    @property
    def name(self) -> str:
        return self.map.package


# ============================================================
# 辅助函数
# ============================================================

def item_type_of(item: Optional[Any]) -> Optional[str]:
    """
    选择项的类型标签

    Returns:
        "room"、"filler"，其他类型为小写类名；item 为 None 时返回 None
    """
    if item is None:
        return None
    if isinstance(item, Room):
        return ITEM_TYPE_ROOM
    if isinstance(item, Filler):
        return ITEM_TYPE_FILLER
    return type(item).__name__.lower()


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "ITEM_TYPE_ROOM",
    "ITEM_TYPE_FILLER",
    "Room",
    "Filler",
    "MapData",
    "Side",
    "item_type_of",
]
