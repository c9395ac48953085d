# Map Structure Domain
"""
地图结构域

包含：
- models.py: Side / MapData / Room / Filler 实体与 item_type_of
- side_codec.py: 元素树与 Side 之间的转换、子图层统计
"""

from domain.map.models import (
    ITEM_TYPE_ROOM,
    ITEM_TYPE_FILLER,
    Room,
    Filler,
    MapData,
    Side,
    item_type_of,
)
from domain.map.side_codec import (
    SideCodecError,
    decode_side,
    encode_side,
    get_sub_layers,
)

__all__ = [
    "ITEM_TYPE_ROOM",
    "ITEM_TYPE_FILLER",
    "Room",
    "Filler",
    "MapData",
    "Side",
    "item_type_of",
    "SideCodecError",
    "decode_side",
    "encode_side",
    "get_sub_layers",
]
