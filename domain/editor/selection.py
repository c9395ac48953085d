# Selection - Single / Multi Item Selection
"""
选择状态

职责：
- 表示当前选中项：无选择、单选（item + 类型）或多选（item → 类型 映射）
- 单选在追加选择时提升为多选，类型标签变为 "table"

设计原则：
- 不可变值对象，每次选择变化生成新对象，旧对象可直接作为 previous_selection 发送
- 多选表按身份区分选择项（依赖 domain.map.models 的 eq=False）
"""

from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple, Union

from domain.map.models import item_type_of


MULTI_SELECTION_TYPE = "table"


@dataclass(frozen=True)
class SingleSelection:
    """单个选中项（item 可以为 None，表示没有选中）"""

    item: Any = None
    item_type: Optional[str] = None

    @classmethod
    def of(cls, item: Any) -> "SingleSelection":
        return cls(item=item, item_type=item_type_of(item))

    @property
    def is_empty(self) -> bool:
        return self.item is None

    def contains(self, item: Any) -> bool:
        """
        item 是否就是当前选中项（按对象身份比较）

        None 从不算被选中，空选择对 None 同样返回 False。
        """
        return item is not None and self.item is item

    def as_pair(self) -> Tuple[Any, Optional[str]]:
        return self.item, self.item_type

    def promote_to_multi(self) -> "MultiSelection":
        """提升为只包含当前项的多选"""
        return MultiSelection(items={self.item: self.item_type})


@dataclass(frozen=True)
class MultiSelection:
    """多个选中项，items 为 item → 类型标签"""

    items: Dict[Any, Optional[str]] = field(default_factory=dict)

    item_type = MULTI_SELECTION_TYPE

    @property
    def is_empty(self) -> bool:
        return not self.items

    def contains(self, item: Any) -> bool:
        return item in self.items

    def as_pair(self) -> Tuple[Dict[Any, Optional[str]], str]:
        return self.items, MULTI_SELECTION_TYPE

    def with_item(self, item: Any) -> "MultiSelection":
        """追加选择项，返回新对象"""
        items = dict(self.items)
        items[item] = item_type_of(item)
        return MultiSelection(items=items)


Selection = Union[SingleSelection, MultiSelection]

EMPTY_SELECTION = SingleSelection()


__all__ = [
    "MULTI_SELECTION_TYPE",
    "SingleSelection",
    "MultiSelection",
    "Selection",
    "EMPTY_SELECTION",
]
