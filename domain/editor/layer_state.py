# Layer State - Per-Layer Render Information
"""
图层渲染状态表

职责：
- 按图层惰性创建信息字典（visible / forceRender 等任意键）
- 提供可见性、强制渲染、最终是否渲染的查询
- 计算一次强制渲染切换是否改变了可见结果

设计原则：
- 纯数据结构，不发送事件，不触碰渲染缓存
- 事件发送与缓存失效由 EditorSession 根据返回值决定

使用示例：
    table = LayerInformationTable()
    changed = table.set("entities", "visible", False)
    table.should_render("entities")  # False
"""

from typing import Any, Dict, Iterable, Iterator, Optional, Tuple, Union


KEY_VISIBLE = "visible"
KEY_FORCE_RENDER = "forceRender"


def layer_matches(target: str, layers: Union[str, Iterable[str], None]) -> bool:
    """
    target 是否就是 layers，或包含在 layers 中

    layers 可以是单个图层名或图层名集合
    """
    if layers is None:
        return False
    if isinstance(layers, str):
        return target == layers
    return target in layers


class LayerInformationTable:
    """按图层的渲染信息表"""

    def __init__(self):
        self._layers: Dict[str, Dict[str, Any]] = {}

    def __contains__(self, layer: str) -> bool:
        return layer in self._layers

    def __iter__(self) -> Iterator[str]:
        return iter(list(self._layers))

    def __len__(self) -> int:
        return len(self._layers)

    # ============================================================
    # 基础读写
    # ============================================================

    def get(self, layer: str, key: str, default: Any = None) -> Any:
        """读取图层信息，图层或键不存在时返回 default"""
        info = self._layers.get(layer)
        if info is None or info.get(key) is None:
            return default
        return info[key]

    def init(self, layer: str) -> Tuple[Dict[str, Any], bool]:
        """
        确保图层信息存在

        Returns:
            (信息字典, 是否新建)
        """
        info = self._layers.get(layer)
        if info is None:
            info = {}
            self._layers[layer] = info
            return info, True
        return info, False

    def set(self, layer: str, key: str, value: Any, only_if_missing: bool = False) -> bool:
        """
        写入图层信息

        only_if_missing 为真且键已有真值时不写入

        Returns:
            bool: 值是否发生变化
        """
        info, _ = self.init(layer)

        if only_if_missing and info.get(key):
            return False

        changed = info.get(key) != value
        info[key] = value
        return changed

    def clear(self) -> None:
        self._layers.clear()

    # ============================================================
    # 渲染查询
    # ============================================================

    def visible(self, layer: str) -> bool:
        return bool(self.get(layer, KEY_VISIBLE, True))

    def force_rendered(self, layer: str) -> bool:
        return bool(self.get(layer, KEY_FORCE_RENDER, False))

    def should_render(self, layer: str) -> bool:
        return self.visible(layer) or self.force_rendered(layer)

    def apply_force_render(
        self,
        base_layer: str,
        layer: Union[str, Iterable[str]],
        current_value: bool,
        other_value: Optional[bool] = False,
    ) -> Tuple[bool, Dict[str, Any]]:
        """
        对所有已知图层设置 forceRender

        匹配 layer 的图层设为 current_value，其余设为 other_value。
        可见结果发生变化，或基础图层不可见且信息有变化时，视为影响可见性。

        Returns:
            (是否影响可见性, 信息发生变化的图层 → 新值)
        """
        other_value = other_value or False
        base_layer_visible = self.visible(base_layer)

        if isinstance(layer, str):
            self.init(layer)
        elif layer is not None:
            for name in layer:
                self.init(name)

        changes_visibility = False
        changed_layers: Dict[str, Any] = {}

        for target in self:
            visible_before = self.should_render(target)
            target_value = current_value if layer_matches(target, layer) else other_value

            info_changed = self.set(target, KEY_FORCE_RENDER, target_value)
            visible_after = self.should_render(target)

            if info_changed:
                changed_layers[target] = target_value

            if visible_before != visible_after or (not base_layer_visible and info_changed):
                changes_visibility = True

        return changes_visibility, changed_layers


__all__ = [
    "KEY_VISIBLE",
    "KEY_FORCE_RENDER",
    "layer_matches",
    "LayerInformationTable",
]
