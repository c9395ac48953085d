# Editor State Domain
"""
编辑器状态域

包含：
- selection.py: 单选/多选状态
- layer_state.py: 图层渲染信息表
- recent_files.py: 最近文件列表规则
"""

from domain.editor.selection import (
    MULTI_SELECTION_TYPE,
    SingleSelection,
    MultiSelection,
    Selection,
    EMPTY_SELECTION,
)
from domain.editor.layer_state import (
    KEY_VISIBLE,
    KEY_FORCE_RENDER,
    layer_matches,
    LayerInformationTable,
)
from domain.editor.recent_files import add_to_recent_files

__all__ = [
    "MULTI_SELECTION_TYPE",
    "SingleSelection",
    "MultiSelection",
    "Selection",
    "EMPTY_SELECTION",
    "KEY_VISIBLE",
    "KEY_FORCE_RENDER",
    "layer_matches",
    "LayerInformationTable",
    "add_to_recent_files",
]
