# Error Type Constants
"""
错误类型常量定义

职责：
- 定义编辑器失败的主分类（拒绝、任务失败、校验失败、否决）
- 将每个编辑器通知事件映射到分类与日志级别

设计原则：
- 仅依赖 event_types.py 中的纯常量
- 所有失败都以事件形式通知 UI 层，任何失败都不终止进程
"""

import logging
from enum import Enum, auto
from typing import Dict

from shared.event_types import (
    EVENT_EDITOR_LOAD_WITH_CHANGES,
    EVENT_EDITOR_NEW_MAP_WITH_CHANGES,
    EVENT_EDITOR_MAP_LOAD_FAILED,
    EVENT_EDITOR_MAP_SAVE_INTERRUPTED,
    EVENT_EDITOR_MAP_SAVE_FAILED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
)


class EditorErrorCategory(Enum):
    """编辑器失败主分类"""

    # 前置条件不满足，操作未开始（未保存修改、无文档、无文件名）
    REFUSAL = auto()

    # 后台编解码/序列化任务失败，状态已回滚
    TASK_FAILURE = auto()

    # 文件已写入但回读失败，意味着磁盘上的产物损坏
    VERIFICATION_FAILURE = auto()

    # before-save 回调主动拒绝，属于有意中断而非错误
    VETO = auto()


# 事件 → 分类
EVENT_CATEGORY_MAP: Dict[str, EditorErrorCategory] = {
    EVENT_EDITOR_LOAD_WITH_CHANGES: EditorErrorCategory.REFUSAL,
    EVENT_EDITOR_NEW_MAP_WITH_CHANGES: EditorErrorCategory.REFUSAL,
    EVENT_EDITOR_MAP_LOAD_FAILED: EditorErrorCategory.TASK_FAILURE,
    EVENT_EDITOR_MAP_SAVE_FAILED: EditorErrorCategory.TASK_FAILURE,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED: EditorErrorCategory.VERIFICATION_FAILURE,
    EVENT_EDITOR_MAP_SAVE_INTERRUPTED: EditorErrorCategory.VETO,
}

# 分类 → 日志级别
CATEGORY_LOG_LEVELS: Dict[EditorErrorCategory, int] = {
    EditorErrorCategory.REFUSAL: logging.INFO,
    EditorErrorCategory.VETO: logging.WARNING,
    EditorErrorCategory.TASK_FAILURE: logging.ERROR,
    EditorErrorCategory.VERIFICATION_FAILURE: logging.CRITICAL,
}


def get_event_category(event_type: str) -> EditorErrorCategory:
    """
    获取事件对应的失败分类

    Raises:
        KeyError: 事件不是失败通知事件
    """
    return EVENT_CATEGORY_MAP[event_type]


def get_log_level(category: EditorErrorCategory) -> int:
    """获取分类对应的日志级别"""
    return CATEGORY_LOG_LEVELS[category]


__all__ = [
    "EditorErrorCategory",
    "EVENT_CATEGORY_MAP",
    "CATEGORY_LOG_LEVELS",
    "get_event_category",
    "get_log_level",
]
