# Application Layer
"""
应用层 - 启动引导、编辑器会话、任务链操作

包含：
- bootstrap.py: 应用启动引导器（初始化编排）
- editor_session.py: 编辑器会话（当前文档状态控制器）
- save_queue.py: 按文件名合并的保存等待队列
- collaborators.py: 渲染器、历史、保存钩子、模组处理器及 UI 接口
- operations/: 加载、保存、校验操作（任务链状态机）
"""

from application.bootstrap import run
from application.editor_session import EditorSession
from application.save_queue import SaveCoalescingQueue, SaveRequest
from application.collaborators import (
    MapRenderer,
    EditorHistory,
    SaveSanitizers,
    ModHandler,
    FileDialogs,
    WindowTitle,
)

__all__ = [
    "run",
    # 会话
    "EditorSession",
    # 保存队列
    "SaveCoalescingQueue",
    "SaveRequest",
    # 协作者
    "MapRenderer",
    "EditorHistory",
    "SaveSanitizers",
    "ModHandler",
    "FileDialogs",
    "WindowTitle",
]
