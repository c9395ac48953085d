# Presentation Layer
"""
表示层 - 编辑器会话的 Qt 适配器

包含：
- file_dialogs.py: 打开/另存为文件对话框（QFileDialog）
- window_title.py: 窗口标题更新器

编辑器面板与场景不在本包内，它们通过 EventBus 订阅会话事件。
"""

from presentation.file_dialogs import QtFileDialogs, build_name_filter
from presentation.window_title import APP_TITLE, WindowTitleUpdater, format_window_title

__all__ = [
    "QtFileDialogs",
    "build_name_filter",
    "APP_TITLE",
    "WindowTitleUpdater",
    "format_window_title",
]
