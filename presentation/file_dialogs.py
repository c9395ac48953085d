# File Dialogs - Qt Open/Save Dialog Adapter
"""
Qt 文件对话框适配器

职责：
- 实现 application.collaborators.FileDialogs 接口
- 以目录提示和扩展名过滤打开 QFileDialog，选中后回调文件名

初始化顺序：
- Phase 2.2，QApplication 创建之后，依赖主窗口作为父控件
"""

from typing import Any, Callable, Optional

from PyQt6.QtWidgets import QFileDialog, QWidget

from application.collaborators import FileDialogs


def build_name_filter(extension: str) -> str:
    """扩展名 → QFileDialog 过滤字符串"""
    return f"Map Files (*.{extension});;All Files (*)"


class QtFileDialogs(FileDialogs):
    """基于 QFileDialog 的模态文件对话框"""

    def __init__(self, parent: Optional[QWidget] = None):
        self._parent = parent

    def open_dialog(self, directory: str, extension: str, callback: Callable[[str], Any]) -> None:
        path, _ = QFileDialog.getOpenFileName(
            self._parent,
            "Open Map",
            directory or "",
            build_name_filter(extension),
        )

        if path:
            callback(path)

    def save_dialog(self, filename: Optional[str], extension: str, callback: Callable[[str], Any]) -> None:
        path, _ = QFileDialog.getSaveFileName(
            self._parent,
            "Save Map As",
            filename or "",
            build_name_filter(extension),
        )

        if path:
            callback(path)


__all__ = [
    "QtFileDialogs",
    "build_name_filter",
]
