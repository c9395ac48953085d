# Window Title - Title Bar Updater
"""
窗口标题更新器

职责：
- 实现 application.collaborators.WindowTitle 接口
- 标题格式："<地图名> - Map Editor"，有未保存修改时追加 "*"
- 订阅保存成功事件，保存后去掉 "*"

地图名取文件名（不含扩展名），新建未保存的地图使用包名，都没有时为 "Untitled"。
"""

from pathlib import Path
from typing import Any, Optional

from application.collaborators import WindowTitle
from shared.event_types import EVENT_EDITOR_MAP_SAVED


APP_TITLE = "Map Editor"
UNTITLED = "Untitled"


def format_window_title(session: Any) -> str:
    """根据会话生成窗口标题"""
    if session is None or getattr(session, "side", None) is None:
        return APP_TITLE

    if session.filename:
        name = Path(session.filename).stem
    else:
        name = session.side.name or UNTITLED

    title = f"{name} - {APP_TITLE}"
    if session.has_unsaved_changes:
        title += " *"
    return title


class WindowTitleUpdater(WindowTitle):
    """把会话状态写到窗口标题栏"""

    def __init__(self, window: Optional[Any] = None):
        """
        Args:
            window: 任何带 setWindowTitle 方法的对象（通常为 QMainWindow）
        """
        self._window = window
        self._session = None
        self.title = APP_TITLE

    def attach(self, session: Any, event_bus: Any = None) -> None:
        """绑定会话，并在保存成功后刷新标题"""
        self._session = session
        if event_bus is not None:
            event_bus.subscribe(EVENT_EDITOR_MAP_SAVED, self._on_map_saved)

    def update_window_title(self, session: Any) -> None:
        self._session = session
        self.title = format_window_title(session)

        if self._window is not None:
            self._window.setWindowTitle(self.title)

    def _on_map_saved(self, event_data: dict) -> None:
        if self._session is not None:
            self.update_window_title(self._session)


__all__ = [
    "APP_TITLE",
    "format_window_title",
    "WindowTitleUpdater",
]
