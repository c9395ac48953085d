# Editor Collaborators - Renderer / History / Sanitizers / Mods / Dialogs
"""
编辑器会话的外部协作者

职责：
- 定义 EditorSession 依赖的窄接口及默认实现
- MapRenderer: 房间渲染缓存失效、批处理任务清理、可见房间重绘
- EditorHistory: 撤销历史与"有未保存修改"标志
- SaveSanitizers: 保存前/后钩子链，保存前任一钩子返回假值即否决保存
- ModHandler: 模组文件名缓存
- FileDialogs / WindowTitle: 由表示层实现（presentation/）

设计原则：
- 默认实现不依赖 Qt，可在无界面环境下运行和测试
- 全部通过 ServiceLocator 注册，EditorSession 也接受构造注入
"""

from abc import ABC, abstractmethod
from pathlib import Path
from typing import Any, Callable, Dict, Iterable, List, Optional, Set


def _logger(name: str):
    from infrastructure.utils.logger import get_logger
    return get_logger(name)


# ============================================================
# 渲染器
# ============================================================

class MapRenderer:
    """
    房间渲染缓存

    缓存按房间分桶，每个房间下按缓存键（canvas、complete 等）存放渲染结果
    """

    def __init__(self):
        self._room_cache: Dict[Any, Dict[str, Any]] = {}
        self._batching_tasks: List[Any] = []
        self._custom_autotiler: Optional[Dict[str, Any]] = None
        self._redraw_count = 0

    def cache_room(self, room: Any, key: str, value: Any) -> None:
        self._room_cache.setdefault(room, {})[key] = value

    def get_cached(self, room: Any, key: str) -> Any:
        return self._room_cache.get(room, {}).get(key)

    def invalidate_room_cache(self, room: Any = None, keys: Optional[Iterable[str]] = None) -> None:
        """
        使房间缓存失效

        Args:
            room: 指定房间，None 表示所有房间
            keys: 指定缓存键，None 表示全部键
        """
        rooms = [room] if room is not None else list(self._room_cache)
        key_list = list(keys) if keys is not None else None

        for target in rooms:
            bucket = self._room_cache.get(target)
            if bucket is None:
                continue
            if key_list is None:
                bucket.clear()
            else:
                for key in key_list:
                    bucket.pop(key, None)

        _logger("map_renderer").debug(
            f"Room cache invalidated: room={getattr(room, 'name', 'all')}, keys={key_list or 'all'}"
        )

    def queue_batching_task(self, task: Any) -> None:
        self._batching_tasks.append(task)

    def clear_batching_tasks(self) -> None:
        self._batching_tasks.clear()

    def force_redraw_visible_rooms(self, rooms: List[Any], session: Any, selected_item: Any, selected_item_type: Optional[str]) -> None:
        self._redraw_count += 1
        _logger("map_renderer").debug(
            f"Redraw requested for {len(rooms)} rooms, selection type={selected_item_type}"
        )

    def load_custom_tileset_autotiler(self, session: Any) -> None:
        """从地图元数据中读取自定义图块集配置"""
        side = getattr(session, "side", None)
        meta = side.meta if side is not None else {}
        self._custom_autotiler = {
            "foreground": meta.get("ForegroundTiles"),
            "background": meta.get("BackgroundTiles"),
        }

    @property
    def batching_task_count(self) -> int:
        return len(self._batching_tasks)

    @property
    def redraw_count(self) -> int:
        return self._redraw_count


# ============================================================
# 历史
# ============================================================

class EditorHistory:
    """撤销/重做快照与未保存修改标志"""

    def __init__(self):
        self.made_changes = False
        self._undo: List[Any] = []
        self._redo: List[Any] = []

    def add_snapshot(self, snapshot: Any) -> None:
        self._undo.append(snapshot)
        self._redo.clear()
        self.made_changes = True

    def undo(self) -> Optional[Any]:
        if not self._undo:
            return None
        snapshot = self._undo.pop()
        self._redo.append(snapshot)
        self.made_changes = True
        return snapshot

    def redo(self) -> Optional[Any]:
        if not self._redo:
            return None
        snapshot = self._redo.pop()
        self._undo.append(snapshot)
        self.made_changes = True
        return snapshot

    def reset(self) -> None:
        self._undo.clear()
        self._redo.clear()
        self.made_changes = False


# ============================================================
# 保存钩子
# ============================================================

SanitizerHook = Callable[[str, Any], Any]


class SaveSanitizers:
    """
    保存前/后钩子链

    保存前钩子按注册顺序执行，任一返回假值即停止并否决保存
    """

    def __init__(self):
        self._before: List[SanitizerHook] = []
        self._after: List[SanitizerHook] = []

    def register_before_save(self, hook: SanitizerHook) -> None:
        self._before.append(hook)

    def register_after_save(self, hook: SanitizerHook) -> None:
        self._after.append(hook)

    def before_save(self, filename: str, session: Any) -> bool:
        for hook in self._before:
            if not hook(filename, session):
                _logger("save_sanitizers").info(
                    f"Save of {filename} vetoed by {getattr(hook, '__name__', hook)}"
                )
                return False
        return True

    def after_save(self, filename: str, session: Any) -> None:
        for hook in self._after:
            hook(filename, session)


# ============================================================
# 模组
# ============================================================

class ModHandler:
    """按模组根目录缓存的文件名列表"""

    def __init__(self):
        self._filenames_cache: Dict[str, Set[str]] = {}

    def cache_filenames(self, mod_root: str, filenames: Iterable[str]) -> None:
        self._filenames_cache[str(mod_root)] = set(filenames)

    def is_cached(self, mod_root: str) -> bool:
        return str(mod_root) in self._filenames_cache

    def invalidate_filenames_cache_from_path(self, filename: Optional[str]) -> None:
        """使包含 filename 的模组的文件名缓存失效；filename 为空时全部失效"""
        if not filename:
            self._filenames_cache.clear()
            return

        path = Path(filename)
        for root in list(self._filenames_cache):
            root_path = Path(root)
            if root_path == path or root_path in path.parents:
                del self._filenames_cache[root]


# ============================================================
# 表示层接口
# ============================================================

class FileDialogs(ABC):
    """文件选择对话框"""

    @abstractmethod
    def open_dialog(self, directory: str, extension: str, callback: Callable[[str], Any]) -> None:
        """选择文件后以文件名调用 callback，取消则不调用"""

    @abstractmethod
    def save_dialog(self, filename: Optional[str], extension: str, callback: Callable[[str], Any]) -> None:
        """选择保存位置后以文件名调用 callback，取消则不调用"""


class WindowTitle(ABC):
    """窗口标题"""

    @abstractmethod
    def update_window_title(self, session: Any) -> None:
        """根据会话当前文档刷新标题"""


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "MapRenderer",
    "EditorHistory",
    "SaveSanitizers",
    "SanitizerHook",
    "ModHandler",
    "FileDialogs",
    "WindowTitle",
]
