# Persistence Store - Cross-Session Key/Value Storage
"""
跨会话持久化存储

职责：
- 保存需要跨越重启保留的编辑器状态（最近文件、上次打开的地图、上次选中的房间、依赖模组显示开关）
- 提供带类型校验的读写接口，非法值回退默认值
- 写入先更新内存并标记为脏，再按策略落盘（JsonRepository 原子写入）

落盘策略：
- save_delay_ms 为 0 或没有 QApplication（测试场景）时，每次写入立即落盘
- 否则用单次 QTimer 合并窗口内的多次写入，窗口内每次写入都会重置定时器
- batch() 内的写入在退出时合并为一次落盘
- 应用退出时调用 flush() 写出尚未落盘的修改

初始化顺序：
- Phase 1.2，依赖 ConfigManager（目录已创建）、Logger

设计原则：
- 由调用方注入到 EditorSession，不作为全局模块导入
- 读操作只访问内存副本；写操作更新内存并保存整份 JSON

使用示例：
    store = PersistenceStore()
    store.load()

    store.last_loaded_filename = "/maps/level.bin"
    files = store.recent_files

    with store.batch():
        store.last_loaded_filename = "/maps/level.bin"
        store.last_selected_room_name = "lvl_start"
"""

from contextlib import contextmanager
from pathlib import Path
from threading import Lock
from typing import Any, Dict, List, Optional, Union

from infrastructure.config.settings import (
    GLOBAL_PERSISTENCE_FILE,
    PERSISTENCE_RECENT_FILES,
    PERSISTENCE_LAST_LOADED_FILENAME,
    PERSISTENCE_LAST_SELECTED_ROOM_NAME,
    PERSISTENCE_ONLY_SHOW_DEPENDED_ON_MODS,
)
from infrastructure.persistence.json_repository import JsonRepository


class PersistenceStore:
    """
    跨会话键值存储

    JSON 文件结构：
        {
            "recentFiles": ["/maps/b.bin", "/maps/a.bin"],
            "lastLoadedFilename": "/maps/b.bin",
            "lastSelectedRoomName": "lvl_start",
            "onlyShowDependedOnMods": {"entities": true}
        }
    """

    def __init__(
        self,
        path: Optional[Union[str, Path]] = None,
        repository: Optional[JsonRepository] = None,
        save_delay_ms: int = 0,
    ):
        """
        Args:
            path: JSON 文件路径，默认为全局持久化文件
            repository: JSON 读写仓库
            save_delay_ms: 合并写入的延迟；0 表示每次写入立即落盘
        """
        self._path = Path(path) if path else GLOBAL_PERSISTENCE_FILE
        self._repository = repository or JsonRepository()
        self._data: Dict[str, Any] = {}
        self._lock = Lock()
        self._logger = None

        # 延迟落盘状态
        self._save_delay_ms = save_delay_ms
        self._dirty = False
        self._batch_depth = 0
        self._save_timer = None

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("persistence_store")
        return self._logger

    @property
    def path(self) -> Path:
        return self._path

    # ============================================================
    # 加载与保存
    # ============================================================

    def load(self) -> None:
        """从磁盘加载；文件缺失或损坏时以空表开始"""
        data = self._repository.load_json(self._path, default={})
        if not isinstance(data, dict):
            self.logger.warning(f"持久化文件格式错误，已忽略: {self._path}")
            data = {}

        with self._lock:
            self._data = data

        self.logger.info(f"持久化数据加载完成: {self._path}")

    def save(self) -> bool:
        """立即写出整份数据；失败时保留脏标记，下次写入或 flush 时重试"""
        with self._lock:
            snapshot = dict(self._data)
            self._dirty = False

        saved = self._repository.save_json(self._path, snapshot)
        if not saved:
            with self._lock:
                self._dirty = True
        return saved

    @property
    def is_dirty(self) -> bool:
        """是否有尚未落盘的修改"""
        return self._dirty

    def flush(self) -> bool:
        """写出尚未落盘的修改"""
        if self._save_timer is not None:
            self._save_timer.stop()

        if not self._dirty:
            return True
        return self.save()

    @contextmanager
    def batch(self):
        """块内的多次写入合并为一次落盘"""
        self._batch_depth += 1
        try:
            yield self
        finally:
            self._batch_depth -= 1
            if self._batch_depth == 0 and self._dirty:
                self._schedule_save()

    def _schedule_save(self) -> None:
        if self._batch_depth > 0:
            return

        from PyQt6.QtCore import QCoreApplication
        if self._save_delay_ms <= 0 or QCoreApplication.instance() is None:
            self.flush()
            return

        if self._save_timer is None:
            from PyQt6.QtCore import QTimer
            self._save_timer = QTimer()
            self._save_timer.setSingleShot(True)
            self._save_timer.timeout.connect(self.flush)

        # 重置定时器
        self._save_timer.start(self._save_delay_ms)

    # ============================================================
    # 通用读写
    # ============================================================

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """写入并安排落盘；值为 None 时删除该键"""
        with self._lock:
            if value is None:
                self._data.pop(key, None)
            else:
                self._data[key] = value
            self._dirty = True
        self._schedule_save()

    # ============================================================
    # 类型化访问
    # ============================================================

    @property
    def recent_files(self) -> List[str]:
        """最近文件（最新在前）"""
        value = self.get(PERSISTENCE_RECENT_FILES)
        if not isinstance(value, list):
            return []
        return [item for item in value if isinstance(item, str)]

    @recent_files.setter
    def recent_files(self, value: List[str]) -> None:
        self.set(PERSISTENCE_RECENT_FILES, list(value))

    @property
    def last_loaded_filename(self) -> Optional[str]:
        value = self.get(PERSISTENCE_LAST_LOADED_FILENAME)
        return value if isinstance(value, str) else None

    @last_loaded_filename.setter
    def last_loaded_filename(self, value: Optional[str]) -> None:
        self.set(PERSISTENCE_LAST_LOADED_FILENAME, value)

    @property
    def last_selected_room_name(self) -> Optional[str]:
        value = self.get(PERSISTENCE_LAST_SELECTED_ROOM_NAME)
        return value if isinstance(value, str) else None

    @last_selected_room_name.setter
    def last_selected_room_name(self, value: Optional[str]) -> None:
        self.set(PERSISTENCE_LAST_SELECTED_ROOM_NAME, value)

    def get_only_show_depended_on_mods(self) -> Optional[Dict[str, bool]]:
        """
        按图层的依赖模组显示开关

        Returns:
            Dict: 存储的映射副本；未存储或类型不是映射时返回 None
        """
        value = self.get(PERSISTENCE_ONLY_SHOW_DEPENDED_ON_MODS)
        if not isinstance(value, dict):
            return None
        return dict(value)

    def set_only_show_depended_on_mods(self, layer: str, value: bool) -> None:
        """更新单个图层的开关；原值不是映射时重置为空映射"""
        current = self.get_only_show_depended_on_mods() or {}
        current[layer] = value
        self.set(PERSISTENCE_ONLY_SHOW_DEPENDED_ON_MODS, current)


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "PersistenceStore",
]
