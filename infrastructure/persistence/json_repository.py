# JSON Repository - JSON File Storage Operations
"""
JSON存储操作

职责：
- 封装JSON文件的序列化/反序列化操作
- 通过 FileManager 原子写入

初始化顺序：
- 无需显式初始化，作为工具类按需实例化
- 依赖 file_manager（底层文件操作）

使用场景：
- persistence.json - 最近文件、上次打开的地图、依赖模组显示开关

使用示例：
    from infrastructure.persistence.json_repository import JsonRepository

    repo = JsonRepository()

    data = repo.load_json(path, default={})
    repo.save_json(path, {"recentFiles": []})
    repo.update_json(path, {"lastLoadedFilename": "a.bin"})
"""

import json
from pathlib import Path
from typing import Any, Dict, Union

from infrastructure.persistence.file_exceptions import FileManagerError


class JsonRepository:
    """
    JSON存储操作类

    封装JSON文件的读写操作，依赖 FileManager 进行底层文件操作
    """

    def __init__(self, file_manager=None):
        """
        初始化 JSON 仓库

        Args:
            file_manager: 文件管理器（可选，缺省时从 ServiceLocator 延迟获取）
        """
        self._file_manager = file_manager
        self._logger = None

    # ============================================================
    # 延迟获取服务（避免循环依赖）
    # ============================================================

    @property
    def file_manager(self):
        """延迟获取文件管理器，未注册时创建本地实例"""
        if self._file_manager is None:
            from shared.service_locator import ServiceLocator
            from shared.service_names import SVC_FILE_MANAGER
            self._file_manager = ServiceLocator.get_optional(SVC_FILE_MANAGER)
            if self._file_manager is None:
                from infrastructure.persistence.file_manager import FileManager
                self._file_manager = FileManager()
        return self._file_manager

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("json_repository")
        return self._logger

    # ============================================================
    # 核心功能
    # ============================================================

    def load_json(
        self,
        path: Union[str, Path],
        default: Any = None,
        encoding: str = 'utf-8'
    ) -> Any:
        """
        加载JSON文件

        Args:
            path: JSON文件路径
            default: 解析失败或文件不存在时返回的默认值
            encoding: 文件编码

        Returns:
            解析后的数据，失败时返回默认值
        """
        if not self.file_manager.is_file(path):
            self.logger.debug(f"JSON文件不存在，返回默认值: {path}")
            return default

        try:
            content = self.file_manager.read_text(path, encoding=encoding)
            data = json.loads(content)
        except json.JSONDecodeError as e:
            self.logger.warning(f"JSON解析失败: {path} - {e}")
            return default
        except (FileManagerError, OSError, UnicodeDecodeError) as e:
            self.logger.warning(f"JSON文件加载失败: {path} - {e}")
            return default

        self.logger.debug(f"JSON文件加载成功: {path}")
        return data

    def save_json(
        self,
        path: Union[str, Path],
        data: Any,
        indent: int = 2,
        ensure_ascii: bool = False,
        encoding: str = 'utf-8'
    ) -> bool:
        """
        保存数据为JSON文件

        Returns:
            bool: 是否成功
        """
        try:
            content = json.dumps(
                data,
                indent=indent,
                ensure_ascii=ensure_ascii,
                default=self._json_serializer
            )
            self.file_manager.write_text(path, content, encoding=encoding)
        except (TypeError, ValueError, FileManagerError) as e:
            self.logger.error(f"JSON文件保存失败: {path} - {e}")
            return False

        self.logger.debug(f"JSON文件保存成功: {path}")
        return True

    def update_json(
        self,
        path: Union[str, Path],
        updates: Dict[str, Any],
        encoding: str = 'utf-8'
    ) -> bool:
        """
        部分更新JSON文件（合并字典）

        Returns:
            bool: 是否成功
        """
        data = self.load_json(path, default={}, encoding=encoding)

        if not isinstance(data, dict):
            self.logger.warning(f"JSON文件不是字典类型，无法合并更新: {path}")
            return False

        data.update(updates)
        return self.save_json(path, data, encoding=encoding)

    # ============================================================
    # 辅助方法
    # ============================================================

    def _json_serializer(self, obj: Any) -> Any:
        """处理无法直接序列化的类型"""
        if isinstance(obj, Path):
            return str(obj)
        if isinstance(obj, (set, frozenset, tuple)):
            return list(obj)
        raise TypeError(f"Object of type {type(obj)} is not JSON serializable")


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "JsonRepository",
]
