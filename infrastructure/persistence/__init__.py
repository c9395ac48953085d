# Persistence
"""
持久化模块

包含：
- file_exceptions.py: 文件操作与地图编解码异常类定义
- file_manager.py: 统一文件操作管理器（同步底层接口）
- json_repository.py: JSON 文件读写（原子写入）
- persistence_store.py: 跨会话键值存储
- atomic_writer.py: 地图保存的 .saving 临时文件协议
- map_coder.py: 地图二进制编解码器

线程说明：
- FileManager / MapCoder 的方法都是阻塞的，地图读写只在 TaskRunner 工作线程中调用
- atomic_writer 的重命名/删除在主线程的任务回调中执行
"""

from infrastructure.persistence.file_exceptions import (
    FileManagerError,
    DirectoryCreationError,
    FileLockTimeoutError,
    FileOperationError,
    MapCodecError,
)

from infrastructure.persistence.file_manager import FileManager
from infrastructure.persistence.json_repository import JsonRepository
from infrastructure.persistence.persistence_store import PersistenceStore
from infrastructure.persistence.map_coder import MapCoder
from infrastructure.persistence.atomic_writer import (
    RecoveryAction,
    get_temporary_filename,
    recover_interrupted_save,
    commit_temporary,
    cleanup_temporary,
)

__all__ = [
    # 主类
    "FileManager",
    "JsonRepository",
    "PersistenceStore",
    "MapCoder",
    # 原子写入
    "RecoveryAction",
    "get_temporary_filename",
    "recover_interrupted_save",
    "commit_temporary",
    "cleanup_temporary",
    # 异常类
    "FileManagerError",
    "DirectoryCreationError",
    "FileLockTimeoutError",
    "FileOperationError",
    "MapCodecError",
]
