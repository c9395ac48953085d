# File Manager - Unified File Operations
"""
统一文件操作管理器（同步底层接口）

职责：
- 提供编辑器所需的文件系统原语：存在性/属性查询、重命名、删除、目录创建、二进制读写
- 为 JSON 等小文件提供原子写入（临时文件 + os.replace）
- 记录文件操作日志（仅路径和字节数）

⚠️ 接口层级说明：
- 本模块所有方法都是阻塞的
- 地图编解码与读写在 TaskRunner 工作线程中调用
- 主线程只调用存在性查询、重命名、删除这类轻量操作

初始化顺序：
- Phase 3.2，依赖 Logger

使用示例：
    from infrastructure.persistence.file_manager import FileManager

    fm = FileManager()
    if fm.is_file("level.bin.saving"):
        fm.rename("level.bin.saving", "level.bin")
"""

import os
import threading
from pathlib import Path
from typing import Any, Dict, Optional, Union

from .file_exceptions import (
    DirectoryCreationError,
    FileLockTimeoutError,
    FileOperationError,
)


# ============================================================
# 文件管理器主类
# ============================================================


class FileManager:
    """
    统一文件操作管理器

    设计说明：
    - 路径一律接受 str 或 Path，按原样解析（不依赖工作目录）
    - 同一路径的写入通过进程内锁串行化
    - 失败统一包装为 FileOperationError
    """

    # 默认写锁超时（秒）
    DEFAULT_LOCK_TIMEOUT = 5.0

    def __init__(self):
        self._path_locks: Dict[str, threading.Lock] = {}
        self._registry_lock = threading.Lock()

        self._logger = None

    # ============================================================
    # 延迟获取服务
    # ============================================================

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("file_manager")
        return self._logger

    # ============================================================
    # 写锁
    # ============================================================

    def _get_lock(self, path: Path) -> threading.Lock:
        key = str(path.resolve())
        with self._registry_lock:
            if key not in self._path_locks:
                self._path_locks[key] = threading.Lock()
            return self._path_locks[key]

    def _acquire(self, path: Path, timeout: Optional[float] = None) -> threading.Lock:
        lock = self._get_lock(path)
        if timeout is None:
            timeout = self.DEFAULT_LOCK_TIMEOUT
        if not lock.acquire(timeout=timeout):
            raise FileLockTimeoutError(str(path), timeout)
        return lock

    # ============================================================
    # 路径查询
    # ============================================================

    def path_attributes(self, path: Union[str, Path]) -> Optional[Dict[str, Any]]:
        """
        获取路径属性

        Returns:
            Dict: mode（"file"/"directory"/"other"）、size、modified；
            路径不存在时返回 None
        """
        p = Path(path)
        try:
            stat = p.stat()
        except FileNotFoundError:
            return None
        except OSError as e:
            raise FileOperationError("stat", str(p), str(e))

        if p.is_file():
            mode = "file"
        elif p.is_dir():
            mode = "directory"
        else:
            mode = "other"

        return {
            "mode": mode,
            "size": stat.st_size,
            "modified": stat.st_mtime,
        }

    def file_exists(self, path: Union[str, Path]) -> bool:
        """路径是否存在（文件或目录）"""
        return Path(path).exists()

    def is_file(self, path: Union[str, Path]) -> bool:
        """路径是否为普通文件"""
        return Path(path).is_file()

    @staticmethod
    def dirname(path: Union[str, Path]) -> str:
        """父目录路径"""
        return str(Path(path).parent)

    @staticmethod
    def file_extension(path: Union[str, Path]) -> str:
        """
        文件扩展名（不含点，保留大小写）

        没有扩展名时返回空字符串
        """
        return Path(path).suffix[1:]

    # ============================================================
    # 文件与目录操作
    # ============================================================

    def ensure_directory(self, path: Union[str, Path]) -> bool:
        """
        确保目录存在（包括父目录）

        Raises:
            DirectoryCreationError: 目录创建失败
        """
        p = Path(path)
        try:
            p.mkdir(parents=True, exist_ok=True)
            return True
        except OSError as e:
            raise DirectoryCreationError(str(p), str(e))

    def rename(self, src: Union[str, Path], dst: Union[str, Path]) -> bool:
        """
        重命名文件（目标存在时被覆盖）

        Raises:
            FileOperationError: 重命名失败
        """
        from infrastructure.utils.logger import log_file_operation

        try:
            os.replace(str(src), str(dst))
        except OSError as e:
            log_file_operation("rename", str(src), success=False)
            raise FileOperationError("rename", str(src), str(e))

        log_file_operation("rename", f"{src} -> {dst}", success=True)
        return True

    def remove(self, path: Union[str, Path], missing_ok: bool = True) -> bool:
        """
        删除文件

        Args:
            path: 文件路径
            missing_ok: 文件不存在时是否视为成功

        Returns:
            bool: 是否实际删除了文件
        """
        from infrastructure.utils.logger import log_file_operation

        p = Path(path)
        try:
            p.unlink()
        except FileNotFoundError:
            if missing_ok:
                return False
            raise
        except OSError as e:
            log_file_operation("remove", str(p), success=False)
            raise FileOperationError("remove", str(p), str(e))

        log_file_operation("remove", str(p), success=True)
        return True

    def read_bytes(self, path: Union[str, Path]) -> bytes:
        """
        读取二进制内容

        Raises:
            FileNotFoundError: 文件不存在
            FileOperationError: 读取失败
        """
        from infrastructure.utils.logger import log_file_operation

        p = Path(path)
        if not p.is_file():
            raise FileNotFoundError(f"文件不存在: {p}")

        try:
            content = p.read_bytes()
        except OSError as e:
            log_file_operation("read", str(p), success=False)
            raise FileOperationError("read", str(p), str(e))

        log_file_operation("read", str(p), len(content), success=True)
        return content

    def write_bytes(self, path: Union[str, Path], content: bytes) -> bool:
        """
        直接写入二进制内容（非原子）

        地图保存自行管理 .saving 临时文件，这里不再套一层临时文件

        Raises:
            FileOperationError: 写入失败
        """
        from infrastructure.utils.logger import log_file_operation

        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)

        lock = self._acquire(p)
        try:
            p.write_bytes(content)
        except OSError as e:
            log_file_operation("write", str(p), success=False)
            raise FileOperationError("write", str(p), str(e))
        finally:
            lock.release()

        log_file_operation("write", str(p), len(content), success=True)
        return True

    def read_text(self, path: Union[str, Path], encoding: str = "utf-8") -> str:
        """读取文本内容"""
        return self.read_bytes(path).decode(encoding)

    def write_text(self, path: Union[str, Path], content: str, encoding: str = "utf-8") -> bool:
        """
        写入文本（原子性写入）

        先写入 .tmp 临时文件，再重命名为目标文件

        Raises:
            FileLockTimeoutError: 写锁获取超时
            FileOperationError: 写入失败
        """
        from infrastructure.utils.logger import log_file_operation

        p = Path(path)
        p.parent.mkdir(parents=True, exist_ok=True)
        temp_path = p.with_suffix(p.suffix + ".tmp")
        data = content.encode(encoding)

        lock = self._acquire(p)
        try:
            temp_path.write_bytes(data)
            os.replace(str(temp_path), str(p))
        except OSError as e:
            if temp_path.exists():
                temp_path.unlink()
            log_file_operation("write", str(p), success=False)
            raise FileOperationError("write", str(p), str(e))
        finally:
            lock.release()

        log_file_operation("write", str(p), len(data), success=True)
        return True


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "FileManager",
]
