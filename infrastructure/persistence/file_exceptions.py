# File Exceptions - File Operation Exception Classes
"""
文件操作异常类定义

职责：
- 集中定义文件操作与地图编解码相关的异常类
- 供 file_manager.py、map_coder.py 和外部调用方使用

使用示例：
    from infrastructure.persistence.file_exceptions import (
        FileOperationError,
        MapCodecError,
    )

    try:
        tree = map_coder.decode_file(path)
    except MapCodecError as e:
        print(f"地图文件损坏: {e.reason}")
"""


class FileManagerError(Exception):
    """文件管理器基础异常"""
    pass


class DirectoryCreationError(FileManagerError):
    """目录创建失败"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"目录创建失败: {path} - {reason}")


class FileLockTimeoutError(FileManagerError):
    """文件锁获取超时"""

    def __init__(self, path: str, timeout: float):
        self.path = path
        self.timeout = timeout
        super().__init__(f"文件锁获取超时 ({timeout}s): {path}")


class FileOperationError(FileManagerError):
    """文件操作失败"""

    def __init__(self, operation: str, path: str, reason: str):
        self.operation = operation
        self.path = path
        self.reason = reason
        super().__init__(f"文件操作失败 [{operation}]: {path} - {reason}")


class MapCodecError(FileManagerError):
    """地图文件格式错误（魔数、版本或压缩内容无法解析）"""

    def __init__(self, path: str, reason: str):
        self.path = path
        self.reason = reason
        super().__init__(f"地图文件无法解析: {path} - {reason}")


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "FileManagerError",
    "DirectoryCreationError",
    "FileLockTimeoutError",
    "FileOperationError",
    "MapCodecError",
]
