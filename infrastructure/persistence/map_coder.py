# Map Coder - Binary Map File Codec
"""
地图二进制编解码器

职责：
- 将元素树（嵌套 dict/list）编码为地图二进制文件
- 将地图二进制文件解码为元素树
- 格式错误统一抛出 MapCodecError

文件格式：
    偏移  长度  内容
    0     8     魔数 b"MAPEDIT\\x00"
    8     1     格式版本号
    9     ...   zlib 压缩的 UTF-8 JSON（元素树）

线程说明：
- 编解码是纯 CPU + 文件 IO，只在 TaskRunner 工作线程中调用

使用示例：
    coder = MapCoder()
    coder.encode_file("level.bin.saving", tree)
    tree = coder.decode_file("level.bin.saving")
"""

import json
import time
import zlib
from pathlib import Path
from typing import Any, Dict, Union

from infrastructure.persistence.file_exceptions import MapCodecError


# ============================================================
# 格式常量
# ============================================================

MAGIC = b"MAPEDIT\x00"
FORMAT_VERSION = 1
HEADER_SIZE = len(MAGIC) + 1


class MapCoder:
    """地图二进制编解码器"""

    def __init__(self, file_manager=None, compression_level: int = 6):
        self._file_manager = file_manager
        self._compression_level = compression_level
        self._logger = None

    # ============================================================
    # 延迟获取服务
    # ============================================================

    @property
    def file_manager(self):
        """延迟获取文件管理器"""
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
            self._logger = get_logger("map_coder")
        return self._logger

    # ============================================================
    # 字节级编解码
    # ============================================================

    def encode(self, tree: Dict[str, Any]) -> bytes:
        """
        元素树 → 文件字节

        Raises:
            MapCodecError: 元素树无法序列化为 JSON
        """
        try:
            payload = json.dumps(tree, ensure_ascii=False, separators=(",", ":")).encode("utf-8")
        except (TypeError, ValueError) as e:
            raise MapCodecError("<memory>", f"元素树无法序列化: {e}")

        return MAGIC + bytes([FORMAT_VERSION]) + zlib.compress(payload, self._compression_level)

    def decode(self, data: bytes, path: str = "<memory>") -> Dict[str, Any]:
        """
        文件字节 → 元素树

        Raises:
            MapCodecError: 魔数不符、版本不支持或内容损坏
        """
        if len(data) < HEADER_SIZE or not data.startswith(MAGIC):
            raise MapCodecError(path, "魔数不匹配")

        version = data[len(MAGIC)]
        if version != FORMAT_VERSION:
            raise MapCodecError(path, f"不支持的格式版本: {version}")

        try:
            payload = zlib.decompress(data[HEADER_SIZE:])
            tree = json.loads(payload.decode("utf-8"))
        except (zlib.error, UnicodeDecodeError, json.JSONDecodeError) as e:
            raise MapCodecError(path, f"内容损坏: {e}")

        if not isinstance(tree, dict):
            raise MapCodecError(path, "根元素不是对象")

        return tree

    # ============================================================
    # 文件级编解码
    # ============================================================

    def decode_file(self, path: Union[str, Path]) -> Dict[str, Any]:
        """
        读取并解码地图文件

        Raises:
            FileNotFoundError: 文件不存在
            FileOperationError: 读取失败
            MapCodecError: 格式错误
        """
        from infrastructure.utils.logger import log_performance

        start = time.time()
        tree = self.decode(self.file_manager.read_bytes(path), str(path))
        log_performance("map_decode", (time.time() - start) * 1000, extra={"path": path})
        return tree

    def encode_file(self, path: Union[str, Path], tree: Dict[str, Any]) -> int:
        """
        编码并写入地图文件

        Returns:
            int: 写入字节数

        Raises:
            MapCodecError: 元素树无法序列化
            FileOperationError: 写入失败
        """
        from infrastructure.utils.logger import log_performance

        start = time.time()
        data = self.encode(tree)
        self.file_manager.write_bytes(path, data)
        log_performance(
            "map_encode",
            (time.time() - start) * 1000,
            extra={"path": path, "bytes": len(data)},
        )
        return len(data)


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "MapCoder",
    "MAGIC",
    "FORMAT_VERSION",
]
