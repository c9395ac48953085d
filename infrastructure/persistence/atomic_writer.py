# Atomic Writer - Temporary-File Save Protocol
"""
地图文件原子写入协议

职责：
- 约定保存临时文件名（目标文件名 + ".saving"）
- 加载前恢复被中断的保存
- 校验通过后把临时文件提交为目标文件

保存流程：
    1. 编码写入 level.bin.saving
    2. 回读校验 level.bin.saving
    3. commit_temporary: 删除旧的 level.bin，重命名 .saving → level.bin

恢复规则（加载 level.bin 之前执行）：
    - 只有 .saving 存在：上次保存已写完但未提交，直接提交
    - 两者都存在：目标文件完好，临时文件不可信，删除临时文件
    - 其他情况：不做任何事

目标文件缺失而 .saving 存在时，.saving 总是要么已通过校验，要么是唯一剩下的数据。
"""

from enum import Enum
from pathlib import Path
from typing import Optional, Union

from infrastructure.config.settings import TEMPORARY_SAVE_SUFFIX


class RecoveryAction(Enum):
    """recover_interrupted_save 实际执行的动作"""

    NONE = "none"
    PROMOTED = "promoted"              # 临时文件提交为目标文件
    DISCARDED = "discarded"            # 删除了多余的临时文件


def _file_manager(file_manager=None):
    if file_manager is not None:
        return file_manager

    from shared.service_locator import ServiceLocator
    from shared.service_names import SVC_FILE_MANAGER
    fm = ServiceLocator.get_optional(SVC_FILE_MANAGER)
    if fm is None:
        from infrastructure.persistence.file_manager import FileManager
        fm = FileManager()
    return fm


def get_temporary_filename(filename: Union[str, Path]) -> str:
    """保存过程中使用的临时文件名"""
    return f"{filename}{TEMPORARY_SAVE_SUFFIX}"


def recover_interrupted_save(filename: Union[str, Path], file_manager=None) -> RecoveryAction:
    """
    恢复被中断的保存

    Args:
        filename: 即将加载的目标文件
        file_manager: 文件管理器（可选）

    Returns:
        RecoveryAction: 执行的动作
    """
    from infrastructure.utils.logger import get_logger

    fm = _file_manager(file_manager)
    temporary_filename = get_temporary_filename(filename)

    if not fm.is_file(temporary_filename):
        return RecoveryAction.NONE

    if fm.file_exists(filename):
        fm.remove(temporary_filename)
        get_logger("atomic_writer").info(f"丢弃未完成的临时保存文件: {temporary_filename}")
        return RecoveryAction.DISCARDED

    fm.rename(temporary_filename, filename)
    get_logger("atomic_writer").warning(f"从临时保存文件恢复地图: {filename}")
    return RecoveryAction.PROMOTED


def commit_temporary(
    temporary_filename: Union[str, Path],
    filename: Union[str, Path],
    file_manager=None,
) -> None:
    """
    提交临时文件

    先删除现有目标文件，再把临时文件重命名到位

    Raises:
        FileOperationError: 删除或重命名失败
    """
    fm = _file_manager(file_manager)

    if fm.file_exists(filename):
        fm.remove(filename)

    fm.rename(temporary_filename, filename)


def cleanup_temporary(filename: Union[str, Path], file_manager=None) -> Optional[str]:
    """
    删除目标文件对应的临时文件（存在时）

    Returns:
        str: 被删除的临时文件名；不存在时返回 None
    """
    fm = _file_manager(file_manager)
    temporary_filename = get_temporary_filename(filename)
    if fm.remove(temporary_filename):
        return temporary_filename
    return None


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "RecoveryAction",
    "get_temporary_filename",
    "recover_interrupted_save",
    "commit_temporary",
    "cleanup_temporary",
]
