# Recent Files
"""
最近文件列表

规则：最新在前、无重复、最多 max_entries 条。
重复添加同一文件只会把它移到最前。
"""

from typing import List, Optional, Sequence


def add_to_recent_files(
    recent: Optional[Sequence[str]],
    filename: Optional[str],
    max_entries: int,
) -> List[str]:
    """
    把 filename 放到最近文件列表最前

    Args:
        recent: 当前列表（最新在前），None 视为空
        filename: 新打开/保存的文件；为空时原样返回
        max_entries: 最大条目数

    Returns:
        List[str]: 新列表（不修改传入的序列）
    """
    current = list(recent or [])

    if not filename:
        return current

    updated = [filename] + [entry for entry in current if entry != filename]
    return updated[:max(max_entries, 0)]


__all__ = [
    "add_to_recent_files",
]
