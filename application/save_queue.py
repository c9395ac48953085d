# Save Queue - Per-Filename Save Coalescing
"""
按文件名合并保存请求

职责：
- 记录哪些文件名正在保存（in-flight）
- 正在保存时收到的新请求放入该文件名唯一的等待槽，后来者覆盖先来者
- 当前保存结束后取出等待请求，由 EditorSession 重新提交

不变量：
- 同一文件名任意时刻最多一个保存在执行、最多一个请求在等待
- 等待槽中总是最后一次收到的请求
- 只有 in-flight 的文件名才会有等待请求

线程说明：
- 所有方法只在主线程（任务回调）中调用，不加锁

使用示例：
    queue = SaveCoalescingQueue()
    if queue.is_in_flight(request.filename):
        queue.queue_delayed_save(request)
    else:
        queue.mark_in_flight(request.filename)
        ...
    # 保存结束
    queue.clear_in_flight(filename)
    pending = queue.take_pending(filename)
"""

from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Set, Union


# 回调参数：None 使用默认回调，False 禁用
SaveCallbackArg = Union[Callable[..., Any], bool, None]


@dataclass
class SaveRequest:
    """
    一次保存请求的完整参数

    作为排队重试的载荷，原样传回 EditorSession.save_file
    """

    filename: str
    after_save_callback: SaveCallbackArg = None
    before_save_callback: SaveCallbackArg = None
    add_ext_if_missing: bool = True
    verify_map: bool = True


class SaveCoalescingQueue:
    """in-flight 集合 + 每个文件名一个等待槽"""

    def __init__(self):
        self._in_flight: Set[str] = set()
        self._pending: Dict[str, SaveRequest] = {}

    def is_in_flight(self, filename: str) -> bool:
        return filename in self._in_flight

    def mark_in_flight(self, filename: str) -> None:
        self._in_flight.add(filename)

    def clear_in_flight(self, filename: str) -> None:
        self._in_flight.discard(filename)

    def queue_delayed_save(self, request: SaveRequest) -> Optional[SaveRequest]:
        """
        放入等待槽

        Returns:
            SaveRequest: 被覆盖的旧请求（没有则为 None）
        """
        replaced = self._pending.get(request.filename)
        self._pending[request.filename] = request
        return replaced

    def take_pending(self, filename: str) -> Optional[SaveRequest]:
        """取出并清空等待槽"""
        return self._pending.pop(filename, None)

    def has_pending(self, filename: str) -> bool:
        return filename in self._pending

    def in_flight_filenames(self) -> List[str]:
        return sorted(self._in_flight)


__all__ = [
    "SaveCallbackArg",
    "SaveRequest",
    "SaveCoalescingQueue",
]
