# Load Operation - Decode -> Deserialize -> Commit
"""
地图加载操作

状态迁移：
    IDLE → DECODING → DESERIALIZING → COMMITTED
                 ↘ FAILED       ↘ FAILED

- 解码失败（任务失败或没有结果）：回到编辑器场景并发送 load failed
- 反序列化抛出异常：同样走 load failed
- 反序列化成功（即使文档为空）：提交给会话
"""

from enum import Enum, auto
from typing import Optional

from application.operations.base_operation import MapOperation
from domain.map.models import Side
from domain.map.side_codec import decode_taskable
from shared.task_types import TaskResult


class LoadState(Enum):
    IDLE = auto()
    DECODING = auto()
    DESERIALIZING = auto()
    COMMITTED = auto()
    FAILED = auto()


class LoadOperation(MapOperation):
    """一次地图加载"""

    name = "map_load"

    def __init__(self, session, filename: str, room_name: Optional[str] = None, event_name: Optional[str] = None):
        super().__init__(session, filename, LoadState.IDLE)
        self.room_name = room_name
        self.event_name = event_name

    @property
    def is_finished(self) -> bool:
        return self.state in (LoadState.COMMITTED, LoadState.FAILED)

    def start(self) -> None:
        filename = self.filename
        map_coder = self.session.map_coder

        self._transition(LoadState.DECODING)
        self._run_task(lambda: map_coder.decode_file(filename), self._on_decoded, "map_decode")

    def _on_decoded(self, task: TaskResult) -> None:
        if not task.has_result:
            self._fail(task)
            return

        tree = task.result
        self._transition(LoadState.DESERIALIZING)
        self._run_task(lambda: decode_taskable(tree), self._on_deserialized, "side_decode")

    def _on_deserialized(self, task: TaskResult) -> None:
        if not task.success:
            self._fail(task)
            return

        side = task.result if task.result is not None else Side()

        self._transition(LoadState.COMMITTED)
        self._finish("success")
        self.session.update_side_state(side, self.room_name, self.filename, self.event_name)

    def _fail(self, task: TaskResult) -> None:
        self._transition(LoadState.FAILED)
        self._finish("error")
        self.session.map_load_failed(self.filename, task.error)


__all__ = [
    "LoadState",
    "LoadOperation",
]
