# Verify Operation - Re-Read Check
"""
地图回读校验操作

状态迁移：
    IDLE → DECODING → DESERIALIZING → VERIFIED
                 ↘ FAILED       ↘ FAILED

重新解码并反序列化文件，确认它可以被加载。不修改会话状态。
任一步失败都调用 error_callback(filename)。
"""

from enum import Enum, auto
from typing import Any, Callable, Optional

from application.operations.base_operation import MapOperation
from domain.map.side_codec import decode_taskable
from shared.task_types import TaskResult


class VerifyState(Enum):
    IDLE = auto()
    DECODING = auto()
    DESERIALIZING = auto()
    VERIFIED = auto()
    FAILED = auto()


class VerifyOperation(MapOperation):
    """一次回读校验"""

    name = "map_verify"

    def __init__(
        self,
        session,
        filename: Optional[str],
        success_callback: Callable[[], Any],
        error_callback: Callable[[Optional[str]], Any],
    ):
        super().__init__(session, filename, VerifyState.IDLE)
        self._success_callback = success_callback
        self._error_callback = error_callback

    @property
    def is_finished(self) -> bool:
        return self.state in (VerifyState.VERIFIED, VerifyState.FAILED)

    def start(self) -> None:
        filename = self.filename
        map_coder = self.session.map_coder

        self._transition(VerifyState.DECODING)
        self._run_task(
            lambda: map_coder.decode_file(filename) if filename else None,
            self._on_decoded,
            "verify_decode",
        )

    def _on_decoded(self, task: TaskResult) -> None:
        if not task.has_result:
            self._fail(task)
            return

        tree = task.result
        self._transition(VerifyState.DESERIALIZING)
        self._run_task(lambda: decode_taskable(tree), self._on_deserialized, "verify_side_decode")

    def _on_deserialized(self, task: TaskResult) -> None:
        if not task.success:
            self._fail(task)
            return

        self._transition(VerifyState.VERIFIED)
        self._finish("success")
        self._success_callback()

    def _fail(self, task: TaskResult) -> None:
        self._transition(VerifyState.FAILED)
        self._finish("error")
        if task.error is not None:
            self.logger.error(f"Verification of {self.filename} failed: {task.error}")
        self._error_callback(self.filename)


__all__ = [
    "VerifyState",
    "VerifyOperation",
]
