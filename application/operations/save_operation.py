# Save Operation - Serialize -> Encode -> Verify -> Commit
"""
地图保存操作

状态迁移：
    IDLE → SERIALIZING → ENCODING → VERIFYING → COMMITTING → DONE
                  ↘ FAILED     ↘ FAILED    ↘ FAILED     ↘ FAILED

- 关闭校验时跳过 VERIFYING，直接写入目标文件
- 序列化/编码失败：会话清除 in-flight，发送 save failed，恢复等待请求
- 校验失败：删除临时文件，发送 verification failed，清除 in-flight 并恢复等待请求
- 提交（删除旧文件 + 重命名）失败或 after-save 回调抛出异常：按 save failed 处理

before-save 钩子与合并队列在 EditorSession.save_file 中处理，本操作从序列化开始。
"""

from enum import Enum, auto
from typing import Any, Callable, Optional

from application.operations.base_operation import MapOperation
from domain.map.side_codec import encode_taskable
from infrastructure.persistence.atomic_writer import commit_temporary
from infrastructure.persistence.file_exceptions import FileManagerError
from shared.task_types import TaskResult


class SaveState(Enum):
    IDLE = auto()
    SERIALIZING = auto()
    ENCODING = auto()
    VERIFYING = auto()
    COMMITTING = auto()
    DONE = auto()
    FAILED = auto()


class SaveOperation(MapOperation):
    """一次地图保存（写入、校验、提交）"""

    name = "map_save"

    def __init__(
        self,
        session,
        filename: str,
        write_target: str,
        after_save_callback: Optional[Callable[[str, Any], Any]],
        verify_map: bool = True,
    ):
        super().__init__(session, filename, SaveState.IDLE)
        self.write_target = write_target
        self._after_save_callback = after_save_callback
        self._verify_map = verify_map

    @property
    def is_finished(self) -> bool:
        return self.state in (SaveState.DONE, SaveState.FAILED)

    def start(self) -> None:
        session = self.session

        self._transition(SaveState.SERIALIZING)
        self._run_task(lambda: encode_taskable(session.side), self._on_serialized, "side_encode")

    def _on_serialized(self, task: TaskResult) -> None:
        if not task.has_result:
            self._fail(task.error)
            return

        tree = task.result
        target = self.write_target
        map_coder = self.session.map_coder

        self._transition(SaveState.ENCODING)
        self._run_task(lambda: map_coder.encode_file(target, tree), self._on_encoded, "map_encode")

    def _on_encoded(self, task: TaskResult) -> None:
        if not task.success:
            self._fail(task.error)
            return

        if self._verify_map:
            self._transition(SaveState.VERIFYING)
            self.session.verify_file(
                self.write_target,
                self._on_verified,
                self._on_verification_failed,
            )
        else:
            self._complete()

    def _on_verified(self) -> None:
        self._transition(SaveState.COMMITTING)

        try:
            commit_temporary(self.write_target, self.filename, self.session.file_manager)
        except FileManagerError as e:
            self._fail(e)
            return

        self._complete()

    def _on_verification_failed(self, filename: Optional[str]) -> None:
        self._transition(SaveState.FAILED)
        self._finish("verification_failed")
        self.session.default_verify_error_callback(filename)
        self.session.release_save(self.filename)

    def _complete(self) -> None:
        if self.state != SaveState.COMMITTING:
            self._transition(SaveState.COMMITTING)

        if self._after_save_callback:
            try:
                self._after_save_callback(self.filename, self.session)
            except Exception as e:
                # 文件已提交，但保存后处理未完成，按保存失败通知
                self.session.logger.error(f"保存后回调出错: {self.filename} - {e}")
                self._fail(e)
                return

        self._transition(SaveState.DONE)
        self._finish("success")
        self.session.map_save_success(self.filename)

    def _fail(self, error: Optional[BaseException]) -> None:
        self._transition(SaveState.FAILED)
        self._finish("error")
        self.session.map_save_failed(self.filename, error)


__all__ = [
    "SaveState",
    "SaveOperation",
]
