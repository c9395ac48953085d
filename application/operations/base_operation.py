# Base Operation - Task-Chained Operation State Machine
"""
任务链操作基类

职责：
- 持有会话句柄与当前状态
- 提交下一个后台任务并在回调中推进状态
- 记录状态迁移和整体耗时

设计原则：
- 每个操作只捕获文件名、回调和会话句柄，不持有文档快照
- 状态只在主线程（任务回调）中修改
"""

import time
from enum import Enum
from typing import Any, Callable, Optional

from shared.task_types import TaskResult


class MapOperation:
    """任务链操作基类，子类定义 State 枚举和各步骤回调"""

    # 子类覆盖
    name = "operation"

    def __init__(self, session, filename: Optional[str], initial_state: Enum):
        self._session = session
        self.filename = filename
        self.state = initial_state
        self._started_at: Optional[float] = None
        self._logger = None

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger(self.name)
        return self._logger

    @property
    def session(self):
        return self._session

    def _transition(self, state: Enum) -> None:
        self.logger.debug(f"{self.name} {self.filename}: {self.state.name} -> {state.name}")
        self.state = state

        if self._started_at is None:
            self._started_at = time.time()

    def _run_task(
        self,
        work: Callable[[], Any],
        callback: Callable[[TaskResult], None],
        task_name: str,
    ) -> str:
        """提交后台任务，完成后在主线程回调"""
        return self._session.task_runner.new_task(work, callback, name=task_name)

    def _finish(self, status: str) -> None:
        from infrastructure.utils.logger import log_performance

        duration_ms = (time.time() - self._started_at) * 1000 if self._started_at else 0.0
        log_performance(self.name, duration_ms, status, extra={"path": self.filename})

    @property
    def is_finished(self) -> bool:
        return False


__all__ = [
    "MapOperation",
]
