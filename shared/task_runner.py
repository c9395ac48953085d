# Task Runner - Background Task Execution
"""
后台任务执行器 - 在工作线程中执行编解码与文件 IO

职责：
- 将一次性工作函数放到 QThread 中执行，避免阻塞界面
- 工作完成后在主线程回调 callback(TaskResult)
- 捕获工作函数的异常，转换为 success=False 的结果
- 发布任务开始/完成/失败事件并记录耗时

初始化顺序：
- Phase 3.1，依赖 EventBus、Logger

设计原则：
- 即发即忘：无取消接口，只支持单层回调（回调内可再提交新任务）
- 回调始终在主线程执行，编辑器状态无需加锁
- 无 QApplication 时在调用线程内同步执行（测试场景）

使用示例：
    from shared.task_runner import TaskRunner

    runner = TaskRunner()

    def on_done(task):
        if task.success:
            print(task.result)

    runner.new_task(lambda: coder.decode_file(path), on_done, name="decode")
"""

import threading
import time
import uuid
from typing import Any, Callable, Dict, Optional

from PyQt6.QtCore import QObject, QThread, Qt, pyqtSignal, pyqtSlot
from PyQt6.QtWidgets import QApplication

from shared.task_types import TaskCallback, TaskRecord, TaskResult, TaskStatus
from shared.event_types import (
    EVENT_TASK_STARTED,
    EVENT_TASK_COMPLETE,
    EVENT_TASK_ERROR,
)


# ============================================================
# 工作线程
# ============================================================

class TaskWorker(QThread):
    """
    单任务工作线程

    run() 在新线程中执行工作函数，结束时发送 task_finished 信号。
    信号由主线程中的 TaskRunner 以 QueuedConnection 接收。
    """

    # 任务结束：(task_id, TaskResult)
    task_finished = pyqtSignal(str, object)

    def __init__(self, task_id: str, work: Callable[[], Any]):
        super().__init__()
        self._task_id = task_id
        self._work = work

    def run(self) -> None:
        """QThread 运行入口"""
        outcome = execute_work(self._work)
        self.task_finished.emit(self._task_id, outcome)


def execute_work(work: Callable[[], Any]) -> TaskResult:
    """
    执行工作函数并包装为 TaskResult

    Args:
        work: 无参工作函数

    Returns:
        TaskResult: 正常返回为成功，抛出异常为失败
    """
    try:
        return TaskResult(success=True, result=work())
    except Exception as e:
        return TaskResult(success=False, error=e)


# ============================================================
# 任务执行器
# ============================================================

class TaskRunner(QObject):
    """
    后台任务执行器

    每个任务一个 QThread，不同任务可并行执行。
    同一文件的保存串行化由调用方（保存队列）负责，执行器本身不排队。
    """

    def __init__(self, event_bus=None):
        super().__init__()
        self._records: Dict[str, TaskRecord] = {}
        self._lock = threading.Lock()

        self._event_bus = event_bus
        self._logger = None

        self._stats = {
            "total_tasks": 0,
            "completed_tasks": 0,
            "failed_tasks": 0,
            "total_duration_ms": 0.0,
        }

    # ============================================================
    # 延迟获取服务
    # ============================================================

    @property
    def event_bus(self):
        """延迟获取 EventBus"""
        if self._event_bus is None:
            from shared.service_locator import ServiceLocator
            from shared.service_names import SVC_EVENT_BUS
            self._event_bus = ServiceLocator.get_optional(SVC_EVENT_BUS)
        return self._event_bus

    @property
    def logger(self):
        """延迟获取 Logger"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("task_runner")
        return self._logger

    # ============================================================
    # 任务提交
    # ============================================================

    def new_task(
        self,
        work: Callable[[], Any],
        callback: Optional[TaskCallback] = None,
        name: str = "task",
    ) -> str:
        """
        提交后台任务

        Args:
            work: 无参工作函数，在工作线程中执行
            callback: 完成回调，在主线程中以 TaskResult 调用
            name: 任务名（日志与事件使用）

        Returns:
            str: 任务 ID
        """
        task_id = f"{name}_{uuid.uuid4().hex[:8]}"
        record = TaskRecord(task_id=task_id, name=name, callback=callback)

        with self._lock:
            self._records[task_id] = record
            self._stats["total_tasks"] += 1

        self._publish(EVENT_TASK_STARTED, {"task_id": task_id, "name": name})
        self.logger.debug(f"Task '{task_id}' submitted")

        if QApplication.instance() is None:
            # 无事件循环，同步执行
            record.status = TaskStatus.RUNNING
            self._on_task_finished(task_id, execute_work(work))
            return task_id

        worker = TaskWorker(task_id, work)
        worker.task_finished.connect(
            self._on_task_finished,
            Qt.ConnectionType.QueuedConnection,
        )
        record.worker = worker
        record.status = TaskStatus.RUNNING
        worker.start()

        return task_id

    @pyqtSlot(str, object)
    def _on_task_finished(self, task_id: str, outcome: TaskResult) -> None:
        """任务结束处理（主线程）"""
        with self._lock:
            record = self._records.pop(task_id, None)

        if record is None:
            return

        if record.worker is not None:
            record.worker.wait()
            record.worker.deleteLater()
            record.worker = None

        duration_ms = (time.time() - record.created_at) * 1000

        if outcome.success:
            record.status = TaskStatus.SUCCEEDED
            self._stats["completed_tasks"] += 1
            self.logger.debug(f"Task '{task_id}' completed in {duration_ms:.0f}ms")
            self._publish(EVENT_TASK_COMPLETE, {
                "task_id": task_id,
                "name": record.name,
                "duration_ms": duration_ms,
            })
        else:
            record.status = TaskStatus.FAILED
            self._stats["failed_tasks"] += 1
            self.logger.error(
                f"Task '{task_id}' failed after {duration_ms:.0f}ms: {outcome.error}",
                exc_info=outcome.error,
            )
            self._publish(EVENT_TASK_ERROR, {
                "task_id": task_id,
                "name": record.name,
                "duration_ms": duration_ms,
                "error": str(outcome.error),
            })

        self._stats["total_duration_ms"] += duration_ms

        if record.callback is not None:
            record.callback(outcome)

    # ============================================================
    # 状态查询
    # ============================================================

    def get_active_count(self) -> int:
        """获取未完成的任务数"""
        with self._lock:
            return len(self._records)

    def get_task_status(self, task_id: str) -> Optional[TaskStatus]:
        """获取未完成任务的状态，已结束或不存在返回 None"""
        with self._lock:
            record = self._records.get(task_id)
            return record.status if record else None

    def wait_for_all(self, timeout_ms: int = 5000) -> None:
        """
        等待所有工作线程结束

        应用退出时调用，避免线程在 QApplication 销毁后仍在运行。
        """
        with self._lock:
            workers = [r.worker for r in self._records.values() if r.worker is not None]

        for worker in workers:
            if not worker.wait(timeout_ms):
                self.logger.warning("Task worker did not finish before shutdown")

    def get_stats(self) -> Dict[str, Any]:
        """获取任务统计信息"""
        completed = self._stats["completed_tasks"] + self._stats["failed_tasks"]
        avg_duration = self._stats["total_duration_ms"] / completed if completed else 0.0
        return {
            "active_tasks": self.get_active_count(),
            "total_tasks": self._stats["total_tasks"],
            "completed_tasks": self._stats["completed_tasks"],
            "failed_tasks": self._stats["failed_tasks"],
            "avg_duration_ms": avg_duration,
        }

    # ============================================================
    # 事件发布
    # ============================================================

    def _publish(self, event_type: str, data: Dict[str, Any]) -> None:
        if self.event_bus is None:
            return
        self.event_bus.publish(event_type, data, source="task_runner")


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "TaskRunner",
    "TaskWorker",
    "execute_work",
]
