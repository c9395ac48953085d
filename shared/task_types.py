# Task Type Definitions
"""
后台任务类型定义

职责：
- 定义后台任务状态枚举
- 定义任务完成结果结构（成功标志 + 结果/异常）

设计原则：
- 纯数据定义，不依赖任何其他模块
"""

import time
from dataclasses import dataclass, field
from enum import Enum, auto
from typing import Any, Callable, Optional


# ============================================================
# 任务状态枚举
# ============================================================

class TaskStatus(Enum):
    """后台任务状态"""

    # 已创建，尚未开始执行
    PENDING = auto()

    # 正在工作线程中执行
    RUNNING = auto()

    # 执行成功
    SUCCEEDED = auto()

    # 执行抛出异常
    FAILED = auto()


# ============================================================
# 任务结果
# ============================================================

@dataclass
class TaskResult:
    """
    任务完成结果

    success 为 False 时 error 保存工作函数抛出的异常，result 为 None。
    注意：success 为 True 并不保证 result 非空，调用方需自行判断。
    """

    success: bool
    result: Any = None
    error: Optional[BaseException] = None

    @property
    def has_result(self) -> bool:
        """成功且产生了结果"""
        return self.success and self.result is not None


# 完成回调类型
TaskCallback = Callable[[TaskResult], None]


@dataclass
class TaskRecord:
    """运行中任务的登记信息"""

    task_id: str
    name: str
    callback: Optional[TaskCallback] = None
    status: TaskStatus = TaskStatus.PENDING
    created_at: float = field(default_factory=time.time)
    worker: Any = None


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "TaskStatus",
    "TaskResult",
    "TaskCallback",
    "TaskRecord",
]
