# Shared Kernel Layer
"""
共享内核层 - 被所有层依赖的跨层基础设施

包含：
- service_names: 服务名常量定义
- service_locator: 服务定位器（依赖注入容器）
- event_types: 事件类型常量定义
- event_bus: 事件总线（发布-订阅通信）
- error_types: 失败事件分类与日志级别
- task_types: 后台任务状态与结果类型
- task_runner: 后台任务执行器（QThread）

依赖方向（严格遵守，避免循环依赖）：
- service_names.py, event_types.py, error_types.py, task_types.py: 纯常量/类型定义，不依赖任何其他模块
- service_locator.py: 仅依赖 service_names.py
- event_bus.py: 依赖 event_types.py
- task_runner.py: 依赖 task_types.py、event_types.py
"""

# 服务名常量
from shared.service_names import (
    SVC_EVENT_BUS,
    SVC_TASK_RUNNER,
    SVC_CONFIG_MANAGER,
    SVC_PERSISTENCE,
    SVC_FILE_MANAGER,
    SVC_MAP_CODER,
    SVC_EDITOR_SESSION,
    SVC_HISTORY,
    SVC_MAP_RENDERER,
    SVC_SAVE_SANITIZERS,
    SVC_MOD_HANDLER,
    SVC_FILE_DIALOGS,
    SVC_WINDOW_TITLE,
)

# 服务定位器
from shared.service_locator import (
    ServiceLocator,
    ServiceNotFoundError,
)

# 事件类型常量
from shared.event_types import (
    EVENT_INIT_COMPLETE,
    EVENT_SCENE_CHANGE_REQUESTED,
    EVENT_EDITOR_LOAD_WITH_CHANGES,
    EVENT_EDITOR_NEW_MAP_WITH_CHANGES,
    EVENT_EDITOR_MAP_LOAD_FAILED,
    EVENT_EDITOR_MAP_LOADED,
    EVENT_EDITOR_MAP_NEW,
    EVENT_EDITOR_MAP_SAVE_INTERRUPTED,
    EVENT_EDITOR_MAP_SAVE_FAILED,
    EVENT_EDITOR_MAP_SAVED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
    EVENT_EDITOR_MAP_TARGET_CHANGED,
    EVENT_EDITOR_LAYER_INFORMATION_CHANGED,
    EVENT_EDITOR_SHOWN_DEPENDENCIES_CHANGED,
    EVENT_STATE_CONFIG_CHANGED,
    CRITICAL_EVENTS,
)

# 事件总线
from shared.event_bus import EventBus

# 错误分类
from shared.error_types import (
    EditorErrorCategory,
    get_event_category,
    get_log_level,
)

# 后台任务
from shared.task_types import TaskStatus, TaskResult
from shared.task_runner import TaskRunner


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    # 服务名
    "SVC_EVENT_BUS",
    "SVC_TASK_RUNNER",
    "SVC_CONFIG_MANAGER",
    "SVC_PERSISTENCE",
    "SVC_FILE_MANAGER",
    "SVC_MAP_CODER",
    "SVC_EDITOR_SESSION",
    "SVC_HISTORY",
    "SVC_MAP_RENDERER",
    "SVC_SAVE_SANITIZERS",
    "SVC_MOD_HANDLER",
    "SVC_FILE_DIALOGS",
    "SVC_WINDOW_TITLE",
    # 服务定位器
    "ServiceLocator",
    "ServiceNotFoundError",
    # 事件类型
    "EVENT_INIT_COMPLETE",
    "EVENT_SCENE_CHANGE_REQUESTED",
    "EVENT_EDITOR_LOAD_WITH_CHANGES",
    "EVENT_EDITOR_NEW_MAP_WITH_CHANGES",
    "EVENT_EDITOR_MAP_LOAD_FAILED",
    "EVENT_EDITOR_MAP_LOADED",
    "EVENT_EDITOR_MAP_NEW",
    "EVENT_EDITOR_MAP_SAVE_INTERRUPTED",
    "EVENT_EDITOR_MAP_SAVE_FAILED",
    "EVENT_EDITOR_MAP_SAVED",
    "EVENT_EDITOR_MAP_VERIFICATION_FAILED",
    "EVENT_EDITOR_MAP_TARGET_CHANGED",
    "EVENT_EDITOR_LAYER_INFORMATION_CHANGED",
    "EVENT_EDITOR_SHOWN_DEPENDENCIES_CHANGED",
    "EVENT_STATE_CONFIG_CHANGED",
    "CRITICAL_EVENTS",
    # 事件总线
    "EventBus",
    # 错误分类
    "EditorErrorCategory",
    "get_event_category",
    "get_log_level",
    # 后台任务
    "TaskStatus",
    "TaskResult",
    "TaskRunner",
]
