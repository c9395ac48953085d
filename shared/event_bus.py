# Event Bus - Publish-Subscribe Communication
"""
事件总线 - 编辑器状态与 UI 层之间的发布-订阅通信

职责：
- 解耦编辑器会话与场景/界面层
- 即发即忘：发布者不等待确认，也不接收返回值
- 确保 handler 在主线程执行（编辑器状态只在主线程修改）

初始化顺序：
- Phase 0.3，ServiceLocator 之后，创建并注册到 ServiceLocator

设计原则：
- publish() 可从任意线程调用，跨线程时通过 Qt 队列切回主线程
- 无 QApplication 时直接同步执行（测试场景）
- 单个 handler 异常不影响其他订阅者

使用示例：
    from shared.event_bus import EventBus
    from shared.event_types import EVENT_EDITOR_MAP_SAVED

    def on_map_saved(event_data):
        print(f"已保存: {event_data['data']['filename']}")

    event_bus.subscribe(EVENT_EDITOR_MAP_SAVED, on_map_saved)
    event_bus.publish(EVENT_EDITOR_MAP_SAVED, {"filename": "a.bin"})
"""

import time
import threading
from typing import Any, Callable, Dict, List

from PyQt6.QtCore import QObject, QMetaObject, Qt, pyqtSlot
from PyQt6.QtWidgets import QApplication

from shared.event_types import CRITICAL_EVENTS


# 事件处理器类型
EventHandler = Callable[[Dict[str, Any]], None]

# 关键事件 handler 耗时告警阈值（毫秒）
CRITICAL_HANDLER_THRESHOLD_MS = 500


class EventBusReceiver(QObject):
    """
    事件接收器 - 在主线程中执行 handler

    跨线程发布的事件先入队，再由 invokeMethod 在主线程批量处理
    """

    def __init__(self):
        super().__init__()
        self._pending_events: List[tuple] = []
        self._lock = threading.Lock()

    @pyqtSlot()
    def process_pending_events(self):
        """处理待执行的事件（在主线程中调用）"""
        with self._lock:
            events = self._pending_events.copy()
            self._pending_events.clear()

        for handler, event_data, event_type in events:
            self._execute_handler(handler, event_data, event_type)

    def queue_event(self, handler: EventHandler, event_data: Dict, event_type: str):
        """将事件加入队列"""
        with self._lock:
            self._pending_events.append((handler, event_data, event_type))

    def _execute_handler(self, handler: EventHandler, event_data: Dict, event_type: str):
        """执行单个 handler（带异常隔离和耗时监控）"""
        start_time = time.time()
        try:
            handler(event_data)
        except Exception as e:
            # 异常隔离：记录错误但不中断其他 handler
            self._log_handler_error(handler, event_type, e)
        finally:
            duration_ms = (time.time() - start_time) * 1000
            if event_type in CRITICAL_EVENTS and duration_ms > CRITICAL_HANDLER_THRESHOLD_MS:
                self._log_handler_timeout(handler, event_type, duration_ms)

    def _log_handler_error(self, handler: EventHandler, event_type: str, error: Exception):
        """记录 handler 执行错误"""
        handler_name = getattr(handler, '__name__', str(handler))
        from infrastructure.utils.logger import get_logger
        get_logger("event_bus").error(
            f"Handler '{handler_name}' failed for event '{event_type}': {error}",
            exc_info=error,
        )

    def _log_handler_timeout(self, handler: EventHandler, event_type: str, duration_ms: float):
        """记录 handler 执行超时"""
        handler_name = getattr(handler, '__name__', str(handler))
        from infrastructure.utils.logger import get_logger
        get_logger("event_bus").warning(
            f"Handler '{handler_name}' for critical event '{event_type}' "
            f"took {duration_ms:.0f}ms (>{CRITICAL_HANDLER_THRESHOLD_MS}ms threshold)"
        )


class EventBus:
    """
    事件总线

    线程安全说明：
    - publish() 可从任意线程调用
    - handler 始终在主线程执行（通过 QMetaObject.invokeMethod）
    - 订阅列表使用 threading.Lock 保护
    """

    def __init__(self):
        # 订阅者注册表：{event_type: [handler1, handler2, ...]}
        self._subscribers: Dict[str, List[EventHandler]] = {}
        self._lock = threading.Lock()
        # 事件接收器（主线程执行）
        self._receiver = EventBusReceiver()
        self._logger = None
        self._debug = False
        self._stats = {
            "total_published": 0,
            "total_dropped": 0,
        }

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("event_bus")
        return self._logger

    def set_debug(self, enabled: bool):
        """设置调试模式"""
        self._debug = enabled

    def subscribe(self, event_type: str, handler: EventHandler) -> None:
        """
        订阅事件

        Args:
            event_type: 事件类型（使用 event_types.py 中的常量）
            handler: 事件处理函数，签名为 (event_data: Dict) -> None

        Raises:
            ValueError: handler 不可调用
        """
        if not callable(handler):
            raise ValueError(f"Handler must be callable: {handler}")

        with self._lock:
            handlers = self._subscribers.setdefault(event_type, [])

            # 避免重复订阅
            if handler not in handlers:
                handlers.append(handler)

                if self._debug:
                    handler_name = getattr(handler, '__name__', str(handler))
                    self.logger.debug(f"Subscribed '{handler_name}' to '{event_type}'")

    def unsubscribe(self, event_type: str, handler: EventHandler) -> bool:
        """
        取消订阅

        Returns:
            bool: handler 存在并被移除时为 True
        """
        with self._lock:
            handlers = self._subscribers.get(event_type)
            if handlers and handler in handlers:
                handlers.remove(handler)
                return True
        return False

    def publish(self, event_type: str, data: Any = None, source: str = None) -> None:
        """
        发布事件

        可从任意线程调用，handler 将在主线程执行。

        Args:
            event_type: 事件类型
            data: 事件数据（编辑器事件约定为 dict）
            source: 发布者标识（可选）
        """
        event_data = {
            "type": event_type,
            "data": data,
            "timestamp": time.time(),
            "source": source,
        }

        # 获取订阅者列表（快照）
        with self._lock:
            handlers = self._subscribers.get(event_type, []).copy()

        if not handlers:
            self._stats["total_dropped"] += 1
            return

        self._stats["total_published"] += 1

        if self._debug:
            self.logger.debug(f"Publishing '{event_type}' to {len(handlers)} handlers")

        app = QApplication.instance()
        if app is None or threading.current_thread() is threading.main_thread():
            # 无 QApplication（测试场景）或已在主线程，直接执行
            for handler in handlers:
                self._receiver._execute_handler(handler, event_data, event_type)
        else:
            self._dispatch_via_qt(handlers, event_data, event_type)

    def _dispatch_via_qt(
        self, handlers: List[EventHandler], event_data: Dict, event_type: str
    ):
        """通过 Qt 事件循环分发到主线程"""
        for handler in handlers:
            self._receiver.queue_event(handler, event_data, event_type)

        QMetaObject.invokeMethod(
            self._receiver,
            "process_pending_events",
            Qt.ConnectionType.QueuedConnection
        )

    def clear_all(self) -> None:
        """
        清空所有订阅

        仅用于测试场景，生产环境不应调用此方法。
        """
        with self._lock:
            self._subscribers.clear()

    def get_subscriber_count(self, event_type: str) -> int:
        """获取指定事件的订阅者数量"""
        with self._lock:
            return len(self._subscribers.get(event_type, []))

    def get_stats(self) -> Dict[str, Any]:
        """
        获取事件总线统计信息

        Returns:
            dict: 订阅者数量、已发布数、无订阅者丢弃数
        """
        with self._lock:
            subscriber_stats = {
                event_type: len(handlers)
                for event_type, handlers in self._subscribers.items()
            }

        return {
            "subscribers": subscriber_stats,
            "total_published": self._stats["total_published"],
            "total_dropped": self._stats["total_dropped"],
        }


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "EventBus",
    "EventBusReceiver",
    "EventHandler",
]
