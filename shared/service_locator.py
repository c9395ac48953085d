# Service Locator - Dependency Injection Container
"""
服务定位器 - 轻量级依赖注入容器

职责：
- 管理进程级服务实例（事件总线、任务执行器、持久化存储等）
- 为未显式注入依赖的组件提供回退获取点

初始化顺序：
- Phase 0.2，Logger 之后创建空容器
- 后续各 Phase 逐步注册服务

设计原则：
- 构造函数注入优先，ServiceLocator 仅作为延迟获取的回退
- 启动时注册，运行时只读
- 服务名使用 service_names.py 中的常量

使用示例：
    from shared.service_locator import ServiceLocator
    from shared.service_names import SVC_EVENT_BUS

    ServiceLocator.register(SVC_EVENT_BUS, event_bus)
    event_bus = ServiceLocator.get(SVC_EVENT_BUS)
"""

from typing import Any, Dict, Optional


class ServiceNotFoundError(Exception):
    """服务未找到异常"""

    def __init__(self, service_name: str, message: str = None):
        self.service_name = service_name
        if message is None:
            message = (
                f"服务 '{service_name}' 未注册。\n"
                f"可能的原因：\n"
                f"  1. 服务尚未初始化（检查 bootstrap 初始化顺序）\n"
                f"  2. 服务名拼写错误（使用 service_names.py 中的常量）"
            )
        super().__init__(message)


class ServiceLocator:
    """
    服务定位器

    类级注册表，全进程共享。

    线程安全说明：
    - 注册操作仅在启动阶段（主线程）执行
    - 运行时仅执行读取操作，无需加锁
    """

    _services: Dict[str, Any] = {}

    @classmethod
    def register(cls, name: str, service: Any) -> None:
        """
        注册服务实例

        Raises:
            ValueError: 服务名为空或服务实例为 None

        Note:
            重复注册同名服务会覆盖旧实例
        """
        if not name:
            raise ValueError("服务名不能为空")
        if service is None:
            raise ValueError(f"服务实例不能为 None: {name}")

        cls._services[name] = service

    @classmethod
    def get(cls, name: str) -> Any:
        """
        获取服务实例

        Raises:
            ServiceNotFoundError: 服务未注册
        """
        if name not in cls._services:
            raise ServiceNotFoundError(name)
        return cls._services[name]

    @classmethod
    def get_optional(cls, name: str) -> Optional[Any]:
        """获取服务实例，不存在时返回 None"""
        return cls._services.get(name)

    @classmethod
    def has(cls, name: str) -> bool:
        """检查服务是否已注册"""
        return name in cls._services

    @classmethod
    def clear(cls) -> None:
        """
        清空所有注册的服务

        仅用于测试场景。
        """
        cls._services.clear()

    @classmethod
    def get_all_names(cls) -> list:
        """获取所有已注册的服务名（调试用）"""
        return list(cls._services.keys())


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    "ServiceLocator",
    "ServiceNotFoundError",
]
