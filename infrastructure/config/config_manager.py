"""
配置统一访问管理器

职责：提供编辑器配置的统一访问接口，管理配置的读写、校验与变更通知

初始化顺序：Phase 1.1，依赖 Logger，注册到 ServiceLocator

使用方式：
    config_manager = ConfigManager()
    config_manager.load_config()

    # 读取配置
    limit = config_manager.get_recent_files_entry_limit()

    # 写入配置（自动触发变更通知）
    config_manager.set(CONFIG_RECENT_FILES_ENTRY_LIMIT, 20)
"""

import json
from pathlib import Path
from threading import Lock
from typing import Any, Callable, Dict, List, Optional

from .settings import (
    GLOBAL_CONFIG_FILE,
    DEFAULT_CONFIG,
    CONFIG_RECENT_FILES_ENTRY_LIMIT,
    CONFIG_VERIFY_ON_SAVE,
    CONFIG_GAME_DIRECTORY,
    DEFAULT_RECENT_FILES_ENTRY_LIMIT,
)


class ConfigManager:
    """
    配置统一访问管理器

    提供配置的统一读写接口，禁止其他模块直接解析 config.json
    """

    def __init__(self, config_file: Optional[Path] = None, event_bus=None):
        """
        初始化配置管理器

        Args:
            config_file: 配置文件路径，默认使用 GLOBAL_CONFIG_FILE
            event_bus: 事件总线（可选，缺省时从 ServiceLocator 延迟获取）
        """
        self._config: Dict[str, Any] = DEFAULT_CONFIG.copy()
        self._config_file = Path(config_file) if config_file else GLOBAL_CONFIG_FILE
        self._lock = Lock()
        self._change_handlers: Dict[str, List[Callable]] = {}
        self._loaded = False

        self._event_bus = event_bus
        self._logger = None

    # ============================================================
    # 延迟获取服务
    # ============================================================

    @property
    def event_bus(self):
        """延迟获取 EventBus 服务"""
        if self._event_bus is None:
            from shared.service_locator import ServiceLocator
            from shared.service_names import SVC_EVENT_BUS
            self._event_bus = ServiceLocator.get_optional(SVC_EVENT_BUS)
        return self._event_bus

    @property
    def logger(self):
        """延迟获取日志器"""
        if self._logger is None:
            from infrastructure.utils.logger import get_logger
            self._logger = get_logger("config_manager")
        return self._logger

    # ============================================================
    # 核心功能
    # ============================================================

    def load_config(self) -> bool:
        """
        加载配置文件

        缺失字段使用 settings.py 默认值；文件不存在时写出默认配置

        Returns:
            bool: 加载是否成功（解析失败时回退默认配置并返回 False）
        """
        with self._lock:
            try:
                self._config_file.parent.mkdir(parents=True, exist_ok=True)

                if self._config_file.exists():
                    with open(self._config_file, "r", encoding="utf-8") as f:
                        loaded_config = json.load(f)

                    self._config = {**DEFAULT_CONFIG, **loaded_config}
                else:
                    self._config = DEFAULT_CONFIG.copy()
                    self._save_config_internal()

                self._loaded = True
                self.logger.info(f"配置加载成功: {self._config_file}")
                return True

            except json.JSONDecodeError as e:
                self.logger.error(f"配置文件 JSON 解析失败: {e}")
                self._config = DEFAULT_CONFIG.copy()
                self._loaded = True
                return False

            except OSError as e:
                self.logger.error(f"配置加载失败: {e}")
                self._config = DEFAULT_CONFIG.copy()
                self._loaded = True
                return False

    def save_config(self) -> bool:
        """
        保存配置到文件

        Returns:
            bool: 保存是否成功
        """
        with self._lock:
            return self._save_config_internal()

    def _save_config_internal(self) -> bool:
        """内部保存方法（不加锁）"""
        try:
            self._config_file.parent.mkdir(parents=True, exist_ok=True)

            with open(self._config_file, "w", encoding="utf-8") as f:
                json.dump(self._config, f, indent=2, ensure_ascii=False)

            return True

        except OSError as e:
            self.logger.error(f"配置保存失败: {e}")
            return False

    def get(self, key: str, default: Any = None) -> Any:
        """统一配置读取接口"""
        with self._lock:
            return self._config.get(key, default)

    def set(self, key: str, value: Any, save: bool = True) -> None:
        """
        统一配置写入接口

        自动触发变更通知

        Args:
            key: 配置键名
            value: 配置值
            save: 是否立即保存到文件
        """
        with self._lock:
            old_value = self._config.get(key)
            self._config[key] = value

            if save:
                self._save_config_internal()

        # 触发变更通知（锁外执行，避免死锁）
        if old_value != value:
            self._notify_change(key, old_value, value)

    def get_all(self) -> Dict[str, Any]:
        """获取所有配置（副本）"""
        with self._lock:
            return self._config.copy()

    # ============================================================
    # 编辑器配置专用方法
    # ============================================================

    def get_recent_files_entry_limit(self) -> int:
        """最近文件列表最大条目数（非法值回退默认值）"""
        value = self.get(CONFIG_RECENT_FILES_ENTRY_LIMIT, DEFAULT_RECENT_FILES_ENTRY_LIMIT)
        if not isinstance(value, int) or isinstance(value, bool) or value < 1:
            return DEFAULT_RECENT_FILES_ENTRY_LIMIT
        return value

    def get_verify_on_save(self) -> bool:
        return bool(self.get(CONFIG_VERIFY_ON_SAVE, True))

    def get_game_directory(self) -> str:
        """打开文件对话框的默认目录"""
        return self.get(CONFIG_GAME_DIRECTORY, "") or str(Path.home())

    # ============================================================
    # 配置校验
    # ============================================================

    def validate_config(self) -> tuple[bool, List[str]]:
        """
        校验配置有效性

        Returns:
            (是否有效, 错误信息列表)
        """
        errors = []

        with self._lock:
            limit = self._config.get(CONFIG_RECENT_FILES_ENTRY_LIMIT)
            if not isinstance(limit, int) or isinstance(limit, bool) or limit < 1:
                errors.append(f"最近文件条目数必须为正整数，当前值: {limit}")

            verify = self._config.get(CONFIG_VERIFY_ON_SAVE)
            if not isinstance(verify, bool):
                errors.append(f"verify_on_save 必须为布尔值，当前值: {verify}")

            game_dir = self._config.get(CONFIG_GAME_DIRECTORY, "")
            if game_dir and not Path(game_dir).is_dir():
                errors.append(f"游戏目录不存在: {game_dir}")

        return len(errors) == 0, errors

    # ============================================================
    # 变更通知机制
    # ============================================================

    def subscribe_change(self, key: str, handler: Callable[[str, Any, Any], None]) -> None:
        """
        订阅特定配置项变更

        Args:
            key: 配置键名
            handler: 回调函数，签名为 handler(key, old_value, new_value)
        """
        with self._lock:
            self._change_handlers.setdefault(key, []).append(handler)

    def unsubscribe_change(self, key: str, handler: Callable) -> None:
        """取消订阅配置项变更"""
        with self._lock:
            handlers = self._change_handlers.get(key, [])
            if handler in handlers:
                handlers.remove(handler)

    def _notify_change(self, key: str, old_value: Any, new_value: Any) -> None:
        """通知配置变更"""
        for handler in list(self._change_handlers.get(key, [])):
            try:
                handler(key, old_value, new_value)
            except Exception as e:
                self.logger.error(f"配置变更回调执行失败: {e}")

        if self.event_bus:
            from shared.event_types import EVENT_STATE_CONFIG_CHANGED
            self.event_bus.publish(EVENT_STATE_CONFIG_CHANGED, {
                "key": key,
                "old_value": old_value,
                "new_value": new_value,
            })
