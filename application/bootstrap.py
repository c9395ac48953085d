# Map Editor - Application Bootstrap
"""
应用启动引导器，负责整个应用的初始化编排

职责：
- 集中管理所有初始化逻辑
- 协调各组件的启动顺序
- 处理初始化失败和降级策略

初始化顺序（严格按此顺序执行）：
- Phase 0: 基础设施初始化（同步，阻塞式）
  - 0.0 全局配置目录初始化
  - 0.1 Logger 初始化
  - 0.2 EventBus 初始化
- Phase 1: 核心管理器初始化（同步，阻塞式）
  - 1.1 ConfigManager 初始化
  - 1.2 PersistenceStore 初始化
- Phase 2: GUI 框架初始化（同步，阻塞式）
  - 2.1 创建 QApplication 实例
  - 2.2 创建宿主窗口、文件对话框、窗口标题更新器
  - 2.3 显示窗口
  - 2.4 触发延迟初始化
- Phase 3: 延迟初始化（在事件循环中执行）
  - 3.1 FileManager / MapCoder 初始化
  - 3.2 TaskRunner 初始化
  - 3.3 编辑器协作者初始化（渲染器、历史、保存钩子、模组处理器）
  - 3.4 EditorSession 初始化（恢复依赖模组显示开关，重新打开上次的地图）
  - 3.5 发布 EVENT_INIT_COMPLETE 事件
- 应用关闭时：
  - 等待后台任务结束
  - 清理过期日志
"""

import sys
import time
import traceback
from pathlib import Path
from typing import Optional


# ============================================================
# 模块级变量（用于跨函数访问）
# ============================================================
_logger = None  # 日志器实例，Phase 0.1 后可用
_main_window = None  # 宿主窗口，Phase 2.2 后可用


def _publish_phase_complete(phase: int):
    """发布启动阶段完成事件（EventBus 不可用时跳过）"""
    from shared.service_locator import ServiceLocator
    from shared.service_names import SVC_EVENT_BUS
    from shared.event_types import EVENT_INIT_PHASE_COMPLETE

    event_bus = ServiceLocator.get_optional(SVC_EVENT_BUS)
    if event_bus:
        event_bus.publish(EVENT_INIT_PHASE_COMPLETE, {"phase": phase}, source="bootstrap")


def _init_phase_0() -> bool:
    """
    Phase 0: 基础设施初始化（同步，阻塞式）

    0.0 全局配置目录初始化
    0.1 Logger 初始化（最先，其他模块都需要日志）
    0.2 EventBus 初始化（创建事件总线并注册）

    Returns:
        bool: 初始化是否成功
    """
    global _logger

    try:
        # --------------------------------------------------------
        # 0.0 全局配置目录初始化
        # --------------------------------------------------------
        from infrastructure.config.settings import GLOBAL_CONFIG_DIR, GLOBAL_LOG_DIR

        GLOBAL_CONFIG_DIR.mkdir(parents=True, exist_ok=True)
        GLOBAL_LOG_DIR.mkdir(parents=True, exist_ok=True)
        print("[Phase 0.0] 全局配置目录初始化完成")

        # --------------------------------------------------------
        # 0.1 Logger 初始化
        # --------------------------------------------------------
        from infrastructure.utils.logger import setup_logger, get_logger
        setup_logger()
        _logger = get_logger("bootstrap")
        _logger.info("Phase 0.1 Logger 初始化完成")

        # --------------------------------------------------------
        # 0.2 EventBus 初始化（注册到 ServiceLocator）
        # --------------------------------------------------------
        from shared.event_bus import EventBus
        from shared.service_locator import ServiceLocator
        from shared.service_names import SVC_EVENT_BUS
        ServiceLocator.register(SVC_EVENT_BUS, EventBus())
        _logger.info("Phase 0.2 EventBus 初始化完成")

        return True

    except Exception as e:
        # Logger 失败时回退到 print() 输出
        print(f"[Phase 0] 初始化失败: {e}")
        traceback.print_exc()
        return False


def _init_phase_1() -> bool:
    """
    Phase 1: 核心管理器初始化（同步，阻塞式）

    1.1 ConfigManager 初始化
    1.2 PersistenceStore 初始化

    Returns:
        bool: 初始化是否成功
    """
    try:
        from shared.service_locator import ServiceLocator
        from shared.service_names import SVC_CONFIG_MANAGER, SVC_PERSISTENCE

        # --------------------------------------------------------
        # 1.1 ConfigManager
        # --------------------------------------------------------
        from infrastructure.config.config_manager import ConfigManager
        config_manager = ConfigManager()
        config_manager.load_config()

        valid, errors = config_manager.validate_config()
        if not valid:
            for error in errors:
                _logger.warning(f"配置校验: {error}")

        ServiceLocator.register(SVC_CONFIG_MANAGER, config_manager)

        from infrastructure.config.settings import CONFIG_DEBUG_EVENTS
        from shared.service_names import SVC_EVENT_BUS
        event_bus = ServiceLocator.get_optional(SVC_EVENT_BUS)
        if event_bus:
            event_bus.set_debug(bool(config_manager.get(CONFIG_DEBUG_EVENTS, False)))
        _logger.info("Phase 1.1 ConfigManager 初始化完成")

        # --------------------------------------------------------
        # 1.2 PersistenceStore
        # --------------------------------------------------------
        from infrastructure.config.settings import PERSISTENCE_SAVE_DELAY_MS
        from infrastructure.persistence.persistence_store import PersistenceStore
        persistence = PersistenceStore(save_delay_ms=PERSISTENCE_SAVE_DELAY_MS)
        persistence.load()
        ServiceLocator.register(SVC_PERSISTENCE, persistence)
        _logger.info("Phase 1.2 PersistenceStore 初始化完成")

        return True

    except Exception as e:
        if _logger:
            _logger.error(f"Phase 1 初始化失败: {e}")
        else:
            print(f"[Phase 1] 初始化失败: {e}")
        traceback.print_exc()
        return False


def _init_phase_2(app) -> Optional['QMainWindow']:
    """
    Phase 2: GUI 框架初始化（同步，阻塞式）

    2.2 创建宿主窗口、文件对话框与窗口标题更新器
    2.3 显示窗口
    2.4 触发延迟初始化

    Args:
        app: QApplication 实例

    Returns:
        QMainWindow: 宿主窗口，失败返回 None
    """
    global _main_window

    try:
        from PyQt6.QtCore import QTimer
        from PyQt6.QtWidgets import QMainWindow

        from presentation.file_dialogs import QtFileDialogs
        from presentation.window_title import APP_TITLE, WindowTitleUpdater
        from shared.service_locator import ServiceLocator
        from shared.service_names import SVC_FILE_DIALOGS, SVC_WINDOW_TITLE

        # --------------------------------------------------------
        # 2.2 宿主窗口与表示层适配器
        # --------------------------------------------------------
        main_window = QMainWindow()
        main_window.setWindowTitle(APP_TITLE)
        main_window.resize(1280, 800)

        ServiceLocator.register(SVC_FILE_DIALOGS, QtFileDialogs(main_window))
        ServiceLocator.register(SVC_WINDOW_TITLE, WindowTitleUpdater(main_window))
        _logger.info("Phase 2.2 宿主窗口创建完成")

        # --------------------------------------------------------
        # 2.3 显示窗口
        # --------------------------------------------------------
        main_window.show()
        _logger.info("Phase 2.3 窗口显示")

        # --------------------------------------------------------
        # 2.4 在事件循环中执行延迟初始化
        # --------------------------------------------------------
        QTimer.singleShot(0, _delayed_init)
        _logger.info("Phase 2.4 延迟初始化已调度")

        _main_window = main_window
        return main_window

    except Exception as e:
        if _logger:
            _logger.critical(f"Phase 2 初始化失败: {e}")
        else:
            print(f"[Phase 2] 初始化失败: {e}")
        traceback.print_exc()
        _show_fatal_error(f"窗口初始化失败: {e}")
        return None


def _delayed_init():
    """
    Phase 3: 延迟初始化（在事件循环中执行）

    3.1 FileManager / MapCoder
    3.2 TaskRunner
    3.3 编辑器协作者
    3.4 EditorSession
    3.5 发布 EVENT_INIT_COMPLETE
    """
    try:
        from shared.service_locator import ServiceLocator
        from shared.service_names import (
            SVC_EDITOR_SESSION,
            SVC_EVENT_BUS,
            SVC_FILE_MANAGER,
            SVC_HISTORY,
            SVC_MAP_CODER,
            SVC_MAP_RENDERER,
            SVC_MOD_HANDLER,
            SVC_PERSISTENCE,
            SVC_SAVE_SANITIZERS,
            SVC_TASK_RUNNER,
            SVC_WINDOW_TITLE,
        )

        event_bus = ServiceLocator.get_optional(SVC_EVENT_BUS)

        # --------------------------------------------------------
        # 3.1 FileManager / MapCoder
        # --------------------------------------------------------
        from infrastructure.persistence.file_manager import FileManager
        from infrastructure.persistence.map_coder import MapCoder
        file_manager = FileManager()
        ServiceLocator.register(SVC_FILE_MANAGER, file_manager)
        ServiceLocator.register(SVC_MAP_CODER, MapCoder(file_manager))
        _logger.info("Phase 3.1 FileManager / MapCoder 初始化完成")

        # --------------------------------------------------------
        # 3.2 TaskRunner
        # --------------------------------------------------------
        from shared.task_runner import TaskRunner
        task_runner = TaskRunner(event_bus)
        ServiceLocator.register(SVC_TASK_RUNNER, task_runner)
        _logger.info("Phase 3.2 TaskRunner 初始化完成")

        # --------------------------------------------------------
        # 3.3 编辑器协作者
        # --------------------------------------------------------
        from application.collaborators import EditorHistory, MapRenderer, ModHandler, SaveSanitizers
        ServiceLocator.register(SVC_MAP_RENDERER, MapRenderer())
        ServiceLocator.register(SVC_HISTORY, EditorHistory())
        ServiceLocator.register(SVC_SAVE_SANITIZERS, SaveSanitizers())
        ServiceLocator.register(SVC_MOD_HANDLER, ModHandler())
        _logger.info("Phase 3.3 编辑器协作者初始化完成")

        # --------------------------------------------------------
        # 3.4 EditorSession
        # --------------------------------------------------------
        from application.editor_session import EditorSession
        session = EditorSession()
        session.init_from_persistence()
        ServiceLocator.register(SVC_EDITOR_SESSION, session)

        window_title = ServiceLocator.get_optional(SVC_WINDOW_TITLE)
        if window_title is not None:
            window_title.attach(session, event_bus)

        persistence = ServiceLocator.get_optional(SVC_PERSISTENCE)
        last_filename = persistence.last_loaded_filename if persistence else None
        if last_filename and file_manager.is_file(last_filename):
            session.load_file(last_filename, persistence.last_selected_room_name)
        else:
            session.new_map()
        _logger.info("Phase 3.4 EditorSession 初始化完成")

        # --------------------------------------------------------
        # 3.5 发布 EVENT_INIT_COMPLETE
        # --------------------------------------------------------
        _publish_phase_complete(3)

        if event_bus:
            from shared.event_types import EVENT_INIT_COMPLETE
            event_bus.publish(EVENT_INIT_COMPLETE, {}, source="bootstrap")
            _logger.info("Phase 3.5 EVENT_INIT_COMPLETE 已发布")

    except Exception as e:
        if _logger:
            _logger.error(f"Phase 3 延迟初始化失败: {e}")
        else:
            print(f"[Phase 3] 延迟初始化失败: {e}")
        traceback.print_exc()
        # Phase 3 失败不致命，功能降级运行
        print("[WARNING] 部分功能可能不可用，应用将以降级模式运行")


def _on_about_to_quit():
    """应用关闭：等待后台任务结束，写出持久化数据，清理过期日志"""
    from shared.service_locator import ServiceLocator
    from shared.service_names import SVC_PERSISTENCE, SVC_TASK_RUNNER

    task_runner = ServiceLocator.get_optional(SVC_TASK_RUNNER)
    if task_runner is not None:
        task_runner.wait_for_all()

    persistence = ServiceLocator.get_optional(SVC_PERSISTENCE)
    if persistence is not None:
        persistence.flush()

    from infrastructure.utils.logger import cleanup_old_logs
    cleanup_old_logs()

    if _logger:
        _logger.info("应用已关闭")


def _show_fatal_error(message: str):
    """
    显示致命错误弹窗

    Args:
        message: 错误信息
    """
    try:
        from PyQt6.QtWidgets import QMessageBox, QApplication
        if QApplication.instance() is None:
            QApplication(sys.argv)
        QMessageBox.critical(None, "启动错误", message)
    except Exception:
        # 如果 PyQt6 也失败了，回退到控制台输出
        print(f"[FATAL] {message}")


def _setup_exception_hook():
    """
    绑定全局异常钩子

    未捕获异常写入日志，防止程序静默崩溃
    """
    def exception_hook(exc_type, exc_value, exc_tb):
        error_msg = ''.join(traceback.format_exception(exc_type, exc_value, exc_tb))

        if _logger:
            _logger.critical(f"未捕获异常:\n{error_msg}")
        else:
            print(f"[UNCAUGHT EXCEPTION]\n{error_msg}")

        sys.__excepthook__(exc_type, exc_value, exc_tb)

    sys.excepthook = exception_hook


def run() -> int:
    """
    应用程序主启动函数

    执行完整的初始化流程并启动事件循环

    Returns:
        int: 退出码，0 表示正常退出
    """
    print("=" * 50)
    print("Map Editor 启动中...")
    print(f"Python 版本: {sys.version}")
    print(f"工作目录: {Path.cwd()}")
    print("=" * 50)

    start_time = time.time()

    _setup_exception_hook()

    # ============================================================
    # Phase 0: 基础设施初始化
    # ============================================================
    print("\n[Phase 0] 基础设施初始化...")
    if not _init_phase_0():
        print("[Phase 0] 失败，无法继续启动")
        return 1
    _publish_phase_complete(0)

    # ============================================================
    # Phase 1: 核心管理器初始化
    # ============================================================
    print("\n[Phase 1] 核心管理器初始化...")
    if not _init_phase_1():
        print("[Phase 1] 失败，尝试继续启动（功能可能受限）...")
    else:
        _publish_phase_complete(1)

    # ============================================================
    # Phase 2: GUI 框架初始化
    # ============================================================
    print("\n[Phase 2] GUI 框架初始化...")

    from PyQt6.QtWidgets import QApplication
    app = QApplication(sys.argv)
    app.setApplicationName("Map Editor")
    app.setApplicationVersion("0.1.0")
    app.aboutToQuit.connect(_on_about_to_quit)

    main_window = _init_phase_2(app)
    if main_window is None:
        return 1  # 致命错误，退出
    _publish_phase_complete(2)

    elapsed = (time.time() - start_time) * 1000
    _logger.info(f"Phase 0-2 完成，耗时 {elapsed:.0f}ms")

    # ============================================================
    # 启动事件循环
    # ============================================================
    return app.exec()


__all__ = [
    "run",
]
