# Utilities
"""
工具函数模块

包含：
- logger.py: 统一日志管理器
"""

from .logger import (
    setup_logger,
    get_logger,
    shorten_path,
    log_performance,
    log_editor_event,
    log_file_operation,
    cleanup_old_logs,
)

__all__ = [
    "setup_logger",
    "get_logger",
    "shorten_path",
    "log_performance",
    "log_editor_event",
    "log_file_operation",
    "cleanup_old_logs",
]
