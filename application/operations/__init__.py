# Map Operations
"""
地图操作状态机

包含：
- base_operation.py: 任务链操作基类
- load_operation.py: 加载（解码 → 反序列化 → 提交）
- verify_operation.py: 回读校验（解码 → 反序列化）
- save_operation.py: 保存（序列化 → 编码 → 校验 → 提交）
"""

from application.operations.base_operation import MapOperation
from application.operations.load_operation import LoadOperation, LoadState
from application.operations.verify_operation import VerifyOperation, VerifyState
from application.operations.save_operation import SaveOperation, SaveState

__all__ = [
    "MapOperation",
    "LoadOperation",
    "LoadState",
    "VerifyOperation",
    "VerifyState",
    "SaveOperation",
    "SaveState",
]
