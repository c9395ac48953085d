# Event Type Constants
"""
事件类型常量定义

职责：
- 集中定义所有事件类型常量
- 避免字符串硬编码
- 作为 EventBus 发布和订阅事件的键

设计原则：
- 纯常量定义，不依赖任何其他模块
- 所有事件名使用 EVENT_ 前缀
- 按功能模块分组组织
- 命名规范：EVENT_{模块}_{动作}，全大写下划线分隔

使用示例：
    from shared.event_types import EVENT_EDITOR_MAP_LOADED
    event_bus.subscribe(EVENT_EDITOR_MAP_LOADED, on_map_loaded)
    event_bus.publish(EVENT_EDITOR_MAP_LOADED, {"filename": path})
"""

# ============================================================
# 初始化事件
# ============================================================

# 启动阶段完成通知
# 携带数据：
#   - phase: int
EVENT_INIT_PHASE_COMPLETE = "init_phase_complete"

# 所有初始化完成
EVENT_INIT_COMPLETE = "init_complete"

# ============================================================
# 场景事件
# ============================================================

# 请求切换场景
# 携带数据：
#   - scene: str - 目标场景名（Loading / Editor）
EVENT_SCENE_CHANGE_REQUESTED = "scene_change_requested"

# ============================================================
# 地图加载事件
# ============================================================

# 存在未保存修改，拒绝加载
# 携带数据：
#   - current_filename: str | None - 当前文档文件名
#   - filename: str - 请求加载的文件名
EVENT_EDITOR_LOAD_WITH_CHANGES = "editor_load_with_changes"

# 存在未保存修改，拒绝新建
EVENT_EDITOR_NEW_MAP_WITH_CHANGES = "editor_new_map_with_changes"

# 地图加载失败
# 携带数据：
#   - filename: str
EVENT_EDITOR_MAP_LOAD_FAILED = "editor_map_load_failed"

# 地图加载完成（文档与选中项已就绪）
# 携带数据：
#   - filename: str
EVENT_EDITOR_MAP_LOADED = "editor_map_loaded"

# 新建地图完成
# 携带数据：
#   - filename: None
EVENT_EDITOR_MAP_NEW = "editor_map_new"

# ============================================================
# 地图保存事件
# ============================================================

# 保存被 before-save 回调否决
# 携带数据：
#   - filename: str
EVENT_EDITOR_MAP_SAVE_INTERRUPTED = "editor_map_save_interrupted"

# 序列化或编码失败
# 携带数据：
#   - filename: str
EVENT_EDITOR_MAP_SAVE_FAILED = "editor_map_save_failed"

# 保存成功（仅当目标为当前文档文件）
# 携带数据：
#   - filename: str
EVENT_EDITOR_MAP_SAVED = "editor_map_saved"

# 写入后回读校验失败（文件已被删除）
# 携带数据：
#   - filename: str
EVENT_EDITOR_MAP_VERIFICATION_FAILED = "editor_map_verification_failed"

# ============================================================
# 编辑器状态事件
# ============================================================

# 选中项变更
# 携带数据：
#   - selection: Selection | None - 新选中项
#   - previous_selection: Selection | None - 旧选中项
#   - add: bool - 是否为追加选择
EVENT_EDITOR_MAP_TARGET_CHANGED = "editor_map_target_changed"

# 图层信息变更
# 携带数据：
#   - layer: str
#   - key: str
#   - value: Any
EVENT_EDITOR_LAYER_INFORMATION_CHANGED = "editor_layer_information_changed"

# 依赖模组可见性变更
# 携带数据：
#   - layer: str
#   - value: bool
EVENT_EDITOR_SHOWN_DEPENDENCIES_CHANGED = "editor_shown_dependencies_changed"

# ============================================================
# 配置事件
# ============================================================

# 配置项变更
# 携带数据：
#   - key: str
#   - old_value: Any
#   - new_value: Any
EVENT_STATE_CONFIG_CHANGED = "state_config_changed"

# ============================================================
# 后台任务事件
# ============================================================

# 后台任务开始 / 完成 / 失败
# 携带数据：
#   - task_id: str
#   - name: str
#   - duration_ms: float（完成/失败时）
#   - error: str（失败时）
EVENT_TASK_STARTED = "task_started"
EVENT_TASK_COMPLETE = "task_complete"
EVENT_TASK_ERROR = "task_error"


# ============================================================
# 关键事件列表
# ============================================================

# 关键事件：handler 执行超过 500ms 时记录警告
CRITICAL_EVENTS = [
    EVENT_EDITOR_MAP_LOADED,
    EVENT_EDITOR_MAP_SAVED,
    EVENT_EDITOR_MAP_SAVE_FAILED,
    EVENT_EDITOR_MAP_VERIFICATION_FAILED,
]


# ============================================================
# 模块导出
# ============================================================

__all__ = [
    # 初始化事件
    "EVENT_INIT_PHASE_COMPLETE",
    "EVENT_INIT_COMPLETE",
    # 场景事件
    "EVENT_SCENE_CHANGE_REQUESTED",
    # 地图加载事件
    "EVENT_EDITOR_LOAD_WITH_CHANGES",
    "EVENT_EDITOR_NEW_MAP_WITH_CHANGES",
    "EVENT_EDITOR_MAP_LOAD_FAILED",
    "EVENT_EDITOR_MAP_LOADED",
    "EVENT_EDITOR_MAP_NEW",
    # 地图保存事件
    "EVENT_EDITOR_MAP_SAVE_INTERRUPTED",
    "EVENT_EDITOR_MAP_SAVE_FAILED",
    "EVENT_EDITOR_MAP_SAVED",
    "EVENT_EDITOR_MAP_VERIFICATION_FAILED",
    # 编辑器状态事件
    "EVENT_EDITOR_MAP_TARGET_CHANGED",
    "EVENT_EDITOR_LAYER_INFORMATION_CHANGED",
    "EVENT_EDITOR_SHOWN_DEPENDENCIES_CHANGED",
    # 配置事件
    "EVENT_STATE_CONFIG_CHANGED",
    # 后台任务事件
    "EVENT_TASK_STARTED",
    "EVENT_TASK_COMPLETE",
    "EVENT_TASK_ERROR",
    # 关键事件列表
    "CRITICAL_EVENTS",
]
