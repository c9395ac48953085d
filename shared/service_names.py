# Service Name Constants
"""
服务名常量定义

职责：
- 集中定义所有服务名称常量
- 作为 ServiceLocator 注册和获取服务的键

设计原则：
- 纯常量定义，不依赖任何其他模块
- 所有服务名使用 SVC_ 前缀
"""

# ============================================================
# 共享内核层服务
# ============================================================

# 事件总线 - 编辑器事件分发
SVC_EVENT_BUS = "event_bus"

# 后台任务执行器 - 编解码与文件 IO
SVC_TASK_RUNNER = "task_runner"

# ============================================================
# 基础设施层服务
# ============================================================

# 配置管理器 - 编辑器配置
SVC_CONFIG_MANAGER = "config_manager"

# 持久化存储 - 跨会话保存的键值数据（最近文件等）
SVC_PERSISTENCE = "persistence"

# 文件管理器 - 统一文件操作
SVC_FILE_MANAGER = "file_manager"

# 地图编解码器 - 二进制地图文件读写
SVC_MAP_CODER = "map_coder"

# ============================================================
# 应用层服务
# ============================================================

# 编辑器会话 - 当前文档、选中项、图层状态
SVC_EDITOR_SESSION = "editor_session"

# 撤销历史 - 未保存修改标志
SVC_HISTORY = "history"

# 地图渲染器 - 房间渲染缓存
SVC_MAP_RENDERER = "map_renderer"

# 保存前后处理
SVC_SAVE_SANITIZERS = "save_sanitizers"

# 模组依赖处理
SVC_MOD_HANDLER = "mod_handler"

# ============================================================
# 表示层服务
# ============================================================

# 文件对话框
SVC_FILE_DIALOGS = "file_dialogs"

# 窗口标题
SVC_WINDOW_TITLE = "window_title"
