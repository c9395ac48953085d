"""
默认设置常量定义

职责：定义编辑器的默认配置值、文件格式常量与全局路径，作为配置缺失时的回退
设计原则：纯常量定义，无业务逻辑，便于全局引用
"""

import os
from pathlib import Path

# ============================================================
# 地图文件格式
# ============================================================

MAP_FILE_EXTENSION = "bin"           # 地图二进制文件扩展名（不含点）
TEMPORARY_SAVE_SUFFIX = ".saving"    # 保存过程中的临时文件后缀
ROOM_NAME_PREFIX = "lvl_"            # 房间名前缀，按名查找房间时可省略

# ============================================================
# 编辑器默认值
# ============================================================

DEFAULT_RECENT_FILES_ENTRY_LIMIT = 10   # 最近文件列表最大条目数
DEFAULT_VERIFY_ON_SAVE = True           # 保存后回读校验
DEFAULT_GAME_DIRECTORY = ""             # 打开文件对话框的默认目录（空表示用户主目录）
PERSISTENCE_SAVE_DELAY_MS = 500         # 持久化写入合并窗口（毫秒）

# ============================================================
# 场景名
# ============================================================

SCENE_LOADING = "Loading"
SCENE_EDITOR = "Editor"

# ============================================================
# 路径相关常量
# ============================================================

# 全局配置目录（用户主目录下，可通过 MAP_EDITOR_HOME 覆盖）
GLOBAL_CONFIG_DIR = Path(os.environ.get("MAP_EDITOR_HOME", Path.home() / ".map_editor"))

# 全局配置文件路径
GLOBAL_CONFIG_FILE = GLOBAL_CONFIG_DIR / "config.json"

# 跨会话持久化数据（最近文件、上次打开的地图等）
GLOBAL_PERSISTENCE_FILE = GLOBAL_CONFIG_DIR / "persistence.json"

# 全局日志目录
GLOBAL_LOG_DIR = GLOBAL_CONFIG_DIR / "logs"

# ============================================================
# 配置字段名常量（避免字符串硬编码）
# ============================================================

CONFIG_RECENT_FILES_ENTRY_LIMIT = "recent_files_entry_limit"
CONFIG_VERIFY_ON_SAVE = "verify_on_save"
CONFIG_GAME_DIRECTORY = "game_directory"
CONFIG_DEBUG_EVENTS = "debug_events"

# ============================================================
# 持久化字段名常量
# ============================================================

PERSISTENCE_RECENT_FILES = "recentFiles"
PERSISTENCE_LAST_LOADED_FILENAME = "lastLoadedFilename"
PERSISTENCE_LAST_SELECTED_ROOM_NAME = "lastSelectedRoomName"
PERSISTENCE_ONLY_SHOW_DEPENDED_ON_MODS = "onlyShowDependedOnMods"

# ============================================================
# 默认配置字典
# ============================================================

DEFAULT_CONFIG = {
    CONFIG_RECENT_FILES_ENTRY_LIMIT: DEFAULT_RECENT_FILES_ENTRY_LIMIT,
    CONFIG_VERIFY_ON_SAVE: DEFAULT_VERIFY_ON_SAVE,
    CONFIG_GAME_DIRECTORY: DEFAULT_GAME_DIRECTORY,
    CONFIG_DEBUG_EVENTS: False,
}
