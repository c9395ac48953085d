# Map Editor - Main Package
"""
地图编辑器 - 关卡地图编辑会话核心

Architecture:
- presentation/    表示层 (文件对话框、窗口标题)
- application/     应用层 (启动引导、编辑器会话、加载/保存/校验操作)
- domain/          领域层 (地图结构、选择、图层信息、最近文件)
- infrastructure/  基础设施层 (配置、持久化、地图编解码、日志)
- shared/          共享内核层 (ServiceLocator、EventBus、TaskRunner)

状态归属：
- EditorSession (application/editor_session.py) 是当前文档状态的唯一持有者
- 后台任务只做编解码与文件 IO，结果在主线程回调中提交
"""

__version__ = "0.1.0"
__author__ = "Map Editor Team"
