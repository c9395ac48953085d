# Infrastructure Layer
"""
基础设施层 - 配置管理、文件操作、地图编解码、工具函数

包含：
- config/: 配置管理（settings、config_manager）
- persistence/: 持久化（file_manager、json_repository、persistence_store、atomic_writer、map_coder）
- utils/: 工具函数（logger）
"""
