# Domain Layer
"""
领域层 - 核心业务逻辑

包含：
- map/: 地图结构域（Side、房间、填充块、元素树转换）
- editor/: 编辑器状态域（选择、图层信息、最近文件）
"""
