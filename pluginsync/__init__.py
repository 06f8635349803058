"""pluginsync - Jenkins 插件版本解析与升级工具"""

__version__ = "0.1.0"

# 由发布流水线在构建时替换
__githash__ = "current"
__buildstamp__ = "current"
