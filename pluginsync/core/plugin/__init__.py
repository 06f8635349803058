"""插件解析模块

拆分说明:
- cache.py: 元数据缓存
- manifest.py: MANIFEST.MF 读取与依赖字段解析
- fetcher.py: 更新中心拉取
- policy.py: 兼容性判定与依赖策略
- resolver.py: 并发解析引擎
"""

from pluginsync.core.plugin.cache import MetadataCache
from pluginsync.core.plugin.fetcher import PluginFetcher
from pluginsync.core.plugin.policy import DependencyPolicy, accepts, evaluate
from pluginsync.core.plugin.resolver import PluginResolver, ResolvedSet, ResolverContext

__all__ = [
    "MetadataCache",
    "PluginFetcher",
    "DependencyPolicy",
    "accepts",
    "evaluate",
    "PluginResolver",
    "ResolvedSet",
    "ResolverContext",
]
