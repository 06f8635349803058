"""插件元数据缓存

职责:
- 以 (name, version) 为缓存键记忆已拉取的记录，version 为空表示 "latest"
- 整表一把锁，get / set / has 相互原子
- 只追加不覆盖：同一键重复写入时保留首次写入的记录

缓存只在单次解析内有效（更新中心数据在一次运行内视为不变），
生命周期由 ResolverContext 持有，不做淘汰。
"""

from __future__ import annotations

import logging
import threading

from pluginsync.core.models import PluginRecord

logger = logging.getLogger(__name__)


class MetadataCache:
    """线程安全的插件元数据缓存"""

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._records: dict[tuple[str, str], PluginRecord] = {}

    def get(self, name: str, version: str = "") -> PluginRecord | None:
        with self._lock:
            return self._records.get((name, version))

    def has(self, name: str, version: str = "") -> bool:
        with self._lock:
            return (name, version) in self._records

    def set(self, name: str, version: str, record: PluginRecord) -> PluginRecord:
        """写入缓存，键已存在时忽略本次写入，返回实际缓存的记录"""
        with self._lock:
            existing = self._records.get((name, version))
            if existing is not None:
                logger.debug("缓存已存在，保留首次记录: %s@%s", name, version or "latest")
                return existing
            self._records[(name, version)] = record
            return record

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)
