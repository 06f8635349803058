"""MetadataCache 单元测试"""

from __future__ import annotations

import threading

from conftest import rec

from pluginsync.core.plugin.cache import MetadataCache


class TestMetadataCache:
    def test_miss_returns_none(self) -> None:
        cache = MetadataCache()
        assert cache.get("git", "4.0") is None
        assert not cache.has("git", "4.0")

    def test_set_and_get(self) -> None:
        cache = MetadataCache()
        record = rec("git", "4.0")
        assert cache.set("git", "4.0", record) is record
        assert cache.get("git", "4.0") is record
        assert cache.has("git", "4.0")

    def test_latest_and_pinned_are_distinct_keys(self) -> None:
        cache = MetadataCache()
        cache.set("git", "", rec("git", "4.2"))
        assert cache.has("git", "")
        assert not cache.has("git", "4.2")

    def test_first_write_wins(self) -> None:
        cache = MetadataCache()
        first = rec("git", "4.0")
        stored = cache.set("git", "4.0", rec("git", "4.0", title="other"))
        assert cache.set("git", "4.0", first) is stored
        assert cache.get("git", "4.0") is stored
        assert len(cache) == 1

    def test_concurrent_set_keeps_single_record(self) -> None:
        cache = MetadataCache()
        results = []
        barrier = threading.Barrier(8)

        def worker(i: int) -> None:
            barrier.wait()
            results.append(cache.set("git", "", rec("git", f"4.{i}")))

        threads = [threading.Thread(target=worker, args=(i,)) for i in range(8)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(cache) == 1
        assert all(r is results[0] for r in results)
