from __future__ import annotations

import pytest

from regscout.core.cache import RegistryCache
from regscout.models import CachedRegistry


@pytest.mark.unit
class TestRegistryCache:
    def test_starts_empty(self) -> None:
        cache = RegistryCache()

        assert cache.get() is None
        assert cache.timestamp is None
        assert cache.is_fresh(0.0, 1800) is False

    def test_set_and_get(self) -> None:
        cache = RegistryCache()
        snapshot = CachedRegistry(last_updated_at="2024-01-01T00:00:00.000Z")

        cache.set(snapshot, 100.0)

        assert cache.get() is snapshot
        assert cache.timestamp == 100.0

    @pytest.mark.parametrize(
        "now, fresh",
        [(100.0, True), (1899.9, True), (1900.0, False), (5000.0, False)],
    )
    def test_freshness_window(self, now: float, fresh: bool) -> None:
        cache = RegistryCache()
        cache.set(CachedRegistry(last_updated_at="t"), 100.0)

        assert cache.is_fresh(now, 1800) is fresh

    def test_clear(self) -> None:
        cache = RegistryCache()
        cache.set(CachedRegistry(last_updated_at="t"), 1.0)
        cache.clear()

        assert cache.get() is None
        assert cache.timestamp is None
        assert "entries=0" in repr(cache)
