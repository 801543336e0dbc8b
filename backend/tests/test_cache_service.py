from jobsearch.services.cache_service import CacheService, make_cache_key


class TestCacheKeys:
    def test_field_order_does_not_matter(self):
        a = make_cache_key("jobs", {"category": "plomeria", "page": 1, "tags": ["a"]})
        b = make_cache_key("jobs", {"tags": ["a"], "page": 1, "category": "plomeria"})
        assert a == b

    def test_different_values_differ(self):
        assert make_cache_key("jobs", {"page": 1}) != make_cache_key("jobs", {"page": 2})

    def test_prefix_only(self):
        assert make_cache_key("categories") == "categories"


class TestExpiry:
    def test_get_missing_key(self, cache):
        assert cache.get("nope") is None

    def test_set_then_get(self, cache):
        cache.set("k", {"v": 1}, 10)
        assert cache.get("k") == {"v": 1}

    def test_entry_valid_until_expiry_inclusive(self, cache, clock):
        cache.set("k", "value", 300)
        clock.advance(300)
        assert cache.get("k") == "value"
        clock.advance(0.001)
        assert cache.get("k") is None

    def test_expired_entry_can_be_overwritten(self, cache, clock):
        cache.set("k", "old", 5)
        clock.advance(10)
        assert cache.get("k") is None
        cache.set("k", "new", 5)
        assert cache.get("k") == "new"

    def test_set_overwrites_and_resets_ttl(self, cache, clock):
        cache.set("k", "first", 10)
        clock.advance(8)
        cache.set("k", "second", 10)
        clock.advance(8)
        assert cache.get("k") == "second"

    def test_per_entry_ttl(self, cache, clock):
        cache.set("short", 1, 60)
        cache.set("long", 2, 900)
        clock.advance(120)
        assert cache.get("short") is None
        assert cache.get("long") == 2

    def test_expire_sweeps_only_expired(self, cache, clock):
        cache.set("a", 1, 10)
        cache.set("b", 2, 100)
        clock.advance(50)
        assert cache.expire() == 1
        assert len(cache) == 1
        assert cache.get("b") == 2


class TestCapacity:
    def test_lru_eviction(self, clock):
        cache = CacheService(maxsize=2, clock=clock)
        cache.set("a", 1, 60)
        cache.set("b", 2, 60)
        cache.get("a")
        cache.set("c", 3, 60)
        assert cache.get("b") is None
        assert cache.get("a") == 1
        assert cache.get("c") == 3
        assert cache.get_stats()["evictions"] == 1

    def test_clear_is_not_counted_as_eviction(self, cache):
        cache.set("a", 1, 60)
        cache.set("b", 2, 60)
        cache.clear()
        assert len(cache) == 0
        assert cache.get_stats()["evictions"] == 0


class TestHelpers:
    def test_delete(self, cache):
        cache.set("k", 1, 60)
        assert cache.delete("k") is True
        assert cache.delete("k") is False
        assert cache.get("k") is None

    def test_delete_prefix(self, cache):
        cache.set("tags:{\"limit\":5}", [], 60)
        cache.set("tags:{\"limit\":10}", [], 60)
        cache.set("categories", [], 60)
        assert cache.delete_prefix("tags:") == 2
        assert cache.get("categories") == []

    def test_get_or_set_calls_factory_once(self, cache):
        calls = []

        def factory():
            calls.append(1)
            return "computed"

        assert cache.get_or_set("k", factory, 60) == "computed"
        assert cache.get_or_set("k", factory, 60) == "computed"
        assert len(calls) == 1

    def test_stats(self, cache):
        cache.set("jobs:{}", "x", 60)
        cache.get("jobs:{}")
        cache.get("jobs:other")
        cache.get("categories")
        stats = cache.get_stats()
        assert stats["hits"] == 1
        assert stats["misses"] == 2
        assert stats["sets"] == 1
        assert stats["size"] == 1
        assert stats["maxsize"] == 256
        assert stats["hit_rate"] == 33.3
        assert stats["hits_by_prefix"] == {"jobs": 1}
        assert stats["misses_by_prefix"] == {"jobs": 1, "categories": 1}
