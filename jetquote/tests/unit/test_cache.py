import pytest
from jetquote.core.cache import TTLCache


class FakeClock:
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, seconds):
        self.now += seconds


@pytest.mark.unit
class TestTTLCache:

    def test_get_missing_key(self):
        cache = TTLCache(60, clock=FakeClock())
        assert cache.get("milano") is None

    def test_put_then_get(self):
        cache = TTLCache(60, clock=FakeClock())
        cache.put(("milano", None), "LIML")
        assert cache.get(("milano", None)) == "LIML"
        assert len(cache) == 1

    def test_entry_fresh_before_ttl(self):
        clock = FakeClock()
        cache = TTLCache(3600, clock=clock)
        cache.put("nice", "LFMN")
        clock.advance(3599)
        assert cache.get("nice") == "LFMN"

    def test_entry_expires_at_ttl(self):
        clock = FakeClock()
        cache = TTLCache(3600, clock=clock)
        cache.put("nice", "LFMN")
        clock.advance(3600)
        assert cache.get("nice") is None
        # expired entries are dropped on read
        assert len(cache) == 0

    def test_put_refreshes_timestamp(self):
        clock = FakeClock()
        cache = TTLCache(10, clock=clock)
        cache.put("k", 1)
        clock.advance(8)
        cache.put("k", 2)
        clock.advance(8)
        assert cache.get("k") == 2

    def test_clear(self):
        cache = TTLCache(10, clock=FakeClock())
        cache.put("a", 1)
        cache.put("b", 2)
        cache.clear()
        assert len(cache) == 0
        assert cache.get("a") is None

    def test_put_sweeps_expired_entries(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        for i in range(10000):
            cache.put(f"town {i}", i)
        clock.advance(60)
        cache.put("milano", "LIML")
        assert len(cache) == 1
        assert cache.get("milano") == "LIML"

    def test_sweep_keeps_fresh_entries(self):
        clock = FakeClock()
        cache = TTLCache(60, clock=clock)
        cache.put("old", 1)
        clock.advance(30)
        cache.put("recent", 2)
        clock.advance(30)
        cache.put("new", 3)
        assert len(cache) == 2
        assert cache.get("old") is None
        assert cache.get("recent") == 2

    def test_full_cache_evicts_oldest(self):
        cache = TTLCache(3600, maxsize=3, clock=FakeClock())
        for key in ["a", "b", "c", "d"]:
            cache.put(key, key.upper())
        assert len(cache) == 3
        assert cache.get("a") is None
        assert cache.get("d") == "D"

    def test_rewrite_moves_key_to_newest(self):
        cache = TTLCache(3600, maxsize=2, clock=FakeClock())
        cache.put("a", 1)
        cache.put("b", 2)
        cache.put("a", 3)
        cache.put("c", 4)
        assert cache.get("b") is None
        assert cache.get("a") == 3

    @pytest.mark.parametrize("ttl", [0, -1])
    def test_rejects_non_positive_ttl(self, ttl):
        with pytest.raises(ValueError):
            TTLCache(ttl)

    def test_rejects_non_positive_maxsize(self):
        with pytest.raises(ValueError):
            TTLCache(60, maxsize=0)
