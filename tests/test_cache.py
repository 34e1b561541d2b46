from heatcheck.data_sources.cache import TTLCache


def _cache(ttl=60, maxsize=128):
    now = [0.0]
    return TTLCache(ttl_seconds=ttl, maxsize=maxsize, clock=lambda: now[0]), now


def test_fresh_entries_are_served():
    cache, now = _cache()
    cache.set("nba", {"picks": []})
    now[0] = 59
    assert cache.get("nba") == {"picks": []}
    assert "nba" in cache


def test_entries_expire_at_ttl():
    cache, now = _cache()
    cache.set("nba", "board")
    now[0] = 60
    assert cache.get("nba") is None
    assert len(cache) == 0


def test_oldest_entry_is_evicted():
    cache, _ = _cache(maxsize=2)
    cache.set("nba", 1)
    cache.set("mlb", 2)
    cache.get("nba")
    cache.set("nfl", 3)
    assert cache.get("mlb") is None
    assert cache.get("nba") == 1
    assert cache.get("nfl") == 3


def test_invalidate_and_clear():
    cache, _ = _cache()
    cache.set("nba", 1)
    cache.set("mlb", 2)
    cache.invalidate("nba")
    assert cache.get("nba") is None
    cache.clear()
    assert len(cache) == 0
