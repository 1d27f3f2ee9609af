"""Unit tests: explorer_core.query_cache (freshness windows, invalidation, dedup, gc)."""
import threading

import pytest

from explorer_core.query_cache import (
    QueryCache,
    category_keys_list,
    location_keys_detail,
    location_keys_list,
    product_keys_list,
)

pytestmark = pytest.mark.unit


class FakeClock:
    def __init__(self) -> None:
        self.now = 0.0

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def cache(clock):
    return QueryCache(stale_time=300, gc_time=600, clock=clock)


class CountingLoader:
    def __init__(self, value="v") -> None:
        self.calls = 0
        self.value = value

    def __call__(self):
        self.calls += 1
        return f"{self.value}{self.calls}"


def test_key_helpers_share_prefixes():
    assert location_keys_list() == ("locations", "list")
    assert location_keys_detail("loc-1") == ("locations", "detail", "loc-1")
    assert category_keys_list()[0] == "categories"
    assert product_keys_list()[0] == "products"


def test_fetch_serves_fresh_value_without_reloading(cache, clock):
    loader = CountingLoader()
    assert cache.fetch(("locations", "list"), loader) == "v1"
    clock.advance(299)
    assert cache.fetch(("locations", "list"), loader) == "v1"
    assert loader.calls == 1


def test_fetch_reloads_after_stale_time(cache, clock):
    loader = CountingLoader()
    cache.fetch(("locations", "list"), loader)
    clock.advance(300)
    assert cache.fetch(("locations", "list"), loader) == "v2"


def test_per_call_stale_time(cache, clock):
    loader = CountingLoader()
    cache.fetch(("locations", "list", "search", "cafe"), loader, stale_time=60)
    clock.advance(61)
    cache.fetch(("locations", "list", "search", "cafe"), loader, stale_time=60)
    assert loader.calls == 2


def test_invalidate_by_prefix_marks_only_matching(cache):
    cache.fetch(("locations", "list"), CountingLoader())
    cache.fetch(("locations", "detail", "loc-1"), CountingLoader())
    cache.fetch(("categories", "list"), CountingLoader())
    assert cache.invalidate(("locations",)) == 2
    assert not cache.is_fresh(("locations", "list"))
    assert not cache.is_fresh(("locations", "detail", "loc-1"))
    assert cache.is_fresh(("categories", "list"))


def test_stale_value_still_readable_until_refetched(cache):
    loader = CountingLoader()
    cache.fetch(("products", "list"), loader)
    cache.invalidate(("products",))
    assert cache.get(("products", "list")) == "v1"
    assert cache.fetch(("products", "list"), loader) == "v2"


def test_set_primes_fresh_entry(cache):
    cache.set(("locations", "detail", "loc-9"), "primed")
    loader = CountingLoader()
    assert cache.fetch(("locations", "detail", "loc-9"), loader) == "primed"
    assert loader.calls == 0


def test_remove(cache):
    cache.set(("locations", "detail", "loc-1"), "x")
    assert cache.remove(("locations", "detail", "loc-1")) is True
    assert cache.remove(("locations", "detail", "loc-1")) is False
    assert cache.get(("locations", "detail", "loc-1")) is None


def test_unread_entries_are_collected_after_gc_time(cache, clock):
    cache.fetch(("categories", "list"), CountingLoader())
    clock.advance(600)
    cache.fetch(("products", "list"), CountingLoader())
    assert cache.get(("categories", "list")) is None
    assert len(cache) == 1


def test_reads_keep_entry_alive(cache, clock):
    cache.fetch(("categories", "list"), CountingLoader(), stale_time=10_000)
    for _ in range(3):
        clock.advance(400)
        cache.fetch(("categories", "list"), CountingLoader(), stale_time=10_000)
    assert cache.get(("categories", "list")) == "v1"


def test_concurrent_fetches_load_once():
    """Callers waiting on the same key share one load."""
    cache = QueryCache()
    started = threading.Event()
    release = threading.Event()
    calls = []

    def slow_loader():
        calls.append(1)
        started.set()
        release.wait(timeout=5)
        return "loaded"

    results = []
    threads = [threading.Thread(target=lambda: results.append(cache.fetch(("k",), slow_loader))) for _ in range(4)]
    threads[0].start()
    started.wait(timeout=5)
    for t in threads[1:]:
        t.start()
    release.set()
    for t in threads:
        t.join(timeout=5)
    assert results == ["loaded"] * 4
    assert len(calls) == 1


def test_in_flight_load_is_not_cancelled_by_invalidate():
    """A load that began before invalidate still stores its (older) result."""
    cache = QueryCache()

    def loader():
        cache.invalidate(("locations",))
        return "old snapshot"

    assert cache.fetch(("locations", "list"), loader) == "old snapshot"
    assert cache.get(("locations", "list")) == "old snapshot"


def test_clear(cache):
    cache.set(("a",), 1)
    cache.set(("b",), 2)
    cache.clear()
    assert len(cache) == 0


def test_key_locks_do_not_outlive_loads(cache, clock):
    """Per-key locks exist only while a load for that key is in flight."""
    for i in range(50):
        cache.fetch(("locations", "detail", f"loc-{i}"), CountingLoader())
        clock.advance(700)
    assert cache._key_locks == {}
    assert cache._key_users == {}
    assert len(cache) == 1


def test_failed_load_releases_key_lock(cache):
    def broken_loader():
        raise RuntimeError("database unavailable")

    with pytest.raises(RuntimeError):
        cache.fetch(("products", "list"), broken_loader)
    assert cache._key_locks == {}
    assert cache.fetch(("products", "list"), CountingLoader()) == "v1"


def test_concurrent_fetches_release_key_lock():
    cache = QueryCache()
    release = threading.Event()

    def slow_loader():
        release.wait(timeout=5)
        return "loaded"

    threads = [threading.Thread(target=cache.fetch, args=(("k",), slow_loader)) for _ in range(4)]
    for t in threads:
        t.start()
    release.set()
    for t in threads:
        t.join(timeout=5)
    assert cache.get(("k",)) == "loaded"
    assert cache._key_locks == {}
    assert cache._key_users == {}
