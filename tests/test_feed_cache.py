"""Tests for the expiring, quota-aware feed cache."""

import json
import time

import pytest

from feedfuse.cache import FeedCache, FileStore, MemoryStore, OldestFractionEviction
from feedfuse.errors import StorageQuotaError


def test_set_then_get(make_cache):
    cache = make_cache()
    cache.set("https://a.example.com/feed", {"title": "A"})
    assert cache.get("https://a.example.com/feed") == {"title": "A"}
    assert cache.has("https://a.example.com/feed")


def test_missing_key_is_absent(make_cache):
    assert make_cache().get("nope") is None


def test_entry_expires_after_ttl(make_cache, clock):
    cache = make_cache()
    cache.set("k", "v", ttl=0.1)

    clock.advance(0.05)
    assert cache.get("k") == "v"

    clock.advance(0.1)
    assert cache.get("k") is None
    # lazily evicted, not just hidden
    assert cache.stats().total_items == 0


def test_entry_expires_in_real_time(store):
    cache = FeedCache("realtime", store)
    cache.set("k", "v", ttl=0.1)
    assert cache.get("k") == "v"
    time.sleep(0.15)
    assert cache.get("k") is None


def test_default_ttl_applies(make_cache, clock):
    cache = make_cache(default_ttl=60)
    cache.set("k", "v")
    clock.advance(59)
    assert cache.get("k") == "v"
    clock.advance(2)
    assert cache.get("k") is None


def test_expired_entry_reads_like_never_set(make_cache, clock):
    cache = make_cache()
    cache.set("k", "v", ttl=1)
    clock.advance(5)
    assert cache.get("k") == cache.get("never-set") is None
    assert not cache.has("k")


def test_stats_counts_expired_and_valid(make_cache, clock):
    cache = make_cache()
    cache.set("short", 1, ttl=1)
    cache.set("long", 2, ttl=100)
    clock.advance(10)

    stats = cache.stats()
    assert stats.total_items == 2
    assert stats.expired_items == 1
    assert stats.valid_items == 1


def test_purge_expired(make_cache, clock):
    cache = make_cache()
    cache.set("a", 1, ttl=1)
    cache.set("b", 2, ttl=1)
    cache.set("c", 3, ttl=100)
    clock.advance(10)

    assert cache.purge_expired() == 2
    assert cache.stats().total_items == 1


def test_delete_and_clear(make_cache):
    cache = make_cache()
    cache.set("a", 1)
    cache.set("b", 2)

    cache.delete("a")
    cache.delete("does-not-exist")
    assert cache.get("a") is None
    assert cache.get("b") == 2

    cache.clear()
    assert cache.stats().total_items == 0


def test_namespaces_are_independent(store, clock):
    feeds = FeedCache("feeds", store, clock=clock)
    merged = FeedCache("merged", store, clock=clock)
    feeds.set("k", "feed")
    merged.set("k", "merged")

    feeds.clear()
    assert feeds.get("k") is None
    assert merged.get("k") == "merged"


def test_persisted_layout(make_cache, store, clock):
    cache = make_cache("layout")
    cache.set("k", {"x": 1}, ttl=30)

    blob = json.loads(store.get_item("layout"))
    assert blob == {"k": {"value": {"x": 1}, "stored_at": clock.now, "ttl": 30.0}}


@pytest.mark.parametrize("blob", ["{not json", "[1, 2, 3]", '"string"'])
def test_corrupt_blob_reads_as_empty(make_cache, store, blob):
    store.set_item("corrupt", blob)
    cache = make_cache("corrupt")

    assert cache.get("anything") is None
    assert cache.stats().total_items == 0

    cache.set("k", "v")
    assert cache.get("k") == "v"


def test_malformed_records_are_dropped(make_cache, store, clock):
    store.set_item(
        "partial",
        json.dumps({"good": {"value": 1, "stored_at": clock.now, "ttl": 60}, "bad": {"value": 2}}),
    )
    cache = make_cache("partial")
    assert cache.get("good") == 1
    assert cache.stats().total_items == 1


def test_overflow_evicts_oldest_entries(make_cache, clock):
    cache = make_cache("bounded", max_bytes=2000)
    payload = "x" * 60

    counts = []
    for i in range(60):
        cache.set(f"key-{i:02d}", payload)
        clock.advance(1)
        counts.append(cache.stats().total_items)

    drops = [i for i in range(1, len(counts)) if counts[i] < counts[i - 1]]
    assert drops, "cache never evicted"
    assert max(counts) < 60

    first_drop = drops[0]
    assert counts[first_drop] < counts[first_drop - 1]
    # the newest key survives, the very first one is gone
    assert cache.get("key-59") == payload
    assert cache.get("key-00") is None


def test_store_quota_triggers_eviction(store, clock):
    quota_store = MemoryStore(quota_bytes=1500)
    cache = FeedCache("quota", quota_store, clock=clock)
    for i in range(40):
        cache.set(f"k{i}", "y" * 50)
        clock.advance(1)

    assert 0 < cache.stats().total_items < 40
    assert cache.get("k39") == "y" * 50


def test_single_oversized_value_clears_namespace(make_cache):
    cache = make_cache("tiny", max_bytes=1024)
    cache.set("small", "ok")
    cache.set("huge", "z" * 5000)

    assert cache.get("huge") is None
    assert cache.stats().total_items == 0


def test_oldest_fraction_eviction_policy(clock):
    from feedfuse.models import CacheEntry

    entries = {
        f"k{i}": CacheEntry(value=i, stored_at=100.0 + (7 - i), ttl=10)
        for i in range(8)
    }
    assert OldestFractionEviction(0.25).select(entries) == ["k7", "k6"]
    assert OldestFractionEviction(0.25).select({"only": entries["k0"]}) == ["only"]
    assert OldestFractionEviction(0.25).select({}) == []
    with pytest.raises(ValueError):
        OldestFractionEviction(0)


def test_memory_store_quota():
    store = MemoryStore(quota_bytes=10)
    store.set_item("a", "12345")
    with pytest.raises(StorageQuotaError):
        store.set_item("b", "123456")
    store.set_item("a", "1234567890")
    store.remove_item("a")
    assert store.get_item("a") is None


def test_file_store_roundtrip(tmp_path, clock):
    store = FileStore(tmp_path / "cache")
    cache = FeedCache("feedfuse-feeds-cache", store, clock=clock)
    cache.set("https://a.example.com/feed?x=1", {"title": "A"})

    reopened = FeedCache("feedfuse-feeds-cache", FileStore(tmp_path / "cache"), clock=clock)
    assert reopened.get("https://a.example.com/feed?x=1") == {"title": "A"}
    assert (tmp_path / "cache" / "feedfuse-feeds-cache.json").exists()

    reopened.clear()
    assert not (tmp_path / "cache" / "feedfuse-feeds-cache.json").exists()


def test_file_store_quota_and_corruption(tmp_path, clock):
    store = FileStore(tmp_path, quota_bytes=10)
    with pytest.raises(StorageQuotaError):
        store.set_item("k", "x" * 11)

    (tmp_path / "broken.json").write_bytes(b"\xff\xfe garbage")
    cache = FeedCache("broken", FileStore(tmp_path), clock=clock)
    assert cache.get("k") is None


@pytest.mark.parametrize("existing", [1, 2, 3, 5])
def test_overflowing_new_key_shrinks_small_namespace(make_cache, clock, existing):
    cache = make_cache("small", max_bytes=100_000)
    for i in range(existing):
        cache.set(f"k{i}", "v" * 100)
        clock.advance(1)
    before = cache.stats().total_items

    cache.max_bytes = len(cache.store.get_item("small").encode("utf-8")) + 10
    cache.set("new", "v" * 100)

    assert cache.stats().total_items < before


def test_overflowing_replacement_evicts_one(make_cache, clock):
    cache = make_cache("replace", max_bytes=100_000)
    for i in range(3):
        cache.set(f"k{i}", "v" * 100)
        clock.advance(1)

    cache.max_bytes = len(cache.store.get_item("replace").encode("utf-8")) + 10
    cache.set("k2", "v" * 150)

    assert cache.stats().total_items == 2
    assert cache.get("k0") is None
    assert cache.get("k2") == "v" * 150


class BrokenStore(MemoryStore):
    """Store on an unreadable, read-only directory."""

    def get_item(self, key):
        raise PermissionError("permission denied")

    def set_item(self, key, value):
        raise PermissionError("read-only file system")

    def remove_item(self, key):
        raise PermissionError("read-only file system")


def test_store_io_errors_are_not_raised(clock):
    cache = FeedCache("broken", BrokenStore(), clock=clock)

    cache.set("k", "v")
    assert cache.get("k") is None
    cache.delete("k")
    cache.clear()
    assert cache.stats().total_items == 0


def test_policy_honours_minimum(clock):
    from feedfuse.models import CacheEntry

    entries = {f"k{i}": CacheEntry(value=i, stored_at=100.0 + i, ttl=10) for i in range(3)}
    assert OldestFractionEviction(0.25).select(entries, at_least=2) == ["k0", "k1"]
    assert OldestFractionEviction(0.25).select(entries, at_least=5) == ["k0", "k1", "k2"]
