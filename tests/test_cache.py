import pytest
from concurrent.futures import ThreadPoolExecutor

from metafs.client.cache import CacheEntry, DirectoryListCache
from metafs.client.config import MAX_AGE_MILLIS, CacheConfig
from metafs.client.types import ItemInfo, ResourceId

class FakeClock:
    """Manually advanced clock, in seconds."""
    def __init__(self, now=1000.0):
        self.now = now

    def __call__(self):
        return self.now

def _put(cache, bucket, name, size=1):
    resource_id = ResourceId(bucket, name)
    info = ItemInfo(resource_id, creation_time=1, size=size)
    cache.put_resource_id(resource_id).set_item_info(info)
    return info

def _names(entries):
    return [entry.resource_id.object_name for entry in entries]

@pytest.fixture
def cache():
    cache = DirectoryListCache()
    for name in ["a/b/c", "a/b/d", "a/x", "ab", "z"]:
        _put(cache, "B", name)
    return cache

def test_put_resource_id_is_get_or_create():
    cache = DirectoryListCache()
    resource_id = ResourceId("B", "a")
    entry = cache.put_resource_id(resource_id)
    assert entry.item_info is None
    assert cache.put_resource_id(resource_id) is entry
    assert cache.get_cache_entry(resource_id) is entry
    assert len(cache) == 1

def test_put_root_is_rejected():
    with pytest.raises(ValueError):
        DirectoryListCache().put_resource_id(ResourceId(None))

def test_get_cache_entry_missing():
    cache = DirectoryListCache()
    assert cache.get_cache_entry(ResourceId("B", "a")) is None
    _put(cache, "B", "a")
    assert cache.get_cache_entry(ResourceId("B", "b")) is None
    assert cache.get_cache_entry(ResourceId(None)) is None
    # The bucket is known through its objects but has no entry of its own
    assert cache.get_cache_entry(ResourceId("B")) is None

def test_bucket_entry():
    cache = DirectoryListCache()
    bucket_info = ItemInfo(ResourceId("B"), creation_time=1, size=0)
    cache.put_resource_id(ResourceId("B")).set_item_info(bucket_info)
    assert cache.get_cache_entry(ResourceId("B")).item_info == bucket_info
    assert cache.get_object_list("B", "", "/", []) == []

def test_set_item_info_checks_resource_id():
    entry = CacheEntry(ResourceId("B", "a"))
    with pytest.raises(ValueError):
        entry.set_item_info(ItemInfo(ResourceId("B", "other"), creation_time=0, size=0))

def test_set_item_info_returns_previous():
    entry = CacheEntry(ResourceId("B", "a"))
    first = ItemInfo(ResourceId("B", "a"), creation_time=1, size=1)
    second = ItemInfo(ResourceId("B", "a"), creation_time=2, size=2)
    assert entry.set_item_info(first) is None
    assert entry.set_item_info(second) is first
    assert entry.item_info is second

def test_set_item_info_if_absent_keeps_existing():
    entry = CacheEntry(ResourceId("B", "a/"))
    real = ItemInfo(ResourceId("B", "a/"), creation_time=7, size=0)
    fake = ItemInfo.for_implicit_directory(ResourceId("B", "a/"))
    assert entry.set_item_info_if_absent(real) is real
    assert entry.set_item_info_if_absent(fake) is real
    entry.clear_item_info()
    assert entry.item_info is None
    assert entry.set_item_info_if_absent(fake) is fake

def test_unknown_bucket_returns_none(cache):
    prefixes = []
    assert cache.get_object_list("nope", "", "/", prefixes) is None
    assert prefixes == []

def test_known_bucket_without_matches_returns_empty(cache):
    assert cache.get_object_list("B", "q/", "/", []) == []

def test_delimiter_grouping(cache):
    prefixes = []
    entries = cache.get_object_list("B", "a/", "/", prefixes)
    assert _names(entries) == ["a/x"]
    assert prefixes == ["a/b/"]

def test_no_delimiter_lists_everything_under_prefix(cache):
    prefixes = []
    entries = cache.get_object_list("B", "a", None, prefixes)
    assert _names(entries) == ["a/b/c", "a/b/d", "a/x", "ab"]
    assert prefixes == []
    assert _names(cache.get_object_list("B", "a", "", prefixes)) == _names(entries)

def test_root_listing_groups_top_level(cache):
    prefixes = []
    entries = cache.get_object_list("B", None, "/", prefixes)
    assert _names(entries) == ["ab", "z"]
    assert prefixes == ["a/"]

def test_prefix_object_itself_is_listed():
    cache = DirectoryListCache()
    _put(cache, "B", "dir/")
    _put(cache, "B", "dir/file")
    prefixes = []
    assert _names(cache.get_object_list("B", "dir/", "/", prefixes)) == ["dir/", "dir/file"]
    assert prefixes == []

def test_multi_character_delimiter():
    cache = DirectoryListCache()
    _put(cache, "B", "x::y::z")
    _put(cache, "B", "x::w")
    prefixes = []
    assert _names(cache.get_object_list("B", "x::", "::", prefixes)) == ["x::w"]
    assert prefixes == ["x::y::"]

def test_prefixes_accumulator_is_not_duplicated(cache):
    prefixes = ["a/b/"]
    cache.get_object_list("B", "a/", "/", prefixes)
    assert prefixes == ["a/b/"]

def test_default_config_never_expires():
    config = DirectoryListCache().mutable_config
    assert config.max_entry_age_millis == MAX_AGE_MILLIS
    assert config.max_info_age_millis == MAX_AGE_MILLIS

def test_entries_expire():
    clock = FakeClock()
    cache = DirectoryListCache(CacheConfig(max_entry_age_millis=1000), clock=clock)
    _put(cache, "B", "old")
    clock.now += 0.5
    _put(cache, "B", "new")
    clock.now += 0.7

    assert cache.get_cache_entry(ResourceId("B", "old")) is None
    assert cache.get_cache_entry(ResourceId("B", "new")) is not None
    assert _names(cache.get_object_list("B", "", "/", [])) == ["new"]

    entry = cache.put_resource_id(ResourceId("B", "old"))
    assert entry.item_info is None, "Expired entries are recreated empty"

def test_stale_info_is_cleared():
    clock = FakeClock()
    cache = DirectoryListCache(clock=clock)
    cache.mutable_config.max_info_age_millis = 100
    _put(cache, "B", "a")
    clock.now += 0.2

    entry = cache.get_cache_entry(ResourceId("B", "a"))
    assert entry is not None
    assert entry.item_info is None
    assert entry.item_info_update_time == 0

def test_concurrent_put_returns_one_entry():
    cache = DirectoryListCache()
    resource_id = ResourceId("B", "shared/")
    with ThreadPoolExecutor(max_workers=16) as executor:
        entries = list(executor.map(lambda _: cache.put_resource_id(resource_id), range(200)))
    assert all(entry is entries[0] for entry in entries)
    assert len(cache) == 1

def test_prefix_range_excludes_neighbours():
    cache = DirectoryListCache()
    for name in ["a", "a!", "a/x", "a/y/z", "a0", "b/a/x"]:
        _put(cache, "B", name)
    prefixes = []
    assert _names(cache.get_object_list("B", "a/", "/", prefixes)) == ["a/x"]
    assert prefixes == ["a/y/"]

def test_listing_stays_sorted_after_expiry_and_reinsert():
    clock = FakeClock()
    cache = DirectoryListCache(CacheConfig(max_entry_age_millis=1000), clock=clock)
    _put(cache, "B", "m")
    clock.now += 0.6
    _put(cache, "B", "z")
    _put(cache, "B", "a")
    clock.now += 0.6

    assert cache.get_cache_entry(ResourceId("B", "m")) is None
    assert _names(cache.get_object_list("B", "", None, [])) == ["a", "z"]

    _put(cache, "B", "m")
    _put(cache, "B", "m")
    assert _names(cache.get_object_list("B", "", None, [])) == ["a", "m", "z"]
    assert len(cache) == 3
