from datetime import timedelta

import pytest
from freezegun import freeze_time

from ocirex.cache import Cache, CacheType, PruneStats
from ocirex.config import CacheTtl, Config
from ocirex.errors import ValidationError


def make_cache(path, ttl=None, capacity=100):
    return Cache(path, ttl if ttl is not None else Config().cache.ttl, capacity)


def test_cache_new(tmp_path):
    config = Config()
    cache = Cache(tmp_path, config.cache.ttl, 100)
    assert cache.memory_capacity == 100
    assert cache.disk_path == tmp_path
    assert cache.ttl_config == config.cache.ttl


def test_cache_new_rejects_zero_capacity(tmp_path):
    with pytest.raises(ValueError):
        Cache(tmp_path, CacheTtl(), 0)


def test_cache_l1_get_and_set(tmp_path):
    cache = make_cache(tmp_path)
    assert cache.get("my-key") is None
    cache.set("my-key", "my-data", CacheType.TAGS)
    assert cache.get("my-key") == "my-data"


def test_cache_l2_disk_hit(tmp_path):
    make_cache(tmp_path).set("my-key", "my-data-on-disk", CacheType.TAGS)

    fresh = make_cache(tmp_path)
    assert fresh.get("my-key") == "my-data-on-disk"

    # The disk hit populated memory, so the value survives removal of the file.
    (tmp_path / "my-key").unlink()
    assert fresh.get("my-key") == "my-data-on-disk"


def test_cache_l2_disk_expired(tmp_path):
    ttl = CacheTtl(tags=1)
    with freeze_time("2024-01-01 00:00:00") as frozen:
        make_cache(tmp_path, ttl).set("my-key", "my-expired-data", CacheType.TAGS)
        frozen.tick(delta=timedelta(seconds=2))
        fresh = make_cache(tmp_path, ttl)
        assert fresh.get("my-key") is None
    assert not (tmp_path / "my-key").exists()


def test_cache_l1_expired(tmp_path):
    ttl = CacheTtl(tags=1)
    with freeze_time("2024-01-01 00:00:00") as frozen:
        cache = make_cache(tmp_path, ttl)
        cache.set("my-key", "value", CacheType.TAGS)
        frozen.tick(delta=timedelta(seconds=2))
        assert cache.get("my-key") is None


def test_cache_prune(tmp_path):
    ttl = CacheTtl(tags=1, catalog=3600)
    with freeze_time("2024-01-01 00:00:00") as frozen:
        cache = make_cache(tmp_path, ttl)
        cache.set("expired-key", "expired-data", CacheType.TAGS)
        cache.set("valid-key", "valid-data", CacheType.CATALOG)
        frozen.tick(delta=timedelta(seconds=2))
        stats = cache.prune()

    assert not (tmp_path / "expired-key").exists()
    assert (tmp_path / "valid-key").exists()
    assert stats.removed_files == 1
    assert stats.reclaimed_space > 0


def test_prune_missing_directory(tmp_path):
    cache = make_cache(tmp_path / "absent")
    assert cache.prune() == PruneStats(0, 0)


def test_nested_key_round_trip(tmp_path):
    cache = make_cache(tmp_path)
    value = {"repositories": ["alpine", "nginx"]}
    cache.set("catalog/registry", value, CacheType.CATALOG)
    assert (tmp_path / "catalog" / "registry").is_file()
    assert make_cache(tmp_path).get("catalog/registry") == value


@pytest.mark.parametrize("key", ["../escape", "/absolute", "a/../b"])
def test_invalid_keys_rejected(tmp_path, key):
    cache = make_cache(tmp_path)
    with pytest.raises(ValidationError):
        cache.set(key, "data", CacheType.TAGS)
    with pytest.raises(ValidationError):
        cache.get(key)


def test_unserializable_data_rejected(tmp_path):
    cache = make_cache(tmp_path)
    with pytest.raises(ValidationError):
        cache.set("key", object(), CacheType.TAGS)


def test_corrupt_disk_entry(tmp_path):
    (tmp_path / "bad").write_bytes(b"not json")
    with pytest.raises(ValidationError):
        make_cache(tmp_path).get("bad")


def test_memory_eviction_keeps_capacity(tmp_path):
    cache = make_cache(tmp_path, capacity=1)
    cache.set("first", 1, CacheType.TAGS)
    cache.set("second", 2, CacheType.TAGS)
    (tmp_path / "first").unlink()
    (tmp_path / "second").unlink()
    assert cache.get("first") is None
    assert cache.get("second") == 2