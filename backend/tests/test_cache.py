from unittest.mock import patch

import utils
from utils import TTLCache


def test_get_returns_value_before_expiry():
    cache = TTLCache(ttl_seconds=60)
    cache.set("a", {"v": 1})
    assert cache.get("a") == {"v": 1}


@patch.object(utils.time, "time")
def test_expired_entries_are_purged_on_write(mock_time):
    cache = TTLCache(ttl_seconds=10)
    mock_time.return_value = 1000.0
    for i in range(200):
        cache.set(f"pos-{i}", {"i": i})
    assert len(cache) == 200

    mock_time.return_value = 1011.0
    cache.set("fresh", {"i": -1})

    assert len(cache) == 1
    assert cache.get("pos-0") is None
    assert cache.get("fresh") == {"i": -1}


@patch.object(utils.time, "time")
def test_get_drops_expired_entry(mock_time):
    cache = TTLCache(ttl_seconds=10)
    mock_time.return_value = 0.0
    cache.set("a", {"v": 1})
    mock_time.return_value = 10.0
    assert cache.get("a") is None
    assert len(cache) == 0


def test_maxsize_evicts_oldest():
    cache = TTLCache(ttl_seconds=60, maxsize=3)
    for key in ["a", "b", "c", "d"]:
        cache.set(key, {"k": key})
    assert len(cache) == 3
    assert cache.get("a") is None
    assert cache.get("d") == {"k": "d"}


def test_rewriting_a_key_does_not_evict_others():
    cache = TTLCache(ttl_seconds=60, maxsize=2)
    cache.set("a", {"v": 1})
    cache.set("b", {"v": 2})
    cache.set("b", {"v": 3})
    assert cache.get("a") == {"v": 1}
    assert cache.get("b") == {"v": 3}
