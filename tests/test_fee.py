import threading

import pytest

from ethbridge.fee import FeeHistory, FeeHistoryCache, FeeHistoryCacheItem
from ethbridge.hexdata import format_quantity


def test_fee_history_json():
    history = FeeHistory(
        oldest_block=5, base_fee_per_gas=[1, 2], gas_used_ratio=[0.5], reward=[[3, 4]]
    )
    out = history.to_json()
    assert out["oldestBlock"] == format_quantity(5)
    assert out["baseFeePerGas"] == [format_quantity(1), format_quantity(2)]
    assert out["gasUsedRatio"] == [0.5]
    assert out["reward"] == [[format_quantity(3), format_quantity(4)]]


def test_fee_history_without_reward():
    assert FeeHistory().to_json()["reward"] is None


def test_cache_insert_and_get():
    cache = FeeHistoryCache(4)
    item = FeeHistoryCacheItem(base_fee=10, gas_used_ratio=0.25, rewards=[1])
    cache.insert(1, item)
    assert cache.get(1) == item
    assert cache.get(2) is None
    assert 1 in cache


def test_cache_evicts_oldest_blocks():
    cache = FeeHistoryCache(2)
    for number in (3, 1, 2):
        cache.insert(number, FeeHistoryCacheItem(number, 0.0))
    assert len(cache) == 2
    assert cache.get(1) is None
    assert cache.get(3).base_fee == 3
    assert cache.get(2).base_fee == 2


def test_cache_replaces_existing_block():
    cache = FeeHistoryCache(1)
    cache.insert(1, FeeHistoryCacheItem(1, 0.0))
    cache.insert(1, FeeHistoryCacheItem(2, 0.0))
    assert len(cache) == 1
    assert cache.get(1).base_fee == 2


def test_zero_limit_keeps_nothing():
    cache = FeeHistoryCache(0)
    cache.insert(1, FeeHistoryCacheItem(1, 0.0))
    assert len(cache) == 0


def test_negative_limit_rejected():
    with pytest.raises(ValueError):
        FeeHistoryCache(-1)


def test_concurrent_inserts_respect_limit():
    cache = FeeHistoryCache(10)

    def fill(start):
        for number in range(start, start + 100):
            cache.insert(number, FeeHistoryCacheItem(number, 0.0))

    threads = [threading.Thread(target=fill, args=(i * 100,)) for i in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()
    assert len(cache) == 10
    assert cache.get(399).base_fee == 399