import asyncio

from backend_common.cache import CacheHelper, CacheMetrics


class FakeRedis:
    def __init__(self, fail: bool = False):
        self.store: dict[str, str] = {}
        self.fail = fail

    async def get(self, key):
        if self.fail:
            raise ConnectionError("redis down")
        return self.store.get(key)

    async def set(self, key, value, ex=None):
        if self.fail:
            raise ConnectionError("redis down")
        self.store[key] = value

    async def delete(self, *keys):
        for key in keys:
            self.store.pop(key, None)


class Counter:
    def __init__(self):
        self.value = 0

    def inc(self):
        self.value += 1


def _helper(redis):
    async def get_redis():
        return redis

    metrics = CacheMetrics(hits=Counter(), misses=Counter(), errors=Counter())
    return CacheHelper(get_redis, metrics), metrics


def _load_counting(calls: list):
    async def load():
        calls.append(1)
        return {"names": ["Pull Up"]}

    return load


def test_get_or_load_caches_loaded_value():
    redis = FakeRedis()
    cache, metrics = _helper(redis)
    calls: list = []

    async def scenario():
        first = await cache.get_or_load("k", _load_counting(calls), dump=dict, restore=dict)
        second = await cache.get_or_load("k", _load_counting(calls), dump=dict, restore=dict)
        return first, second

    first, second = asyncio.run(scenario())
    assert first == second == {"names": ["Pull Up"]}
    assert len(calls) == 1
    assert metrics.misses.value == 1
    assert metrics.hits.value == 1


def test_invalidate_forces_reload():
    redis = FakeRedis()
    cache, _ = _helper(redis)
    calls: list = []

    async def scenario():
        await cache.get_or_load("k", _load_counting(calls), dump=dict, restore=dict)
        await cache.invalidate(["k", ""])
        await cache.get_or_load("k", _load_counting(calls), dump=dict, restore=dict)

    asyncio.run(scenario())
    assert len(calls) == 2


def test_redis_failures_fall_back_to_loader():
    cache, metrics = _helper(FakeRedis(fail=True))
    calls: list = []

    value = asyncio.run(cache.get_or_load("k", _load_counting(calls), dump=dict, restore=dict))
    assert value == {"names": ["Pull Up"]}
    assert metrics.errors.value == 2


def test_missing_client_is_a_no_op():
    cache, metrics = _helper(None)
    calls: list = []

    asyncio.run(cache.get_or_load("k", _load_counting(calls), dump=dict, restore=dict))
    asyncio.run(cache.invalidate(["k"]))
    assert len(calls) == 1
    assert metrics.misses.value == 0
