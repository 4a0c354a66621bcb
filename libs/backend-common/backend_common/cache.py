"""Read-through JSON cache on top of an optional async Redis client.

A missing client or any Redis failure turns every call into a no-op, so the
relational store stays the source of truth.
"""

from __future__ import annotations

import json
from collections.abc import Awaitable, Callable, Iterable
from dataclasses import dataclass
from typing import Any, TypeVar

import structlog

logger = structlog.get_logger(__name__)

T = TypeVar("T")


@dataclass
class CacheMetrics:
    """Optional prometheus counters for cache outcomes."""

    hits: Any = None
    misses: Any = None
    errors: Any = None

    @staticmethod
    def _inc(counter: Any) -> None:
        if counter is not None:
            counter.inc()

    def hit(self) -> None:
        self._inc(self.hits)

    def miss(self) -> None:
        self._inc(self.misses)

    def error(self) -> None:
        self._inc(self.errors)


class CacheHelper:
    def __init__(
        self,
        get_redis: Callable[[], Awaitable[Any]],
        metrics: CacheMetrics | None = None,
        default_ttl: int = 300,
    ):
        self._get_redis = get_redis
        self._metrics = metrics or CacheMetrics()
        self._default_ttl = default_ttl

    async def get(self, key: str) -> Any | None:
        redis = await self._get_redis()
        if redis is None:
            return None
        try:
            raw = await redis.get(key)
        except Exception:
            self._metrics.error()
            logger.warning("cache_get_failed", key=key, exc_info=True)
            return None
        if raw is None:
            self._metrics.miss()
            return None
        self._metrics.hit()
        return json.loads(raw)

    async def set(self, key: str, value: Any, ttl: int | None = None) -> None:
        redis = await self._get_redis()
        if redis is None:
            return
        try:
            await redis.set(key, json.dumps(value, default=str), ex=ttl or self._default_ttl)
        except Exception:
            self._metrics.error()
            logger.warning("cache_set_failed", key=key, exc_info=True)

    async def get_or_load(
        self,
        key: str,
        load: Callable[[], Awaitable[T]],
        *,
        dump: Callable[[T], Any],
        restore: Callable[[Any], T],
        ttl: int | None = None,
    ) -> T:
        """Return the cached value for ``key`` or call ``load`` and cache its dumped form."""
        cached = await self.get(key)
        if cached is not None:
            return restore(cached)
        value = await load()
        await self.set(key, dump(value), ttl=ttl)
        return value

    async def invalidate(self, keys: Iterable[str]) -> None:
        keys = [key for key in keys if key]
        redis = await self._get_redis()
        if redis is None or not keys:
            return
        try:
            await redis.delete(*keys)
        except Exception:
            self._metrics.error()
            logger.warning("cache_invalidate_failed", keys=keys, exc_info=True)
