"""Ranked key-value store abstractions.

The scoring engine only needs sorted-set primitives plus an atomic
set-if-absent with expiry. Redis provides all of them natively.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import redis.asyncio as redis
from redis.exceptions import RedisError

LOGGER = logging.getLogger(__name__)


class StoreError(RuntimeError):
    """Raised when the ranked store cannot be reached or rejects a call."""


class RankedStore(ABC):
    """Sorted-set store interface (scores are returned as ints)."""

    @abstractmethod
    async def zincrby(self, key: str, delta: int, member: str) -> int:
        """Add delta to member's score, creating the member if absent."""

    @abstractmethod
    async def zscore(self, key: str, member: str) -> Optional[int]:
        """Return member's score or None when the member is absent."""

    @abstractmethod
    async def zrevrank(self, key: str, member: str) -> Optional[int]:
        """Return the 0-based rank of member, highest score first."""

    @abstractmethod
    async def zcard(self, key: str) -> int:
        """Return the number of members stored under key."""

    @abstractmethod
    async def zrangebyscore_first(self, key: str, min_score: int) -> Optional[tuple[str, int]]:
        """Return the lowest (member, score) with score >= min_score."""

    @abstractmethod
    async def zrevrange(self, key: str, start: int, stop: int) -> list[tuple[str, int]]:
        """Return (member, score) pairs for the inclusive rank range, highest first."""

    @abstractmethod
    async def zrem(self, key: str, member: str) -> None:
        """Remove member; removing an absent member is a no-op."""

    @abstractmethod
    async def set_if_absent(self, key: str, ttl_seconds: int) -> bool:
        """Atomically create key with a TTL. Return False if it already exists."""


def _as_int(score: Any) -> int:
    return int(float(score))


class RedisRankedStore(RankedStore):
    def __init__(self, client: Any) -> None:
        # client is a redis.asyncio.Redis created with decode_responses=True
        self._redis = client

    @classmethod
    def from_url(cls, url: str) -> "RedisRankedStore":
        return cls(redis.from_url(url, decode_responses=True))

    async def zincrby(self, key: str, delta: int, member: str) -> int:
        try:
            value = await self._redis.zincrby(key, delta, member)
        except RedisError as exc:
            raise StoreError(f"zincrby failed for key={key}") from exc
        return _as_int(value)

    async def zscore(self, key: str, member: str) -> Optional[int]:
        try:
            value = await self._redis.zscore(key, member)
        except RedisError as exc:
            raise StoreError(f"zscore failed for key={key}") from exc
        if value is None:
            return None
        return _as_int(value)

    async def zrevrank(self, key: str, member: str) -> Optional[int]:
        try:
            value = await self._redis.zrevrank(key, member)
        except RedisError as exc:
            raise StoreError(f"zrevrank failed for key={key}") from exc
        if value is None:
            return None
        return int(value)

    async def zcard(self, key: str) -> int:
        try:
            value = await self._redis.zcard(key)
        except RedisError as exc:
            raise StoreError(f"zcard failed for key={key}") from exc
        return int(value or 0)

    async def zrangebyscore_first(self, key: str, min_score: int) -> Optional[tuple[str, int]]:
        try:
            rows = await self._redis.zrangebyscore(
                key,
                min_score,
                "+inf",
                start=0,
                num=1,
                withscores=True,
            )
        except RedisError as exc:
            raise StoreError(f"zrangebyscore failed for key={key}") from exc
        if not rows:
            return None
        member, score = rows[0]
        return str(member), _as_int(score)

    async def zrevrange(self, key: str, start: int, stop: int) -> list[tuple[str, int]]:
        try:
            rows = await self._redis.zrevrange(key, start, stop, withscores=True)
        except RedisError as exc:
            raise StoreError(f"zrevrange failed for key={key}") from exc
        return [(str(member), _as_int(score)) for member, score in rows or []]

    async def zrem(self, key: str, member: str) -> None:
        try:
            await self._redis.zrem(key, member)
        except RedisError as exc:
            raise StoreError(f"zrem failed for key={key}") from exc

    async def set_if_absent(self, key: str, ttl_seconds: int) -> bool:
        try:
            created = await self._redis.set(key, 1, nx=True, ex=int(ttl_seconds))
        except RedisError as exc:
            raise StoreError(f"set nx failed for key={key}") from exc
        return bool(created)

    async def close(self) -> None:
        try:
            await self._redis.aclose()
        except RedisError as exc:
            LOGGER.warning("redis close failed: %s", exc)
