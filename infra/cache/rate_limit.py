"""Advisory per-identifier request counters.

Counters reset after a fixed window. Going over the limit is reported, never
enforced: the caller always gets ``allowed=True`` and rate-limit headers.
"""
from __future__ import annotations

import asyncio
import time
from dataclasses import dataclass
from typing import Protocol

import redis.asyncio as redis
import structlog


log = structlog.get_logger(__name__)


class CounterStore(Protocol):
    async def hit(self, key: str, window_sec: int) -> tuple[int, float]:
        """Increment ``key``; return (count in current window, window reset epoch)."""


class MemoryCounterStore:
    def __init__(self, clock=time.time) -> None:
        self._clock = clock
        self._counters: dict[str, tuple[int, float]] = {}
        self._lock = asyncio.Lock()

    def __len__(self) -> int:
        return len(self._counters)

    async def hit(self, key: str, window_sec: int) -> tuple[int, float]:
        async with self._lock:
            now = self._clock()
            # Forget every identifier whose window has passed
            expired = [k for k, (_, r) in self._counters.items() if now > r]
            for k in expired:
                del self._counters[k]
            count, reset = self._counters.get(key, (0, now + window_sec))
            count += 1
            self._counters[key] = (count, reset)
            return count, reset


class RedisCounterStore:
    def __init__(self, client: redis.Redis, prefix: str = "ratelimit") -> None:
        self._client = client
        self._prefix = prefix

    async def hit(self, key: str, window_sec: int) -> tuple[int, float]:
        rkey = f"{self._prefix}:{key}"
        count = int(await self._client.incr(rkey))
        if count == 1:
            await self._client.expire(rkey, window_sec)
        ttl = await self._client.ttl(rkey)
        if ttl is None or ttl < 0:
            await self._client.expire(rkey, window_sec)
            ttl = window_sec
        return count, time.time() + int(ttl)


@dataclass
class RateLimitState:
    limit: int
    remaining: int
    reset: int
    exceeded: bool

    def headers(self) -> dict[str, str]:
        return {
            "X-RateLimit-Limit": str(self.limit),
            "X-RateLimit-Remaining": str(self.remaining),
            "X-RateLimit-Reset": str(self.reset),
        }


class RateLimiter:
    def __init__(self, store: CounterStore, limit: int = 100, window_sec: int = 3600) -> None:
        self.store = store
        self.limit = limit
        self.window_sec = window_sec

    async def check(self, identifier: str) -> RateLimitState:
        count, reset = await self.store.hit(identifier, self.window_sec)
        exceeded = count > self.limit
        if exceeded:
            log.warning("rate_limit_exceeded", count=count, limit=self.limit)
        return RateLimitState(
            limit=self.limit,
            remaining=max(0, self.limit - count),
            reset=int(reset),
            exceeded=exceeded,
        )


def client_identifier(authorization: str | None, forwarded_for: str | None, remote: str | None) -> str:
    if authorization:
        parts = authorization.split(" ", 1)
        if len(parts) == 2 and parts[1].strip():
            return parts[1].strip()
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()
    return remote or "unknown"
