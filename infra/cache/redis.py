from __future__ import annotations

import redis.asyncio as redis

from core.config import settings


def make_redis_client(url: str | None = None) -> redis.Redis | None:
    url = url or settings.redis_url
    if not url:
        return None
    return redis.from_url(url, decode_responses=True)
