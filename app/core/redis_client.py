import os
from typing import Optional

import redis.asyncio as redis
from app.core.config import settings

REDIS_URL = os.environ.get("REDIS_URL", settings.redis_url)


def get_redis_client() -> Optional[redis.Redis]:
    """Redis client for rate limiting, or None when rate limiting is disabled"""
    if not settings.rate_limit_enabled:
        return None
    return redis.from_url(REDIS_URL, decode_responses=True)
