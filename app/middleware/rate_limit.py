"""
Rate limiting middleware using Redis fixed windows
"""

import logging
from typing import Dict, Optional, Tuple
from fastapi import Request, status
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware
import redis.asyncio as redis

from app.core.config import settings

# Configure logging
logger = logging.getLogger(__name__)


class RateLimitConfig:
    """Rate limiting configuration for different endpoint types"""

    WEBHOOK_LIMITS = {
        "requests": 60,  # Daraja retries callbacks in bursts
        "window": 60,
    }

    AUTH_LIMITS = {
        "requests": 10,  # 10 auth attempts per window
        "window": 300,   # 5 minutes
    }

    DEPOSIT_LIMITS = {
        "requests": 5,   # 5 STK pushes per window
        "window": 300,
    }

    WITHDRAWAL_LIMITS = {
        "requests": 3,   # 3 withdrawals per window
        "window": 3600,  # 1 hour
    }

    @classmethod
    def get_limits_for_endpoint(cls, endpoint_type: str) -> Dict[str, int]:
        """Get rate limits for specific endpoint type"""
        limits_map = {
            "webhook": cls.WEBHOOK_LIMITS,
            "auth": cls.AUTH_LIMITS,
            "deposit": cls.DEPOSIT_LIMITS,
            "withdraw": cls.WITHDRAWAL_LIMITS,
        }
        return limits_map.get(
            endpoint_type,
            {"requests": settings.rate_limit_requests, "window": settings.rate_limit_window_seconds}
        )


class RateLimitMiddleware(BaseHTTPMiddleware):
    """Rate limiting middleware backed by Redis counters"""

    def __init__(self, app, redis_client: Optional[redis.Redis] = None, prefix: str = "/api/v1"):
        super().__init__(app)
        self.redis_client = redis_client
        self.prefix = prefix

    async def dispatch(self, request: Request, call_next):
        """Process request with rate limiting"""

        # Skip rate limiting if Redis is not available
        if not self.redis_client:
            return await call_next(request)

        endpoint_type = self._get_endpoint_type(request)
        if not endpoint_type:
            return await call_next(request)

        client_ip = request.client.host if request.client else "unknown"
        key = f"rate_limit:{endpoint_type}:{client_ip}"
        limits = RateLimitConfig.get_limits_for_endpoint(endpoint_type)

        is_allowed, retry_after = await self._check_rate_limit(key, limits)
        if not is_allowed:
            logger.warning(f"Rate limit exceeded for key: {key}")
            return JSONResponse(
                status_code=status.HTTP_429_TOO_MANY_REQUESTS,
                content={
                    "success": False,
                    "error": "Too many requests, please try again later",
                    "retry_after": retry_after
                },
                headers={"Retry-After": str(retry_after)}
            )

        response = await call_next(request)
        await self._record_request(key, limits["window"])
        return response

    def _get_endpoint_type(self, request: Request) -> Optional[str]:
        """Classify the request path into a rate-limited endpoint type"""
        path = request.url.path
        if path.startswith(f"{self.prefix}/webhooks/"):
            return "webhook"
        if path.startswith(f"{self.prefix}/auth/"):
            return "auth"
        if request.method == "POST" and path.startswith(f"{self.prefix}/wallet/deposit"):
            return "deposit"
        if request.method == "POST" and path.startswith(f"{self.prefix}/wallet/withdraw"):
            return "withdraw"
        return None

    async def _check_rate_limit(self, key: str, limits: Dict[str, int]) -> Tuple[bool, int]:
        """Check if request is within rate limit"""
        try:
            request_count = await self.redis_client.get(key)
            request_count = int(request_count) if request_count else 0

            if request_count >= limits["requests"]:
                ttl = await self.redis_client.ttl(key)
                retry_after = max(1, ttl) if ttl > 0 else limits["window"]
                return False, retry_after

            return True, 0

        except redis.RedisError as e:
            logger.error(f"Error checking rate limit for key {key}: {e}")
            # Allow request if rate limiting fails
            return True, 0

    async def _record_request(self, key: str, window: int):
        """Record a request for rate limiting"""
        try:
            pipe = self.redis_client.pipeline()
            pipe.incr(key)
            pipe.expire(key, window)
            await pipe.execute()
        except redis.RedisError as e:
            logger.error(f"Error recording request for key {key}: {e}")
