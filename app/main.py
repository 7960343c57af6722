"""
StakeHabit FastAPI Application
Main entry point for the application
"""

import logging
import os
import time

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse, Response
from prometheus_client import generate_latest, CONTENT_TYPE_LATEST

from app.core.config import settings

logging.basicConfig(
    level=logging.DEBUG if settings.debug else logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)

# Sentry integration
if os.getenv("SENTRY_DSN"):
    import sentry_sdk
    from sentry_sdk.integrations.fastapi import FastApiIntegration
    from sentry_sdk.integrations.sqlalchemy import SqlalchemyIntegration
    from sentry_sdk.integrations.redis import RedisIntegration

    sentry_sdk.init(
        dsn=os.getenv("SENTRY_DSN"),
        integrations=[
            FastApiIntegration(),
            SqlalchemyIntegration(),
            RedisIntegration(),
        ],
        traces_sample_rate=0.1,
        environment=settings.app_env,
    )

from app.api.health import router as health_router
from app.api.webhooks import router as webhooks_router
from app.api.v1.auth import router as auth_router
from app.api.v1.habits import router as habits_router
from app.api.v1.profile import router as profile_router
from app.api.v1.sponsored import router as sponsored_router
from app.api.v1.wallet import router as wallet_router
from app.core.exceptions import StakeHabitError
from app.core.metrics import ACTIVE_CONNECTIONS, REQUEST_COUNT, REQUEST_DURATION
from app.core.redis_client import get_redis_client
from app.middleware.rate_limit import RateLimitMiddleware

# Create FastAPI app instance
app = FastAPI(
    title="StakeHabit API",
    description="Stake money on your habits, keep the streak, win it back",
    version="0.1.0",
    docs_url="/docs",
    redoc_url="/redoc"
)


@app.exception_handler(StakeHabitError)
async def stakehabit_error_handler(request: Request, exc: StakeHabitError):
    """Render domain errors as {success: false, error: message}"""
    content = {"success": False, "error": exc.message}
    if exc.details:
        content["details"] = exc.details
    return JSONResponse(status_code=exc.status_code, content=content)


# Add CORS middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],  # Configure appropriately for production
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Add rate limiting middleware
app.add_middleware(RateLimitMiddleware, redis_client=get_redis_client(), prefix=settings.api_v1_prefix)


# Add metrics middleware
@app.middleware("http")
async def metrics_middleware(request: Request, call_next):
    start_time = time.time()
    ACTIVE_CONNECTIONS.inc()
    response = None

    try:
        response = await call_next(request)
        return response
    finally:
        duration = time.time() - start_time
        ACTIVE_CONNECTIONS.dec()

        # Use the route template so path parameters do not explode label cardinality
        route = request.scope.get("route")
        endpoint = getattr(route, "path", request.url.path)
        REQUEST_COUNT.labels(
            method=request.method,
            endpoint=endpoint,
            status=response.status_code if response else 500
        ).inc()
        REQUEST_DURATION.labels(
            method=request.method,
            endpoint=endpoint
        ).observe(duration)


# Add metrics endpoint
@app.get("/metrics")
async def metrics():
    """Prometheus metrics endpoint"""
    return Response(generate_latest(), media_type=CONTENT_TYPE_LATEST)


# Include routers
api_prefix = settings.api_v1_prefix
app.include_router(health_router, prefix=api_prefix, tags=["health"])
app.include_router(webhooks_router, prefix=api_prefix, tags=["webhooks"])

# Include v1 API routers
app.include_router(auth_router, prefix=f"{api_prefix}/auth", tags=["authentication"])
app.include_router(wallet_router, prefix=f"{api_prefix}/wallet", tags=["wallet"])
app.include_router(habits_router, prefix=f"{api_prefix}/habits", tags=["habits"])
app.include_router(profile_router, prefix=f"{api_prefix}/profile", tags=["profile"])
app.include_router(sponsored_router, prefix=f"{api_prefix}/sponsored-habits", tags=["sponsored-habits"])

if not settings.mpesa_configured:
    logger.warning("M-Pesa credentials not set - deposits run in demo mode")


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(
        "app.main:app",
        host="0.0.0.0",
        port=8000,
        reload=True
    )
