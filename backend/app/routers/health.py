"""Health check endpoints for load balancers and monitoring."""

import logging
from datetime import datetime

import redis.asyncio as redis
from fastapi import APIRouter, status
from fastapi.responses import JSONResponse
from sqlalchemy import text
from sqlalchemy.exc import SQLAlchemyError

from app.config import settings
from app.database import engine
from app.utils.cache import get_redis

logger = logging.getLogger(__name__)

router = APIRouter(tags=["health"])

SERVICE_NAME = "caramello-fretes"


@router.get("/health")
async def health_check():
    """Lightweight health check (no DB/Redis round trip)."""
    return {
        "status": "ok",
        "service": SERVICE_NAME,
        "timestamp": datetime.utcnow().isoformat(),
        "environment": settings.environment,
    }


@router.get("/health/ready")
async def readiness_check():
    """Readiness check including the database and Redis.

    Redis is reported but does not fail readiness: the API works uncached.
    """
    checks = {
        "service": "ok",
        "database": "unknown",
        "redis": "unknown",
    }
    healthy = True

    try:
        async with engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        checks["database"] = "ok"
    except (SQLAlchemyError, OSError) as e:
        logger.warning(f"Readiness: database unavailable: {e}")
        checks["database"] = f"error: {str(e)[:100]}"
        healthy = False

    try:
        client = await get_redis()
        await client.ping()
        checks["redis"] = "ok"
    except (redis.RedisError, OSError) as e:
        logger.warning(f"Readiness: redis unavailable: {e}")
        checks["redis"] = f"error: {str(e)[:100]}"

    return JSONResponse(
        status_code=status.HTTP_200_OK if healthy else status.HTTP_503_SERVICE_UNAVAILABLE,
        content={
            "status": "healthy" if healthy else "unhealthy",
            "service": SERVICE_NAME,
            "checks": checks,
            "timestamp": datetime.utcnow().isoformat(),
        },
    )
