"""Health check endpoints."""

import asyncio
import logging
from datetime import UTC, datetime

from fastapi import APIRouter, Depends, HTTPException
from sqlalchemy import text
from sqlalchemy.ext.asyncio import AsyncSession

from infrastructure.config import get_settings
from infrastructure.database import get_db

logger = logging.getLogger(__name__)

router = APIRouter()
settings = get_settings()


async def _ping_db(db: AsyncSession) -> str:
    try:
        result = await asyncio.wait_for(db.execute(text("SELECT 1")), timeout=5.0)
        result.scalar()
        return "connected"
    except TimeoutError:
        logger.error("Health check DB timeout")
        return "error: database timeout"
    except Exception as e:
        logger.error("Health check DB error: %s", str(e))
        return "error: database check failed"


async def _ping_redis(timeout: float) -> None:
    import redis.asyncio as aioredis

    client = aioredis.from_url(settings.redis_url)
    try:
        await asyncio.wait_for(client.ping(), timeout=timeout)
    finally:
        await client.aclose()


@router.get("/health")
async def health_check():
    """Basic health check."""
    return {
        "status": "healthy",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/db")
async def health_check_db(db: AsyncSession = Depends(get_db)):
    """Health check with database connectivity."""
    db_status = await _ping_db(db)
    return {
        "status": "healthy" if db_status == "connected" else "degraded",
        "app": settings.app_name,
        "version": settings.app_version,
        "environment": settings.environment,
        "database": db_status,
        "timestamp": datetime.now(UTC).isoformat(),
    }


@router.get("/health/redis")
async def health_redis():
    """Rate limiter backend connectivity."""
    if not settings.redis_url:
        return {"status": "not_configured", "service": "redis"}
    try:
        await _ping_redis(timeout=3.0)
    except TimeoutError:
        raise HTTPException(status_code=503, detail="Redis timeout")
    except Exception as e:
        logger.error("Health check Redis error: %s", str(e))
        raise HTTPException(status_code=503, detail="Redis unavailable")
    return {"status": "healthy", "service": "redis"}


@router.get("/health/ready")
async def readiness_check(db: AsyncSession = Depends(get_db)):
    """Readiness probe: database required, Redis optional."""
    db_ok = await _ping_db(db) == "connected"

    redis_state = "not_configured"
    if settings.redis_url:
        try:
            await _ping_redis(timeout=2.0)
            redis_state = "ok"
        except Exception as e:
            logger.warning("Readiness Redis check failed: %s", str(e))
            redis_state = "degraded"

    return {
        "ready": db_ok,
        "database": "ok" if db_ok else "unavailable",
        "redis": redis_state,
    }


@router.get("/health/live")
async def liveness_check():
    """Liveness probe."""
    return {"alive": True}
