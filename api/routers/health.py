"""Health and readiness check endpoints."""

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse

from api.dependencies import get_redis
from storage.redis_client import RedisClient

router = APIRouter()


@router.get("/health")
async def health():
    """Liveness probe."""
    return {"status": "ok"}


@router.get("/ready")
async def ready(redis: RedisClient | None = Depends(get_redis)):
    """Readiness probe. Without persistence the in-memory store is always ready."""
    if redis is None:
        return {"status": "ready", "event_log": "disabled"}
    if not redis.ping():
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "event_log": "unreachable"},
        )
    return {
        "status": "ready",
        "event_log": "connected",
        "circuit_breaker": redis.circuit_state,
    }
