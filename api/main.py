"""FastAPI application factory with lifespan management."""

import time
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from config import Settings, configure_logging
from processor.engine import AnalyticsEngine
from storage.event_log import RedisEventLog
from storage.redis_client import RedisClient
from api.ws_manager import WebSocketManager
from api.routers import analytics, health, prometheus, tracker, websocket


def build_engine(settings: Settings) -> tuple[AnalyticsEngine, RedisClient | None]:
    """Engine plus the Redis client backing its event log, when persistence is on."""
    if not settings.persist_events:
        return AnalyticsEngine(settings), None
    redis_client = RedisClient(settings)
    event_log = RedisEventLog(
        redis_client,
        key=settings.redis_events_key,
        capacity=settings.store_capacity,
        log_level=settings.log_level,
    )
    return AnalyticsEngine(settings, event_log=event_log), redis_client


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Manage application startup and shutdown."""
    settings: Settings = app.state.settings
    log = configure_logging("api", settings.log_level)

    engine, redis_client = build_engine(settings)
    if redis_client is not None:
        engine.restore()

    app.state.engine = engine
    app.state.redis = redis_client
    app.state.ws_manager = WebSocketManager(
        throttle_ms=settings.ws_throttle_ms, log_level=settings.log_level
    )
    app.state.start_time = time.time()
    log.info("api_started", capacity=settings.store_capacity, persist=settings.persist_events)

    yield

    if redis_client is not None:
        redis_client.close()
    log.info("api_stopped")


def create_app(settings: Settings | None = None) -> FastAPI:
    app = FastAPI(
        title="FormWizard Analytics API",
        version="1.0.0",
        description="Form interaction tracking with per-field behavioural metrics",
        lifespan=lifespan,
    )
    app.state.settings = settings or Settings()

    # Tracker script is embedded on arbitrary sites
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=False,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(health.router)
    app.include_router(tracker.router)
    app.include_router(analytics.router)
    app.include_router(websocket.router)
    if app.state.settings.enable_prometheus:
        app.include_router(prometheus.router)

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=app.state.settings.api_host, port=app.state.settings.api_port)
