"""FastAPI dependency injection."""

from fastapi import Request

from api.ws_manager import WebSocketManager
from processor.engine import AnalyticsEngine
from storage.redis_client import RedisClient


def get_engine(request: Request) -> AnalyticsEngine:
    return request.app.state.engine


def get_ws_manager(request: Request) -> WebSocketManager:
    return request.app.state.ws_manager


def get_redis(request: Request) -> RedisClient | None:
    return request.app.state.redis
