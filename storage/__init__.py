from .redis_client import CircuitBreaker, CircuitOpenError, RedisClient
from .event_log import RedisEventLog

__all__ = ["CircuitBreaker", "CircuitOpenError", "RedisClient", "RedisEventLog"]
