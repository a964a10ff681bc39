"""Redis client for the event log, with connection pooling and a circuit breaker."""

import time
from typing import Any, Callable

import redis

from config import Settings, configure_logging


class CircuitOpenError(Exception):
    pass


class CircuitBreaker:
    """
    closed    -> calls pass; consecutive failures are counted.
    open      -> after ``failure_threshold`` failures every call is refused.
    half_open -> once ``recovery_timeout`` has elapsed, one probe call passes.
    """

    def __init__(self, failure_threshold: int = 5, recovery_timeout: float = 30.0):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.state = "closed"
        self.failure_count = 0
        self.opened_at = 0.0

    def allow(self) -> bool:
        if self.state != "open":
            return True
        if time.monotonic() - self.opened_at >= self.recovery_timeout:
            self.state = "half_open"
            return True
        return False

    def succeeded(self):
        self.failure_count = 0
        self.state = "closed"

    def failed(self):
        self.failure_count += 1
        if self.state == "half_open" or self.failure_count >= self.failure_threshold:
            self.state = "open"
            self.opened_at = time.monotonic()


class RedisClient:
    """Pooled Redis access; every operation goes through ``execute``."""

    def __init__(self, settings: Settings, max_retries: int = 3):
        self.log = configure_logging("redis-client", settings.log_level)
        self._pool = redis.ConnectionPool.from_url(
            settings.redis_url,
            max_connections=settings.redis_pool_size,
            decode_responses=True,
        )
        self._max_retries = max_retries
        self._circuit = CircuitBreaker()
        self.log.info("redis_pool_created", url=settings.redis_url, pool_size=settings.redis_pool_size)

    def get_client(self) -> redis.Redis:
        return redis.Redis(connection_pool=self._pool)

    def execute(self, op: Callable[[redis.Redis], Any]) -> Any:
        """Run ``op`` with retry and exponential backoff on connection errors."""
        if not self._circuit.allow():
            raise CircuitOpenError("event log unavailable: circuit breaker is open")

        for attempt in range(1, self._max_retries + 1):
            try:
                result = op(self.get_client())
            except (redis.ConnectionError, redis.TimeoutError) as e:
                self._circuit.failed()
                if attempt == self._max_retries or not self._circuit.allow():
                    raise
                backoff = 0.1 * (2 ** (attempt - 1))
                self.log.warning("redis_retry", attempt=attempt, backoff=backoff, error=str(e))
                time.sleep(backoff)
            else:
                self._circuit.succeeded()
                return result

    def ping(self) -> bool:
        try:
            return bool(self.execute(lambda r: r.ping()))
        except (redis.RedisError, CircuitOpenError):
            return False

    def close(self):
        self._pool.disconnect()
        self.log.info("redis_pool_closed")

    @property
    def circuit_state(self) -> str:
        return self._circuit.state
