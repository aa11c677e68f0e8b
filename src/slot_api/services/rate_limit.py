"""Fixed-window request rate limiting for the public API."""

from __future__ import annotations

import logging
import time
from threading import Lock
from typing import Final

import redis

from slot_api.core.settings import settings

logger = logging.getLogger(__name__)

_KEY_PREFIX: Final[str] = "ratelimit"
REDIS_RETRY_SECONDS: Final[float] = 30.0


class RateLimitService:
    """Count requests per caller in fixed windows.

    Backed by Redis when `REDIS_URL` is configured so that several workers
    share one budget; otherwise (or while Redis is erroring) counts live in this
    process.
    """

    def __init__(
        self,
        max_requests: int | None = None,
        window_seconds: int | None = None,
        redis_url: str | None = None,
    ) -> None:
        self.max_requests = max_requests if max_requests is not None else settings.rate_limit_requests
        self.window_seconds = (
            window_seconds if window_seconds is not None else settings.rate_limit_window_seconds
        )
        self._redis: redis.Redis | None = None
        self._redis_retry_at = 0.0
        self._lock = Lock()
        self._window_index = -1
        self._counts: dict[str, int] = {}

        url = redis_url if redis_url is not None else settings.redis_url
        if url:
            self._redis = redis.Redis.from_url(url, socket_timeout=1.0)

    def hit(self, caller: str, now: float | None = None) -> bool:
        """Register one request from `caller`.

        Blocks on the Redis round trip, so async callers run it in a worker
        thread. After a Redis error the in-process counts are used until
        `REDIS_RETRY_SECONDS` have passed.

        Returns:
            True if the request is within budget, False if it must be refused.
        """
        instant = time.time() if now is None else now
        window = int(instant // self.window_seconds)
        if self._redis is not None and instant >= self._redis_retry_at:
            key = f"{_KEY_PREFIX}:{caller}:{window}"
            try:
                pipe = self._redis.pipeline()
                pipe.incr(key)
                pipe.expire(key, self.window_seconds)
                count, _ = pipe.execute()
                return int(count) <= self.max_requests
            except redis.RedisError as exc:
                logger.warning(
                    "Redis rate limiting unavailable, using in-process counts for %ss: %s",
                    REDIS_RETRY_SECONDS,
                    exc,
                )
                self._redis_retry_at = instant + REDIS_RETRY_SECONDS

        with self._lock:
            if window != self._window_index:
                # New window: every caller starts over.
                self._window_index = window
                self._counts.clear()
            count = self._counts.get(caller, 0) + 1
            self._counts[caller] = count
        return count <= self.max_requests

    def reset(self) -> None:
        """Forget all in-process counts."""
        with self._lock:
            self._window_index = -1
            self._counts.clear()


_rate_limiter: RateLimitService | None = None


def get_rate_limiter() -> RateLimitService:
    """Return the process-wide rate limiter."""
    global _rate_limiter
    if _rate_limiter is None:
        _rate_limiter = RateLimitService()
    return _rate_limiter
