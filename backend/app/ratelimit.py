"""Rate limit keys and the Redis-backed fixed-window limiter."""

from datetime import datetime

import redis

from backend.app.db.context import RequestContext
from backend.app.db.repositories import RetryAfter


def make_rate_limit_key(ctx: RequestContext, bucket: str) -> str:
    """Rate limit key for one user and bucket ("upload" or "chat")."""
    return f"{ctx.user_id}:{bucket}"


class RedisRateLimiter:
    """Fixed-window limiter shared across API replicas.

    Each window is one Redis counter that expires with the window, so no
    cleanup is needed.
    """

    def __init__(
        self,
        redis_client: redis.Redis,
        max_requests: int,
        window_seconds: int = 60,
        prefix: str = "legal-uplifter:ratelimit",
    ) -> None:
        """Initialize rate limiter.

        Args:
            redis_client: Redis client
            max_requests: Maximum requests per user per window
            window_seconds: Window size in seconds (default 60)
            prefix: Namespace for counter keys
        """
        self._redis = redis_client
        self._max_requests = max_requests
        self._window_seconds = window_seconds
        self._prefix = prefix

    def check_quota(self, key: str, now: datetime) -> RetryAfter | None:
        """Count this request and report whether it is over quota."""
        window_start = int(now.timestamp()) // self._window_seconds * self._window_seconds
        counter_key = f"{self._prefix}:{key}:{window_start}"

        pipe = self._redis.pipeline()
        pipe.incr(counter_key)
        pipe.expire(counter_key, self._window_seconds, nx=True)
        count, _ = pipe.execute()

        if count <= self._max_requests:
            return None

        remaining = window_start + self._window_seconds - int(now.timestamp())
        return RetryAfter(seconds=max(1, remaining))
