"""Per-user rate limiting for the write endpoints."""

from datetime import datetime

import redis

from backend.app.config import Settings
from backend.app.db.context import RequestContext
from backend.app.db.inmemory import InMemoryRateLimiter
from backend.app.db.repositories import RateLimiter
from backend.app.ratelimit import RedisRateLimiter, make_rate_limit_key

UPLOAD_BUCKET = "upload"
CHAT_BUCKET = "chat"


class RateLimitMiddleware:
    """Maps request paths to buckets and enforces each bucket's quota."""

    def __init__(self, limiters: dict[str, RateLimiter], bucket_map: dict[str, str]) -> None:
        """Initialize rate limit middleware.

        Args:
            limiters: Rate limiter per bucket name
            bucket_map: Mapping from path patterns to bucket names
        """
        self._limiters = limiters
        self._bucket_map = bucket_map

    def check_rate_limit(
        self, path: str, ctx: RequestContext, now: datetime | None = None
    ) -> tuple[bool, int]:
        """Check if request is allowed under rate limit.

        Args:
            path: Request path
            ctx: Request context
            now: Current time (for testing)

        Returns:
            Tuple of (allowed, retry_after_seconds)
        """
        if now is None:
            now = datetime.now()

        bucket = self._get_bucket(path)
        if bucket is None or bucket not in self._limiters:
            return (True, 0)

        key = make_rate_limit_key(ctx, bucket)
        retry_after = self._limiters[bucket].check_quota(key, now)

        if retry_after is None:
            return (True, 0)

        return (False, retry_after.seconds)

    def _get_bucket(self, path: str) -> str | None:
        # Most specific patterns first
        for pattern, bucket in self._bucket_map.items():
            if pattern in path:
                return bucket

        return None


def create_default_bucket_map() -> dict[str, str]:
    """Create default bucket mapping.

    Returns:
        Dictionary mapping path patterns to bucket names
    """
    return {
        "/messages": CHAT_BUCKET,
        "/documents": UPLOAD_BUCKET,
    }


def create_rate_limit_middleware(settings: Settings) -> RateLimitMiddleware:
    """Build the limiter set from settings, Redis-backed when REDIS_URL is set."""
    quotas = {
        UPLOAD_BUCKET: settings.upload_ops_per_min,
        CHAT_BUCKET: settings.chat_ops_per_min,
    }

    limiters: dict[str, RateLimiter]
    if settings.redis_url:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        limiters = {bucket: RedisRateLimiter(client, quota) for bucket, quota in quotas.items()}
    else:
        limiters = {bucket: InMemoryRateLimiter(quota) for bucket, quota in quotas.items()}

    return RateLimitMiddleware(limiters, create_default_bucket_map())
