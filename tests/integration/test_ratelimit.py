"""Tests for rate limiting."""

import uuid
from datetime import datetime, timedelta
from unittest.mock import MagicMock

from backend.app.config import Settings
from backend.app.db.context import RequestContext
from backend.app.db.inmemory import InMemoryRateLimiter
from backend.app.middleware.ratelimit import (
    CHAT_BUCKET,
    UPLOAD_BUCKET,
    RateLimitMiddleware,
    create_default_bucket_map,
    create_rate_limit_middleware,
)
from backend.app.ratelimit import RedisRateLimiter, make_rate_limit_key


def test_rate_limiter_allows_under_quota() -> None:
    """Test rate limiter allows requests under quota."""
    limiter = InMemoryRateLimiter(max_requests=5, window_seconds=60)
    now = datetime.now()

    for i in range(5):
        assert limiter.check_quota("user:upload", now + timedelta(seconds=i)) is None


def test_rate_limiter_blocks_over_quota() -> None:
    """Test rate limiter blocks requests over quota."""
    limiter = InMemoryRateLimiter(max_requests=3, window_seconds=60)
    now = datetime.now()

    for _ in range(3):
        assert limiter.check_quota("user:upload", now) is None

    retry_after = limiter.check_quota("user:upload", now)
    assert retry_after is not None
    assert retry_after.seconds > 0


def test_rate_limiter_resets_after_window() -> None:
    limiter = InMemoryRateLimiter(max_requests=2, window_seconds=60)
    now = datetime.now()

    limiter.check_quota("user:chat", now)
    limiter.check_quota("user:chat", now)
    assert limiter.check_quota("user:chat", now) is not None

    assert limiter.check_quota("user:chat", now + timedelta(seconds=61)) is None


def test_make_rate_limit_key() -> None:
    user_id = uuid.uuid4()

    key = make_rate_limit_key(RequestContext(user_id=user_id), "upload")

    assert key == f"{user_id}:upload"


def test_default_bucket_map_routes_paths() -> None:
    bucket_map = create_default_bucket_map()
    middleware = RateLimitMiddleware(
        {UPLOAD_BUCKET: InMemoryRateLimiter(1), CHAT_BUCKET: InMemoryRateLimiter(1)},
        bucket_map,
    )
    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()

    # Each bucket has its own quota
    assert middleware.check_rate_limit("/documents", ctx, now) == (True, 0)
    assert middleware.check_rate_limit(f"/chat/sessions/{uuid.uuid4()}/messages", ctx, now) == (
        True,
        0,
    )

    allowed, retry_after = middleware.check_rate_limit("/documents", ctx, now)
    assert allowed is False
    assert retry_after > 0


def test_rate_limit_is_per_user() -> None:
    middleware = RateLimitMiddleware({UPLOAD_BUCKET: InMemoryRateLimiter(1)}, create_default_bucket_map())
    now = datetime.now()
    alice = RequestContext(user_id=uuid.uuid4())
    bob = RequestContext(user_id=uuid.uuid4())

    middleware.check_rate_limit("/documents", alice, now)

    assert middleware.check_rate_limit("/documents", alice, now)[0] is False
    assert middleware.check_rate_limit("/documents", bob, now)[0] is True


def test_rate_limit_middleware_no_limit_for_unmapped_path() -> None:
    middleware = RateLimitMiddleware({UPLOAD_BUCKET: InMemoryRateLimiter(1)}, create_default_bucket_map())
    ctx = RequestContext(user_id=uuid.uuid4())

    for _ in range(3):
        assert middleware.check_rate_limit("/profile", ctx) == (True, 0)


def test_create_rate_limit_middleware_uses_settings_quotas() -> None:
    middleware = create_rate_limit_middleware(
        Settings(redis_url=None, upload_ops_per_min=1, chat_ops_per_min=2)
    )
    ctx = RequestContext(user_id=uuid.uuid4())
    now = datetime.now()
    chat_path = f"/chat/sessions/{uuid.uuid4()}/messages"

    assert middleware.check_rate_limit("/documents", ctx, now)[0] is True
    assert middleware.check_rate_limit("/documents", ctx, now)[0] is False
    assert middleware.check_rate_limit(chat_path, ctx, now)[0] is True
    assert middleware.check_rate_limit(chat_path, ctx, now)[0] is True
    assert middleware.check_rate_limit(chat_path, ctx, now)[0] is False


def test_redis_rate_limiter_counts_per_window() -> None:
    """Counter key is window-aligned and over-quota returns the time left."""
    mock_redis = MagicMock()
    pipe = mock_redis.pipeline.return_value
    pipe.execute.return_value = [3, True]

    limiter = RedisRateLimiter(mock_redis, max_requests=2, window_seconds=60)
    now = datetime.fromtimestamp(1_700_000_010)

    retry_after = limiter.check_quota("user:upload", now)

    window_start = 1_700_000_010 // 60 * 60
    pipe.incr.assert_called_once_with(f"legal-uplifter:ratelimit:user:upload:{window_start}")
    assert retry_after is not None
    assert retry_after.seconds == window_start + 60 - 1_700_000_010


def test_redis_rate_limiter_allows_under_quota() -> None:
    mock_redis = MagicMock()
    mock_redis.pipeline.return_value.execute.return_value = [1, True]

    limiter = RedisRateLimiter(mock_redis, max_requests=2)

    assert limiter.check_quota("user:chat", datetime.now()) is None
