"""Health check endpoints.

/health is liveness only. /healthz reports database and Redis readiness.
"""

from typing import Annotated, Any

import redis
from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse
from sqlalchemy import text

from backend.app.api.deps import AppServices, get_services
from backend.app.config import Settings, get_settings

router = APIRouter()


async def check_db(services: AppServices) -> tuple[bool, str]:
    """Check database connectivity.

    Returns:
        (is_ok, status_message)
    """
    if services.engine is None:
        return (True, "in_memory")

    try:
        async with services.engine.connect() as conn:
            await conn.execute(text("SELECT 1"))
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


async def check_redis(settings: Settings) -> tuple[bool, str]:
    """Check Redis connectivity.

    Returns:
        (is_ok, status_message)
    """
    if not settings.redis_url:
        return (True, "not_configured")

    try:
        client = redis.from_url(settings.redis_url, decode_responses=True)  # type: ignore[no-untyped-call]
        client.ping()
        return (True, "ok")
    except Exception as e:
        return (False, f"error: {type(e).__name__}")


@router.get("/health")
async def health() -> dict[str, str]:
    """Liveness probe; 200 whenever the process is serving."""
    return {"status": "ok"}


@router.get("/healthz", response_model=None)
async def healthz(
    services: Annotated[AppServices, Depends(get_services)],
) -> dict[str, Any] | JSONResponse:
    """Readiness probe.

    Returns:
        200 with component status if DB and Redis are reachable
        503 if either fails
    """
    db_ok, db_status = await check_db(services)
    redis_ok, redis_status = await check_redis(get_settings())

    core_ok = db_ok and redis_ok

    response_body = {
        "status": "ok" if core_ok else "degraded",
        "components": {
            "db": db_status,
            "redis": redis_status,
            "workers": "running" if services.queue.running else "stopped",
        },
    }

    if not core_ok:
        return JSONResponse(content=response_body, status_code=503)

    return response_body
