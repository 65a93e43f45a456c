"""
Health check endpoint.

GET /health — checks MongoDB and the session backend.
Rules:
- MongoDB failure → "unhealthy" (503) — logins cannot be recorded without it.
- Redis failure → "unhealthy" (503) — sessions live there when it is configured.
- Redis not configured → "degraded" (200) — sessions fall back to process memory.
"""

from __future__ import annotations

from fastapi import APIRouter, Request
from fastapi.responses import JSONResponse

router = APIRouter(tags=["health"])


@router.get("/health")
async def health_check(request: Request) -> JSONResponse:
    checks: dict[str, str] = {}
    overall = "healthy"

    try:
        db = request.app.state.db
        await db.client.admin.command("ping")
        checks["mongodb"] = "ok"
    except Exception:
        checks["mongodb"] = "error"
        overall = "unhealthy"

    redis = request.app.state.redis
    if redis is None:
        checks["sessions"] = "memory"
        if overall == "healthy":
            overall = "degraded"
    else:
        try:
            await redis.ping()
            checks["sessions"] = "redis"
        except Exception:
            checks["sessions"] = "error"
            overall = "unhealthy"

    status_code = 503 if overall == "unhealthy" else 200
    return JSONResponse(
        status_code=status_code,
        content={"status": overall, "checks": checks},
    )
