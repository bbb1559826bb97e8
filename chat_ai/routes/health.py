# chat_ai/routes/health.py
"""
Health check endpoints with Redis and database pool checks.
"""

import time

from fastapi import APIRouter

from chat_ai.config import settings
from chat_ai.db.pool import db_health_check
from chat_ai.infrastructure.observability.logging import log_health_check
from chat_ai.services.infrastructure.redis_client import fast_redis

router = APIRouter()


@router.get("/healthz")
async def healthz():
    """Basic health check - always returns 200 if app is running."""
    return {"status": "ok", "service": "chat-ai"}


@router.get("/readyz")
async def readyz():
    """Readiness check for Redis and the message store."""
    checks = {}
    overall_ok = True

    # 1) Redis
    t0 = time.time()
    try:
        redis_ok = await fast_redis.ping()
        checks["redis"] = {"ok": redis_ok, "latency_ms": round((time.time() - t0) * 1000, 1)}
    except Exception as e:
        redis_ok = False
        checks["redis"] = {"ok": False, "error": f"{type(e).__name__}: {e}"}
    overall_ok = overall_ok and redis_ok
    log_health_check("redis", redis_ok, checks["redis"].get("latency_ms"))

    # 2) Database pool
    t0 = time.time()
    try:
        db_health = await db_health_check()
        db_ok = bool(db_health.get("healthy", False))
        checks["database"] = {"ok": db_ok, "latency_ms": round((time.time() - t0) * 1000, 1)}
        if not db_ok:
            checks["database"]["error"] = db_health.get("error", "Database unhealthy")
    except Exception as e:
        db_ok = False
        checks["database"] = {
            "ok": False,
            "error": f"{type(e).__name__}: {e}",
            "latency_ms": round((time.time() - t0) * 1000, 1),
        }
    overall_ok = overall_ok and db_ok
    log_health_check(
        "database", db_ok, checks["database"].get("latency_ms"), checks["database"].get("error")
    )

    # 3) Configuration
    config_issues = []
    if not settings.FIREBASE_PROJECT_ID:
        config_issues.append("FIREBASE_PROJECT_ID not set")
    if settings.PROACTIVE_TOPIC_ENRICHMENT and not settings.OPENAI_API_KEY:
        config_issues.append("PROACTIVE_TOPIC_ENRICHMENT is on but OPENAI_API_KEY is not set")

    checks["configuration"] = {
        "ok": not config_issues,
        "issues": config_issues or None,
        "environment": settings.environment,
    }
    overall_ok = overall_ok and not config_issues

    return {"overall_ok": overall_ok, "checks": checks, "timestamp": time.time()}
