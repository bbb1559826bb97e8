# chat_ai/main.py
"""
FastAPI application for the chat AI backend.
Owns the message store pool and Redis lifecycles and registers the routers.
"""

import time
import uuid
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request

from chat_ai.config import settings
from chat_ai.db.pool import db_pool
from chat_ai.features.proactive_scheduling.api.router import router as proactive_router
from chat_ai.infrastructure.observability.logging import (
    bind_request_context,
    clear_request_context,
    get_logger,
    setup_logging,
)
from chat_ai.routes import health
from chat_ai.services.infrastructure.redis_client import fast_redis

setup_logging(log_level=settings.LOG_LEVEL)
logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Open the message store pool and Redis on startup, close them in reverse on shutdown."""
    logger.info("Application starting", environment=settings.environment, debug=settings.debug)

    await db_pool.initialize()
    try:
        await fast_redis.initialize()
    except Exception:
        logger.error("Startup aborted, closing database pool")
        await db_pool.close()
        raise

    logger.info("Application ready", services=["database_pool", "redis"])
    try:
        yield
    finally:
        logger.info("Application shutting down")
        await fast_redis.close()
        await db_pool.close()


app = FastAPI(
    title="Chat AI Backend",
    description="Proactive scheduling assistant for team conversations",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(health.router)
app.include_router(proactive_router)


@app.middleware("http")
async def request_context(request: Request, call_next):
    """Tag each request with an id for log correlation and record its timing."""
    request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
    request.state.request_id = request_id
    clear_request_context()
    bind_request_context(request_id=request_id)

    start_time = time.perf_counter()
    response = await call_next(request)
    duration_ms = round((time.perf_counter() - start_time) * 1000, 2)

    response.headers["X-Request-ID"] = request_id
    logger.info(
        "HTTP request completed",
        method=request.method,
        path=request.url.path,
        status_code=response.status_code,
        duration_ms=duration_ms,
    )
    return response


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="0.0.0.0", port=8000)
