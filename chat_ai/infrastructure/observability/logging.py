"""
Structured logging setup for the chat AI backend.

Every entry is rendered as one JSON object. Request-scoped fields (request id,
conversation id, user id) are bound through structlog contextvars and merged
into all entries emitted while the request is being handled.
"""

import logging
import sys
from typing import Any

import structlog
from structlog.stdlib import LoggerFactory

SERVICE_NAME = "chat-ai"

# Third-party loggers that are too chatty at INFO
_QUIET_LOGGERS = ("httpx", "httpcore", "openai", "psycopg.pool", "uvicorn.access")


def setup_logging(log_level: str = "INFO") -> None:
    """
    Configure structlog and the stdlib root logger.

    Args:
        log_level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """
    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.stdlib.add_logger_name,
            structlog.processors.TimeStamper(fmt="iso"),
            _add_service_context,
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer(),
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        logger_factory=LoggerFactory(),
        context_class=dict,
        cache_logger_on_first_use=True,
    )

    logging.basicConfig(
        format="%(message)s",
        stream=sys.stdout,
        level=getattr(logging, log_level.upper(), logging.INFO),
    )

    for name in _QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)


def _add_service_context(logger, method_name: str, event_dict: dict[str, Any]) -> dict[str, Any]:
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def get_logger(name: str | None = None) -> structlog.stdlib.BoundLogger:
    return structlog.get_logger(name)


def bind_request_context(**fields: Any) -> None:
    """Attach fields to every log entry for the rest of the current request."""
    structlog.contextvars.bind_contextvars(**{k: v for k, v in fields.items() if v is not None})


def clear_request_context() -> None:
    structlog.contextvars.clear_contextvars()


def log_health_check(service: str, healthy: bool, latency_ms: float | None, error: str = None):
    """Log a dependency check with consistent fields."""
    logger = get_logger("health")
    log_data = {"dependency": service, "healthy": healthy, "latency_ms": latency_ms}
    if error:
        log_data["error"] = error

    if healthy:
        logger.info("Health check passed", **log_data)
    else:
        logger.error("Health check failed", **log_data)
