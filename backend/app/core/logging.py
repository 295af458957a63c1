"""
logging.py — Application-Wide Logging Configuration

Purpose:
- Configure a standardized console logging format for the whole backend.
- Provide `get_logger()` so modules never configure handlers themselves.
- Provide the per-request access log middleware (one line per HTTP request).

Rules:
- Never log passwords, password digests, or bearer tokens.
- Domain events (registration, login failures, catalog writes, orders) log at INFO.
"""

import logging
import time
from typing import Awaitable, Callable

from fastapi import Request
from starlette.responses import Response

# -----------------------------------------------------------------------------
# Log Format
# -----------------------------------------------------------------------------

LOG_FORMAT = (
    "%(asctime)s | %(levelname)s | %(name)s | %(message)s"
)

ACCESS_LOGGER_NAME = "app.access"

# -----------------------------------------------------------------------------
# Root Logger Initialization
# -----------------------------------------------------------------------------

def configure_logging(level: str = "INFO") -> None:
    """
    Configure root logging settings.

    Parameters:
        level (str): "DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"

    Unknown level names fall back to INFO. Safe to call more than once;
    `logging.basicConfig` is a no-op once the root logger has handlers.
    """
    logging.basicConfig(
        level=getattr(logging, level.upper(), logging.INFO),
        format=LOG_FORMAT
    )
    logging.getLogger().setLevel(getattr(logging, level.upper(), logging.INFO))

    logging.getLogger(__name__).debug("Logging initialized with level %s", level)

# -----------------------------------------------------------------------------
# Logger Access Helper
# -----------------------------------------------------------------------------

def get_logger(name: str) -> logging.Logger:
    """
    Return a logger instance to be used in any module.

    In any module:
        from app.core.logging import get_logger
        logger = get_logger(__name__)
    """
    return logging.getLogger(name)

# -----------------------------------------------------------------------------
# Access Log Middleware
# -----------------------------------------------------------------------------

async def access_log_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """
    HTTP middleware: log `METHOD path status duration` for every request.

    Registered in main.py via `app.middleware("http")`.
    """
    logger = logging.getLogger(ACCESS_LOGGER_NAME)
    started = time.perf_counter()
    response = await call_next(request)
    elapsed_ms = (time.perf_counter() - started) * 1000
    logger.info(
        "%s %s %d %.1fms",
        request.method,
        request.url.path,
        response.status_code,
        elapsed_ms,
    )
    return response
