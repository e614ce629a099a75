"""
Logging middleware for request/response tracking.

Every request produces a "Request started" line and then either a
"Request completed" line (status code, latency) or a "Request failed"
line with the traceback. Responses with a 5xx status are completed at
WARNING so storage failures stand out even though the handler answered.

Must be registered AFTER RequestIDMiddleware to access request_id.
"""

import time
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from user_api.core.logging_config import get_logger


logger = get_logger(__name__)


def _elapsed_ms(start: float) -> float:
    return round((time.perf_counter() - start) * 1000, 2)


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Middleware to log all HTTP requests and responses.

    Example:
        app.add_middleware(LoggingMiddleware)    # Inner
        app.add_middleware(RequestIDMiddleware)  # Outer, runs first

    Log output (JSON):
        {
            "timestamp": "2026-10-19T10:30:00.123456+00:00",
            "level": "INFO",
            "message": "Request completed",
            "method": "POST",
            "path": "/user",
            "status_code": 200,
            "latency_ms": 12.5,
            "request_id": "abc-123"
        }
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        context = {
            "method": request.method,
            "path": request.url.path,
            # Set by RequestIDMiddleware
            "request_id": getattr(request.state, "request_id", None),
        }

        logger.info(
            "Request started",
            extra={
                **context,
                "query_params": str(request.query_params) if request.query_params else None,
            }
        )

        start = time.perf_counter()

        try:
            response = await call_next(request)
        except Exception as exc:
            logger.error(
                f"Request failed: {exc}",
                extra={
                    **context,
                    "latency_ms": _elapsed_ms(start),
                    "exception_type": type(exc).__name__,
                },
                exc_info=True
            )
            raise

        log = logger.warning if response.status_code >= 500 else logger.info
        log(
            "Request completed",
            extra={
                **context,
                "status_code": response.status_code,
                "latency_ms": _elapsed_ms(start),
            }
        )

        return response
