"""
Request ID middleware.

Tags each request with a correlation id so that the request log lines and
any storage error logged by a handler can be tied together. A client may
supply its own id in X-Request-ID; it is echoed back unchanged.

Must be registered AFTER LoggingMiddleware so that it runs first.
"""

import uuid
from typing import Callable

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware


REQUEST_ID_HEADER = "X-Request-ID"


class RequestIDMiddleware(BaseHTTPMiddleware):
    """
    Middleware exposing a correlation id as `request.state.request_id`.

    Handlers pass it to log_with_context:
        log_with_context(logger, logging.ERROR, "Failed to insert user",
                         request_id=request.state.request_id)
    """

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        # Empty header counts as missing
        request_id = request.headers.get(REQUEST_ID_HEADER) or str(uuid.uuid4())
        request.state.request_id = request_id

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
