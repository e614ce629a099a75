"""
Request timeout middleware.

Cancels any request whose response has not started within a fixed budget
and answers 408 Request Timeout instead. The handler and the storage call
it is awaiting are cancelled with it; nothing below this layer implements
its own timeout.

Written as a plain ASGI middleware rather than BaseHTTPMiddleware so that
the cancellation reaches the route handler instead of leaving it running
in the middleware's task group.
"""

import asyncio
import logging

from fastapi import Response, status
from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger(__name__)


class TimeoutMiddleware:
    """
    Middleware enforcing a per-request timeout.

    The budget covers everything up to the start of the response. Once
    headers are sent the body is streamed without a deadline.

    Attributes:
        timeout_seconds: Time budget for producing the response headers

    Example:
        app.add_middleware(TimeoutMiddleware, timeout_seconds=10.0)
    """

    def __init__(self, app: ASGIApp, timeout_seconds: float = 10.0):
        """
        Initialize timeout middleware.

        Args:
            app: ASGI application
            timeout_seconds: Seconds before the request is abandoned

        Raises:
            ValueError: If timeout_seconds is not positive
        """
        if timeout_seconds <= 0:
            raise ValueError(f"timeout_seconds must be positive, got {timeout_seconds}")
        self.app = app
        self.timeout_seconds = timeout_seconds

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        response_started = False

        try:
            async with asyncio.timeout(self.timeout_seconds) as deadline:

                async def send_wrapper(message: Message) -> None:
                    nonlocal response_started
                    if message["type"] == "http.response.start":
                        response_started = True
                        deadline.reschedule(None)
                    await send(message)

                await self.app(scope, receive, send_wrapper)

        except TimeoutError:
            # A TimeoutError from below is an application error, not ours
            if response_started or not deadline.expired():
                raise

            logger.warning(
                f"Request timed out after {self.timeout_seconds}s",
                extra={
                    "method": scope.get("method"),
                    "path": scope.get("path"),
                }
            )
            response = Response(status_code=status.HTTP_408_REQUEST_TIMEOUT)
            await response(scope, receive, send)
