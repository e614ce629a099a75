"""
Default Server header middleware.

Adds a `Server` header to every response that does not already carry one.
Handlers (or inner middleware) that set their own value win.
"""

from typing import Callable
import logging

from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

logger = logging.getLogger(__name__)


class ServerHeaderMiddleware(BaseHTTPMiddleware):
    """
    Middleware to set a default Server response header.

    Example:
        app.add_middleware(ServerHeaderMiddleware, server_name="user_api")
    """

    def __init__(self, app, server_name: str = "user_api"):
        """
        Initialize server header middleware.

        Args:
            app: ASGI application
            server_name: Value used when the response has no Server header
        """
        super().__init__(app)
        self.server_name = server_name

        logger.debug(
            "Server header middleware initialized",
            extra={"server_name": server_name}
        )

    async def dispatch(
        self, request: Request, call_next: Callable
    ) -> Response:
        response = await call_next(request)

        if "server" not in response.headers:
            response.headers["Server"] = self.server_name

        return response
