"""
User API - FastAPI Application Entry Point

This module builds the FastAPI application with its middleware, routes
and lifecycle handlers, and provides the `user-api` console entry point.
"""

from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import uvicorn
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware

from user_api import __version__
from user_api.api.v1 import health, users
from user_api.core.config import settings
from user_api.core.logging_config import get_logger, setup_logging
from user_api.middleware.logging import LoggingMiddleware
from user_api.middleware.request_id import RequestIDMiddleware
from user_api.middleware.server_header import ServerHeaderMiddleware
from user_api.middleware.timeout import TimeoutMiddleware
from user_api.services.document_store import MongoDocumentStore
from user_api.services.interfaces.document_store import IDocumentStore


logger = get_logger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    """
    Application lifespan context manager.

    Startup:
        - Set up logging
        - Build the MongoDB store from MONGODB_URI, unless one was injected

    Shutdown:
        - Close the store if it was built here

    A DatabaseConnectionError during startup propagates and stops the process.
    """
    setup_logging(level=settings.log_level, json_format=settings.log_json)

    owns_store = getattr(app.state, "document_store", None) is None
    if owns_store:
        app.state.document_store = MongoDocumentStore.create(settings.mongodb_uri)

    logger.info(
        "Application started",
        extra={
            "database": settings.database_name,
            "collection": settings.users_collection,
        }
    )

    yield

    if owns_store:
        await app.state.document_store.close()
        app.state.document_store = None


def create_app(document_store: Optional[IDocumentStore] = None) -> FastAPI:
    """
    Build the FastAPI application.

    Args:
        document_store: Store to serve requests with. When omitted, the
            lifespan builds a MongoDocumentStore from settings and closes
            it at shutdown; an injected store is left open for its owner.

    Returns:
        Configured FastAPI instance
    """
    app = FastAPI(
        title=settings.project_name,
        version=__version__,
        description="User records stored in MongoDB",
        lifespan=lifespan,
    )
    app.state.document_store = document_store

    # Middleware is executed in reverse order of registration
    # (last registered = first executed)

    # Response compression (innermost)
    app.add_middleware(GZipMiddleware)

    # Logging middleware (runs after RequestID to access request_id)
    app.add_middleware(LoggingMiddleware)

    # Request ID middleware (sets correlation ID)
    app.add_middleware(RequestIDMiddleware)

    # Default Server header, kept if a handler sets its own
    app.add_middleware(ServerHeaderMiddleware, server_name=settings.server_header)

    # CORS middleware - permissive unless CORS_ORIGINS says otherwise
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Timeout middleware (outermost, covers the whole stack)
    app.add_middleware(
        TimeoutMiddleware,
        timeout_seconds=settings.request_timeout_seconds,
    )

    app.include_router(users.router, tags=["users"])
    app.include_router(health.router, tags=["health"])

    return app


app = create_app()


def run() -> None:
    """Console entry point: serve `app` with uvicorn."""
    logger.debug(f"Starting the app in: {settings.host}:{settings.port}")
    uvicorn.run(
        "user_api.main:app",
        host=settings.host,
        port=settings.port,
        # ServerHeaderMiddleware provides the Server header
        server_header=False,
    )
