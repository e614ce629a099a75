"""
FastAPI dependency functions.

Resolves the shared document store and the settings for route handlers.
Both come from the application, never from module globals, so tests can
build an app around a fake store.
"""

from typing import Annotated

from fastapi import Depends, Request

from user_api.core.config import Settings, settings
from user_api.services.interfaces.document_store import IDocumentStore


def get_document_store(request: Request) -> IDocumentStore:
    """
    Dependency returning the process-wide document store.

    The store is attached to `app.state.document_store` by `create_app`
    (injected) or by the lifespan startup (built from MONGODB_URI).

    Raises:
        RuntimeError: If the application was started without a store
    """
    store = getattr(request.app.state, "document_store", None)
    if store is None:
        raise RuntimeError("Document store is not initialized")
    return store


def get_settings() -> Settings:
    """Dependency returning application settings."""
    return settings


# Type aliases for dependency injection
DocumentStore = Annotated[IDocumentStore, Depends(get_document_store)]
AppSettings = Annotated[Settings, Depends(get_settings)]
