"""
Pytest configuration and shared fixtures.

This module provides:
- Environment variable setup for tests
- An in-memory, call-recording document store
- Application and HTTP client fixtures wired to that store
"""

import asyncio
import os
import sys
from pathlib import Path
from typing import Any, Dict, List, Mapping, Optional, Tuple, Type

import pytest


# Set test environment variables BEFORE any imports
# This must happen first to ensure settings load with test values
os.environ["MONGODB_URI"] = "mongodb://localhost:27017"
os.environ["DATABASE_NAME"] = "myDB"
os.environ["USERS_COLLECTION"] = "users"
os.environ["DEFAULT_USER_ID"] = "76"
os.environ["LOG_LEVEL"] = "DEBUG"

# Add backend directory to path
backend_dir = Path(__file__).parent.parent
sys.path.insert(0, str(backend_dir))

from bson import ObjectId  # noqa: E402
from httpx import AsyncClient, ASGITransport  # noqa: E402
from pydantic import BaseModel  # noqa: E402

from user_api.services.document_store import to_document  # noqa: E402
from user_api.services.interfaces.document_store import (  # noqa: E402
    IDocumentStore,
    InsertResult,
    RecordT,
)


class RecordingDocumentStore(IDocumentStore):
    """
    In-memory IDocumentStore that records every call.

    Documents are kept per (database, collection) as plain dicts. Each
    insert gets a fresh ObjectId, exposed in hex form like the real store.

    Attributes:
        find_calls: (database, collection, model, filter, options) per find_one
        insert_calls: (database, collection, record, options) per insert_one
        inserted_ids: record -> inserted_id, in insertion order
        error: Exception raised by find_one/insert_one when set
        healthy: Value returned by ping()
    """

    def __init__(self):
        self.documents: Dict[Tuple[str, str], List[Dict[str, Any]]] = {}
        self.find_calls: List[tuple] = []
        self.insert_calls: List[tuple] = []
        self.inserted_ids: List[Tuple[BaseModel, str]] = []
        self.error: Optional[Exception] = None
        self.healthy = True
        self.closed = False

    def seed(self, database: str, collection: str, record: BaseModel) -> None:
        """Store a record without recording a call."""
        document = to_document(record)
        self.documents.setdefault((database, collection), []).append(document)

    async def find_one(
        self,
        database: str,
        collection: str,
        model: Type[RecordT],
        filter: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RecordT]:
        self.find_calls.append((database, collection, model, filter, options))
        # Yield like a real round trip would
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error

        for document in self.documents.get((database, collection), []):
            if all(document.get(k) == v for k, v in (filter or {}).items()):
                return model.model_validate(document)
        return None

    async def insert_one(
        self,
        database: str,
        collection: str,
        record: BaseModel,
        options: Optional[Mapping[str, Any]] = None,
    ) -> InsertResult:
        self.insert_calls.append((database, collection, record, options))
        await asyncio.sleep(0)
        if self.error is not None:
            raise self.error

        inserted_id = str(ObjectId())
        document = to_document(record)
        document["_id"] = inserted_id
        self.documents.setdefault((database, collection), []).append(document)
        self.inserted_ids.append((record, inserted_id))
        return InsertResult(inserted_id=inserted_id)

    async def ping(self) -> bool:
        return self.healthy

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def anyio_backend():
    """
    Configure anyio backend for async tests.

    Returns:
        str: Backend name ("asyncio")
    """
    return "asyncio"


@pytest.fixture
def document_store() -> RecordingDocumentStore:
    """Fresh in-memory store per test."""
    return RecordingDocumentStore()


@pytest.fixture
def app(document_store: RecordingDocumentStore):
    """
    Application wired to the in-memory store.

    The real MongoDB store is never built because a store is injected.
    """
    from user_api.main import create_app

    return create_app(document_store=document_store)


@pytest.fixture
async def client(app):
    """Async HTTP client talking to the app in-process."""
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
