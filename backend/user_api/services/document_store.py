"""
MongoDB Document Store Implementation

Implements IDocumentStore on top of pymongo's native asyncio client.

Key features:
- One AsyncMongoClient per process, created lazily (no network round trip
  at construction) and shared by every request
- Driver errors transformed into StorageError
- Inserted identifiers canonicalized to strings
"""

import asyncio
import logging
from typing import Any, Dict, Mapping, Optional, Type

from bson import ObjectId
from pydantic import BaseModel, ValidationError
from pymongo import AsyncMongoClient
from pymongo.errors import ConfigurationError, PyMongoError

from user_api.core.exceptions import DatabaseConnectionError, StorageError
from user_api.services.interfaces.document_store import (
    IDocumentStore,
    InsertResult,
    RecordT,
)

logger = logging.getLogger(__name__)


def to_document(record: BaseModel) -> Dict[str, Any]:
    """
    Serialize a record to the mapping written to storage.

    Fields use their wire aliases and absent optional fields are left out
    entirely rather than stored as null.
    """
    return record.model_dump(by_alias=True, exclude_none=True)


def canonical_id(value: Any) -> str:
    """
    Convert a storage-assigned identifier to its string form.

    ObjectIds become their 24-character hex string and strings pass
    through. Anything else has no canonical form and yields "" instead
    of failing the insert.
    """
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, str):
        return value
    return ""


class MongoDocumentStore(IDocumentStore):
    """
    Document store backed by MongoDB.

    Attributes:
        client: Shared AsyncMongoClient; thread- and task-safe by driver contract
    """

    def __init__(self, client: AsyncMongoClient):
        """
        Wrap an existing client.

        Args:
            client: Configured AsyncMongoClient (use `create` to build one from a URI)
        """
        self.client = client

    @classmethod
    def create(cls, uri: str, **client_kwargs: Any) -> "MongoDocumentStore":
        """
        Build a store from a connection URI.

        The URI is parsed and the client configured immediately, but no
        connection is opened until the first operation.

        Args:
            uri: MongoDB connection URI
            **client_kwargs: Extra AsyncMongoClient options (e.g. serverSelectionTimeoutMS)

        Returns:
            MongoDocumentStore instance

        Raises:
            DatabaseConnectionError: If the URI cannot be parsed or the
                client cannot be constructed
        """
        client_kwargs.setdefault("connect", False)
        try:
            client = AsyncMongoClient(uri, **client_kwargs)
        except (ConfigurationError, ValueError, TypeError) as exc:
            raise DatabaseConnectionError(
                f"Could not create MongoDB client: {exc}"
            ) from exc

        logger.info("MongoDocumentStore initialized")
        return cls(client)

    async def find_one(
        self,
        database: str,
        collection: str,
        model: Type[RecordT],
        filter: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RecordT]:
        """
        Fetch the first matching record.

        See IDocumentStore.find_one for full documentation.
        """
        coll = self.client.get_database(database).get_collection(collection)

        try:
            document = await coll.find_one(
                dict(filter) if filter is not None else None,
                **dict(options or {})
            )
        except PyMongoError as exc:
            raise StorageError(
                f"find_one on {database}.{collection} failed: {exc}"
            ) from exc

        if document is None:
            logger.debug(
                "No document matched filter",
                extra={"database": database, "collection": collection},
            )
            return None

        try:
            return model.model_validate(document)
        except ValidationError as exc:
            raise StorageError(
                f"Document in {database}.{collection} does not match "
                f"{model.__name__}: {exc}"
            ) from exc

    async def insert_one(
        self,
        database: str,
        collection: str,
        record: BaseModel,
        options: Optional[Mapping[str, Any]] = None,
    ) -> InsertResult:
        """
        Persist one record.

        See IDocumentStore.insert_one for full documentation.
        """
        coll = self.client.get_database(database).get_collection(collection)

        # The driver adds _id to the dict it is given; this one is throwaway
        document = to_document(record)

        try:
            result = await coll.insert_one(document, **dict(options or {}))
        except PyMongoError as exc:
            raise StorageError(
                f"insert_one on {database}.{collection} failed: {exc}"
            ) from exc

        inserted_id = canonical_id(result.inserted_id)
        if not inserted_id:
            logger.warning(
                f"Inserted id of type {type(result.inserted_id).__name__} "
                f"has no string form",
                extra={"database": database, "collection": collection},
            )

        return InsertResult(inserted_id=inserted_id)

    async def ping(self, timeout_seconds: float = 2.0) -> bool:
        """
        Run the `ping` admin command.

        Args:
            timeout_seconds: Maximum time to wait for the server (default: 2.0)

        Returns:
            True if the server answered, False otherwise
        """
        try:
            async with asyncio.timeout(timeout_seconds):
                await self.client.admin.command("ping")
                return True
        except asyncio.TimeoutError:
            return False
        except PyMongoError as exc:
            logger.warning(f"MongoDB ping failed: {exc}")
            return False

    async def close(self) -> None:
        """Close the MongoDB client and its connection pool."""
        await self.client.close()
        logger.info("MongoDocumentStore closed")
