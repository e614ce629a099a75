"""
Document Store Interface (IDocumentStore)

Abstract base class defining the contract route handlers use to read and
write records, independent of the database driver behind it.

Implementation guide:
- All methods must be async
- Implementations hold no per-request mutable state; the underlying
  client is a long-lived handle shared by all in-flight requests
- Driver failures are raised as StorageError, never swallowed
- Records are serialized by alias with absent optional fields omitted
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Mapping, Optional, Type, TypeVar

from pydantic import BaseModel


RecordT = TypeVar("RecordT", bound=BaseModel)


@dataclass(frozen=True)
class InsertResult:
    """
    Outcome of a successful insert.

    Attributes:
        inserted_id: Storage-assigned identifier in string form
            (hex for ObjectIds, empty when it has no string form)
    """
    inserted_id: str


class IDocumentStore(ABC):
    """
    Abstract interface for document storage operations.

    The store is addressed by (database, collection) on every call, so a
    single instance serves any number of collections. The record type is
    chosen per call.
    """

    @abstractmethod
    async def find_one(
        self,
        database: str,
        collection: str,
        model: Type[RecordT],
        filter: Optional[Mapping[str, Any]] = None,
        options: Optional[Mapping[str, Any]] = None,
    ) -> Optional[RecordT]:
        """
        Fetch the first record matching a filter.

        Args:
            database: Database name
            collection: Collection name
            model: Record type the stored document is parsed into
            filter: Field-equality constraints, e.g. {"id": 76}
                (None matches any document)
            options: Driver find options, e.g. {"projection": {...}}

        Returns:
            Parsed record, or None if nothing matched

        Raises:
            StorageError: If the query fails or the stored document
                cannot be parsed into `model`
        """
        pass

    @abstractmethod
    async def insert_one(
        self,
        database: str,
        collection: str,
        record: BaseModel,
        options: Optional[Mapping[str, Any]] = None,
    ) -> InsertResult:
        """
        Persist one record.

        Args:
            database: Database name
            collection: Collection name
            record: Record to store (not mutated)
            options: Driver insert options, e.g.
                {"bypass_document_validation": True}

        Returns:
            InsertResult carrying the new identifier

        Raises:
            StorageError: On connection, validation or duplicate-key failure
        """
        pass

    @abstractmethod
    async def ping(self) -> bool:
        """
        Check that the backing store is reachable.

        Returns:
            True if reachable, False otherwise (never raises)
        """
        pass

    @abstractmethod
    async def close(self) -> None:
        """Release the underlying client. Called once at shutdown."""
        pass
