"""Service interface contracts (ABCs)"""

from user_api.services.interfaces.document_store import IDocumentStore, InsertResult

__all__ = [
    'IDocumentStore',
    'InsertResult',
]
