"""
MedCamp Backend — Document Store Adapters
===========================================

What:  Collection-oriented persistence interface used by every service.
How:   DocumentStore (abstract) defines find/insert/update/delete/count/sum
       over named collections of dict documents. Each call is atomic for a
       single document; nothing spans documents.

Implementations:
    - SQLDocumentStore:    SQLAlchemy async, one ORM table per collection
    - MemoryDocumentStore: process-local dicts (tests, STORE_BACKEND=memory)

Services receive a store instance at construction; they never import a
global one.
"""

from medcamp.store.base import (
    CAMPS,
    COLLECTIONS,
    FEEDBACKS,
    PAYMENTS,
    REGISTRATIONS,
    UNIQUE_KEYS,
    USERS,
    DeleteResult,
    DocumentStore,
    InsertResult,
    UpdateResult,
)
from medcamp.store.memory import MemoryDocumentStore

__all__ = [
    "CAMPS",
    "COLLECTIONS",
    "FEEDBACKS",
    "PAYMENTS",
    "REGISTRATIONS",
    "UNIQUE_KEYS",
    "USERS",
    "DeleteResult",
    "DocumentStore",
    "InsertResult",
    "MemoryDocumentStore",
    "UpdateResult",
]
