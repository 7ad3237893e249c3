"""
MedCamp Backend — Abstract Document Store Interface
=====================================================

What:  Abstract base class defining the persistence contract for services.
How:   Concrete stores inherit from DocumentStore and implement every
       operation. Documents are plain dicts keyed by field name with a
       string `id`.

Contract:
    - Filters are equality matches on top-level fields ({} or None = all).
    - Every operation is atomic for the single document it touches.
    - update_one(inc=...) is a server-side increment: concurrent callers
      never lose each other's deltas.
    - insert_one raises DuplicateKeyError when a UNIQUE_KEYS field collides.
    - Any other backend failure is raised as StoreError.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional, Sequence, Tuple

Document = Dict[str, Any]
Filter = Optional[Mapping[str, Any]]
Sort = Optional[Sequence[Tuple[str, int]]]

# ── Collection names ──────────────────────────────────────────────────────
USERS = "users"
CAMPS = "camps"
REGISTRATIONS = "registrations"
PAYMENTS = "payments"
FEEDBACKS = "feedbacks"

COLLECTIONS = (USERS, CAMPS, REGISTRATIONS, PAYMENTS, FEEDBACKS)

# Fields that must be unique within their collection
UNIQUE_KEYS: Dict[str, Tuple[str, ...]] = {
    USERS: ("email",),
    PAYMENTS: ("transaction_id",),
}

ASCENDING = 1
DESCENDING = -1


@dataclass(frozen=True)
class InsertResult:
    inserted_id: str


@dataclass(frozen=True)
class UpdateResult:
    """
    Outcome of update_one().

    Attributes:
        matched_count:  1 if an existing document matched the filter
        modified_count: 1 if the matched document actually changed
        upserted_id:    id of the document created by an upsert, else None
        document:       the document after the update (None if nothing matched
                        and no upsert happened)
    """
    matched_count: int
    modified_count: int
    upserted_id: Optional[str] = None
    document: Optional[Document] = None


@dataclass(frozen=True)
class DeleteResult:
    deleted_count: int


class DocumentStore(ABC):
    """
    Abstract interface for a collection-oriented document store.

    Implementations:
        - SQLDocumentStore:    production store over SQLAlchemy async
        - MemoryDocumentStore: in-memory fake with identical semantics
    """

    @abstractmethod
    async def find(
        self, collection: str, filter: Filter = None, sort: Sort = None
    ) -> List[Document]:
        """Return every document matching `filter`, optionally sorted."""
        ...

    @abstractmethod
    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        """Return the first document matching `filter`, or None."""
        ...

    @abstractmethod
    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> InsertResult:
        """
        Insert one document. An `id` is generated when the document has none.

        Raises:
            DuplicateKeyError: a UNIQUE_KEYS field already holds this value
        """
        ...

    @abstractmethod
    async def update_one(
        self,
        collection: str,
        filter: Filter,
        set_values: Optional[Mapping[str, Any]] = None,
        inc: Optional[Mapping[str, int]] = None,
        upsert: bool = False,
    ) -> UpdateResult:
        """
        Update the first document matching `filter`.

        Args:
            set_values: fields to overwrite
            inc:        fields to increment atomically by a signed delta
            upsert:     insert filter + set_values + inc when nothing matches
        """
        ...

    @abstractmethod
    async def delete_one(self, collection: str, filter: Filter) -> DeleteResult:
        ...

    @abstractmethod
    async def delete_many(self, collection: str, filter: Filter) -> DeleteResult:
        ...

    @abstractmethod
    async def count(self, collection: str, filter: Filter = None) -> int:
        ...

    @abstractmethod
    async def sum(self, collection: str, field: str, filter: Filter = None) -> float:
        """Sum `field` over matching documents. Returns 0 when nothing matches."""
        ...

    @abstractmethod
    async def ping(self) -> bool:
        """Lightweight connectivity check for the health endpoint."""
        ...

    async def close(self) -> None:
        """Release backend resources. No-op by default."""
        return None
