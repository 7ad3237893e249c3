"""
MedCamp Backend — In-Memory Document Store
============================================

What:  DocumentStore backed by per-collection dicts.
Who:   Test suite, and local development with STORE_BACKEND=memory.

Every operation runs without awaiting, so on a single event loop each call
is atomic, matching the per-document guarantee of SQLDocumentStore.
Documents are deep-copied on the way in and out; callers can never mutate
stored state by holding a reference.
"""

import copy
import logging
import uuid
from typing import Any, Dict, List, Mapping, Optional

from medcamp.exceptions import DuplicateKeyError, StoreError
from medcamp.store.base import (
    COLLECTIONS,
    UNIQUE_KEYS,
    DeleteResult,
    Document,
    DocumentStore,
    Filter,
    InsertResult,
    Sort,
    UpdateResult,
)

logger = logging.getLogger(__name__)


def _matches(document: Mapping[str, Any], filter: Filter) -> bool:
    if not filter:
        return True
    return all(document.get(key) == value for key, value in filter.items())


class MemoryDocumentStore(DocumentStore):
    """In-memory document store with the same unique-key rules as SQL."""

    def __init__(self) -> None:
        self._collections: Dict[str, Dict[str, Document]] = {
            name: {} for name in COLLECTIONS
        }

    def _collection(self, name: str) -> Dict[str, Document]:
        try:
            return self._collections[name]
        except KeyError:
            raise StoreError(
                message=f"Unknown collection '{name}'",
                context={"collection": name},
            )

    def _check_unique(self, collection: str, document: Mapping[str, Any], exclude_id: Optional[str] = None) -> None:
        for key in UNIQUE_KEYS.get(collection, ()):
            value = document.get(key)
            if value is None:
                continue
            for doc_id, existing in self._collections[collection].items():
                if doc_id != exclude_id and existing.get(key) == value:
                    raise DuplicateKeyError(collection=collection, key=key, value=value)

    def _first(self, collection: str, filter: Filter) -> Optional[Document]:
        for document in self._collection(collection).values():
            if _matches(document, filter):
                return document
        return None

    async def find(self, collection: str, filter: Filter = None, sort: Sort = None) -> List[Document]:
        results = [
            copy.deepcopy(doc)
            for doc in self._collection(collection).values()
            if _matches(doc, filter)
        ]
        # Apply sort keys last-to-first so the first key dominates
        for field, direction in reversed(list(sort or [])):
            results.sort(
                key=lambda doc: (doc.get(field) is None, doc.get(field)),
                reverse=direction < 0,
            )
        return results

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        document = self._first(collection, filter)
        return copy.deepcopy(document) if document is not None else None

    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> InsertResult:
        docs = self._collection(collection)
        new_doc = copy.deepcopy(dict(document))
        new_doc.setdefault("id", str(uuid.uuid4()))
        if new_doc["id"] in docs:
            raise DuplicateKeyError(collection=collection, key="id", value=new_doc["id"])
        self._check_unique(collection, new_doc)
        docs[new_doc["id"]] = new_doc
        return InsertResult(inserted_id=new_doc["id"])

    async def update_one(
        self,
        collection: str,
        filter: Filter,
        set_values: Optional[Mapping[str, Any]] = None,
        inc: Optional[Mapping[str, int]] = None,
        upsert: bool = False,
    ) -> UpdateResult:
        docs = self._collection(collection)
        current = self._first(collection, filter)

        if current is None:
            if not upsert:
                return UpdateResult(matched_count=0, modified_count=0)
            new_doc: Document = dict(filter or {})
            new_doc.update(copy.deepcopy(dict(set_values or {})))
            for field, delta in (inc or {}).items():
                new_doc[field] = new_doc.get(field, 0) + delta
            result = await self.insert_one(collection, new_doc)
            return UpdateResult(
                matched_count=0,
                modified_count=0,
                upserted_id=result.inserted_id,
                document=copy.deepcopy(docs[result.inserted_id]),
            )

        updated = copy.deepcopy(current)
        updated.update(copy.deepcopy(dict(set_values or {})))
        for field, delta in (inc or {}).items():
            updated[field] = (updated.get(field) or 0) + delta
        self._check_unique(collection, updated, exclude_id=current["id"])

        modified = int(updated != current)
        docs[current["id"]] = updated
        return UpdateResult(
            matched_count=1,
            modified_count=modified,
            document=copy.deepcopy(updated),
        )

    async def delete_one(self, collection: str, filter: Filter) -> DeleteResult:
        document = self._first(collection, filter)
        if document is None:
            return DeleteResult(deleted_count=0)
        del self._collection(collection)[document["id"]]
        return DeleteResult(deleted_count=1)

    async def delete_many(self, collection: str, filter: Filter) -> DeleteResult:
        docs = self._collection(collection)
        doomed = [doc_id for doc_id, doc in docs.items() if _matches(doc, filter)]
        for doc_id in doomed:
            del docs[doc_id]
        return DeleteResult(deleted_count=len(doomed))

    async def count(self, collection: str, filter: Filter = None) -> int:
        return sum(1 for doc in self._collection(collection).values() if _matches(doc, filter))

    async def sum(self, collection: str, field: str, filter: Filter = None) -> float:
        total = 0
        for doc in self._collection(collection).values():
            if _matches(doc, filter) and doc.get(field) is not None:
                total += doc[field]
        return total

    async def ping(self) -> bool:
        return True
