"""
MedCamp Backend — SQLAlchemy Document Store
=============================================

What:  DocumentStore implementation over the async SQLAlchemy ORM models.
How:   Each collection maps to one model (medcamp.models). Every public
       operation opens its own session and commits before returning, so a
       store call is one transaction touching one row (or, for
       delete_many/count/sum, one statement).

Atomic increments:
    update_one(inc={"participant_count": 1}) is executed as
        UPDATE camps SET participant_count = participant_count + 1 WHERE id = :id
    The database applies the delta under its row lock; two concurrent
    registrations can never overwrite each other's increment.

Error translation:
    IntegrityError on a UNIQUE_KEYS column → DuplicateKeyError
    Any other SQLAlchemyError              → StoreError (details in context)
"""

import logging
from typing import Any, Dict, List, Mapping, Optional, Type

from sqlalchemy import delete, func, select, text, update
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from medcamp.database import Base
from medcamp.exceptions import DuplicateKeyError, StoreError
from medcamp.models import Camp, Feedback, Payment, Registration, User
from medcamp.models._columns import new_id
from medcamp.store.base import (
    CAMPS,
    FEEDBACKS,
    PAYMENTS,
    REGISTRATIONS,
    UNIQUE_KEYS,
    USERS,
    DeleteResult,
    Document,
    DocumentStore,
    Filter,
    InsertResult,
    Sort,
    UpdateResult,
)

logger = logging.getLogger(__name__)

MODELS: Dict[str, Type[Base]] = {
    USERS: User,
    CAMPS: Camp,
    REGISTRATIONS: Registration,
    PAYMENTS: Payment,
    FEEDBACKS: Feedback,
}


class SQLDocumentStore(DocumentStore):
    """
    Document store persisting each collection in its own SQL table.

    Args:
        session_factory: async_sessionmaker bound to the application engine
                         (medcamp.database.async_session_factory in production,
                         an aiosqlite-backed factory in tests)
    """

    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self._session_factory = session_factory

    # ── Helpers ───────────────────────────────────────────────────────────

    def _model(self, collection: str) -> Type[Base]:
        try:
            return MODELS[collection]
        except KeyError:
            raise StoreError(
                message=f"Unknown collection '{collection}'",
                context={"collection": collection},
            )

    def _column(self, model: Type[Base], field: str):
        if field not in model.__table__.columns:
            raise StoreError(
                message=f"Unknown field '{field}' for '{model.__tablename__}'",
                context={"collection": model.__tablename__, "field": field},
            )
        return getattr(model, field)

    def _check_fields(self, model: Type[Base], fields) -> None:
        for field in fields:
            self._column(model, field)

    def _where(self, model: Type[Base], filter: Filter) -> list:
        return [self._column(model, key) == value for key, value in (filter or {}).items()]

    @staticmethod
    def _to_document(row: Base) -> Document:
        return {column.key: getattr(row, column.key) for column in row.__table__.columns}

    def _translate(self, collection: str, exc: SQLAlchemyError, operation: str) -> StoreError:
        if isinstance(exc, IntegrityError):
            keys = UNIQUE_KEYS.get(collection)
            if keys:
                return DuplicateKeyError(collection=collection, key=keys[0])
        logger.error(
            "Store %s on '%s' failed: %s", operation, collection, str(exc),
        )
        return StoreError(
            context={
                "collection": collection,
                "operation": operation,
                "error_type": type(exc).__name__,
            },
        )

    # ── Reads ─────────────────────────────────────────────────────────────

    async def find(self, collection: str, filter: Filter = None, sort: Sort = None) -> List[Document]:
        model = self._model(collection)
        query = select(model).where(*self._where(model, filter))
        for field, direction in sort or []:
            column = self._column(model, field)
            query = query.order_by(column.desc() if direction < 0 else column.asc())
        try:
            async with self._session_factory() as session:
                result = await session.execute(query)
                return [self._to_document(row) for row in result.scalars().all()]
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "find")

    async def find_one(self, collection: str, filter: Filter) -> Optional[Document]:
        model = self._model(collection)
        query = select(model).where(*self._where(model, filter)).limit(1)
        try:
            async with self._session_factory() as session:
                row = (await session.execute(query)).scalar_one_or_none()
                return self._to_document(row) if row is not None else None
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "find_one")

    async def count(self, collection: str, filter: Filter = None) -> int:
        model = self._model(collection)
        query = select(func.count()).select_from(model).where(*self._where(model, filter))
        try:
            async with self._session_factory() as session:
                return int((await session.execute(query)).scalar() or 0)
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "count")

    async def sum(self, collection: str, field: str, filter: Filter = None) -> float:
        model = self._model(collection)
        column = self._column(model, field)
        query = select(func.coalesce(func.sum(column), 0)).where(*self._where(model, filter))
        try:
            async with self._session_factory() as session:
                return (await session.execute(query)).scalar() or 0
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "sum")

    # ── Writes ────────────────────────────────────────────────────────────

    async def insert_one(self, collection: str, document: Mapping[str, Any]) -> InsertResult:
        model = self._model(collection)
        values = dict(document)
        self._check_fields(model, values)
        values.setdefault("id", new_id())
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    session.add(model(**values))
            return InsertResult(inserted_id=values["id"])
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "insert_one")

    async def update_one(
        self,
        collection: str,
        filter: Filter,
        set_values: Optional[Mapping[str, Any]] = None,
        inc: Optional[Mapping[str, int]] = None,
        upsert: bool = False,
    ) -> UpdateResult:
        model = self._model(collection)
        set_values = dict(set_values or {})
        inc = dict(inc or {})
        self._check_fields(model, list(set_values) + list(inc))

        try:
            async with self._session_factory() as session:
                async with session.begin():
                    target = (
                        await session.execute(
                            select(model).where(*self._where(model, filter)).limit(1)
                        )
                    ).scalar_one_or_none()

                    if target is None:
                        if not upsert:
                            return UpdateResult(matched_count=0, modified_count=0)
                        values: Dict[str, Any] = dict(filter or {})
                        values.update(set_values)
                        for field, delta in inc.items():
                            values[field] = values.get(field, 0) + delta
                        self._check_fields(model, values)
                        values.setdefault("id", new_id())
                        row = model(**values)
                        session.add(row)
                        await session.flush()
                        return UpdateResult(
                            matched_count=0,
                            modified_count=0,
                            upserted_id=values["id"],
                            document=self._to_document(row),
                        )

                    before = self._to_document(target)
                    statement_values: Dict[str, Any] = dict(set_values)
                    for field, delta in inc.items():
                        column = self._column(model, field)
                        statement_values[field] = column + delta

                    if statement_values:
                        await session.execute(
                            update(model)
                            .where(model.id == before["id"])
                            .values(**statement_values)
                            .execution_options(synchronize_session=False)
                        )

                    await session.refresh(target)
                    after = self._to_document(target)
                    return UpdateResult(
                        matched_count=1,
                        modified_count=int(after != before),
                        document=after,
                    )
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "update_one")

    async def delete_one(self, collection: str, filter: Filter) -> DeleteResult:
        model = self._model(collection)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    target_id = (
                        await session.execute(
                            select(model.id).where(*self._where(model, filter)).limit(1)
                        )
                    ).scalar_one_or_none()
                    if target_id is None:
                        return DeleteResult(deleted_count=0)
                    result = await session.execute(delete(model).where(model.id == target_id))
                    return DeleteResult(deleted_count=result.rowcount or 0)
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "delete_one")

    async def delete_many(self, collection: str, filter: Filter) -> DeleteResult:
        model = self._model(collection)
        try:
            async with self._session_factory() as session:
                async with session.begin():
                    result = await session.execute(
                        delete(model).where(*self._where(model, filter))
                    )
                    return DeleteResult(deleted_count=result.rowcount or 0)
        except SQLAlchemyError as e:
            raise self._translate(collection, e, "delete_many")

    async def ping(self) -> bool:
        try:
            async with self._session_factory() as session:
                await session.execute(text("SELECT 1"))
            return True
        except Exception as e:
            logger.warning("Store ping failed: %s", str(e))
            return False
