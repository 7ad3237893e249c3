"""
MedCamp Backend — In-Memory Document Store Tests
==================================================

What we test:
    ✅ Equality filters, multi-key sorting
    ✅ Unique keys raise DuplicateKeyError (insert and update)
    ✅ update_one: set, atomic inc, modified detection, upsert
    ✅ Returned documents are copies
"""

import pytest

from medcamp.exceptions import DuplicateKeyError, StoreError
from medcamp.store import CAMPS, PAYMENTS, USERS
from medcamp.store.base import ASCENDING, DESCENDING


class TestReads:

    @pytest.mark.asyncio
    async def test_find_filters_by_equality(self, memory_store):
        await memory_store.insert_one(CAMPS, {"title": "A", "location": "North"})
        await memory_store.insert_one(CAMPS, {"title": "B", "location": "South"})

        found = await memory_store.find(CAMPS, {"location": "South"})

        assert [c["title"] for c in found] == ["B"]

    @pytest.mark.asyncio
    async def test_find_sorts_by_multiple_keys(self, memory_store):
        for title, fee in [("B", 10), ("A", 10), ("C", 5)]:
            await memory_store.insert_one(CAMPS, {"title": title, "fee": fee})

        found = await memory_store.find(CAMPS, sort=[("fee", DESCENDING), ("title", ASCENDING)])

        assert [c["title"] for c in found] == ["A", "B", "C"]

    @pytest.mark.asyncio
    async def test_returned_documents_are_copies(self, memory_store):
        result = await memory_store.insert_one(CAMPS, {"title": "A", "images": ["x"]})

        doc = await memory_store.find_one(CAMPS, {"id": result.inserted_id})
        doc["images"].append("y")

        again = await memory_store.find_one(CAMPS, {"id": result.inserted_id})
        assert again["images"] == ["x"]

    @pytest.mark.asyncio
    async def test_unknown_collection_raises_store_error(self, memory_store):
        with pytest.raises(StoreError):
            await memory_store.find("nope")

    @pytest.mark.asyncio
    async def test_sum_ignores_missing_values(self, memory_store):
        await memory_store.insert_one(PAYMENTS, {"transaction_id": "t1", "amount": 20})
        await memory_store.insert_one(PAYMENTS, {"transaction_id": "t2", "amount": 30.5})
        await memory_store.insert_one(PAYMENTS, {"transaction_id": "t3"})

        assert await memory_store.sum(PAYMENTS, "amount") == 50.5


class TestUniqueKeys:

    @pytest.mark.asyncio
    async def test_duplicate_insert_raises(self, memory_store):
        await memory_store.insert_one(USERS, {"email": "a@x.org"})

        with pytest.raises(DuplicateKeyError) as exc_info:
            await memory_store.insert_one(USERS, {"email": "a@x.org"})

        assert exc_info.value.key == "email"
        assert await memory_store.count(USERS) == 1

    @pytest.mark.asyncio
    async def test_update_into_existing_key_raises(self, memory_store):
        await memory_store.insert_one(PAYMENTS, {"transaction_id": "t1"})
        second = await memory_store.insert_one(PAYMENTS, {"transaction_id": "t2"})

        with pytest.raises(DuplicateKeyError):
            await memory_store.update_one(
                PAYMENTS, {"id": second.inserted_id}, set_values={"transaction_id": "t1"},
            )


class TestUpdateOne:

    @pytest.mark.asyncio
    async def test_inc_applies_delta(self, memory_store):
        camp = await memory_store.insert_one(CAMPS, {"title": "A", "participant_count": 0})

        await memory_store.update_one(CAMPS, {"id": camp.inserted_id}, inc={"participant_count": 1})
        result = await memory_store.update_one(
            CAMPS, {"id": camp.inserted_id}, inc={"participant_count": 1},
        )

        assert result.document["participant_count"] == 2

    @pytest.mark.asyncio
    async def test_identical_set_is_not_a_modification(self, memory_store):
        camp = await memory_store.insert_one(CAMPS, {"title": "A"})

        result = await memory_store.update_one(CAMPS, {"id": camp.inserted_id}, set_values={"title": "A"})

        assert result.matched_count == 1
        assert result.modified_count == 0

    @pytest.mark.asyncio
    async def test_no_match_without_upsert(self, memory_store):
        result = await memory_store.update_one(CAMPS, {"id": "missing"}, set_values={"title": "A"})

        assert result.matched_count == 0
        assert result.document is None
        assert await memory_store.count(CAMPS) == 0

    @pytest.mark.asyncio
    async def test_upsert_inserts_with_filter_fields(self, memory_store):
        result = await memory_store.update_one(
            CAMPS, {"id": "camp-1"}, set_values={"title": "A"}, upsert=True,
        )

        assert result.upserted_id == "camp-1"
        assert result.document == {"id": "camp-1", "title": "A"}

    @pytest.mark.asyncio
    async def test_delete_one_reports_count(self, memory_store):
        camp = await memory_store.insert_one(CAMPS, {"title": "A"})

        first = await memory_store.delete_one(CAMPS, {"id": camp.inserted_id})
        second = await memory_store.delete_one(CAMPS, {"id": camp.inserted_id})

        assert first.deleted_count == 1
        assert second.deleted_count == 0
