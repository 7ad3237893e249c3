"""
MedCamp Backend — Camp Registry Tests
=======================================

What we test:
    ✅ create() validation and zero-initialised counter
    ✅ update() overwrite, no-op and upsert paths
    ✅ delete() cascade, including a failing cascade
    ✅ adjust_participant_count() and reconcile_participant_count()
"""

from unittest.mock import AsyncMock, patch

import pytest

from medcamp.exceptions import NotFoundError, StoreError, ValidationError
from medcamp.store import CAMPS, REGISTRATIONS


class TestCreate:

    @pytest.mark.asyncio
    async def test_create_starts_counter_at_zero(self, camp_registry, camp_data):
        camp = await camp_registry.create({**camp_data, "participant_count": 42})

        assert camp["participant_count"] == 0
        assert camp["created_at"] is not None
        stored = await camp_registry.get(camp["id"])
        assert stored["title"] == "Health Camp"

    @pytest.mark.asyncio
    async def test_create_requires_an_image(self, camp_registry, camp_data):
        with pytest.raises(ValidationError) as exc_info:
            await camp_registry.create({**camp_data, "images": []})

        assert exc_info.value.context["missing"] == ["images"]

    @pytest.mark.asyncio
    async def test_create_reports_every_missing_field(self, camp_registry):
        with pytest.raises(ValidationError) as exc_info:
            await camp_registry.create({"location": "Hall"})

        assert exc_info.value.context["missing"] == ["title", "date", "time", "images"]

    @pytest.mark.asyncio
    async def test_get_unknown_camp(self, camp_registry):
        with pytest.raises(NotFoundError):
            await camp_registry.get("missing")


class TestUpdate:

    @pytest.mark.asyncio
    async def test_update_overwrites_fields(self, camp_registry, health_camp):
        result = await camp_registry.update(health_camp["id"], {"location": "Clinic"})

        assert result["matched"] is True
        assert result["modified"] is True
        assert result["camp"]["location"] == "Clinic"

    @pytest.mark.asyncio
    async def test_update_cannot_touch_counter(self, camp_registry, health_camp):
        with pytest.raises(ValidationError):
            await camp_registry.update(health_camp["id"], {"participant_count": 99})

    @pytest.mark.asyncio
    async def test_identical_update_is_not_modified(self, camp_registry, health_camp):
        result = await camp_registry.update(health_camp["id"], {"title": "Health Camp"})

        assert result["matched"] is True
        assert result["modified"] is False

    @pytest.mark.asyncio
    async def test_update_of_missing_camp_inserts_it(self, camp_registry):
        result = await camp_registry.update("camp-new", {"title": "Eye Camp"})

        assert result["upserted_id"] == "camp-new"
        assert result["camp"]["participant_count"] == 0
        assert (await camp_registry.get("camp-new"))["title"] == "Eye Camp"


class TestDelete:

    @pytest.mark.asyncio
    async def test_delete_cascades_to_registrations(self, camp_registry, memory_store, health_camp):
        for email in ("a@x.org", "b@x.org"):
            await memory_store.insert_one(
                REGISTRATIONS, {"camp_id": health_camp["id"], "participant_email": email},
            )
        await memory_store.insert_one(REGISTRATIONS, {"camp_id": "other", "participant_email": "c@x.org"})

        removed = await camp_registry.delete(health_camp["id"])

        assert removed == 2
        assert await memory_store.count(CAMPS) == 0
        assert await memory_store.count(REGISTRATIONS) == 1

    @pytest.mark.asyncio
    async def test_delete_missing_camp(self, camp_registry):
        with pytest.raises(NotFoundError):
            await camp_registry.delete("missing")

    @pytest.mark.asyncio
    async def test_failed_cascade_still_deletes_camp(self, camp_registry, memory_store, health_camp):
        with patch.object(memory_store, "delete_many", AsyncMock(side_effect=StoreError())):
            removed = await camp_registry.delete(health_camp["id"])

        assert removed is None
        assert await memory_store.count(CAMPS) == 0


class TestCounter:

    @pytest.mark.asyncio
    async def test_adjust_returns_new_count(self, camp_registry, health_camp):
        assert await camp_registry.adjust_participant_count(health_camp["id"], 1) == 1
        assert await camp_registry.adjust_participant_count(health_camp["id"], 1) == 2
        assert await camp_registry.adjust_participant_count(health_camp["id"], -1) == 1

    @pytest.mark.asyncio
    async def test_adjust_missing_camp_returns_none(self, camp_registry):
        assert await camp_registry.adjust_participant_count("missing", 1) is None

    @pytest.mark.asyncio
    async def test_reconcile_repairs_drift_and_clears_orphans(self, camp_registry, memory_store, health_camp):
        camp_id = health_camp["id"]
        await memory_store.insert_one(
            REGISTRATIONS, {"camp_id": camp_id, "participant_email": "a@x.org", "orphaned": True},
        )
        await memory_store.update_one(CAMPS, {"id": camp_id}, set_values={"participant_count": -3})

        result = await camp_registry.reconcile_participant_count(camp_id)

        assert result == {"previous": -3, "current": 1}
        assert (await camp_registry.get(camp_id))["participant_count"] == 1
        assert await memory_store.count(REGISTRATIONS, {"orphaned": True}) == 0
