"""
MedCamp Backend — Camp Registry
=================================

What:  Owns camp documents and their derived `participant_count`.
Who:   Called by the camps routes and by RegistrationLifecycle.

Counter rules:
    - create() writes participant_count = 0 itself; callers cannot seed it.
    - adjust_participant_count() is a single atomic increment on the store.
      It never reads-then-writes and never clamps; keeping the value
      non-negative is the lifecycle's job (it reconciles on a negative
      result).
    - reconcile_participant_count() recomputes the exact value from the
      registrations collection and clears `orphaned` flags.
"""

import logging
from datetime import datetime, timezone
from typing import Any, Dict, List, Mapping, Optional

from medcamp.exceptions import MedCampError, NotFoundError, ValidationError
from medcamp.store import CAMPS, REGISTRATIONS, DocumentStore
from medcamp.store.base import DESCENDING, Document

logger = logging.getLogger(__name__)

# Fields owned by the registry; never accepted from a client patch
PROTECTED_FIELDS = frozenset({"id", "participant_count", "created_at"})


class CampRegistry:
    """Camp CRUD plus the participant counter primitives."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create(self, camp: Mapping[str, Any]) -> Document:
        """
        Validate and insert a new camp.

        Raises:
            ValidationError: title, date or time empty, or no image supplied
        """
        missing = [field for field in ("title", "date", "time") if not camp.get(field)]
        if not camp.get("images"):
            missing.append("images")
        if missing:
            raise ValidationError(
                message="Missing required fields",
                field=missing[0],
                context={"missing": missing},
            )

        document = {k: v for k, v in camp.items() if k not in PROTECTED_FIELDS}
        document["participant_count"] = 0
        document["created_at"] = datetime.now(timezone.utc)

        result = await self.store.insert_one(CAMPS, document)
        logger.info("Camp created: %s (%s)", result.inserted_id, document["title"])
        return {**document, "id": result.inserted_id}

    async def get(self, camp_id: str) -> Document:
        camp = await self.store.find_one(CAMPS, {"id": camp_id})
        if camp is None:
            raise NotFoundError(resource="camp", resource_id=camp_id)
        return camp

    async def list(self) -> List[Document]:
        return await self.store.find(CAMPS, sort=[("created_at", DESCENDING)])

    async def update(self, camp_id: str, patch: Mapping[str, Any]) -> Dict[str, Any]:
        """
        Overwrite the given fields, inserting the camp when it does not exist.

        Returns:
            {"matched": bool, "modified": bool, "upserted_id": str | None,
             "camp": <document after the update>}
        """
        values = {k: v for k, v in patch.items() if k not in PROTECTED_FIELDS}
        if not values:
            raise ValidationError(message="No update data provided")
        if "images" in values and not values["images"]:
            raise ValidationError(message="At least one image is required", field="images")

        result = await self.store.update_one(
            CAMPS, {"id": camp_id}, set_values=values, upsert=True,
        )
        if result.upserted_id:
            # An upserted camp starts with a zero counter like a created one
            upserted = await self.store.update_one(
                CAMPS,
                {"id": result.upserted_id},
                set_values={
                    "participant_count": 0,
                    "created_at": datetime.now(timezone.utc),
                },
            )
            logger.info("Camp %s did not exist; inserted by update", camp_id)
            return {
                "matched": False,
                "modified": False,
                "upserted_id": result.upserted_id,
                "camp": upserted.document,
            }

        return {
            "matched": bool(result.matched_count),
            "modified": bool(result.modified_count),
            "upserted_id": None,
            "camp": result.document,
        }

    async def delete(self, camp_id: str) -> Optional[int]:
        """
        Delete a camp, then every registration that references it.

        The two deletes are independent. If the cascade fails, the camp is
        still gone; the failure is logged and None is returned in place of
        the number of registrations removed.

        Raises:
            NotFoundError: no camp with this id
        """
        result = await self.store.delete_one(CAMPS, {"id": camp_id})
        if result.deleted_count == 0:
            raise NotFoundError(resource="camp", resource_id=camp_id)

        try:
            cascade = await self.store.delete_many(REGISTRATIONS, {"camp_id": camp_id})
        except MedCampError as e:
            logger.error(
                "Camp %s deleted but its registrations were not: %s", camp_id, e.message,
            )
            return None

        logger.info(
            "Camp %s deleted with %d registration(s)", camp_id, cascade.deleted_count,
        )
        return cascade.deleted_count

    async def adjust_participant_count(self, camp_id: str, delta: int) -> Optional[int]:
        """
        Atomically add `delta` to the camp's participant_count.

        Returns:
            The new count, or None when the camp does not exist.

        Raises:
            StoreError: the increment could not be applied
        """
        result = await self.store.update_one(
            CAMPS, {"id": camp_id}, inc={"participant_count": delta},
        )
        if not result.matched_count or result.document is None:
            logger.warning("Counter adjustment %+d skipped: camp %s not found", delta, camp_id)
            return None
        return result.document["participant_count"]

    async def reconcile_participant_count(self, camp_id: str) -> Dict[str, int]:
        """
        Recompute participant_count from the registrations collection.

        Registrations of this camp flagged `orphaned` are counted like any
        other and have the flag cleared.

        Returns:
            {"previous": <stored value>, "current": <recomputed value>}
        """
        camp = await self.get(camp_id)
        actual = await self.store.count(REGISTRATIONS, {"camp_id": camp_id})
        await self.store.update_one(
            CAMPS, {"id": camp_id}, set_values={"participant_count": actual},
        )

        orphans = await self.store.find(REGISTRATIONS, {"camp_id": camp_id, "orphaned": True})
        for orphan in orphans:
            await self.store.update_one(
                REGISTRATIONS, {"id": orphan["id"]}, set_values={"orphaned": False},
            )

        previous = camp.get("participant_count") or 0
        if previous != actual or orphans:
            logger.warning(
                "Counter drift on camp %s: stored=%d actual=%d, %d orphan(s) cleared",
                camp_id, previous, actual, len(orphans),
            )
        return {"previous": previous, "current": actual}
