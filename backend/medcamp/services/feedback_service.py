"""
MedCamp Backend — Feedback Store
==================================

Read-mostly participant feedback, independent of the registration lifecycle.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from medcamp.exceptions import ValidationError
from medcamp.services.user_service import normalize_email
from medcamp.store import FEEDBACKS, DocumentStore
from medcamp.store.base import DESCENDING, Document

logger = logging.getLogger(__name__)


class FeedbackStore:

    def __init__(self, store: DocumentStore):
        self.store = store

    async def list(self, camp_id: Optional[str] = None) -> List[Document]:
        filter = {"camp_id": camp_id} if camp_id else None
        return await self.store.find(FEEDBACKS, filter, sort=[("created_at", DESCENDING)])

    async def create(self, feedback: Mapping[str, Any]) -> Document:
        if not feedback.get("camp_id"):
            raise ValidationError(message="Camp ID is required", field="camp_id")
        rating = feedback.get("rating")
        if not isinstance(rating, int) or not 1 <= rating <= 5:
            raise ValidationError(message="Rating must be an integer from 1 to 5", field="rating")

        document = dict(feedback)
        if document.get("participant_email"):
            document["participant_email"] = normalize_email(document["participant_email"])
        document["created_at"] = datetime.now(timezone.utc)

        result = await self.store.insert_one(FEEDBACKS, document)
        logger.info("Feedback %s added for camp %s", result.inserted_id, document["camp_id"])
        return {**document, "id": result.inserted_id}
