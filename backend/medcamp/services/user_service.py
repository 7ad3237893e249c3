"""
MedCamp Backend — User Directory
==================================

What:  Owns user identity and role documents.

Email handling:
    Every email is lowercased and stripped before it is written or used in
    a filter, so lookups are case-insensitive without regex queries and the
    unique index on users.email rejects case variants.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional

from medcamp.exceptions import ConflictError, DuplicateKeyError, NotFoundError, ValidationError
from medcamp.store import USERS, DocumentStore
from medcamp.store.base import Document

logger = logging.getLogger(__name__)

ROLES = ("user", "organizer", "participant")
DEFAULT_ROLE = "user"
PROFILE_FIELDS = ("name", "photo", "phone")


def normalize_email(email: Optional[str]) -> str:
    return (email or "").strip().lower()


class UserDirectory:
    """User CRUD and role promotion."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def create(self, user: Mapping[str, Any]) -> Document:
        """
        Insert a new user with role 'user'.

        Raises:
            ValidationError: email missing
            ConflictError:   a user with this email (any case) exists
        """
        email = normalize_email(user.get("email"))
        if not email:
            raise ValidationError(message="Email is required", field="email")

        if await self.store.find_one(USERS, {"email": email}) is not None:
            raise ConflictError(message="User already exists", context={"email": email})

        now = datetime.now(timezone.utc)
        document = {k: user.get(k) for k in PROFILE_FIELDS if user.get(k) is not None}
        document.update(email=email, role=DEFAULT_ROLE, created_at=now, last_log_in=now)
        try:
            result = await self.store.insert_one(USERS, document)
        except DuplicateKeyError:
            # Lost a race with a concurrent create for the same email
            raise ConflictError(message="User already exists", context={"email": email})

        logger.info("User created: %s", email)
        return {**document, "id": result.inserted_id}

    async def list(self) -> List[Document]:
        return await self.store.find(USERS)

    async def get(self, email: str) -> Document:
        user = await self.store.find_one(USERS, {"email": normalize_email(email)})
        if user is None:
            raise NotFoundError(resource="user", resource_id=email)
        return user

    async def get_by_id(self, user_id: str) -> Document:
        user = await self.store.find_one(USERS, {"id": user_id})
        if user is None:
            raise NotFoundError(resource="user", resource_id=user_id)
        return user

    async def get_role(self, email: str) -> str:
        user = await self.store.find_one(USERS, {"email": normalize_email(email)})
        return (user or {}).get("role") or DEFAULT_ROLE

    def _profile_patch(self, patch: Mapping[str, Any]) -> dict:
        values = {k: patch[k] for k in PROFILE_FIELDS if patch.get(k)}
        if not values:
            raise ValidationError(message="No update data provided")
        return values

    async def update_profile(self, email: str, patch: Mapping[str, Any]) -> tuple:
        """
        Update name/photo/phone of the user with this email.

        Returns:
            (updated user document, whether anything changed)
        """
        values = self._profile_patch(patch)
        result = await self.store.update_one(
            USERS, {"email": normalize_email(email)}, set_values=values,
        )
        if not result.matched_count:
            raise NotFoundError(resource="user", resource_id=email)
        return result.document, bool(result.modified_count)

    async def update_by_id(self, user_id: str, patch: Mapping[str, Any]) -> tuple:
        values = self._profile_patch(patch)
        result = await self.store.update_one(USERS, {"id": user_id}, set_values=values)
        if not result.matched_count:
            raise NotFoundError(resource="user", resource_id=user_id)
        return result.document, bool(result.modified_count)

    async def promote_to_participant(self, email: str) -> bool:
        """
        Set the role of the user with this email to 'participant'.

        The overwrite is unconditional, including for organizers.

        Returns:
            True if a user was updated, False if no user matched (a warning
            is logged; this is never an error for the caller).

        Raises:
            StoreError: the store update itself failed
        """
        normalized = normalize_email(email)
        result = await self.store.update_one(
            USERS, {"email": normalized}, set_values={"role": "participant"},
        )
        if not result.matched_count:
            logger.warning("Role promotion skipped: no user with email %s", normalized)
            return False
        if result.modified_count:
            logger.info("User %s promoted to participant", normalized)
        return True
