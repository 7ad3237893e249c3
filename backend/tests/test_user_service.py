"""
MedCamp Backend — User Directory Tests
=======================================
"""

import pytest

from medcamp.exceptions import ConflictError, NotFoundError, ValidationError


class TestUserDirectory:

    @pytest.mark.asyncio
    async def test_create_normalises_email_and_defaults_role(self, user_directory):
        user = await user_directory.create({"email": "  Ana@Example.ORG ", "name": "Ana"})

        assert user["email"] == "ana@example.org"
        assert user["role"] == "user"
        assert user["last_log_in"] is not None

    @pytest.mark.asyncio
    async def test_duplicate_email_in_any_case_conflicts(self, user_directory):
        await user_directory.create({"email": "ana@example.org"})

        with pytest.raises(ConflictError):
            await user_directory.create({"email": "ANA@example.org"})

    @pytest.mark.asyncio
    async def test_lookup_is_case_insensitive(self, user_directory):
        await user_directory.create({"email": "ana@example.org"})

        assert (await user_directory.get("Ana@Example.org"))["email"] == "ana@example.org"

    @pytest.mark.asyncio
    async def test_role_of_unknown_user_defaults(self, user_directory):
        assert await user_directory.get_role("nobody@example.org") == "user"

    @pytest.mark.asyncio
    async def test_update_profile(self, user_directory):
        await user_directory.create({"email": "ana@example.org", "name": "Ana"})

        user, modified = await user_directory.update_profile("ana@example.org", {"phone": "555-0100"})

        assert modified is True
        assert user["phone"] == "555-0100"

        _, modified_again = await user_directory.update_profile("ana@example.org", {"phone": "555-0100"})
        assert modified_again is False

    @pytest.mark.asyncio
    async def test_role_is_not_a_profile_field(self, user_directory):
        await user_directory.create({"email": "ana@example.org"})

        with pytest.raises(ValidationError):
            await user_directory.update_profile("ana@example.org", {"role": "organizer"})

    @pytest.mark.asyncio
    async def test_update_by_id_unknown_user(self, user_directory):
        with pytest.raises(NotFoundError):
            await user_directory.update_by_id("missing", {"name": "X"})

    @pytest.mark.asyncio
    async def test_promotion_overwrites_existing_role(self, user_directory, memory_store):
        user = await user_directory.create({"email": "org@example.org"})
        await memory_store.update_one("users", {"id": user["id"]}, set_values={"role": "organizer"})

        assert await user_directory.promote_to_participant("org@example.org") is True
        assert await user_directory.get_role("org@example.org") == "participant"

    @pytest.mark.asyncio
    async def test_promotion_of_missing_user_returns_false(self, user_directory):
        assert await user_directory.promote_to_participant("ghost@example.org") is False
