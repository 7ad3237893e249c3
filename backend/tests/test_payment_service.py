"""
MedCamp Backend — Payment Ledger Tests
========================================

What we test:
    ✅ insert_raw() validation and idempotency per transaction
    ✅ record() and find_by_transaction() agree on the owning registration
    ✅ Listing by participant email and revenue totals
"""

import pytest

from medcamp.exceptions import ValidationError


class TestPaymentLedger:

    @pytest.mark.asyncio
    async def test_insert_raw_requires_transaction_id(self, ledger):
        with pytest.raises(ValidationError):
            await ledger.insert_raw({"amount": 10})

    @pytest.mark.asyncio
    async def test_insert_raw_is_idempotent(self, ledger):
        first_id, inserted = await ledger.insert_raw({"transaction_id": "t1", "amount": 10})
        second_id, inserted_again = await ledger.insert_raw({"transaction_id": "t1", "amount": 10})

        assert inserted is True
        assert inserted_again is False
        assert first_id == second_id
        assert await ledger.total_revenue() == 10

    @pytest.mark.asyncio
    async def test_find_by_transaction_returns_owner(self, ledger):
        payment_id, _ = await ledger.record({"transaction_id": "t1", "registration_id": "r1", "amount": 5})

        found = await ledger.find_by_transaction("t1")

        assert found["id"] == payment_id
        assert found["registration_id"] == "r1"
        assert await ledger.find_by_transaction("t2") is None

    @pytest.mark.asyncio
    async def test_list_by_email(self, ledger):
        await ledger.insert_raw({"transaction_id": "t1", "participant_email": "Ana@example.org"})
        await ledger.insert_raw({"transaction_id": "t2", "participant_email": "ben@example.org"})

        payments = await ledger.list("ana@EXAMPLE.org")

        assert [p["transaction_id"] for p in payments] == ["t1"]

    @pytest.mark.asyncio
    async def test_empty_ledger_revenue_is_zero(self, ledger):
        assert await ledger.total_revenue() == 0
