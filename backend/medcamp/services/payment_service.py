"""
MedCamp Backend — Payment Ledger
==================================

What:  Append-only record of completed payments.
How:   Inserts only. There is no update or delete surface; the unique
       transaction_id makes every insert idempotent per provider
       transaction.
"""

import logging
from datetime import datetime, timezone
from typing import Any, List, Mapping, Optional, Tuple

from medcamp.exceptions import DuplicateKeyError, ValidationError
from medcamp.services.user_service import normalize_email
from medcamp.store import PAYMENTS, DocumentStore
from medcamp.store.base import DESCENDING, Document

logger = logging.getLogger(__name__)


class PaymentLedger:
    """Payment records plus the revenue aggregation used by analytics."""

    def __init__(self, store: DocumentStore):
        self.store = store

    async def find_by_transaction(self, transaction_id: str) -> Optional[Document]:
        return await self.store.find_one(PAYMENTS, {"transaction_id": transaction_id})

    async def record(self, payment: Mapping[str, Any]) -> Tuple[str, bool]:
        """
        Append a payment unless its transaction is already recorded.

        Returns:
            (payment id, inserted) where inserted is False when a payment
            with the same transaction_id already existed.

        Raises:
            StoreError: the insert failed for any other reason
        """
        existing = await self.find_by_transaction(payment["transaction_id"])
        if existing is not None:
            logger.info(
                "Payment for transaction %s already recorded as %s",
                payment["transaction_id"], existing["id"],
            )
            return existing["id"], False

        document = dict(payment)
        document.setdefault("created_at", datetime.now(timezone.utc))
        try:
            result = await self.store.insert_one(PAYMENTS, document)
        except DuplicateKeyError:
            # A concurrent writer recorded the same transaction first
            existing = await self.find_by_transaction(payment["transaction_id"])
            if existing is None:
                raise
            return existing["id"], False

        logger.info(
            "Payment %s recorded: transaction=%s amount=%s",
            result.inserted_id, document["transaction_id"], document.get("amount"),
        )
        return result.inserted_id, True

    async def insert_raw(self, payment: Mapping[str, Any]) -> Tuple[str, bool]:
        """
        Record a payment submitted directly by a client.

        Raises:
            ValidationError: no transaction id supplied
        """
        if not payment.get("transaction_id"):
            raise ValidationError(message="Transaction ID is required", field="transactionId")
        document = dict(payment)
        if document.get("participant_email"):
            document["participant_email"] = normalize_email(document["participant_email"])
        if document.get("amount") is None:
            document["amount"] = 0
        return await self.record(document)

    async def list(self, email: Optional[str] = None) -> List[Document]:
        filter = {"participant_email": normalize_email(email)} if email else None
        return await self.store.find(PAYMENTS, filter, sort=[("created_at", DESCENDING)])

    async def total_revenue(self) -> float:
        """Sum of every recorded amount; 0 when the ledger is empty."""
        return await self.store.sum(PAYMENTS, "amount") or 0
