"""
MedCamp Backend — Analytics Aggregator
========================================

Dashboard counters computed directly from the store on each request.
"""

from typing import Dict, Union

from medcamp.services.payment_service import PaymentLedger
from medcamp.store import CAMPS, REGISTRATIONS, USERS, DocumentStore


class AnalyticsAggregator:

    def __init__(self, store: DocumentStore, ledger: PaymentLedger):
        self.store = store
        self.ledger = ledger

    async def dashboard(self) -> Dict[str, Union[int, float]]:
        return {
            "total_users": await self.store.count(USERS),
            "total_camps": await self.store.count(CAMPS),
            "total_registrations": await self.store.count(REGISTRATIONS),
            "total_revenue": await self.ledger.total_revenue(),
        }

    async def registered_camps_count(self) -> int:
        return await self.store.count(REGISTRATIONS)
