"""
MedCamp Backend — Test Configuration (conftest.py)
====================================================

Fixture Hierarchy:
    Function-scoped (fresh for each test):
    ├── memory_store:        empty MemoryDocumentStore
    ├── camp_registry / user_directory / ledger / lifecycle
    │                        services wired over memory_store
    ├── health_camp:         a camp titled "Health Camp", fee 50
    ├── fake_payment_intents: PaymentIntentService double (no network)
    └── test_client:         HTTPX AsyncClient over create_app(memory_store)
"""

import os

# Must run before any medcamp import: settings are read at import time
os.environ["DATABASE_URL"] = "sqlite+aiosqlite:///:memory:"
os.environ["STORE_BACKEND"] = "memory"
os.environ["STRIPE_SECRET_KEY"] = "sk_test_not_real"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["RETRY_MIN_WAIT"] = "0"
os.environ["RETRY_MAX_WAIT"] = "1"

from typing import List, Optional, Tuple

import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient

from medcamp.services.camp_service import CampRegistry
from medcamp.services.payment_intent_base import PaymentIntentService
from medcamp.services.payment_service import PaymentLedger
from medcamp.services.registration_service import RegistrationLifecycle
from medcamp.services.user_service import UserDirectory
from medcamp.store import MemoryDocumentStore


class FakePaymentIntents(PaymentIntentService):
    """Records every call and returns a deterministic client secret."""

    def __init__(self):
        self.calls: List[Tuple[int, Optional[str]]] = []

    @property
    def circuit_state(self) -> str:
        return "closed"

    async def create_intent(self, amount: int, currency: Optional[str] = None) -> str:
        self.calls.append((amount, currency))
        return f"pi_test_{amount}_secret"


@pytest.fixture
def memory_store():
    return MemoryDocumentStore()


@pytest.fixture
def camp_registry(memory_store):
    return CampRegistry(memory_store)


@pytest.fixture
def user_directory(memory_store):
    return UserDirectory(memory_store)


@pytest.fixture
def ledger(memory_store):
    return PaymentLedger(memory_store)


@pytest.fixture
def lifecycle(memory_store, camp_registry, ledger, user_directory):
    return RegistrationLifecycle(memory_store, camp_registry, ledger, user_directory)


@pytest.fixture
def camp_data():
    return {
        "title": "Health Camp",
        "date": "2026-11-02",
        "time": "09:00",
        "location": "Community Hall",
        "fee": 50.0,
        "healthcare_professional": "Dr. Rahman",
        "images": ["https://img.example/health-camp.jpg"],
    }


@pytest_asyncio.fixture
async def health_camp(camp_registry, camp_data):
    return await camp_registry.create(camp_data)


@pytest.fixture
def fake_payment_intents():
    return FakePaymentIntents()


@pytest_asyncio.fixture
async def test_client(memory_store, fake_payment_intents):
    """
    HTTPX AsyncClient routed straight into a freshly built app.

    Usage:
        async def test_health(test_client):
            response = await test_client.get("/health")
            assert response.status_code == 200
    """
    from medcamp.main import create_app

    app = create_app(store=memory_store, payment_intents=fake_payment_intents)
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
