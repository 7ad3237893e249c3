"""
MedCamp Backend — Service Wiring
==================================

What:  Builds the store and service graph for one application instance and
       exposes each service as a FastAPI dependency.
How:   create_app() calls build_services() once and stores the result on
       app.state.services; route handlers receive services through
       Depends(get_...), which read it back from the request.

Dependency graph:
    DocumentStore
      ├── CampRegistry
      ├── UserDirectory
      ├── PaymentLedger
      ├── FeedbackStore
      ├── AnalyticsAggregator(store, PaymentLedger)
      └── RegistrationLifecycle(store, CampRegistry, PaymentLedger, UserDirectory)
    PaymentIntentService (Stripe unless supplied)
"""

from dataclasses import dataclass
from typing import Optional

from fastapi import Request

from medcamp.config import settings
from medcamp.services.analytics_service import AnalyticsAggregator
from medcamp.services.camp_service import CampRegistry
from medcamp.services.feedback_service import FeedbackStore
from medcamp.services.payment_intent_base import PaymentIntentService
from medcamp.services.payment_service import PaymentLedger
from medcamp.services.registration_service import RegistrationLifecycle
from medcamp.services.user_service import UserDirectory
from medcamp.store import DocumentStore, MemoryDocumentStore


@dataclass
class Services:
    store: DocumentStore
    camps: CampRegistry
    users: UserDirectory
    payments: PaymentLedger
    registrations: RegistrationLifecycle
    feedbacks: FeedbackStore
    analytics: AnalyticsAggregator
    payment_intents: PaymentIntentService


def default_store() -> DocumentStore:
    """Store selected by STORE_BACKEND."""
    if settings.store_backend == "memory":
        return MemoryDocumentStore()
    from medcamp.database import async_session_factory
    from medcamp.store.sql import SQLDocumentStore

    return SQLDocumentStore(async_session_factory)


def build_services(
    store: Optional[DocumentStore] = None,
    payment_intents: Optional[PaymentIntentService] = None,
) -> Services:
    store = store if store is not None else default_store()
    if payment_intents is None:
        from medcamp.services.stripe_service import StripePaymentIntentService

        payment_intents = StripePaymentIntentService()

    camps = CampRegistry(store)
    users = UserDirectory(store)
    payments = PaymentLedger(store)
    return Services(
        store=store,
        camps=camps,
        users=users,
        payments=payments,
        registrations=RegistrationLifecycle(store, camps, payments, users),
        feedbacks=FeedbackStore(store),
        analytics=AnalyticsAggregator(store, payments),
        payment_intents=payment_intents,
    )


# ── FastAPI dependencies ──────────────────────────────────────────────────

def get_services(request: Request) -> Services:
    return request.app.state.services


def get_camp_registry(request: Request) -> CampRegistry:
    return get_services(request).camps


def get_user_directory(request: Request) -> UserDirectory:
    return get_services(request).users


def get_payment_ledger(request: Request) -> PaymentLedger:
    return get_services(request).payments


def get_registration_lifecycle(request: Request) -> RegistrationLifecycle:
    return get_services(request).registrations


def get_feedback_store(request: Request) -> FeedbackStore:
    return get_services(request).feedbacks


def get_analytics(request: Request) -> AnalyticsAggregator:
    return get_services(request).analytics


def get_payment_intents(request: Request) -> PaymentIntentService:
    return get_services(request).payment_intents
