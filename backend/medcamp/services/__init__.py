"""
MedCamp Backend — Services Layer
==================================

What:  Business logic between routes (HTTP) and the document store.
How:   Every service receives its DocumentStore (and collaborating services)
       at construction; medcamp.dependencies builds one set per app.

Service Inventory:
    - CampRegistry:          camp CRUD, participant counter, reconciliation
    - RegistrationLifecycle: register / status / payment / delete workflows
    - PaymentLedger:         append-only payment records, revenue sum
    - UserDirectory:         users, roles, participant promotion
    - FeedbackStore:         camp feedback
    - AnalyticsAggregator:   dashboard counters
    - PaymentIntentService (abstract) / StripePaymentIntentService
"""
