"""
MedCamp Backend — Application Package
=======================================

REST backend for a medical-camp platform: organizers publish camps,
participants register and pay, and the registration lifecycle keeps each
camp's participant count, the payment ledger and user roles consistent.

Architecture Note:

    ┌─────────────────────────────────────┐
    │           Routes (API Layer)        │  ← HTTP concerns only
    ├─────────────────────────────────────┤
    │         Services (Business Logic)   │  ← lifecycle, ledger, registry
    ├─────────────────────────────────────┤
    │       Schemas (API contracts)       │  ← Pydantic, camelCase aliases
    ├─────────────────────────────────────┤
    │   Document Store (Persistence)      │  ← SQL (async SQLAlchemy) or memory
    └─────────────────────────────────────┘
"""

__version__ = "1.0.0"
