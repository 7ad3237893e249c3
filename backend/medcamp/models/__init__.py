"""
MedCamp Backend — ORM Models
==============================

One SQLAlchemy model per document-store collection. Importing this package
registers every table on `medcamp.database.Base.metadata`.

Collection → model:
    users          → User
    camps          → Camp
    registrations  → Registration
    payments       → Payment
    feedbacks      → Feedback
"""

from medcamp.models.camp import Camp
from medcamp.models.feedback import Feedback
from medcamp.models.payment import Payment
from medcamp.models.registration import Registration
from medcamp.models.user import User

__all__ = ["Camp", "Feedback", "Payment", "Registration", "User"]
