"""
MedCamp Backend — Abstract Payment-Intent Service Interface
=============================================================

What:  Contract for the external card-payment provider.
How:   Concrete implementations inherit from PaymentIntentService and
       implement create_intent(). The route handler depends only on this
       interface; tests substitute a fake.

Contract:
    - create_intent() accepts an amount in the currency's minor unit
      (cents for USD) and returns the client secret the browser uses to
      confirm the card payment.
    - Implementations handle their own retries and translate provider
      errors into PaymentProviderError / CircuitBreakerOpenError.
"""

from abc import ABC, abstractmethod
from typing import Optional


class PaymentIntentService(ABC):
    """Abstract interface for creating card payment intents."""

    @abstractmethod
    async def create_intent(self, amount: int, currency: Optional[str] = None) -> str:
        """
        Create a payment intent for `amount` minor units.

        Returns:
            The intent's client secret.

        Raises:
            ValidationError:         amount is not a positive integer
            PaymentProviderError:    provider failed after retries
            CircuitBreakerOpenError: provider disabled after repeated failures
        """
        ...

    @property
    @abstractmethod
    def circuit_state(self) -> str:
        """closed, open or half_open; reported by the health endpoint."""
        ...
