"""
MedCamp Backend — Stripe Payment-Intent Service
=================================================

What:  PaymentIntentService backed by the Stripe SDK.
How:   Runs the blocking SDK call in a worker thread, retries transient
       failures with tenacity, and guards Stripe with a circuit breaker.

Resilience Strategy:
    1. Retry APIConnectionError / RateLimitError with exponential backoff
       and jitter. Card, authentication and request errors are not retried.
    2. One idempotency key per create_intent() call, reused by every retry,
       so Stripe never creates two intents for one request.
    3. Circuit breaker: after cb_failure_threshold consecutive failed calls
       the service rejects immediately for cb_recovery_timeout seconds.
"""

import asyncio
import logging
import time
import uuid
from typing import Optional

import stripe
from tenacity import (
    before_sleep_log,
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential_jitter,
)

from medcamp.config import settings
from medcamp.exceptions import CircuitBreakerOpenError, PaymentProviderError, ValidationError
from medcamp.services.payment_intent_base import PaymentIntentService

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Circuit Breaker
# ══════════════════════════════════════════════════════════════════════════

class CircuitBreaker:
    """
    CLOSED → (threshold consecutive failures) → OPEN
    OPEN   → (recovery_timeout elapsed)       → HALF_OPEN
    HALF_OPEN → success → CLOSED, failure → OPEN

    Not shared across worker processes; each uvicorn worker keeps its own.
    """

    CLOSED = "closed"
    OPEN = "open"
    HALF_OPEN = "half_open"

    def __init__(self, failure_threshold: int = 5, recovery_timeout: int = 60):
        self.failure_threshold = failure_threshold
        self.recovery_timeout = recovery_timeout
        self.failure_count = 0
        self.state = self.CLOSED
        self.opened_at: Optional[float] = None

    def seconds_until_retry(self) -> int:
        if self.state != self.OPEN or self.opened_at is None:
            return 0
        return max(0, int(self.recovery_timeout - (time.monotonic() - self.opened_at)))

    def before_call(self) -> None:
        """
        Raises:
            CircuitBreakerOpenError: circuit is OPEN and still cooling down
        """
        if self.state != self.OPEN:
            return
        if time.monotonic() - (self.opened_at or 0) >= self.recovery_timeout:
            logger.info("Payment circuit breaker HALF_OPEN; allowing a trial call")
            self.state = self.HALF_OPEN
            return
        raise CircuitBreakerOpenError(recovery_time=self.seconds_until_retry())

    def record_success(self) -> None:
        if self.state != self.CLOSED:
            logger.info("Payment circuit breaker CLOSED (provider recovered)")
        self.failure_count = 0
        self.state = self.CLOSED
        self.opened_at = None

    def record_failure(self) -> None:
        self.failure_count += 1
        if self.state == self.HALF_OPEN or self.failure_count >= self.failure_threshold:
            if self.state != self.OPEN:
                logger.warning(
                    "Payment circuit breaker OPEN after %d consecutive failure(s)",
                    self.failure_count,
                )
            self.state = self.OPEN
            self.opened_at = time.monotonic()


# ══════════════════════════════════════════════════════════════════════════
# Stripe Service
# ══════════════════════════════════════════════════════════════════════════

class StripePaymentIntentService(PaymentIntentService):
    """Creates Stripe PaymentIntents for card payments."""

    PAYMENT_METHOD_TYPES = ["card"]

    def __init__(self, api_key: Optional[str] = None, currency: Optional[str] = None):
        self.api_key = api_key if api_key is not None else settings.stripe_secret_key
        self.currency = (currency or settings.payment_currency).lower()
        self.circuit_breaker = CircuitBreaker(
            failure_threshold=settings.cb_failure_threshold,
            recovery_timeout=settings.cb_recovery_timeout,
        )
        logger.info(
            "StripePaymentIntentService initialized (currency=%s, configured=%s)",
            self.currency,
            bool(self.api_key),
        )

    @property
    def circuit_state(self) -> str:
        return self.circuit_breaker.state

    async def create_intent(self, amount: int, currency: Optional[str] = None) -> str:
        if isinstance(amount, bool) or not isinstance(amount, int) or amount <= 0:
            raise ValidationError(
                message="Amount must be a positive integer in the smallest currency unit",
                field="amount",
            )
        if not self.api_key:
            raise PaymentProviderError(
                message="Payment service is not configured",
                context={"reason": "missing STRIPE_SECRET_KEY"},
            )

        self.circuit_breaker.before_call()

        idempotency_key = str(uuid.uuid4())
        currency = (currency or self.currency).lower()
        try:
            intent = await self._create_with_retry(amount, currency, idempotency_key)
        except stripe.StripeError as e:
            self.circuit_breaker.record_failure()
            logger.error(
                "[%s] Stripe payment intent failed: %s (%s)",
                idempotency_key[:8], str(e), type(e).__name__,
            )
            raise PaymentProviderError(
                context={
                    "idempotency_key": idempotency_key,
                    "error_type": type(e).__name__,
                },
            )

        self.circuit_breaker.record_success()
        logger.info(
            "[%s] Payment intent %s created for %d %s",
            idempotency_key[:8], intent.id, amount, currency,
        )
        return intent.client_secret

    @retry(
        retry=retry_if_exception_type((stripe.APIConnectionError, stripe.RateLimitError)),
        stop=stop_after_attempt(settings.retry_max_attempts),
        wait=wait_exponential_jitter(
            initial=settings.retry_min_wait,
            max=settings.retry_max_wait,
            jitter=1,
        ),
        before_sleep=before_sleep_log(logger, logging.WARNING),
        reraise=True,
    )
    async def _create_with_retry(self, amount: int, currency: str, idempotency_key: str):
        start_time = time.perf_counter()
        intent = await asyncio.to_thread(
            stripe.PaymentIntent.create,
            amount=amount,
            currency=currency,
            payment_method_types=self.PAYMENT_METHOD_TYPES,
            api_key=self.api_key,
            idempotency_key=idempotency_key,
        )
        logger.debug(
            "[%s] Stripe responded in %.0fms",
            idempotency_key[:8], (time.perf_counter() - start_time) * 1000,
        )
        return intent
