"""
MedCamp Backend — Stripe Payment-Intent Service Tests (Mocked)
================================================================

What we test:
    ✅ Circuit breaker state machine
    ✅ Successful intent creation returns the client secret
    ✅ Transient Stripe errors are retried, permanent ones are not
    ✅ Circuit opens after repeated failures
    ❌ Real Stripe calls
"""

from unittest.mock import MagicMock, patch

import pytest
import stripe

from medcamp.exceptions import CircuitBreakerOpenError, PaymentProviderError, ValidationError
from medcamp.services.stripe_service import CircuitBreaker, StripePaymentIntentService


def _intent(secret="pi_1_secret_abc"):
    return MagicMock(id="pi_1", client_secret=secret)


class TestCircuitBreaker:

    def test_initial_state_is_closed(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        assert cb.state == "closed"
        assert cb.failure_count == 0

    def test_stays_closed_under_threshold(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=60)
        for _ in range(4):
            cb.record_failure()
        assert cb.state == "closed"
        cb.before_call()

    def test_open_circuit_rejects_calls(self):
        cb = CircuitBreaker(failure_threshold=2, recovery_timeout=60)
        cb.record_failure()
        cb.record_failure()

        with pytest.raises(CircuitBreakerOpenError) as exc_info:
            cb.before_call()
        assert exc_info.value.recovery_time <= 60

    def test_half_open_after_recovery_timeout(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        assert cb.state == "open"

        cb.before_call()
        assert cb.state == "half_open"

    def test_failure_while_half_open_reopens(self):
        cb = CircuitBreaker(failure_threshold=5, recovery_timeout=0)
        for _ in range(5):
            cb.record_failure()
        cb.before_call()

        cb.record_failure()
        assert cb.state == "open"

    def test_success_closes_and_resets(self):
        cb = CircuitBreaker(failure_threshold=1, recovery_timeout=0)
        cb.record_failure()
        cb.before_call()

        cb.record_success()
        assert cb.state == "closed"
        assert cb.failure_count == 0


class TestStripePaymentIntentService:

    @pytest.mark.asyncio
    async def test_create_intent_returns_client_secret(self):
        service = StripePaymentIntentService(api_key="sk_test_x", currency="USD")

        with patch("stripe.PaymentIntent.create", return_value=_intent()) as create:
            secret = await service.create_intent(5000)

        assert secret == "pi_1_secret_abc"
        kwargs = create.call_args.kwargs
        assert kwargs["amount"] == 5000
        assert kwargs["currency"] == "usd"
        assert kwargs["payment_method_types"] == ["card"]
        assert kwargs["idempotency_key"]

    @pytest.mark.asyncio
    async def test_connection_error_is_retried_with_same_idempotency_key(self):
        service = StripePaymentIntentService(api_key="sk_test_x")
        side_effect = [stripe.APIConnectionError("network down"), _intent()]

        with patch("stripe.PaymentIntent.create", side_effect=side_effect) as create:
            secret = await service.create_intent(100)

        assert secret == "pi_1_secret_abc"
        assert create.call_count == 2
        keys = {call.kwargs["idempotency_key"] for call in create.call_args_list}
        assert len(keys) == 1
        assert service.circuit_state == "closed"

    @pytest.mark.asyncio
    async def test_authentication_error_is_not_retried(self):
        service = StripePaymentIntentService(api_key="sk_test_x")

        with patch(
            "stripe.PaymentIntent.create",
            side_effect=stripe.AuthenticationError("bad key"),
        ) as create:
            with pytest.raises(PaymentProviderError):
                await service.create_intent(100)

        assert create.call_count == 1
        assert service.circuit_breaker.failure_count == 1

    @pytest.mark.asyncio
    async def test_circuit_opens_after_repeated_failures(self):
        service = StripePaymentIntentService(api_key="sk_test_x")
        service.circuit_breaker = CircuitBreaker(failure_threshold=2, recovery_timeout=60)

        with patch("stripe.PaymentIntent.create", side_effect=stripe.AuthenticationError("bad key")) as create:
            for _ in range(2):
                with pytest.raises(PaymentProviderError):
                    await service.create_intent(100)
            with pytest.raises(CircuitBreakerOpenError):
                await service.create_intent(100)

        assert create.call_count == 2
        assert service.circuit_state == "open"

    @pytest.mark.asyncio
    @pytest.mark.parametrize("amount", [0, -5, True])
    async def test_invalid_amount_rejected(self, amount):
        service = StripePaymentIntentService(api_key="sk_test_x")

        with patch("stripe.PaymentIntent.create") as create:
            with pytest.raises(ValidationError):
                await service.create_intent(amount)

        create.assert_not_called()

    @pytest.mark.asyncio
    async def test_missing_api_key(self):
        service = StripePaymentIntentService(api_key="")

        with pytest.raises(PaymentProviderError):
            await service.create_intent(100)
