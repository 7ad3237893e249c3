"""
MedCamp Backend — Custom Exception Hierarchy
==============================================

What:  Application-specific exceptions for the error scenarios of the API.
How:   Each exception class carries a message and optional context dict.
       Global exception handlers (registered in main.py) catch these and
       return structured JSON error responses with correct HTTP status codes.
Who:   Raised by services and the store adapters; caught by global handlers.

Exception Hierarchy:
    MedCampError (base)
    ├── ValidationError              → 400 Bad Request
    │   └── InvalidTransitionError   → 400 Bad Request
    ├── NotFoundError                → 404 Not Found
    ├── ConflictError                → 409 Conflict
    ├── UpstreamError                → 500 Internal Server Error
    │   ├── StoreError
    │   │   └── DuplicateKeyError
    │   └── PaymentProviderError
    └── CircuitBreakerOpenError      → 503 Service Unavailable
"""

from typing import Any, Dict, Optional


class MedCampError(Exception):
    """
    Base exception for all MedCamp application errors.

    Attributes:
        message:  User-facing error description (safe to return in API response)
        context:  Additional debug info (logged but NOT returned to client
                  for upstream failures)
    """

    def __init__(
        self,
        message: str = "An unexpected error occurred",
        context: Optional[Dict[str, Any]] = None,
    ):
        self.message = message
        self.context = context or {}
        super().__init__(self.message)


class ValidationError(MedCampError):
    """
    Raised when client input fails validation.

    When:    Missing required camp/payment fields, malformed values,
             empty profile patches.
    HTTP:    400 Bad Request
    """

    def __init__(
        self,
        message: str = "Validation failed",
        field: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        if field:
            ctx["field"] = field
        super().__init__(message=message, context=ctx)
        self.field = field


class InvalidTransitionError(ValidationError):
    """
    Raised when a registration status change is not an edge of the
    lifecycle transition table (e.g. confirmed → pending).
    """

    def __init__(
        self,
        current: str,
        requested: str,
        reason: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"Cannot change confirmation status from '{current}' to '{requested}'"
        if reason:
            message = f"{message}: {reason}"
        ctx = context or {}
        ctx.update({"current": current, "requested": requested})
        super().__init__(message=message, field="confirmationStatus", context=ctx)
        self.current = current
        self.requested = requested


class NotFoundError(MedCampError):
    """
    Raised when a referenced entity does not exist.

    HTTP:    404 Not Found
    """

    def __init__(
        self,
        resource: str = "resource",
        resource_id: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = f"The requested {resource} was not found"
        if resource_id:
            message = f"{resource.capitalize()} '{resource_id}' was not found"
        ctx = context or {}
        ctx["resource"] = resource
        if resource_id:
            ctx["resource_id"] = resource_id
        super().__init__(message=message, context=ctx)
        self.resource = resource
        self.resource_id = resource_id


class ConflictError(MedCampError):
    """
    Raised when a write would duplicate an existing entity.

    When:    Creating a user whose email already exists, registering twice
             for the same camp, paying an already-paid registration under a
             different transaction.
    HTTP:    409 Conflict
    """

    def __init__(
        self,
        message: str = "Resource already exists",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class UpstreamError(MedCampError):
    """
    Raised when the document store or an external service fails.

    HTTP:    500 Internal Server Error

    The client only ever sees `message` plus an opaque error code; the
    original exception type and details live in `context` and the logs.
    Callers may retry.
    """

    def __init__(
        self,
        message: str = "An upstream service failed. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class StoreError(UpstreamError):
    """Raised by DocumentStore implementations when an operation fails."""

    def __init__(
        self,
        message: str = "A database error occurred. Please try again later.",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class DuplicateKeyError(StoreError):
    """
    Raised by DocumentStore.insert_one when a unique key already exists.

    Services translate this into ConflictError or treat it as an
    idempotent replay, depending on the collection.
    """

    def __init__(
        self,
        collection: str,
        key: str,
        value: Any = None,
        context: Optional[Dict[str, Any]] = None,
    ):
        ctx = context or {}
        ctx.update({"collection": collection, "key": key})
        super().__init__(
            message=f"Duplicate value for unique key '{key}' in '{collection}'",
            context=ctx,
        )
        self.collection = collection
        self.key = key
        self.value = value


class PaymentProviderError(UpstreamError):
    """
    Raised when the payment-intent provider (Stripe) fails after retries.
    """

    def __init__(
        self,
        message: str = "Failed to create payment intent",
        context: Optional[Dict[str, Any]] = None,
    ):
        super().__init__(message=message, context=context)


class CircuitBreakerOpenError(MedCampError):
    """
    Raised when the payment-provider circuit breaker is OPEN.

    HTTP:    503 Service Unavailable (with Retry-After)
    """

    def __init__(
        self,
        recovery_time: int = 60,
        context: Optional[Dict[str, Any]] = None,
    ):
        message = (
            "Payment service is temporarily unavailable due to repeated failures. "
            f"Please retry in approximately {recovery_time} seconds."
        )
        ctx = context or {}
        ctx["recovery_time"] = recovery_time
        super().__init__(message=message, context=ctx)
        self.recovery_time = recovery_time
