"""
MedCamp Backend — FastAPI Application Factory
===============================================

What:  Creates and configures the FastAPI application instance.
How:   create_app() wires the service graph, middleware, exception handlers
       and routers. uvicorn serves the module-level `app`
       (uvicorn medcamp.main:app).

Application Architecture:
    ┌──────────────────────────────────────────────────────────┐
    │                      FastAPI App                         │
    │  Middleware:  RequestContext → GZip → CORS               │
    │                                                          │
    │  Routes:  /users  /camps  /registrations  /payments      │
    │           /create-payment-intent  /feedbacks             │
    │           /analytics  /health  /                         │
    │                                                          │
    │  Exception Handlers:                                     │
    │   Validation→400 │ NotFound→404 │ Conflict→409           │
    │   Upstream→500   │ CircuitBreakerOpen→503                │
    └──────────────────────────────────────────────────────────┘

Services are built in create_app() rather than in the lifespan, so an app
driven without lifespan events (httpx ASGITransport in tests) is fully
wired.
"""

import logging
import sys
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.middleware.gzip import GZipMiddleware
from fastapi.responses import JSONResponse

from medcamp import __version__
from medcamp.config import settings
from medcamp.database import create_tables, dispose_engine
from medcamp.dependencies import build_services
from medcamp.exceptions import (
    CircuitBreakerOpenError,
    ConflictError,
    MedCampError,
    NotFoundError,
    PaymentProviderError,
    UpstreamError,
    ValidationError,
)
from medcamp.middleware.request_context import RequestContextMiddleware, request_id_var
from medcamp.routes import analytics, camps, feedbacks, health, payments, registrations, users
from medcamp.services.payment_intent_base import PaymentIntentService
from medcamp.store import DocumentStore

logger = logging.getLogger(__name__)


# ══════════════════════════════════════════════════════════════════════════
# Logging Configuration
# ══════════════════════════════════════════════════════════════════════════

def setup_logging() -> None:
    """Configure the root logger once, at startup."""
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )

    # Third-party libraries log every operation at INFO/DEBUG
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("stripe").setLevel(logging.WARNING)


# ══════════════════════════════════════════════════════════════════════════
# Application Lifespan
# ══════════════════════════════════════════════════════════════════════════

@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
    setup_logging()
    logger.info("=" * 60)
    logger.info("MedCamp Backend starting up (store=%s)...", settings.store_backend)

    try:
        settings.validate_required_for_production()
    except ValueError as e:
        # Keep serving: everything except payment intents still works
        logger.error("Configuration error: %s", str(e))

    if settings.store_backend == "sql" and settings.db_create_tables:
        await create_tables()
        logger.info("Database tables ensured")

    logger.info("Server ready at http://%s:%d", settings.backend_host, settings.backend_port)
    logger.info("=" * 60)

    yield

    logger.info("MedCamp Backend shutting down...")
    await app.state.services.store.close()
    await dispose_engine()
    logger.info("Shutdown complete.")


# ══════════════════════════════════════════════════════════════════════════
# Exception Handlers
# ══════════════════════════════════════════════════════════════════════════

def _error(status_code: int, error: str, message: str, details=None, headers=None) -> JSONResponse:
    content = {"error": error, "message": message, "request_id": request_id_var.get("")}
    if details:
        content["details"] = details
    return JSONResponse(status_code=status_code, content=content, headers=headers)


def register_exception_handlers(app: FastAPI) -> None:
    """
    Map the MedCampError hierarchy to HTTP responses.

    Handler hierarchy:
        ValidationError / InvalidTransitionError → 400
        RequestValidationError (schema)          → 400
        NotFoundError                            → 404
        ConflictError                            → 409
        CircuitBreakerOpenError                  → 503 + Retry-After
        UpstreamError (store, payment provider)  → 500, details logged only
        MedCampError / Exception                 → 500
    """

    @app.exception_handler(ValidationError)
    async def handle_validation_error(request: Request, exc: ValidationError):
        logger.warning("[%s] Validation error: %s", request_id_var.get(""), exc.message)
        return _error(400, "validation_error", exc.message, exc.context)

    @app.exception_handler(RequestValidationError)
    async def handle_request_validation(request: Request, exc: RequestValidationError):
        errors = [
            {"field": ".".join(str(p) for p in e.get("loc", ())[1:]), "message": e.get("msg")}
            for e in exc.errors()
        ]
        logger.warning("[%s] Request validation failed: %s", request_id_var.get(""), errors)
        return _error(400, "validation_error", "Invalid request body", {"errors": errors})

    @app.exception_handler(NotFoundError)
    async def handle_not_found(request: Request, exc: NotFoundError):
        return _error(404, "not_found", exc.message)

    @app.exception_handler(ConflictError)
    async def handle_conflict(request: Request, exc: ConflictError):
        logger.info("[%s] Conflict: %s", request_id_var.get(""), exc.message)
        return _error(409, "conflict", exc.message)

    @app.exception_handler(CircuitBreakerOpenError)
    async def handle_circuit_breaker(request: Request, exc: CircuitBreakerOpenError):
        logger.warning("[%s] Circuit breaker open: %s", request_id_var.get(""), exc.message)
        return _error(
            503,
            "service_unavailable",
            exc.message,
            {"recovery_time": exc.recovery_time},
            headers={"Retry-After": str(exc.recovery_time)},
        )

    @app.exception_handler(UpstreamError)
    async def handle_upstream_error(request: Request, exc: UpstreamError):
        # Context may hold driver messages; it is logged, never returned
        logger.error(
            "[%s] %s: %s | Context: %s",
            request_id_var.get(""), type(exc).__name__, exc.message, exc.context,
        )
        code = "payment_provider_error" if isinstance(exc, PaymentProviderError) else "server_error"
        details = {"retryable": True} if exc.context.get("retryable") else None
        return _error(500, code, exc.message, details)

    @app.exception_handler(MedCampError)
    async def handle_medcamp_error(request: Request, exc: MedCampError):
        logger.error("[%s] Unhandled application error: %s", request_id_var.get(""), exc.message)
        return _error(500, "server_error", "An internal error occurred. Please try again later.")

    @app.exception_handler(Exception)
    async def handle_unexpected_error(request: Request, exc: Exception):
        logger.error("[%s] Unexpected error: %s", request_id_var.get(""), str(exc), exc_info=True)
        return _error(
            500,
            "internal_server_error",
            "An unexpected error occurred. Please try again or contact support.",
        )


# ══════════════════════════════════════════════════════════════════════════
# Application Factory
# ══════════════════════════════════════════════════════════════════════════

def create_app(
    store: Optional[DocumentStore] = None,
    payment_intents: Optional[PaymentIntentService] = None,
) -> FastAPI:
    """
    Build a configured application.

    Args:
        store:           document store to use; STORE_BACKEND decides when omitted
        payment_intents: payment-intent provider; Stripe when omitted
    """
    app = FastAPI(
        title="MedCamp API",
        description=(
            "Medical camp management: camps, participant registrations, "
            "payments, feedback and organizer analytics."
        ),
        version=__version__,
        docs_url="/docs",
        redoc_url="/redoc",
        openapi_url="/openapi.json",
        lifespan=lifespan,
    )
    app.state.services = build_services(store=store, payment_intents=payment_intents)

    # Last added runs first: RequestContext → GZip → CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins_list,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
        expose_headers=["X-Request-ID", "Retry-After"],
    )
    app.add_middleware(GZipMiddleware, minimum_size=500)
    app.add_middleware(RequestContextMiddleware)

    register_exception_handlers(app)

    app.include_router(health.router)
    app.include_router(users.router)
    app.include_router(camps.router)
    app.include_router(registrations.router)
    app.include_router(payments.router)
    app.include_router(feedbacks.router)
    app.include_router(analytics.router)

    return app


app = create_app()
