"""
MedCamp Backend — Health Check Routes
=======================================

Status levels:
    healthy:   store reachable, payment circuit closed     (HTTP 200)
    degraded:  store reachable, payment circuit not closed (HTTP 200)
    unhealthy: store unreachable                           (HTTP 503)

GET / is the plain-text liveness check kept for existing deployments.
"""

import logging
import time

from fastapi import APIRouter, Depends
from fastapi.responses import JSONResponse, PlainTextResponse

from medcamp import __version__
from medcamp.dependencies import Services, get_services
from medcamp.schemas.common import HealthResponse

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Health"])

_start_time = time.time()


@router.get("/", response_class=PlainTextResponse, summary="Liveness check")
async def root() -> str:
    return "Medical camp server is running"


@router.get(
    "/health",
    response_model=HealthResponse,
    responses={503: {"model": HealthResponse}},
    summary="Service health check",
)
async def health_check(services: Services = Depends(get_services)):
    """Pings the document store and reports the payment provider's circuit state."""
    store_ok = await services.store.ping()
    circuit = services.payment_intents.circuit_state

    if not store_ok:
        overall = "unhealthy"
        logger.warning("Health check: document store unreachable")
    elif circuit != "closed":
        overall = "degraded"
    else:
        overall = "healthy"

    body = HealthResponse(
        status=overall,
        version=__version__,
        store="connected" if store_ok else "disconnected",
        payments=circuit,
        uptime_seconds=round(time.time() - _start_time, 2),
    )
    if not store_ok:
        return JSONResponse(status_code=503, content=body.model_dump())
    return body
