"""
MedCamp Backend — Payment Routes
==================================

Ledger reads and direct inserts, plus payment-intent creation for the
card checkout.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medcamp.dependencies import get_payment_intents, get_payment_ledger
from medcamp.schemas.common import ErrorResponse
from medcamp.schemas.payment import (
    PaymentCreate,
    PaymentInsertResponse,
    PaymentIntentRequest,
    PaymentIntentResponse,
    PaymentResponse,
)
from medcamp.services.payment_intent_base import PaymentIntentService
from medcamp.services.payment_service import PaymentLedger

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Payments"])


@router.get("/payments", response_model=List[PaymentResponse], summary="List payments")
async def list_payments(
    email: Optional[str] = Query(default=None, description="Only this participant's payments"),
    ledger: PaymentLedger = Depends(get_payment_ledger),
) -> List[PaymentResponse]:
    return [PaymentResponse.model_validate(p) for p in await ledger.list(email)]


@router.post(
    "/payments",
    status_code=201,
    response_model=PaymentInsertResponse,
    responses={400: {"description": "transactionId missing", "model": ErrorResponse}},
    summary="Record a payment directly",
)
async def create_payment(
    payload: PaymentCreate,
    ledger: PaymentLedger = Depends(get_payment_ledger),
) -> PaymentInsertResponse:
    payment_id, inserted = await ledger.insert_raw(payload.model_dump(exclude_none=True))
    return PaymentInsertResponse(inserted_id=payment_id, inserted=inserted)


@router.post(
    "/create-payment-intent",
    response_model=PaymentIntentResponse,
    responses={
        400: {"description": "Amount is not a positive integer", "model": ErrorResponse},
        500: {"description": "Payment provider error", "model": ErrorResponse},
        503: {"description": "Payment provider temporarily disabled", "model": ErrorResponse},
    },
    summary="Create a card payment intent",
)
async def create_payment_intent(
    payload: PaymentIntentRequest,
    payment_intents: PaymentIntentService = Depends(get_payment_intents),
) -> PaymentIntentResponse:
    """Amount is in the currency's minor unit; the client secret is returned to the browser."""
    secret = await payment_intents.create_intent(payload.amount, payload.currency)
    return PaymentIntentResponse(client_secret=secret)
