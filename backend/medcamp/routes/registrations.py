"""
MedCamp Backend — Registration Routes
=======================================

Thin adapters over RegistrationLifecycle. Route order matters: the
/camps/{camp_id} listings are declared before /{registration_id}.
"""

import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medcamp.dependencies import get_registration_lifecycle
from medcamp.schemas.common import ErrorResponse
from medcamp.schemas.registration import (
    PaymentRecordRequest,
    PaymentRecordResponse,
    RegisterResponse,
    RegistrationCreate,
    RegistrationDeleteResponse,
    RegistrationResponse,
    StatusUpdateRequest,
    StatusUpdateResponse,
)
from medcamp.services.registration_service import RegistrationLifecycle

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/registrations", tags=["Registrations"])


@router.get("", response_model=List[RegistrationResponse], summary="List registrations")
async def list_registrations(
    email: Optional[str] = Query(default=None, description="Only this participant's registrations"),
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> List[RegistrationResponse]:
    return [RegistrationResponse.model_validate(r) for r in await lifecycle.list(email)]


@router.get(
    "/camps/{camp_id}",
    response_model=List[RegistrationResponse],
    summary="List registrations for one camp",
)
async def list_camp_registrations(
    camp_id: str,
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> List[RegistrationResponse]:
    return [RegistrationResponse.model_validate(r) for r in await lifecycle.list_for_camp(camp_id)]


# Older clients call the singular form
router.add_api_route(
    "/camp/{camp_id}",
    list_camp_registrations,
    methods=["GET"],
    response_model=List[RegistrationResponse],
    include_in_schema=False,
)


@router.get(
    "/{registration_id}",
    response_model=RegistrationResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a registration by ID",
)
async def get_registration(
    registration_id: str,
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> RegistrationResponse:
    return RegistrationResponse.model_validate(await lifecycle.get(registration_id))


@router.post(
    "",
    status_code=201,
    response_model=RegisterResponse,
    responses={
        404: {"description": "Camp not found", "model": ErrorResponse},
        409: {"description": "Already registered for this camp", "model": ErrorResponse},
    },
    summary="Register a participant for a camp",
)
async def create_registration(
    payload: RegistrationCreate,
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> RegisterResponse:
    details = payload.model_dump(exclude={"camp_id", "participant_email"}, exclude_none=True)
    outcome = await lifecycle.register(payload.camp_id, payload.participant_email, details)
    return RegisterResponse(
        registration_id=outcome.registration_id,
        updated_count=1 if outcome.counter_updated else 0,
        counter_updated=outcome.counter_updated,
        participant_count=outcome.participant_count,
    )


@router.patch(
    "/{registration_id}",
    response_model=StatusUpdateResponse,
    responses={
        400: {"description": "Unknown status or disallowed transition", "model": ErrorResponse},
        404: {"model": ErrorResponse},
    },
    summary="Change a registration's confirmation status",
)
async def update_registration_status(
    registration_id: str,
    payload: StatusUpdateRequest,
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> StatusUpdateResponse:
    outcome = await lifecycle.update_status(registration_id, payload.confirmation_status)
    return StatusUpdateResponse(
        message="Status updated successfully" if outcome.modified else "Status unchanged",
        modified=outcome.modified,
        registration=RegistrationResponse.model_validate(outcome.registration),
    )


@router.patch(
    "/{registration_id}/payment",
    response_model=PaymentRecordResponse,
    responses={
        400: {"description": "Missing payment info", "model": ErrorResponse},
        404: {"model": ErrorResponse},
        409: {"description": "Paid under a different transaction", "model": ErrorResponse},
        500: {"description": "Payment not recorded; safe to retry", "model": ErrorResponse},
    },
    summary="Record a completed payment",
)
async def record_payment(
    registration_id: str,
    payload: PaymentRecordRequest,
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> PaymentRecordResponse:
    """
    Marks the registration paid and confirmed, appends the payment to the
    ledger and promotes the participant. Repeating the call with the same
    transactionId does not add a second payment.
    """
    outcome = await lifecycle.record_payment(
        registration_id,
        transaction_id=payload.transaction_id,
        payment_status=payload.payment_status,
        payment_date=payload.payment_date,
        amount=payload.amount,
    )
    if outcome.already_recorded:
        message = "Payment already recorded"
    else:
        message = "Payment recorded successfully"
    return PaymentRecordResponse(
        message=message,
        registration=RegistrationResponse.model_validate(outcome.registration),
        payment_id=outcome.payment_id,
        payment_recorded=outcome.payment_recorded,
        already_recorded=outcome.already_recorded,
        role_promoted=outcome.role_promoted,
    )


@router.delete(
    "/{registration_id}",
    response_model=RegistrationDeleteResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Cancel and delete a registration",
)
async def delete_registration(
    registration_id: str,
    lifecycle: RegistrationLifecycle = Depends(get_registration_lifecycle),
) -> RegistrationDeleteResponse:
    outcome = await lifecycle.delete(registration_id)
    return RegistrationDeleteResponse(
        message="Registration deleted successfully",
        counter_updated=outcome.counter_updated,
        reconciled=outcome.reconciled,
    )
