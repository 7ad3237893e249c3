"""
MedCamp Backend — Camp Routes
===============================

Organizer-facing camp management plus the counter reconciliation entry
point.
"""

import logging
from typing import List

from fastapi import APIRouter, Depends

from medcamp.dependencies import get_camp_registry
from medcamp.schemas.camp import (
    CampCreate,
    CampCreateResponse,
    CampDeleteResponse,
    CampResponse,
    CampUpdate,
    CampUpdateResponse,
    ReconcileResponse,
)
from medcamp.schemas.common import ErrorResponse
from medcamp.services.camp_service import CampRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/camps", tags=["Camps"])


@router.get("", response_model=List[CampResponse], summary="List all camps")
async def list_camps(camps: CampRegistry = Depends(get_camp_registry)) -> List[CampResponse]:
    return [CampResponse.model_validate(c) for c in await camps.list()]


@router.get(
    "/{camp_id}",
    response_model=CampResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Get a camp by ID",
)
async def get_camp(camp_id: str, camps: CampRegistry = Depends(get_camp_registry)) -> CampResponse:
    return CampResponse.model_validate(await camps.get(camp_id))


@router.post(
    "",
    status_code=201,
    response_model=CampCreateResponse,
    responses={400: {"description": "Missing title, date, time or image", "model": ErrorResponse}},
    summary="Create a camp",
)
async def create_camp(
    payload: CampCreate,
    camps: CampRegistry = Depends(get_camp_registry),
) -> CampCreateResponse:
    camp = await camps.create(payload.model_dump(exclude_none=True))
    return CampCreateResponse(inserted_id=camp["id"], camp=CampResponse.model_validate(camp))


@router.put(
    "/{camp_id}",
    response_model=CampUpdateResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Update a camp (inserted if it does not exist)",
)
async def update_camp(
    camp_id: str,
    payload: CampUpdate,
    camps: CampRegistry = Depends(get_camp_registry),
) -> CampUpdateResponse:
    result = await camps.update(camp_id, payload.model_dump(exclude_none=True))
    if result["upserted_id"]:
        message = "Camp created"
    elif result["modified"]:
        message = "Camp updated successfully"
    else:
        message = "No changes made"
    camp = result["camp"]
    return CampUpdateResponse(
        message=message,
        matched=result["matched"],
        modified=result["modified"],
        upserted_id=result["upserted_id"],
        camp=CampResponse.model_validate(camp) if camp else None,
    )


@router.delete(
    "/{camp_id}",
    response_model=CampDeleteResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Delete a camp and its registrations",
)
async def delete_camp(camp_id: str, camps: CampRegistry = Depends(get_camp_registry)) -> CampDeleteResponse:
    removed = await camps.delete(camp_id)
    if removed is None:
        message = "Camp deleted; its registrations could not be removed"
    else:
        message = "Camp and associated registrations deleted successfully"
    return CampDeleteResponse(message=message, registrations_deleted=removed)


@router.post(
    "/{camp_id}/reconcile",
    response_model=ReconcileResponse,
    responses={404: {"model": ErrorResponse}},
    summary="Recompute participant_count from registrations",
)
async def reconcile_camp(camp_id: str, camps: CampRegistry = Depends(get_camp_registry)) -> ReconcileResponse:
    """
    Repairs counter drift left by failed increments/decrements and clears
    the orphaned flag on the camp's registrations.
    """
    result = await camps.reconcile_participant_count(camp_id)
    return ReconcileResponse(camp_id=camp_id, **result)
