"""MedCamp Backend — Feedback Routes"""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from medcamp.dependencies import get_feedback_store
from medcamp.schemas.common import ErrorResponse
from medcamp.schemas.feedback import FeedbackCreate, FeedbackCreateResponse, FeedbackResponse
from medcamp.services.feedback_service import FeedbackStore

router = APIRouter(prefix="/feedbacks", tags=["Feedback"])


@router.get("", response_model=List[FeedbackResponse], summary="List feedback")
async def list_feedback(
    camp_id: Optional[str] = Query(default=None, alias="campId"),
    feedbacks: FeedbackStore = Depends(get_feedback_store),
) -> List[FeedbackResponse]:
    return [FeedbackResponse.model_validate(f) for f in await feedbacks.list(camp_id)]


@router.post(
    "",
    status_code=201,
    response_model=FeedbackCreateResponse,
    responses={400: {"model": ErrorResponse}},
    summary="Submit feedback for a camp",
)
async def create_feedback(
    payload: FeedbackCreate,
    feedbacks: FeedbackStore = Depends(get_feedback_store),
) -> FeedbackCreateResponse:
    feedback = await feedbacks.create(payload.model_dump(exclude_none=True))
    return FeedbackCreateResponse(
        inserted_id=feedback["id"], feedback=FeedbackResponse.model_validate(feedback),
    )
