"""
MedCamp Backend — Analytics Routes
====================================

Organizer dashboard numbers. Every value is computed on request; nothing
is cached.
"""

from fastapi import APIRouter, Depends

from medcamp.dependencies import get_analytics
from medcamp.schemas.feedback import CountResponse, DashboardResponse
from medcamp.services.analytics_service import AnalyticsAggregator

router = APIRouter(prefix="/analytics", tags=["Analytics"])


@router.get("/dashboard", response_model=DashboardResponse, summary="Dashboard totals")
async def dashboard(analytics: AnalyticsAggregator = Depends(get_analytics)) -> DashboardResponse:
    return DashboardResponse(**await analytics.dashboard())


@router.get(
    "/registered-camps-count",
    response_model=CountResponse,
    summary="Number of registrations across all camps",
)
async def registered_camps_count(
    analytics: AnalyticsAggregator = Depends(get_analytics),
) -> CountResponse:
    return CountResponse(count=await analytics.registered_camps_count())
