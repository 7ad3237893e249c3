"""Feedback and analytics schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from medcamp.schemas.common import APIModel


class FeedbackCreate(APIModel):
    camp_id: str = Field(min_length=1)
    participant_email: Optional[str] = Field(default=None, alias="participantEmail")
    participant_name: Optional[str] = Field(default=None, alias="participantName")
    rating: int
    comment: Optional[str] = None


class FeedbackResponse(APIModel):
    id: str
    camp_id: str
    participant_email: Optional[str] = Field(default=None, alias="participantEmail")
    participant_name: Optional[str] = Field(default=None, alias="participantName")
    rating: int
    comment: Optional[str] = None
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class FeedbackCreateResponse(APIModel):
    inserted_id: str = Field(alias="insertedId")
    feedback: FeedbackResponse


class DashboardResponse(APIModel):
    total_users: int = Field(alias="totalUsers")
    total_camps: int = Field(alias="totalCamps")
    total_registrations: int = Field(alias="totalRegistrations")
    total_revenue: float = Field(alias="totalRevenue")


class CountResponse(APIModel):
    count: int
