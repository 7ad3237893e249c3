"""Shared schema base class and generic response models."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class APIModel(BaseModel):
    """Base for every schema: accept field names or aliases on input."""

    model_config = ConfigDict(populate_by_name=True, from_attributes=True)


class MessageResponse(APIModel):
    message: str


class ErrorResponse(BaseModel):
    """
    Standardized error response format for all API errors.

    Example:
        {
            "error": "validation_error",
            "message": "Missing required payment info",
            "details": {"field": "paymentDate", "missing": ["paymentDate"]},
            "request_id": "a1b2c3d4"
        }
    """
    error: str = Field(description="Machine-readable error code")
    message: str = Field(description="Human-readable error description")
    details: Optional[dict] = Field(default=None, description="Additional error context")
    request_id: Optional[str] = Field(default=None, description="Request correlation ID")


class HealthResponse(BaseModel):
    status: str = Field(description="Overall service status: healthy, degraded, unhealthy")
    version: str = Field(description="Application version")
    store: str = Field(description="Document store connectivity: connected, disconnected")
    payments: str = Field(description="Payment provider circuit state: closed, open, half_open")
    uptime_seconds: float = Field(description="Seconds since service started")
