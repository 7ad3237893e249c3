"""Camp schemas."""

from datetime import datetime
from typing import List, Optional

from pydantic import AliasChoices, Field

from medcamp.schemas.common import APIModel

FEE_ALIASES = AliasChoices("fee", "fees")


class CampCreate(APIModel):
    # Required-ness of title/date/time/images is enforced by CampRegistry so
    # that a missing field yields the same 400 message as any other caller.
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    fee: float = Field(default=0, ge=0, validation_alias=FEE_ALIASES)
    description: Optional[str] = None
    healthcare_professional: Optional[str] = Field(default=None, alias="healthcareProfessional")
    organizer_email: Optional[str] = Field(default=None, alias="organizerEmail")
    images: List[str] = Field(default_factory=list)


class CampUpdate(APIModel):
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    fee: Optional[float] = Field(default=None, ge=0, validation_alias=FEE_ALIASES)
    description: Optional[str] = None
    healthcare_professional: Optional[str] = Field(default=None, alias="healthcareProfessional")
    organizer_email: Optional[str] = Field(default=None, alias="organizerEmail")
    images: Optional[List[str]] = None


class CampResponse(APIModel):
    id: str
    title: Optional[str] = None
    date: Optional[str] = None
    time: Optional[str] = None
    location: Optional[str] = None
    fee: float = 0
    description: Optional[str] = None
    healthcare_professional: Optional[str] = Field(default=None, alias="healthcareProfessional")
    organizer_email: Optional[str] = Field(default=None, alias="organizerEmail")
    images: List[str] = Field(default_factory=list)
    participant_count: int = 0
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class CampCreateResponse(APIModel):
    inserted_id: str = Field(alias="insertedId")
    camp: CampResponse


class CampUpdateResponse(APIModel):
    message: str
    matched: bool
    modified: bool
    upserted_id: Optional[str] = Field(default=None, alias="upsertedId")
    camp: Optional[CampResponse] = None


class CampDeleteResponse(APIModel):
    message: str
    registrations_deleted: Optional[int] = Field(
        default=None,
        alias="registrationsDeleted",
        description="Registrations removed by the cascade; null if the cascade failed",
    )


class ReconcileResponse(APIModel):
    camp_id: str = Field(alias="campId")
    previous: int
    current: int
