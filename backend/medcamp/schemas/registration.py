"""Registration schemas, including the payment-recording request."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from medcamp.schemas.common import APIModel


class RegistrationCreate(APIModel):
    camp_id: str = Field(alias="campId", min_length=1)
    participant_email: str = Field(alias="participantEmail", min_length=1)
    participant_name: Optional[str] = Field(default=None, alias="participantName")
    age: Optional[int] = Field(default=None, ge=0, le=150)
    phone: Optional[str] = None
    gender: Optional[str] = None
    emergency_contact: Optional[str] = Field(default=None, alias="emergencyContact")
    camp_name: Optional[str] = Field(default=None, alias="campName")
    camp_fee: Optional[float] = Field(default=None, ge=0, alias="campFees")
    location: Optional[str] = None


class RegistrationResponse(APIModel):
    id: str
    camp_id: str = Field(alias="campId")
    camp_name: Optional[str] = Field(default=None, alias="campName")
    camp_fee: Optional[float] = Field(default=None, alias="campFees")
    location: Optional[str] = None
    participant_email: str = Field(alias="participantEmail")
    participant_name: Optional[str] = Field(default=None, alias="participantName")
    age: Optional[int] = None
    phone: Optional[str] = None
    gender: Optional[str] = None
    emergency_contact: Optional[str] = Field(default=None, alias="emergencyContact")
    payment_status: str = Field(alias="paymentStatus")
    confirmation_status: str = Field(alias="confirmationStatus")
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    payment_date: Optional[str] = Field(default=None, alias="paymentDate")
    orphaned: bool = False
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class RegisterResponse(APIModel):
    """
    Result of POST /registrations.

    counter_updated=False means the registration exists but the camp's
    participant_count does not include it yet (it is flagged orphaned).
    """
    registration_id: str = Field(alias="registrationId")
    updated_count: int = Field(alias="updatedCount")
    counter_updated: bool = Field(alias="counterUpdated")
    participant_count: Optional[int] = Field(default=None, alias="participantCount")


class StatusUpdateRequest(APIModel):
    confirmation_status: str = Field(alias="confirmationStatus")


class StatusUpdateResponse(APIModel):
    message: str
    modified: bool
    registration: RegistrationResponse


class PaymentRecordRequest(APIModel):
    # Presence is validated by RegistrationLifecycle.record_payment so that a
    # missing field is rejected before any write, with a single message.
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")
    payment_date: Optional[str] = Field(default=None, alias="paymentDate")
    amount: Optional[float] = Field(default=None, ge=0)


class PaymentRecordResponse(APIModel):
    """
    Composite outcome of PATCH /registrations/{id}/payment.

    role_promoted=False is a logged, non-fatal partial failure: the
    registration and the payment are already durable.
    """
    message: str
    registration: RegistrationResponse
    payment_id: str = Field(alias="paymentId")
    payment_recorded: bool = Field(alias="paymentRecorded")
    already_recorded: bool = Field(alias="alreadyRecorded")
    role_promoted: bool = Field(alias="rolePromoted")


class RegistrationDeleteResponse(APIModel):
    message: str
    deleted_count: int = Field(default=1, alias="deletedCount")
    counter_updated: bool = Field(alias="counterUpdated")
    reconciled: bool = False
