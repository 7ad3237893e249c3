"""Payment ledger and payment-intent schemas."""

from datetime import datetime
from typing import Optional

from pydantic import Field

from medcamp.schemas.common import APIModel


class PaymentCreate(APIModel):
    registration_id: Optional[str] = Field(default=None, alias="registrationId")
    participant_email: Optional[str] = Field(default=None, alias="participantEmail")
    camp_name: Optional[str] = Field(default=None, alias="campName")
    amount: Optional[float] = Field(default=None, ge=0)
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")
    confirmation_status: Optional[str] = Field(default=None, alias="confirmationStatus")
    transaction_id: Optional[str] = Field(default=None, alias="transactionId")
    payment_date: Optional[str] = Field(default=None, alias="paymentDate")


class PaymentResponse(APIModel):
    id: str
    registration_id: Optional[str] = Field(default=None, alias="registrationId")
    participant_email: Optional[str] = Field(default=None, alias="participantEmail")
    camp_name: Optional[str] = Field(default=None, alias="campName")
    amount: float = 0
    payment_status: Optional[str] = Field(default=None, alias="paymentStatus")
    confirmation_status: Optional[str] = Field(default=None, alias="confirmationStatus")
    transaction_id: str = Field(alias="transactionId")
    payment_date: Optional[str] = Field(default=None, alias="paymentDate")
    created_at: Optional[datetime] = Field(default=None, alias="createdAt")


class PaymentInsertResponse(APIModel):
    inserted_id: str = Field(alias="insertedId")
    inserted: bool = Field(description="False when the transaction was already recorded")


class PaymentIntentRequest(APIModel):
    amount: int = Field(description="Amount in the smallest currency unit (e.g. cents)")
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)


class PaymentIntentResponse(APIModel):
    client_secret: str = Field(alias="clientSecret")
