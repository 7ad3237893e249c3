"""
MedCamp Backend — Registration Lifecycle
==========================================

What:  Creates registrations, advances their status, and applies the
       derived writes to the Camp Registry, Payment Ledger and User
       Directory.
Who:   Called by the registrations routes.

State machine (confirmation_status, payment_status):

    pending/unpaid ──record_payment──▶ confirmed/paid
          │                                  │
          └────────── cancel ──▶ cancelled ◀─┘   (terminal)

    update_status() only follows TRANSITIONS; pending → confirmed is
    additionally refused while the registration is unpaid.

Multi-document workflows:
    None of these run in a cross-document transaction. Each step is a
    single-document store call, ordered so that a failure leaves a state
    that is either retry-safe or repairable:

    register:        insert registration → +1 camp counter
                     increment fails → registration flagged `orphaned`,
                     result.counter_updated = False
    record_payment:  set registration paid/confirmed → re-fetch →
                     insert payment (skipped if the transaction exists) →
                     promote user (failure logged, non-fatal)
    delete:          fetch → delete → -1 camp counter
                     decrement fails → logged, result.counter_updated = False
                     decrement goes negative → camp reconciled
                     registration was orphaned → camp reconciled instead

    Drift left behind by a failed compensation step is repaired by
    CampRegistry.reconcile_participant_count().
"""

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Dict, FrozenSet, List, Mapping, Optional

from medcamp.exceptions import (
    ConflictError,
    InvalidTransitionError,
    MedCampError,
    NotFoundError,
    StoreError,
    UpstreamError,
    ValidationError,
)
from medcamp.services.camp_service import CampRegistry
from medcamp.services.payment_service import PaymentLedger
from medcamp.services.user_service import UserDirectory, normalize_email
from medcamp.store import REGISTRATIONS, DocumentStore
from medcamp.store.base import DESCENDING, Document

logger = logging.getLogger(__name__)

PENDING = "pending"
CONFIRMED = "confirmed"
CANCELLED = "cancelled"
CONFIRMATION_STATUSES = (PENDING, CONFIRMED, CANCELLED)

UNPAID = "unpaid"
PAID = "paid"
PAYMENT_STATUSES = (UNPAID, PAID)

# Allowed confirmation_status edges. Same-state updates are accepted as no-ops.
TRANSITIONS: Dict[str, FrozenSet[str]] = {
    PENDING: frozenset({CONFIRMED, CANCELLED}),
    CONFIRMED: frozenset({CANCELLED}),
    CANCELLED: frozenset(),
}

# Participant-supplied fields copied onto a new registration
DETAIL_FIELDS = (
    "participant_name",
    "age",
    "phone",
    "gender",
    "emergency_contact",
    "camp_name",
    "camp_fee",
    "location",
)


@dataclass(frozen=True)
class RegisterOutcome:
    registration_id: str
    counter_updated: bool
    participant_count: Optional[int] = None


@dataclass(frozen=True)
class StatusOutcome:
    registration: Document
    modified: bool


@dataclass(frozen=True)
class PaymentOutcome:
    """
    Composite result of record_payment().

    Attributes:
        registration:      the registration after the update
        payment_id:        id of the ledger entry for this transaction
        payment_recorded:  True if this call inserted the ledger entry
        already_recorded:  True if the transaction was already in the ledger
        role_promoted:     False if the user was missing or the update failed
    """
    registration: Document
    payment_id: str
    payment_recorded: bool
    already_recorded: bool
    role_promoted: bool


@dataclass(frozen=True)
class DeleteOutcome:
    registration_id: str
    camp_id: str
    counter_updated: bool
    reconciled: bool = False


class RegistrationLifecycle:
    """
    Orchestrates registration writes and their side effects.

    Args:
        store:  document store holding the registrations collection
        camps:  CampRegistry for counter adjustments and camp snapshots
        ledger: PaymentLedger receiving one entry per paid transaction
        users:  UserDirectory for role promotion
    """

    def __init__(
        self,
        store: DocumentStore,
        camps: CampRegistry,
        ledger: PaymentLedger,
        users: UserDirectory,
    ):
        self.store = store
        self.camps = camps
        self.ledger = ledger
        self.users = users

    # ── Reads ─────────────────────────────────────────────────────────────

    async def get(self, registration_id: str) -> Document:
        registration = await self.store.find_one(REGISTRATIONS, {"id": registration_id})
        if registration is None:
            raise NotFoundError(resource="registration", resource_id=registration_id)
        return registration

    async def list(self, email: Optional[str] = None) -> List[Document]:
        filter = {"participant_email": normalize_email(email)} if email else None
        return await self.store.find(REGISTRATIONS, filter, sort=[("created_at", DESCENDING)])

    async def list_for_camp(self, camp_id: str) -> List[Document]:
        return await self.store.find(
            REGISTRATIONS, {"camp_id": camp_id}, sort=[("created_at", DESCENDING)],
        )

    # ── register ──────────────────────────────────────────────────────────

    async def register(
        self,
        camp_id: str,
        participant_email: str,
        details: Optional[Mapping[str, Any]] = None,
    ) -> RegisterOutcome:
        """
        Insert a pending/unpaid registration and count it on the camp.

        Raises:
            ValidationError: camp id or participant email missing
            NotFoundError:   the camp does not exist
            ConflictError:   the participant already holds a live
                             registration for this camp
            StoreError:      the registration insert failed
        """
        email = normalize_email(participant_email)
        if not camp_id:
            raise ValidationError(message="Camp ID is required", field="campId")
        if not email:
            raise ValidationError(message="Participant email is required", field="participantEmail")

        camp = await self.camps.get(camp_id)

        existing = await self.store.find(
            REGISTRATIONS, {"camp_id": camp_id, "participant_email": email},
        )
        if any(r.get("confirmation_status") != CANCELLED for r in existing):
            raise ConflictError(
                message="Participant is already registered for this camp",
                context={"camp_id": camp_id, "participant_email": email},
            )

        details = details or {}
        document: Dict[str, Any] = {
            k: details[k] for k in DETAIL_FIELDS if details.get(k) is not None
        }
        document.setdefault("camp_name", camp.get("title"))
        document.setdefault("camp_fee", camp.get("fee"))
        document.setdefault("location", camp.get("location"))
        document.update(
            camp_id=camp_id,
            participant_email=email,
            payment_status=UNPAID,
            confirmation_status=PENDING,
            orphaned=False,
            created_at=datetime.now(timezone.utc),
        )

        inserted = await self.store.insert_one(REGISTRATIONS, document)
        registration_id = inserted.inserted_id

        count: Optional[int] = None
        try:
            count = await self.camps.adjust_participant_count(camp_id, +1)
        except MedCampError as e:
            logger.error(
                "Registration %s inserted but camp %s counter increment failed: %s",
                registration_id, camp_id, e.message,
            )

        if count is None:
            await self._mark_orphaned(registration_id, camp_id)
            return RegisterOutcome(registration_id=registration_id, counter_updated=False)

        logger.info(
            "Registration %s created for camp %s (participants=%d)",
            registration_id, camp_id, count,
        )
        return RegisterOutcome(
            registration_id=registration_id,
            counter_updated=True,
            participant_count=count,
        )

    async def _mark_orphaned(self, registration_id: str, camp_id: str) -> None:
        try:
            await self.store.update_one(
                REGISTRATIONS, {"id": registration_id}, set_values={"orphaned": True},
            )
            logger.warning(
                "Registration %s flagged orphaned; reconcile camp %s",
                registration_id, camp_id,
            )
        except MedCampError as e:
            logger.error(
                "Could not flag registration %s as orphaned (camp %s): %s",
                registration_id, camp_id, e.message,
            )

    # ── update_status ─────────────────────────────────────────────────────

    async def update_status(self, registration_id: str, new_status: str) -> StatusOutcome:
        """
        Move the registration's confirmation_status along TRANSITIONS.

        Raises:
            ValidationError:        unknown status value
            NotFoundError:          no such registration
            InvalidTransitionError: the edge is not allowed
        """
        if new_status not in CONFIRMATION_STATUSES:
            raise ValidationError(
                message=f"Invalid confirmation status '{new_status}'",
                field="confirmationStatus",
                context={"allowed": list(CONFIRMATION_STATUSES)},
            )

        registration = await self.get(registration_id)
        current = registration.get("confirmation_status") or PENDING
        if new_status == current:
            return StatusOutcome(registration=registration, modified=False)

        if new_status not in TRANSITIONS[current]:
            raise InvalidTransitionError(current=current, requested=new_status)
        if new_status == CONFIRMED and registration.get("payment_status") != PAID:
            raise InvalidTransitionError(
                current=current,
                requested=new_status,
                reason="registration has not been paid",
            )

        result = await self.store.update_one(
            REGISTRATIONS,
            {"id": registration_id},
            set_values={"confirmation_status": new_status},
        )
        if not result.matched_count:
            raise NotFoundError(resource="registration", resource_id=registration_id)

        logger.info("Registration %s: %s → %s", registration_id, current, new_status)
        return StatusOutcome(registration=result.document, modified=bool(result.modified_count))

    # ── record_payment ────────────────────────────────────────────────────

    async def record_payment(
        self,
        registration_id: str,
        transaction_id: Optional[str],
        payment_status: Optional[str],
        payment_date: Optional[str],
        amount: Optional[float] = None,
    ) -> PaymentOutcome:
        """
        Mark the registration paid and confirmed, append the payment, and
        promote the participant.

        Safe to call again with the same transaction id: the registration
        update is an overwrite with identical values and the ledger insert
        is skipped.

        Raises:
            ValidationError:        transaction id, status or date missing,
                                    or status other than 'paid'
            NotFoundError:          no such registration (before or after
                                    the update)
            InvalidTransitionError: the registration is cancelled
            ConflictError:          already paid under another transaction
                                    or the transaction belongs to another
                                    registration
            UpstreamError:          the ledger insert failed; retry the call
        """
        required = {
            "transactionId": transaction_id,
            "paymentStatus": payment_status,
            "paymentDate": payment_date,
        }
        missing = [name for name, value in required.items() if not value]
        if missing:
            raise ValidationError(
                message="Missing required payment info",
                field=missing[0],
                context={"missing": missing},
            )
        if payment_status != PAID:
            raise ValidationError(
                message=f"Payment status must be '{PAID}'",
                field="paymentStatus",
            )

        current = await self.get(registration_id)
        if current.get("confirmation_status") == CANCELLED:
            raise InvalidTransitionError(
                current=CANCELLED,
                requested=CONFIRMED,
                reason="cancelled registrations cannot be paid",
            )
        previous_txn = current.get("transaction_id")
        if current.get("payment_status") == PAID and previous_txn and previous_txn != transaction_id:
            raise ConflictError(
                message="Registration is already paid under a different transaction",
                context={"registration_id": registration_id},
            )
        recorded = await self.ledger.find_by_transaction(transaction_id)
        owner = (recorded or {}).get("registration_id")
        if owner and owner != registration_id:
            raise ConflictError(
                message="Transaction is already recorded for another registration",
                context={"registration_id": registration_id, "transaction_id": transaction_id},
            )

        # Step 1: registration → paid/confirmed
        update = await self.store.update_one(
            REGISTRATIONS,
            {"id": registration_id},
            set_values={
                "payment_status": payment_status,
                "transaction_id": transaction_id,
                "payment_date": payment_date,
                "confirmation_status": CONFIRMED,
            },
        )
        if not update.matched_count:
            raise NotFoundError(resource="registration", resource_id=registration_id)

        # Step 2: re-fetch; the registration may have been deleted meanwhile
        registration = await self.store.find_one(REGISTRATIONS, {"id": registration_id})
        if registration is None:
            raise NotFoundError(resource="registration", resource_id=registration_id)

        # Step 3: ledger entry (idempotent on transaction_id)
        payment = {
            "registration_id": registration_id,
            "participant_email": registration.get("participant_email"),
            "camp_name": registration.get("camp_name"),
            "amount": registration.get("camp_fee") or amount or 0,
            "payment_status": payment_status,
            "confirmation_status": CONFIRMED,
            "transaction_id": transaction_id,
            "payment_date": payment_date,
        }
        try:
            payment_id, inserted = await self.ledger.record(payment)
        except StoreError as e:
            logger.error(
                "Registration %s confirmed but payment %s was not recorded: %s",
                registration_id, transaction_id, e.message,
            )
            raise UpstreamError(
                message="Payment could not be recorded. Please retry.",
                context={
                    "registration_id": registration_id,
                    "transaction_id": transaction_id,
                    "retryable": True,
                },
            ) from e

        # Step 4: role promotion (non-fatal)
        role_promoted = False
        try:
            role_promoted = await self.users.promote_to_participant(
                registration.get("participant_email") or "",
            )
        except MedCampError as e:
            logger.warning(
                "Payment %s recorded but role promotion for %s failed: %s",
                payment_id, registration.get("participant_email"), e.message,
            )

        return PaymentOutcome(
            registration=registration,
            payment_id=payment_id,
            payment_recorded=inserted,
            already_recorded=not inserted,
            role_promoted=role_promoted,
        )

    # ── delete ────────────────────────────────────────────────────────────

    async def delete(self, registration_id: str) -> DeleteOutcome:
        """
        Delete the registration and release its place on the camp.

        The decrement is best effort: a failure is logged and reported via
        counter_updated=False, the deletion itself still succeeds. An
        orphaned registration was never counted, so its camp is reconciled
        instead of decremented.

        Raises:
            NotFoundError: no such registration
        """
        registration = await self.get(registration_id)
        camp_id = registration["camp_id"]

        result = await self.store.delete_one(REGISTRATIONS, {"id": registration_id})
        if not result.deleted_count:
            # Deleted concurrently; that caller owns the decrement
            raise NotFoundError(resource="registration", resource_id=registration_id)

        if registration.get("orphaned"):
            # Never counted on the camp, so recount instead of decrementing
            try:
                counts = await self.camps.reconcile_participant_count(camp_id)
            except MedCampError as e:
                logger.error(
                    "Orphaned registration %s deleted but camp %s reconciliation failed: %s",
                    registration_id, camp_id, e.message,
                )
                return DeleteOutcome(registration_id=registration_id, camp_id=camp_id, counter_updated=False)
            logger.info(
                "Orphaned registration %s deleted (camp %s participants=%d)",
                registration_id, camp_id, counts["current"],
            )
            return DeleteOutcome(
                registration_id=registration_id,
                camp_id=camp_id,
                counter_updated=True,
                reconciled=True,
            )

        count: Optional[int] = None
        try:
            count = await self.camps.adjust_participant_count(camp_id, -1)
        except MedCampError as e:
            logger.error(
                "Registration %s deleted but camp %s counter decrement failed: %s",
                registration_id, camp_id, e.message,
            )

        if count is None:
            return DeleteOutcome(registration_id=registration_id, camp_id=camp_id, counter_updated=False)

        reconciled = False
        if count < 0:
            logger.warning("Camp %s counter went negative (%d); reconciling", camp_id, count)
            try:
                await self.camps.reconcile_participant_count(camp_id)
                reconciled = True
            except MedCampError as e:
                logger.error("Reconciliation of camp %s failed: %s", camp_id, e.message)

        logger.info("Registration %s deleted (camp %s participants=%d)", registration_id, camp_id, count)
        return DeleteOutcome(
            registration_id=registration_id,
            camp_id=camp_id,
            counter_updated=True,
            reconciled=reconciled,
        )
