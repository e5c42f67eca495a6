import logging
from typing import List, Tuple

from sqlalchemy import or_
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.init import atomic
from database.models import Guest, Reservation, ReservationGuest
from schemas.guest_schema import GuestBase, GuestCreate
from schemas.reservation_schema import AdditionalGuestRef
from services.base_service import BaseService
from utils.clock import utcnow
from utils.exceptions import InternalError, NotFoundError
from utils.pagination import GUEST_SORT_COLUMNS, PageParams, order_clause

logger = logging.getLogger(__name__)

PLAIN_FIELDS = (
    "first_name",
    "last_name",
    "date_of_birth",
    "nationality",
    "identification_number",
    "phone_number",
)
DOCUMENT_FIELDS = ("address", "emergency_contact", "vehicle")


def guest_values(guest_in: GuestBase) -> dict:
    """Column values for every mutable guest field, documents as plain dicts."""
    values = {field: getattr(guest_in, field) for field in PLAIN_FIELDS}
    for field in DOCUMENT_FIELDS:
        document = getattr(guest_in, field)
        values[field] = document.model_dump(exclude_none=True) if document is not None else None
    return values


class GuestService(BaseService):
    def __init__(self):
        super().__init__(Guest, "Guest")

    def get_by_email(self, db: Session, tenant_id: int, email: str):
        return self.query(db, tenant_id).filter(Guest.email == email).first()

    def upsert(self, db: Session, tenant_id: int, guest_in: GuestCreate) -> Guest:
        """
        Create the guest, or update the existing guest with the same email in
        this tenant.

        Nothing in the schema backs the one-guest-per-email rule, so two
        concurrent calls for a new email can still both insert.
        """
        try:
            with atomic(db):
                guest = self.get_by_email(db, tenant_id, guest_in.email)
                values = guest_values(guest_in)
                if guest:
                    for field, value in values.items():
                        setattr(guest, field, value)
                    guest.updated_date = utcnow()
                    logger.info("Updated guest %s for tenant %s", guest.id, tenant_id)
                else:
                    guest = Guest(tenant_id=tenant_id, email=guest_in.email, **values)
                    db.add(guest)
                    db.flush()
                    logger.info("Created guest %s for tenant %s", guest.id, tenant_id)
            db.refresh(guest)
            return guest
        except SQLAlchemyError as e:
            logger.exception("Guest upsert failed for tenant %s", tenant_id)
            raise InternalError(f"Unable to create/update guest. Message: {e}")

    def find_or_create_for_reservation(
        self, db: Session, tenant_id: int, guest_ref: AdditionalGuestRef
    ) -> Guest:
        """
        Resolve a guest travelling on a reservation.

        Order: an existing guest_id, then a guest with the same identification
        number, then the tenant's guest with the same email, then a new guest
        built from the supplied fields. Runs inside the caller's transaction
        and only flushes.
        """
        if guest_ref.guest_id is not None:
            guest = self.get(db, tenant_id, guest_ref.guest_id)
            if guest:
                return guest

        if guest_ref.identification_number:
            guest = (
                self.query(db, tenant_id)
                .filter(Guest.identification_number == guest_ref.identification_number)
                .first()
            )
            if guest:
                return guest

        if guest_ref.email:
            guest = self.get_by_email(db, tenant_id, guest_ref.email)
            if guest:
                return guest

        if not any(
            (
                guest_ref.first_name,
                guest_ref.last_name,
                guest_ref.identification_number,
                guest_ref.email,
            )
        ):
            raise NotFoundError(
                f"Guest {guest_ref.guest_id} not found and not enough details to create one"
                if guest_ref.guest_id is not None
                else "Additional guest requires a name, email or identification number"
            )

        guest = Guest(
            tenant_id=tenant_id,
            first_name=guest_ref.first_name,
            last_name=guest_ref.last_name,
            email=guest_ref.email,
            phone_number=guest_ref.phone_number,
            date_of_birth=guest_ref.date_of_birth,
            nationality=guest_ref.nationality,
            identification_number=guest_ref.identification_number,
        )
        db.add(guest)
        db.flush()
        logger.info("Created additional guest %s for tenant %s", guest.id, tenant_id)
        return guest

    def search(self, db: Session, tenant_id: int, search_query: str, limit: int = 10, offset: int = 0) -> List[Guest]:
        escaped = search_query.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")
        pattern = f"%{escaped}%"
        return (
            self.query(db, tenant_id)
            .filter(
                or_(
                    Guest.first_name.ilike(pattern, escape="\\"),
                    Guest.last_name.ilike(pattern, escape="\\"),
                    Guest.email.ilike(pattern, escape="\\"),
                )
            )
            .order_by(Guest.first_name.desc())
            .offset(offset)
            .limit(limit)
            .all()
        )

    def list_with_reservations(self, db: Session, tenant_id: int, params: PageParams) -> Tuple[List[dict], int]:
        """A page of guests, each with the reservations it is linked to."""
        total = self.count(db, tenant_id)
        guests = (
            self.query(db, tenant_id)
            .order_by(order_clause(GUEST_SORT_COLUMNS, params.sort_key, params.direction), Guest.id)
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )

        reservations_by_guest = {guest.id: [] for guest in guests}
        if guests:
            rows = (
                db.query(ReservationGuest.guest_id, Reservation)
                .join(Reservation, Reservation.id == ReservationGuest.reservation_id)
                .filter(
                    ReservationGuest.tenant_id == tenant_id,
                    ReservationGuest.guest_id.in_(list(reservations_by_guest)),
                )
                .order_by(Reservation.check_in.desc())
                .all()
            )
            for guest_id, reservation in rows:
                reservations_by_guest[guest_id].append(reservation)

        return [
            {"guest": guest, "reservations": reservations_by_guest[guest.id]} for guest in guests
        ], total

    def delete(self, db: Session, tenant_id: int, guest_id: int) -> None:
        """
        Remove a guest and its reservation links. Reservations are kept.
        Nothing is written when the guest does not belong to the tenant.
        """
        if self.get(db, tenant_id, guest_id) is None:
            raise NotFoundError("Guest not found")

        try:
            with atomic(db):
                db.query(ReservationGuest).filter(
                    ReservationGuest.guest_id == guest_id,
                    ReservationGuest.tenant_id == tenant_id,
                ).delete(synchronize_session=False)
                db.query(Guest).filter(
                    Guest.id == guest_id, Guest.tenant_id == tenant_id
                ).delete(synchronize_session=False)
            db.expire_all()
            logger.info("Deleted guest %s for tenant %s", guest_id, tenant_id)
        except SQLAlchemyError as e:
            logger.exception("Deleting guest %s failed", guest_id)
            raise InternalError(f"Unable to delete guest. Message: {e}")
