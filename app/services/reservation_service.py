import logging
from collections import defaultdict
from datetime import date, datetime, time, timedelta
from typing import Dict, List, Optional, Tuple

from dateutil.relativedelta import relativedelta
from sqlalchemy import func
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from database.init import atomic
from database.models import Guest, Reservation, ReservationGuest
from enums.guest_status import GuestStatus
from enums.sort_direction import SortDirection
from schemas.guest_schema import GuestMinimumResponse, GuestResponse
from schemas.reservation_schema import ReservationCreate, ReservationResponse
from services.base_service import BaseService
from services.guest_service import GuestService
from services.room_service import RoomService
from utils.checkout import checkout_cutoff, compute_guest_status
from utils.clock import business_timezone, to_business_time, to_naive_utc, utcnow
from utils.exceptions import AppError, InternalError, ValidationError
from utils.pagination import (
    CURRENT_GUEST_SORT_COLUMNS,
    RESERVATION_SORT_COLUMNS,
    PageParams,
    order_clause,
)

logger = logging.getLogger(__name__)


def week_start_of(day: date) -> date:
    """Weeks run Sunday to Saturday."""
    return day - timedelta(days=(day.weekday() + 1) % 7)


def local_midnight_utc(day: date) -> datetime:
    """Start of a business-timezone calendar day, as a naive UTC value."""
    tz = business_timezone()
    return to_naive_utc(tz.localize(datetime.combine(day, time.min)))


def stay_weeks(reservation: Reservation) -> List[date]:
    """Start dates of every week the stay touches, check-out day included."""
    first_day = to_business_time(reservation.check_in).date()
    last_day = to_business_time(checkout_cutoff(reservation.check_out)).date()

    weeks = [week_start_of(first_day)]
    last_week = week_start_of(last_day)
    while weeks[-1] < last_week:
        weeks.append(weeks[-1] + timedelta(days=7))
    return weeks


class ReservationService(BaseService):
    def __init__(self):
        super().__init__(Reservation, "Reservation")
        self.guest_service = GuestService()
        self.room_service = RoomService()

    def create(self, db: Session, tenant_id: int, reservation_in: ReservationCreate) -> Reservation:
        """
        Book rooms for a primary guest and the guests travelling with them.

        The reservation row, every guest link, any guest created on the way and
        the room occupancy flags are written in one transaction; a failure in
        any step leaves nothing behind.
        """
        check_in = to_naive_utc(reservation_in.check_in)
        check_out = to_naive_utc(reservation_in.check_out)
        if check_out <= check_in:
            raise ValidationError("check_out must be after check_in")

        try:
            with atomic(db):
                primary_guest = self.guest_service.get_or_404(
                    db, tenant_id, reservation_in.primary_guest_id
                )

                reservation = Reservation(
                    tenant_id=tenant_id,
                    primary_guest_id=primary_guest.id,
                    primary_guest_name=primary_guest.full_name,
                    check_in=check_in,
                    check_out=check_out,
                    room_numbers=list(reservation_in.room_numbers),
                    payment_method=(
                        reservation_in.payment_method.value
                        if reservation_in.payment_method
                        else None
                    ),
                    total_amount=reservation_in.total_amount,
                    payment_status=reservation_in.payment_status.value,
                    guest_status=compute_guest_status(check_out).value,
                )
                db.add(reservation)
                db.flush()

                linked = set()
                for guest in [primary_guest] + [
                    self.guest_service.find_or_create_for_reservation(db, tenant_id, guest_ref)
                    for guest_ref in reservation_in.additional_guests
                ]:
                    if guest.id in linked:
                        continue
                    db.add(
                        ReservationGuest(
                            reservation_id=reservation.id,
                            guest_id=guest.id,
                            tenant_id=tenant_id,
                        )
                    )
                    linked.add(guest.id)

                self.room_service.mark_occupied(db, tenant_id, reservation.room_numbers)

            db.refresh(reservation)
            logger.info(
                "Created reservation %s for guest %s (tenant %s, %d guests, rooms %s)",
                reservation.id,
                primary_guest.id,
                tenant_id,
                len(linked),
                reservation.room_numbers,
            )
            return reservation
        except AppError:
            raise
        except SQLAlchemyError as e:
            logger.exception("Creating reservation failed for tenant %s", tenant_id)
            raise InternalError(f"Unable to create reservation. Message: {e}")

    def list_reservations(self, db: Session, tenant_id: int, params: PageParams) -> Tuple[List[Reservation], int]:
        total = self.count(db, tenant_id)
        reservations = (
            self.query(db, tenant_id)
            .order_by(
                order_clause(RESERVATION_SORT_COLUMNS, params.sort_key, params.direction),
                Reservation.id,
            )
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return reservations, total

    def linked_guests(self, db: Session, tenant_id: int, reservation_ids: List[int]) -> Dict[int, List[Guest]]:
        guests_by_reservation = defaultdict(list)
        if not reservation_ids:
            return guests_by_reservation

        rows = (
            db.query(ReservationGuest.reservation_id, Guest)
            .join(Guest, Guest.id == ReservationGuest.guest_id)
            .filter(
                ReservationGuest.tenant_id == tenant_id,
                ReservationGuest.reservation_id.in_(reservation_ids),
            )
            .order_by(ReservationGuest.id)
            .all()
        )
        for reservation_id, guest in rows:
            guests_by_reservation[reservation_id].append(guest)
        return guests_by_reservation

    def get_detail(self, db: Session, tenant_id: int, reservation_id: int) -> dict:
        reservation = self.get_or_404(db, tenant_id, reservation_id)
        guests = self.linked_guests(db, tenant_id, [reservation.id])[reservation.id]
        return {
            "reservation": reservation,
            "primary_guest": self.guest_service.get(db, tenant_id, reservation.primary_guest_id),
            "additional_guests": [g for g in guests if g.id != reservation.primary_guest_id],
        }

    def get_guest_reservations(self, db: Session, tenant_id: int, guest_id: int) -> Tuple[Guest, List[Reservation]]:
        """The guest and the reservations it is on that have not checked out yet."""
        guest = self.guest_service.get_or_404(db, tenant_id, guest_id)
        reservations = (
            self.query(db, tenant_id)
            .join(ReservationGuest, ReservationGuest.reservation_id == Reservation.id)
            .filter(ReservationGuest.guest_id == guest_id, Reservation.check_out > utcnow())
            .order_by(Reservation.check_in)
            .all()
        )
        return guest, reservations

    def get_current_guests(self, db: Session, tenant_id: int, params: PageParams) -> Tuple[List[Tuple[Guest, Reservation]], int]:
        """
        Guests on an active reservation, each paired with a single reservation:
        the first one under the requested sort.
        """
        if params.sort_key in RESERVATION_SORT_COLUMNS:
            reservation_column = RESERVATION_SORT_COLUMNS[params.sort_key]
        else:
            reservation_column = Reservation.created_date
        reservation_order = (
            reservation_column.asc()
            if params.direction == SortDirection.ASC
            else reservation_column.desc()
        )

        ranked = (
            db.query(
                ReservationGuest.guest_id.label("guest_id"),
                Reservation.id.label("reservation_id"),
                func.row_number()
                .over(
                    partition_by=ReservationGuest.guest_id,
                    order_by=(reservation_order, Reservation.id.desc()),
                )
                .label("position"),
            )
            .join(Reservation, Reservation.id == ReservationGuest.reservation_id)
            .filter(
                ReservationGuest.tenant_id == tenant_id,
                Reservation.tenant_id == tenant_id,
                Reservation.guest_status == GuestStatus.ACTIVE.value,
            )
            .subquery()
        )

        query = (
            db.query(Guest, Reservation)
            .join(ranked, ranked.c.guest_id == Guest.id)
            .join(Reservation, Reservation.id == ranked.c.reservation_id)
            .filter(ranked.c.position == 1, Guest.tenant_id == tenant_id)
        )
        total = query.count()
        rows = (
            query.order_by(
                order_clause(CURRENT_GUEST_SORT_COLUMNS, params.sort_key, params.direction),
                Guest.id,
            )
            .offset(params.offset)
            .limit(params.limit)
            .all()
        )
        return rows, total

    def get_by_month(self, db: Session, tenant_id: int, month: int, year: int) -> List[dict]:
        """Reservations checking in during the month, with their additional guests."""
        if not 1 <= month <= 12:
            raise ValidationError("month must be between 1 and 12")
        if year < 1:
            raise ValidationError("year must be a positive number")

        first_day = date(year, month, 1)
        reservations = (
            self.query(db, tenant_id)
            .filter(
                Reservation.check_in >= local_midnight_utc(first_day),
                Reservation.check_in < local_midnight_utc(first_day + relativedelta(months=1)),
            )
            .order_by(Reservation.check_in, Reservation.id)
            .all()
        )

        guests = self.linked_guests(db, tenant_id, [r.id for r in reservations])
        return [
            {
                "reservation": reservation,
                "additional_guests": [
                    g for g in guests[reservation.id] if g.id != reservation.primary_guest_id
                ],
            }
            for reservation in reservations
        ]

    def get_analytics(
        self,
        db: Session,
        tenant_id: int,
        reference_day: Optional[date] = None,
        sort_by: str = "check_in",
        order: SortDirection = SortDirection.ASC,
    ) -> dict:
        """
        Weekly occupancy around a reference week.

        The window runs from the week one month before the reference week to
        the end of the week one month after it. A stay is counted in every
        week it touches, together with the number of guests on it.
        """
        if reference_day is None:
            reference_day = to_business_time(utcnow()).date()

        center = week_start_of(reference_day)
        window_start = week_start_of(center - relativedelta(months=1))
        window_end = week_start_of(center + relativedelta(months=1)) + timedelta(days=6)

        reservations = (
            self.query(db, tenant_id)
            .filter(
                Reservation.check_in >= local_midnight_utc(window_start),
                Reservation.check_in < local_midnight_utc(window_end + timedelta(days=1)),
            )
            .order_by(order_clause(RESERVATION_SORT_COLUMNS, sort_by, order), Reservation.id)
            .all()
        )

        guest_counts = {}
        if reservations:
            guest_counts = dict(
                db.query(ReservationGuest.reservation_id, func.count(ReservationGuest.id))
                .filter(
                    ReservationGuest.tenant_id == tenant_id,
                    ReservationGuest.reservation_id.in_([r.id for r in reservations]),
                )
                .group_by(ReservationGuest.reservation_id)
                .all()
            )

        weeks: Dict[date, dict] = {}
        for reservation in reservations:
            guest_count = max(guest_counts.get(reservation.id, 0), 1)
            for week_start in stay_weeks(reservation):
                bucket = weeks.setdefault(
                    week_start,
                    {
                        "week_start": week_start,
                        "week_end": week_start + timedelta(days=6),
                        "reservations": [],
                        "total_reservations": 0,
                        "total_guests": 0,
                    },
                )
                bucket["reservations"].append({"reservation": reservation, "guest_count": guest_count})
                bucket["total_reservations"] += 1
                bucket["total_guests"] += guest_count

        return {
            "window_start": window_start,
            "window_end": window_end,
            "reservations": reservations,
            "weeks": [weeks[key] for key in sorted(weeks)],
        }

    def format_reservation(self, reservation: Reservation) -> dict:
        return ReservationResponse.model_validate(reservation).model_dump(mode="json")

    def format_detail(self, detail: dict) -> dict:
        response = self.format_reservation(detail["reservation"])
        if "primary_guest" in detail:
            primary_guest = detail["primary_guest"]
            response["primary_guest"] = (
                GuestResponse.model_validate(primary_guest).model_dump(mode="json")
                if primary_guest
                else None
            )
        response["additional_guests"] = [
            GuestMinimumResponse.model_validate(g).model_dump(mode="json")
            for g in detail["additional_guests"]
        ]
        return response

    def format_current_guest(self, guest: Guest, reservation: Reservation) -> dict:
        response = GuestResponse.model_validate(guest).model_dump(mode="json")
        response["reservation"] = self.format_reservation(reservation)
        return response

    def format_analytics(self, analytics: dict) -> dict:
        return {
            "window_start": analytics["window_start"].isoformat(),
            "window_end": analytics["window_end"].isoformat(),
            "reservations": [self.format_reservation(r) for r in analytics["reservations"]],
            "weeks": [
                {
                    "week_start": week["week_start"].isoformat(),
                    "week_end": week["week_end"].isoformat(),
                    "reservations": [
                        {**self.format_reservation(entry["reservation"]), "guest_count": entry["guest_count"]}
                        for entry in week["reservations"]
                    ],
                    "total_reservations": week["total_reservations"],
                    "total_guests": week["total_guests"],
                }
                for week in analytics["weeks"]
            ],
        }
