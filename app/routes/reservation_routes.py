import logging
from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import User
from enums.sort_direction import SortDirection
from schemas.reservation_schema import (
    ReservationAnalyticsResponse,
    ReservationCreate,
    ReservationDetailResponse,
    ReservationResponse,
)
from services.reservation_service import ReservationService
from utils.dependencies import get_current_user
from utils.exceptions import AppError, ValidationError
from utils.pagination import PageParams
from responses.success import created_response, data_response
from responses.error import error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/reservations", tags=["Reservations"])

reservation_service = ReservationService()


@router.post("", response_model=ReservationResponse)
def create_reservation(
    payload: ReservationCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        reservation = reservation_service.create(db, current_user.tenant_id, payload)
        return created_response(
            "Reservation successfully created",
            reservation_service.format_reservation(reservation),
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Creating reservation failed")
        return internal_server_error(f"Unable to create reservation. Message: {e}")


@router.get("", response_model=List[ReservationResponse])
def get_reservations(
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        reservations, total = reservation_service.list_reservations(db, current_user.tenant_id, params)
        return data_response(
            [reservation_service.format_reservation(r) for r in reservations],
            meta=params.meta(total, "totalReservations"),
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Listing reservations failed")
        return internal_server_error(f"Unable to retrieve reservations. Message: {e}")


@router.get("/analytics", response_model=ReservationAnalyticsResponse)
def get_reservation_analytics(
    week: Optional[date] = Query(None, description="Any day of the reference week"),
    sortBy: str = Query("check_in"),
    order: str = Query("ASC"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        analytics = reservation_service.get_analytics(
            db,
            current_user.tenant_id,
            reference_day=week,
            sort_by=sortBy,
            order=SortDirection.parse(order),
        )
        return data_response(
            reservation_service.format_analytics(analytics),
            meta={"totalReservations": len(analytics["reservations"])},
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Reservation analytics failed")
        return internal_server_error(f"Unable to compute reservation analytics. Message: {e}")


@router.get("/calendar", response_model=List[ReservationDetailResponse])
def get_reservations_by_month(
    month: Optional[int] = Query(None),
    year: Optional[int] = Query(None),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        if month is None or year is None:
            raise ValidationError("month and year are required")
        entries = reservation_service.get_by_month(db, current_user.tenant_id, month, year)
        return data_response(
            [reservation_service.format_detail(entry) for entry in entries]
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Reservation calendar failed")
        return internal_server_error(f"Unable to retrieve reservations. Message: {e}")


@router.get("/{reservation_id}", response_model=ReservationDetailResponse)
def get_reservation(
    reservation_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        detail = reservation_service.get_detail(db, current_user.tenant_id, reservation_id)
        return data_response(reservation_service.format_detail(detail))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Fetching reservation %s failed", reservation_id)
        return internal_server_error(str(e))
