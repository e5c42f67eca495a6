import logging
from typing import List

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import User
from schemas.guest_schema import (
    GuestCreate,
    GuestReservationSummary,
    GuestResponse,
    GuestWithReservationsResponse,
)
from schemas.reservation_schema import CurrentGuestResponse
from services.guest_service import GuestService
from services.reservation_service import ReservationService
from utils.dependencies import get_current_user, resolve_tenant_id
from utils.exceptions import AppError, ValidationError
from utils.pagination import PageParams
from responses.success import created_response, data_response, success_response
from responses.error import error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/guests", tags=["Guests"])

guest_service = GuestService()
reservation_service = ReservationService()


def serialize(guest) -> dict:
    return GuestResponse.model_validate(guest).model_dump(mode="json")


def serialize_with_reservations(guest, reservations) -> dict:
    response = serialize(guest)
    response["reservations"] = [
        GuestReservationSummary.model_validate(r).model_dump(mode="json") for r in reservations
    ]
    return response


@router.post("", response_model=GuestResponse)
def upsert_guest(
    payload: GuestCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """Create a guest, or update the tenant's guest that already has this email."""
    try:
        tenant_id = resolve_tenant_id(current_user, payload.tenant_id)
        guest = guest_service.upsert(db, tenant_id, payload)
        return created_response("Guest successfully created/updated", serialize(guest))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Guest upsert failed")
        return internal_server_error(f"Unable to create/update guest. Message: {e}")


@router.get("", response_model=List[GuestWithReservationsResponse])
def get_guests(
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        items, total = guest_service.list_with_reservations(db, current_user.tenant_id, params)
        return data_response(
            [serialize_with_reservations(item["guest"], item["reservations"]) for item in items],
            meta=params.meta(total, "totalGuests"),
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Listing guests failed")
        return internal_server_error(f"Unable to retrieve guests. Message: {e}")


@router.get("/search", response_model=List[GuestResponse])
def search_guests(
    searchQuery: str = Query(None),
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        if not searchQuery or not searchQuery.strip():
            raise ValidationError("Search query is required")
        guests = guest_service.search(
            db,
            current_user.tenant_id,
            searchQuery.strip(),
            limit=limit,
            offset=(page - 1) * limit,
        )
        return data_response([serialize(g) for g in guests])
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Guest search failed")
        return internal_server_error(f"Unable to search guests. Message: {e}")


@router.get("/current", response_model=List[CurrentGuestResponse])
def get_current_guests(
    params: PageParams = Depends(),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        rows, total = reservation_service.get_current_guests(db, current_user.tenant_id, params)
        return data_response(
            [reservation_service.format_current_guest(guest, reservation) for guest, reservation in rows],
            meta=params.meta(total, "totalCurrentGuests"),
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Listing current guests failed")
        return internal_server_error(f"Unable to retrieve current guests. Message: {e}")


@router.get("/{guest_id}", response_model=GuestResponse)
def get_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return data_response(serialize(guest_service.get_or_404(db, current_user.tenant_id, guest_id)))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Fetching guest %s failed", guest_id)
        return internal_server_error(str(e))


@router.get("/{guest_id}/reservations", response_model=GuestWithReservationsResponse)
def get_guest_reservations(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        guest, reservations = reservation_service.get_guest_reservations(
            db, current_user.tenant_id, guest_id
        )
        return data_response(serialize_with_reservations(guest, reservations))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Fetching reservations of guest %s failed", guest_id)
        return internal_server_error(str(e))


@router.delete("/{guest_id}")
def delete_guest(
    guest_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        guest_service.delete(db, current_user.tenant_id, guest_id)
        return success_response(
            f"Guest with ID: {guest_id} successfully deleted and reservation retained"
        )
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Deleting guest %s failed", guest_id)
        return internal_server_error(str(e))
