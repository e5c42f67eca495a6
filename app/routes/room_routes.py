import logging
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from database.init import get_db
from database.models import User
from schemas.room_schema import RoomCreate, RoomResponse, RoomUpdate
from services.room_service import RoomService
from utils.dependencies import get_current_user, resolve_tenant_id
from utils.exceptions import AppError
from responses.success import created_response, data_response, empty_response, success_response
from responses.error import error_response, internal_server_error

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/rooms", tags=["Rooms"])

room_service = RoomService()


def serialize(room) -> dict:
    return RoomResponse.model_validate(room).model_dump(mode="json")


@router.post("", response_model=RoomResponse)
def create_room(
    payload: RoomCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        tenant_id = resolve_tenant_id(current_user, payload.tenant_id)
        room = room_service.create(db, tenant_id, payload)
        return created_response(f"Room {room.number} successfully created", serialize(room))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Creating room failed")
        return internal_server_error(f"Unable to create room. Message: {e}")


@router.get("", response_model=List[RoomResponse])
def get_rooms(
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        rooms = room_service.list_rooms(db, current_user.tenant_id)
        return data_response([serialize(r) for r in rooms], meta={"totalRooms": len(rooms)})
    except Exception as e:
        logger.exception("Listing rooms failed")
        return internal_server_error(f"Unable to retrieve rooms. Message: {e}")


@router.get("/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        return data_response(serialize(room_service.get_or_404(db, current_user.tenant_id, room_id)))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Fetching room %s failed", room_id)
        return internal_server_error(str(e))


@router.put("/{room_id}", response_model=RoomResponse)
def update_room(
    room_id: int,
    payload: RoomUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        room = room_service.update(db, current_user.tenant_id, room_id, payload)
        return success_response(f"Room {room_id} successfully updated", serialize(room))
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Updating room %s failed", room_id)
        return internal_server_error(str(e))


@router.delete("/{room_id}", status_code=204)
def delete_room(
    room_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    try:
        room_service.delete(db, current_user.tenant_id, room_id)
        return empty_response()
    except AppError as e:
        return error_response(e)
    except Exception as e:
        logger.exception("Deleting room %s failed", room_id)
        return internal_server_error(str(e))
