import logging
from typing import Iterable, List

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from database.init import atomic
from database.models import Room
from schemas.room_schema import RoomCreate, RoomUpdate
from services.base_service import BaseService
from utils.exceptions import ConflictError, InternalError

logger = logging.getLogger(__name__)


class RoomService(BaseService):
    def __init__(self):
        super().__init__(Room, "Room")

    def number_taken(self, db: Session, tenant_id: int, number: str, exclude_room_id: int = None) -> bool:
        query = self.query(db, tenant_id).filter(Room.number == number)
        if exclude_room_id is not None:
            query = query.filter(Room.id != exclude_room_id)
        return query.first() is not None

    def list_rooms(self, db: Session, tenant_id: int) -> List[Room]:
        return self.query(db, tenant_id).order_by(Room.number).all()

    def create(self, db: Session, tenant_id: int, room_in: RoomCreate) -> Room:
        if self.number_taken(db, tenant_id, room_in.number):
            raise ConflictError(
                f"A room number {room_in.number} already exists for tenant {tenant_id}"
            )

        room = Room(
            tenant_id=tenant_id,
            number=room_in.number,
            name=room_in.name,
            occupied=room_in.occupied,
        )
        try:
            with atomic(db):
                db.add(room)
            db.refresh(room)
        except IntegrityError:
            raise ConflictError(
                f"A room number {room_in.number} already exists for tenant {tenant_id}"
            )
        except SQLAlchemyError as e:
            logger.exception("Creating room %s failed", room_in.number)
            raise InternalError(
                f"Unable to create room number {room_in.number} for tenant {tenant_id}. Message: {e}"
            )
        return room

    def update(self, db: Session, tenant_id: int, room_id: int, room_in: RoomUpdate) -> Room:
        room = self.get_or_404(db, tenant_id, room_id)
        update_data = room_in.model_dump(exclude_unset=True)

        number = update_data.get("number")
        if number and number != room.number and self.number_taken(db, tenant_id, number, room.id):
            raise ConflictError(f"A room number {number} already exists for tenant {tenant_id}")

        try:
            with atomic(db):
                for field, value in update_data.items():
                    if value is not None:
                        setattr(room, field, value)
            db.refresh(room)
        except IntegrityError:
            raise ConflictError(f"A room number {number} already exists for tenant {tenant_id}")
        except SQLAlchemyError as e:
            raise InternalError(f"Unable to update room {room_id} for tenant {tenant_id}. Message: {e}")
        return room

    def delete(self, db: Session, tenant_id: int, room_id: int) -> None:
        room = self.get_or_404(db, tenant_id, room_id)
        try:
            with atomic(db):
                db.delete(room)
        except SQLAlchemyError as e:
            raise InternalError(f"Unable to delete room {room_id} for tenant {tenant_id}. Message: {e}")

    def mark_occupied(self, db: Session, tenant_id: int, numbers: Iterable[str]) -> List[Room]:
        """
        Flag the booked rooms as occupied inside the caller's transaction.
        Nothing releases them again at checkout.
        """
        numbers = list(dict.fromkeys(numbers))
        rooms = self.query(db, tenant_id).filter(Room.number.in_(numbers)).all()
        for room in rooms:
            room.occupied = True
        if rooms:
            logger.info(
                "Marked rooms %s occupied for tenant %s", [room.number for room in rooms], tenant_id
            )

        missing = set(numbers) - {room.number for room in rooms}
        if missing:
            logger.warning(
                "Rooms %s do not exist for tenant %s; occupancy not updated",
                sorted(missing),
                tenant_id,
            )
        db.flush()
        return rooms
