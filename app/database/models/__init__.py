from .tenant_model import Tenant
from .user_model import User
from .guest_model import Guest
from .room_model import Room
from .reservation_model import Reservation, ReservationGuest

__all__ = ["Tenant", "User", "Guest", "Room", "Reservation", "ReservationGuest"]
