from enum import Enum


class GuestStatus(str, Enum):
    ACTIVE = "active"
    INACTIVE = "inactive"
