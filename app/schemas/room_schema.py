from pydantic import BaseModel, ConfigDict, field_validator
from typing import Optional
from datetime import datetime


def number_as_string(value):
    """Room numbers are stored as text; clients often send them as integers."""
    if isinstance(value, int) and not isinstance(value, bool):
        return str(value)
    if isinstance(value, str):
        return value.strip()
    return value


class RoomCreate(BaseModel):
    number: str
    name: Optional[str] = None
    occupied: bool = False
    tenant_id: Optional[int] = None

    @field_validator("number", mode="before")
    @classmethod
    def coerce_number(cls, value):
        return number_as_string(value)

    @field_validator("number")
    @classmethod
    def number_not_blank(cls, value: str) -> str:
        if not value:
            raise ValueError("Room number is required")
        return value


class RoomUpdate(BaseModel):
    number: Optional[str] = None
    name: Optional[str] = None
    occupied: Optional[bool] = None

    @field_validator("number", mode="before")
    @classmethod
    def coerce_number(cls, value):
        return number_as_string(value)

    @field_validator("number")
    @classmethod
    def number_not_blank(cls, value: Optional[str]) -> Optional[str]:
        if value is not None and not value:
            raise ValueError("Room number cannot be blank")
        return value


class RoomResponse(BaseModel):
    id: int
    tenant_id: int
    number: str
    name: Optional[str] = None
    occupied: bool
    created_date: datetime
    updated_date: datetime

    model_config = ConfigDict(from_attributes=True)
