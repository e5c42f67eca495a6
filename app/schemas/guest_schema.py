from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, List
from datetime import date, datetime


class Address(BaseModel):
    street: Optional[str] = None
    city: Optional[str] = None
    state: Optional[str] = None
    postal_code: Optional[str] = None
    country: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class EmergencyContact(BaseModel):
    name: Optional[str] = None
    relationship: Optional[str] = None
    phone_number: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class Vehicle(BaseModel):
    make: Optional[str] = None
    model: Optional[str] = None
    color: Optional[str] = None
    license_plate: Optional[str] = None
    state: Optional[str] = None

    model_config = ConfigDict(extra="allow")


class GuestBase(BaseModel):
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = None
    identification_number: Optional[str] = None
    phone_number: Optional[str] = None
    address: Optional[Address] = None
    emergency_contact: Optional[EmergencyContact] = None
    vehicle: Optional[Vehicle] = None


class GuestCreate(GuestBase):
    email: EmailStr
    tenant_id: Optional[int] = None


class GuestResponse(GuestBase):
    id: int
    tenant_id: int
    email: Optional[str] = None
    created_date: datetime
    updated_date: datetime

    model_config = ConfigDict(from_attributes=True)


class GuestMinimumResponse(BaseModel):
    id: int
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[str] = None
    identification_number: Optional[str] = None

    model_config = ConfigDict(from_attributes=True)


class GuestReservationSummary(BaseModel):
    id: int
    primary_guest_id: int
    check_in: datetime
    check_out: datetime
    room_numbers: List[str] = []
    total_amount: float
    guest_status: str

    model_config = ConfigDict(from_attributes=True)


class GuestWithReservationsResponse(GuestResponse):
    reservations: List[GuestReservationSummary] = []
