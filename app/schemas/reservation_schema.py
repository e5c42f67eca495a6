from pydantic import BaseModel, ConfigDict, EmailStr, Field, field_validator
from typing import Optional, List
from datetime import date, datetime

from enums.payment_method import PaymentMethod
from enums.payment_status import PaymentStatus
from .guest_schema import GuestResponse, GuestMinimumResponse
from .room_schema import number_as_string


class AdditionalGuestRef(BaseModel):
    """Reference to a guest travelling with the primary guest."""

    guest_id: Optional[int] = None
    identification_number: Optional[str] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    email: Optional[EmailStr] = None
    phone_number: Optional[str] = None
    date_of_birth: Optional[date] = None
    nationality: Optional[str] = None


class ReservationCreate(BaseModel):
    primary_guest_id: int
    room_numbers: List[str] = Field(min_length=1)
    check_in: datetime
    check_out: datetime
    payment_method: Optional[PaymentMethod] = None
    total_amount: float = Field(default=0, ge=0)
    payment_status: PaymentStatus = PaymentStatus.PENDING
    additional_guests: List[AdditionalGuestRef] = []

    @field_validator("room_numbers", mode="before")
    @classmethod
    def room_numbers_as_strings(cls, value):
        if isinstance(value, list):
            return [number_as_string(v) for v in value]
        return value


class ReservationResponse(BaseModel):
    id: int
    tenant_id: int
    primary_guest_id: int
    primary_guest_name: Optional[str] = None
    check_in: datetime
    check_out: datetime
    room_numbers: List[str] = []
    payment_method: Optional[str] = None
    total_amount: float
    payment_status: str
    guest_status: str
    created_date: datetime
    updated_date: datetime

    model_config = ConfigDict(from_attributes=True)


class ReservationDetailResponse(ReservationResponse):
    primary_guest: Optional[GuestResponse] = None
    additional_guests: List[GuestMinimumResponse] = []


class CurrentGuestResponse(GuestResponse):
    reservation: ReservationResponse


class WeeklyReservation(ReservationResponse):
    guest_count: int


class WeekBucket(BaseModel):
    week_start: date
    week_end: date
    reservations: List[WeeklyReservation] = []
    total_reservations: int = 0
    total_guests: int = 0


class ReservationAnalyticsResponse(BaseModel):
    window_start: date
    window_end: date
    reservations: List[ReservationResponse] = []
    weeks: List[WeekBucket] = []
