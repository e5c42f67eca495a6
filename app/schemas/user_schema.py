from pydantic import BaseModel, ConfigDict, EmailStr
from typing import Optional, Any, Dict
from datetime import datetime

from enums.user_role import UserRole
from enums.user_status import UserStatus


class UserCreate(BaseModel):
    username: str
    email: EmailStr
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: UserRole = UserRole.EMPLOYEE
    phone_number: Optional[str] = None
    tenant_id: Optional[int] = None


class UserUpdate(BaseModel):
    username: Optional[str] = None
    email: Optional[EmailStr] = None
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    phone_number: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    role: Optional[UserRole] = None
    status: Optional[UserStatus] = None


class CompleteRegistrationRequest(BaseModel):
    phone_number: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    password: Optional[str] = None


class UserResponse(BaseModel):
    id: int
    tenant_id: int
    username: str
    first_name: Optional[str] = None
    last_name: Optional[str] = None
    role: str
    email: str
    phone_number: Optional[str] = None
    preferences: Optional[Dict[str, Any]] = None
    profile_image: Optional[str] = None
    status: str
    created_date: datetime
    updated_date: datetime

    model_config = ConfigDict(from_attributes=True)
