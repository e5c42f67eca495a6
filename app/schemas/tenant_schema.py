from pydantic import BaseModel, ConfigDict
from typing import Optional
from datetime import datetime

from enums.tenant_status import TenantStatus, MembershipTier


class TenantBase(BaseModel):
    name: str
    membership: MembershipTier = MembershipTier.BASIC
    status: TenantStatus = TenantStatus.ACTIVE


class TenantCreate(TenantBase):
    pass


class TenantUpdate(BaseModel):
    name: Optional[str] = None
    membership: Optional[MembershipTier] = None
    status: Optional[TenantStatus] = None


class TenantResponse(BaseModel):
    id: int
    name: str
    membership: str
    status: str
    created_date: datetime
    updated_date: datetime

    model_config = ConfigDict(from_attributes=True)
