from sqlalchemy import Column, Integer, String, DateTime
from sqlalchemy.orm import relationship
from database.init import Base
from enums.tenant_status import TenantStatus, MembershipTier
from utils.clock import utcnow


class Tenant(Base):
    __tablename__ = "tenants"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), index=True, nullable=False)
    membership = Column(String(20), default=MembershipTier.BASIC.value, nullable=False)
    status = Column(String(20), default=TenantStatus.ACTIVE.value, nullable=False)

    created_date = Column(DateTime, default=utcnow, nullable=False)
    updated_date = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    users = relationship("User", back_populates="tenant")

    def __repr__(self):
        return f"<Tenant(id={self.id}, name='{self.name}')>"
