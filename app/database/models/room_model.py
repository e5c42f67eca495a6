from sqlalchemy import Column, Integer, String, Boolean, DateTime, ForeignKey, UniqueConstraint

from database.init import Base
from utils.clock import utcnow


class Room(Base):
    __tablename__ = "rooms"
    __table_args__ = (UniqueConstraint("tenant_id", "number", name="uq_rooms_tenant_number"),)

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    number = Column(String(20), nullable=False)
    name = Column(String(100), nullable=True)
    occupied = Column(Boolean, default=False, nullable=False)

    created_date = Column(DateTime, default=utcnow, nullable=False)
    updated_date = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)
