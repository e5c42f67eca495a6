from sqlalchemy import Column, Integer, String, Date, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from database.init import Base
from utils.clock import utcnow


class Guest(Base):
    """
    A person staying (or about to stay) at the property.

    There is no unique constraint on (tenant_id, email); the guest service keeps
    one row per pair by looking it up before inserting.
    """

    __tablename__ = "guests"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    date_of_birth = Column(Date, nullable=True)
    nationality = Column(String(100), nullable=True)
    identification_number = Column(String(100), nullable=True, index=True)
    email = Column(String(255), nullable=True, index=True)
    phone_number = Column(String(30), nullable=True)

    address = Column(JSON, nullable=True)
    emergency_contact = Column(JSON, nullable=True)
    vehicle = Column(JSON, nullable=True)

    created_date = Column(DateTime, default=utcnow, nullable=False)
    updated_date = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    reservation_links = relationship("ReservationGuest", back_populates="guest")

    @property
    def full_name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)

    def __repr__(self):
        return f"<Guest(id={self.id}, email='{self.email}')>"
