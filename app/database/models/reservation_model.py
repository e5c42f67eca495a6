from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON, Numeric
from sqlalchemy.orm import relationship

from database.init import Base
from enums.guest_status import GuestStatus
from enums.payment_status import PaymentStatus
from utils.clock import utcnow


class Reservation(Base):
    __tablename__ = "reservations"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    # Plain column: deleting a guest keeps its reservations
    primary_guest_id = Column(Integer, nullable=False, index=True)
    primary_guest_name = Column(String(201), nullable=True)

    check_in = Column(DateTime, nullable=False, index=True)
    check_out = Column(DateTime, nullable=False)
    room_numbers = Column(JSON, nullable=False, default=list)

    payment_method = Column(String(30), nullable=True)
    total_amount = Column(Numeric(10, 2), nullable=False, default=0)
    payment_status = Column(String(20), default=PaymentStatus.PENDING.value, nullable=False)
    guest_status = Column(String(20), default=GuestStatus.ACTIVE.value, nullable=False, index=True)

    created_date = Column(DateTime, default=utcnow, nullable=False)
    updated_date = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    guest_links = relationship(
        "ReservationGuest", back_populates="reservation", cascade="all, delete-orphan"
    )

    def __repr__(self):
        return f"<Reservation(id={self.id}, primary_guest_id={self.primary_guest_id})>"


class ReservationGuest(Base):
    __tablename__ = "reservation_guests"

    id = Column(Integer, primary_key=True, index=True)
    reservation_id = Column(Integer, ForeignKey("reservations.id"), nullable=False, index=True)
    guest_id = Column(Integer, ForeignKey("guests.id"), nullable=False, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)

    reservation = relationship("Reservation", back_populates="guest_links")
    guest = relationship("Guest", back_populates="reservation_links")
