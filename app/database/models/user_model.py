from database.init import Base

from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from enums.user_role import UserRole
from enums.user_status import UserStatus
from utils.clock import utcnow


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    tenant_id = Column(Integer, ForeignKey("tenants.id"), nullable=False, index=True)
    username = Column(String(100), unique=True, index=True, nullable=False)
    first_name = Column(String(100), nullable=True)
    last_name = Column(String(100), nullable=True)
    role = Column(String(20), default=UserRole.EMPLOYEE.value, nullable=False)
    email = Column(String(255), unique=True, index=True, nullable=False)
    phone_number = Column(String(30), nullable=True)
    preferences = Column(JSON, nullable=True)
    password = Column(String(255), nullable=True)  # bcrypt hash, empty until registration
    profile_image = Column(String(500), nullable=True)
    status = Column(String(20), default=UserStatus.INVITED.value, nullable=False)

    reset_password_token = Column(String(64), nullable=True, index=True)
    reset_password_expires = Column(DateTime, nullable=True)

    created_date = Column(DateTime, default=utcnow, nullable=False)
    updated_date = Column(DateTime, default=utcnow, onupdate=utcnow, nullable=False)

    tenant = relationship("Tenant", back_populates="users")

    @property
    def name(self) -> str:
        return " ".join(p for p in (self.first_name, self.last_name) if p)
