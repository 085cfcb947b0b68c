"""
User model: Admin, Club Leader, Faculty.
"""
from datetime import datetime
from sqlalchemy import Column, DateTime, Integer, String, Enum
from sqlalchemy.orm import relationship
import enum

from ..db import Base


class UserRole(str, enum.Enum):
    admin = "admin"
    club_leader = "club_leader"
    faculty = "faculty"


class UserStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    password_hash = Column(String(255), nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.faculty)
    status = Column(Enum(UserStatus),
                    default=UserStatus.pending, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    # Relationships
    bookings = relationship(
        "Booking", back_populates="user", lazy="select", cascade="all")

    def is_approved(self):
        return self.status == UserStatus.approved
