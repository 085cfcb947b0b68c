"""
PreapprovedUser model: emails registered by an admin that skip the
pending-approval gate at signup.
"""
from datetime import datetime
from sqlalchemy import Boolean, Column, DateTime, Integer, String, Enum

from ..db import Base
from .user import UserRole


class PreapprovedUser(Base):
    __tablename__ = "preapproved_users"

    id = Column(Integer, primary_key=True, index=True)
    name = Column(String(100), nullable=False)
    email = Column(String(100), unique=True, index=True, nullable=False)
    role = Column(Enum(UserRole), nullable=False, default=UserRole.club_leader)
    is_registered = Column(Boolean, default=False, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
