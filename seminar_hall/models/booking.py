"""
Booking model: a request by a club leader or faculty member to use the
seminar hall on one date between two times.
"""
from sqlalchemy import Column, Integer, Date, Time, Boolean, ForeignKey, String, Text, Enum, DateTime, CheckConstraint
from sqlalchemy.orm import relationship
from datetime import datetime
import enum

from ..db import Base


class BookingStatus(str, enum.Enum):
    pending = "pending"
    approved = "approved"
    rejected = "rejected"
    cancelled = "cancelled"


class Booking(Base):
    __tablename__ = "bookings"
    __table_args__ = (
        CheckConstraint("start_time < end_time",
                        name="ck_bookings_start_before_end"),
    )

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)

    club_name = Column(String(255), nullable=False, default="N/A")
    title = Column(String(100), nullable=False)
    description = Column(Text, nullable=True)

    date = Column(Date, nullable=False, index=True)
    start_time = Column(Time, nullable=False)
    end_time = Column(Time, nullable=False)

    status = Column(Enum(BookingStatus),
                    default=BookingStatus.pending, nullable=False)
    admin_comments = Column(Text, nullable=True)
    terms_accepted = Column(Boolean, nullable=False)

    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow,
                        onupdate=datetime.utcnow, nullable=False)

    # Relationships
    user = relationship("User", back_populates="bookings", lazy="select")
