"""
Booking schemas.

Request bodies accept both snake_case names and the camelCase names used by
the web client (startTime, endTime, termsAccepted, adminComments).
"""
from pydantic import BaseModel, Field, field_validator
import datetime as dt
from typing import List, Optional

from seminar_hall.models.booking import BookingStatus


def naive_time(value: Optional[dt.time]) -> Optional[dt.time]:
    # Slot times are wall-clock times in the hall's timezone
    if value is not None and value.tzinfo is not None:
        raise ValueError("Time must not include a timezone offset")
    return value


class BookingCreate(BaseModel):
    # Presence is checked by the route so the client gets one clear message
    club_name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = Field(None, alias="startTime")
    end_time: Optional[dt.time] = Field(None, alias="endTime")
    terms_accepted: Optional[bool] = Field(None, alias="termsAccepted")

    @field_validator("start_time", "end_time")
    @classmethod
    def reject_timezone(cls, v: Optional[dt.time]) -> Optional[dt.time]:
        return naive_time(v)

    class Config:
        populate_by_name = True

    def missing_fields(self) -> List[str]:
        required = ("club_name", "title", "date", "start_time",
                    "end_time", "terms_accepted")
        missing = []
        for name in required:
            value = getattr(self, name)
            if value is None or (isinstance(value, str) and not value.strip()):
                missing.append(name)
        return missing


class BookingUpdate(BaseModel):
    club_name: Optional[str] = None
    title: Optional[str] = None
    description: Optional[str] = None
    date: Optional[dt.date] = None
    start_time: Optional[dt.time] = Field(None, alias="startTime")
    end_time: Optional[dt.time] = Field(None, alias="endTime")
    terms_accepted: Optional[bool] = Field(None, alias="termsAccepted")

    @field_validator("start_time", "end_time")
    @classmethod
    def reject_timezone(cls, v: Optional[dt.time]) -> Optional[dt.time]:
        return naive_time(v)

    class Config:
        populate_by_name = True

    def touches_schedule(self) -> bool:
        return any(value is not None for value in (self.date, self.start_time, self.end_time))


class AdminDecision(BaseModel):
    admin_comments: Optional[str] = Field(None, alias="adminComments")

    class Config:
        populate_by_name = True


class BookingOut(BaseModel):
    id: int
    user_id: int
    club_name: str
    title: str
    description: Optional[str] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    status: BookingStatus
    admin_comments: Optional[str] = None
    terms_accepted: bool
    created_at: dt.datetime
    updated_at: Optional[dt.datetime] = None

    class Config:
        from_attributes = True  # For SQLAlchemy ORM compatibility


class PublicBookingOut(BaseModel):
    """What the public calendar shows"""
    id: int
    club_name: str
    title: str
    description: Optional[str] = None
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    status: BookingStatus

    class Config:
        from_attributes = True


class AdminBookingOut(BookingOut):
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    user_role: Optional[str] = None

    @classmethod
    def from_booking(cls, booking):
        data = BookingOut.model_validate(booking).model_dump()
        if booking.user:
            data.update(
                user_name=booking.user.name,
                user_email=booking.user.email,
                user_role=booking.user.role.value if booking.user.role else None,
            )
        return cls(**data)


class ConflictingBooking(BaseModel):
    id: int
    title: str
    club_name: str
    date: dt.date
    start_time: dt.time
    end_time: dt.time
    status: BookingStatus

    class Config:
        from_attributes = True


class BookingResponse(BaseModel):
    message: str
    booking: BookingOut


class BookingStats(BaseModel):
    total_bookings: int
    pending_bookings: int
    approved_bookings: int
    rejected_bookings: int
    cancelled_bookings: int
