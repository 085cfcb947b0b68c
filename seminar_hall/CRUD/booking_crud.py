from datetime import date
from typing import Dict, List, Optional, Sequence

from sqlalchemy import func
from sqlalchemy.orm import Session, joinedload

from seminar_hall.config import settings
from seminar_hall.models.booking import Booking, BookingStatus
from seminar_hall.utils.time_slots import TimeSlot, find_conflicts


def get_by_id(db: Session, booking_id: int) -> Optional[Booking]:
    """Get booking by ID, with its owner loaded"""
    return db.query(Booking).options(joinedload(Booking.user)).filter(
        Booking.id == booking_id).first()


def get_owned(db: Session, booking_id: int, user_id: int) -> Optional[Booking]:
    return db.query(Booking).filter(
        Booking.id == booking_id,
        Booking.user_id == user_id
    ).first()


def list_for_user(db: Session, user_id: int) -> List[Booking]:
    """A user's bookings, newest first"""
    return db.query(Booking).filter(
        Booking.user_id == user_id
    ).order_by(Booking.created_at.desc(), Booking.id.desc()).all()


def list_public(db: Session, from_date: date) -> List[Booking]:
    """Approved bookings from `from_date` on, in calendar order"""
    return db.query(Booking).filter(
        Booking.status == BookingStatus.approved,
        Booking.date >= from_date
    ).order_by(Booking.date.asc(), Booking.start_time.asc()).all()


def list_by_status(db: Session, status: BookingStatus) -> List[Booking]:
    """Bookings in one status with their owners, oldest first"""
    return db.query(Booking).options(joinedload(Booking.user)).filter(
        Booking.status == status
    ).order_by(Booking.created_at.asc(), Booking.id.asc()).all()


def list_all(db: Session) -> List[Booking]:
    return db.query(Booking).options(joinedload(Booking.user)).order_by(
        Booking.created_at.desc(), Booking.id.desc()).all()


def count_by_status(db: Session) -> Dict[str, int]:
    """Booking counts per status plus the total"""
    rows = db.query(Booking.status, func.count(Booking.id)).group_by(
        Booking.status).all()
    counts = {status.value: 0 for status in BookingStatus}
    for status, count in rows:
        counts[BookingStatus(status).value] = count
    return {
        "total_bookings": sum(counts.values()),
        "pending_bookings": counts[BookingStatus.pending.value],
        "approved_bookings": counts[BookingStatus.approved.value],
        "rejected_bookings": counts[BookingStatus.rejected.value],
        "cancelled_bookings": counts[BookingStatus.cancelled.value],
    }


def get_conflicting_bookings(
    db: Session,
    slot: TimeSlot,
    statuses: Sequence[BookingStatus],
    exclude_id: Optional[int] = None,
    buffer_minutes: Optional[int] = None,
) -> List[Booking]:
    """
    Load the same-date bookings in `statuses` and keep those whose times
    collide with `slot` once the buffer is applied.
    """
    if buffer_minutes is None:
        buffer_minutes = settings.BOOKING_BUFFER_MINUTES

    same_day = db.query(Booking).filter(
        Booking.date == slot.date,
        Booking.status.in_(list(statuses))
    ).order_by(Booking.start_time.asc()).all()

    return find_conflicts(slot, same_day, buffer_minutes,
                          statuses=statuses, exclude_id=exclude_id)
