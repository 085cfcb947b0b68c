# seminar_hall/routes/bookings.py
"""
Booking routes for club leaders and faculty, plus the public calendar.
"""
import logging
from datetime import datetime
from typing import List

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException, status
from sqlalchemy.orm import Session

from ..auth_utils import get_db, member_required
from ..config import settings
from ..CRUD import booking_crud
from ..models.booking import Booking, BookingStatus
from ..models.user import User
from ..schemas.booking import (
    BookingCreate,
    BookingOut,
    BookingResponse,
    BookingUpdate,
    ConflictingBooking,
    PublicBookingOut,
)
from ..utils.booking_workflow import BLOCKING_STATUSES, can_transition
from ..utils.notification_service import NotificationService, booking_snapshot
from ..utils.time_slots import TimeSlot, local_now

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/bookings",
    tags=["bookings"]
)


def conflict_error(message: str, conflicts: List[Booking]) -> HTTPException:
    """409 carrying the bookings that are in the way"""
    return HTTPException(
        status_code=status.HTTP_409_CONFLICT,
        detail={
            "message": message,
            "conflicting_bookings": [
                ConflictingBooking.model_validate(b).model_dump(mode="json") for b in conflicts
            ],
        },
    )


def validate_slot(slot: TimeSlot, now: datetime) -> None:
    if not slot.is_valid:
        raise HTTPException(400, "End time must be after start time.")
    if slot.start_at < now:
        raise HTTPException(400, "Booking date and time must be in the future.")


############ post new booking #################################


@router.post("", response_model=BookingResponse, status_code=status.HTTP_201_CREATED)
def create_booking(booking_in: BookingCreate, background_tasks: BackgroundTasks,
                   db: Session = Depends(get_db), current: User = Depends(member_required)):
    if booking_in.missing_fields():
        raise HTTPException(
            400, "Please enter all required fields: Club Name, Title, Date, Start Time, End Time, and accept terms.")
    if not booking_in.terms_accepted:
        raise HTTPException(400, "You must accept the terms and conditions.")

    slot = TimeSlot(booking_in.date, booking_in.start_time, booking_in.end_time)
    validate_slot(slot, local_now(settings.TIMEZONE))

    try:
        conflicts = booking_crud.get_conflicting_bookings(db, slot, BLOCKING_STATUSES)
        if conflicts:
            logger.info(
                f"Booking request by user {current.id} overlaps bookings {[b.id for b in conflicts]}")
            raise conflict_error(
                f"The selected time slot overlaps with an existing approved or pending booking "
                f"(including {settings.BOOKING_BUFFER_MINUTES}-minute buffer). Please choose another time.",
                conflicts)

        booking = Booking(
            user_id=current.id,
            club_name=booking_in.club_name.strip(),
            title=booking_in.title.strip(),
            description=booking_in.description,
            date=slot.date,
            start_time=slot.start,
            end_time=slot.end,
            terms_accepted=True,
            status=BookingStatus.pending,
        )
        db.add(booking)
        db.commit()
        db.refresh(booking)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Unexpected error in create_booking: {e}")
        db.rollback()
        raise HTTPException(500, "Server error while creating booking. Please try again.")

    logger.info(f"Booking {booking.id} created by user {current.id}")
    background_tasks.add_task(
        NotificationService.booking_submitted, booking_snapshot(booking))

    return {
        "message": "Booking created successfully! Admin has been notified and will review your request.",
        "booking": BookingOut.model_validate(booking),
    }


@router.get("", response_model=List[BookingOut])
def list_my_bookings(db: Session = Depends(get_db), current: User = Depends(member_required)):
    return booking_crud.list_for_user(db, current.id)


@router.get("/public", response_model=List[PublicBookingOut])
def list_public_bookings(db: Session = Depends(get_db)):
    """Approved bookings from today on, for the public calendar"""
    return booking_crud.list_public(db, local_now(settings.TIMEZONE).date())


# a user updates their own booking while it is still pending
@router.put("/{booking_id}", response_model=BookingResponse)
def update_booking(booking_id: int, booking_in: BookingUpdate,
                   db: Session = Depends(get_db), current: User = Depends(member_required)):
    try:
        booking = booking_crud.get_owned(db, booking_id, current.id)
        if not booking:
            raise HTTPException(404, "Booking not found.")
        if booking.status != BookingStatus.pending:
            raise HTTPException(400, "Only pending bookings can be updated.")
        if booking_in.terms_accepted is False:
            raise HTTPException(400, "You must accept the terms and conditions.")

        # Omitted or null fields keep their current values
        updates = booking_in.model_dump(exclude_none=True)
        for field in ("club_name", "title"):
            if field in updates and not updates[field].strip():
                raise HTTPException(400, f"{field.replace('_', ' ').capitalize()} cannot be empty.")

        if booking_in.touches_schedule():
            slot = TimeSlot(
                updates.get("date", booking.date),
                updates.get("start_time", booking.start_time),
                updates.get("end_time", booking.end_time),
            )
            validate_slot(slot, local_now(settings.TIMEZONE))
            conflicts = booking_crud.get_conflicting_bookings(
                db, slot, BLOCKING_STATUSES, exclude_id=booking.id)
            if conflicts:
                raise conflict_error(
                    "The updated time slot overlaps with an existing booking. Please choose another time.",
                    conflicts)

        for field, value in updates.items():
            setattr(booking, field, value)
        booking.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(booking)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error updating booking {booking_id}: {e}")
        db.rollback()
        raise HTTPException(500, "Server error updating booking.")

    logger.info(f"Booking {booking.id} updated by user {current.id}")
    return {"message": "Booking updated successfully.", "booking": BookingOut.model_validate(booking)}


# a user cancels their own booking if it is still pending
@router.delete("/{booking_id}", response_model=BookingResponse)
def cancel_my_booking(booking_id: int, db: Session = Depends(get_db),
                      current: User = Depends(member_required)):
    try:
        booking = booking_crud.get_owned(db, booking_id, current.id)
        if not booking or not can_transition(booking.status, BookingStatus.cancelled):
            raise HTTPException(404, "Booking not found or cannot be cancelled.")

        booking.status = BookingStatus.cancelled
        booking.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(booking)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error cancelling booking {booking_id}: {e}")
        db.rollback()
        raise HTTPException(500, "Server error cancelling booking.")

    logger.info(f"Booking {booking.id} cancelled by its owner {current.id}")
    return {"message": "Booking cancelled successfully.", "booking": BookingOut.model_validate(booking)}
