"""
Admin routes: review, approve and reject hall bookings.
"""
import logging
from datetime import datetime
from typing import List, Optional

from fastapi import APIRouter, BackgroundTasks, Depends, HTTPException
from sqlalchemy.orm import Session

from ..auth_utils import admin_required, get_db
from ..config import settings
from ..CRUD import booking_crud
from ..models.booking import BookingStatus
from ..models.user import User
from ..schemas.booking import AdminBookingOut, AdminDecision, BookingOut, BookingResponse, BookingStats
from ..utils.booking_workflow import (
    APPROVAL_BLOCKING_STATUSES,
    BookingTransitionError,
    can_transition,
    ensure_rejectable,
)
from ..utils.notification_service import NotificationService, booking_snapshot
from ..utils.time_slots import TimeSlot, local_now
from .bookings import conflict_error

logger = logging.getLogger(__name__)

router = APIRouter(
    prefix="/api/admin",
    tags=["admin"],
    dependencies=[Depends(admin_required)]
)


@router.get("/bookings/pending", response_model=List[AdminBookingOut])
def list_pending_bookings(db: Session = Depends(get_db)):
    return [AdminBookingOut.from_booking(b)
            for b in booking_crud.list_by_status(db, BookingStatus.pending)]


@router.get("/bookings/all", response_model=List[AdminBookingOut])
def list_all_bookings(db: Session = Depends(get_db)):
    return [AdminBookingOut.from_booking(b) for b in booking_crud.list_all(db)]


@router.get("/bookings/stats", response_model=BookingStats)
def booking_stats(db: Session = Depends(get_db)):
    return booking_crud.count_by_status(db)


@router.get("/bookings/{booking_id}", response_model=AdminBookingOut)
def get_booking(booking_id: int, db: Session = Depends(get_db)):
    booking = booking_crud.get_by_id(db, booking_id)
    if not booking:
        raise HTTPException(status_code=404, detail="Booking not found.")
    return AdminBookingOut.from_booking(booking)


# an admin approves a pending booking
@router.put("/bookings/{booking_id}/approve", response_model=BookingResponse)
def approve_booking(booking_id: int, background_tasks: BackgroundTasks,
                    decision: Optional[AdminDecision] = None,
                    db: Session = Depends(get_db),
                    current: User = Depends(admin_required)):
    admin_comments = decision.admin_comments if decision else None
    try:
        booking = booking_crud.get_by_id(db, booking_id)
        if not booking or not can_transition(booking.status, BookingStatus.approved):
            raise HTTPException(
                status_code=404, detail="Booking not found or not in pending status.")

        conflicts = booking_crud.get_conflicting_bookings(
            db, TimeSlot.of(booking), APPROVAL_BLOCKING_STATUSES, exclude_id=booking.id)
        if conflicts:
            raise conflict_error(
                "Cannot approve: This time slot conflicts with an already approved booking.",
                conflicts)

        booking.status = BookingStatus.approved
        booking.admin_comments = admin_comments
        booking.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(booking)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error approving booking {booking_id}: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Server error approving booking.")

    logger.info(f"Booking {booking.id} approved by admin {current.id}")
    background_tasks.add_task(
        NotificationService.booking_approved, booking_snapshot(booking), admin_comments)

    return {"message": "Booking approved successfully.",
            "booking": BookingOut.model_validate(booking)}


# an admin rejects a pending booking or cancels an approved one
@router.put("/bookings/{booking_id}/reject", response_model=BookingResponse)
def reject_booking(booking_id: int, background_tasks: BackgroundTasks,
                   decision: Optional[AdminDecision] = None,
                   db: Session = Depends(get_db),
                   current: User = Depends(admin_required)):
    admin_comments = decision.admin_comments if decision else None
    try:
        booking = booking_crud.get_by_id(db, booking_id)
        if not booking:
            raise HTTPException(status_code=404, detail="Booking not found.")

        was_approved = booking.status == BookingStatus.approved
        ensure_rejectable(
            booking.status,
            TimeSlot.of(booking).start_at,
            local_now(settings.TIMEZONE),
            settings.CANCELLATION_NOTICE_HOURS,
        )

        booking.status = BookingStatus.rejected
        booking.admin_comments = admin_comments
        booking.updated_at = datetime.utcnow()
        db.commit()
        db.refresh(booking)
    except BookingTransitionError as e:
        db.rollback()
        raise HTTPException(status_code=400, detail=e.message)
    except HTTPException:
        db.rollback()
        raise
    except Exception as e:
        logger.error(f"Error rejecting booking {booking_id}: {e}")
        db.rollback()
        raise HTTPException(status_code=500, detail="Server error cancelling booking.")

    logger.info(
        f"Booking {booking.id} {'cancelled' if was_approved else 'rejected'} by admin {current.id}")
    background_tasks.add_task(
        NotificationService.booking_rejected, booking_snapshot(booking), admin_comments)

    message = "Booking cancelled successfully." if was_approved else "Booking rejected successfully."
    return {"message": message, "booking": BookingOut.model_validate(booking)}
