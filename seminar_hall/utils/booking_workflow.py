"""
Booking status state machine.

    pending  -> approved   (admin, no approved booking in the way)
    pending  -> rejected   (admin)
    pending  -> cancelled  (owner withdraws the request)
    approved -> rejected   (admin cancel, outside the notice window)

rejected and cancelled are terminal.
"""
from datetime import datetime, timedelta

from ..models.booking import BookingStatus


# Statuses that hold a slot when a new booking is requested or moved
BLOCKING_STATUSES = (BookingStatus.pending, BookingStatus.approved)
# Statuses that block an approval
APPROVAL_BLOCKING_STATUSES = (BookingStatus.approved,)

ALLOWED_TRANSITIONS = {
    BookingStatus.pending: {
        BookingStatus.approved,
        BookingStatus.rejected,
        BookingStatus.cancelled,
    },
    BookingStatus.approved: {BookingStatus.rejected},
    BookingStatus.rejected: set(),
    BookingStatus.cancelled: set(),
}


class BookingTransitionError(Exception):
    """Raised when a booking cannot move to the requested status"""

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


def can_transition(current: BookingStatus, target: BookingStatus) -> bool:
    return target in ALLOWED_TRANSITIONS.get(BookingStatus(current), set())


def ensure_transition(current: BookingStatus, target: BookingStatus) -> None:
    if not can_transition(current, target):
        current_value = BookingStatus(current).value
        if target == BookingStatus.rejected:
            raise BookingTransitionError(
                f"Booking status is '{current_value}'. Only 'pending' or 'approved' bookings can be cancelled.")
        raise BookingTransitionError(
            f"Cannot move booking from '{current_value}' to '{BookingStatus(target).value}'.")


def ensure_cancellable(booking_start: datetime, now: datetime, notice_hours: int) -> None:
    """
    An approved booking may only be cancelled while more than
    `notice_hours` remain before it starts.
    """
    if now >= booking_start - timedelta(hours=notice_hours):
        raise BookingTransitionError(
            f"Cannot cancel approved booking less than {notice_hours} hours before the event start time.")


def ensure_rejectable(current: BookingStatus, booking_start: datetime,
                      now: datetime, notice_hours: int) -> None:
    """Validate an admin reject/cancel of a pending or approved booking"""
    ensure_transition(current, BookingStatus.rejected)
    if BookingStatus(current) == BookingStatus.approved:
        ensure_cancellable(booking_start, now, notice_hours)
