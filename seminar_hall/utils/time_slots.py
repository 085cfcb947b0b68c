"""
Time slot arithmetic for hall bookings.

A slot is one date plus a start and end time. Two slots conflict when they
fall on the same date and the existing slot intersects the candidate slot
widened by the buffer on both sides:

    existing.start < candidate.end + buffer
    and existing.end > candidate.start - buffer

Arithmetic is done on full datetimes, so widening a slot near midnight
never wraps around to the other end of the day.
"""
from dataclasses import dataclass
from datetime import date, datetime, time, timedelta
from typing import Iterable, List, Optional, Sequence
from zoneinfo import ZoneInfo


def local_now(tz_name: str) -> datetime:
    """Current wall-clock time in the hall's timezone, as a naive datetime"""
    return datetime.now(ZoneInfo(tz_name)).replace(tzinfo=None)


@dataclass(frozen=True)
class TimeSlot:
    date: date
    start: time
    end: time

    @property
    def start_at(self) -> datetime:
        return datetime.combine(self.date, self.start)

    @property
    def end_at(self) -> datetime:
        return datetime.combine(self.date, self.end)

    @property
    def is_valid(self) -> bool:
        """A slot must start strictly before it ends"""
        return self.start < self.end

    def buffered(self, minutes: int):
        """Return (start, end) datetimes widened by `minutes` on each side"""
        pad = timedelta(minutes=minutes)
        return self.start_at - pad, self.end_at + pad

    @classmethod
    def of(cls, booking) -> "TimeSlot":
        """Build a slot from anything with date/start_time/end_time attributes"""
        return cls(booking.date, booking.start_time, booking.end_time)


def slots_conflict(existing: TimeSlot, candidate: TimeSlot, buffer_minutes: int) -> bool:
    if existing.date != candidate.date:
        return False
    window_start, window_end = candidate.buffered(buffer_minutes)
    return existing.start_at < window_end and existing.end_at > window_start


def find_conflicts(
    candidate: TimeSlot,
    bookings: Iterable,
    buffer_minutes: int,
    statuses: Optional[Sequence] = None,
    exclude_id: Optional[int] = None,
) -> List:
    """
    Return the bookings that collide with `candidate`.

    Args:
        candidate: The slot being requested
        bookings: Existing bookings (objects with id, status, date,
            start_time and end_time)
        buffer_minutes: Mandatory gap between two bookings
        statuses: Only bookings in these statuses can block; None means all
        exclude_id: Booking id to ignore (the booking being updated)
    """
    conflicts = []
    for booking in bookings:
        if exclude_id is not None and booking.id == exclude_id:
            continue
        if statuses is not None and booking.status not in statuses:
            continue
        if slots_conflict(TimeSlot.of(booking), candidate, buffer_minutes):
            conflicts.append(booking)
    return conflicts
