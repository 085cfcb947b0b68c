from datetime import date, datetime, time
from types import SimpleNamespace

from seminar_hall.models.booking import BookingStatus
from seminar_hall.utils.time_slots import TimeSlot, find_conflicts, slots_conflict

DAY = date(2030, 3, 14)
EXISTING = TimeSlot(DAY, time(10, 0), time(11, 0))


def booking(id, start, end, status=BookingStatus.approved, day=DAY):
    return SimpleNamespace(id=id, date=day, start_time=start, end_time=end, status=status)


def test_overlap_inside_buffer_window():
    # 10-11 with a 60 minute buffer blocks anything starting before 12:00 and ending after 09:00
    assert slots_conflict(EXISTING, TimeSlot(DAY, time(11, 30), time(12, 30)), 60)
    assert slots_conflict(EXISTING, TimeSlot(DAY, time(8, 0), time(9, 30)), 60)
    assert slots_conflict(EXISTING, TimeSlot(DAY, time(10, 15), time(10, 45)), 60)


def test_slots_at_buffer_edge_do_not_conflict():
    assert not slots_conflict(EXISTING, TimeSlot(DAY, time(12, 0), time(13, 0)), 60)
    assert not slots_conflict(EXISTING, TimeSlot(DAY, time(8, 0), time(9, 0)), 60)


def test_zero_buffer_allows_back_to_back():
    assert not slots_conflict(EXISTING, TimeSlot(DAY, time(11, 0), time(12, 0)), 0)
    assert slots_conflict(EXISTING, TimeSlot(DAY, time(10, 59), time(12, 0)), 0)


def test_different_dates_never_conflict():
    other_day = TimeSlot(date(2030, 3, 15), time(10, 0), time(11, 0))
    assert not slots_conflict(EXISTING, other_day, 60)


def test_buffer_near_midnight_does_not_wrap():
    late = TimeSlot(DAY, time(23, 0), time(23, 30))
    early = TimeSlot(DAY, time(0, 0), time(0, 30))
    assert not slots_conflict(late, early, 60)
    assert late.buffered(60) == (datetime(2030, 3, 14, 22, 0), datetime(2030, 3, 15, 0, 30))


def test_slot_validity():
    assert EXISTING.is_valid
    assert not TimeSlot(DAY, time(11, 0), time(11, 0)).is_valid
    assert not TimeSlot(DAY, time(12, 0), time(11, 0)).is_valid


def test_find_conflicts_filters_status_and_excluded_id():
    bookings = [
        booking(1, time(10, 0), time(11, 0), BookingStatus.approved),
        booking(2, time(10, 30), time(11, 30), BookingStatus.pending),
        booking(3, time(10, 0), time(11, 0), BookingStatus.rejected),
        booking(4, time(15, 0), time(16, 0), BookingStatus.approved),
    ]
    candidate = TimeSlot(DAY, time(11, 0), time(11, 45))

    blocking = (BookingStatus.pending, BookingStatus.approved)
    assert [b.id for b in find_conflicts(candidate, bookings, 60, statuses=blocking)] == [1, 2]
    assert [b.id for b in find_conflicts(candidate, bookings, 60,
                                         statuses=(BookingStatus.approved,))] == [1]
    assert [b.id for b in find_conflicts(candidate, bookings, 60, statuses=blocking,
                                         exclude_id=1)] == [2]
    assert [b.id for b in find_conflicts(candidate, bookings, 60)] == [1, 2, 3]


def test_slot_of_booking():
    slot = TimeSlot.of(booking(7, time(9, 0), time(10, 0)))
    assert slot == TimeSlot(DAY, time(9, 0), time(10, 0))
    assert slot.start_at == datetime(2030, 3, 14, 9, 0)
