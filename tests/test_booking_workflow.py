from datetime import datetime, timedelta

import pytest

from seminar_hall.models.booking import BookingStatus
from seminar_hall.utils.booking_workflow import (
    BookingTransitionError,
    can_transition,
    ensure_cancellable,
    ensure_rejectable,
    ensure_transition,
)

START = datetime(2030, 5, 20, 10, 0)


@pytest.mark.parametrize("target", [
    BookingStatus.approved, BookingStatus.rejected, BookingStatus.cancelled,
])
def test_pending_can_move_anywhere(target):
    assert can_transition(BookingStatus.pending, target)


def test_approved_can_only_be_rejected():
    assert can_transition(BookingStatus.approved, BookingStatus.rejected)
    assert not can_transition(BookingStatus.approved, BookingStatus.pending)
    assert not can_transition(BookingStatus.approved, BookingStatus.cancelled)


@pytest.mark.parametrize("terminal", [BookingStatus.rejected, BookingStatus.cancelled])
def test_terminal_states(terminal):
    for target in BookingStatus:
        assert not can_transition(terminal, target)


def test_transition_accepts_plain_strings():
    assert can_transition("pending", "approved")


def test_rejecting_a_rejected_booking_explains_allowed_states():
    with pytest.raises(BookingTransitionError) as exc:
        ensure_transition(BookingStatus.rejected, BookingStatus.rejected)
    assert "Only 'pending' or 'approved'" in exc.value.message


def test_cancel_allowed_with_more_than_notice_left():
    ensure_cancellable(START, START - timedelta(hours=24, minutes=1), 24)


@pytest.mark.parametrize("before", [timedelta(hours=24), timedelta(hours=2), timedelta(0)])
def test_cancel_blocked_inside_notice_window(before):
    with pytest.raises(BookingTransitionError) as exc:
        ensure_cancellable(START, START - before, 24)
    assert "24 hours" in exc.value.message


def test_cancel_blocked_after_start():
    with pytest.raises(BookingTransitionError):
        ensure_cancellable(START, START + timedelta(days=1), 24)


def test_pending_rejection_ignores_notice_window():
    ensure_rejectable(BookingStatus.pending, START, START - timedelta(hours=1), 24)


def test_approved_rejection_respects_notice_window():
    ensure_rejectable(BookingStatus.approved, START, START - timedelta(days=3), 24)
    with pytest.raises(BookingTransitionError):
        ensure_rejectable(BookingStatus.approved, START, START - timedelta(hours=1), 24)


def test_cancelled_booking_cannot_be_rejected():
    with pytest.raises(BookingTransitionError):
        ensure_rejectable(BookingStatus.cancelled, START, START - timedelta(days=3), 24)
