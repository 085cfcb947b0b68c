# Path: seminar_hall/utils/notification_service.py
"""
Email notifications for bookings and accounts.

Every method is fire-and-forget: delivery problems are logged and never
propagate to the request that triggered them.
"""
import html
import logging
from typing import Optional

from seminar_hall.config import settings
from seminar_hall.utils import mailer

logger = logging.getLogger(__name__)


def booking_snapshot(booking) -> dict:
    """
    Plain copy of a booking and its owner, safe to use after the session
    that loaded it is closed.
    """
    user = booking.user
    return {
        "id": booking.id,
        "club_name": booking.club_name,
        "title": booking.title,
        "description": booking.description,
        "date": booking.date.isoformat(),
        "start_time": booking.start_time.strftime("%H:%M"),
        "end_time": booking.end_time.strftime("%H:%M"),
        "user_name": user.name if user else None,
        "user_email": user.email if user else None,
    }


def user_snapshot(user) -> dict:
    return {"id": user.id, "name": user.name, "email": user.email,
            "role": getattr(user.role, "value", user.role)}


def _row(label: str, value) -> str:
    return (
        '<tr><td style="border: 1px solid #ddd; padding: 8px; font-weight: bold; '
        f'background-color: #f8f9fa;">{label}</td>'
        f'<td style="border: 1px solid #ddd; padding: 8px;">{html.escape(str(value or "N/A"))}</td></tr>'
    )


def _booking_table(booking: dict) -> str:
    rows = [
        _row("Club/Organization:", booking["club_name"]),
        _row("Event Title:", booking["title"]),
        _row("Date:", booking["date"]),
        _row("Time:", f'{booking["start_time"]} - {booking["end_time"]}'),
        _row("Description:", booking.get("description")),
    ]
    return ('<table style="border-collapse: collapse; width: 100%; margin: 20px 0;">'
            + "".join(rows) + "</table>")


class NotificationService:
    """Builds and sends the emails of the booking and account workflows"""

    @staticmethod
    def _deliver(to: Optional[str], subject: str, body: str) -> bool:
        if not to:
            logger.warning(f"No recipient for email '{subject}', skipping")
            return False
        try:
            return mailer.send_email(to, subject, body)
        except Exception as e:
            # Notifications must never fail the request that triggered them
            logger.error(f"Failed to send email '{subject}' to {to}: {e}")
            return False

    # ------------------------------------------------------------------
    # Bookings
    # ------------------------------------------------------------------

    @staticmethod
    def booking_submitted(booking: dict) -> bool:
        """Tell the admin a new booking is waiting for review"""
        if not settings.ADMIN_EMAIL:
            logger.warning(
                "ADMIN_EMAIL is not set. Cannot send booking notification to admin.")
            return False

        body = (
            '<h2 style="color: #007bff;">New Hall Booking Request</h2>'
            "<p>A new hall booking request has been submitted and is awaiting your approval.</p>"
            "<h3>Booking Details:</h3>"
            + _booking_table(booking)
            + f'<p>Requested by {html.escape(str(booking.get("user_name")))} '
            f'({html.escape(str(booking.get("user_email")))}).</p>'
        )
        return NotificationService._deliver(
            settings.ADMIN_EMAIL, "New Hall Booking Request Awaiting Approval", body)

    @staticmethod
    def booking_approved(booking: dict, admin_comments: Optional[str] = None) -> bool:
        body = (
            '<h2 style="color: #28a745;">Booking Approved!</h2>'
            f'<p>Dear {html.escape(str(booking.get("user_name")))},</p>'
            "<p>Your seminar hall booking has been approved.</p>"
            + _booking_table(booking)
        )
        if admin_comments:
            body += f"<p><strong>Admin comments:</strong> {html.escape(admin_comments)}</p>"
        return NotificationService._deliver(
            booking.get("user_email"), "Your Hall Booking Has Been Approved!", body)

    @staticmethod
    def booking_rejected(booking: dict, admin_comments: Optional[str] = None) -> bool:
        body = (
            '<h2 style="color: #dc3545;">Booking Request Rejected</h2>'
            f'<p>Dear {html.escape(str(booking.get("user_name")))},</p>'
            "<p>Unfortunately your seminar hall booking could not be accommodated.</p>"
            + _booking_table(booking)
        )
        if admin_comments:
            body += f"<p><strong>Reason:</strong> {html.escape(admin_comments)}</p>"
        return NotificationService._deliver(
            booking.get("user_email"), "Your Hall Booking Request Update", body)

    # ------------------------------------------------------------------
    # Accounts
    # ------------------------------------------------------------------

    @staticmethod
    def signup_pending(user: dict) -> bool:
        """Tell the admin a new account needs approval"""
        if not settings.ADMIN_EMAIL:
            logger.warning(
                "ADMIN_EMAIL is not set. Cannot send signup notification to admin.")
            return False

        body = (
            '<h2 style="color: #007bff;">New User Registration</h2>'
            "<p>Hello Admin,</p>"
            "<p>A new user has registered and is awaiting approval.</p>"
            f'<p><strong>Name:</strong> {html.escape(user["name"])}<br>'
            f'<strong>Email:</strong> {html.escape(user["email"])}<br>'
            f'<strong>Role:</strong> {html.escape(str(user["role"]))}</p>'
        )
        return NotificationService._deliver(
            settings.ADMIN_EMAIL, "New User Registration Awaiting Approval", body)

    @staticmethod
    def account_approved(user: dict) -> bool:
        body = (
            '<h2 style="color: #28a745;">Account Approved!</h2>'
            f'<p>Dear {html.escape(user["name"])},</p>'
            "<p>Your seminar hall booking account has been approved. "
            "You can now log in and request bookings.</p>"
        )
        return NotificationService._deliver(
            user["email"], "Your Seminar Hall Booking Account Has Been Approved!", body)

    @staticmethod
    def account_rejected(user: dict, reason: Optional[str] = None) -> bool:
        reason = reason or "Your registration did not meet our requirements."
        body = (
            '<h2 style="color: #dc3545;">Account Registration Rejected</h2>'
            f'<p>Dear {html.escape(user["name"])},</p>'
            "<p>Your seminar hall account registration has been rejected.</p>"
            f"<p><strong>Reason:</strong> {html.escape(reason)}</p>"
        )
        return NotificationService._deliver(
            user["email"], "Your Seminar Hall Account Registration Update", body)
