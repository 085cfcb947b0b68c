"""
SMTP mail transport.
"""
import logging
import smtplib
import ssl
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from seminar_hall.config import settings

logger = logging.getLogger(__name__)

LAYOUT = (
    '<div style="font-family: Arial, sans-serif; max-width: 600px; '
    'margin: 0 auto; padding: 20px;">{body}</div>'
)


class EmailError(Exception):
    """Raised when an email cannot be built or delivered"""


def send_email(to: str, subject: str, html: str, text: Optional[str] = None) -> bool:
    """
    Send one HTML email through the configured SMTP server.

    Returns False when SMTP is not configured (the message is only logged).
    Raises EmailError on invalid input or delivery failure.
    """
    if not to or not subject:
        raise EmailError("Missing required email fields: to, subject")

    if not settings.smtp_enabled:
        logger.warning(
            f"SMTP not configured; skipping email to {to} with subject '{subject}'")
        return False

    msg = MIMEMultipart("alternative")
    msg["Subject"] = subject
    msg["From"] = settings.EMAIL_USER
    msg["To"] = to
    if text:
        msg.attach(MIMEText(text, "plain"))
    msg.attach(MIMEText(LAYOUT.format(body=html), "html"))

    try:
        if settings.SMTP_USE_SSL:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(settings.SMTP_SERVER, settings.SMTP_PORT,
                                  timeout=settings.SMTP_TIMEOUT, context=context) as server:
                server.login(settings.EMAIL_USER, settings.EMAIL_PASS)
                server.sendmail(msg["From"], [to], msg.as_string())
        else:
            with smtplib.SMTP(settings.SMTP_SERVER, settings.SMTP_PORT,
                              timeout=settings.SMTP_TIMEOUT) as server:
                server.starttls()
                server.login(settings.EMAIL_USER, settings.EMAIL_PASS)
                server.sendmail(msg["From"], [to], msg.as_string())
    except (smtplib.SMTPException, OSError) as e:
        raise EmailError(f"Failed to send email to {to}: {e}") from e

    logger.info(f"Email sent to {to}: {subject}")
    return True
