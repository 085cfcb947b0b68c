# Import models in dependency order to avoid relationship resolution issues

# Base models first (no foreign key dependencies)
from .user import User, UserRole, UserStatus
from .preapproved_user import PreapprovedUser

# Models that depend on User
from .booking import Booking, BookingStatus

# Export all models
__all__ = [
    "User",
    "UserRole",
    "UserStatus",
    "PreapprovedUser",
    "Booking",
    "BookingStatus",
]
