"""
Create or refresh the default admin account.

Run with: python -m seminar_hall.scripts.create_admin
"""
import logging

from seminar_hall.db import SessionLocal
from seminar_hall.main import ensure_admin_exists

logger = logging.getLogger(__name__)


def main():
    db = SessionLocal()
    try:
        admin_user = ensure_admin_exists(db)
        logger.info(f"Admin created/updated: {admin_user.email} (id={admin_user.id})")
    finally:
        db.close()


if __name__ == "__main__":
    main()
