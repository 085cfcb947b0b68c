import os

# Configure the app for tests before any seminar_hall module reads settings
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["ADMIN_EMAIL"] = "hall-admin@example.com"
os.environ["EMAIL_USER"] = ""
os.environ["EMAIL_PASS"] = ""

from datetime import date, time, timedelta

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from seminar_hall.auth_utils import create_user_token, get_password_hash
from seminar_hall.db import Base, get_db
from seminar_hall.main import app
from seminar_hall.models import Booking, BookingStatus, User, UserRole, UserStatus

engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

PASSWORD = "secret-pass-123"


@pytest.fixture(autouse=True)
def setup_database():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def client():
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    # No context manager: the startup hook (migrations, default admin) stays off
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def sent_emails(monkeypatch):
    """Capture outgoing mail instead of talking to SMTP"""
    sent = []

    def fake_send_email(to, subject, html, text=None):
        sent.append({"to": to, "subject": subject, "html": html})
        return True

    monkeypatch.setattr("seminar_hall.utils.mailer.send_email", fake_send_email)
    return sent


def make_user(db, name, email, role, status=UserStatus.approved, password=PASSWORD):
    user = User(
        name=name,
        email=email,
        password_hash=get_password_hash(password),
        role=role,
        status=status,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth_headers(user):
    return {"Authorization": f"Bearer {create_user_token(user)}"}


def make_booking(db, user, day, start, end, status=BookingStatus.pending, title="Seminar"):
    booking = Booking(
        user_id=user.id,
        club_name="Robotics Club",
        title=title,
        date=day,
        start_time=start,
        end_time=end,
        status=status,
        terms_accepted=True,
    )
    db.add(booking)
    db.commit()
    db.refresh(booking)
    return booking


@pytest.fixture
def admin_user(db):
    return make_user(db, "CGPU", "admin@example.com", UserRole.admin)


@pytest.fixture
def leader(db):
    return make_user(db, "Asha", "asha@example.com", UserRole.club_leader)


@pytest.fixture
def faculty(db):
    return make_user(db, "Prof. Rao", "rao@example.com", UserRole.faculty)


@pytest.fixture
def admin_headers(admin_user):
    return auth_headers(admin_user)


@pytest.fixture
def leader_headers(leader):
    return auth_headers(leader)


@pytest.fixture
def faculty_headers(faculty):
    return auth_headers(faculty)


@pytest.fixture
def future_day():
    return date.today() + timedelta(days=5)


def booking_payload(day, start="10:00", end="11:00", **overrides):
    payload = {
        "club_name": "Robotics Club",
        "title": "Intro to ROS",
        "description": "Hands-on workshop",
        "date": day.isoformat(),
        "startTime": start,
        "endTime": end,
        "termsAccepted": True,
    }
    payload.update(overrides)
    return payload
