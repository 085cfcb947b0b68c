from conftest import PASSWORD, auth_headers, make_user

from seminar_hall.models.preapproved_user import PreapprovedUser
from seminar_hall.models.user import User, UserRole, UserStatus


def signup(client, email="new.person@example.com", name="New Person", password="pa55word!"):
    return client.post("/api/auth/signup", json={"name": name, "email": email, "password": password})


def test_signup_without_preapproval_is_pending(client, db, sent_emails):
    resp = signup(client, email="New.Person@Example.com")

    assert resp.status_code == 202
    body = resp.json()
    assert body["status"] == "pending"
    assert body["access_token"] is None

    user = db.query(User).filter(User.email == "new.person@example.com").one()
    assert user.role == UserRole.faculty
    assert user.status == UserStatus.pending
    assert [m["to"] for m in sent_emails] == ["hall-admin@example.com"]


def test_signup_with_preapproval_logs_in(client, db, sent_emails):
    db.add(PreapprovedUser(name="Club Head", email="head@example.com", role=UserRole.club_leader))
    db.commit()

    resp = signup(client, email="head@example.com")

    assert resp.status_code == 201
    body = resp.json()
    assert body["status"] == "approved"
    assert body["role"] == "club_leader"
    assert body["access_token"]
    assert sent_emails == []

    me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {body['access_token']}"})
    assert me.status_code == 200
    assert me.json()["email"] == "head@example.com"

    db.expire_all()
    assert db.query(PreapprovedUser).filter_by(email="head@example.com").one().is_registered


def test_signup_duplicate_email(client, leader):
    resp = signup(client, email=leader.email)
    assert resp.status_code == 400
    assert resp.json()["detail"] == "User with this email already exists."


def test_signup_while_awaiting_approval(client):
    signup(client)
    resp = signup(client)
    assert resp.status_code == 400
    assert "awaiting approval" in resp.json()["detail"]


def test_signup_rejects_bad_email(client):
    resp = signup(client, email="not-an-email")
    assert resp.status_code == 422
    resp = signup(client, email="a..b@-bad..example..")
    assert resp.status_code == 422


def test_login(client, leader):
    resp = client.post("/api/auth/login", json={"email": "ASHA@example.com", "password": PASSWORD})
    assert resp.status_code == 200
    body = resp.json()
    assert body["token_type"] == "bearer"
    assert body["role"] == "club_leader"


def test_login_bad_credentials(client, leader):
    resp = client.post("/api/auth/login", json={"email": leader.email, "password": "wrong"})
    assert resp.status_code == 400
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com", "password": PASSWORD})
    assert resp.status_code == 400
    assert resp.json()["detail"] == "Invalid credentials."


def test_login_pending_and_rejected_accounts(client, db):
    make_user(db, "Waiting", "waiting@example.com", UserRole.faculty, status=UserStatus.pending)
    make_user(db, "Refused", "refused@example.com", UserRole.faculty, status=UserStatus.rejected)

    resp = client.post("/api/auth/login", json={"email": "waiting@example.com", "password": PASSWORD})
    assert resp.status_code == 403
    assert "pending" in resp.json()["detail"]

    resp = client.post("/api/auth/login", json={"email": "refused@example.com", "password": PASSWORD})
    assert resp.status_code == 403
    assert "rejected" in resp.json()["detail"]


def test_pending_account_cannot_book(client, db):
    waiting = make_user(db, "Waiting", "waiting@example.com", UserRole.faculty, status=UserStatus.pending)

    resp = client.get("/api/bookings", headers=auth_headers(waiting))
    assert resp.status_code == 403


def test_invalid_token(client):
    resp = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-token"})
    assert resp.status_code == 401


def test_admin_approves_pending_user(client, db, admin_headers, sent_emails):
    waiting = make_user(db, "Waiting", "waiting@example.com", UserRole.faculty, status=UserStatus.pending)

    resp = client.get("/api/auth/admin/users/pending", headers=admin_headers)
    assert [u["email"] for u in resp.json()] == ["waiting@example.com"]

    resp = client.put(f"/api/auth/admin/users/{waiting.id}/approve", headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["status"] == "approved"
    assert [m["to"] for m in sent_emails] == ["waiting@example.com"]

    resp = client.post("/api/auth/login", json={"email": "waiting@example.com", "password": PASSWORD})
    assert resp.status_code == 200

    resp = client.put(f"/api/auth/admin/users/{waiting.id}/approve", headers=admin_headers)
    assert resp.status_code == 404


def test_admin_rejects_pending_user(client, db, admin_headers, sent_emails):
    waiting = make_user(db, "Waiting", "waiting@example.com", UserRole.faculty, status=UserStatus.pending)

    resp = client.put(f"/api/auth/admin/users/{waiting.id}/reject",
                      json={"reason": "Not a faculty member"}, headers=admin_headers)
    assert resp.status_code == 200
    assert resp.json()["user"]["status"] == "rejected"
    assert "Not a faculty member" in sent_emails[0]["html"]


def test_user_admin_routes_need_admin(client, faculty_headers):
    resp = client.get("/api/auth/admin/users/pending", headers=faculty_headers)
    assert resp.status_code == 403


def test_preapproved_crud(client, leader, admin_headers):
    resp = client.post("/api/auth/admin/preapproved",
                       json={"name": "Dean", "email": "Dean@Example.com", "role": "faculty"},
                       headers=admin_headers)
    assert resp.status_code == 201
    entry = resp.json()
    assert entry["email"] == "dean@example.com"
    assert entry["is_registered"] is False

    resp = client.post("/api/auth/admin/preapproved",
                       json={"name": "Dean", "email": "dean@example.com"}, headers=admin_headers)
    assert resp.status_code == 409

    # an existing account is marked as already registered
    resp = client.post("/api/auth/admin/preapproved",
                       json={"name": "Asha", "email": leader.email}, headers=admin_headers)
    assert resp.json()["is_registered"] is True

    resp = client.get("/api/auth/admin/preapproved", headers=admin_headers)
    assert [e["email"] for e in resp.json()] == ["dean@example.com", leader.email]

    resp = client.delete(f"/api/auth/admin/preapproved/{entry['id']}", headers=admin_headers)
    assert resp.status_code == 200
    assert client.delete(f"/api/auth/admin/preapproved/{entry['id']}",
                         headers=admin_headers).status_code == 404


def test_health(client):
    assert client.get("/health").json()["status"] == "healthy"
    assert client.get("/").json()["status"] == "ok"


def test_preapproved_rejects_bad_email(client, admin_headers):
    resp = client.post("/api/auth/admin/preapproved",
                       json={"name": "Dean", "email": "dean@@example..com"}, headers=admin_headers)
    assert resp.status_code == 422
