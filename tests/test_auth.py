import re

from database.models import User
from enums.user_status import UserStatus
from services.email_service import EmailService


def reset_token_from(message):
    return re.search(r"/password/reset/(\w+)", message["body"]).group(1)


def test_login_returns_token_and_sets_cookie(client, employee, password):
    r = client.post("/login", json={"username": employee.username, "password": password})
    assert r.status_code == 200, r.json()
    body = r.json()
    assert body["success"] is True
    assert body["data"]["token"]
    assert r.cookies.get("token") == body["data"]["token"]
    assert "httponly" in r.headers["set-cookie"].lower()
    assert "samesite=strict" in r.headers["set-cookie"].lower()


def test_cookie_authenticates_follow_up_requests(client, employee, password):
    client.post("/login", json={"username": employee.username, "password": password})

    r = client.get("/rooms")
    assert r.status_code == 200, r.json()


def test_login_requires_both_fields(client):
    r = client.post("/login", json={"username": "someone"})
    assert r.status_code == 400
    assert r.json()["message"] == "Please enter username and password"


def test_login_rejects_wrong_password(client, employee):
    r = client.post("/login", json={"username": employee.username, "password": "wrong"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid username or password."


def test_invited_user_cannot_log_in(client, make_user, tenant, password):
    invited = make_user(tenant, username="pending", status=UserStatus.INVITED)

    r = client.post("/login", json={"username": invited.username, "password": password})
    assert r.status_code == 401


def test_invalid_token_rejected(client):
    r = client.get("/rooms", headers={"Authorization": "Bearer not-a-jwt"})
    assert r.status_code == 401
    assert r.json()["message"] == "Invalid or expired token"


def test_logout_clears_cookie(client, employee, password):
    client.post("/login", json={"username": employee.username, "password": password})

    r = client.post("/logout")
    assert r.status_code == 200
    assert r.json()["message"] == "Logged out successfully"
    assert client.get("/rooms").status_code == 401


def test_forgot_and_reset_password(client, employee, outbox, db):
    r = client.post("/password/forgot", json={"email": employee.email})
    assert r.status_code == 200, r.json()
    assert len(outbox) == 1
    assert outbox[0]["to"] == employee.email
    token = reset_token_from(outbox[0])

    db.expire_all()
    stored = db.get(User, employee.id)
    assert stored.reset_password_token is not None
    assert stored.reset_password_token != token

    r = client.put(
        f"/password/reset/{token}",
        json={"password": "brand-new-pass", "confirm_password": "brand-new-pass"},
    )
    assert r.status_code == 200, r.json()
    assert r.json()["data"]["token"]

    r = client.post("/login", json={"username": employee.username, "password": "brand-new-pass"})
    assert r.status_code == 200

    # tokens are single use
    r = client.put(f"/password/reset/{token}", json={"password": "again"})
    assert r.status_code == 400
    assert r.json()["message"] == "Invalid or expired token"


def test_reset_password_mismatch(client, employee, outbox):
    client.post("/password/forgot", json={"email": employee.email})
    token = reset_token_from(outbox[0])

    r = client.put(
        f"/password/reset/{token}",
        json={"password": "one-pass", "confirm_password": "other-pass"},
    )
    assert r.status_code == 400
    assert r.json()["message"] == "Passwords do not match"


def test_forgot_password_unknown_email(client):
    r = client.post("/password/forgot", json={"email": "nobody@example.com"})
    assert r.status_code == 404


def test_forgot_password_email_failure_clears_token(client, employee, monkeypatch, db):
    async def broken_send(self, to_email, subject, body):
        raise ConnectionError("SMTP unavailable")

    monkeypatch.setattr(EmailService, "send_email", broken_send)

    r = client.post("/password/forgot", json={"email": employee.email})
    assert r.status_code == 500
    assert r.json()["message"] == "Email could not be sent"

    db.expire_all()
    assert db.get(User, employee.id).reset_password_token is None
