import os

os.environ["DATABASE_URL"] = "sqlite://"
os.environ["SECRET_KEY"] = "test-secret"
os.environ["BUSINESS_TIMEZONE"] = "UTC"
os.environ.pop("SUPERADMIN_USERNAME", None)
os.environ.pop("SUPERADMIN_PASSWORD", None)

import pytest
from fastapi.testclient import TestClient

from database.init import Base, SessionLocal, engine
from database.models import Tenant, User
from enums.user_role import UserRole
from enums.user_status import UserStatus
from main import app
from services.email_service import EmailService
from utils.dependencies import create_access_token, hash_password

PASSWORD = "s3cret-pass"


@pytest.fixture(autouse=True)
def reset_database():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture(autouse=True)
def outbox(monkeypatch):
    sent = []

    async def fake_send(self, to_email, subject, body):
        sent.append({"to": to_email, "subject": subject, "body": body})

    monkeypatch.setattr(EmailService, "send_email", fake_send)
    return sent


@pytest.fixture
def db():
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def client():
    return TestClient(app)


@pytest.fixture
def make_tenant(db):
    def _make(name="Seaside Inn"):
        tenant = Tenant(name=name)
        db.add(tenant)
        db.commit()
        db.refresh(tenant)
        return tenant

    return _make


@pytest.fixture
def make_user(db):
    def _make(tenant, role=UserRole.EMPLOYEE, username=None, status=UserStatus.ACTIVE):
        username = username or f"{role.value.lower()}-{tenant.id}"
        user = User(
            tenant_id=tenant.id,
            username=username,
            email=f"{username}@example.com",
            first_name=username.title(),
            role=role.value,
            status=status.value,
            password=hash_password(PASSWORD),
        )
        db.add(user)
        db.commit()
        db.refresh(user)
        return user

    return _make


@pytest.fixture
def password():
    return PASSWORD


@pytest.fixture
def auth_headers():
    def _headers(user):
        return {"Authorization": f"Bearer {create_access_token(user)}"}

    return _headers


@pytest.fixture
def tenant(make_tenant):
    return make_tenant()


@pytest.fixture
def other_tenant(make_tenant):
    return make_tenant("Mountain Lodge")


@pytest.fixture
def employee(make_user, tenant):
    return make_user(tenant)


@pytest.fixture
def admin(make_user, tenant):
    return make_user(tenant, UserRole.ADMIN)


@pytest.fixture
def super_admin(make_user, tenant):
    return make_user(tenant, UserRole.SUPER_ADMIN)


@pytest.fixture
def headers(auth_headers, employee):
    return auth_headers(employee)


@pytest.fixture
def other_headers(auth_headers, make_user, other_tenant):
    return auth_headers(make_user(other_tenant))


def iso(value):
    return value.isoformat()


@pytest.fixture
def create_guest(client, headers):
    def _create(email="ana@example.com", request_headers=None, **fields):
        payload = {"email": email, "first_name": "Ana", "last_name": "Lopez", **fields}
        r = client.post("/guests", json=payload, headers=request_headers or headers)
        assert r.status_code == 201, r.json()
        return r.json()["data"]

    return _create


@pytest.fixture
def create_room(client, headers):
    def _create(number="101", request_headers=None, **fields):
        r = client.post("/rooms", json={"number": number, **fields}, headers=request_headers or headers)
        assert r.status_code == 201, r.json()
        return r.json()["data"]

    return _create


@pytest.fixture
def create_reservation(client, headers):
    def _create(guest_id, check_in, check_out, room_numbers=("101",), request_headers=None, **fields):
        payload = {
            "primary_guest_id": guest_id,
            "room_numbers": list(room_numbers),
            "check_in": iso(check_in),
            "check_out": iso(check_out),
            "total_amount": 250.0,
            "payment_method": "credit_card",
            **fields,
        }
        r = client.post("/reservations", json=payload, headers=request_headers or headers)
        assert r.status_code == 201, r.json()
        return r.json()["data"]

    return _create
