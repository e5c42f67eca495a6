import re

import init_data
from database.models import User
from enums.user_role import UserRole
from enums.user_status import UserStatus
from services.email_service import EmailService


def registration_token_from(message):
    return re.search(r"/complete-registration/(\w+)", message["body"]).group(1)


def invite(client, headers, **fields):
    payload = {"username": "newbie", "email": "newbie@example.com", "first_name": "New", **fields}
    return client.post("/users", json=payload, headers=headers)


def test_admin_invites_user_and_invitee_completes_registration(
    client, auth_headers, admin, outbox, db
):
    r = invite(client, auth_headers(admin))
    assert r.status_code == 201, r.json()
    user = r.json()["data"]
    assert user["status"] == UserStatus.INVITED.value
    assert user["role"] == UserRole.EMPLOYEE.value
    assert user["tenant_id"] == admin.tenant_id
    assert "password" not in user

    assert len(outbox) == 1
    token = registration_token_from(outbox[0])

    r = client.put(
        f"/complete-registration/{token}",
        json={"phone_number": "555-0100", "preferences": {"theme": "dark"}, "password": "pw-123456"},
    )
    assert r.status_code == 200, r.json()
    assert r.json()["data"]["status"] == UserStatus.ACTIVE.value
    assert r.json()["data"]["preferences"] == {"theme": "dark"}

    r = client.post("/login", json={"username": "newbie", "password": "pw-123456"})
    assert r.status_code == 200


def test_complete_registration_requires_all_fields(client, auth_headers, admin, outbox):
    invite(client, auth_headers(admin))
    token = registration_token_from(outbox[0])

    r = client.put(f"/complete-registration/{token}", json={"password": "pw-123456"})
    assert r.status_code == 400
    assert r.json()["message"] == "All fields are required"


def test_invite_survives_email_failure(client, auth_headers, admin, monkeypatch, db):
    async def broken_send(self, to_email, subject, body):
        raise ConnectionError("SMTP unavailable")

    monkeypatch.setattr(EmailService, "send_email", broken_send)

    r = invite(client, auth_headers(admin))
    assert r.status_code == 201, r.json()
    assert db.query(User).filter(User.username == "newbie").count() == 1


def test_employee_cannot_invite(client, headers):
    r = invite(client, headers)
    assert r.status_code == 403
    assert r.json()["message"] == "Role Employee is not authorized to access this resource"


def test_admin_cannot_invite_super_admin_or_other_tenant(client, auth_headers, admin, other_tenant):
    r = invite(client, auth_headers(admin), role="SuperAdmin")
    assert r.status_code == 403

    r = invite(client, auth_headers(admin), tenant_id=other_tenant.id)
    assert r.status_code == 403


def test_super_admin_invites_into_any_tenant(client, auth_headers, super_admin, other_tenant):
    r = invite(client, auth_headers(super_admin), tenant_id=other_tenant.id, role="Admin")
    assert r.status_code == 201, r.json()
    assert r.json()["data"]["tenant_id"] == other_tenant.id


def test_duplicate_username_or_email_conflicts(client, auth_headers, admin, employee):
    r = invite(client, auth_headers(admin), username=employee.username)
    assert r.status_code == 409

    r = invite(client, auth_headers(admin), username="fresh", email=employee.email)
    assert r.status_code == 409


def test_list_users_is_tenant_scoped_for_admins(client, auth_headers, admin, employee, make_user, other_tenant):
    make_user(other_tenant)

    r = client.get("/users", headers=auth_headers(admin))
    assert r.status_code == 200, r.json()
    assert {u["id"] for u in r.json()["data"]} == {admin.id, employee.id}
    assert r.json()["meta"]["totalUsers"] == 2


def test_super_admin_lists_every_tenant(client, auth_headers, super_admin, make_user, other_tenant):
    make_user(other_tenant)

    r = client.get("/users", headers=auth_headers(super_admin))
    assert r.json()["meta"]["totalUsers"] == 2


def test_user_updates_own_profile_but_not_role(client, headers, employee):
    r = client.put(f"/users/{employee.id}", json={"first_name": "Renamed"}, headers=headers)
    assert r.status_code == 200, r.json()
    assert r.json()["data"]["first_name"] == "Renamed"

    r = client.put(f"/users/{employee.id}", json={"role": "Admin"}, headers=headers)
    assert r.status_code == 403


def test_employee_cannot_edit_colleague(client, headers, admin):
    r = client.put(f"/users/{admin.id}", json={"first_name": "Nope"}, headers=headers)
    assert r.status_code == 403


def test_admin_changes_role_in_own_tenant(client, auth_headers, admin, employee):
    r = client.put(f"/users/{employee.id}", json={"role": "Admin"}, headers=auth_headers(admin))
    assert r.status_code == 200, r.json()
    assert r.json()["data"]["role"] == "Admin"


def test_foreign_user_not_found(client, auth_headers, admin, make_user, other_tenant):
    stranger = make_user(other_tenant)

    r = client.get(f"/users/{stranger.id}", headers=auth_headers(admin))
    assert r.status_code == 404
    assert r.json()["message"] == f"User: {stranger.id} not found"


def test_profile_picture_upload(client, headers, employee, monkeypatch, tmp_path):
    monkeypatch.setattr("services.user_service.UPLOAD_DIR", str(tmp_path))

    r = client.put(
        f"/users/profile-picture/{employee.id}",
        files={"file": ("me.PNG", b"\x89PNG fake", "image/png")},
        headers=headers,
    )
    assert r.status_code == 200, r.json()
    path = r.json()["data"]["profile_image"]
    assert path.endswith(f"users/{employee.id}/profile.png")
    assert (tmp_path / "users" / str(employee.id) / "profile.png").read_bytes() == b"\x89PNG fake"


def test_profile_picture_rejects_non_images(client, headers, employee, monkeypatch, tmp_path):
    monkeypatch.setattr("services.user_service.UPLOAD_DIR", str(tmp_path))

    r = client.put(
        f"/users/profile-picture/{employee.id}",
        files={"file": ("notes.txt", b"hello", "text/plain")},
        headers=headers,
    )
    assert r.status_code == 400


def test_bootstrap_super_admin_from_settings(client, monkeypatch, db):
    monkeypatch.setattr(init_data, "SUPERADMIN_USERNAME", "root")
    monkeypatch.setattr(init_data, "SUPERADMIN_PASSWORD", "root-pass")

    admin = init_data.create_initial_data(db)
    assert admin.role == UserRole.SUPER_ADMIN.value
    assert init_data.create_initial_data(db).id == admin.id

    r = client.post("/login", json={"username": "root", "password": "root-pass"})
    assert r.status_code == 200, r.json()


def test_bootstrap_skipped_without_settings(db):
    assert init_data.create_initial_data(db) is None
    assert db.query(User).count() == 0
