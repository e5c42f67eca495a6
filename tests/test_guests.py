from datetime import datetime, timedelta, timezone

from database.models import Guest, Reservation, ReservationGuest


def test_upsert_creates_then_updates_by_email(client, headers, db):
    first = client.post(
        "/guests",
        json={"email": "a@x.com", "first_name": "Ana", "last_name": "Lopez"},
        headers=headers,
    )
    assert first.status_code == 201, first.json()
    assert first.json()["message"] == "Guest successfully created/updated"

    second = client.post(
        "/guests",
        json={
            "email": "a@x.com",
            "first_name": "Ana Maria",
            "last_name": "Lopez",
            "phone_number": "555-0101",
            "address": {"city": "Lisbon", "floor": "3rd"},
        },
        headers=headers,
    )
    assert second.status_code == 201, second.json()

    data = second.json()["data"]
    assert data["id"] == first.json()["data"]["id"]
    assert data["first_name"] == "Ana Maria"
    assert data["phone_number"] == "555-0101"
    assert data["address"]["city"] == "Lisbon"
    assert data["address"]["floor"] == "3rd"
    assert db.query(Guest).filter(Guest.email == "a@x.com").count() == 1


def test_same_email_in_two_tenants_makes_two_guests(create_guest, other_headers, db):
    mine = create_guest("shared@x.com")
    theirs = create_guest("shared@x.com", request_headers=other_headers)

    assert mine["id"] != theirs["id"]
    assert mine["tenant_id"] != theirs["tenant_id"]
    assert db.query(Guest).count() == 2


def test_upsert_requires_valid_email(client, headers):
    r = client.post("/guests", json={"first_name": "No", "last_name": "Email"}, headers=headers)
    assert r.status_code == 400
    assert r.json()["success"] is False

    r = client.post("/guests", json={"email": "not-an-email"}, headers=headers)
    assert r.status_code == 400


def test_super_admin_can_upsert_for_another_tenant(client, auth_headers, super_admin, other_tenant):
    r = client.post(
        "/guests",
        json={"email": "b@x.com", "first_name": "Bo", "tenant_id": other_tenant.id},
        headers=auth_headers(super_admin),
    )
    assert r.status_code == 201, r.json()
    assert r.json()["data"]["tenant_id"] == other_tenant.id


def test_employee_tenant_id_is_ignored(client, headers, employee, other_tenant):
    r = client.post(
        "/guests",
        json={"email": "c@x.com", "first_name": "Cy", "tenant_id": other_tenant.id},
        headers=headers,
    )
    assert r.status_code == 201, r.json()
    assert r.json()["data"]["tenant_id"] == employee.tenant_id


def test_get_guest_is_tenant_scoped(client, create_guest, headers, other_headers):
    guest = create_guest()

    assert client.get(f"/guests/{guest['id']}", headers=headers).status_code == 200
    r = client.get(f"/guests/{guest['id']}", headers=other_headers)
    assert r.status_code == 404
    assert r.json()["success"] is False


def test_guests_require_login(client):
    r = client.get("/guests")
    assert r.status_code == 401
    assert r.json() == {
        "success": False,
        "message": "Please login first to access this resource",
        "error": "unauthorized",
    }


def test_search_matches_names_and_email(client, create_guest, headers, other_headers):
    create_guest("ana@example.com", first_name="Ana", last_name="Lopez")
    create_guest("bruno@example.com", first_name="Bruno", last_name="Anaya")
    create_guest("carla@example.com", first_name="Carla", last_name="Diaz")
    create_guest("ana2@example.com", first_name="Ana", request_headers=other_headers)

    r = client.get("/guests/search", params={"searchQuery": "ana"}, headers=headers)
    assert r.status_code == 200, r.json()
    names = [g["first_name"] for g in r.json()["data"]]
    assert names == ["Bruno", "Ana"]

    r = client.get("/guests/search", params={"searchQuery": "CARLA@"}, headers=headers)
    assert [g["email"] for g in r.json()["data"]] == ["carla@example.com"]


def test_search_requires_query(client, headers):
    r = client.get("/guests/search", headers=headers)
    assert r.status_code == 400
    assert r.json()["message"] == "Search query is required"

    r = client.get("/guests/search", params={"searchQuery": "   "}, headers=headers)
    assert r.status_code == 400


def test_list_guests_carries_reservations_and_meta(client, create_guest, create_room, create_reservation, headers):
    ana = create_guest("ana@example.com")
    create_guest("bo@example.com", first_name="Bo")
    create_room("101")
    now = datetime.now(timezone.utc)
    reservation = create_reservation(ana["id"], now, now + timedelta(days=2))

    r = client.get("/guests", params={"sortKey": "email", "sortDirection": "asc"}, headers=headers)
    assert r.status_code == 200, r.json()
    body = r.json()
    assert body["meta"] == {"totalGuests": 2, "totalPages": 1, "currentPage": 1, "pageSize": 10}
    assert [g["email"] for g in body["data"]] == ["ana@example.com", "bo@example.com"]
    assert [res["id"] for res in body["data"][0]["reservations"]] == [reservation["id"]]
    assert body["data"][1]["reservations"] == []


def test_list_guests_paginates(client, create_guest, headers):
    for i in range(3):
        create_guest(f"guest{i}@example.com")

    r = client.get("/guests", params={"page": 2, "limit": 2}, headers=headers)
    body = r.json()
    assert len(body["data"]) == 1
    assert body["meta"]["totalPages"] == 2
    assert body["meta"]["currentPage"] == 2


def test_delete_guest_keeps_reservation(client, create_guest, create_room, create_reservation, headers, db):
    ana = create_guest()
    create_room("101")
    now = datetime.now(timezone.utc)
    reservation = create_reservation(ana["id"], now, now + timedelta(days=1))

    r = client.delete(f"/guests/{ana['id']}", headers=headers)
    assert r.status_code == 200, r.json()
    assert r.json()["message"] == (
        f"Guest with ID: {ana['id']} successfully deleted and reservation retained"
    )

    db.expire_all()
    assert db.get(Guest, ana["id"]) is None
    assert db.query(ReservationGuest).filter(ReservationGuest.guest_id == ana["id"]).count() == 0
    assert db.get(Reservation, reservation["id"]) is not None

    detail = client.get(f"/reservations/{reservation['id']}", headers=headers).json()["data"]
    assert detail["primary_guest"] is None
    assert detail["primary_guest_name"] == "Ana Lopez"


def test_delete_foreign_guest_is_not_found_and_writes_nothing(
    client, create_guest, create_room, create_reservation, headers, other_headers, db
):
    ana = create_guest()
    create_room("101")
    now = datetime.now(timezone.utc)
    create_reservation(ana["id"], now, now + timedelta(days=1))

    r = client.delete(f"/guests/{ana['id']}", headers=other_headers)
    assert r.status_code == 404
    assert r.json()["message"] == "Guest not found"

    db.expire_all()
    assert db.get(Guest, ana["id"]) is not None
    assert db.query(ReservationGuest).count() == 1


def test_search_treats_wildcards_literally(client, create_guest, headers):
    create_guest("ana@example.com", first_name="Ana")
    create_guest("under_score@example.com", first_name="Uma")

    r = client.get("/guests/search", params={"searchQuery": "%"}, headers=headers)
    assert r.status_code == 200, r.json()
    assert r.json()["data"] == []

    r = client.get("/guests/search", params={"searchQuery": "_"}, headers=headers)
    assert [g["first_name"] for g in r.json()["data"]] == ["Uma"]
