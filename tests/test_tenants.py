def test_super_admin_manages_tenants(client, auth_headers, super_admin):
    headers = auth_headers(super_admin)

    r = client.post("/tenants", json={"name": "Harbor Hotel", "membership": "premium"}, headers=headers)
    assert r.status_code == 201, r.json()
    tenant = r.json()["data"]
    assert tenant["membership"] == "premium"
    assert tenant["status"] == "active"

    r = client.put(f"/tenants/{tenant['id']}", json={"status": "inactive"}, headers=headers)
    assert r.status_code == 200, r.json()
    assert r.json()["data"]["status"] == "inactive"
    assert r.json()["data"]["name"] == "Harbor Hotel"

    r = client.get("/tenants", headers=headers)
    assert {t["name"] for t in r.json()["data"]} == {"Seaside Inn", "Harbor Hotel"}

    r = client.delete(f"/tenants/{tenant['id']}", headers=headers)
    assert r.status_code == 200, r.json()
    assert client.get(f"/tenants/{tenant['id']}", headers=headers).status_code == 404


def test_tenant_routes_are_super_admin_only(client, auth_headers, admin, headers):
    assert client.get("/tenants", headers=auth_headers(admin)).status_code == 403
    assert client.post("/tenants", json={"name": "X"}, headers=headers).status_code == 403


def test_missing_tenant_not_found(client, auth_headers, super_admin):
    r = client.get("/tenants/999", headers=auth_headers(super_admin))
    assert r.status_code == 404
    assert r.json()["message"] == "Tenant: 999 not found"
