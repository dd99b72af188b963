import pytest

from conftest import RESELLER_DISPLAY_NAME, SINGLE_MOBILE

CUSTOMERS = "/api/v1/customers"


def create(client, headers, **fields):
    payload = {"customer_name": "client", "mobile_number": 1000000000}
    payload.update(fields)
    response = client.post(CUSTOMERS, json=payload, headers=headers)
    assert response.status_code == 201, response.text
    return response.json()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json()["database"] == "connected"


@pytest.mark.parametrize("method,path", [
    ("get", CUSTOMERS),
    ("post", f"{CUSTOMERS}/bulk-edit"),
    ("get", "/api/v1/dashboard/stats"),
    ("get", "/api/v1/dashboard/notes"),
])
def test_admin_routes_require_admin(client, reseller_headers, single_headers, method, path):
    assert getattr(client, method)(path).status_code == 401
    assert getattr(client, method)(path, headers=reseller_headers).status_code == 403
    assert getattr(client, method)(path, headers=single_headers).status_code == 403


def test_create_and_fetch_customer(client, admin_headers):
    created = create(client, admin_headers, charging_date="2025-01-01", provider="Etisalat",
                     monthly_price=120, notes="vip")

    assert created["provider"] == "etisalat"
    assert created["renewal"]["resolved_date"] == "2025-01-29"
    assert created["renewal"]["display"] == "٢٩/١/٢٠٢٥"
    assert created["monthly_price"] == 120.0
    assert created["notes"] == "vip"

    fetched = client.get(f"{CUSTOMERS}/{created['id']}", headers=admin_headers)
    assert fetched.status_code == 200
    assert fetched.json()["customer_name"] == "client"


def test_create_validates_line_type_and_provider(client, admin_headers):
    assert client.post(CUSTOMERS, json={
        "customer_name": "x", "mobile_number": 1, "line_type": 35
    }, headers=admin_headers).status_code == 422
    assert client.post(CUSTOMERS, json={
        "customer_name": "x", "mobile_number": 1, "provider": "vodafone"
    }, headers=admin_headers).status_code == 422


def test_unknown_customer_is_404(client, admin_headers):
    response = client.get(f"{CUSTOMERS}/999", headers=admin_headers)
    assert response.status_code == 404
    assert response.json()["error_code"] == "RESOURCE_NOT_FOUND"


def test_listing_with_search(client, admin_headers):
    create(client, admin_headers, customer_name="zeinab", mobile_number=1011111111, line_type=20)
    create(client, admin_headers, customer_name="ahmed", mobile_number=1022222222)

    response = client.get(CUSTOMERS, headers=admin_headers)
    assert response.status_code == 200
    body = response.json()
    assert body["total"] == 2
    assert [c["customer_name"] for c in body["items"]] == ["zeinab", "ahmed"]

    response = client.get(CUSTOMERS, params={"search": "10222"}, headers=admin_headers)
    assert [c["customer_name"] for c in response.json()["items"]] == ["ahmed"]


def test_bulk_insert(client, admin_headers):
    response = client.post(f"{CUSTOMERS}/bulk", json={"customers": [
        {"customer_name": "a", "mobile_number": 1},
        {"customer_name": "b", "mobile_number": ""},
    ]}, headers=admin_headers)

    assert response.status_code == 201
    assert response.json()["inserted"] == 1
    assert response.json()["skipped"] == 1


def test_bulk_insert_limit(client, admin_headers):
    rows = [{"customer_name": f"c{i}", "mobile_number": i + 1} for i in range(21)]
    response = client.post(f"{CUSTOMERS}/bulk", json={"customers": rows}, headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "BULK_LIMIT_EXCEEDED"


def test_bulk_edit(client, admin_headers):
    first = create(client, admin_headers, mobile_number=1, ownership="nader")
    second = create(client, admin_headers, mobile_number=2, ownership="nader")

    response = client.post(f"{CUSTOMERS}/bulk-edit", json={
        "ids": [first["id"], second["id"]],
        "changes": {"renewal_status": "تم", "ownership": "no-change", "monthly_price": ""}
    }, headers=admin_headers)

    assert response.status_code == 200
    assert response.json() == {"updated": 2, "fields": ["renewal_status"]}

    for customer_id in (first["id"], second["id"]):
        customer = client.get(f"{CUSTOMERS}/{customer_id}", headers=admin_headers).json()
        assert customer["renewal_status"] == "تم"
        assert customer["ownership"] == "nader"


def test_bulk_edit_without_changes(client, admin_headers):
    customer = create(client, admin_headers)
    response = client.post(f"{CUSTOMERS}/bulk-edit", json={"ids": [customer["id"]], "changes": {}},
                           headers=admin_headers)

    assert response.status_code == 422
    assert response.json()["error_code"] == "NO_FIELDS_TO_UPDATE"


def test_put_patch_notes_and_delete(client, admin_headers):
    customer = create(client, admin_headers, provider="we")
    path = f"{CUSTOMERS}/{customer['id']}"

    patched = client.patch(path, json={"payment_status": "دفع"}, headers=admin_headers)
    assert patched.status_code == 200
    assert patched.json()["payment_status"] == "دفع"
    assert patched.json()["provider"] == "we"

    assert client.patch(path, json={"customer_name": None}, headers=admin_headers).status_code == 422

    replaced = client.put(path, json={"customer_name": "new", "mobile_number": 5, "line_type": 60},
                          headers=admin_headers)
    assert replaced.status_code == 200
    assert replaced.json()["provider"] is None
    assert replaced.json()["line_type"] == 60

    noted = client.put(f"{path}/notes", json={"notes": "late payer"}, headers=admin_headers)
    assert noted.json()["notes"] == "late payer"

    assert client.delete(path, headers=admin_headers).status_code == 204
    assert client.get(path, headers=admin_headers).status_code == 404


def test_reseller_view_hides_notes(client, admin_headers, reseller_headers):
    create(client, admin_headers, customer_name=RESELLER_DISPLAY_NAME, mobile_number=1,
           charging_date="2025-01-01", notes="internal")
    create(client, admin_headers, customer_name="other", mobile_number=2)

    response = client.get("/api/v1/me/lines", headers=reseller_headers)

    assert response.status_code == 200
    [line] = response.json()
    assert line["mobile_number"] == 1
    assert "notes" not in line
    assert line["renewal"]["resolved_date"] == "2025-01-31"


def test_single_user_view_and_suggested_name(client, admin_headers, single_headers, reseller_headers):
    create(client, admin_headers, customer_name="x", mobile_number=int(SINGLE_MOBILE))

    lines = client.get("/api/v1/me/lines", headers=single_headers).json()
    assert [line["customer_name"] for line in lines] == ["x"]

    assert client.get("/api/v1/me/suggested-name", headers=single_headers).json()["suggested_name"] is None
    saved = client.put("/api/v1/me/suggested-name", json={"suggested_name": " Mostafa "}, headers=single_headers)
    assert saved.status_code == 200
    assert saved.json()["suggested_name"] == "Mostafa"

    listing = client.get(CUSTOMERS, headers=admin_headers).json()
    assert listing["items"][0]["suggested_name"] == "Mostafa"

    forbidden = client.put("/api/v1/me/suggested-name", json={"suggested_name": "x"}, headers=reseller_headers)
    assert forbidden.status_code == 403


def test_admin_has_no_restricted_view(client, admin_headers):
    assert client.get("/api/v1/me/lines", headers=admin_headers).status_code == 403


def test_dashboard(client, admin_headers):
    create(client, admin_headers, mobile_number=1, payment_status="paid", monthly_price=100)
    create(client, admin_headers, mobile_number=2, renewal_status="done")

    stats = client.get("/api/v1/dashboard/stats", headers=admin_headers).json()
    assert stats == {
        "total_customers": 2,
        "paid_customers": 1,
        "renewed_customers": 1,
        "total_revenue": 100.0,
        "payment_rate": 50,
        "renewal_rate": 50,
    }

    saved = client.put("/api/v1/dashboard/notes", json={"note_content": "restock"}, headers=admin_headers)
    assert saved.status_code == 200
    assert client.get("/api/v1/dashboard/notes", headers=admin_headers).json()["note_content"] == "restock"


def test_leading_zero_login_shares_suggested_name_with_admin_listing(client, admin_headers):
    create(client, admin_headers, customer_name="x", mobile_number=1012345678)
    login = client.post("/api/v1/auth/login", json={"user_type": "single", "username": "01012345678"})
    assert login.status_code == 200
    headers = {"Authorization": f"Bearer {login.json()['access_token']}"}

    assert len(client.get("/api/v1/me/lines", headers=headers).json()) == 1
    saved = client.put("/api/v1/me/suggested-name", json={"suggested_name": "Mona"}, headers=headers)
    assert saved.json()["mobile_number"] == "1012345678"

    listing = client.get(CUSTOMERS, headers=admin_headers).json()
    assert listing["items"][0]["suggested_name"] == "Mona"
