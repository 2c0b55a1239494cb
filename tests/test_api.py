"""
HTTP adapter tests.

The session dependency is overridden with the test session and the principal
dependency with a mutable holder, so requests can switch between U and V.
"""
import uuid

import pytest
from fastapi.testclient import TestClient

from assetshare.core.deps import get_current_principal, get_db, get_object_store
from assetshare.main import app


@pytest.fixture
def acting(owner):
    return {"principal": owner}


@pytest.fixture
def client(db, store, acting):
    app.dependency_overrides[get_db] = lambda: db
    app.dependency_overrides[get_current_principal] = lambda: acting["principal"]
    app.dependency_overrides[get_object_store] = lambda: store
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()


def test_healthz(client):
    assert client.get("/healthz").json() == {"status": "ok"}


def test_requests_without_session_are_rejected(db):
    app.dependency_overrides[get_db] = lambda: db
    try:
        response = TestClient(app).get("/api/v1/inventories")
    finally:
        app.dependency_overrides.clear()
    assert response.status_code == 401


def test_inventory_lifecycle(client, acting, owner, outsider):
    created = client.post(
        "/api/v1/inventories",
        json={"name": "Drill", "price": "49.99", "quantity": 3, "location": "Garage"},
    )
    assert created.status_code == 201
    body = created.json()
    assert body["creator_name"] == "umaster"
    assert body["sharable_groups"] == [str(owner)]
    item_id = body["id"]

    assert client.get(f"/api/v1/inventories/{item_id}").json()["name"] == "Drill"

    acting["principal"] = outsider
    assert client.get(f"/api/v1/inventories/{item_id}").status_code == 404
    assert client.put(f"/api/v1/inventories/{item_id}", json={"name": "Mine now"}).status_code == 404

    acting["principal"] = owner
    deleted = client.request("DELETE", "/api/v1/inventories", json={"ids": [item_id, item_id]})
    assert deleted.json() == [item_id]
    assert client.get(f"/api/v1/inventories/{item_id}").status_code == 404


def test_column_update_allow_list(client):
    item_id = client.post("/api/v1/inventories", json={"name": "Drill", "price": "49.99"}).json()["id"]

    ok = client.patch(
        "/api/v1/inventories/column",
        json={"asset_id": item_id, "column_name": "price", "input_column": "10.00"},
    )
    assert ok.status_code == 200
    assert ok.json()["price"] == "10.00"

    rejected = client.patch(
        "/api/v1/inventories/column",
        json={"asset_id": item_id, "column_name": "description", "input_column": "x"},
    )
    assert rejected.status_code == 400

    missing = client.patch(
        "/api/v1/inventories/column",
        json={"asset_id": str(uuid.uuid4()), "column_name": "quantity", "input_column": 2},
    )
    assert missing.status_code == 404


def test_unknown_status_maps_to_bad_request(client):
    response = client.post("/api/v1/categories", json={"name": "Tools", "status": "retired"})
    assert response.status_code == 400


def test_bulk_create(client):
    response = client.post(
        "/api/v1/inventories/bulk",
        json={"inventory_list": [{"name": "Hammer"}, {"name": "Nails", "quantity": 200}]},
    )
    assert response.status_code == 201
    assert sorted(item["name"] for item in response.json()) == ["Hammer", "Nails"]


def test_category_items_and_report(client, acting, outsider):
    item_id = client.post("/api/v1/inventories", json={"name": "Tent", "price": "120"}).json()["id"]
    category = client.post("/api/v1/categories", json={"name": "Camping", "status": "general"}).json()

    links = client.post(f"/api/v1/categories/{category['id']}/items", json={"ids": [item_id]})
    assert links.status_code == 201
    assert links.json()[0]["name"] == "Tent"

    report = client.get("/api/v1/reports", params={"since": "2000-01-01T00:00:00Z"}).json()
    assert report["item_valuation"] == "120.00"
    assert report["total_category_items_cost"] == "120.00"

    acting["principal"] = outsider
    assert client.get(f"/api/v1/categories/{category['id']}/items").status_code == 404
    assert client.request(
        "DELETE", f"/api/v1/categories/{category['id']}/items", json={"ids": [links.json()[0]["id"]]}
    ).status_code == 404


def test_image_upload_requires_visibility(client, acting, outsider):
    item_id = client.post("/api/v1/inventories", json={"name": "Lamp"}).json()["id"]

    acting["principal"] = outsider
    forbidden = client.post(
        f"/api/v1/inventories/{item_id}/image",
        files={"file": ("lamp.png", b"\x89PNG", "image/png")},
    )
    assert forbidden.status_code == 404


def test_image_round_trip(client):
    item_id = client.post("/api/v1/inventories", json={"name": "Lamp"}).json()["id"]

    uploaded = client.post(
        f"/api/v1/inventories/{item_id}/image",
        files={"file": ("lamp.png", b"\x89PNG", "image/png")},
    )
    assert uploaded.status_code == 201

    downloaded = client.get(f"/api/v1/inventories/{item_id}/image")
    assert downloaded.status_code == 200
    assert downloaded.content == b"\x89PNG"
    assert downloaded.headers["content-type"] == "image/png"
    assert client.get(f"/api/v1/inventories/{item_id}").json()["associated_image_url"] == item_id


def test_profile_and_lookups(client):
    me = client.put("/api/v1/profiles/me", json={"about_me": "Handy"})
    assert me.status_code == 200
    assert me.json()["about_me"] == "Handy"

    statuses = client.get("/api/v1/statuses").json()
    assert {status["name"] for status in statuses} >= {"draft", "general", "hidden", "urgent"}

    client.post("/api/v1/inventories", json={"name": "Bike", "location": "Garage"})
    assert [row["location"] for row in client.get("/api/v1/storage-locations").json()] == ["Garage"]


def test_avatar_round_trip(client, owner):
    uploaded = client.post("/api/v1/profiles/me/avatar", files={"file": ("me.png", b"\x89PNG", "image/png")})
    assert uploaded.status_code == 201

    downloaded = client.get("/api/v1/profiles/me/avatar")
    assert downloaded.status_code == 200
    assert downloaded.content == b"\x89PNG"
    assert client.get("/api/v1/profiles/me").json()["avatar_url"] == str(owner)


def test_missing_avatar_is_not_found(client):
    assert client.get("/api/v1/profiles/me/avatar").status_code == 404


def test_duplicate_username_is_a_conflict(client, acting, outsider):
    acting["principal"] = outsider
    response = client.put("/api/v1/profiles/me", json={"username": "umaster"})
    assert response.status_code == 409
    assert client.get("/api/v1/profiles/me").json()["username"] is None


def test_linking_an_invisible_item_is_rejected(client, acting, outsider):
    secret = client.post("/api/v1/inventories", json={"name": "Secret safe", "price": "9999.00"}).json()["id"]

    acting["principal"] = outsider
    category = client.post("/api/v1/categories", json={"name": "Mine", "status": "general"}).json()
    response = client.post(f"/api/v1/categories/{category['id']}/items", json={"ids": [secret]})

    assert response.status_code == 400
    assert client.get(f"/api/v1/categories/{category['id']}/items").json() == []
