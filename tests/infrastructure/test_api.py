"""Integration tests for the HTTP API via TestClient."""

from datetime import timedelta

import pytest
from fastapi.testclient import TestClient

from depletion.domain.model.product import MAX_QUANTITY, Product
from depletion.domain.service.product_locks import ProductLocks
from depletion.infrastructure.api.app import create_app
from depletion.infrastructure.bootstrap import Container
from tests.fakes import T0, FakeClock, FakeDatabase

HEADERS = {"X-Store-Id": "store-a"}


@pytest.fixture()
def db():
    return FakeDatabase([
        Product(id="p1", store_id="store-a", name="Classic Polish", brand="Lumina",
                quantity=2, min_stock_alert=1, created_at=T0),
        Product(id="p2", store_id="store-a", name="Soak-off Gel", brand="Aurora",
                quantity=1, min_stock_alert=5, created_at=T0),
        Product(id="p9", store_id="store-b", name="Top Coat", quantity=4, created_at=T0),
    ])


@pytest.fixture()
def client(db):
    container = Container(
        uow_factory=db.unit_of_work,
        locks=ProductLocks(),
        clock=FakeClock(T0 + timedelta(days=5)),
    )
    return TestClient(create_app(container))


class TestRecordUsageAPI:

    def test_record_returns_201_with_camel_case_payload(self, client):
        response = client.post("/products/p1/usage", json={"note": "trial"}, headers=HEADERS)

        assert response.status_code == 201
        body = response.json()
        assert body["eventId"]
        assert body["note"] == "trial"
        assert body["date"] == (T0 + timedelta(days=5)).isoformat()
        assert body["product"]["quantity"] == 1
        assert body["product"]["usageCount"] == 1
        assert body["product"]["lastUsed"] == body["date"]
        assert body["product"]["averageUsesPerMonth"] == pytest.approx(1.0)
        assert body["product"]["estimatedDaysLeft"] == 30
        assert body["alertStatus"] == {
            "isLowStock": True,
            "estimatedDaysLeft": 30,
            "lowStockThreshold": 1,
        }

    def test_record_without_body(self, client):
        response = client.post("/products/p1/usage", headers=HEADERS)
        assert response.status_code == 201
        assert response.json()["note"] is None

    def test_unknown_product_is_404(self, client):
        response = client.post("/products/nope/usage", json={}, headers=HEADERS)
        assert response.status_code == 404
        assert "not found" in response.json()["error"]

    def test_other_store_product_is_404(self, client, db):
        response = client.post("/products/p9/usage", json={}, headers=HEADERS)
        assert response.status_code == 404
        assert db.products["p9"].quantity == 4

    def test_out_of_stock_is_400(self, client):
        assert client.post("/products/p2/usage", json={}, headers=HEADERS).status_code == 201
        response = client.post("/products/p2/usage", json={}, headers=HEADERS)
        assert response.status_code == 400
        assert "out of stock" in response.json()["error"]

    def test_storage_failure_is_500(self, client, db):
        db.fail_on_commit = True
        response = client.post("/products/p1/usage", json={}, headers=HEADERS)
        assert response.status_code == 500
        assert response.json() == {"error": "Storage failure, please retry"}
        assert db.products["p1"].quantity == 2

    def test_missing_store_header_is_400(self, client):
        response = client.post("/products/p1/usage", json={})
        assert response.status_code == 400
        assert response.json() == {"error": "Store ID is required"}


class TestUsageHistoryAPI:

    def test_history_newest_first(self, client):
        client.post("/products/p1/usage", json={"note": "one"}, headers=HEADERS)
        client.post("/products/p1/usage", json={"note": "two"}, headers=HEADERS)

        response = client.get("/products/p1/usage", headers=HEADERS)

        assert response.status_code == 200
        usages = response.json()["usages"]
        assert len(usages) == 2
        assert {u["note"] for u in usages} == {"one", "two"}
        assert set(usages[0]) == {"eventId", "date", "note"}

    def test_history_of_other_store_product_is_404(self, client):
        assert client.get("/products/p9/usage", headers=HEADERS).status_code == 404


class TestCatalogAPI:

    def test_create_and_fetch_product(self, client):
        response = client.post(
            "/products",
            json={"name": "Matte Polish", "brand": "Lumina", "quantity": 8,
                  "minStockAlert": 3, "price": "1280", "colorName": "Sand"},
            headers=HEADERS,
        )
        assert response.status_code == 201
        created = response.json()
        assert created["storeId"] == "store-a"
        assert created["usageCount"] == 0
        assert created["colorName"] == "Sand"
        assert created["price"] == "1280.00"

        fetched = client.get(f"/products/{created['id']}", headers=HEADERS)
        assert fetched.status_code == 200
        assert fetched.json()["name"] == "Matte Polish"

    def test_create_invalid_product_is_400(self, client):
        response = client.post(
            "/products", json={"name": "Bad", "quantity": -3}, headers=HEADERS
        )
        assert response.status_code == 400

    def test_list_products_with_low_stock_filter(self, client):
        all_products = client.get("/products", headers=HEADERS).json()
        assert {p["id"] for p in all_products} == {"p1", "p2"}

        low = client.get("/products", params={"lowStock": "true"}, headers=HEADERS).json()
        assert [p["id"] for p in low] == ["p2"]
        assert low[0]["alertStatus"]["isLowStock"] is True

    def test_update_product(self, client, db):
        response = client.put(
            "/products/p2", json={"quantity": 30, "colorName": "Midnight"}, headers=HEADERS
        )
        assert response.status_code == 200
        assert response.json()["quantity"] == 30
        assert response.json()["alertStatus"]["isLowStock"] is False
        assert db.products["p2"].color_name == "Midnight"

    def test_delete_product_removes_history(self, client, db):
        client.post("/products/p1/usage", json={}, headers=HEADERS)

        response = client.delete("/products/p1", headers=HEADERS)

        assert response.status_code == 204
        assert "p1" not in db.products
        assert db.events_for("p1") == []
        assert client.get("/products/p1", headers=HEADERS).status_code == 404


class TestInputBounds:

    def test_oversized_quantity_is_400(self, client, db):
        response = client.post(
            "/products", json={"name": "Bulk", "quantity": 10**400}, headers=HEADERS
        )
        assert response.status_code == 400
        assert "quantity" in response.json()["error"]
        assert len(db.products) == 3

    def test_quantity_just_above_maximum_is_400(self, client):
        response = client.post(
            "/products", json={"name": "Bulk", "quantity": MAX_QUANTITY + 1}, headers=HEADERS
        )
        assert response.status_code == 400
        assert response.json()["error"].startswith("quantity")

    def test_oversized_restock_is_400(self, client, db):
        response = client.put(
            "/products/p1", json={"quantity": MAX_QUANTITY + 1}, headers=HEADERS
        )
        assert response.status_code == 400
        assert db.products["p1"].quantity == 2

    def test_maximum_quantity_still_records_usage(self, client):
        created = client.post(
            "/products", json={"name": "Bulk", "quantity": MAX_QUANTITY}, headers=HEADERS
        ).json()
        response = client.post(f"/products/{created['id']}/usage", json={}, headers=HEADERS)
        assert response.status_code == 201
        assert response.json()["product"]["quantity"] == MAX_QUANTITY - 1


class TestLockRegistry:

    def test_unknown_ids_leave_no_lock_entries(self, client):
        for i in range(50):
            response = client.post(f"/products/unknown-{i}/usage", json={}, headers=HEADERS)
            assert response.status_code == 404
        assert client.app.state.container.locks._locks == {}

    def test_recorded_usage_leaves_no_lock_entries(self, client):
        client.post("/products/p1/usage", json={}, headers=HEADERS)
        client.put("/products/p1", json={"quantity": 4}, headers=HEADERS)
        client.delete("/products/p1", headers=HEADERS)
        assert client.app.state.container.locks._locks == {}

    def test_error_body_is_documented(self, client):
        schema = client.get("/openapi.json").json()
        responses = schema["paths"]["/products/{product_id}/usage"]["post"]["responses"]
        assert responses["404"]["content"]["application/json"]["schema"] == {
            "$ref": "#/components/schemas/ErrorResponse"
        }
