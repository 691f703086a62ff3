"""Integration tests for Suggestion API endpoints via TestClient."""

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from requisitions.api.errors import register_error_handlers
from requisitions.api.routes import suggestion_router

STOCK = {"X-Actor-Id": "stock-carl"}


@pytest.fixture()
def client():
    app = FastAPI()
    app.include_router(suggestion_router)
    register_error_handlers(app)
    return TestClient(app)


def _save(client, headers=STOCK, **overrides):
    payload = {
        "store_id": "store-001",
        "product_code": "1001",
        "product_name": "Arroz Agulhinha",
        "weekday": 5,
        "average_qty": 12.5,
    }
    payload.update(overrides)
    return client.put("/suggestions", json=payload, headers=headers)


class TestSaveSuggestionEndpoint:
    def test_save(self, client):
        response = _save(client)
        assert response.status_code == 200
        assert response.json()["suggestion_id"]

    def test_save_as_requester(self, client):
        response = _save(client, headers={"X-Actor-Id": "cook-ana"})
        assert response.status_code == 403

    def test_invalid_weekday(self, client):
        response = _save(client, weekday=9)
        assert response.status_code == 400

    def test_remove(self, client):
        suggestion_id = _save(client).json()["suggestion_id"]
        response = client.delete(f"/suggestions/{suggestion_id}", headers=STOCK)
        assert response.status_code == 200
        response = client.get(
            "/suggestions/lookup", params={"store_id": "store-001", "product_code": "1001", "weekday": 5}
        )
        assert response.status_code == 404

    def test_remove_unknown(self, client):
        response = client.delete("/suggestions/missing", headers=STOCK)
        assert response.status_code == 404


class TestSuggestionQueries:
    def test_lookup(self, client):
        _save(client)
        response = client.get(
            "/suggestions/lookup", params={"store_id": "store-001", "product_code": "1001", "weekday": 5}
        )
        assert response.status_code == 200
        body = response.json()
        assert body["average_qty"] == 12.5
        assert body["weekday_name"] == "Friday"

    def test_by_delivery_date(self, client):
        _save(client)
        # 2026-10-23 is a Friday
        response = client.get(
            "/suggestions/by-delivery-date",
            params={"store_id": "store-001", "product_code": "1001", "delivery_date": "2026-10-23"},
        )
        assert response.status_code == 200
        body = response.json()
        assert body["weekday"] == 5
        assert body["suggestion"]["average_qty"] == 12.5

    def test_by_delivery_date_without_suggestion(self, client):
        response = client.get(
            "/suggestions/by-delivery-date",
            params={"store_id": "store-001", "product_code": "1001", "delivery_date": "2026-10-24"},
        )
        assert response.status_code == 200
        assert response.json()["suggestion"] is None
        assert response.json()["weekday_name"] == "Saturday"

    def test_list_and_product_view(self, client):
        _save(client, weekday=1)
        _save(client, weekday=5)
        _save(client, product_code="1002", product_name="Azeite Extra Virgem", weekday=5)

        response = client.get("/suggestions", params={"store_id": "store-001", "weekday": 5})
        assert [s["product_code"] for s in response.json()] == ["1001", "1002"]

        response = client.get("/suggestions/products/1001", params={"store_id": "store-001"})
        assert [s["weekday"] for s in response.json()] == [1, 5]
