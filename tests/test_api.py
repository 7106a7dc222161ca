"""Tests for the FastAPI API."""

import pytest
from fastapi.testclient import TestClient

from storefront.api import create_app
from storefront.api.routers import orders
from storefront.data.database import get_db
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo

from conftest import FakeNotifier, FakeRenderClient, FakeStorageClient

CUSTOMER = {"X-User-Id": "cust-1", "X-User-Email": "anna@example.com"}
OTHER_CUSTOMER = {"X-User-Id": "cust-2"}
ADMIN = {"X-User-Id": "admin-1", "X-User-Role": "admin"}

ORDER_BODY = {
    "shipping_address_id": "addr-1",
    "items": [
        {"product_id": "prod-a", "quantity": 2},
        {"product_id": "prod-b", "quantity": 1},
    ],
    "delivery_fee": "5.00",
    "payment_method": "cash_on_delivery",
}


@pytest.fixture
def fakes():
    return {
        "notifier": FakeNotifier(),
        "render": FakeRenderClient(),
        "storage": FakeStorageClient(),
    }


@pytest.fixture
def client(db, catalog, fakes):
    app = create_app()

    def override_db():
        yield db

    app.dependency_overrides[get_db] = override_db
    app.dependency_overrides[orders.get_notification_service] = lambda: fakes["notifier"]
    app.dependency_overrides[orders.get_render_client] = lambda: fakes["render"]
    app.dependency_overrides[orders.get_storage_client] = lambda: fakes["storage"]
    return TestClient(app)


def create_order(client, **overrides):
    body = {**ORDER_BODY, **overrides}
    response = client.post("/orders/", json=body, headers=CUSTOMER)
    assert response.status_code == 201, response.text
    return response.json()["order_id"]


class TestHealthCheck:
    def test_health(self, client):
        response = client.get("/health")
        assert response.status_code == 200
        assert response.json() == {"status": "ok"}


class TestAuth:
    def test_missing_user_is_unauthorized(self, client):
        response = client.get("/orders/")
        assert response.status_code == 401
        assert response.json()["detail"]["error"] == "unauthorized"

    def test_stats_require_admin(self, client):
        assert client.get("/orders/stats", headers=CUSTOMER).status_code == 403
        assert client.get("/orders/stats", headers=ADMIN).status_code == 200

    def test_status_change_requires_admin(self, client):
        order_id = create_order(client)
        response = client.post(f"/orders/{order_id}/confirm", headers=CUSTOMER)
        assert response.status_code == 403


class TestOrderLifecycle:
    def test_create_and_read(self, client):
        order_id = create_order(client, total_amount="60.00")

        response = client.get(f"/orders/{order_id}", headers=CUSTOMER)
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "Pending Confirmation"
        assert data["total_amount"] == "60.00"
        assert data["shipping_address"]["city"] == "Krakow"
        assert len(data["items"]) == 2

    def test_non_cash_order_awaits_payment(self, client):
        order_id = create_order(client, payment_method="paypal")
        assert client.get(f"/orders/{order_id}", headers=CUSTOMER).json()["status"] == "Awaiting Payment"

    def test_reference_scenario(self, client, db):
        order_id = create_order(client)

        assert client.post(f"/orders/{order_id}/confirm", headers=ADMIN).json() == {"success": True}
        assert client.post(f"/orders/{order_id}/cancel", headers=ADMIN).status_code == 200

        response = client.post(
            f"/orders/{order_id}/update-status", json={"status": "Delivered"}, headers=ADMIN
        )
        assert response.status_code == 409
        assert response.json()["detail"]["error"] == "invalid_transition"
        assert ProductRepo(db).get_stock("prod-a") == 10

    def test_unknown_status_value(self, client):
        order_id = create_order(client)
        response = client.post(
            f"/orders/{order_id}/update-status", json={"status": "Teleported"}, headers=ADMIN
        )
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_status"

    def test_total_mismatch_rejected(self, client, db):
        response = client.post("/orders/", json={**ORDER_BODY, "total_amount": "59.99"}, headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "total_mismatch"
        assert ProductRepo(db).get_stock("prod-a") == 10

    def test_fee_below_store_fee_rejected(self, client, db):
        response = client.post("/orders/", json={**ORDER_BODY, "delivery_fee": "0.00"}, headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invalid_delivery_fee"
        assert ProductRepo(db).get_stock("prod-a") == 10

    def test_omitted_fee_uses_store_fee(self, client):
        body = {k: v for k, v in ORDER_BODY.items() if k != "delivery_fee"}
        response = client.post("/orders/", json=body, headers=CUSTOMER)
        assert response.status_code == 201
        order_id = response.json()["order_id"]
        order = client.get(f"/orders/{order_id}", headers=CUSTOMER).json()
        assert order["delivery_fee"] == "5.00"
        assert order["total_amount"] == "60.00"

    def test_out_of_stock(self, client):
        body = {**ORDER_BODY, "items": [{"product_id": "prod-b", "quantity": 6}]}
        response = client.post("/orders/", json=body, headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "out_of_stock"

    def test_zero_quantity_is_rejected_by_schema(self, client):
        body = {**ORDER_BODY, "items": [{"product_id": "prod-a", "quantity": 0}]}
        assert client.post("/orders/", json=body, headers=CUSTOMER).status_code == 422

    def test_missing_order(self, client):
        response = client.get("/orders/missing", headers=ADMIN)
        assert response.status_code == 404
        assert response.json()["detail"]["error"] == "order_not_found"

    def test_other_customer_cannot_read(self, client):
        order_id = create_order(client)
        assert client.get(f"/orders/{order_id}", headers=OTHER_CUSTOMER).status_code == 403

    def test_list_only_own_orders(self, client):
        create_order(client)
        create_order(client)

        mine = client.get("/orders/", headers=CUSTOMER).json()
        theirs = client.get("/orders/", headers=OTHER_CUSTOMER).json()
        everything = client.get("/orders/?limit=1", headers=ADMIN).json()

        assert mine["total"] == 2
        assert theirs["total"] == 0
        assert everything["total"] == 2
        assert len(everything["orders"]) == 1

    def test_correct_total(self, client):
        order_id = create_order(client)
        response = client.post(
            f"/orders/{order_id}/correct-total",
            json={"total_amount": "55.00", "reason": "rabat"},
            headers=ADMIN,
        )
        assert response.status_code == 200
        assert response.json()["total_amount"] == "55.00"


class TestLocalization:
    def test_polish_by_default(self, client):
        response = client.get("/orders/missing", headers=ADMIN)
        assert response.json()["detail"]["message"] == "Zamowienie nie istnieje"

    def test_english_on_request(self, client):
        order_id = create_order(client)
        client.post(f"/orders/{order_id}/cancel", headers=ADMIN)

        response = client.post(
            f"/orders/{order_id}/confirm",
            headers={**ADMIN, "Accept-Language": "en-US,en;q=0.9"},
        )
        assert response.status_code == 409
        assert response.json()["detail"]["message"] == "This order status change is not allowed"


class TestInvoice:
    def test_download_and_archive(self, client, db, fakes):
        order_id = create_order(client)
        client.post(f"/orders/{order_id}/confirm", headers=ADMIN)

        response = client.post(f"/orders/{order_id}/invoice", headers=CUSTOMER)

        assert response.status_code == 200
        assert response.headers["content-type"] == "application/pdf"
        assert response.content.startswith(b"%PDF")
        assert f"{order_id[-6:].upper()}.pdf" in response.headers["content-disposition"]
        assert len(fakes["storage"].uploads) == 1
        filename = fakes["storage"].uploads[0][0]
        assert OrderRepo(db).get_order(order_id).document_url == f"https://files.example.com/{filename}"

    def test_cancelled_order_refused(self, client, fakes):
        order_id = create_order(client)
        client.post(f"/orders/{order_id}/cancel", headers=ADMIN)

        response = client.post(f"/orders/{order_id}/invoice", headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "invoice_not_allowed"
        assert fakes["render"].payloads == []

    def test_missing_order(self, client):
        assert client.post("/orders/missing/invoice", headers=ADMIN).status_code == 404

    def test_renderer_down_is_service_unavailable(self, client, fakes):
        import requests

        fakes["render"].error = requests.ConnectionError("renderer down")
        order_id = create_order(client)

        response = client.post(f"/orders/{order_id}/invoice", headers=CUSTOMER)
        assert response.status_code == 503
        assert response.headers["retry-after"] == "5"


class TestCartAndCheckout:
    def test_cart_roundtrip_and_checkout(self, client, db):
        client.put("/store-settings/delivery-fee", json={"delivery_fee": "7.50"}, headers=ADMIN)

        client.post("/carts/me/items", json={"product_id": "prod-a", "quantity": 1}, headers=CUSTOMER)
        cart = client.post(
            "/carts/me/items", json={"product_id": "prod-a", "quantity": 1}, headers=CUSTOMER
        ).json()
        assert cart["items"][0]["quantity"] == 2
        assert cart["total"] == "47.50"

        response = client.post("/orders/checkout", json={}, headers=CUSTOMER)
        assert response.status_code == 201
        order = client.get(f"/orders/{response.json()['order_id']}", headers=CUSTOMER).json()

        assert order["total_amount"] == "47.50"
        assert order["delivery_fee"] == "7.50"
        assert client.get("/carts/me", headers=CUSTOMER).json()["items"] == []

    def test_checkout_empty_cart(self, client):
        response = client.post("/orders/checkout", json={}, headers=CUSTOMER)
        assert response.status_code == 400
        assert response.json()["detail"]["error"] == "empty_cart"

    def test_remove_item(self, client):
        client.post("/carts/me/items", json={"product_id": "prod-b", "quantity": 1}, headers=CUSTOMER)
        cart = client.delete("/carts/me/items/prod-b", headers=CUSTOMER).json()
        assert cart["items"] == []

    def test_delivery_fee_update_requires_admin(self, client):
        response = client.put("/store-settings/delivery-fee", json={"delivery_fee": "1.00"}, headers=CUSTOMER)
        assert response.status_code == 403
