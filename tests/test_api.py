"""Tests for the FastAPI surface and its error mapping."""

from decimal import Decimal

import pytest


def session_headers(session_id="browser-1"):
    return {"X-Session-Id": session_id}


def checkout_body(session_id="browser-1", email="jane@example.com"):
    return {
        "session_id": session_id,
        "customer_name": "Jane Doe",
        "customer_email": email,
        "customer_phone": "555-0100",
        "shipping_address": "742 Evergreen Terrace",
        "shipping_city": "Springfield",
        "shipping_zip": "49007",
    }


class TestCartEndpoints:
    def test_get_empty_cart(self, client):
        response = client.get("/api/v1/cart/", headers=session_headers())

        assert response.status_code == 200
        data = response.json()
        assert data["items"] == []
        assert data["total_items"] == 0
        assert Decimal(data["total_amount"]) == 0

    def test_missing_session_header(self, client):
        response = client.get("/api/v1/cart/")

        assert response.status_code == 422

    def test_add_and_remove(self, client, make_product):
        product_id = make_product(name="Mug", price="10.00", stock=5)

        response = client.post(
            "/api/v1/cart/items", json={"product_id": product_id, "quantity": 2}, headers=session_headers()
        )
        assert response.status_code == 200
        data = response.json()
        assert data["items"][0]["product_name"] == "Mug"
        assert Decimal(data["total_amount"]) == Decimal("20.00")

        response = client.delete(f"/api/v1/cart/items/{product_id}", headers=session_headers())
        assert response.status_code == 200
        assert response.json()["items"] == []

    def test_clear(self, client, make_product):
        product_id = make_product()
        client.post("/api/v1/cart/items", json={"product_id": product_id, "quantity": 1}, headers=session_headers())

        assert client.delete("/api/v1/cart/", headers=session_headers()).status_code == 204
        assert client.delete("/api/v1/cart/", headers=session_headers()).status_code == 204
        assert client.get("/api/v1/cart/", headers=session_headers()).json()["items"] == []

    @pytest.mark.parametrize(
        "body,status,kind",
        [
            ({"product_id": 999, "quantity": 1}, 404, "not_found"),
            ({"product_id": None, "quantity": 0}, 400, "business_rule"),
            ({"product_id": None, "quantity": 50}, 400, "business_rule"),
        ],
    )
    def test_add_errors(self, client, make_product, body, status, kind):
        product_id = make_product(stock=5)
        if body["product_id"] is None:
            body = dict(body, product_id=product_id)

        response = client.post("/api/v1/cart/items", json=body, headers=session_headers())

        assert response.status_code == status
        assert response.json()["kind"] == kind

    def test_remove_missing_line(self, client):
        response = client.delete("/api/v1/cart/items/5", headers=session_headers())

        assert response.status_code == 404


class TestCheckoutEndpoint:
    def test_checkout(self, client, make_product):
        product_id = make_product(price="10.00", stock=5)
        client.post("/api/v1/cart/items", json={"product_id": product_id, "quantity": 2}, headers=session_headers())

        response = client.post("/api/v1/orders/", json=checkout_body())

        assert response.status_code == 201
        data = response.json()
        assert data["status"] == "PAID"
        assert Decimal(data["total_amount"]) == Decimal("20.00")
        assert Decimal(data["items"][0]["subtotal"]) == Decimal("20.00")

        fetched = client.get(f"/api/v1/orders/{data['id']}")
        assert fetched.status_code == 200
        assert fetched.json()["id"] == data["id"]

        product = client.get(f"/api/v1/products/{product_id}").json()
        assert product["stock"] == 3

    def test_invalid_email_is_422(self, client, make_product):
        product_id = make_product(stock=5)
        client.post("/api/v1/cart/items", json={"product_id": product_id, "quantity": 1}, headers=session_headers())

        response = client.post("/api/v1/orders/", json=checkout_body(email="not-an-email"))

        assert response.status_code == 422
        assert response.json()["kind"] == "validation"

    def test_insufficient_stock_is_400(self, client, make_product):
        product_id = make_product(stock=1)
        client.post("/api/v1/cart/items", json={"product_id": product_id, "quantity": 1}, headers=session_headers())
        client.patch(f"/api/v1/admin/products/{product_id}", json={"stock": 0})

        response = client.post("/api/v1/orders/", json=checkout_body())

        assert response.status_code == 400
        assert "Insufficient stock" in response.json()["detail"]

    def test_missing_cart_is_404(self, client):
        response = client.post("/api/v1/orders/", json=checkout_body("nobody"))

        assert response.status_code == 404

    def test_missing_order_is_404(self, client):
        assert client.get("/api/v1/orders/77").status_code == 404


class TestAdminEndpoints:
    @pytest.fixture
    def placed_orders(self, client, make_product):
        product_id = make_product(stock=10)
        for n in range(3):
            client.post(
                "/api/v1/cart/items", json={"product_id": product_id, "quantity": 1}, headers=session_headers(f"s{n}")
            )
            client.post("/api/v1/orders/", json=checkout_body(f"s{n}"))

    def test_paged_listing(self, client, placed_orders):
        response = client.get("/api/v1/admin/orders", params={"page": 1, "size": 2})

        assert response.status_code == 200
        data = response.json()
        assert data["total"] == 3
        assert len(data["items"]) == 2
        assert data["has_next"] is True

    def test_page_size_limit(self, client):
        assert client.get("/api/v1/admin/orders", params={"size": 1000}).status_code == 422

    def test_filter_by_status(self, client, placed_orders):
        paid = client.get("/api/v1/admin/orders/status", params={"status": "PAID"}).json()
        cancelled = client.get("/api/v1/admin/orders/status", params={"status": "CANCELLED"}).json()

        assert paid["total"] == 3
        assert cancelled["total"] == 0

    def test_report(self, client, placed_orders):
        response = client.get(
            "/api/v1/admin/orders/report",
            params={"start": "2000-01-01T00:00:00", "end": "2999-12-31T23:59:59"},
        )

        assert response.status_code == 200
        assert response.json()["total"] == 3

    def test_report_with_inverted_range(self, client):
        response = client.get(
            "/api/v1/admin/orders/report",
            params={"start": "2025-12-01T00:00:00", "end": "2025-11-01T00:00:00"},
        )

        assert response.status_code == 422

    def test_product_lifecycle(self, client):
        created = client.post("/api/v1/admin/products", json={"name": "Teapot", "price": "30.00", "stock": 4})
        assert created.status_code == 201
        product_id = created.json()["id"]

        duplicate = client.post("/api/v1/admin/products", json={"name": "teapot", "price": "1.00"})
        assert duplicate.status_code == 400

        assert client.get("/api/v1/products/", params={"q": "tea"}).json()[0]["id"] == product_id

        assert client.delete(f"/api/v1/admin/products/{product_id}").status_code == 204
        assert client.get(f"/api/v1/products/{product_id}").status_code == 404


class TestPaymentWebhook:
    def test_webhook_is_idempotent(self, client, make_product):
        product_id = make_product(stock=5)
        client.post("/api/v1/cart/items", json={"product_id": product_id, "quantity": 1}, headers=session_headers())
        order_id = client.post("/api/v1/orders/", json=checkout_body()).json()["id"]

        first = client.post(
            "/api/v1/payment/webhook",
            json={"data": {"order_id": order_id, "status": "approved"}},
            headers={"X-Correlation-Id": "abc"},
        )
        second = client.post(
            "/api/v1/payment/webhook",
            json={"data": {"order_id": order_id, "status": "approved"}},
            headers={"X-Correlation-Id": "abc"},
        )

        assert first.status_code == 200
        assert first.json()["duplicate"] is False
        assert second.json()["duplicate"] is True

    def test_webhook_without_correlation_id(self, client):
        response = client.post("/api/v1/payment/webhook", json={"order_id": 1, "status": "approved"})

        assert response.status_code == 422
