"""Cart, checkout, order lifecycle and payments over HTTP."""

from tests.utils import add_book_to_cart, deliver_order, move_order, place_order

VALID_CARD = "4111 1111 1111 1111"


class TestCart:
    def test_requires_login(self, client):
        assert client.get("/api/cart").status_code == 401

    def test_add_update_remove(self, client, customer_headers, book, combo):
        add_book_to_cart(client, customer_headers, book.id, quantity=2)
        response = client.post(
            "/api/cart/items",
            json={"type": "combo", "combo_id": combo.id},
            headers=customer_headers,
        )
        cart = response.json()
        assert cart["total_items"] == 3
        assert cart["total_price"] == 2 * 120000 + 180000

        book_line = next(item for item in cart["items"] if item["type"] == "book")
        updated = client.put(
            f"/api/cart/items/{book_line['id']}", json={"quantity": 1}, headers=customer_headers
        ).json()
        assert updated["total_price"] == 300000

        removed = client.delete(
            f"/api/cart/items/{book_line['id']}", headers=customer_headers
        ).json()
        assert [item["type"] for item in removed["items"]] == ["combo"]

        cleared = client.delete("/api/cart/clear", headers=customer_headers).json()
        assert cleared["items"] == []

    def test_stock_limit(self, client, customer_headers, second_book):
        response = client.post(
            "/api/cart/items",
            json={"type": "book", "book_id": second_book.id, "quantity": 4},
            headers=customer_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Only 3 copies available"

    def test_item_needs_matching_target(self, client, customer_headers, book):
        response = client.post(
            "/api/cart/items", json={"type": "combo", "book_id": book.id}, headers=customer_headers
        )
        assert response.status_code == 422

    def test_unknown_item(self, client, customer_headers):
        response = client.delete("/api/cart/items/missing", headers=customer_headers)
        assert response.status_code == 404
        assert response.json()["detail"] == "Item not found in cart"


class TestCheckout:
    def test_cod_order(self, client, customer_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        assert order["order_number"].startswith("ORD-")
        assert order["status"] == "pending"
        assert order["subtotal"] == 120000
        assert order["shipping_fee"] == 25000
        assert order["total_price"] == 145000
        assert order["payment_status"] == "pending"
        assert order["shipping_address"]["detail_address"] == "12 Lê Lợi"
        assert client.get("/api/cart", headers=customer_headers).json()["items"] == []

    def test_inline_address(self, client, customer_headers, customer, book):
        add_book_to_cart(client, customer_headers, book.id, quantity=3)
        response = client.post(
            "/api/orders",
            json={
                "shipping_address": {
                    "recipient_name": "Pham Thi Dung",
                    "phone": "0987654321",
                    "province": "Đà Nẵng",
                    "district": "Hải Châu",
                    "ward": "Thạch Thang",
                    "detail_address": "5 Bạch Đằng",
                }
            },
            headers=customer_headers,
        )
        assert response.status_code == 201
        assert response.json()["shipping_fee"] == 0

    def test_empty_cart(self, client, customer_headers, address):
        response = client.post(
            "/api/orders", json={"address_id": address.id}, headers=customer_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Cart is empty"

    def test_card_payment_charged_at_checkout(self, client, customer_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(
            client, customer_headers, address.id, "credit_card", card_number=VALID_CARD
        )
        assert order["payment_status"] == "paid"

        payment = client.get(f"/api/payments/{order['id']}", headers=customer_headers).json()
        assert payment["card_number"] == "**** **** **** 1111"
        assert payment["transaction_id"].startswith("TXN-")


class TestOrders:
    def test_list_and_filter(self, client, customer_headers, admin_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        first = place_order(client, customer_headers, address.id)
        add_book_to_cart(client, customer_headers, book.id)
        place_order(client, customer_headers, address.id)
        move_order(client, admin_headers, first["id"], "confirmed")

        mine = client.get("/api/orders", headers=customer_headers).json()
        assert mine["pagination"]["total"] == 2
        confirmed = client.get(
            "/api/orders", params={"status": "confirmed"}, headers=customer_headers
        ).json()
        assert [item["id"] for item in confirmed["items"]] == [first["id"]]

    def test_other_customer_forbidden(
        self, client, customer_headers, other_headers, address, book
    ):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        response = client.get(f"/api/orders/{order['id']}", headers=other_headers)
        assert response.status_code == 403

    def test_customer_cancel(self, client, customer_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        response = client.put(
            f"/api/orders/{order['id']}/cancel",
            json={"reason": "Changed my mind"},
            headers=customer_headers,
        )
        assert response.json()["status"] == "cancelled"
        assert response.json()["cancel_reason"] == "Changed my mind"

    def test_cannot_cancel_once_shipping(
        self, client, customer_headers, admin_headers, address, book
    ):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)
        move_order(client, admin_headers, order["id"], "confirmed", "preparing", "shipping")

        response = client.put(
            f"/api/orders/{order['id']}/cancel", json={}, headers=customer_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Cannot cancel order at this stage"

    def test_delivery_settles_cod_payment(
        self, client, customer_headers, admin_headers, address, book
    ):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        delivered = deliver_order(client, admin_headers, order["id"])
        assert delivered["status"] == "delivered"
        assert delivered["payment_status"] == "paid"

        items = client.get(
            f"/api/orders/{order['id']}/reviewable-items", headers=customer_headers
        ).json()
        assert [(item["book_id"], item["is_reviewed"]) for item in items] == [(book.id, False)]

    def test_return_flow(self, client, customer_headers, admin_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)
        deliver_order(client, admin_headers, order["id"])

        too_short = client.put(
            f"/api/orders/{order['id']}/request-return",
            json={"reason": "bad"},
            headers=customer_headers,
        )
        assert too_short.status_code == 400

        requested = client.put(
            f"/api/orders/{order['id']}/request-return",
            json={"reason": "Pages are missing from chapter 3"},
            headers=customer_headers,
        )
        assert requested.json()["return_requested_at"] is not None

        returned = client.put(
            f"/api/admin/orders/{order['id']}/confirm-return", headers=admin_headers
        ).json()
        assert returned["status"] == "returned"
        assert returned["payment_status"] == "refunded"


class TestAdminOrders:
    def test_invalid_transition(self, client, customer_headers, admin_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        response = client.put(
            f"/api/admin/orders/{order['id']}/status",
            json={"status": "delivered"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert response.json()["detail"] == (
            "Cannot change order status from pending to delivered"
        )

    def test_cancel_needs_reason(self, client, customer_headers, admin_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        response = client.put(
            f"/api/admin/orders/{order['id']}/status",
            json={"status": "cancelled", "reason": "stock"},
            headers=admin_headers,
        )
        assert response.status_code == 400
        assert "at least 10 characters" in response.json()["detail"]

    def test_search_by_customer(
        self, client, customer, customer_headers, admin_headers, address, book
    ):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        body = client.get(
            "/api/admin/orders", params={"customer_id": customer.id}, headers=admin_headers
        ).json()
        assert [item["id"] for item in body["items"]] == [order["id"]]
        assert body["items"][0]["customer"]["email"] == "reader@bookstore.test"


class TestPayments:
    def test_declined_card_then_retry(self, client, customer_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(
            client, customer_headers, address.id, "credit_card", card_number="4111111111111112"
        )
        assert order["payment_status"] == "failed"

        declined = client.post(
            f"/api/payments/{order['id']}/process",
            json={"card_number": "1234"},
            headers=customer_headers,
        )
        assert declined.status_code == 400
        assert declined.json()["detail"] == "Payment failed"

        paid = client.post(
            f"/api/payments/{order['id']}/process",
            json={"card_number": VALID_CARD},
            headers=customer_headers,
        )
        assert paid.json()["status"] == "paid"
        order_now = client.get(f"/api/orders/{order['id']}", headers=customer_headers).json()
        assert order_now["status"] == "confirmed"

        again = client.post(
            f"/api/payments/{order['id']}/process", json={}, headers=customer_headers
        )
        assert again.json()["detail"] == "Order has already been paid"

    def test_webhook_settles_by_order(self, client, customer_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        response = client.post(
            "/api/payments/webhook", json={"order_id": order["id"], "status": "paid"}
        )
        assert response.json()["status"] == "paid"
        assert response.json()["transaction_id"].startswith("TXN-")

        failed = client.post(
            "/api/payments/webhook",
            json={"transaction_id": response.json()["transaction_id"], "status": "failed"},
        )
        assert failed.status_code == 400
        assert failed.json()["detail"] == "Payment has already been settled"

    def test_webhook_needs_identifier(self, client):
        response = client.post("/api/payments/webhook", json={"status": "paid"})
        assert response.status_code == 422

    def test_refund(self, client, customer_headers, admin_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id, "momo")

        customer_try = client.post(
            f"/api/payments/{order['id']}/refund", json={}, headers=customer_headers
        )
        assert customer_try.status_code == 403

        refunded = client.post(
            f"/api/payments/{order['id']}/refund",
            json={"reason": "Goodwill"},
            headers=admin_headers,
        )
        assert refunded.json()["status"] == "refunded"
        assert refunded.json()["refunded_at"] is not None

    def test_refund_requires_paid(self, client, customer_headers, admin_headers, address, book):
        add_book_to_cart(client, customer_headers, book.id)
        order = place_order(client, customer_headers, address.id)

        response = client.post(
            f"/api/payments/{order['id']}/refund", json={}, headers=admin_headers
        )
        assert response.status_code == 400
        assert response.json()["detail"] == "Only paid payments can be refunded"
