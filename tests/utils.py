import time

from authlib.jose import jwt
from fastapi.testclient import TestClient

from src.bookstore.runtime.context import get_config

FULFILMENT_PATH = ("confirmed", "preparing", "shipping", "delivered")


def bearer(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


def signed_token(
    subject: str,
    role: str,
    *,
    secret: str | None = None,
    issuer: str | None = None,
    expires_in: int = 3600,
) -> str:
    """Hand-build an HS256 token, for claims the service itself never issues."""
    config = get_config().jwt
    now = int(time.time())
    payload = {
        "iss": issuer or config.issuer,
        "sub": subject,
        "role": role,
        "iat": now,
        "exp": now + expires_in,
    }
    token = jwt.encode({"alg": "HS256", "typ": "JWT"}, payload, secret or config.secret)
    return token.decode() if isinstance(token, bytes) else token


def add_book_to_cart(
    client: TestClient, headers: dict[str, str], book_id: str, quantity: int = 1
) -> dict:
    response = client.post(
        "/api/cart/items",
        json={"type": "book", "book_id": book_id, "quantity": quantity},
        headers=headers,
    )
    assert response.status_code == 200, response.text
    return response.json()


def place_order(
    client: TestClient,
    headers: dict[str, str],
    address_id: str,
    payment_method: str = "COD",
    **payment_details: str,
) -> dict:
    response = client.post(
        "/api/orders",
        json={"address_id": address_id, "payment_method": payment_method, **payment_details},
        headers=headers,
    )
    assert response.status_code == 201, response.text
    return response.json()


def move_order(
    client: TestClient, admin_headers: dict[str, str], order_id: str, *statuses: str
) -> dict:
    """Walk an order through the given statuses as an admin."""
    body: dict = {}
    for status in statuses:
        response = client.put(
            f"/api/admin/orders/{order_id}/status", json={"status": status}, headers=admin_headers
        )
        assert response.status_code == 200, response.text
        body = response.json()
    return body


def deliver_order(client: TestClient, admin_headers: dict[str, str], order_id: str) -> dict:
    return move_order(client, admin_headers, order_id, *FULFILMENT_PATH)
