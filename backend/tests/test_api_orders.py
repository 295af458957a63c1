"""
API tests for /orders and /orders/me.
"""

from tests.conftest import bearer, create_product, login, register


def test_place_order_rounds_total_once(client, admin_headers, user_headers):
    a = create_product(client, admin_headers, name="A", price=10.00)
    b = create_product(client, admin_headers, name="B", price=5.005)

    response = client.post(
        "/orders",
        json={"items": [{"productId": a["id"], "qty": 2}, {"productId": b["id"], "qty": 1}]},
        headers=user_headers,
    )
    assert response.status_code == 201
    order = response.json()
    assert order["total"] == 25.01
    assert order["items"] == [{"productId": a["id"], "qty": 2}, {"productId": b["id"], "qty": 1}]
    assert set(order) == {"id", "userId", "items", "total", "createdAt"}

    me = client.get("/auth/me", headers=user_headers).json()
    assert order["userId"] == me["id"]


def test_invalid_product_records_nothing(client, admin_headers, user_headers):
    a = create_product(client, admin_headers, name="A")

    response = client.post(
        "/orders",
        json={"items": [{"productId": a["id"], "qty": 1}, {"productId": "ghost", "qty": 3}]},
        headers=user_headers,
    )
    assert response.status_code == 400
    assert response.json() == {"error": {"code": "INVALID_PRODUCT", "message": "Invalid productId: ghost"}}
    assert client.get("/orders/me", headers=user_headers).json() == []
    assert len(client.app.state.orders) == 0


def test_order_requires_token(client):
    response = client.post("/orders", json={"items": [{"productId": "p", "qty": 1}]})
    assert response.status_code == 401
    assert response.json()["error"]["code"] == "AUTH_MISSING"
    assert client.get("/orders/me").status_code == 401


def test_order_validation(client, user_headers):
    response = client.post("/orders", json={"items": [{"productId": "p", "qty": 0}]}, headers=user_headers)
    assert response.status_code == 422
    assert response.json()["error"]["details"][0]["path"] == "items.0.qty"

    response = client.post("/orders", json={"items": []}, headers=user_headers)
    assert response.status_code == 422


def test_order_total_beyond_float_range_is_a_validation_error(client, admin_headers, user_headers):
    huge = create_product(client, admin_headers, name="Huge", price=1e308)

    response = client.post(
        "/orders",
        json={"items": [{"productId": huge["id"], "qty": 10}]},
        headers=user_headers,
    )
    assert response.status_code == 422
    assert response.json() == {
        "error": {
            "code": "VALIDATION_ERROR",
            "message": "Request validation failed",
            "details": [{"path": "items", "message": "Order total is too large"}],
        }
    }
    assert client.get("/orders/me", headers=user_headers).json() == []


def test_order_total_beyond_28_digits_is_priced(client, admin_headers, user_headers):
    big = create_product(client, admin_headers, name="Big", price=1e30)

    response = client.post(
        "/orders",
        json={"items": [{"productId": big["id"], "qty": 7}]},
        headers=user_headers,
    )
    assert response.status_code == 201
    assert response.json()["total"] == 7e30


def test_integral_float_qty_is_accepted(client, admin_headers, user_headers):
    product = create_product(client, admin_headers, price=2.5)

    response = client.post(
        "/orders",
        json={"items": [{"productId": product["id"], "qty": 2.0}]},
        headers=user_headers,
    )
    assert response.status_code == 201
    assert response.json()["items"][0]["qty"] == 2
    assert response.json()["total"] == 5.0


def test_admin_can_place_orders_too(client, admin_headers):
    a = create_product(client, admin_headers, price=3.0)
    response = client.post("/orders", json={"items": [{"productId": a["id"], "qty": 1}]}, headers=admin_headers)
    assert response.status_code == 201


def test_orders_me_is_isolated_per_user(client, admin_headers):
    product = create_product(client, admin_headers, price=1.25)
    register(client, "alice@example.com")
    register(client, "bob@example.com")
    headers = {
        "alice": bearer(login(client, "alice@example.com")),
        "bob": bearer(login(client, "bob@example.com")),
    }

    placed = {"alice": [], "bob": []}
    for qty, who in enumerate(["alice", "bob", "bob", "alice", "bob"], start=1):
        response = client.post(
            "/orders",
            json={"items": [{"productId": product["id"], "qty": qty}]},
            headers=headers[who],
        )
        assert response.status_code == 201
        placed[who].append(response.json()["id"])

    for who in ("alice", "bob"):
        mine = client.get("/orders/me", headers=headers[who]).json()
        assert [o["id"] for o in mine] == placed[who]
        assert len({o["userId"] for o in mine}) == 1
