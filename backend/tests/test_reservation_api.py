"""HTTP-контракт бронирования и оформления корзины."""
import pytest

from conftest import create_owner_offer
from foodable.config import settings


def _offer_qty(client, offer_id: str) -> int:
    r = client.get(f"/offers/{offer_id}")
    assert r.status_code == 200, r.text
    return r.json()["qty"]


def test_reserve_returns_order_id(client, customer_headers):
    offer_id = create_owner_offer(client, qty=2)
    r = client.post(f"/offers/{offer_id}/reserve", headers=customer_headers)
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["ok"] is True
    assert data["orderId"]
    assert _offer_qty(client, offer_id) == 1


def test_reserve_until_sold_out(client, customer_headers):
    offer_id = create_owner_offer(client, qty=3)
    order_ids = []
    for expected in (2, 1, 0):
        r = client.post(f"/offers/{offer_id}/reserve", headers=customer_headers)
        assert r.status_code == 200, r.text
        order_ids.append(r.json()["orderId"])
        assert _offer_qty(client, offer_id) == expected
    assert len(set(order_ids)) == 3

    r = client.post(f"/offers/{offer_id}/reserve", headers=customer_headers)
    assert r.status_code == 409
    data = r.json()
    assert data["ok"] is False
    assert data["code"] == "sold_out"
    assert "orderId" not in data
    assert _offer_qty(client, offer_id) == 0


def test_reserve_unknown_offer_is_404(client, customer_headers):
    r = client.post("/offers/does-not-exist/reserve", headers=customer_headers)
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"
    assert r.json()["ok"] is False


def test_reserve_requires_session_by_default(client):
    offer_id = create_owner_offer(client, qty=1)
    client.cookies.clear()
    r = client.post(f"/offers/{offer_id}/reserve")
    assert r.status_code == 401
    assert r.json()["code"] == "unauthenticated"
    assert _offer_qty(client, offer_id) == 1


def test_anonymous_reservation_when_policy_allows(client, monkeypatch):
    monkeypatch.setattr(settings, "reservation_requires_auth", False)
    offer_id = create_owner_offer(client, qty=1)
    client.cookies.clear()
    r = client.post(f"/offers/{offer_id}/reserve")
    assert r.status_code == 200, r.text
    assert r.json()["ok"] is True


def test_session_cookie_is_accepted(client):
    offer_id = create_owner_offer(client, qty=1)
    r = client.post(
        "/auth/register",
        json={"email": "cookie-user@test.local", "password": "secret123", "name": "Cookie"},
    )
    assert r.status_code == 201, r.text
    # Без заголовка: сессия берётся из cookie, выставленной при регистрации
    r = client.post(f"/offers/{offer_id}/reserve")
    assert r.status_code == 200, r.text
    client.cookies.clear()


def test_checkout_returns_flat_order_ids(client, customer_headers):
    a = create_owner_offer(client, qty=5)
    b = create_owner_offer(client, qty=2)
    r = client.post(
        "/cart/checkout",
        json={"items": [{"offerId": a, "qty": 1}, {"offerId": b, "qty": 2}, {"offerId": a, "qty": 2}]},
        headers=customer_headers,
    )
    assert r.status_code == 200, r.text
    data = r.json()
    assert data["ok"] is True
    assert len(data["orderIds"]) == 5
    assert _offer_qty(client, a) == 2
    assert _offer_qty(client, b) == 0


def test_checkout_shortage_rolls_back_whole_cart(client, customer_headers):
    a = create_owner_offer(client, qty=4)
    b = create_owner_offer(client, qty=3)
    r = client.post(
        "/cart/checkout",
        json={"items": [{"offerId": a, "qty": 2}, {"offerId": b, "qty": 5}]},
        headers=customer_headers,
    )
    assert r.status_code == 409
    data = r.json()
    assert data["ok"] is False
    assert data["code"] == "insufficient_qty"
    assert data["message"]
    assert "orderIds" not in data
    assert _offer_qty(client, a) == 4
    assert _offer_qty(client, b) == 3


def test_checkout_unknown_offer_is_404(client, customer_headers):
    a = create_owner_offer(client, qty=4)
    r = client.post(
        "/cart/checkout",
        json={"items": [{"offerId": a, "qty": 1}, {"offerId": "missing", "qty": 1}]},
        headers=customer_headers,
    )
    assert r.status_code == 404
    assert r.json()["code"] == "not_found"
    assert _offer_qty(client, a) == 4


def test_checkout_store_failure_is_500_and_rolls_back(client, customer_headers, owner_headers, fail_ledger_on):
    a = create_owner_offer(client, qty=4, owner_headers=owner_headers)
    b = create_owner_offer(client, qty=4, owner_headers=owner_headers)
    fail_ledger_on(3)
    r = client.post(
        "/cart/checkout",
        json={"items": [{"offerId": a, "qty": 2}, {"offerId": b, "qty": 2}]},
        headers=customer_headers,
    )
    assert r.status_code == 500
    data = r.json()
    assert data["ok"] is False
    assert data["code"] == "internal_error"
    assert "orderIds" not in data
    assert _offer_qty(client, a) == 4
    assert _offer_qty(client, b) == 4
    r = client.get("/me/orders", headers=owner_headers)
    assert r.status_code == 200
    assert r.json() == []


def test_reserve_store_failure_is_500(client, customer_headers, fail_ledger_on):
    offer_id = create_owner_offer(client, qty=1)
    fail_ledger_on(1)
    r = client.post(f"/offers/{offer_id}/reserve", headers=customer_headers)
    assert r.status_code == 500
    assert r.json()["ok"] is False
    assert r.json()["code"] == "internal_error"
    assert _offer_qty(client, offer_id) == 1


@pytest.mark.parametrize("body", [{}, {"items": []}, {"items": [{"qty": 3}]}])
def test_checkout_without_items_is_bad_request(client, customer_headers, body):
    r = client.post("/cart/checkout", json=body, headers=customer_headers)
    assert r.status_code == 400
    assert r.json()["ok"] is False
    assert r.json()["code"] == "bad_request"


def test_checkout_without_body_is_bad_request(client, customer_headers):
    r = client.post("/cart/checkout", headers=customer_headers)
    assert r.status_code == 400
    assert r.json()["code"] == "bad_request"


def test_checkout_with_malformed_qty_is_bad_request(client, customer_headers):
    a = create_owner_offer(client, qty=4)
    r = client.post(
        "/cart/checkout",
        json={"items": [{"offerId": a, "qty": "lots"}]},
        headers=customer_headers,
    )
    assert r.status_code == 400
    assert r.json()["code"] == "bad_request"
    assert _offer_qty(client, a) == 4


def test_checkout_clamps_zero_quantity_to_one(client, customer_headers):
    a = create_owner_offer(client, qty=4)
    r = client.post(
        "/cart/checkout",
        json={"items": [{"offerId": a, "qty": 0}]},
        headers=customer_headers,
    )
    assert r.status_code == 200, r.text
    assert len(r.json()["orderIds"]) == 1
    assert _offer_qty(client, a) == 3
