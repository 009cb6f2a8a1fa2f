import pytest

from storefront.data.models import OrderModel
from storefront.services.payment_service import DECLINED_TEST_CARD

PAYMENTS = "/api/v1/payments"


@pytest.fixture
def order(client, user, make_product, add_to_cart, address):
    add_to_cart(user, make_product(price="25.00"), 2)
    resp = client.post(
        "/api/v1/orders",
        params={"user_id": user.id},
        json={"shipping_address": address, "billing_address": address, "payment_method": "credit_card"},
    )
    return resp.json()["data"]


def _pay(client, user, order_id, card="4242424242424242"):
    return client.post(
        f"{PAYMENTS}/process",
        params={"user_id": user.id},
        json={
            "order_id": order_id,
            "payment_details": {"card_number": card, "expiry_month": "12", "expiry_year": "2030", "cvv": "123"},
        },
    )


def test_payment_methods(client):
    resp = client.get(f"{PAYMENTS}/methods")

    assert resp.status_code == 200
    ids = [m["id"] for m in resp.json()["data"]["methods"]]
    assert ids == ["credit_card", "paypal", "bank_transfer"]


def test_successful_payment(client, user, order, notifier):
    resp = _pay(client, user, order["id"])

    assert resp.status_code == 200
    data = resp.json()["data"]
    assert data["success"] is True
    assert data["transaction_id"].startswith("TXN-")
    assert data["order"]["payment_status"] == "completed"
    assert data["order"]["status"] == "processing"
    assert notifier.events[-1] == (user.id, order["id"], "order_paid", "processing")


def test_declined_card(client, db, user, order):
    resp = _pay(client, user, order["id"], card=DECLINED_TEST_CARD)

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "PAYMENT_FAILED"
    db.expire_all()
    stored = db.get(OrderModel, order["id"])
    assert stored.payment_status == "failed"
    assert stored.status == "pending"


def test_retry_after_declined_card(client, user, order):
    _pay(client, user, order["id"], card=DECLINED_TEST_CARD)

    resp = _pay(client, user, order["id"])

    assert resp.status_code == 200
    assert resp.json()["data"]["order"]["payment_status"] == "completed"


def test_payment_without_details(client, user, order):
    resp = client.post(f"{PAYMENTS}/process", params={"user_id": user.id}, json={"order_id": order["id"]})

    assert resp.status_code == 200


def test_already_paid(client, user, order):
    _pay(client, user, order["id"])

    resp = _pay(client, user, order["id"])

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ALREADY_PAID"


def test_cancelled_order_cannot_be_paid(client, user, order):
    client.put(f"/api/v1/orders/{order['id']}/cancel", params={"user_id": user.id})

    resp = _pay(client, user, order["id"])

    assert resp.status_code == 400
    assert resp.json()["error"]["code"] == "ORDER_CANCELLED"


def test_cannot_pay_someone_elses_order(client, make_user, order):
    stranger = make_user()

    resp = _pay(client, stranger, order["id"])

    assert resp.status_code == 404


def test_missing_order(client, user):
    resp = _pay(client, user, 999)

    assert resp.status_code == 404
    assert resp.json()["error"]["code"] == "NOT_FOUND"
