from decimal import Decimal

from storefront.data.models import OrderModel, PaymentModel, VariantModel
from storefront.services.payment_service import expected_signature, to_paise

from conftest import auth, checkout, make_user

SECRET = "rzp_test_secret"


def gateway_order(client, user, order_id, amount="48.98"):
    return client.post(
        "/api/payments/create-order",
        json={"amount": amount, "currency": "INR", "order_id": order_id},
        headers=auth(user),
    )


def verify(client, user, order_id, gateway_order_id, payment_id="pay_abc", signature=None):
    signature = signature or expected_signature(gateway_order_id, payment_id, SECRET)
    return client.post(
        "/api/payments/verify",
        json={
            "razorpay_order_id": gateway_order_id,
            "razorpay_payment_id": payment_id,
            "razorpay_signature": signature,
            "order_id": order_id,
        },
        headers=auth(user),
    )


def test_to_paise_rounds_half_up():
    assert to_paise(Decimal("48.98")) == 4898
    assert to_paise(Decimal("0.015")) == 2


def test_gateway_order_amount_bounds(client, db, user, product):
    order = checkout(client, db, user, product, method="UPI").json()

    assert gateway_order(client, user, order["id"], amount="0.50").status_code == 400
    assert gateway_order(client, user, order["id"], amount="1000000.01").status_code == 400

    resp = gateway_order(client, user, order["id"])
    assert resp.status_code == 200
    body = resp.json()
    assert body["key_id"] == "rzp_test_key"
    assert body["order"]["amount"] == 4898

    payment = db.query(PaymentModel).one()
    assert payment.status == "pending"
    assert payment.gateway_order_id == body["order"]["id"]
    assert payment.order_id == order["id"]


def test_verify_payment_marks_order_paid(client, db, user, product):
    order = checkout(client, db, user, product, method="UPI").json()
    gw = gateway_order(client, user, order["id"]).json()["order"]

    resp = verify(client, user, order["id"], gw["id"])

    assert resp.status_code == 200
    assert resp.json()["order"]["payment_status"] == "Paid"
    assert resp.json()["order"]["order_status"] == "Processing"

    db.expire_all()
    payment = db.query(PaymentModel).one()
    assert payment.status == "completed"
    assert payment.gateway_payment_id == "pay_abc"
    assert payment.success_at is not None

    # ponowna weryfikacja
    assert verify(client, user, order["id"], gw["id"]).status_code == 400


def test_bad_signature_is_rejected(client, db, user, product):
    order = checkout(client, db, user, product, method="Card").json()
    gw = gateway_order(client, user, order["id"]).json()["order"]

    resp = verify(client, user, order["id"], gw["id"], signature="0" * 64)

    assert resp.status_code == 400
    db.expire_all()
    assert db.get(OrderModel, order["id"]).payment_status == "Pending"
    assert db.query(PaymentModel).one().attempts == 1


def test_cannot_pay_for_someone_elses_order(client, db, user, product):
    order = checkout(client, db, user, product, method="UPI").json()
    other = make_user(db, email="ola@example.com", phone="+48500100300")

    assert gateway_order(client, other, order["id"]).status_code == 403
    assert verify(client, other, order["id"], "order_x").status_code == 403


def test_payment_failure_cancels_and_restores_stock(client, db, user, product):
    variant_id = product.variants[0].id
    order = checkout(client, db, user, product, method="UPI").json()
    gateway_order(client, user, order["id"])

    resp = client.post(
        "/api/payments/failure",
        json={"order_id": order["id"], "error_reason": "card declined"},
        headers=auth(user),
    )

    assert resp.status_code == 200
    assert resp.json()["order"]["payment_status"] == "Failed"
    assert resp.json()["order"]["order_status"] == "Cancelled"
    db.expire_all()
    assert db.get(VariantModel, variant_id).quantity == 5
    payment = db.query(PaymentModel).one()
    assert payment.status == "failed"
    assert payment.error_reason == "card declined"


def test_failure_after_success_is_rejected(client, db, user, product):
    order = checkout(client, db, user, product, method="UPI").json()
    gw = gateway_order(client, user, order["id"]).json()["order"]
    verify(client, user, order["id"], gw["id"])

    resp = client.post("/api/payments/failure", json={"order_id": order["id"]}, headers=auth(user))
    assert resp.status_code == 400


def test_payment_status(client, db, user, product, fakes):
    order = checkout(client, db, user, product, method="UPI").json()
    gw = gateway_order(client, user, order["id"]).json()["order"]
    verify(client, user, order["id"], gw["id"], payment_id="pay_abc")

    assert client.get("/api/payments/abc", headers=auth(user)).status_code == 400
    assert client.get("/api/payments/pay_unknown", headers=auth(user)).status_code == 403
    # platnosc nasza, ale bramka jej nie zna
    assert client.get("/api/payments/pay_abc", headers=auth(user)).status_code == 404

    fakes["gateway"].payments["pay_abc"] = {
        "id": "pay_abc",
        "status": "captured",
        "amount": 4898,
        "currency": "INR",
        "method": "upi",
        "email": "secret@example.com",
    }
    resp = client.get("/api/payments/pay_abc", headers=auth(user))

    assert resp.status_code == 200
    assert resp.json()["status"] == "captured"
    assert "email" not in resp.json()

    other = make_user(db, email="ola@example.com", phone="+48500100300")
    assert client.get("/api/payments/pay_abc", headers=auth(other)).status_code == 403


def test_verify_after_failure_keeps_order_cancelled(client, db, user, product):
    variant_id = product.variants[0].id
    order = checkout(client, db, user, product, method="UPI").json()
    gw = gateway_order(client, user, order["id"]).json()["order"]
    client.post("/api/payments/failure", json={"order_id": order["id"]}, headers=auth(user))

    resp = verify(client, user, order["id"], gw["id"])

    assert resp.status_code == 400
    db.expire_all()
    stored = db.get(OrderModel, order["id"])
    assert stored.order_status == "Cancelled"
    assert stored.payment_status == "Failed"
    assert db.get(VariantModel, variant_id).quantity == 5


def test_cheap_gateway_order_cannot_pay_real_order(client, db, user, product):
    order = checkout(client, db, user, product, method="UPI").json()
    resp = client.post(
        "/api/payments/create-order",
        json={"amount": "1", "currency": "INR"},
        headers=auth(user),
    )
    cheap = resp.json()["order"]

    assert verify(client, user, order["id"], cheap["id"]).status_code == 400
    db.expire_all()
    assert db.get(OrderModel, order["id"]).payment_status == "Pending"
    assert db.query(PaymentModel).filter_by(gateway_order_id=cheap["id"]).one().status == "pending"


def test_gateway_order_is_bound_to_its_order(client, db, user, product):
    first = checkout(client, db, user, product, method="UPI").json()
    second = checkout(client, db, user, product, method="UPI").json()
    gw = gateway_order(client, user, first["id"]).json()["order"]

    assert verify(client, user, second["id"], gw["id"]).status_code == 400
    assert verify(client, user, first["id"], "order_unknown").status_code == 400
    db.expire_all()
    assert db.get(OrderModel, second["id"]).payment_status == "Pending"


def test_payment_status_with_partial_gateway_payload(client, db, user, product, fakes):
    order = checkout(client, db, user, product, method="UPI").json()
    gw = gateway_order(client, user, order["id"]).json()["order"]
    verify(client, user, order["id"], gw["id"], payment_id="pay_partial")
    fakes["gateway"].payments["pay_partial"] = {"id": "pay_partial", "method": "upi"}

    resp = client.get("/api/payments/pay_partial", headers=auth(user))

    assert resp.status_code == 200
    body = resp.json()
    assert body["id"] == "pay_partial"
    assert body["status"] is None
    assert body["amount"] is None
    assert body["method"] == "upi"
