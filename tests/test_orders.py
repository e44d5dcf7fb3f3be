import re
from datetime import timedelta
from decimal import Decimal

from storefront.data.models import CartModel, OrderModel, VariantModel
from storefront.utils.timeutil import utcnow

from conftest import auth, checkout, make_address, make_user


def fill_cart(client, user, product, quantity=2):
    variant = product.variants[0]
    resp = client.post(
        "/api/cart/add",
        json={"product_id": product.id, "variant_id": variant.id, "quantity": quantity},
        headers=auth(user),
    )
    assert resp.status_code == 200


def stock(db, variant_id):
    db.expire_all()
    return db.get(VariantModel, variant_id).quantity


def test_create_order_from_cart(client, db, user, product, fakes):
    variant_id = product.variants[0].id

    resp = checkout(client, db, user, product)

    assert resp.status_code == 201
    order = resp.json()
    assert re.fullmatch(r"ORD\d{4}0001", order["order_number"])
    assert order["order_status"] == "Processing"
    assert order["payment_status"] == "Pending"
    assert Decimal(order["total_amount"]) == Decimal("48.98")
    assert order["items"][0]["name"] == "Classic Tee"
    assert Decimal(order["items"][0]["price"]) == Decimal("19.99")

    assert stock(db, variant_id) == 3
    assert db.query(CartModel).filter_by(user_id=user.id).count() == 0
    assert ("order", user.id, order["id"]) in fakes["notifications"].sent
    assert fakes["locks"].released == [variant_id]
    assert fakes["locks"].held == set()


def test_online_payment_order_starts_pending(client, db, user, product):
    resp = checkout(client, db, user, product, method="UPI")
    assert resp.json()["order_status"] == "Pending"


def test_order_numbers_increase_within_month(client, db, user, product):
    first = checkout(client, db, user, product, quantity=1).json()
    fill_cart(client, user, product, 1)
    second = client.post(
        "/api/orders", json={"address_id": first["address_id"], "payment_method": "COD"}, headers=auth(user)
    ).json()

    assert first["order_number"].endswith("0001")
    assert second["order_number"].endswith("0002")


def test_empty_cart_cannot_be_ordered(client, db, user):
    address = make_address(db, user)
    resp = client.post("/api/orders", json={"address_id": address.id}, headers=auth(user))

    assert resp.status_code == 400
    assert resp.json()["message"] == "Cart is empty"


def test_foreign_address_is_rejected(client, db, user, product):
    other = make_user(db, email="ola@example.com", phone="+48500100300")
    address = make_address(db, other)
    fill_cart(client, user, product)

    resp = client.post("/api/orders", json={"address_id": address.id}, headers=auth(user))
    assert resp.status_code == 404


def test_insufficient_stock_at_checkout(client, db, user, product):
    variant = product.variants[0]
    fill_cart(client, user, product, quantity=2)
    variant.quantity = 1
    db.commit()
    address = make_address(db, user)

    resp = client.post("/api/orders", json={"address_id": address.id}, headers=auth(user))

    assert resp.status_code == 400
    assert resp.json()["available_quantity"] == 1
    assert stock(db, variant.id) == 1
    assert db.query(CartModel).filter_by(user_id=user.id).count() == 1
    assert db.query(OrderModel).count() == 0


def test_checkout_conflicts_while_variant_is_locked(client, db, user, product, fakes):
    fakes["locks"].held.add(product.variants[0].id)

    resp = checkout(client, db, user, product)

    assert resp.status_code == 409
    assert db.query(OrderModel).count() == 0


def test_cancel_restores_stock(client, db, user, product):
    variant_id = product.variants[0].id
    order = checkout(client, db, user, product).json()

    resp = client.post(f"/api/orders/{order['id']}/cancel", json={"reason": "changed my mind"}, headers=auth(user))

    assert resp.status_code == 200
    assert resp.json()["order_status"] == "Cancelled"
    assert resp.json()["cancellation_reason"] == "changed my mind"
    assert stock(db, variant_id) == 5

    # drugi raz juz nie
    assert client.post(f"/api/orders/{order['id']}/cancel", json={}, headers=auth(user)).status_code == 400


def test_shipped_order_cannot_be_cancelled(client, db, user, product):
    order = checkout(client, db, user, product).json()
    db.get(OrderModel, order["id"]).order_status = "Shipped"
    db.commit()

    resp = client.post(f"/api/orders/{order['id']}/cancel", json={}, headers=auth(user))
    assert resp.status_code == 400


def test_return_only_for_recently_delivered(client, db, user, product):
    order = checkout(client, db, user, product).json()
    path = f"/api/orders/{order['id']}/return"

    assert client.post(path, json={"reason": "too small"}, headers=auth(user)).status_code == 400

    record = db.get(OrderModel, order["id"])
    record.order_status = "Delivered"
    record.updated_at = utcnow() - timedelta(days=10)
    db.commit()
    assert client.post(path, json={"reason": "too small"}, headers=auth(user)).status_code == 400

    db.expire_all()
    record = db.get(OrderModel, order["id"])
    record.updated_at = utcnow() - timedelta(days=1)
    db.commit()
    resp = client.post(path, json={"reason": "too small"}, headers=auth(user))
    assert resp.status_code == 200
    assert resp.json()["return_status"] == "Requested"

    assert client.post(path, json={"reason": "again"}, headers=auth(user)).status_code == 400


def test_order_detail_has_timeline(client, db, user, product):
    order = checkout(client, db, user, product).json()

    resp = client.get(f"/api/orders/{order['id']}", headers=auth(user))

    assert resp.status_code == 200
    statuses = [e["status"] for e in resp.json()["timeline"]]
    assert "Order Placed" in statuses
    assert "Processing" in statuses

    other = make_user(db, email="ola@example.com", phone="+48500100300")
    assert client.get(f"/api/orders/{order['id']}", headers=auth(other)).status_code == 404


def test_list_orders_with_summary(client, db, user, product):
    order = checkout(client, db, user, product).json()
    client.post(f"/api/orders/{order['id']}/cancel", json={}, headers=auth(user))
    fill_cart(client, user, product, 1)
    client.post("/api/orders", json={"address_id": order["address_id"]}, headers=auth(user))

    body = client.get("/api/orders", headers=auth(user)).json()

    assert body["pagination"]["total_orders"] == 2
    assert body["pagination"]["has_more"] is False
    assert body["summary"]["total_orders"] == 2
    by_status = {b["status"]: b["count"] for b in body["summary"]["orders_by_status"]}
    assert by_status == {"Cancelled": 1, "Processing": 1}

    filtered = client.get("/api/orders", params={"status": "Cancelled"}, headers=auth(user)).json()
    assert [o["id"] for o in filtered["orders"]] == [order["id"]]
