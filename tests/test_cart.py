from decimal import Decimal

from storefront.data.models import CartModel

from conftest import PASSWORD, auth


def add(client, product, variant_index=0, quantity=1, headers=None):
    variant = product.variants[variant_index]
    return client.post(
        "/api/cart/add",
        json={"product_id": product.id, "variant_id": variant.id, "quantity": quantity},
        headers=headers,
    )


def test_empty_cart_for_new_guest(client):
    resp = client.get("/api/cart")

    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert Decimal(resp.json()["summary"]["shipping"]) == Decimal("0")


def test_guest_add_issues_cookie_and_prices_summary(client, product):
    resp = add(client, product, quantity=2)

    assert resp.status_code == 200
    assert "cart_session" in resp.cookies

    body = resp.json()
    item = body["items"][0]
    assert item["name"] == "Classic Tee"
    assert item["size"] == "M"
    assert item["image"] == "https://img.test/tee.jpg"

    summary = body["summary"]
    assert Decimal(summary["subtotal"]) == Decimal("39.98")
    assert Decimal(summary["tax"]) == Decimal("4.00")
    assert Decimal(summary["shipping"]) == Decimal("5.00")
    assert Decimal(summary["total"]) == Decimal("48.98")
    assert Decimal(summary["remaining_for_free_shipping"]) == Decimal("10.02")
    assert summary["item_count"] == 2

    # ciasteczko zostaje w kliencie - ten sam koszyk
    assert len(client.get("/api/cart").json()["items"]) == 1


def test_add_more_than_stock(client, product):
    resp = add(client, product, quantity=6)

    assert resp.status_code == 400
    assert resp.json()["status"] == "fail"
    assert resp.json()["available_quantity"] == 5


def test_combined_quantity_over_stock(client, user, product):
    assert add(client, product, quantity=3, headers=auth(user)).status_code == 200

    resp = add(client, product, quantity=3, headers=auth(user))

    assert resp.status_code == 400
    assert resp.json()["available_quantity"] == 5
    assert resp.json()["current_cart_quantity"] == 3


def test_add_unknown_variant(client, product):
    resp = client.post("/api/cart/add", json={"product_id": product.id, "variant_id": 999, "quantity": 1})
    assert resp.status_code == 404

    resp = client.post("/api/cart/add", json={"product_id": product.id, "variant_id": 1, "quantity": 0})
    assert resp.status_code == 400


def test_update_and_remove_item(client, user, product):
    headers = auth(user)
    variant = product.variants[0]
    add(client, product, quantity=1, headers=headers)

    resp = client.put(f"/api/cart/items/{product.id}/{variant.id}", json={"quantity": 4}, headers=headers)
    assert resp.status_code == 200
    assert resp.json()["items"][0]["quantity"] == 4

    assert client.put(f"/api/cart/items/{product.id}/{variant.id}", json={"quantity": 0}, headers=headers).status_code == 400
    assert client.put(f"/api/cart/items/{product.id}/{variant.id}", json={"quantity": 9}, headers=headers).status_code == 400

    resp = client.delete(f"/api/cart/items/{product.id}/{variant.id}", headers=headers)
    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert Decimal(resp.json()["summary"]["total"]) == Decimal("0")

    assert client.delete(f"/api/cart/items/{product.id}/{variant.id}", headers=headers).status_code == 404


def test_every_change_bumps_version(client, db, user, product):
    headers = auth(user)
    add(client, product, quantity=1, headers=headers)
    add(client, product, quantity=1, headers=headers)

    cart = db.query(CartModel).filter_by(user_id=user.id).one()
    assert cart.version == 3


def test_clear_cart(client, db, user, product):
    headers = auth(user)
    add(client, product, headers=headers)

    resp = client.delete("/api/cart", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["items"] == []
    assert db.query(CartModel).count() == 0


def test_guest_cart_is_merged_on_login(client, db, user, product):
    add(client, product, quantity=2)
    add(client, product, variant_index=1, quantity=1)
    add(client, product, quantity=4, headers=auth(user))

    resp = client.post("/api/auth/login/email", json={"email": user.email, "password": PASSWORD})
    assert resp.status_code == 200

    items = {i["size"]: i["quantity"] for i in client.get("/api/cart").json()["items"]}
    # 4 + 2 przyciete do stanu magazynu
    assert items == {"M": 5, "L": 1}
    assert db.query(CartModel).filter(CartModel.session_id.isnot(None)).count() == 0


def test_save_for_later_moves_item_to_wishlist(client, user, product):
    headers = auth(user)
    variant = product.variants[0]
    add(client, product, headers=headers)

    resp = client.post(f"/api/cart/save-for-later/{product.id}/{variant.id}", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["items"] == []
    wishlist = client.get("/api/wishlist", headers=headers).json()
    assert [p["id"] for p in wishlist["products"]] == [product.id]

    resp = client.post(f"/api/cart/save-for-later/{product.id}/{variant.id}", headers=headers)
    assert resp.status_code == 404


def test_explicit_merge_endpoint(client, db, user, product):
    add(client, product, quantity=2)

    resp = client.post("/api/cart/merge-guest-cart", headers=auth(user))

    assert resp.status_code == 200
    assert [(i["size"], i["quantity"]) for i in resp.json()["items"]] == [("M", 2)]
    assert db.query(CartModel).filter(CartModel.session_id.isnot(None)).count() == 0
    # bez koszyka goscia - po prostu koszyk usera
    assert client.post("/api/cart/merge-guest-cart", headers=auth(user)).json()["items"][0]["quantity"] == 2
