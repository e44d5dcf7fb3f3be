from conftest import auth


def test_add_is_idempotent(client, user, product):
    headers = auth(user)

    client.post("/api/wishlist", json={"product_id": product.id}, headers=headers)
    resp = client.post("/api/wishlist", json={"product_id": product.id}, headers=headers)

    assert resp.status_code == 200
    assert [p["name"] for p in resp.json()["products"]] == ["Classic Tee"]


def test_add_unknown_product(client, user):
    assert client.post("/api/wishlist", json={"product_id": 999}, headers=auth(user)).status_code == 404


def test_remove(client, user, product):
    headers = auth(user)
    assert client.delete(f"/api/wishlist/{product.id}", headers=headers).status_code == 404

    client.post("/api/wishlist", json={"product_id": product.id}, headers=headers)
    resp = client.delete(f"/api/wishlist/{product.id}", headers=headers)

    assert resp.status_code == 200
    assert resp.json()["products"] == []


def test_wishlist_requires_login(client):
    assert client.get("/api/wishlist").status_code == 401
