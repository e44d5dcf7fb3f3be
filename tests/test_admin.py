from decimal import Decimal

from storefront.data.models import AddressModel, CartModel, OrderModel, ReviewModel, UserModel, VariantModel, WishlistItemModel

from conftest import auth, checkout, make_user


def test_admin_routes_need_admin_role(client, user):
    assert client.get("/api/admin/dashboard").status_code == 401
    assert client.get("/api/admin/dashboard", headers=auth(user)).status_code == 403


def test_dashboard(client, db, user, admin, product):
    checkout(client, db, user, product)

    resp = client.get("/api/admin/dashboard", params={"timeRange": 7}, headers=auth(admin))

    assert resp.status_code == 200
    body = resp.json()
    assert set(body) == {
        "overview", "sales_analytics", "inventory_status", "top_products", "recent_activity", "order_fulfillment",
    }
    assert body["overview"]["total_orders"] == 1
    assert body["overview"]["total_users"] == 2
    assert Decimal(str(body["overview"]["total_revenue"])) == Decimal("48.98")
    assert body["top_products"][0]["total_sold"] == 2
    assert body["sales_analytics"][0]["orders"] == 1
    assert body["order_fulfillment"] == [{"status": "Processing", "count": 1}]
    assert len(body["recent_activity"]["orders"]) == 1


def test_order_and_inventory_analytics(client, db, user, admin, product):
    checkout(client, db, user, product)

    body = client.get("/api/admin/analytics/orders", params={"period": "12months"}, headers=auth(admin)).json()
    assert body["total_orders"] == 1
    assert len(body["series"][0]["date"]) == len("2026-01")

    assert client.get("/api/admin/analytics/orders", params={"period": "1year"}, headers=auth(admin)).status_code == 400

    inventory = client.get("/api/admin/analytics/inventory", headers=auth(admin)).json()
    men = inventory["categories"][0]
    assert men["category"] == "men"
    # 5 - 2 sprzedane + 2
    assert men["total_stock"] == 5
    assert men["low_stock"] == 2
    assert men["out_of_stock"] == 0


def test_list_and_search_users(client, user, admin):
    body = client.get("/api/admin/users", params={"search": "ADMIN"}, headers=auth(admin)).json()
    assert [u["email"] for u in body["users"]] == ["admin@example.com"]

    body = client.get("/api/admin/users", params={"role": "user"}, headers=auth(admin)).json()
    assert body["pagination"]["total"] == 1


def test_role_changes(client, db, user, admin):
    resp = client.patch(f"/api/admin/users/{user.id}/role", json={"role": "admin"}, headers=auth(admin))
    assert resp.status_code == 200
    assert resp.json()["role"] == "admin"

    assert client.patch(f"/api/admin/users/{admin.id}/role", json={"role": "user"}, headers=auth(admin)).status_code == 400
    assert client.patch(f"/api/admin/users/{user.id}/role", json={"role": "owner"}, headers=auth(admin)).status_code == 400

    other = make_user(db, email="ola@example.com", phone="+48500100300")
    resp = client.patch(
        "/api/admin/users/bulk-role", json={"user_ids": [user.id, other.id], "role": "user"}, headers=auth(admin)
    )
    assert resp.json()["modified_count"] == 2


def test_user_detail(client, db, user, admin, product):
    checkout(client, db, user, product)

    body = client.get(f"/api/admin/users/{user.id}", headers=auth(admin)).json()

    assert body["user"]["email"] == user.email
    assert len(body["orders"]) == 1
    assert client.get("/api/admin/users/999", headers=auth(admin)).status_code == 404


def test_delete_user_removes_related_data(client, db, user, admin, product):
    checkout(client, db, user, product)
    client.post("/api/wishlist", json={"product_id": product.id}, headers=auth(user))
    client.post("/api/reviews", json={"product_id": product.id, "rating": 5}, headers=auth(user))
    client.post(
        "/api/cart/add",
        json={"product_id": product.id, "variant_id": product.variants[1].id, "quantity": 1},
        headers=auth(user),
    )

    assert client.delete(f"/api/admin/users/{admin.id}", headers=auth(admin)).status_code == 400
    assert client.delete(f"/api/admin/users/{user.id}", headers=auth(admin)).status_code == 200

    db.expire_all()
    assert db.get(UserModel, user.id) is None
    for model in (OrderModel, AddressModel, CartModel, ReviewModel, WishlistItemModel):
        assert db.query(model).filter_by(user_id=user.id).count() == 0


def test_admin_order_status(client, db, user, admin, product):
    order = checkout(client, db, user, product).json()
    path = f"/api/admin/orders/{order['id']}/status"

    assert client.patch(path, json={"status": "Returned"}, headers=auth(admin)).status_code == 400
    assert client.patch(path, json={"status": "Pending"}, headers=auth(admin)).status_code == 400

    resp = client.patch(path, json={"status": "Delivered"}, headers=auth(admin))
    assert resp.json()["order_status"] == "Delivered"
    assert resp.json()["payment_status"] == "Paid"


def test_admin_cancel_restores_stock(client, db, user, admin, product):
    variant_id = product.variants[0].id
    order = checkout(client, db, user, product).json()

    client.patch(f"/api/admin/orders/{order['id']}/status", json={"status": "Cancelled"}, headers=auth(admin))

    db.expire_all()
    assert db.get(VariantModel, variant_id).quantity == 5
