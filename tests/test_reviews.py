from decimal import Decimal

import pytest

from storefront.data.models import OrderItemModel, OrderModel, ReviewModel
from storefront.services.review_service import helpfulness_score

from conftest import auth, make_user


@pytest.fixture
def other(db):
    return make_user(db, email="ola@example.com", phone="+48500100300", name="Ola")


def post_review(client, user, product, rating=4, **extra):
    return client.post(
        "/api/reviews",
        json={"product_id": product.id, "rating": rating, "title": "Nice", "comment": "Fits well", **extra},
        headers=auth(user),
    )


def delivered_order(db, user, product):
    order = OrderModel(
        user_id=user.id,
        order_number="ORD26010001",
        total_amount=Decimal("19.99"),
        payment_method="COD",
        payment_status="Paid",
        order_status="Delivered",
        items=[OrderItemModel(product_id=product.id, name=product.name, quantity=1, price=Decimal("19.99"))],
    )
    db.add(order)
    db.commit()
    return order


def test_helpfulness_score():
    assert helpfulness_score(0, 0) == 0.0
    assert helpfulness_score(3, 1) == 75.0
    assert helpfulness_score(1, 2) == 33.33


def test_new_review_waits_for_moderation(client, user, product):
    resp = post_review(client, user, product)

    assert resp.status_code == 200
    body = resp.json()
    assert body["status"] == "pending"
    assert body["is_verified_purchase"] is False
    assert body["user_name"] == "Jan"

    # publicznie tylko zatwierdzone
    assert client.get(f"/api/reviews/product/{product.id}").json() == []


def test_review_after_delivery_is_verified_purchase(client, db, user, product):
    order = delivered_order(db, user, product)

    resp = post_review(client, user, product)

    assert resp.json()["is_verified_purchase"] is True
    db.expire_all()
    assert db.query(ReviewModel).one().order_id == order.id


def test_second_review_updates_first(client, db, user, product):
    post_review(client, user, product, rating=2)
    resp = post_review(client, user, product, rating=5)

    assert resp.json()["rating"] == 5
    assert db.query(ReviewModel).count() == 1


def test_rating_must_be_between_one_and_five(client, user, product):
    assert post_review(client, user, product, rating=6).status_code == 400
    assert post_review(client, user, product, rating=0).status_code == 400


def test_admin_approves_review(client, user, admin, product):
    review = post_review(client, user, product).json()

    assert client.patch(f"/api/reviews/{review['id']}/status", json={"status": "approved"}, headers=auth(user)).status_code == 403
    resp = client.patch(f"/api/reviews/{review['id']}/status", json={"status": "approved"}, headers=auth(admin))
    assert resp.status_code == 200

    listed = client.get(f"/api/reviews/product/{product.id}").json()
    assert [r["id"] for r in listed] == [review["id"]]


def test_voting_toggles_and_switches(client, user, other, product):
    review = post_review(client, user, product).json()
    path = f"/api/reviews/{review['id']}/vote"

    body = client.post(path, json={"direction": "up"}, headers=auth(other)).json()
    assert (body["upvotes"], body["downvotes"], body["helpfulness_score"]) == (1, 0, 100.0)

    body = client.post(path, json={"direction": "down"}, headers=auth(other)).json()
    assert (body["upvotes"], body["downvotes"]) == (0, 1)

    body = client.post(path, json={"direction": "down"}, headers=auth(other)).json()
    assert (body["upvotes"], body["downvotes"]) == (0, 0)


def test_cannot_vote_on_own_review(client, user, product):
    review = post_review(client, user, product).json()
    resp = client.post(f"/api/reviews/{review['id']}/vote", json={"direction": "up"}, headers=auth(user))
    assert resp.status_code == 400


def test_report_only_once(client, user, other, product):
    review = post_review(client, user, product).json()
    path = f"/api/reviews/{review['id']}/report"

    resp = client.post(path, json={"reason": "spam"}, headers=auth(other))
    assert resp.status_code == 200
    assert resp.json()["report_count"] == 1

    assert client.post(path, json={"reason": "spam"}, headers=auth(other)).status_code == 400


def test_only_author_deletes_review(client, db, user, other, product):
    review = post_review(client, user, product).json()

    assert client.delete(f"/api/reviews/{review['id']}", headers=auth(other)).status_code == 403
    assert client.delete(f"/api/reviews/{review['id']}", headers=auth(user)).status_code == 200
    assert db.query(ReviewModel).count() == 0
    assert client.delete(f"/api/reviews/{review['id']}", headers=auth(user)).status_code == 404


def test_reviews_for_unknown_product(client):
    assert client.get("/api/reviews/product/999").status_code == 404
