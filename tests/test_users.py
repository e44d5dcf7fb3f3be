from conftest import auth, make_user


def test_health(client):
    resp = client.get("/health")

    assert resp.status_code == 200
    assert resp.json() == {"status": "ok", "database": "up", "redis": "up"}


def test_profile(client, user):
    resp = client.get("/api/users/me", headers=auth(user))

    assert resp.status_code == 200
    assert resp.json()["email"] == "jan@example.com"
    assert "password_hash" not in resp.json()


def test_update_profile(client, db, user):
    resp = client.patch("/api/users/update", json={"name": " Jan K ", "phone": "+48500100999"}, headers=auth(user))

    assert resp.status_code == 200
    assert resp.json()["name"] == "Jan K"
    assert resp.json()["phone"] == "+48500100999"


def test_phone_must_stay_unique(client, db, user):
    make_user(db, email="ola@example.com", phone="+48500100300")

    resp = client.patch("/api/users/update", json={"phone": "+48500100300"}, headers=auth(user))
    assert resp.status_code == 400


def test_token_of_deleted_user_is_rejected(client, db, user):
    headers = auth(user)
    db.delete(user)
    db.commit()

    resp = client.get("/api/users/me", headers=headers)
    assert resp.status_code == 401
