from decimal import Decimal

from conftest import auth

INDIA = {
    "name": "India",
    "countries": ["India"],
    "priority": 1,
    "rates": [
        {"name": "Standard", "type": "flat", "cost": 50, "estimated_days": {"min": 3, "max": 5}},
        {"name": "Free", "type": "free", "min_order_amount": 500},
        {"name": "Heavy", "type": "weight_based", "cost": 20, "per_kg_rate": 10, "min_weight": 0, "max_weight": 100},
    ],
}


def create_zone(client, admin, zone=INDIA):
    resp = client.post("/api/shipping/zones", json=zone, headers=auth(admin))
    assert resp.status_code == 201
    return resp.json()


def quote(client, subtotal, weight=0, country="India", **address):
    return client.post(
        "/api/shipping/calculate",
        json={"address": {"country": country, **address}, "order_details": {"subtotal": subtotal, "weight": weight}},
    )


def test_zones_are_admin_only(client, user):
    assert client.post("/api/shipping/zones", json=INDIA, headers=auth(user)).status_code == 403
    assert client.get("/api/shipping/zones").status_code == 401


def test_cheapest_rate_wins(client, admin):
    create_zone(client, admin)

    resp = quote(client, subtotal=100, weight=1)
    assert resp.status_code == 200
    assert resp.json()["zone"] == "India"
    assert resp.json()["name"] == "Heavy"
    assert Decimal(resp.json()["cost"]) == Decimal("30.00")

    resp = quote(client, subtotal=600, weight=1)
    assert resp.json()["name"] == "Free"
    assert Decimal(resp.json()["cost"]) == Decimal("0")


def test_no_zone_for_address(client, admin):
    create_zone(client, admin)
    assert quote(client, subtotal=100, country="France").status_code == 404


def test_no_applicable_rate(client, admin):
    create_zone(client, admin, {
        "name": "Bulk only",
        "countries": ["India"],
        "rates": [{"name": "Bulk", "type": "price_based", "cost": 10, "min_order_amount": 1000, "max_order_amount": 5000}],
    })

    resp = quote(client, subtotal=100)
    assert resp.status_code == 404
    assert resp.json()["message"] == "No shipping rate available for this order"


def test_lower_priority_number_matches_first(client, admin):
    create_zone(client, admin)
    create_zone(client, admin, {
        "name": "Bengaluru",
        "countries": ["India"],
        "states": [{"country": "India", "state": "Karnataka"}],
        "postal_codes": ["560001"],
        "priority": 0,
        "rates": [{"name": "Local", "type": "flat", "cost": 10}],
    })

    local = quote(client, subtotal=100, state="Karnataka", postal_code="560001").json()
    assert local["zone"] == "Bengaluru"
    assert quote(client, subtotal=100, state="Kerala", postal_code="682001").json()["zone"] == "India"


def test_methods_list_zone_rates(client, admin):
    create_zone(client, admin)

    resp = client.post("/api/shipping/methods", json={"address": {"country": "India"}})

    assert resp.status_code == 200
    assert [r["name"] for r in resp.json()["rates"]] == ["Standard", "Free", "Heavy"]


def test_rate_without_cost_is_rejected(client, admin):
    zone = {"name": "Broken", "countries": ["India"], "rates": [{"name": "Flat", "type": "flat"}]}
    assert client.post("/api/shipping/zones", json=zone, headers=auth(admin)).status_code == 400


def test_update_and_delete_zone(client, admin):
    zone = create_zone(client, admin)

    resp = client.put(f"/api/shipping/zones/{zone['id']}", json={"is_active": False}, headers=auth(admin))
    assert resp.status_code == 200
    assert resp.json()["is_active"] is False
    assert quote(client, subtotal=100).status_code == 404

    assert client.delete(f"/api/shipping/zones/{zone['id']}", headers=auth(admin)).status_code == 200
    assert client.get(f"/api/shipping/zones/{zone['id']}", headers=auth(admin)).status_code == 404
