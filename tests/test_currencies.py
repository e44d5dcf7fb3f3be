from decimal import Decimal

import pytest

from storefront.data.models import CurrencyModel
from storefront.data.seed import seed

from conftest import auth


@pytest.fixture
def currencies(db):
    seed(db)
    return {c.code: c for c in db.query(CurrencyModel).all()}


def convert(client, source, target, amount):
    return client.post("/api/currencies/convert", json={"from_currency": source, "to_currency": target, "amount": amount})


def test_list_and_base(client, currencies):
    codes = [c["code"] for c in client.get("/api/currencies").json()]
    assert sorted(codes) == ["EUR", "INR", "USD"]
    assert client.get("/api/currencies/base").json()["code"] == "INR"


def test_convert_through_base(client, currencies):
    resp = convert(client, "INR", "USD", 1000)
    assert resp.status_code == 200
    assert Decimal(resp.json()["converted_amount"]) == Decimal("12.00")

    resp = convert(client, "usd", "INR", 12)
    assert Decimal(resp.json()["converted_amount"]) == Decimal("1000.00")


def test_convert_unknown_or_inactive_code(client, db, currencies):
    assert convert(client, "INR", "XXX", 10).status_code == 400

    currencies["EUR"].is_active = False
    db.commit()
    assert convert(client, "INR", "EUR", 10).status_code == 400


def test_admin_manages_currencies(client, user, admin, currencies):
    gbp = {"code": "gbp", "name": "Pound Sterling", "symbol": "£", "exchange_rate": "0.0095"}

    assert client.post("/api/currencies", json=gbp, headers=auth(user)).status_code == 403
    resp = client.post("/api/currencies", json=gbp, headers=auth(admin))
    assert resp.status_code == 201
    assert resp.json()["code"] == "GBP"
    assert client.post("/api/currencies", json=gbp, headers=auth(admin)).status_code == 400

    resp = client.put(f"/api/currencies/{resp.json()['id']}", json={"exchange_rate": "0.01"}, headers=auth(admin))
    assert Decimal(resp.json()["exchange_rate"]) == Decimal("0.01")


def test_base_currency_cannot_be_deleted(client, admin, currencies):
    inr = currencies["INR"]
    assert client.delete(f"/api/currencies/{inr.id}", headers=auth(admin)).status_code == 400
    assert client.delete(f"/api/currencies/{currencies['EUR'].id}", headers=auth(admin)).status_code == 200


def test_set_base_moves_flag(client, db, admin, currencies):
    usd = currencies["USD"]

    resp = client.patch(f"/api/currencies/{usd.id}/set-base", headers=auth(admin))

    assert resp.status_code == 200
    assert resp.json()["is_base_currency"] is True
    assert Decimal(resp.json()["exchange_rate"]) == Decimal("1")
    db.expire_all()
    assert [c.code for c in db.query(CurrencyModel).filter_by(is_base_currency=True)] == ["USD"]
