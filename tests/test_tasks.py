from datetime import timedelta

from storefront.data.models import CartItemModel, CartModel, CurrencyModel, OtpModel, ProductModel
from storefront.data.seed import seed
from storefront.services.notification_service import send_email_task, send_order_notification_task, send_sms_task
from storefront.tasks.expire import expire_guest_carts, purge_expired_otps
from storefront.utils.timeutil import utcnow

from conftest import checkout


def test_expire_guest_carts(db, user, product):
    now = utcnow()
    stale = CartModel(session_id="stale", version=1, expires_at=now - timedelta(minutes=1))
    fresh = CartModel(session_id="fresh", version=1, expires_at=now + timedelta(days=1))
    owned = CartModel(user_id=user.id, version=1)
    db.add_all([stale, fresh, owned])
    db.commit()
    db.add(CartItemModel(cart_id=stale.id, product_id=product.id, variant_id=product.variants[0].id, quantity=1, price=product.variants[0].price))
    db.commit()

    assert expire_guest_carts(db, now) == 1

    db.expire_all()
    assert sorted(c.session_id or "user" for c in db.query(CartModel)) == ["fresh", "user"]
    assert db.query(CartItemModel).count() == 0


def test_purge_expired_otps(db):
    now = utcnow()
    db.add_all([
        OtpModel(phone="+48500100200", code_hash="a" * 64, expires_at=now - timedelta(seconds=1), attempts=0),
        OtpModel(phone="+48500100300", code_hash="b" * 64, expires_at=now + timedelta(minutes=5), attempts=0),
    ])
    db.commit()

    assert purge_expired_otps(db, now) == 1
    assert [o.phone for o in db.query(OtpModel)] == ["+48500100300"]


def test_messages_are_skipped_without_credentials():
    assert send_email_task.delay("jan@example.com", "Hi", "<p>hello</p>").get() == {"status": "skipped"}
    assert send_sms_task.delay("+48500100200", "hello").get() == {"status": "skipped"}


def test_order_notification_task(client, db, user, product):
    order = checkout(client, db, user, product).json()

    assert send_order_notification_task.delay(user.id, order["id"]).get()["status"] == "sent"
    assert send_order_notification_task.delay(user.id, 999).get()["status"] == "skipped"


def test_seed_is_idempotent(db):
    seed(db)
    seed(db)

    assert db.query(CurrencyModel).count() == 3
    assert db.query(ProductModel).count() == 2
    assert db.query(CurrencyModel).filter_by(is_base_currency=True).one().code == "INR"
