import os

# srodowisko testowe - musi byc ustawione przed importem storefront.*
os.environ["DATABASE_URL"] = "sqlite://"
os.environ["CELERY_TASK_ALWAYS_EAGER"] = "true"
os.environ["CELERY_BROKER_URL"] = "memory://"
os.environ["CELERY_RESULT_BACKEND"] = "cache+memory://"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "true"
os.environ["RESEND_API_KEY"] = ""
os.environ["SMS_ACCOUNT_SID"] = ""
os.environ["RAZORPAY_KEY_ID"] = "rzp_test_key"
os.environ["RAZORPAY_KEY_SECRET"] = "rzp_test_secret"
os.environ["ENVIRONMENT"] = "test"

from decimal import Decimal

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.orm import sessionmaker

from storefront.api import deps
from storefront.data.database import Base, engine, get_db
from storefront.data.models import AddressModel, ProductModel, UserModel, VariantModel
from storefront.domain.exceptions import ExternalServiceError
from storefront.main import app
from storefront.utils.security import create_access_token, hash_password

TestingSessionLocal = sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)

PASSWORD = "Secret@123"


class FakeLockService:
    def __init__(self):
        self.held = set()
        self.released = []

    def acquire_many(self, variant_ids, owner):
        ids = sorted(set(variant_ids))
        if any(v in self.held for v in ids):
            return []
        self.held.update(ids)
        return ids

    def release_many(self, variant_ids, owner):
        for v in variant_ids:
            self.held.discard(v)
            self.released.append(v)

    def ping(self):
        return True


class FakeRateLimiter:
    def __init__(self):
        self.counts = {}

    def allow(self, bucket, identity, limit, window_seconds):
        key = (bucket, identity)
        self.counts[key] = self.counts.get(key, 0) + 1
        return self.counts[key] <= limit


class FakeNotifications:
    def __init__(self):
        self.sent = []

    def send_verification_email(self, email, name, raw_token):
        self.sent.append(("verify", email, raw_token))

    def send_password_reset_email(self, email, raw_token):
        self.sent.append(("reset", email, raw_token))

    def send_otp(self, phone, code):
        self.sent.append(("otp", phone, code))

    def send_order_notification(self, user_id, order_id):
        self.sent.append(("order", user_id, order_id))

    def last(self, kind):
        return next(m for m in reversed(self.sent) if m[0] == kind)


class FakeGateway:
    def __init__(self):
        self.orders = []
        self.payments = {}

    def create_order(self, amount_paise, currency, receipt):
        order = {
            "id": f"order_test{len(self.orders) + 1}",
            "amount": amount_paise,
            "currency": currency,
            "receipt": receipt,
            "status": "created",
        }
        self.orders.append(order)
        return order

    def fetch_payment(self, payment_id):
        if payment_id not in self.payments:
            raise ExternalServiceError("The id provided does not exist", upstream_status=400)
        return self.payments[payment_id]


class FakeImageHost:
    def __init__(self):
        self.uploaded = []

    def upload(self, filename, content, content_type=None):
        self.uploaded.append(filename)
        return {"url": f"https://img.test/{filename}", "public_id": f"img_{len(self.uploaded)}"}


@pytest.fixture(autouse=True)
def tables():
    Base.metadata.create_all(bind=engine)
    yield
    Base.metadata.drop_all(bind=engine)


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def fakes():
    return {
        "locks": FakeLockService(),
        "limiter": FakeRateLimiter(),
        "notifications": FakeNotifications(),
        "gateway": FakeGateway(),
        "images": FakeImageHost(),
    }


@pytest.fixture
def client(fakes):
    def override_get_db():
        session = TestingSessionLocal()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[deps.get_lock_service] = lambda: fakes["locks"]
    app.dependency_overrides[deps.get_rate_limiter] = lambda: fakes["limiter"]
    app.dependency_overrides[deps.get_notification_service] = lambda: fakes["notifications"]
    app.dependency_overrides[deps.get_payment_gateway] = lambda: fakes["gateway"]
    app.dependency_overrides[deps.get_image_host] = lambda: fakes["images"]

    yield TestClient(app)

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# dane
# ---------------------------------------------------------------------------

def make_user(db, email="jan@example.com", phone="+48500100200", role="user", verified=True, name="Jan"):
    user = UserModel(
        name=name,
        email=email,
        phone=phone,
        password_hash=hash_password(PASSWORD),
        role=role,
        is_verified=verified,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def auth(user):
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


def make_address(db, user, **overrides):
    data = dict(
        user_id=user.id,
        label="Home",
        full_name="Jan Kowalski",
        mobile_number="9876543210",
        address_line1="12 MG Road",
        city="Bengaluru",
        district="Bengaluru Urban",
        state="Karnataka",
        pincode="560001",
        is_default=False,
    )
    data.update(overrides)
    address = AddressModel(**data)
    db.add(address)
    db.commit()
    db.refresh(address)
    return address


@pytest.fixture
def user(db):
    return make_user(db)


@pytest.fixture
def admin(db):
    return make_user(db, email="admin@example.com", phone="+48500999999", role="admin", name="Admin")


@pytest.fixture
def product(db):
    p = ProductModel(
        name="Classic Tee",
        description="Cotton t-shirt",
        category="men",
        images=[{"url": "https://img.test/tee.jpg", "public_id": "tee"}],
        variants=[
            VariantModel(size="M", color="white", price=Decimal("19.99"), quantity=5),
            VariantModel(size="L", color="black", price=Decimal("30.00"), quantity=2),
        ],
    )
    db.add(p)
    db.commit()
    db.refresh(p)
    return p


def checkout(client, db, user, product, quantity=2, method="COD"):
    """Koszyk z jednym wariantem + adres + POST /api/orders."""
    variant = product.variants[0]
    resp = client.post(
        "/api/cart/add",
        json={"product_id": product.id, "variant_id": variant.id, "quantity": quantity},
        headers=auth(user),
    )
    assert resp.status_code == 200
    address = make_address(db, user, is_default=True)
    return client.post("/api/orders", json={"address_id": address.id, "payment_method": method}, headers=auth(user))
