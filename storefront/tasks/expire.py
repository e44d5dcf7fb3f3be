# storefront/tasks/expire.py
from datetime import datetime

from sqlalchemy.orm import Session

from storefront.celery_worker import celery_app
from storefront.data.database import SessionLocal
from storefront.repos.cart_repo import CartRepo
from storefront.repos.otp_repo import OtpRepo
from storefront.utils.timeutil import utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def expire_guest_carts(db: Session, now: datetime | None = None) -> int:
    repo = CartRepo(db)
    carts = repo.expired_guest_carts(now or utcnow())
    logger.info(f"Found {len(carts)} guest carts to expire")
    for cart in carts:
        repo.delete_cart(cart)
    repo.commit()
    return len(carts)


def purge_expired_otps(db: Session, now: datetime | None = None) -> int:
    removed = OtpRepo(db).delete_expired(now or utcnow())
    logger.info(f"Purged {removed} expired OTP codes")
    return removed


@celery_app.task(name="storefront.tasks.expire.expire_guest_carts_task")
def expire_guest_carts_task():
    db = SessionLocal()
    try:
        return expire_guest_carts(db)
    finally:
        db.close()


@celery_app.task(name="storefront.tasks.expire.purge_expired_otps_task")
def purge_expired_otps_task():
    db = SessionLocal()
    try:
        return purge_expired_otps(db)
    finally:
        db.close()
