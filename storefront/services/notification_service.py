# storefront/services/notification_service.py
from storefront.celery_worker import celery_app
from storefront.services.email_client import EmailClient
from storefront.services.sms_client import SmsClient
from storefront.utils.settings import CLIENT_URL, OTP_TTL_SECONDS
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class NotificationService:
    """
    Powiadomienia (email / SMS) wysylane asynchronicznie przez Celery.
    Serwisy domenowe wolaja tylko te metody, nie taski bezposrednio.
    """

    @staticmethod
    def send_verification_email(email: str, name: str, raw_token: str):
        link = f"{CLIENT_URL}/verify-email/{raw_token}"
        send_email_task.delay(
            email,
            "Verify your email",
            f"<p>Hi {name},</p><p>Confirm your email address: <a href=\"{link}\">{link}</a></p>"
            "<p>The link expires in 10 minutes.</p>",
        )

    @staticmethod
    def send_password_reset_email(email: str, raw_token: str):
        link = f"{CLIENT_URL}/reset-password/{raw_token}"
        send_email_task.delay(
            email,
            "Reset your password",
            f"<p>Reset your password here: <a href=\"{link}\">{link}</a></p>"
            "<p>The link expires in 15 minutes.</p>",
        )

    @staticmethod
    def send_otp(phone: str, code: str):
        minutes = max(1, OTP_TTL_SECONDS // 60)
        send_sms_task.delay(phone, f"Your verification code is {code}. It expires in {minutes} minutes.")

    @staticmethod
    def send_order_notification(user_id: int, order_id: int):
        send_order_notification_task.delay(user_id, order_id)


@celery_app.task(name="storefront.services.notification_service.send_email_task")
def send_email_task(to: str, subject: str, html: str):
    return EmailClient().send(to, subject, html)


@celery_app.task(name="storefront.services.notification_service.send_sms_task")
def send_sms_task(to: str, body: str):
    return SmsClient().send(to, body)


@celery_app.task(name="storefront.services.notification_service.send_order_notification_task")
def send_order_notification_task(user_id: int, order_id: int):
    from storefront.data.database import SessionLocal
    from storefront.data.models.order import OrderModel
    from storefront.data.models.user import UserModel

    db = SessionLocal()
    try:
        order = db.get(OrderModel, order_id)
        user = db.get(UserModel, user_id)
        if not order or not user:
            logger.warning(f"[NOTIFICATION] order {order_id} / user {user_id} not found, skipping")
            return {"user_id": user_id, "order_id": order_id, "status": "skipped"}

        logger.info(f"[NOTIFICATION] User {user_id}: Order {order.order_number} is being processed")
        EmailClient().send(
            user.email,
            f"Order {order.order_number} confirmed",
            f"<p>Hi {user.name},</p><p>We received your order <b>{order.order_number}</b> "
            f"for {order.total_amount}. Status: {order.order_status}.</p>",
        )
        return {"user_id": user_id, "order_id": order_id, "status": "sent"}
    finally:
        db.close()
