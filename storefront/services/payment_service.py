# storefront/services/payment_service.py
import time
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel
from storefront.data.models.payment import PaymentModel
from storefront.data.models.user import UserModel
from storefront.domain import pricing
from storefront.domain.exceptions import AccessDenied, ExternalServiceError, NotFoundError, ValidationFailed
from storefront.domain.schemas import GatewayOrderIn, VerifyPaymentIn
from storefront.repos.order_repo import OrderRepo
from storefront.repos.payment_repo import PaymentRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.utils import security
from storefront.utils.settings import RAZORPAY_KEY_ID, RAZORPAY_KEY_SECRET
from storefront.utils.timeutil import utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

MIN_AMOUNT = Decimal("1")
MAX_AMOUNT_PAISE = 100_000_000  # 10,00,000 INR


def to_paise(amount: Decimal) -> int:
    return int((Decimal(str(amount)) * 100).quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def expected_signature(gateway_order_id: str, gateway_payment_id: str, secret: str) -> str:
    return security.hmac_sha256_hex(secret, f"{gateway_order_id}|{gateway_payment_id}")


class PaymentService:
    def __init__(self, db: Session, gateway: PaymentGatewayClient,
                 key_id: str | None = None, key_secret: str | None = None):
        self.orders = OrderRepo(db)
        self.payments = PaymentRepo(db)
        self.products = ProductRepo(db)
        self.gateway = gateway
        self.key_id = key_id if key_id is not None else RAZORPAY_KEY_ID
        self.key_secret = key_secret if key_secret is not None else RAZORPAY_KEY_SECRET

    def _owned_order(self, user: UserModel, order_id: int) -> OrderModel:
        order = self.orders.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")
        if order.user_id != user.id:
            raise AccessDenied("Access denied: Order does not belong to you")
        return order

    def create_gateway_order(self, user: UserModel, payload: GatewayOrderIn) -> dict:
        if payload.amount < MIN_AMOUNT:
            raise ValidationFailed("Amount must be at least ₹1")
        amount_paise = to_paise(payload.amount)
        if amount_paise > MAX_AMOUNT_PAISE:
            raise ValidationFailed("Amount exceeds maximum limit of ₹10,00,000")

        order = self._owned_order(user, payload.order_id) if payload.order_id else None
        receipt = payload.receipt or f"order_{int(time.time() * 1000)}_{user.id}"

        gateway_order = self.gateway.create_order(amount_paise, payload.currency, receipt)
        self.payments.create(
            PaymentModel(
                order_id=order.id if order else None,
                user_id=user.id,
                amount=payload.amount,
                currency=payload.currency,
                payment_method=order.payment_method if order else None,
                status="pending",
                gateway_order_id=gateway_order["id"],
            )
        )
        logger.info(f"Gateway order {gateway_order['id']} created for user {user.id}")
        return {"success": True, "order": gateway_order, "key_id": self.key_id}

    def verify_payment(self, user: UserModel, payload: VerifyPaymentIn) -> OrderModel:
        order = self._owned_order(user, payload.order_id)
        if order.payment_status == "Paid":
            raise ValidationFailed("Order is already paid")
        if order.order_status == "Cancelled":
            # stan magazynu juz oddany przy anulowaniu
            raise ValidationFailed("Order has been cancelled and can no longer be paid")

        expected = expected_signature(payload.razorpay_order_id, payload.razorpay_payment_id, self.key_secret)
        if not security.constant_time_equals(expected, payload.razorpay_signature):
            logger.warning(
                f"Payment verification failed: user={user.id} order={order.id} "
                f"gateway_order={payload.razorpay_order_id}"
            )
            payment = self.payments.get_by_gateway_order(payload.razorpay_order_id)
            if payment:
                payment.attempts = (payment.attempts or 0) + 1
                self.payments.commit()
            raise ValidationFailed("Payment verification failed: Invalid signature")

        payment = self.payments.get_by_gateway_order(payload.razorpay_order_id)
        if not payment:
            raise ValidationFailed("Unknown gateway order")
        if payment.user_id != user.id:
            raise AccessDenied("Not authorized to verify this payment")
        if payment.order_id is not None and payment.order_id != order.id:
            raise ValidationFailed("Gateway order belongs to a different order")
        if pricing.money(payment.amount) != pricing.money(order.total_amount):
            logger.warning(
                f"Payment amount mismatch: gateway_order={payment.gateway_order_id} "
                f"paid={payment.amount} order={order.id} total={order.total_amount}"
            )
            raise ValidationFailed("Payment amount does not match the order total")

        now = utcnow()

        payment.order_id = order.id
        payment.payment_method = order.payment_method
        payment.gateway_payment_id = payload.razorpay_payment_id
        payment.gateway_signature = payload.razorpay_signature
        payment.status = "completed"
        payment.success_at = now
        payment.attempts = (payment.attempts or 0) + 1

        order.payment_status = "Paid"
        order.order_status = "Processing"
        self.orders.commit()
        self.orders.refresh(order)

        logger.info(f"Payment {payload.razorpay_payment_id} verified for order {order.id}")
        return order

    def record_failure(self, user: UserModel, order_id: int, reason: str | None) -> OrderModel:
        order = self._owned_order(user, order_id)
        if order.payment_status == "Paid":
            raise ValidationFailed("Cannot mark successful payment as failed")

        if order.order_status != "Cancelled":
            # zamowienie zdjelo stan przy checkoucie - oddajemy
            for item in order.items:
                if item.variant_id:
                    self.products.increment_stock(item.variant_id, item.quantity)

        order.payment_status = "Failed"
        order.order_status = "Cancelled"
        order.cancellation_reason = reason or "Payment failed"
        order.cancelled_at = utcnow()

        payment = self.payments.latest_for_order(order.id)
        if payment and payment.status == "pending":
            payment.status = "failed"
            payment.error_reason = reason

        self.orders.commit()
        self.orders.refresh(order)
        logger.warning(f"Payment failure recorded: user={user.id} order={order.id} reason={reason!r}")
        return order

    def get_status(self, user: UserModel, payment_id: str) -> dict:
        if not payment_id.startswith("pay_"):
            raise ValidationFailed("Invalid payment ID format")

        payment = self.payments.get_by_gateway_payment(payment_id)
        order = self.orders.get_order(payment.order_id) if payment and payment.order_id else None
        if not order or order.user_id != user.id:
            raise AccessDenied("Access denied: Payment not associated with your account")

        try:
            remote = self.gateway.fetch_payment(payment_id)
        except ExternalServiceError as e:
            if e.upstream_status == 400:
                raise NotFoundError("Payment not found")
            raise

        logger.info(f"Payment status checked: user={user.id} payment={payment_id} status={remote.get('status')}")
        # tylko bezpieczne pola
        return {
            "id": remote.get("id", payment_id),
            "status": remote.get("status"),
            "amount": remote.get("amount"),
            "currency": remote.get("currency"),
            "created_at": remote.get("created_at"),
            "method": remote.get("method"),
        }
