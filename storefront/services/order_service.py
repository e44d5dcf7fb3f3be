# storefront/services/order_service.py
import math
import random
from datetime import timedelta
from decimal import Decimal
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.order import OrderModel, OrderItemModel
from storefront.domain import pricing
from storefront.domain.exceptions import ConflictError, NotFoundError, ValidationFailed
from storefront.repos.address_repo import AddressRepo
from storefront.repos.cart_repo import CartRepo
from storefront.repos.order_repo import OrderRepo
from storefront.repos.product_repo import ProductRepo
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.utils.settings import RETURN_WINDOW_DAYS
from storefront.utils.timeutil import as_utc, utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)

CANCELLABLE = ("Pending", "Processing")


def next_order_number(repo: OrderRepo, now=None) -> str:
    """ORD + yy + mm + kolejny numer w miesiacu (4 cyfry)."""
    now = now or utcnow()
    month_start = now.replace(day=1, hour=0, minute=0, second=0, microsecond=0)
    next_month = (month_start + timedelta(days=32)).replace(day=1)
    seq = repo.count_between(month_start, next_month) + 1

    prefix = f"ORD{now:%y}{now:%m}"
    number = f"{prefix}{seq:04d}"
    while repo.order_number_exists(number):
        seq += 1
        number = f"{prefix}{seq:04d}"
    return number


def build_timeline(order: OrderModel) -> List[Dict[str, Any]]:
    timeline = [{
        "status": "Order Placed",
        "date": as_utc(order.created_at),
        "description": f"Order {order.order_number} placed with {order.payment_method}",
    }]

    if order.payment_status == "Paid":
        timeline.append({
            "status": "Payment Confirmed",
            "date": as_utc(order.updated_at),
            "description": f"Payment of {order.total_amount} received via {order.payment_method}",
        })

    if order.order_status == "Cancelled":
        reason = order.cancellation_reason or "No reason provided"
        timeline.append({
            "status": "Cancelled",
            "date": as_utc(order.cancelled_at or order.updated_at),
            "description": f"Order cancelled: {reason}",
        })
    elif order.order_status != "Pending":
        timeline.append({
            "status": order.order_status,
            "date": as_utc(order.updated_at),
            "description": f"Order is {order.order_status.lower()}",
        })

    if order.return_requested_at:
        timeline.append({
            "status": "Return Requested",
            "date": as_utc(order.return_requested_at),
            "description": f"Return requested: {order.return_reason}",
        })

    return sorted(timeline, key=lambda e: e["date"] or utcnow(), reverse=True)


class OrderService:
    """
    Domena zamowien, oddzielona od CartService.
    Checkout: walidacja stanu, insert zamowienia, dekrementacja stanu i usuniecie koszyka w jednej transakcji.
    """

    def __init__(self, db: Session, lock_service: LockService,
                 notification_service: NotificationService | None = None):
        self.db = db
        self.repo = OrderRepo(db)
        self.carts = CartRepo(db)
        self.products = ProductRepo(db)
        self.addresses = AddressRepo(db)
        self.lock_service = lock_service
        self.notification_service = notification_service or NotificationService()

    # -------------------------------------------------------------------
    # commands
    # -------------------------------------------------------------------
    def create_order(self, user_id: int, address_id: int, payment_method: str = "COD") -> OrderModel:
        address = self.addresses.get_for_user(address_id, user_id)
        if not address:
            raise NotFoundError("Address not found")

        cart = self.carts.get_cart_by_user(user_id)
        items = self.carts.get_cart_items(cart.id) if cart else []
        if not items:
            raise ValidationFailed("Cart is empty")

        owner = f"checkout:user:{user_id}"
        locked = self.lock_service.acquire_many([i.variant_id for i in items], owner)
        if not locked:
            raise ConflictError("Another checkout is in progress for one of these items, please retry")

        try:
            order_items = []
            for item in items:
                variant = item.variant
                self.db.refresh(variant)
                if variant.quantity < item.quantity:
                    raise ValidationFailed(
                        f"Insufficient stock for {item.product.name} ({variant.size}/{variant.color})",
                        available_quantity=variant.quantity,
                        product_id=item.product_id,
                        variant_id=item.variant_id,
                    )
                order_items.append(
                    OrderItemModel(
                        product_id=item.product_id,
                        variant_id=item.variant_id,
                        name=item.product.name,
                        size=variant.size,
                        color=variant.color,
                        quantity=item.quantity,
                        price=item.price,
                    )
                )

            summary = pricing.cart_summary((i.price, i.quantity) for i in items)
            now = utcnow()
            online = payment_method != "COD"

            order = OrderModel(
                user_id=user_id,
                address_id=address.id,
                order_number=next_order_number(self.repo, now),
                total_amount=summary["total"],
                payment_method=payment_method,
                payment_status="Pending",
                order_status="Pending" if online else "Processing",
                estimated_delivery_date=now + timedelta(days=random.randint(3, 5)),
                items=order_items,
            )
            self.repo.create_order(order)

            for item in items:
                # warunkowy UPDATE; 0 wierszy = ktos wykupil w miedzyczasie
                if self.products.decrement_stock(item.variant_id, item.quantity) == 0:
                    raise ConflictError(
                        f"Stock for {item.product.name} changed during checkout, please review your cart"
                    )

            self.carts.delete_cart(cart)
            self.repo.commit()
        except Exception:
            self.repo.rollback()
            raise
        finally:
            self.lock_service.release_many(locked, owner)

        self.repo.refresh(order)
        logger.info(f"Order {order.order_number} ({order.id}) created for user {user_id}, total {order.total_amount}")

        self.notification_service.send_order_notification(user_id, order.id)
        return order

    def cancel_order(self, user_id: int, order_id: int, reason: str | None = None) -> OrderModel:
        order = self.get_order(user_id, order_id)
        if order.order_status not in CANCELLABLE:
            raise ValidationFailed(f"Order cannot be cancelled in status {order.order_status}")

        self._restore_stock(order)
        order.order_status = "Cancelled"
        order.cancellation_reason = reason
        order.cancelled_at = utcnow()
        self.repo.commit()
        self.repo.refresh(order)
        logger.info(f"Order {order.id} cancelled by user {user_id}")
        return order

    def request_return(self, user_id: int, order_id: int, reason: str, description: str | None = None) -> OrderModel:
        order = self.get_order(user_id, order_id)
        if order.order_status != "Delivered":
            raise ValidationFailed("Only delivered orders can be returned")
        if order.return_requested_at:
            raise ValidationFailed("A return has already been requested for this order")

        delivered_at = as_utc(order.updated_at)
        if utcnow() - delivered_at > timedelta(days=RETURN_WINDOW_DAYS):
            raise ValidationFailed(f"Return window of {RETURN_WINDOW_DAYS} days has expired")

        order.return_reason = reason
        order.return_description = description
        order.return_requested_at = utcnow()
        order.return_status = "Requested"
        self.repo.commit()
        self.repo.refresh(order)
        logger.info(f"Return requested for order {order.id}")
        return order

    def set_status(self, order_id: int, status: str) -> OrderModel:
        """Admin: tylko przynaleznosc do enuma (sprawdza schemat), bez maszyny stanow."""
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFoundError("Order not found")

        if status == "Cancelled" and order.order_status != "Cancelled":
            self._restore_stock(order)
            order.cancelled_at = utcnow()
        order.order_status = status
        if status == "Delivered" and order.payment_method == "COD":
            order.payment_status = "Paid"

        self.repo.commit()
        self.repo.refresh(order)
        logger.info(f"Order {order_id} status set to {status}")
        return order

    def _restore_stock(self, order: OrderModel) -> None:
        for item in order.items:
            if item.variant_id:
                self.products.increment_stock(item.variant_id, item.quantity)

    # -------------------------------------------------------------------
    # queries
    # -------------------------------------------------------------------
    def get_order(self, user_id: int, order_id: int) -> OrderModel:
        order = self.repo.get_for_user(order_id, user_id)
        if not order:
            raise NotFoundError("Order not found")
        return order

    def get_order_detail(self, user_id: int, order_id: int) -> Dict[str, Any]:
        order = self.get_order(user_id, order_id)
        return {"order": order, "timeline": build_timeline(order)}

    def list_orders(self, user_id: int, status: str | None = None, page: int = 1, limit: int = 10) -> Dict[str, Any]:
        orders, total = self.repo.list_for_user(user_id, status=status, page=page, limit=limit)
        total_pages = math.ceil(total / limit) if limit else 0

        buckets = []
        all_orders = 0
        spent = Decimal("0")
        for status_name, count, total_amount in self.repo.status_summary_for_user(user_id):
            amount = pricing.money(total_amount or 0)
            buckets.append({"status": status_name, "count": count, "total_spent": amount})
            all_orders += count
            spent += amount

        return {
            "orders": orders,
            "pagination": {
                "current_page": page,
                "total_pages": total_pages,
                "total_orders": total,
                "has_more": page < total_pages,
            },
            "summary": {
                "orders_by_status": buckets,
                "total_orders": all_orders,
                "total_spent": pricing.money(spent),
            },
        }
