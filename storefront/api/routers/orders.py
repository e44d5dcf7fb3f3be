# storefront/api/routers/orders.py
from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_lock_service, get_notification_service
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    CancelOrderIn,
    OrderCreate,
    OrderDetailOut,
    OrderListOut,
    OrderOut,
    OrderStatus,
    ReturnRequestIn,
)
from storefront.services.lock_service import LockService
from storefront.services.notification_service import NotificationService
from storefront.services.order_service import OrderService

router = APIRouter(prefix="/orders", tags=["orders"])


def get_service(db: Session, locks: LockService, notifications: NotificationService | None = None):
    return OrderService(db, locks, notifications)


@router.post("", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: LockService = Depends(get_lock_service),
    notifications: NotificationService = Depends(get_notification_service),
):
    """
    Tworzy zamowienie z koszyka zalogowanego usera.
    Powiadomienie wysylane asynchronicznie.
    """
    return get_service(db, locks, notifications).create_order(user.id, payload.address_id, payload.payment_method)


@router.get("", response_model=OrderListOut)
def list_orders(
    status: OrderStatus | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(10, ge=1, le=100),
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: LockService = Depends(get_lock_service),
):
    return get_service(db, locks).list_orders(user.id, status=status, page=page, limit=limit)


@router.get("/{order_id}", response_model=OrderDetailOut)
def get_order(
    order_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: LockService = Depends(get_lock_service),
):
    return get_service(db, locks).get_order_detail(user.id, order_id)


@router.post("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    payload: CancelOrderIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: LockService = Depends(get_lock_service),
):
    return get_service(db, locks).cancel_order(user.id, order_id, payload.reason)


@router.post("/{order_id}/return", response_model=OrderOut)
def request_return(
    order_id: int,
    payload: ReturnRequestIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    locks: LockService = Depends(get_lock_service),
):
    return get_service(db, locks).request_return(user.id, order_id, payload.reason, payload.description)
