# storefront/api/routers/payments.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user, get_payment_gateway
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import (
    GatewayOrderIn,
    GatewayOrderOut,
    PaymentFailureIn,
    PaymentOrderResult,
    PaymentStatusOut,
    VerifyPaymentIn,
)
from storefront.services.payment_gateway import PaymentGatewayClient
from storefront.services.payment_service import PaymentService

router = APIRouter(prefix="/payments", tags=["payments"])


def get_service(db: Session, gateway: PaymentGatewayClient):
    return PaymentService(db, gateway)


@router.post("/create-order", response_model=GatewayOrderOut)
def create_gateway_order(
    payload: GatewayOrderIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
):
    return get_service(db, gateway).create_gateway_order(user, payload)


@router.post("/verify", response_model=PaymentOrderResult)
def verify_payment(
    payload: VerifyPaymentIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
):
    order = get_service(db, gateway).verify_payment(user, payload)
    return {"success": True, "message": "Payment verified successfully", "order": order}


@router.post("/failure", response_model=PaymentOrderResult)
def payment_failure(
    payload: PaymentFailureIn,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
):
    order = get_service(db, gateway).record_failure(user, payload.order_id, payload.error_reason)
    return {"success": True, "message": "Payment failure recorded", "order": order}


@router.get("/{payment_id}", response_model=PaymentStatusOut)
def payment_status(
    payment_id: str,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
    gateway: PaymentGatewayClient = Depends(get_payment_gateway),
):
    return get_service(db, gateway).get_status(user, payment_id)
