from sqlalchemy import select
from sqlalchemy.orm import Session

from storefront.data.models.payment import PaymentModel


class PaymentRepo:
    def __init__(self, db: Session):
        self.db = db

    def create(self, payment: PaymentModel) -> PaymentModel:
        self.db.add(payment)
        self.db.commit()
        self.db.refresh(payment)
        return payment

    def get_by_gateway_order(self, gateway_order_id: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.gateway_order_id == gateway_order_id)
        ).scalar_one_or_none()

    def get_by_gateway_payment(self, gateway_payment_id: str) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel).where(PaymentModel.gateway_payment_id == gateway_payment_id)
        ).scalar_one_or_none()

    def latest_for_order(self, order_id: int) -> PaymentModel | None:
        return self.db.execute(
            select(PaymentModel)
            .where(PaymentModel.order_id == order_id)
            .order_by(PaymentModel.id.desc())
            .limit(1)
        ).scalar_one_or_none()

    def add(self, payment: PaymentModel) -> None:
        self.db.add(payment)

    def commit(self):
        self.db.commit()
