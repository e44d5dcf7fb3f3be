from typing import List

from sqlalchemy import select, update
from sqlalchemy.orm import Session

from storefront.data.models.currency import CurrencyModel


class CurrencyRepo:
    def __init__(self, db: Session):
        self.db = db

    def active(self) -> List[CurrencyModel]:
        return list(
            self.db.execute(
                select(CurrencyModel).where(CurrencyModel.is_active.is_(True)).order_by(CurrencyModel.code)
            ).scalars().all()
        )

    def get(self, currency_id: int) -> CurrencyModel | None:
        return self.db.get(CurrencyModel, currency_id)

    def get_by_code(self, code: str) -> CurrencyModel | None:
        return self.db.execute(
            select(CurrencyModel).where(CurrencyModel.code == code.upper())
        ).scalar_one_or_none()

    def base(self) -> CurrencyModel | None:
        return self.db.execute(
            select(CurrencyModel).where(CurrencyModel.is_base_currency.is_(True)).limit(1)
        ).scalar_one_or_none()

    def clear_base(self) -> None:
        self.db.execute(
            update(CurrencyModel)
            .where(CurrencyModel.is_base_currency.is_(True))
            .values(is_base_currency=False)
            .execution_options(synchronize_session="fetch")
        )

    def create(self, currency: CurrencyModel) -> CurrencyModel:
        self.db.add(currency)
        self.db.commit()
        self.db.refresh(currency)
        return currency

    def save(self, currency: CurrencyModel) -> CurrencyModel:
        self.db.commit()
        self.db.refresh(currency)
        return currency

    def delete(self, currency: CurrencyModel) -> None:
        self.db.delete(currency)
        self.db.commit()
