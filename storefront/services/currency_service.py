# storefront/services/currency_service.py
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.currency import CurrencyModel
from storefront.domain import pricing
from storefront.domain.exceptions import NotFoundError, ValidationFailed
from storefront.domain.schemas import CurrencyIn, CurrencyUpdate
from storefront.repos.currency_repo import CurrencyRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CurrencyService:
    def __init__(self, db: Session):
        self.repo = CurrencyRepo(db)

    def list_active(self) -> List[CurrencyModel]:
        return self.repo.active()

    def base(self) -> CurrencyModel:
        currency = self.repo.base()
        if not currency:
            raise NotFoundError("Base currency not configured")
        return currency

    def convert(self, from_code: str, to_code: str, amount) -> Dict[str, Any]:
        source = self.repo.get_by_code(from_code)
        target = self.repo.get_by_code(to_code)
        if not source or not target or not source.is_active or not target.is_active:
            raise ValidationFailed("Invalid currency code")

        return {
            "from_currency": source.code,
            "to_currency": target.code,
            "amount": pricing.money(amount),
            "converted_amount": pricing.convert_amount(amount, source.exchange_rate, target.exchange_rate),
        }

    def _get(self, currency_id: int) -> CurrencyModel:
        currency = self.repo.get(currency_id)
        if not currency:
            raise NotFoundError("Currency not found")
        return currency

    def create(self, payload: CurrencyIn) -> CurrencyModel:
        if self.repo.get_by_code(payload.code):
            raise ValidationFailed(f"Currency {payload.code} already exists")
        created = self.repo.create(CurrencyModel(**payload.model_dump()))
        logger.info(f"Currency {created.code} created")
        return created

    def update(self, currency_id: int, payload: CurrencyUpdate) -> CurrencyModel:
        currency = self._get(currency_id)
        for field, value in payload.model_dump(exclude_unset=True, exclude_none=True).items():
            setattr(currency, field, value)
        return self.repo.save(currency)

    def delete(self, currency_id: int) -> None:
        currency = self._get(currency_id)
        if currency.is_base_currency:
            raise ValidationFailed("Cannot delete the base currency")
        self.repo.delete(currency)
        logger.info(f"Currency {currency.code} deleted")

    def set_base(self, currency_id: int) -> CurrencyModel:
        currency = self._get(currency_id)
        self.repo.clear_base()
        currency.is_base_currency = True
        currency.exchange_rate = 1
        currency.is_active = True
        logger.info(f"Base currency set to {currency.code}")
        return self.repo.save(currency)
