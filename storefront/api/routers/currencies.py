# storefront/api/routers/currencies.py
from typing import List

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import ConvertIn, ConvertOut, CurrencyIn, CurrencyOut, CurrencyUpdate, MessageOut
from storefront.services.currency_service import CurrencyService

router = APIRouter(prefix="/currencies", tags=["currencies"])


@router.get("", response_model=List[CurrencyOut])
def list_currencies(db: Session = Depends(get_db)):
    return CurrencyService(db).list_active()


@router.get("/base", response_model=CurrencyOut)
def base_currency(db: Session = Depends(get_db)):
    return CurrencyService(db).base()


@router.post("/convert", response_model=ConvertOut)
def convert(payload: ConvertIn, db: Session = Depends(get_db)):
    return CurrencyService(db).convert(payload.from_currency, payload.to_currency, payload.amount)


@router.post("", response_model=CurrencyOut, status_code=201, dependencies=[Depends(require_admin)])
def create_currency(payload: CurrencyIn, db: Session = Depends(get_db)):
    return CurrencyService(db).create(payload)


@router.put("/{currency_id}", response_model=CurrencyOut, dependencies=[Depends(require_admin)])
def update_currency(currency_id: int, payload: CurrencyUpdate, db: Session = Depends(get_db)):
    return CurrencyService(db).update(currency_id, payload)


@router.delete("/{currency_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
def delete_currency(currency_id: int, db: Session = Depends(get_db)):
    CurrencyService(db).delete(currency_id)
    return {"message": "Currency deleted"}


@router.patch("/{currency_id}/set-base", response_model=CurrencyOut, dependencies=[Depends(require_admin)])
def set_base_currency(currency_id: int, db: Session = Depends(get_db)):
    return CurrencyService(db).set_base(currency_id)
