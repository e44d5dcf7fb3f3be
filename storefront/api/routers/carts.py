# storefront/api/routers/carts.py
from fastapi import APIRouter, Depends, Request, Response
from sqlalchemy.orm import Session

from storefront.api.deps import (
    CART_COOKIE,
    clear_cookies,
    get_cart_owner,
    get_current_user,
    issue_cart_session,
)
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import CartAddIn, CartOut, CartUpdateIn
from storefront.services.cart_service import CartOwner, CartService

router = APIRouter(prefix="/cart", tags=["cart"])


def get_service(db: Session):
    return CartService(db)


@router.get("", response_model=CartOut)
def get_cart(owner: CartOwner = Depends(get_cart_owner), db: Session = Depends(get_db)):
    return get_service(db).get_cart(owner)


@router.post("/add", response_model=CartOut)
def add_item(
    payload: CartAddIn,
    response: Response,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db),
):
    if not owner.user_id and not owner.session_id:
        # pierwszy produkt goscia - wydaj ciasteczko koszyka
        owner.session_id = issue_cart_session(response)
    return get_service(db).add_item(owner, payload.product_id, payload.variant_id, payload.quantity)


@router.put("/items/{product_id}/{variant_id}", response_model=CartOut)
def update_item(
    product_id: int,
    variant_id: int,
    payload: CartUpdateIn,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db),
):
    return get_service(db).update_item(owner, product_id, variant_id, payload.quantity)


@router.delete("/items/{product_id}/{variant_id}", response_model=CartOut)
def remove_item(
    product_id: int,
    variant_id: int,
    owner: CartOwner = Depends(get_cart_owner),
    db: Session = Depends(get_db),
):
    return get_service(db).remove_item(owner, product_id, variant_id)


@router.delete("", response_model=CartOut)
def clear_cart(owner: CartOwner = Depends(get_cart_owner), db: Session = Depends(get_db)):
    return get_service(db).clear(owner)


@router.post("/save-for-later/{product_id}/{variant_id}", response_model=CartOut)
def save_for_later(
    product_id: int,
    variant_id: int,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    return get_service(db).save_for_later(user.id, product_id, variant_id)


@router.post("/merge-guest-cart", response_model=CartOut)
def merge_guest_cart(
    request: Request,
    response: Response,
    user: UserModel = Depends(get_current_user),
    db: Session = Depends(get_db),
):
    cart = get_service(db).merge_guest_cart(user.id, request.cookies.get(CART_COOKIE))
    clear_cookies(response, CART_COOKIE)
    return cart
