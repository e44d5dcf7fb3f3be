# storefront/api/routers/wishlist.py
from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from storefront.api.deps import get_current_user
from storefront.data.database import get_db
from storefront.data.models.user import UserModel
from storefront.domain.schemas import WishlistAddIn, WishlistOut
from storefront.services.wishlist_service import WishlistService

router = APIRouter(prefix="/wishlist", tags=["wishlist"])


@router.get("", response_model=WishlistOut)
def get_wishlist(user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return WishlistService(db).get(user.id)


@router.post("", response_model=WishlistOut)
def add_to_wishlist(payload: WishlistAddIn, user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return WishlistService(db).add(user.id, payload.product_id)


@router.delete("/{product_id}", response_model=WishlistOut)
def remove_from_wishlist(product_id: int, user: UserModel = Depends(get_current_user), db: Session = Depends(get_db)):
    return WishlistService(db).remove(user.id, product_id)
