# storefront/repos/cart_repo.py
from datetime import datetime
from typing import List

from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart(self, cart_id: int) -> CartModel | None:
        return self.db.get(CartModel, cart_id)

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_cart_by_session(self, session_id: str) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.session_id == session_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.commit()
        self.db.refresh(cart)
        return cart

    def get_cart_items(self, cart_id: int) -> List[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel).where(CartItemModel.cart_id == cart_id).order_by(CartItemModel.id)
            ).scalars().all()
        )

    def get_cart_item(self, cart_id: int, product_id: int, variant_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.variant_id == variant_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> None:
        self.db.add(item)

    def delete_cart_item(self, cart_id: int, product_id: int, variant_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
                CartItemModel.variant_id == variant_id,
            )
        )
        return result.rowcount

    def delete_cart(self, cart: CartModel) -> None:
        # bez commita - czesc wiekszej transakcji (zamowienie, merge)
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart.id))
        self.db.execute(delete(CartModel).where(CartModel.id == cart.id))

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        """Optimistic locking: UPDATE ... WHERE id = :id AND version = :old."""
        result = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def expired_guest_carts(self, now: datetime) -> List[CartModel]:
        return list(
            self.db.execute(
                select(CartModel).where(
                    CartModel.session_id.is_not(None),
                    CartModel.expires_at < now,
                )
            ).scalars().all()
        )

    def refresh(self, cart: CartModel) -> None:
        self.db.refresh(cart)

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
