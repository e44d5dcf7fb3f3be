# storefront/services/cart_service.py
from dataclasses import dataclass
from datetime import timedelta
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.domain import pricing
from storefront.domain.exceptions import ConflictError, NotFoundError, ValidationFailed
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.wishlist_repo import WishlistRepo
from storefront.utils.settings import GUEST_CART_TTL_SECONDS
from storefront.utils.timeutil import utcnow
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass
class CartOwner:
    """Zalogowany user albo gosc z ciasteczkiem cart_session."""

    user_id: int | None = None
    session_id: str | None = None

    def __str__(self):
        return f"user:{self.user_id}" if self.user_id else f"guest:{self.session_id}"


def _image(product) -> str | None:
    images = product.images or []
    return images[0].get("url") if images else None


class CartService:
    """
    Koszyk jak w cqrs:
    commands (add, update, remove, clear, merge) modyfikuja stan i podbijaja version
    query (get_cart) tylko odczyt
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.wishlist = WishlistRepo(db)

    # -------------------------------------------------------------------
    # helpers
    # -------------------------------------------------------------------
    def _find_cart(self, owner: CartOwner) -> CartModel | None:
        if owner.user_id:
            return self.repo.get_cart_by_user(owner.user_id)
        if owner.session_id:
            return self.repo.get_cart_by_session(owner.session_id)
        return None

    def _get_or_create_cart(self, owner: CartOwner) -> CartModel:
        cart = self._find_cart(owner)
        if cart:
            return cart
        if not owner.user_id and not owner.session_id:
            raise ValidationFailed("No cart session")

        cart = CartModel(
            user_id=owner.user_id,
            session_id=None if owner.user_id else owner.session_id,
            version=1,
            expires_at=None if owner.user_id else utcnow() + timedelta(seconds=GUEST_CART_TTL_SECONDS),
        )
        created = self.repo.create_cart(cart)
        logger.info(f"Created cart {created.id} for {owner}")
        return created

    def _bump(self, cart: CartModel) -> None:
        """Optimistic locking: UPDATE ... WHERE version = stara; 0 wierszy = ktos nas wyprzedzil."""
        new_data = {"version": cart.version + 1, "updated_at": utcnow()}
        if cart.session_id:
            # gosc nadal robi zakupy - przedluz waznosc
            new_data["expires_at"] = utcnow() + timedelta(seconds=GUEST_CART_TTL_SECONDS)

        rowcount = self.repo.update_cart_version(cart.id, cart.version, new_data)
        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError("Cart was modified by another request, please retry")
        self.repo.commit()
        self.repo.refresh(cart)

    def _line_dict(self, item: CartItemModel) -> Dict[str, Any]:
        return {
            "product_id": item.product_id,
            "variant_id": item.variant_id,
            "name": item.product.name,
            "size": item.variant.size,
            "color": item.variant.color,
            "image": _image(item.product),
            "quantity": item.quantity,
            "price": pricing.money(item.price),
            "line_total": pricing.money(item.price * item.quantity),
        }

    def _render(self, cart: CartModel | None, message: str | None = None) -> Dict[str, Any]:
        if not cart:
            return {"items": [], "summary": pricing.empty_summary(), "message": message}
        items = self.repo.get_cart_items(cart.id)
        return {
            "items": [self._line_dict(i) for i in items],
            "summary": pricing.cart_summary((i.price, i.quantity) for i in items),
            "message": message,
        }

    def _variant_or_404(self, product_id: int, variant_id: int):
        product = self.products.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        variant = self.products.get_variant(product_id, variant_id)
        if not variant:
            raise NotFoundError("Product variant not found")
        return product, variant

    # -------------------------------------------------------------------
    # query
    # -------------------------------------------------------------------
    def get_cart(self, owner: CartOwner) -> Dict[str, Any]:
        return self._render(self._find_cart(owner))

    # -------------------------------------------------------------------
    # commands
    # -------------------------------------------------------------------
    def add_item(self, owner: CartOwner, product_id: int, variant_id: int, quantity: int = 1) -> Dict[str, Any]:
        if quantity <= 0:
            raise ValidationFailed("Quantity must be at least 1")

        product, variant = self._variant_or_404(product_id, variant_id)
        if quantity > variant.quantity:
            raise ValidationFailed(
                f"Only {variant.quantity} items available in stock",
                available_quantity=variant.quantity,
            )

        cart = self._get_or_create_cart(owner)
        existing = self.repo.get_cart_item(cart.id, product_id, variant_id)

        if existing:
            combined = existing.quantity + quantity
            if combined > variant.quantity:
                raise ValidationFailed(
                    f"Cannot add {quantity} more, only {variant.quantity} items available in stock",
                    available_quantity=variant.quantity,
                    current_cart_quantity=existing.quantity,
                )
            logger.info(f"Variant {variant_id} already in cart {cart.id}, quantity {existing.quantity} -> {combined}")
            existing.quantity = combined
            existing.price = variant.price  # odswiez snapshot ceny
        else:
            logger.info(f"Adding variant {variant_id} of product {product_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(
                    cart_id=cart.id,
                    product_id=product.id,
                    variant_id=variant.id,
                    quantity=quantity,
                    price=variant.price,
                )
            )

        self._bump(cart)
        return self._render(cart, "Item added to cart")

    def update_item(self, owner: CartOwner, product_id: int, variant_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise ValidationFailed("Quantity must be at least 1")

        cart = self._find_cart(owner)
        if not cart:
            raise NotFoundError("Cart not found")
        item = self.repo.get_cart_item(cart.id, product_id, variant_id)
        if not item:
            raise NotFoundError("Item not found in cart")

        _, variant = self._variant_or_404(product_id, variant_id)
        if quantity > variant.quantity:
            raise ValidationFailed(
                f"Only {variant.quantity} items available in stock",
                available_quantity=variant.quantity,
            )

        item.quantity = quantity
        item.price = variant.price
        self._bump(cart)
        return self._render(cart, "Cart updated")

    def remove_item(self, owner: CartOwner, product_id: int, variant_id: int) -> Dict[str, Any]:
        cart = self._find_cart(owner)
        if not cart:
            raise NotFoundError("Cart not found")

        if self.repo.delete_cart_item(cart.id, product_id, variant_id) == 0:
            self.repo.rollback()
            raise NotFoundError("Item not found in cart")

        self._bump(cart)
        logger.info(f"Variant {variant_id} removed from cart {cart.id}")
        return self._render(cart, "Item removed from cart")

    def clear(self, owner: CartOwner) -> Dict[str, Any]:
        cart = self._find_cart(owner)
        if cart:
            self.repo.delete_cart(cart)
            self.repo.commit()
            logger.info(f"Cart {cart.id} cleared for {owner}")
        return self._render(None, "Cart cleared")

    def save_for_later(self, user_id: int, product_id: int, variant_id: int) -> Dict[str, Any]:
        owner = CartOwner(user_id=user_id)
        cart = self._find_cart(owner)
        if not cart or not self.repo.get_cart_item(cart.id, product_id, variant_id):
            raise NotFoundError("Item not found in cart")

        self.repo.delete_cart_item(cart.id, product_id, variant_id)
        self.wishlist.add(user_id, product_id)
        self._bump(cart)
        logger.info(f"Product {product_id} moved from cart {cart.id} to wishlist of user {user_id}")
        return self._render(cart, "Item saved for later")

    def merge_guest_cart(self, user_id: int, session_id: str | None) -> Dict[str, Any]:
        """
        Przenosi pozycje z koszyka goscia do koszyka usera.
        Ilosci sie sumuja, ale nie wiecej niz stan magazynu; koszyk goscia jest usuwany.
        """
        owner = CartOwner(user_id=user_id)
        guest = self.repo.get_cart_by_session(session_id) if session_id else None
        if not guest:
            return self._render(self._find_cart(owner))

        guest_items: List[CartItemModel] = self.repo.get_cart_items(guest.id)
        cart = self._get_or_create_cart(owner)
        merged = 0

        for gi in guest_items:
            variant = self.products.get_variant(gi.product_id, gi.variant_id)
            if not variant or variant.quantity <= 0:
                continue
            existing = self.repo.get_cart_item(cart.id, gi.product_id, gi.variant_id)
            if existing:
                existing.quantity = min(existing.quantity + gi.quantity, variant.quantity)
                existing.price = variant.price
            else:
                self.repo.add_cart_item(
                    CartItemModel(
                        cart_id=cart.id,
                        product_id=gi.product_id,
                        variant_id=gi.variant_id,
                        quantity=min(gi.quantity, variant.quantity),
                        price=variant.price,
                    )
                )
            merged += 1

        self.repo.delete_cart(guest)
        self._bump(cart)
        logger.info(f"Merged {merged} lines from guest cart {guest.id} into cart {cart.id}")
        return self._render(cart, "Guest cart merged")
