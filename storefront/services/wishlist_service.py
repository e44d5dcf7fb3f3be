# storefront/services/wishlist_service.py
from typing import Any, Dict

from sqlalchemy.orm import Session

from storefront.domain.exceptions import NotFoundError
from storefront.repos.product_repo import ProductRepo
from storefront.repos.wishlist_repo import WishlistRepo


class WishlistService:
    def __init__(self, db: Session):
        self.repo = WishlistRepo(db)
        self.products = ProductRepo(db)

    def get(self, user_id: int) -> Dict[str, Any]:
        return {"products": [item.product for item in self.repo.items(user_id)]}

    def add(self, user_id: int, product_id: int) -> Dict[str, Any]:
        if not self.products.get_product(product_id):
            raise NotFoundError("Product not found")
        self.repo.add(user_id, product_id)
        self.repo.commit()
        return self.get(user_id)

    def remove(self, user_id: int, product_id: int) -> Dict[str, Any]:
        if not self.repo.items(user_id):
            raise NotFoundError("Wishlist not found")
        self.repo.remove(user_id, product_id)
        self.repo.commit()
        return self.get(user_id)
