# storefront/services/product_service.py
import math
from typing import Any, Dict, List

from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel, VariantModel
from storefront.domain.exceptions import NotFoundError, ValidationFailed
from storefront.domain.schemas import ProductCreate, ProductUpdate
from storefront.repos.product_repo import ProductRepo
from storefront.services.image_host import ImageHostClient
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def _variants(payload_variants) -> List[VariantModel]:
    return [
        VariantModel(size=v.size, color=v.color, price=v.price, quantity=v.quantity)
        for v in payload_variants
    ]


class ProductService:
    def __init__(self, db: Session, image_host: ImageHostClient | None = None):
        self.repo = ProductRepo(db)
        self.image_host = image_host

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def list_products(self, category: str | None = None, query: str | None = None,
                      page: int = 1, limit: int = 20) -> Dict[str, Any]:
        products, total = self.repo.list_products(category=category, query=query, page=page, limit=limit)
        return {
            "products": products,
            "pagination": {
                "page": page,
                "limit": limit,
                "total": total,
                "pages": math.ceil(total / limit) if limit else 0,
            },
        }

    def search(self, query: str, page: int = 1, limit: int = 20) -> Dict[str, Any]:
        if not query or not query.strip():
            raise ValidationFailed("Search query is required")
        return self.list_products(query=query.strip(), page=page, limit=limit)

    def _build(self, payload: ProductCreate) -> ProductModel:
        return ProductModel(
            name=payload.name,
            description=payload.description,
            details=payload.details,
            category=payload.category,
            images=[img.model_dump() for img in payload.images],
            variants=_variants(payload.variants),
        )

    def create_product(self, payload: ProductCreate) -> ProductModel:
        created = self.repo.add(self._build(payload))
        logger.info(f"Product {created.id} created ({created.name}) with {len(created.variants)} variants")
        return created

    def bulk_create(self, payloads: List[ProductCreate]) -> List[ProductModel]:
        if not payloads:
            raise ValidationFailed("Please provide an array of products")
        created = self.repo.add_all([self._build(p) for p in payloads])
        logger.info(f"Bulk created {len(created)} products")
        return created

    def update_product(self, product_id: int, payload: ProductUpdate) -> ProductModel:
        product = self.get_product(product_id)
        data = payload.model_dump(exclude_unset=True)

        for field in ("name", "description", "details", "category"):
            if field in data and data[field] is not None:
                setattr(product, field, data[field])
        if payload.images is not None:
            product.images = [img.model_dump() for img in payload.images]
        if payload.variants is not None:
            # delete-orphan usuwa stare warianty
            product.variants = _variants(payload.variants)

        logger.info(f"Product {product_id} updated")
        return self.repo.save(product)

    def add_images(self, product_id: int, uploads: List[tuple]) -> ProductModel:
        """uploads: [(filename, bytes, content_type)] wysylane do image hosta."""
        product = self.get_product(product_id)
        if not uploads:
            raise ValidationFailed("No images provided")
        if not self.image_host:
            raise ValidationFailed("Image upload is not available")

        uploaded = [self.image_host.upload(*u) for u in uploads]
        # nowa lista - JSON kolumna nie sledzi mutacji in-place
        product.images = list(product.images or []) + uploaded
        logger.info(f"Uploaded {len(uploaded)} images for product {product_id}")
        return self.repo.save(product)

    def delete_product(self, product_id: int) -> None:
        product = self.get_product(product_id)
        self.repo.delete(product)
        logger.info(f"Product {product_id} deleted")

    def update_stock(self, product_id: int, variant_id: int, quantity: int) -> ProductModel:
        product = self.get_product(product_id)
        variant = next((v for v in product.variants if v.id == variant_id), None)
        if not variant:
            raise NotFoundError("Variant not found")
        variant.quantity = quantity
        logger.info(f"Stock of variant {variant_id} set to {quantity}")
        return self.repo.save(product)
