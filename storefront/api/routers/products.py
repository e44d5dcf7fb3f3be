# storefront/api/routers/products.py
from typing import List

from fastapi import APIRouter, Depends, File, Query, UploadFile
from sqlalchemy.orm import Session

from storefront.api.deps import get_image_host, require_admin
from storefront.data.database import get_db
from storefront.domain.schemas import (
    BulkProductsIn,
    Category,
    MessageOut,
    ProductCreate,
    ProductListOut,
    ProductOut,
    ProductUpdate,
    StockUpdateIn,
)
from storefront.services.image_host import ImageHostClient
from storefront.services.product_service import ProductService

router = APIRouter(prefix="/products", tags=["products"])


def get_service(db: Session, image_host: ImageHostClient | None = None):
    return ProductService(db, image_host)


@router.get("", response_model=ProductListOut)
def list_products(
    category: Category | None = None,
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return get_service(db).list_products(category=category, page=page, limit=limit)


@router.get("/search", response_model=ProductListOut)
def search_products(
    q: str = Query(..., min_length=1),
    page: int = Query(1, ge=1),
    limit: int = Query(20, ge=1, le=100),
    db: Session = Depends(get_db),
):
    return get_service(db).search(q, page=page, limit=limit)


@router.get("/{product_id}", response_model=ProductOut)
def get_product(product_id: int, db: Session = Depends(get_db)):
    return get_service(db).get_product(product_id)


# ----------------------------------------------------------------------
# admin
# ----------------------------------------------------------------------

@router.post("", response_model=ProductOut, status_code=201, dependencies=[Depends(require_admin)])
def create_product(payload: ProductCreate, db: Session = Depends(get_db)):
    return get_service(db).create_product(payload)


@router.post("/bulk", response_model=List[ProductOut], status_code=201, dependencies=[Depends(require_admin)])
def bulk_create_products(payload: BulkProductsIn, db: Session = Depends(get_db)):
    return get_service(db).bulk_create(payload.products)


@router.put("/{product_id}", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_product(product_id: int, payload: ProductUpdate, db: Session = Depends(get_db)):
    return get_service(db).update_product(product_id, payload)


@router.delete("/{product_id}", response_model=MessageOut, dependencies=[Depends(require_admin)])
def delete_product(product_id: int, db: Session = Depends(get_db)):
    get_service(db).delete_product(product_id)
    return {"message": "Product deleted successfully"}


@router.patch("/{product_id}/stock", response_model=ProductOut, dependencies=[Depends(require_admin)])
def update_stock(product_id: int, payload: StockUpdateIn, db: Session = Depends(get_db)):
    return get_service(db).update_stock(product_id, payload.variant_id, payload.quantity)


@router.post("/{product_id}/images", response_model=ProductOut, dependencies=[Depends(require_admin)])
def upload_images(
    product_id: int,
    files: List[UploadFile] = File(...),
    db: Session = Depends(get_db),
    image_host: ImageHostClient = Depends(get_image_host),
):
    uploads = [(f.filename or "image", f.file.read(), f.content_type) for f in files]
    return get_service(db, image_host).add_images(product_id, uploads)
