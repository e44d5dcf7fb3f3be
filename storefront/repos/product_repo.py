# storefront/repos/product_repo.py
from typing import List, Tuple

from sqlalchemy import select, func, or_, update, case
from sqlalchemy.orm import Session, selectinload

from storefront.data.models.product import ProductModel, VariantModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_variant(self, product_id: int, variant_id: int) -> VariantModel | None:
        return self.db.execute(
            select(VariantModel).where(
                VariantModel.id == variant_id,
                VariantModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def list_products(
        self,
        category: str | None = None,
        query: str | None = None,
        page: int = 1,
        limit: int = 20,
    ) -> Tuple[List[ProductModel], int]:
        stmt = select(ProductModel)
        if category:
            stmt = stmt.where(ProductModel.category == category)
        if query:
            pattern = f"%{query.lower()}%"
            stmt = stmt.where(
                or_(
                    func.lower(ProductModel.name).like(pattern),
                    func.lower(ProductModel.description).like(pattern),
                    func.lower(ProductModel.category).like(pattern),
                )
            )

        total = self.db.execute(select(func.count()).select_from(stmt.subquery())).scalar_one()
        products = self.db.execute(
            stmt.options(selectinload(ProductModel.variants))
            .order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
            .offset((page - 1) * limit)
            .limit(limit)
        ).scalars().all()
        return list(products), total

    def add(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def add_all(self, products: List[ProductModel]) -> List[ProductModel]:
        self.db.add_all(products)
        self.db.commit()
        for p in products:
            self.db.refresh(p)
        return products

    def save(self, product: ProductModel) -> ProductModel:
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete(self, product: ProductModel) -> None:
        self.db.delete(product)
        self.db.commit()

    def count(self) -> int:
        return self.db.execute(select(func.count(ProductModel.id))).scalar_one()

    # ---------------------------------------------------------------
    # stock
    # ---------------------------------------------------------------
    def decrement_stock(self, variant_id: int, quantity: int) -> int:
        """
        Warunkowy UPDATE - tylko gdy stan >= quantity.
        Zwraca rowcount (0 = za malo towaru). Bez commita - czesc transakcji zamowienia.
        """
        result = self.db.execute(
            update(VariantModel)
            .where(VariantModel.id == variant_id, VariantModel.quantity >= quantity)
            .values(quantity=VariantModel.quantity - quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    def increment_stock(self, variant_id: int, quantity: int) -> int:
        result = self.db.execute(
            update(VariantModel)
            .where(VariantModel.id == variant_id)
            .values(quantity=VariantModel.quantity + quantity)
            .execution_options(synchronize_session=False)
        )
        return result.rowcount

    # ---------------------------------------------------------------
    # reporting
    # ---------------------------------------------------------------
    def inventory_by_category(self, low_stock_threshold: int = 10):
        rows = self.db.execute(
            select(
                ProductModel.category,
                func.count(VariantModel.id),
                func.coalesce(func.sum(VariantModel.quantity), 0),
                func.avg(VariantModel.price),
                func.sum(case((VariantModel.quantity < low_stock_threshold, 1), else_=0)),
                func.sum(case((VariantModel.quantity == 0, 1), else_=0)),
            )
            .join(VariantModel, VariantModel.product_id == ProductModel.id)
            .group_by(ProductModel.category)
            .order_by(ProductModel.category)
        ).all()
        return rows
