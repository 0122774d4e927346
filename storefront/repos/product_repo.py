# storefront/repos/product_repo.py
from typing import List, Optional
from sqlalchemy import select, delete
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.cart_item import CartItemModel


class ProductRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_product(self, product_id: int) -> ProductModel | None:
        return self.db.get(ProductModel, product_id)

    def get_products(self, product_ids) -> dict[int, ProductModel]:
        if not product_ids:
            return {}
        products = self.db.execute(
            select(ProductModel).where(ProductModel.id.in_(list(product_ids)))
        ).scalars().all()
        return {p.id: p for p in products}

    def list_products(
        self,
        status: Optional[str] = None,
        merchant_id: Optional[int] = None,
    ) -> List[ProductModel]:
        stmt = select(ProductModel)
        if status:
            stmt = stmt.where(ProductModel.status == status)
        if merchant_id is not None:
            stmt = stmt.where(ProductModel.merchant_id == merchant_id)
        stmt = stmt.order_by(ProductModel.created_at.desc(), ProductModel.id.desc())
        return list(self.db.execute(stmt).scalars().all())

    def create_product(self, product: ProductModel) -> ProductModel:
        self.db.add(product)
        self.db.commit()
        self.db.refresh(product)
        return product

    def update_status(self, product: ProductModel, status: str) -> ProductModel:
        product.status = status
        self.db.commit()
        self.db.refresh(product)
        return product

    def delete_product(self, product: ProductModel) -> None:
        # sqlite nie wymusza ON DELETE CASCADE
        self.db.execute(delete(CartItemModel).where(CartItemModel.product_id == product.id))
        self.db.delete(product)
        self.db.commit()
