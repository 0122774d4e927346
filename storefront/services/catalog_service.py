# storefront/services/catalog_service.py
from typing import Dict, Any, List, Optional
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel, PRODUCT_STATUSES
from storefront.data.models.user import UserModel
from storefront.domain.errors import NotFoundError, ForbiddenError, InvalidArgumentError
from storefront.domain.pricing import effective_unit_price, money
from storefront.domain.schemas import ProductIn
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def product_to_dict(product: ProductModel) -> Dict[str, Any]:
    return {
        "id": product.id,
        "merchant_id": product.merchant_id,
        "name": product.name,
        "description": product.description,
        "image": product.image,
        "category": product.category,
        "price": product.price,
        "discount": product.discount,
        "effective_price": money(effective_unit_price(product.price, product.discount)),
        "quantity": product.quantity,
        "status": product.status,
        "created_at": product.created_at,
    }


class CatalogService:
    """
    Katalog produktow. Sklep widzi tylko approved,
    merchant dodaje (pending), admin zmienia status.
    """

    def __init__(self, db: Session):
        self.repo = ProductRepo(db)

    #query
    def list_approved(self) -> List[Dict[str, Any]]:
        return [product_to_dict(p) for p in self.repo.list_products(status="approved")]

    def list_all(self, status: Optional[str] = None) -> List[Dict[str, Any]]:
        if status and status not in PRODUCT_STATUSES:
            raise InvalidArgumentError(f"Unknown product status '{status}'")
        return [product_to_dict(p) for p in self.repo.list_products(status=status)]

    def list_by_merchant(self, merchant_id: int) -> List[Dict[str, Any]]:
        return [product_to_dict(p) for p in self.repo.list_products(merchant_id=merchant_id)]

    def get_product(self, product_id: int) -> ProductModel:
        product = self.repo.get_product(product_id)
        if not product:
            raise NotFoundError("Product not found")
        return product

    def get_by_id(self, product_id: int) -> Dict[str, Any]:
        return product_to_dict(self.get_product(product_id))

    #commands
    def create_product(self, merchant: UserModel, payload: ProductIn) -> Dict[str, Any]:
        product = ProductModel(
            merchant_id=merchant.id,
            name=payload.name,
            description=payload.description,
            image=payload.image,
            category=payload.category,
            price=payload.price,
            discount=payload.discount,
            quantity=payload.quantity,
            status="pending",
        )
        created = self.repo.create_product(product)
        logger.info(f"Merchant {merchant.id} submitted product {created.id} for approval")
        return product_to_dict(created)

    def set_status(self, product_id: int, status: str) -> Dict[str, Any]:
        if status not in PRODUCT_STATUSES:
            raise InvalidArgumentError(f"Unknown product status '{status}'")
        product = self.get_product(product_id)
        previous = product.status
        updated = self.repo.update_status(product, status)
        logger.info(f"Product {product_id} status {previous} -> {status}")
        return product_to_dict(updated)

    def delete_product(self, user: UserModel, product_id: int) -> None:
        product = self.get_product(product_id)
        if user.role != "admin" and product.merchant_id != user.id:
            raise ForbiddenError("You can only delete your own products")
        self.repo.delete_product(product)
        logger.info(f"Product {product_id} deleted by user {user.id}")
