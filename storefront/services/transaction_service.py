# storefront/services/transaction_service.py
from typing import Dict, Any, List
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.transaction import TransactionModel
from storefront.data.models.transaction_item import TransactionItemModel
from storefront.domain.errors import NotFoundError
from storefront.domain.pricing import effective_unit_price, money
from storefront.repos.product_repo import ProductRepo
from storefront.repos.transaction_repo import TransactionRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.catalog_service import product_to_dict
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def item_to_dict(item: TransactionItemModel, product: ProductModel | None = None) -> Dict[str, Any]:
    return {
        "product_id": item.product_id,
        "merchant_id": item.merchant_id,
        "name": item.name,
        "quantity": item.quantity,
        "price": item.price,
        "discount": item.discount,
        "line_total": money(effective_unit_price(item.price, item.discount) * item.quantity),
        "product": product_to_dict(product) if product else None,
    }


def transaction_to_dict(
    transaction: TransactionModel,
    products: Dict[int, ProductModel] | None = None,
) -> Dict[str, Any]:
    products = products or {}
    return {
        "id": transaction.id,
        "user_id": transaction.user_id,
        "items": [item_to_dict(i, products.get(i.product_id)) for i in transaction.items],
        "total_amount": transaction.total_amount,
        "discount_amount": transaction.discount_amount,
        "coupon_id": transaction.coupon_id,
        "payment_method": transaction.payment_method,
        "payment_id": transaction.payment_id,
        "status": transaction.status,
        "created_at": transaction.created_at,
    }


class TransactionService:
    """
    Historia zakupow (append-only). Kwoty i ceny z chwili zakupu,
    aktualny produkt tylko doklejany do odpowiedzi.
    """

    def __init__(self, db: Session):
        self.repo = TransactionRepo(db)
        self.products = ProductRepo(db)
        self.users = UserRepo(db)

    def _products_for(self, transactions: List[TransactionModel]) -> Dict[int, ProductModel]:
        ids = {i.product_id for t in transactions for i in t.items}
        return self.products.get_products(ids)

    def get_transaction(self, transaction_id: int) -> Dict[str, Any]:
        transaction = self.repo.get_transaction(transaction_id)
        if not transaction:
            raise NotFoundError("Transaction not found")
        return transaction_to_dict(transaction, self._products_for([transaction]))

    def list_for_user(self, user_id: int) -> List[Dict[str, Any]]:
        transactions = self.repo.list_by_user(user_id)
        products = self._products_for(transactions)
        return [transaction_to_dict(t, products) for t in transactions]

    def update_status(self, transaction_id: int, status: str) -> Dict[str, Any]:
        transaction = self.repo.get_transaction(transaction_id)
        if not transaction:
            raise NotFoundError("Transaction not found")

        previous = transaction.status
        updated = self.repo.update_status(transaction, status)
        logger.info(f"Transaction {transaction_id} status {previous} -> {status}")
        return transaction_to_dict(updated, self._products_for([updated]))

    def list_merchant_customers(self, merchant_id: int) -> List[Dict[str, Any]]:
        """Transakcje zawierajace produkty sprzedawcy, tylko jego pozycje."""
        transactions = self.repo.list_by_merchant(merchant_id)
        products = self._products_for(transactions)
        customers = self.users.get_users({t.user_id for t in transactions})

        result = []
        for t in transactions:
            own = [i for i in t.items if i.merchant_id == merchant_id]
            items = [item_to_dict(i, products.get(i.product_id)) for i in own]
            customer = customers.get(t.user_id)
            result.append(
                {
                    "transaction_id": t.id,
                    "customer": {
                        "id": customer.id,
                        "first_name": customer.first_name,
                        "last_name": customer.last_name,
                        "email": customer.email,
                    } if customer else None,
                    "items": items,
                    "merchant_total": money(sum(i["line_total"] for i in items)),
                    "payment_method": t.payment_method,
                    "status": t.status,
                    "created_at": t.created_at,
                }
            )
        return result
