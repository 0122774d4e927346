# storefront/services/checkout_service.py
from decimal import Decimal
from typing import Dict, Any, List, Optional

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from storefront.data.models.product import ProductModel
from storefront.data.models.transaction import TransactionModel
from storefront.data.models.transaction_item import TransactionItemModel
from storefront.domain.errors import InvalidArgumentError, NotFoundError, StorefrontError
from storefront.domain.pricing import PricedLine, compute_total, money, subtotal
from storefront.domain.schemas import TransactionCreateIn, TransactionItemIn
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.repos.transaction_repo import TransactionRepo
from storefront.repos.user_repo import UserRepo
from storefront.services.cart_service import CartService
from storefront.services.coupon_service import CouponService
from storefront.services.notification_service import NotificationService
from storefront.services.payment_verifier import PaymentVerifier
from storefront.services.transaction_service import transaction_to_dict
from storefront.utils.settings import TOTAL_TOLERANCE
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


class CheckoutService:
    """
    Wycena koszyka i finalizacja zamowienia po udanej platnosci.

    finalize_order:
    1. weryfikuje platnosc u providera (jesli skonfigurowany)
    2. liczy total po stronie serwera i porownuje z kwota klienta
    3. w jednej transakcji bazy: zuzycie kuponu, zapis transakcji, usuniecie koszyka
    4. kolejkuje powiadomienie (blad tylko logowany)
    """

    def __init__(
        self,
        db: Session,
        notification_service: NotificationService | None = None,
        payment_verifier: PaymentVerifier | None = None,
    ):
        self.db = db
        self.carts = CartService(db)
        self.coupons = CouponService(db)
        self.cart_repo = CartRepo(db)
        self.products = ProductRepo(db)
        self.repo = TransactionRepo(db)
        self.users = UserRepo(db)
        self.notification_service = notification_service or NotificationService()
        self.payment_verifier = payment_verifier or PaymentVerifier()

    #query
    def compute_total(self, lines: List[PricedLine], applied: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        discount = applied["discount_amount"] if applied else Decimal("0.00")
        return {
            "subtotal": money(subtotal(lines)),
            "discount_amount": money(discount),
            "total": money(compute_total(lines, discount)),
        }

    def summary(self, user_id: int, code: Optional[str] = None) -> Dict[str, Any]:
        lines = self.carts.get_priced_lines(user_id)
        applied = None
        if code:
            applied = self.coupons.evaluate(self.coupons.validate(code), lines)

        totals = self.compute_total(lines, applied)
        return {"customer_id": user_id, **totals, "coupon": applied}

    def _snapshot(self, user_id: int, items: Optional[List[TransactionItemIn]]) -> List[tuple[ProductModel, int]]:
        if not items:
            return [(product, item.quantity) for item, product in self.carts.get_lines(user_id)]

        #to samo product_id kilka razy -> sumujemy ilosci
        quantities: Dict[int, int] = {}
        for item in items:
            quantities[item.product_id] = quantities.get(item.product_id, 0) + item.quantity

        products = self.products.get_products(quantities.keys())
        missing = [pid for pid in quantities if pid not in products]
        if missing:
            raise NotFoundError(f"Product {missing[0]} not found")
        return [(products[pid], qty) for pid, qty in quantities.items()]

    #commands
    def finalize_order(self, payload: TransactionCreateIn) -> Dict[str, Any]:
        user_id = payload.user_id

        self.payment_verifier.verify(
            payload.payment_method,
            payload.payment_id,
            order_id=payload.razorpay_order_id,
            signature=payload.razorpay_signature,
        )

        snapshot = self._snapshot(user_id, payload.items)
        if not snapshot:
            raise InvalidArgumentError("Cart is empty")

        lines = [
            PricedLine(
                product_id=product.id,
                merchant_id=product.merchant_id,
                price=product.price,
                discount=product.discount,
                quantity=quantity,
            )
            for product, quantity in snapshot
        ]

        coupon = None
        applied = None
        if payload.coupon_code:
            coupon = self.coupons.validate(payload.coupon_code, consuming=True)
            applied = self.coupons.evaluate(coupon, lines)

        totals = self.compute_total(lines, applied)
        client_total = money(payload.total_amount)
        if abs(totals["total"] - client_total) > TOTAL_TOLERANCE:
            logger.warning(
                f"Total mismatch for customer {user_id}: client {client_total}, server {totals['total']}"
            )
            raise InvalidArgumentError(
                f"Total amount {client_total} does not match order total {totals['total']}"
            )

        transaction = TransactionModel(
            user_id=user_id,
            total_amount=totals["total"],
            discount_amount=totals["discount_amount"],
            coupon_id=coupon.id if coupon else None,
            payment_method=payload.payment_method,
            payment_id=payload.payment_id,
            status=payload.status,
            items=[
                TransactionItemModel(
                    product_id=product.id,
                    merchant_id=product.merchant_id,
                    name=product.name,
                    quantity=quantity,
                    price=product.price,
                    discount=product.discount,
                )
                for product, quantity in snapshot
            ],
        )

        # kupon + transakcja + koszyk razem albo nic
        try:
            if coupon:
                self.coupons.consume(coupon.id)
            self.repo.add_transaction(transaction)
            cart = self.cart_repo.get_cart_by_user(user_id)
            if cart:
                self.cart_repo.delete_cart(cart.id)
            self.repo.commit()
        except (StorefrontError, SQLAlchemyError):
            self.repo.rollback()
            raise

        logger.info(
            f"Transaction {transaction.id} recorded for customer {user_id}: "
            f"{totals['total']} via {payload.payment_method} ({payload.payment_id})"
        )

        result = transaction_to_dict(transaction, {product.id: product for product, _ in snapshot})

        user = self.users.get_user(user_id)
        self.notification_service.send_order_confirmation(
            transaction.id,
            user.email if user else None,
            str(result["total_amount"]),
            transaction.payment_id,
            [
                {"name": i["name"], "quantity": i["quantity"], "line_total": str(i["line_total"])}
                for i in result["items"]
            ],
        )
        return result
