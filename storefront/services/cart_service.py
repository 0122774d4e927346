from datetime import datetime, timezone
from decimal import Decimal
from typing import Dict, Any, List
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel
from storefront.domain.errors import NotFoundError, InvalidArgumentError, ConflictError
from storefront.domain.pricing import PricedLine, money, subtotal
from storefront.repos.cart_repo import CartRepo
from storefront.repos.product_repo import ProductRepo
from storefront.utils.logging import get_logger

logger = get_logger(__name__)


def priced_line(item: CartItemModel, product: ProductModel) -> PricedLine:
    return PricedLine(
        product_id=product.id,
        merchant_id=product.merchant_id,
        price=product.price,
        discount=product.discount,
        quantity=item.quantity,
    )


class CartService:
    """
    Koszyk klienta: commands (add, remove, set_quantity, clear) modyfikuja stan,
    query (get_cart) tylko odczyt.
    Kazda komenda podbija version koszyka warunkowym updatem (optimistic locking).
    """

    def __init__(self, db: Session):
        self.repo = CartRepo(db)
        self.products = ProductRepo(db)

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return {"customer_id": user_id, "items": [], "subtotal": Decimal("0.00")}

        rows = self.repo.get_cart_items_with_products(cart.id)
        lines = [priced_line(item, product) for item, product in rows]

        return {
            "customer_id": user_id,
            "items": [
                {
                    "id": product.id,
                    "product_id": product.id,
                    "merchant_id": product.merchant_id,
                    "name": product.name,
                    "description": product.description,
                    "image": product.image,
                    "price": product.price,
                    "discount": product.discount,
                    "status": product.status,
                    "cart_quantity": item.quantity,
                    "unit_price": money(line.unit_price),
                    "line_total": money(line.total),
                }
                for (item, product), line in zip(rows, lines)
            ],
            "subtotal": money(subtotal(lines)),
        }

    def get_lines(self, user_id: int) -> List[tuple[CartItemModel, ProductModel]]:
        """Pozycje koszyka razem z aktualnym produktem, [] gdy brak koszyka."""
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return []
        return self.repo.get_cart_items_with_products(cart.id)

    def get_priced_lines(self, user_id: int) -> List[PricedLine]:
        return [priced_line(item, product) for item, product in self.get_lines(user_id)]

    #commands
    def add_item(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidArgumentError("Quantity must be at least 1")

        if not self.products.get_product(product_id):
            raise NotFoundError("Product not found")

        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            #koszyk tworzony leniwie przy pierwszym dodaniu
            try:
                cart = self.repo.create_cart(
                    CartModel(user_id=user_id, version=1, updated_at=datetime.now(timezone.utc))
                )
                self.repo.add_cart_item(
                    CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
                )
                self.repo.commit()
            except IntegrityError:
                #ktos inny utworzyl koszyk w tym samym czasie
                self.repo.rollback()
                raise ConflictError("Cart was modified concurrently, please retry")
            logger.info(f"Created cart {cart.id} for customer {user_id} with product {product_id}")
            return self.get_cart(user_id)

        existing_item = self.repo.get_cart_item(cart.id, product_id)

        if existing_item:
            logger.info(
                f"Product {product_id} already in cart {cart.id}, quantity "
                f"{existing_item.quantity} -> {existing_item.quantity + quantity}"
            )
            existing_item.quantity += quantity
        else:
            logger.info(f"Adding product {product_id} to cart {cart.id}")
            self.repo.add_cart_item(
                CartItemModel(cart_id=cart.id, product_id=product_id, quantity=quantity)
            )

        self._bump_version(cart)
        return self.get_cart(user_id)

    def remove_item(self, user_id: int, product_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            return self.get_cart(user_id)

        removed = self.repo.delete_cart_item(cart.id, product_id)
        if not removed:
            #brak pozycji to nie blad
            return self.get_cart(user_id)

        logger.info(f"Removed product {product_id} from cart {cart.id}")
        self._bump_version(cart)
        return self.get_cart(user_id)

    def set_quantity(self, user_id: int, product_id: int, quantity: int) -> Dict[str, Any]:
        if quantity < 1:
            raise InvalidArgumentError("Quantity must be at least 1")

        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            raise NotFoundError("Cart not found")

        item = self.repo.get_cart_item(cart.id, product_id)
        if not item:
            raise NotFoundError("Product is not in the cart")

        item.quantity = quantity
        self._bump_version(cart)

        logger.info(f"Cart {cart.id}: product {product_id} quantity set to {quantity}")
        return self.get_cart(user_id)

    def clear(self, user_id: int) -> None:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return
        self.repo.delete_cart(cart.id)
        self.repo.commit()
        logger.info(f"Cleared cart for customer {user_id}")

    def _bump_version(self, cart: CartModel) -> None:
        # update carts set version = N+1 where id = X and version = N
        rowcount = self.repo.update_cart_version(
            cart_id=cart.id,
            old_version=cart.version,
            new_data={
                "version": cart.version + 1,
                "updated_at": datetime.now(timezone.utc),
            },
        )

        if rowcount == 0:
            self.repo.rollback()
            raise ConflictError("Cart was modified concurrently, please retry")

        self.repo.commit()
