# storefront/repos/cart_repo.py
from typing import List
from sqlalchemy import select, update, delete
from sqlalchemy.orm import Session

from storefront.data.models.cart import CartModel
from storefront.data.models.cart_item import CartItemModel
from storefront.data.models.product import ProductModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def create_cart(self, cart: CartModel) -> CartModel:
        self.db.add(cart)
        self.db.flush()
        return cart

    def get_cart_items_with_products(self, cart_id: int) -> List[tuple[CartItemModel, ProductModel]]:
        rows = self.db.execute(
            select(CartItemModel, ProductModel)
            .join(ProductModel, ProductModel.id == CartItemModel.product_id)
            .where(CartItemModel.cart_id == cart_id)
            .order_by(CartItemModel.id)
        ).all()
        return [(item, product) for item, product in rows]

    def get_cart_item(self, cart_id: int, product_id: int) -> CartItemModel | None:
        return self.db.execute(
            select(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        ).scalar_one_or_none()

    def add_cart_item(self, item: CartItemModel) -> CartItemModel:
        self.db.add(item)
        self.db.flush()
        return item

    def delete_cart_item(self, cart_id: int, product_id: int) -> int:
        res = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.product_id == product_id,
            )
        )
        return res.rowcount

    def delete_cart(self, cart_id: int) -> None:
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        self.db.execute(delete(CartModel).where(CartModel.id == cart_id))

    def update_cart_version(self, cart_id: int, old_version: int, new_data: dict) -> int:
        # update carts set version = N+1 where id = X and version = N
        res = self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id, CartModel.version == old_version)
            .values(**new_data)
            .execution_options(synchronize_session=False)
        )
        return res.rowcount

    def commit(self):
        self.db.commit()

    def rollback(self):
        self.db.rollback()
