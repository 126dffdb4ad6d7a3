# app/repos/cart_repo.py
from datetime import datetime, timezone

from sqlalchemy import select, update, delete
from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel


class CartRepo:
    def __init__(self, db: Session):
        self.db = db

    def get_cart_by_user(self, user_id: int) -> CartModel | None:
        return self.db.execute(
            select(CartModel).where(CartModel.user_id == user_id)
        ).scalar_one_or_none()

    def get_or_create_cart(self, user_id: int) -> CartModel:
        cart = self.get_cart_by_user(user_id)
        if cart:
            return cart

        #unique(user_id) decides who wins when two requests create the cart at once
        try:
            with self.db.begin_nested():
                cart = CartModel(user_id=user_id)
                self.db.add(cart)
            return cart
        except IntegrityError:
            return self.get_cart_by_user(user_id)

    def get_cart_items(self, cart_id: int) -> list[CartItemModel]:
        return list(
            self.db.execute(
                select(CartItemModel)
                .where(CartItemModel.cart_id == cart_id)
                .order_by(CartItemModel.id)
            ).scalars().all()
        )

    def increment_item(self, cart_id: int, menu_item_id: int, qty: int) -> int:
        """Atomic qty = qty + n in a single UPDATE; price is left alone."""
        result = self.db.execute(
            update(CartItemModel)
            .where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.menu_item_id == menu_item_id,
            )
            .values(qty=CartItemModel.qty + qty)
        )
        return result.rowcount

    def insert_item(self, item: CartItemModel) -> bool:
        """False when a concurrent request inserted the same line first."""
        try:
            with self.db.begin_nested():
                self.db.add(item)
            return True
        except IntegrityError:
            return False

    def delete_cart_item(self, cart_id: int, menu_item_id: int) -> int:
        result = self.db.execute(
            delete(CartItemModel).where(
                CartItemModel.cart_id == cart_id,
                CartItemModel.menu_item_id == menu_item_id,
            )
        )
        return result.rowcount

    def touch_cart(self, cart_id: int) -> None:
        self.db.execute(
            update(CartModel)
            .where(CartModel.id == cart_id)
            .values(updated_at=datetime.now(timezone.utc))
        )

    def delete_cart(self, cart_id: int) -> None:
        self.db.execute(delete(CartItemModel).where(CartItemModel.cart_id == cart_id))
        self.db.execute(delete(CartModel).where(CartModel.id == cart_id))

    def commit(self) -> None:
        self.db.commit()

    def rollback(self) -> None:
        self.db.rollback()
