from typing import Dict, Any
from sqlalchemy.orm import Session
from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.domain.errors import InvalidInput, InvalidState, NotFound, Unavailable
from app.repos.cart_repo import CartRepo
from app.services.catalog_client import CatalogClient
from app.services.pricing import cart_subtotal
from app.utils.logging import get_logger

logger = get_logger(__name__)


class CartService:
    """
    Simple cqrs use cases for the cart domain
    commands (add, remove, clear) modify state
    query (get) read only
    one cart per user, created lazily on first add
    """

    def __init__(self, db: Session, catalog: CatalogClient):
        self.repo = CartRepo(db)
        self.catalog = catalog

    #query
    def get_cart(self, user_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        #no cart is a normal empty state, not an error
        if not cart:
            return {"cart_id": None, "items": [], "total_cents": 0, "updated_at": None}

        return self._view(cart)

    def get_cart_lines(self, user_id: int) -> tuple[CartModel | None, list[CartItemModel]]:
        cart = self.repo.get_cart_by_user(user_id)
        if not cart:
            return None, []
        return cart, self.repo.get_cart_items(cart.id)

    def _view(self, cart: CartModel) -> Dict[str, Any]:
        items = self.repo.get_cart_items(cart.id)

        #total always recomputed from lines, never stored
        return {
            "cart_id": cart.id,
            "items": [
                {
                    "menu_item_id": i.menu_item_id,
                    "restaurant_id": i.restaurant_id,
                    "name": i.name,
                    "unit_price_cents": i.unit_price_cents,
                    "qty": i.qty,
                    "line_total_cents": i.unit_price_cents * i.qty,
                }
                for i in items
            ],
            "total_cents": cart_subtotal(items),
            "updated_at": cart.updated_at,
        }

    #commands
    def add_item(self, user_id: int, menu_item_id: int, qty: int) -> Dict[str, Any]:
        if qty is None or qty < 1:
            raise InvalidInput("Quantity must be at least 1")

        logger.info(f"Resolving menu item {menu_item_id} in catalog")
        menu_item = self.catalog.resolve_menu_item(menu_item_id)

        if not menu_item.available:
            raise Unavailable("Menu item is not available")

        cart = self.repo.get_or_create_cart(user_id)

        try:
            # increment in place first, price stays locked from the first add
            updated = self.repo.increment_item(cart.id, menu_item_id, qty)

            if not updated:
                inserted = self.repo.insert_item(
                    CartItemModel(
                        cart_id=cart.id,
                        menu_item_id=menu_item_id,
                        restaurant_id=menu_item.restaurant_id,
                        name=menu_item.name,
                        unit_price_cents=menu_item.unit_price_cents,
                        qty=qty,
                    )
                )
                #lost the insert race, the other request created the line
                if not inserted and not self.repo.increment_item(cart.id, menu_item_id, qty):
                    #neither insert nor increment landed, the cart was cleared or checked out meanwhile
                    raise InvalidState("Cart was modified concurrently, please retry")

            self.repo.touch_cart(cart.id)
            self.repo.commit()

        except Exception as e:
            logger.error(f"Error while adding item {menu_item_id} to cart of user {user_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(f"Added {qty} x menu item {menu_item_id} to cart {cart.id} (user {user_id})")

        return self.get_cart(user_id)

    def remove_item(self, user_id: int, menu_item_id: int) -> Dict[str, Any]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            raise NotFound("Cart not found")

        deleted = self.repo.delete_cart_item(cart.id, menu_item_id)
        if not deleted:
            self.repo.rollback()
            raise NotFound("Item not found in cart")

        self.repo.touch_cart(cart.id)
        self.repo.commit()

        logger.info(f"Menu item {menu_item_id} removed from cart {cart.id}")

        return self.get_cart(user_id)

    def clear_cart(self, user_id: int) -> Dict[str, str]:
        cart = self.repo.get_cart_by_user(user_id)

        if not cart:
            return {"message": "Cart already empty"}

        self.repo.delete_cart(cart.id)
        self.repo.commit()

        logger.info(f"Cart {cart.id} of user {user_id} cleared")

        return {"message": "Cart cleared successfully"}
