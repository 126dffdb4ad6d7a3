#import all models so SQLAlchemy registers them in Base.metadata

from app.data.models.cart import CartModel
from app.data.models.cart_item import CartItemModel
from app.data.models.order import OrderModel

__all__ = ["CartModel", "CartItemModel", "OrderModel"]
