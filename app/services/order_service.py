# app/services/order_service.py
from datetime import datetime, timezone

import redis
from sqlalchemy.orm import Session

from app.data.models.order import OrderModel
from app.domain.enums import (
    NON_CANCELLABLE,
    OrderStatus,
    PaymentStatus,
    PaymentType,
    can_transition,
)
from app.domain.errors import InvalidState, InvalidTransition, NotFound, Unauthorized
from app.domain.schemas import Identity, OrderOut
from app.repos.cart_repo import CartRepo
from app.repos.order_repo import OrderRepo
from app.services.address_client import AddressClient
from app.services.auth_guard import AuthorizationGuard
from app.services.cart_service import CartService
from app.services.catalog_client import CatalogClient
from app.services.lock_service import LockService
from app.services.pricing import cart_subtotal, compute_pricing
from app.utils.settings import CHECKOUT_LOCK_TTL_SECONDS
from app.utils.logging import get_logger

logger = get_logger(__name__)


class OrderService:
    """
    Order domain: checkout from the cart and the order status state machine.
    The customer owns an order for read/cancel, the restaurant owns it for
    status changes (checked by the AuthorizationGuard).
    """

    def __init__(
        self,
        db: Session,
        catalog: CatalogClient,
        addresses: AddressClient,
        lock_service: LockService,
        guard: AuthorizationGuard | None = None,
    ):
        self.repo = OrderRepo(db)
        self.cart_repo = CartRepo(db)
        self.carts = CartService(db, catalog)
        self.catalog = catalog
        self.addresses = addresses
        self.lock_service = lock_service
        self.guard = guard or AuthorizationGuard(catalog)

    def create_order_from_cart(
        self,
        user_id: int,
        delivery_address_id: int | None = None,
        payment_type: PaymentType = PaymentType.COD,
        special_instructions: str | None = None,
    ) -> OrderOut:
        """
        Use Case: create an order from the user's cart.

        1. cart must not be empty
        2. all lines from one restaurant
        3. restaurant exists and is open
        4. delivery address (optional) belongs to the user
        5. pricing
        6. persist order CREATED
        7. drop the cart (same transaction)
        """
        token = self.lock_service.acquire_checkout_lock(user_id, ttl=CHECKOUT_LOCK_TTL_SECONDS)
        if not token:
            raise InvalidState("Checkout already in progress")

        try:
            return self._checkout(user_id, delivery_address_id, payment_type, special_instructions)
        finally:
            #the key expires after its TTL anyway
            try:
                self.lock_service.release_checkout_lock(user_id, token)
            except redis.RedisError as e:
                logger.warning(f"Could not release checkout lock for user {user_id}: {e}")

    def _checkout(
        self,
        user_id: int,
        delivery_address_id: int | None,
        payment_type: PaymentType,
        special_instructions: str | None,
    ) -> OrderOut:
        cart, items = self.carts.get_cart_lines(user_id)
        if not items:
            raise InvalidState("Cart is empty")

        restaurant_ids = {i.restaurant_id for i in items}
        if len(restaurant_ids) > 1:
            raise InvalidState("Cart items must be from the same restaurant")

        restaurant_id = items[0].restaurant_id

        restaurant = self.catalog.resolve_restaurant(restaurant_id)
        if not restaurant.is_open:
            raise InvalidState("Restaurant is currently closed")

        delivery_address = None
        if delivery_address_id is not None:
            address = self.addresses.resolve_address(delivery_address_id, user_id)
            #snapshot by value
            delivery_address = {
                "address_line": address.address_line,
                "city": address.city,
                "postal_code": address.postal_code,
                "lat": address.lat,
                "lon": address.lon,
            }

        payment_type = PaymentType(payment_type)
        pricing = compute_pricing(cart_subtotal(items), payment_type)

        order = OrderModel(
            user_id=user_id,
            restaurant_id=restaurant_id,
            delivery_address=delivery_address,
            items=[
                {
                    "menu_item_id": i.menu_item_id,
                    "name": i.name,
                    "qty": i.qty,
                    "unit_price_cents": i.unit_price_cents,
                }
                for i in items
            ],
            subtotal_cents=pricing.subtotal_cents,
            tax_cents=pricing.tax_cents,
            delivery_fee_cents=pricing.delivery_fee_cents,
            total_cents=pricing.total_cents,
            payment_type=payment_type.value,
            payment_status=(
                PaymentStatus.PENDING.value
                if payment_type == PaymentType.COD
                else PaymentStatus.NOT_REQUESTED.value
            ),
            status=OrderStatus.CREATED.value,
            special_instructions=special_instructions or None,
        )

        try:
            self.repo.add_order(order)
            #the order replaces the cart
            self.cart_repo.delete_cart(cart.id)
            self.repo.commit()
        except Exception as e:
            logger.error(f"Checkout failed for user {user_id}: {e}")
            self.repo.rollback()
            raise

        logger.info(
            f"Order {order.id} created from cart {cart.id} "
            f"(restaurant {restaurant_id}, total {pricing.total_cents})"
        )

        return OrderOut.model_validate(order)

    def get_order(self, order_id: int, user_id: int) -> OrderOut:
        order = self._get_owned(order_id, user_id)
        return OrderOut.model_validate(order)

    def list_orders(self, user_id: int, status: OrderStatus | None = None) -> list[OrderOut]:
        orders = self.repo.list_by_user(user_id, status.value if status else None)
        return [OrderOut.model_validate(o) for o in orders]

    def list_restaurant_orders(
        self,
        restaurant_id: int,
        owner_id: int,
        status: OrderStatus | None = None,
    ) -> list[OrderOut]:
        decision = self.guard.can_view_restaurant_orders(owner_id, restaurant_id)
        if not decision:
            raise Unauthorized(decision.reason)

        orders = self.repo.list_by_restaurant(restaurant_id, status.value if status else None)
        return [OrderOut.model_validate(o) for o in orders]

    def cancel_order(self, order_id: int, user_id: int) -> OrderOut:
        order = self._get_owned(order_id, user_id)
        current = OrderStatus(order.status)

        if current in NON_CANCELLABLE:
            if current == OrderStatus.OUT_FOR_DELIVERY:
                raise InvalidState("Cannot cancel order that is out for delivery")
            raise InvalidState(f"Cannot cancel order with status: {current.value}")

        rowcount = self.repo.update_if_status(
            order_id=order.id,
            expected_status=current.value,
            new_data={
                "status": OrderStatus.CANCELLED.value,
                "cancelled_at": datetime.now(timezone.utc),
            },
        )

        if rowcount == 0:
            self.repo.rollback()
            raise InvalidState("Order was modified concurrently, please retry")

        self.repo.commit()
        self.repo.refresh(order)

        logger.info(f"Order {order.id} cancelled by user {user_id} (was {current.value})")

        return OrderOut.model_validate(order)

    def update_status(self, order_id: int, new_status: OrderStatus, requester: Identity) -> OrderOut:
        order = self.repo.get_order(order_id)
        if not order:
            raise NotFound("Order not found")

        decision = self.guard.can_update_order(requester, order.restaurant_id)
        if not decision:
            raise Unauthorized(decision.reason)

        current = OrderStatus(order.status)
        new_status = OrderStatus(new_status)

        if not can_transition(current, new_status):
            logger.warning(f"Rejected transition {current.value} -> {new_status.value} on order {order.id}")
            raise InvalidTransition(current.value, new_status.value)

        new_data = {"status": new_status.value}
        if new_status == OrderStatus.DELIVERED:
            new_data["delivered_at"] = datetime.now(timezone.utc)

        #conditioned on the status we just read
        rowcount = self.repo.update_if_status(order.id, current.value, new_data)

        if rowcount == 0:
            self.repo.rollback()
            fresh = self.repo.get_order(order.id)
            raise InvalidTransition(fresh.status if fresh else current.value, new_status.value)

        self.repo.commit()
        self.repo.refresh(order)

        logger.info(
            f"Order {order.id} moved {current.value} -> {new_status.value} "
            f"by {requester.role.value} {requester.user_id}"
        )

        return OrderOut.model_validate(order)

    def _get_owned(self, order_id: int, user_id: int) -> OrderModel:
        #someone else's order is reported exactly like a missing one
        order = self.repo.get_user_order(order_id, user_id)
        if not order:
            raise NotFound("Order not found")
        return order
