# app/services/auth_guard.py
from dataclasses import dataclass

from app.domain.enums import Role
from app.domain.errors import NotFound
from app.domain.schemas import Identity
from app.services.catalog_client import CatalogClient
from app.utils.logging import get_logger

logger = get_logger(__name__)


@dataclass(frozen=True)
class Decision:
    allowed: bool
    reason: str = ""

    def __bool__(self) -> bool:
        return self.allowed


ALLOW = Decision(True)


class AuthorizationGuard:
    """
    Role + ownership checks for restaurant-side operations.
    Returns a Decision, the caller decides which error to raise.
    """

    def __init__(self, catalog: CatalogClient):
        self.catalog = catalog

    def _owns_restaurant(self, user_id: int, restaurant_id: int) -> bool:
        try:
            restaurant = self.catalog.resolve_restaurant(restaurant_id)
        except NotFound:
            return False
        return restaurant.owner_id == user_id

    def can_update_order(self, identity: Identity, restaurant_id: int) -> Decision:
        if identity.role == Role.ADMIN:
            return ALLOW

        if identity.role != Role.OWNER:
            return Decision(False, "Only restaurant staff can update order status")

        if not self._owns_restaurant(identity.user_id, restaurant_id):
            logger.warning(
                f"User {identity.user_id} tried to update an order of restaurant {restaurant_id}"
            )
            return Decision(False, "Unauthorized to update this order")

        return ALLOW

    def can_view_restaurant_orders(self, owner_id: int, restaurant_id: int) -> Decision:
        if not self._owns_restaurant(owner_id, restaurant_id):
            return Decision(False, "Restaurant not found or unauthorized")
        return ALLOW
