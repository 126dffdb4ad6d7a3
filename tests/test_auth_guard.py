"""
Authorization guard: explicit allow/deny decisions, no exceptions.
"""

from app.domain.enums import Role
from app.domain.schemas import Identity
from app.services.auth_guard import AuthorizationGuard


class TestCanUpdateOrder:

    def test_owner_of_restaurant(self, catalog):
        guard = AuthorizationGuard(catalog)
        decision = guard.can_update_order(Identity(user_id=100, role=Role.OWNER), 10)
        assert decision.allowed
        assert bool(decision)

    def test_owner_of_other_restaurant(self, catalog):
        guard = AuthorizationGuard(catalog)
        decision = guard.can_update_order(Identity(user_id=200, role=Role.OWNER), 10)
        assert not decision
        assert decision.reason == "Unauthorized to update this order"

    def test_admin_skips_ownership(self, catalog):
        guard = AuthorizationGuard(catalog)
        assert guard.can_update_order(Identity(user_id=5, role=Role.ADMIN), 10)

    def test_customer_denied(self, catalog):
        guard = AuthorizationGuard(catalog)
        assert not guard.can_update_order(Identity(user_id=100, role=Role.CUSTOMER), 10)

    def test_unknown_restaurant_is_a_deny(self, catalog):
        guard = AuthorizationGuard(catalog)
        assert not guard.can_update_order(Identity(user_id=100, role=Role.OWNER), 999)


class TestCanViewRestaurantOrders:

    def test_owner(self, catalog):
        assert AuthorizationGuard(catalog).can_view_restaurant_orders(200, 20)

    def test_not_owner(self, catalog):
        decision = AuthorizationGuard(catalog).can_view_restaurant_orders(100, 20)
        assert not decision
        assert "unauthorized" in decision.reason
