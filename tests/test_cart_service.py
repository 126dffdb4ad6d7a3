"""
Cart store: lazy creation, atomic increments, price locking, idempotent clear.
"""

import pytest

from app.domain.errors import InvalidInput, InvalidState, NotFound, Unavailable
from app.repos.cart_repo import CartRepo


class TestGetCart:

    def test_untouched_user_gets_empty_cart(self, cart_service):
        cart = cart_service.get_cart(42)
        assert cart["items"] == []
        assert cart["total_cents"] == 0
        assert cart["cart_id"] is None


class TestAddItem:

    def test_creates_cart_lazily(self, cart_service):
        cart = cart_service.add_item(1, 1, 3)

        assert cart["cart_id"] is not None
        assert len(cart["items"]) == 1
        line = cart["items"][0]
        assert line["name"] == "Burger"
        assert line["qty"] == 3
        assert line["restaurant_id"] == 10
        assert line["line_total_cents"] == 1500
        assert cart["total_cents"] == 1500

    def test_same_item_increments_quantity(self, cart_service):
        for qty in (1, 2, 4):
            cart = cart_service.add_item(1, 1, qty)

        assert len(cart["items"]) == 1
        assert cart["items"][0]["qty"] == 7
        assert cart["total_cents"] == 3500

    def test_price_is_locked_from_first_add(self, cart_service, catalog):
        cart_service.add_item(1, 1, 1)
        catalog.set_price(1, 999)

        cart = cart_service.add_item(1, 1, 1)

        assert cart["items"][0]["unit_price_cents"] == 500
        assert cart["total_cents"] == 1000

    def test_total_spans_all_lines(self, cart_service):
        cart_service.add_item(1, 1, 2)
        cart = cart_service.add_item(1, 2, 3)
        assert cart["total_cents"] == 2 * 500 + 3 * 250

    def test_mixed_restaurants_allowed_at_add_time(self, cart_service):
        cart_service.add_item(1, 1, 1)
        cart = cart_service.add_item(1, 4, 1)
        assert {i["restaurant_id"] for i in cart["items"]} == {10, 20}

    def test_one_cart_per_user(self, cart_service, db):
        first = cart_service.add_item(1, 1, 1)
        second = cart_service.add_item(1, 2, 1)
        other = cart_service.add_item(2, 1, 1)

        assert first["cart_id"] == second["cart_id"]
        assert other["cart_id"] != first["cart_id"]
        assert CartRepo(db).get_cart_by_user(1).id == first["cart_id"]

    @pytest.mark.parametrize("qty", [0, -1])
    def test_rejects_non_positive_quantity(self, cart_service, qty):
        with pytest.raises(InvalidInput):
            cart_service.add_item(1, 1, qty)
        assert cart_service.get_cart(1)["items"] == []

    def test_unknown_menu_item(self, cart_service):
        with pytest.raises(NotFound, match="Menu item not found"):
            cart_service.add_item(1, 999, 1)

    def test_unavailable_menu_item(self, cart_service):
        with pytest.raises(Unavailable, match="not available"):
            cart_service.add_item(1, 3, 1)
        assert cart_service.get_cart(1)["cart_id"] is None

    def test_cart_dropped_mid_add_is_reported(self, cart_service, monkeypatch):
        cart_service.add_item(1, 2, 1)
        repo = cart_service.repo
        get_or_create = repo.get_or_create_cart

        def get_then_checkout_elsewhere(user_id):
            cart = get_or_create(user_id)
            repo.delete_cart(cart.id)
            return cart

        monkeypatch.setattr(repo, "get_or_create_cart", get_then_checkout_elsewhere)

        with pytest.raises(InvalidState, match="modified concurrently"):
            cart_service.add_item(1, 1, 3)

        # rolled back as a whole, nothing half-applied
        monkeypatch.undo()
        cart = cart_service.get_cart(1)
        assert [line["name"] for line in cart["items"]] == ["Fries"]


class TestCartRepoIncrement:

    def test_increment_missing_line_touches_nothing(self, db, cart_service):
        cart = cart_service.add_item(1, 1, 1)
        assert CartRepo(db).increment_item(cart["cart_id"], 2, 5) == 0

    def test_duplicate_insert_is_reported(self, db, cart_service):
        from app.data.models.cart_item import CartItemModel

        cart = cart_service.add_item(1, 1, 1)
        repo = CartRepo(db)
        inserted = repo.insert_item(
            CartItemModel(
                cart_id=cart["cart_id"],
                menu_item_id=1,
                restaurant_id=10,
                name="Burger",
                unit_price_cents=500,
                qty=1,
            )
        )
        assert inserted is False
        # savepoint rolled back, the session is still usable
        assert repo.increment_item(cart["cart_id"], 1, 2) == 1
        repo.commit()
        assert cart_service.get_cart(1)["items"][0]["qty"] == 3


class TestRemoveItem:

    def test_removes_line(self, cart_service):
        cart_service.add_item(1, 1, 1)
        cart_service.add_item(1, 2, 2)

        cart = cart_service.remove_item(1, 1)

        assert [i["menu_item_id"] for i in cart["items"]] == [2]
        assert cart["total_cents"] == 500

    def test_no_cart(self, cart_service):
        with pytest.raises(NotFound, match="Cart not found"):
            cart_service.remove_item(1, 1)

    def test_item_not_in_cart(self, cart_service):
        cart_service.add_item(1, 1, 1)
        with pytest.raises(NotFound, match="Item not found in cart"):
            cart_service.remove_item(1, 2)


class TestClearCart:

    def test_clear_then_clear_again(self, cart_service):
        cart_service.add_item(1, 1, 2)

        assert cart_service.clear_cart(1) == {"message": "Cart cleared successfully"}
        assert cart_service.clear_cart(1) == {"message": "Cart already empty"}
        assert cart_service.get_cart(1) == {
            "cart_id": None,
            "items": [],
            "total_cents": 0,
            "updated_at": None,
        }

    def test_clear_without_cart(self, cart_service):
        assert cart_service.clear_cart(5) == {"message": "Cart already empty"}

    def test_add_after_clear_starts_fresh(self, cart_service, catalog):
        cart_service.add_item(1, 1, 2)
        cart_service.clear_cart(1)
        catalog.set_price(1, 700)

        cart = cart_service.add_item(1, 1, 1)

        assert cart["items"][0]["qty"] == 1
        assert cart["items"][0]["unit_price_cents"] == 700
