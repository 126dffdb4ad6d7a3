import os

os.environ.setdefault("DATABASE_URL", "sqlite://")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine, event, update
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.api import create_app
from app.api.deps import get_addresses, get_catalog, get_lock_service
from app.data.database import Base, get_db
from app.data import models  # noqa: F401
from app.data.models.order import OrderModel
from app.domain.errors import NotFound
from app.domain.schemas import AddressInfo, MenuItemInfo, RestaurantInfo
from app.services.cart_service import CartService
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService


# ============================================================================
# Database
# ============================================================================

@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )

    # pysqlite SAVEPOINT recipe from the SQLAlchemy docs
    @event.listens_for(engine, "connect")
    def do_connect(dbapi_connection, connection_record):
        dbapi_connection.isolation_level = None
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    @event.listens_for(engine, "begin")
    def do_begin(conn):
        conn.exec_driver_sql("BEGIN")

    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def session_factory(engine):
    return sessionmaker(bind=engine, autoflush=False, expire_on_commit=False)


@pytest.fixture
def db(session_factory):
    session = session_factory()
    yield session
    session.close()


# ============================================================================
# Collaborator fakes
# ============================================================================

class FakeCatalog:
    def __init__(self):
        self.menu_items = {
            1: MenuItemInfo(id=1, name="Burger", unit_price_cents=500, available=True, restaurant_id=10),
            2: MenuItemInfo(id=2, name="Fries", unit_price_cents=250, available=True, restaurant_id=10),
            3: MenuItemInfo(id=3, name="Shake", unit_price_cents=300, available=False, restaurant_id=10),
            4: MenuItemInfo(id=4, name="Dosa", unit_price_cents=1200, available=True, restaurant_id=20),
            5: MenuItemInfo(id=5, name="Coffee", unit_price_cents=400, available=True, restaurant_id=30),
        }
        self.restaurants = {
            10: RestaurantInfo(id=10, is_open=True, owner_id=100),
            20: RestaurantInfo(id=20, is_open=True, owner_id=200),
            30: RestaurantInfo(id=30, is_open=False, owner_id=200),
        }

    def resolve_menu_item(self, menu_item_id):
        if menu_item_id not in self.menu_items:
            raise NotFound("Menu item not found")
        return self.menu_items[menu_item_id]

    def resolve_restaurant(self, restaurant_id):
        if restaurant_id not in self.restaurants:
            raise NotFound("Restaurant not found")
        return self.restaurants[restaurant_id]

    def set_price(self, menu_item_id, unit_price_cents):
        item = self.menu_items[menu_item_id]
        self.menu_items[menu_item_id] = item.model_copy(update={"unit_price_cents": unit_price_cents})


class FakeAddresses:
    def __init__(self):
        self.addresses = {
            7: AddressInfo(id=7, user_id=1, address_line="12 MG Road", city="Bengaluru",
                           postal_code="560001", lat=12.97, lon=77.6),
            8: AddressInfo(id=8, user_id=2, address_line="4 Park Street", city="Kolkata",
                           postal_code="700016"),
        }

    def resolve_address(self, address_id, owner_user_id):
        address = self.addresses.get(address_id)
        if not address or address.user_id != owner_user_id:
            raise NotFound("Delivery address not found")
        return address


class FakeLockService:
    def __init__(self):
        self.held = {}

    def acquire_checkout_lock(self, user_id, ttl):
        if user_id in self.held:
            return None
        self.held[user_id] = f"token-{user_id}"
        return self.held[user_id]

    def release_checkout_lock(self, user_id, token):
        if self.held.get(user_id) == token:
            del self.held[user_id]
            return True
        return False


@pytest.fixture
def catalog():
    return FakeCatalog()


@pytest.fixture
def addresses():
    return FakeAddresses()


@pytest.fixture
def lock_service():
    return FakeLockService()


# ============================================================================
# Services
# ============================================================================

@pytest.fixture
def cart_service(db, catalog):
    return CartService(db, catalog)


@pytest.fixture
def order_service(db, catalog, addresses, lock_service):
    return OrderService(db, catalog, addresses, lock_service)


@pytest.fixture
def payment_service(db):
    return PaymentService(db)


@pytest.fixture
def place_order(cart_service, order_service):
    """Builds a cart for the user and checks it out, returns the OrderOut."""

    def _place(user_id=1, items=((1, 2),), **kwargs):
        for menu_item_id, qty in items:
            cart_service.add_item(user_id, menu_item_id, qty)
        return order_service.create_order_from_cart(user_id, **kwargs)

    return _place


@pytest.fixture
def force_status(db):
    """Moves an order straight to a status, bypassing the state machine."""

    def _force(order_id, status):
        db.execute(update(OrderModel).where(OrderModel.id == order_id).values(status=status))
        db.commit()

    return _force


@pytest.fixture
def status_race(force_status, monkeypatch):
    """Lets another writer move the order right before the repo's conditional update."""

    def _race(repo, status):
        update_if_status = repo.update_if_status

        def someone_else_first(order_id, expected_status, new_data):
            force_status(order_id, status)
            return update_if_status(order_id, expected_status, new_data)

        monkeypatch.setattr(repo, "update_if_status", someone_else_first)

    return _race


# ============================================================================
# HTTP
# ============================================================================

@pytest.fixture
def client(session_factory, catalog, addresses, lock_service):
    app = create_app()

    def override_get_db():
        session = session_factory()
        try:
            yield session
        finally:
            session.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_catalog] = lambda: catalog
    app.dependency_overrides[get_addresses] = lambda: addresses
    app.dependency_overrides[get_lock_service] = lambda: lock_service

    with TestClient(app) as test_client:
        yield test_client
