# app/api/deps.py
from functools import lru_cache

from fastapi import Depends, Header, HTTPException
from pydantic import ValidationError
from sqlalchemy.orm import Session

from app.data.database import get_db
from app.domain.enums import Role
from app.domain.schemas import Identity
from app.services.address_client import AddressClient
from app.services.auth_guard import AuthorizationGuard
from app.services.cart_service import CartService
from app.services.catalog_client import CatalogClient
from app.services.lock_service import LockService
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService


# collaborators, one instance per process (connection pools)
@lru_cache
def get_catalog() -> CatalogClient:
    return CatalogClient()


@lru_cache
def get_addresses() -> AddressClient:
    return AddressClient()


@lru_cache
def get_lock_service() -> LockService:
    return LockService()


def get_identity(
    x_user_id: str | None = Header(None),
    x_user_role: str | None = Header(None),
) -> Identity:
    """Identity set by the auth gateway in front of this service."""
    if not x_user_id:
        raise HTTPException(status_code=401, detail="Missing caller identity")
    try:
        return Identity(user_id=x_user_id, role=x_user_role or Role.CUSTOMER)
    except ValidationError:
        raise HTTPException(status_code=401, detail="Malformed caller identity")


def require_staff(identity: Identity = Depends(get_identity)) -> Identity:
    if identity.role not in (Role.OWNER, Role.ADMIN):
        raise HTTPException(status_code=403, detail="Restaurant staff only")
    return identity


def get_cart_service(
    db: Session = Depends(get_db),
    catalog: CatalogClient = Depends(get_catalog),
) -> CartService:
    return CartService(db=db, catalog=catalog)


def get_order_service(
    db: Session = Depends(get_db),
    catalog: CatalogClient = Depends(get_catalog),
    addresses: AddressClient = Depends(get_addresses),
    lock_service: LockService = Depends(get_lock_service),
) -> OrderService:
    return OrderService(
        db=db,
        catalog=catalog,
        addresses=addresses,
        lock_service=lock_service,
        guard=AuthorizationGuard(catalog),
    )


def get_payment_service(db: Session = Depends(get_db)) -> PaymentService:
    return PaymentService(db)
