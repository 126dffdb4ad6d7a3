# app/api/routers/orders.py
from typing import List, Optional

from fastapi import APIRouter, Depends, Query

from app.api.deps import get_identity, get_order_service, get_payment_service, require_staff
from app.domain.enums import OrderStatus
from app.domain.schemas import (
    Identity,
    OrderCreate,
    OrderOut,
    PaymentDetailsIn,
    PaymentResultOut,
    StatusUpdateIn,
)
from app.services.order_service import OrderService
from app.services.payment_service import PaymentService

router = APIRouter(prefix="/orders", tags=["orders"])


@router.post("/", response_model=OrderOut, status_code=201)
def create_order(
    payload: OrderCreate,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    """
    Creates an order from the caller's cart.
    The cart is gone afterwards.
    """
    return svc.create_order_from_cart(
        user_id=identity.user_id,
        delivery_address_id=payload.delivery_address_id,
        payment_type=payload.payment_type,
        special_instructions=payload.special_instructions,
    )


@router.get("/", response_model=List[OrderOut])
def list_orders(
    status: Optional[OrderStatus] = Query(None),
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_orders(identity.user_id, status)


@router.get("/restaurant/{restaurant_id}", response_model=List[OrderOut])
def list_restaurant_orders(
    restaurant_id: int,
    status: Optional[OrderStatus] = Query(None),
    identity: Identity = Depends(require_staff),
    svc: OrderService = Depends(get_order_service),
):
    return svc.list_restaurant_orders(restaurant_id, identity.user_id, status)


@router.post("/{order_id}/payment", response_model=PaymentResultOut)
def process_payment(
    order_id: int,
    payload: PaymentDetailsIn,
    identity: Identity = Depends(get_identity),
    svc: PaymentService = Depends(get_payment_service),
):
    return svc.process_payment(order_id, identity.user_id, payload.root)


@router.get("/{order_id}", response_model=OrderOut)
def get_order(
    order_id: int,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.get_order(order_id, identity.user_id)


@router.patch("/{order_id}/cancel", response_model=OrderOut)
def cancel_order(
    order_id: int,
    identity: Identity = Depends(get_identity),
    svc: OrderService = Depends(get_order_service),
):
    return svc.cancel_order(order_id, identity.user_id)


@router.patch("/{order_id}/status", response_model=OrderOut)
def update_status(
    order_id: int,
    payload: StatusUpdateIn,
    identity: Identity = Depends(require_staff),
    svc: OrderService = Depends(get_order_service),
):
    return svc.update_status(order_id, payload.status, identity)
