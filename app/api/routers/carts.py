#app/api/routers/carts.py
from fastapi import APIRouter, Depends

from app.api.deps import get_cart_service, get_identity
from app.domain.schemas import CartItemIn, CartOut, Identity, MessageOut
from app.services.cart_service import CartService

router = APIRouter(prefix="/orders/cart", tags=["cart"])


@router.post("", response_model=CartOut)
def add_item(
    payload: CartItemIn,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.add_item(identity.user_id, payload.menu_item_id, payload.qty)


@router.get("", response_model=CartOut)
def get_cart(
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.get_cart(identity.user_id)


@router.delete("/{menu_item_id}", response_model=CartOut)
def remove_item(
    menu_item_id: int,
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.remove_item(identity.user_id, menu_item_id)


@router.delete("", response_model=MessageOut)
def clear_cart(
    identity: Identity = Depends(get_identity),
    svc: CartService = Depends(get_cart_service),
):
    return svc.clear_cart(identity.user_id)
