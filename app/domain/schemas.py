# app/domain/schemas.py
from pydantic import BaseModel, Field, ConfigDict, RootModel
from typing import Annotated, List, Literal, Optional, Union
from datetime import datetime

from app.domain.enums import OrderStatus, PaymentStatus, PaymentType, Role


# =====================================================
# CALLER IDENTITY / COLLABORATORS
# =====================================================
class Identity(BaseModel):
    """Caller identity attached to every request by the auth gateway."""

    user_id: int = Field(..., gt=0)
    role: Role = Role.CUSTOMER

    model_config = ConfigDict(frozen=True)


class MenuItemInfo(BaseModel):
    id: int
    name: str
    unit_price_cents: int = Field(..., ge=0)
    available: bool
    restaurant_id: int


class RestaurantInfo(BaseModel):
    id: int
    is_open: bool
    owner_id: int


class AddressInfo(BaseModel):
    id: int
    user_id: int
    address_line: str
    city: str
    postal_code: str
    lat: Optional[float] = None
    lon: Optional[float] = None


# =====================================================
# REQUESTS
# =====================================================
class CartItemIn(BaseModel):
    """Schema for adding a menu item to the cart."""

    menu_item_id: int = Field(..., gt=0, description="Menu item id (must be > 0)")
    qty: int = Field(..., ge=1, description="Quantity (must be >= 1)")

    model_config = ConfigDict(extra="forbid")


class OrderCreate(BaseModel):
    """Schema for creating an order from the caller's cart."""

    delivery_address_id: Optional[int] = Field(None, gt=0)
    payment_type: PaymentType = PaymentType.COD
    special_instructions: Optional[str] = Field(None, max_length=500)

    model_config = ConfigDict(extra="forbid")


class CardPaymentIn(BaseModel):
    payment_type: Literal["CARD"] = "CARD"
    #length is checked by the simulator, a short number must still fail the order
    card_number: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class UpiPaymentIn(BaseModel):
    payment_type: Literal["UPI"] = "UPI"
    upi_id: Optional[str] = None

    model_config = ConfigDict(extra="forbid")


class OtherPaymentIn(BaseModel):
    payment_type: Literal["COD", "WALLET"] = "COD"

    model_config = ConfigDict(extra="forbid")


PaymentDetails = Union[CardPaymentIn, UpiPaymentIn, OtherPaymentIn]


class PaymentDetailsIn(RootModel[PaymentDetails]):
    """Closed tagged union on payment_type."""

    root: Annotated[PaymentDetails, Field(discriminator="payment_type")]


class StatusUpdateIn(BaseModel):
    """Schema for a staff-driven status change."""

    status: OrderStatus

    model_config = ConfigDict(extra="forbid")


# =====================================================
# RESPONSES
# =====================================================
class CartItemOut(BaseModel):
    menu_item_id: int
    restaurant_id: int
    name: str
    unit_price_cents: int
    qty: int
    line_total_cents: int


class CartOut(BaseModel):
    """Schema for the cart view (response)."""

    cart_id: Optional[int] = None
    items: List[CartItemOut]
    total_cents: int
    updated_at: Optional[datetime] = None


class MessageOut(BaseModel):
    message: str


class DeliveryAddressOut(BaseModel):
    address_line: str
    city: str
    postal_code: str
    lat: Optional[float] = None
    lon: Optional[float] = None


class OrderItemOut(BaseModel):
    menu_item_id: int
    name: str
    qty: int
    unit_price_cents: int


class OrderOut(BaseModel):
    """Schema for an order (response)."""

    id: int
    user_id: int
    restaurant_id: int
    delivery_address: Optional[DeliveryAddressOut] = None
    items: List[OrderItemOut]
    subtotal_cents: int
    tax_cents: int
    delivery_fee_cents: int
    total_cents: int
    payment_type: PaymentType
    payment_status: PaymentStatus
    payment_transaction_id: Optional[str] = None
    status: OrderStatus
    special_instructions: Optional[str] = None
    created_at: datetime
    updated_at: datetime
    cancelled_at: Optional[datetime] = None
    delivered_at: Optional[datetime] = None

    model_config = ConfigDict(from_attributes=True)


class PaymentResultOut(BaseModel):
    success: bool
    message: str
    transaction_id: str
    order_status: OrderStatus
