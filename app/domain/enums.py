# app/domain/enums.py
from enum import Enum


class PaymentType(str, Enum):
    COD = "COD"
    CARD = "CARD"
    UPI = "UPI"
    WALLET = "WALLET"


class PaymentStatus(str, Enum):
    NOT_REQUESTED = "NOT_REQUESTED"
    PENDING = "PENDING"
    CAPTURED = "CAPTURED"
    FAILED = "FAILED"


class OrderStatus(str, Enum):
    CREATED = "CREATED"
    CONFIRMED = "CONFIRMED"
    PREPARING = "PREPARING"
    READY = "READY"
    OUT_FOR_DELIVERY = "OUT_FOR_DELIVERY"
    DELIVERED = "DELIVERED"
    CANCELLED = "CANCELLED"
    FAILED = "FAILED"


class Role(str, Enum):
    CUSTOMER = "customer"
    OWNER = "owner"
    ADMIN = "admin"


#staff-driven moves only, payment capture (CREATED -> CONFIRMED) lives in PaymentService
STATUS_TRANSITIONS: dict[OrderStatus, tuple[OrderStatus, ...]] = {
    OrderStatus.CONFIRMED: (OrderStatus.PREPARING,),
    OrderStatus.PREPARING: (OrderStatus.READY,),
    OrderStatus.READY: (OrderStatus.OUT_FOR_DELIVERY,),
    OrderStatus.OUT_FOR_DELIVERY: (OrderStatus.DELIVERED,),
}

NON_CANCELLABLE = frozenset(
    {OrderStatus.DELIVERED, OrderStatus.CANCELLED, OrderStatus.OUT_FOR_DELIVERY}
)


def can_transition(current: OrderStatus, new: OrderStatus) -> bool:
    return new in STATUS_TRANSITIONS.get(current, ())
