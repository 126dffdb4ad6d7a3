# app/services/pricing.py
"""
Order pricing. Pure functions, no store access.

All amounts are integer minor units (cents). Tax rounds to the nearest
minor unit with ties away from zero.
"""
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Iterable

from app.domain.enums import PaymentType
from app.utils.settings import TAX_RATE, COD_DELIVERY_FEE_CENTS, PREPAID_DELIVERY_FEE_CENTS


@dataclass(frozen=True)
class Pricing:
    subtotal_cents: int
    tax_cents: int
    delivery_fee_cents: int
    total_cents: int


def cart_subtotal(lines: Iterable) -> int:
    """Sum of unit_price_cents * qty over cart lines."""
    return sum(line.unit_price_cents * line.qty for line in lines)


def compute_tax(subtotal_cents: int, rate: Decimal = Decimal(TAX_RATE)) -> int:
    tax = (Decimal(subtotal_cents) * rate).quantize(Decimal("1"), rounding=ROUND_HALF_UP)
    return int(tax)


def delivery_fee(payment_type: PaymentType | str) -> int:
    if payment_type == PaymentType.COD:
        return COD_DELIVERY_FEE_CENTS
    return PREPAID_DELIVERY_FEE_CENTS


def compute_pricing(subtotal_cents: int, payment_type: PaymentType | str) -> Pricing:
    tax = compute_tax(subtotal_cents)
    fee = delivery_fee(payment_type)
    return Pricing(
        subtotal_cents=subtotal_cents,
        tax_cents=tax,
        delivery_fee_cents=fee,
        total_cents=subtotal_cents + tax + fee,
    )
