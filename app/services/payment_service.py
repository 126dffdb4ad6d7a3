# app/services/payment_service.py
import random
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone

from sqlalchemy.orm import Session

from app.domain.enums import OrderStatus, PaymentStatus
from app.domain.errors import InvalidState, NotFound, PaymentFailed
from app.domain.schemas import CardPaymentIn, OtherPaymentIn, PaymentDetails, PaymentResultOut, UpiPaymentIn
from app.repos.order_repo import OrderRepo
from app.utils.logging import get_logger

logger = get_logger(__name__)

TRANSACTION_PREFIX = "TXN"
MIN_CARD_NUMBER_LENGTH = 16


@dataclass
class PaymentOutcome:
    """Transient result of one payment attempt, only its id and status land on the order."""

    transaction_id: str
    success: bool
    error: str | None = None
    processed_at: datetime = field(default_factory=lambda: datetime.now(timezone.utc))


def generate_transaction_id() -> str:
    # epoch millis + random disambiguator, e.g. TXN1760812345678042917
    return f"{TRANSACTION_PREFIX}{int(time.time() * 1000)}{random.randint(0, 999999):06d}"


def simulate_payment(details: PaymentDetails) -> PaymentOutcome:
    """Deterministic validation, no external call."""
    outcome = PaymentOutcome(transaction_id=generate_transaction_id(), success=True)

    if isinstance(details, CardPaymentIn):
        if not details.card_number or len(details.card_number) < MIN_CARD_NUMBER_LENGTH:
            outcome.success = False
            outcome.error = "Invalid card number"

    elif isinstance(details, UpiPaymentIn):
        if not details.upi_id or "@" not in details.upi_id:
            outcome.success = False
            outcome.error = "Invalid UPI ID"

    return outcome


class PaymentService:
    def __init__(self, db: Session):
        self.repo = OrderRepo(db)

    def process_payment(
        self,
        order_id: int,
        user_id: int,
        details: PaymentDetails,
    ) -> PaymentResultOut:
        """
        Use Case: capture payment for a CREATED order.

        success -> payment CAPTURED, order CONFIRMED
        failure -> payment FAILED, order FAILED, persisted before the error is raised
        """
        order = self.repo.get_user_order(order_id, user_id)

        if not order:
            raise NotFound("Order not found")

        if order.payment_status == PaymentStatus.CAPTURED.value:
            raise InvalidState("Payment already completed")

        if order.status != OrderStatus.CREATED.value:
            raise InvalidState(f"Cannot process payment for order with status: {order.status}")

        outcome = simulate_payment(details)

        if outcome.success:
            new_data = {
                "payment_status": PaymentStatus.CAPTURED.value,
                "payment_transaction_id": outcome.transaction_id,
                "status": OrderStatus.CONFIRMED.value,
            }
        else:
            new_data = {
                "payment_status": PaymentStatus.FAILED.value,
                "status": OrderStatus.FAILED.value,
            }

        rowcount = self.repo.update_if_status(order.id, OrderStatus.CREATED.value, new_data)

        if rowcount == 0:
            self.repo.rollback()
            raise InvalidState("Order was modified concurrently, please retry")

        self.repo.commit()

        if not outcome.success:
            #audit trail stays on the order even though the call fails
            logger.warning(
                f"Payment for order {order.id} failed ({details.payment_type}): {outcome.error}"
            )
            raise PaymentFailed(outcome.error or "Payment failed")

        logger.info(f"Payment for order {order.id} captured, transaction {outcome.transaction_id}")

        return PaymentResultOut(
            success=True,
            message="Payment successful",
            transaction_id=outcome.transaction_id,
            order_status=OrderStatus.CONFIRMED,
        )
