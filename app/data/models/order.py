from sqlalchemy import Column, Integer, String, DateTime, JSON, Text
from datetime import datetime, timezone

from app.data.database import Base


def _utcnow():
    return datetime.now(timezone.utc)


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, nullable=False, index=True)
    restaurant_id = Column(Integer, nullable=False, index=True)

    #copied by value, later address edits do not touch historical orders
    delivery_address = Column(JSON, nullable=True)
    items = Column(JSON, nullable=False)

    subtotal_cents = Column(Integer, nullable=False)
    tax_cents = Column(Integer, nullable=False)
    delivery_fee_cents = Column(Integer, nullable=False)
    total_cents = Column(Integer, nullable=False)

    payment_type = Column(String(20), nullable=False)
    payment_status = Column(String(20), nullable=False)  # NOT_REQUESTED, PENDING, CAPTURED, FAILED
    payment_transaction_id = Column(String(64), nullable=True)
    status = Column(String(20), nullable=False, default="CREATED")
    special_instructions = Column(Text, nullable=True)

    created_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow, index=True)
    updated_at = Column(DateTime(timezone=True), nullable=False, default=_utcnow)
    cancelled_at = Column(DateTime(timezone=True), nullable=True)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
