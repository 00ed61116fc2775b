#storefront/data/models/order.py
import uuid
from datetime import datetime, timezone
from enum import Enum

from sqlalchemy import Column, Integer, ForeignKey, String, DateTime, Uuid
from sqlalchemy.orm import relationship

from storefront.data.database import Base


class OrderStatus(str, Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"
    CANCELLED = "cancelled"
    FULFILLED = "fulfilled"


TERMINAL_PAYMENT_STATUSES = frozenset({OrderStatus.PAID.value, OrderStatus.FAILED.value})


class OrderModel(Base):
    __tablename__ = "orders"

    id = Column(Uuid, primary_key=True, default=uuid.uuid4)
    user_id = Column(Uuid, ForeignKey("profiles.id"), nullable=False, index=True)
    #po utworzeniu zmieniaja sie tylko status i payment_ref
    status = Column(String(16), nullable=False, default=OrderStatus.PENDING.value)
    total_in_cents = Column(Integer, nullable=False)
    payment_ref = Column(String, nullable=True)
    created_at = Column(DateTime(timezone=True), nullable=False, default=lambda: datetime.now(timezone.utc))

    items = relationship("OrderItemModel", back_populates="order", order_by="OrderItemModel.id")
