"""
Subscription database models.
"""

import uuid
from datetime import datetime
from sqlalchemy import Column, String, Boolean, DateTime, Date, Numeric, Integer, Text, ForeignKey, Index
from sqlalchemy.orm import relationship
import enum
from varisankya.database import Base


class BillingCycle(str, enum.Enum):
    """Billing cycle enumeration."""
    monthly = "monthly"
    monthly_custom = "monthly_custom"
    yearly = "yearly"
    weekly = "weekly"
    daily = "daily"
    custom = "custom"


class Subscription(Base):
    """A recurring personal subscription with its next due date."""

    __tablename__ = "subscriptions"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    name = Column(String(100), nullable=False)
    cost = Column(Numeric(12, 2), nullable=False, default=0)
    currency = Column(String(3), nullable=False, default="USD")
    # Plain text so rows with unknown cycles still load; the engine falls back to monthly
    billing_cycle = Column(String(20), nullable=False, default=BillingCycle.monthly.value)
    custom_days = Column(Integer, nullable=True)
    custom_months = Column(Integer, nullable=True)
    next_due_date = Column(Date, nullable=True, index=True)
    category = Column(String(50), nullable=False, default="Other")
    notes = Column(Text, nullable=False, default="")
    active = Column(Boolean, default=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow, nullable=False)

    # Relationships
    payment_history = relationship(
        "PaymentHistoryEntry",
        back_populates="subscription",
        order_by="PaymentHistoryEntry.position",
        cascade="all, delete-orphan",
    )


class PaymentHistoryEntry(Base):
    """One "mark as paid" record. Immutable once written."""

    __tablename__ = "payment_history"

    id = Column(String(36), primary_key=True, default=lambda: str(uuid.uuid4()))
    subscription_id = Column(String(36), ForeignKey("subscriptions.id", ondelete="CASCADE"), nullable=False)
    position = Column(Integer, nullable=False)  # Append order within the subscription
    date = Column(Date, nullable=False)
    cost = Column(Numeric(12, 2), nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    subscription = relationship("Subscription", back_populates="payment_history")

    __table_args__ = (
        Index("idx_payment_history_subscription", "subscription_id", "position"),
    )
