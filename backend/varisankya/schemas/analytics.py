"""Pydantic schemas for spending analytics."""

from pydantic import BaseModel
from typing import Dict, List
from decimal import Decimal


class SubscriptionSpending(BaseModel):
    subscription_id: str
    name: str
    cost: Decimal
    currency: str
    billing_cycle: str
    monthly_cost: Decimal
    category: str


class CumulativePoint(BaseModel):
    month: str
    amount: int


class SpendingSummaryResponse(BaseModel):
    subscriptions: List[SubscriptionSpending]
    monthly_totals: Dict[str, Decimal]  # by currency
    category_totals: Dict[str, Dict[str, Decimal]]  # currency -> category -> monthly
    cumulative: Dict[str, List[CumulativePoint]]  # currency -> 12-month projection
