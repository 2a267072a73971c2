"""
Database models package.
"""

from varisankya.models.subscription import Subscription, PaymentHistoryEntry, BillingCycle
from varisankya.models.insight_cache import InsightCache

__all__ = [
    "Subscription",
    "PaymentHistoryEntry",
    "BillingCycle",
    "InsightCache",
]
