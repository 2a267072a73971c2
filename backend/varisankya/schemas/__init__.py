"""
Pydantic schemas package.
"""

from varisankya.schemas.subscription import (
    SubscriptionBase,
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionResponse,
    SubscriptionListResponse,
    PaymentHistoryEntryResponse,
    UrgencyResponse,
    MarkPaidRequest,
    ForecastResponse,
)
from varisankya.schemas.notification import (
    NotificationResponse,
    NotificationScheduleResponse,
)
from varisankya.schemas.analytics import (
    SubscriptionSpending,
    CumulativePoint,
    SpendingSummaryResponse,
)
from varisankya.schemas.insight import (
    Location,
    InsightRequest,
    InsightResponse,
)

__all__ = [
    "SubscriptionBase",
    "SubscriptionCreate",
    "SubscriptionUpdate",
    "SubscriptionResponse",
    "SubscriptionListResponse",
    "PaymentHistoryEntryResponse",
    "UrgencyResponse",
    "MarkPaidRequest",
    "ForecastResponse",
    "NotificationResponse",
    "NotificationScheduleResponse",
    "SubscriptionSpending",
    "CumulativePoint",
    "SpendingSummaryResponse",
    "Location",
    "InsightRequest",
    "InsightResponse",
]
