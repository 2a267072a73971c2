"""
Local notification schedule for upcoming subscription payments.

The full set of notifications is derived from the current subscriptions and
replaces whatever the device has pending (cancel all, then schedule all).
Ids are hashed from the subscription id, so deriving twice from the same data
gives the same ids.
"""

import logging
from dataclasses import dataclass
from datetime import datetime, time, timedelta
from decimal import Decimal
from typing import Any, Iterable, List, Protocol, Sequence

from varisankya.exceptions import NotificationPermissionDenied
from varisankya.services.urgency_service import days_until

logger = logging.getLogger(__name__)

DUE_SOON_DAYS = 8
FUTURE_FIRE_TIME = time(9, 0)
IMMEDIATE_DELAY = timedelta(seconds=1)
NOTIFICATION_TITLE = "Subscription Due Soon"

_INT32_MAX = 2**31 - 1


@dataclass(frozen=True)
class ScheduledNotification:
    id: int
    title: str
    body: str
    fire_at: datetime
    subscription_id: str


@dataclass(frozen=True)
class ResyncResult:
    cancelled: int
    scheduled: List[ScheduledNotification]


class NotificationDelivery(Protocol):
    """Device-side notification API (local notifications plugin or similar)."""

    def ensure_permission(self) -> bool: ...

    def get_pending(self) -> List[int]: ...

    def cancel(self, ids: Sequence[int]) -> None: ...

    def schedule(self, notifications: Sequence[ScheduledNotification]) -> None: ...


def hash_code(text: str) -> int:
    """Java-style String.hashCode: h = 31*h + char, as a signed 32-bit int."""
    h = 0
    for ch in text:
        h = (31 * h + ord(ch)) & 0xFFFFFFFF
    return h - 2**32 if h > _INT32_MAX else h


def notification_id(key: str) -> int:
    """Non-negative int32 id for a notification key."""
    return abs(hash_code(key)) & _INT32_MAX


def format_cost(cost: Any) -> str:
    """Plain number without trailing zeros: 10.00 -> "10", 9.50 -> "9.5"."""
    value = Decimal(str(cost or 0)).normalize()
    return f"{value:f}"


def _body(subscription: Any, days: int) -> str:
    return f"{subscription.name} is due in {days} days ({subscription.currency} {format_cost(subscription.cost)})"


def derive_notifications(subscriptions: Iterable[Any], now: datetime) -> List[ScheduledNotification]:
    """
    Build the notifications that should be pending at `now`.

    Per active, dated subscription: a "current" notice firing right away when
    the due date is 0-8 days out, and a "future" notice at 09:00 eight days
    before the due date while that moment is still ahead.
    """
    notifications: List[ScheduledNotification] = []

    for sub in subscriptions:
        if sub.active is False or sub.next_due_date is None:
            continue

        days_left = days_until(sub.next_due_date, now)
        sub_id = str(sub.id)

        if 0 <= days_left <= DUE_SOON_DAYS:
            notifications.append(ScheduledNotification(
                id=notification_id(f"{sub_id}-current"),
                title=NOTIFICATION_TITLE,
                body=_body(sub, days_left),
                fire_at=now + IMMEDIATE_DELAY,
                subscription_id=sub_id,
            ))

        threshold_at = datetime.combine(sub.next_due_date - timedelta(days=DUE_SOON_DAYS), FUTURE_FIRE_TIME)
        if threshold_at > now:
            notifications.append(ScheduledNotification(
                id=notification_id(f"{sub_id}-future"),
                title=NOTIFICATION_TITLE,
                body=_body(sub, DUE_SOON_DAYS),
                fire_at=threshold_at,
                subscription_id=sub_id,
            ))

    return notifications


def resync_notifications(
    delivery: NotificationDelivery,
    subscriptions: Iterable[Any],
    now: datetime,
) -> ResyncResult:
    """
    Replace the device's pending notifications with the derived set.

    Not atomic against the device; callers must run one resync at a time.
    """
    if not delivery.ensure_permission():
        logger.warning("Notification permission denied, schedule not delivered")
        raise NotificationPermissionDenied("Notification permission not granted")

    pending = delivery.get_pending()
    if pending:
        delivery.cancel(pending)

    notifications = derive_notifications(subscriptions, now)
    if notifications:
        delivery.schedule(notifications)

    logger.info("Cancelled %d and scheduled %d notifications", len(pending), len(notifications))
    return ResyncResult(cancelled=len(pending), scheduled=notifications)
