"""Service for subscription storage and the mark-paid workflow."""

import logging
import uuid
from datetime import date
from typing import Any, Dict, List, Optional

from sqlalchemy.orm import Session

from varisankya.exceptions import SubscriptionNotFound
from varisankya.models.subscription import BillingCycle, PaymentHistoryEntry, Subscription
from varisankya.services.recurrence_service import (
    MarkPaidStrategy,
    normalize_cycle,
    plan_mark_paid,
    validate_cycle_config,
)
from varisankya.services.urgency_service import sort_subscriptions

logger = logging.getLogger(__name__)

CYCLE_FIELDS = {"billing_cycle", "custom_days", "custom_months"}


def get_subscription(db: Session, subscription_id: str) -> Subscription:
    subscription = db.query(Subscription).filter(Subscription.id == subscription_id).first()
    if not subscription:
        raise SubscriptionNotFound(f"Subscription {subscription_id} not found")
    return subscription


def list_subscriptions(
    db: Session,
    today: date,
    include_inactive: bool = True,
) -> List[Subscription]:
    """All subscriptions, active first, then by days until due."""
    query = db.query(Subscription)
    if not include_inactive:
        query = query.filter(Subscription.active == True)  # noqa: E712
    return sort_subscriptions(query.all(), today)


def get_active_dated_subscriptions(db: Session) -> List[Subscription]:
    """Subscriptions that can produce notifications."""
    return db.query(Subscription).filter(
        Subscription.active == True,  # noqa: E712
        Subscription.next_due_date.isnot(None),
    ).order_by(Subscription.next_due_date, Subscription.name).all()


def _cycle_value(data: Dict[str, Any]) -> Dict[str, Any]:
    cycle = data.get("billing_cycle")
    if isinstance(cycle, BillingCycle):
        data["billing_cycle"] = cycle.value
    return data


def create_subscription(db: Session, data: Dict[str, Any]) -> Subscription:
    subscription = Subscription(id=str(uuid.uuid4()), **_cycle_value(dict(data)))
    db.add(subscription)
    db.commit()
    db.refresh(subscription)
    logger.info("Created subscription %s (%s)", subscription.id, subscription.name)
    return subscription


def update_subscription(db: Session, subscription_id: str, data: Dict[str, Any]) -> Subscription:
    """
    Apply a partial update. Last write wins.

    Touching the cycle or its counts re-checks them against the merged record.
    """
    subscription = get_subscription(db, subscription_id)
    data = _cycle_value(dict(data))

    if CYCLE_FIELDS & data.keys():
        cycle = data.get("billing_cycle") or normalize_cycle(subscription.billing_cycle).value
        data["billing_cycle"] = cycle
        data["custom_days"], data["custom_months"] = validate_cycle_config(
            cycle,
            data.get("custom_days", subscription.custom_days),
            data.get("custom_months", subscription.custom_months),
        )

    for field, value in data.items():
        setattr(subscription, field, value)
    db.commit()
    db.refresh(subscription)
    return subscription


def delete_subscription(db: Session, subscription_id: str) -> None:
    subscription = get_subscription(db, subscription_id)
    db.delete(subscription)
    db.commit()
    logger.info("Deleted subscription %s", subscription_id)


def set_active(db: Session, subscription_id: str, active: bool) -> Subscription:
    """Stop or resume a subscription."""
    return update_subscription(db, subscription_id, {"active": active})


def mark_paid(
    db: Session,
    subscription_id: str,
    strategy: MarkPaidStrategy,
    reset_date: Optional[date] = None,
) -> Subscription:
    """
    Record a payment and advance the due date in a single commit.

    The plan is computed before anything is changed, so engine errors
    (missing due date, bad custom cycle) leave the row untouched.
    """
    subscription = get_subscription(db, subscription_id)
    plan = plan_mark_paid(subscription, strategy, reset_date)

    try:
        next_position = max((e.position for e in subscription.payment_history), default=-1) + 1
        subscription.payment_history.append(PaymentHistoryEntry(
            id=str(uuid.uuid4()),
            position=next_position,
            date=plan.history_entry.date,
            cost=plan.history_entry.cost,
        ))
        subscription.next_due_date = plan.next_due_date
        db.commit()
    except Exception:
        db.rollback()
        raise

    db.refresh(subscription)
    logger.info(
        "Marked %s paid for %s (%s), next due %s",
        subscription.id, plan.history_entry.date, MarkPaidStrategy(strategy).value, plan.next_due_date,
    )
    return subscription


def delete_history_entry(db: Session, subscription_id: str, entry_id: str) -> Subscription:
    """Remove one payment history item. The due date is left as is."""
    subscription = get_subscription(db, subscription_id)
    entry = next((e for e in subscription.payment_history if e.id == entry_id), None)
    if entry is None:
        raise SubscriptionNotFound(f"History entry {entry_id} not found")

    subscription.payment_history.remove(entry)
    db.commit()
    db.refresh(subscription)
    return subscription
