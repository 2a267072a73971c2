"""Next-due-date calculation for subscriptions and the "mark as paid" workflow."""

import enum
import logging
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from decimal import Decimal
from typing import Any, Optional, Tuple, Union

from dateutil.relativedelta import relativedelta

from varisankya.exceptions import InvalidConfiguration, InvalidDate, MissingDueDate
from varisankya.models.subscription import BillingCycle

logger = logging.getLogger(__name__)


class MarkPaidStrategy(str, enum.Enum):
    """How the next due date is derived when a payment is recorded."""
    keep = "keep"    # extend from the existing due date
    reset = "reset"  # extend from a newly chosen date


@dataclass(frozen=True)
class HistoryEntry:
    date: date
    cost: Decimal


@dataclass(frozen=True)
class MarkPaidPlan:
    """Both halves of a mark-paid action; persisted together or not at all."""
    next_due_date: date
    history_entry: HistoryEntry


@dataclass(frozen=True)
class Forecast:
    paid_date: date
    next_due: date
    following_due: date


def normalize_cycle(cycle: Union[BillingCycle, str, None]) -> BillingCycle:
    """Map a stored cycle value to a BillingCycle, falling back to monthly."""
    if isinstance(cycle, BillingCycle):
        return cycle
    try:
        return BillingCycle(cycle)
    except ValueError:
        logger.warning("Unrecognized billing cycle %r, treating as monthly", cycle)
        return BillingCycle.monthly


def _as_date(value: Any) -> date:
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if isinstance(value, str):
        try:
            return date.fromisoformat(value[:10])
        except ValueError:
            raise InvalidDate(f"Not a calendar date: {value!r}") from None
    raise InvalidDate(f"Not a calendar date: {value!r}")


def _positive_count(value: Any, field: str, cycle: BillingCycle) -> int:
    if value is None or isinstance(value, bool):
        raise InvalidConfiguration(f"{field} is required for the {cycle.value} billing cycle")
    if isinstance(value, float) and not value.is_integer():
        raise InvalidConfiguration(f"{field} must be a whole number, got {value}")
    try:
        count = int(value)
    except (TypeError, ValueError):
        raise InvalidConfiguration(f"{field} must be a whole number, got {value!r}") from None
    if count <= 0:
        raise InvalidConfiguration(f"{field} must be positive, got {count}")
    return count


def validate_cycle_config(
    cycle: Union[BillingCycle, str],
    custom_days: Optional[int] = None,
    custom_months: Optional[int] = None,
) -> Tuple[Optional[int], Optional[int]]:
    """
    Check the custom counts a cycle needs.

    Returns (custom_days, custom_months) with the counts the cycle does not
    use set to None.
    """
    cycle = BillingCycle(cycle)
    if cycle == BillingCycle.custom:
        return _positive_count(custom_days, "custom_days", cycle), None
    if cycle == BillingCycle.monthly_custom:
        return None, _positive_count(custom_months, "custom_months", cycle)
    return None, None


def calculate_next_due(
    base_date: date,
    cycle: Union[BillingCycle, str, None],
    custom_days: Optional[int] = None,
    custom_months: Optional[int] = None,
) -> date:
    """
    Calculate the next occurrence after base_date for a billing cycle.

    Month arithmetic keeps the day of month and clamps to the last day of
    shorter months (Jan 31 -> Feb 28/29, Feb 29 -> Feb 28 next year).
    """
    base = _as_date(base_date)
    cycle = normalize_cycle(cycle)

    if cycle == BillingCycle.custom:
        step = timedelta(days=_positive_count(custom_days, "custom_days", cycle))
    elif cycle == BillingCycle.monthly_custom:
        step = relativedelta(months=_positive_count(custom_months, "custom_months", cycle))
    elif cycle == BillingCycle.yearly:
        step = relativedelta(years=1)
    elif cycle == BillingCycle.weekly:
        step = timedelta(days=7)
    elif cycle == BillingCycle.daily:
        step = timedelta(days=1)
    else:
        step = relativedelta(months=1)

    try:
        return base + step
    except (OverflowError, ValueError) as e:
        raise InvalidDate(f"Cannot advance {base.isoformat()} by one {cycle.value} cycle: {e}") from e


def _recur(subscription: Any, base_date: date) -> date:
    return calculate_next_due(
        base_date,
        subscription.billing_cycle,
        subscription.custom_days,
        subscription.custom_months,
    )


def compute_keep_schedule(subscription: Any) -> date:
    """Next due date counted from the subscription's current due date."""
    if subscription.next_due_date is None:
        raise MissingDueDate(f"Subscription {subscription.name!r} has no due date to keep")
    return _recur(subscription, subscription.next_due_date)


def compute_reset_schedule(subscription: Any, reset_date: Optional[date] = None) -> date:
    """Next due date counted from reset_date (today when omitted)."""
    return _recur(subscription, reset_date if reset_date is not None else date.today())


def _paid_date_and_next(subscription, strategy, reset_date):
    strategy = MarkPaidStrategy(strategy)
    if strategy == MarkPaidStrategy.keep:
        next_due = compute_keep_schedule(subscription)
        return _as_date(subscription.next_due_date), next_due
    paid = _as_date(reset_date) if reset_date is not None else date.today()
    return paid, compute_reset_schedule(subscription, paid)


def plan_mark_paid(
    subscription: Any,
    strategy: MarkPaidStrategy,
    reset_date: Optional[date] = None,
) -> MarkPaidPlan:
    """
    Work out a mark-paid action without touching the subscription.

    The history entry is dated with the date being paid: the old due date
    for keep, the reset date for reset.
    """
    paid_date, next_due = _paid_date_and_next(subscription, strategy, reset_date)
    cost = Decimal(str(subscription.cost if subscription.cost is not None else 0))
    return MarkPaidPlan(
        next_due_date=next_due,
        history_entry=HistoryEntry(date=paid_date, cost=cost),
    )


def build_forecast(
    subscription: Any,
    strategy: MarkPaidStrategy,
    reset_date: Optional[date] = None,
) -> Forecast:
    """Preview of the date being paid, the next due date and the one after."""
    paid_date, next_due = _paid_date_and_next(subscription, strategy, reset_date)
    return Forecast(
        paid_date=paid_date,
        next_due=next_due,
        following_due=_recur(subscription, next_due),
    )
