"""Days-left, progress and ordering for subscriptions relative to a given day."""

from dataclasses import dataclass
from datetime import date, datetime
from typing import Any, Iterable, List, Optional, Tuple, Union

# Progress ramps linearly from 0% (30+ days out) to 100% (due or overdue)
URGENCY_HORIZON_DAYS = 30
URGENT_PROGRESS_THRESHOLD = 70
NO_DUE_DATE_SORT_DAYS = 9999
NO_DUE_DATE_LABEL = "No due date set"


@dataclass(frozen=True)
class Urgency:
    days_left: int
    days_left_raw: Optional[int]
    progress: float
    label: str
    is_urgent: bool

    @property
    def has_due_date(self) -> bool:
        return self.days_left_raw is not None


def _day(value: Union[date, datetime]) -> date:
    return value.date() if isinstance(value, datetime) else value


def days_until(due_date: Union[date, datetime], today: Union[date, datetime]) -> int:
    """Whole calendar days from today to due_date; negative when overdue."""
    return (_day(due_date) - _day(today)).days


def format_label(days_left: int, due_date: date) -> str:
    return f"{days_left} days left ({due_date:%b} {due_date.day})"


def compute_urgency(next_due_date: Optional[date], today: date) -> Urgency:
    """
    Urgency of a due date as seen on `today`.

    `today` is supplied by the caller so results are reproducible.
    """
    if next_due_date is None:
        return Urgency(
            days_left=0,
            days_left_raw=None,
            progress=0.0,
            label=NO_DUE_DATE_LABEL,
            is_urgent=False,
        )

    raw = days_until(next_due_date, today)
    days_left = max(0, raw)
    capped = min(max(raw, 0), URGENCY_HORIZON_DAYS)
    progress = (URGENCY_HORIZON_DAYS - capped) * 100 / URGENCY_HORIZON_DAYS

    return Urgency(
        days_left=days_left,
        days_left_raw=raw,
        progress=progress,
        label=format_label(days_left, _day(next_due_date)),
        is_urgent=progress > URGENT_PROGRESS_THRESHOLD,
    )


def days_left_for_sort(next_due_date: Optional[date], today: date) -> int:
    if next_due_date is None:
        return NO_DUE_DATE_SORT_DAYS
    return days_until(next_due_date, today)


def subscription_sort_key(subscription: Any, today: date, use_active: bool = True) -> Tuple[int, ...]:
    """Active first (when use_active), then soonest due; undated last."""
    days = days_left_for_sort(subscription.next_due_date, today)
    if not use_active:
        return (days,)
    active = subscription.active is not False
    return (0 if active else 1, days)


def sort_subscriptions(subscriptions: Iterable[Any], today: date, use_active: bool = True) -> List[Any]:
    return sorted(subscriptions, key=lambda s: subscription_sort_key(s, today, use_active))
