"""Spending analytics over subscriptions."""

from collections import defaultdict
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Dict, Iterable, List, Optional

from varisankya.models.subscription import BillingCycle
from varisankya.services.recurrence_service import normalize_cycle

MONTHS = ["Jan", "Feb", "Mar", "Apr", "May", "Jun", "Jul", "Aug", "Sep", "Oct", "Nov", "Dec"]
DAYS_PER_MONTH = Decimal(365) / Decimal(12)
CENT = Decimal("0.01")


def monthly_cost(
    cost: Decimal,
    cycle: Any,
    custom_days: Optional[int] = None,
    custom_months: Optional[int] = None,
) -> Decimal:
    """Normalize a per-cycle cost to an average monthly amount."""
    cost = Decimal(str(cost or 0))
    cycle = normalize_cycle(cycle)

    if cycle == BillingCycle.yearly:
        monthly = cost / 12
    elif cycle == BillingCycle.weekly:
        monthly = cost * 52 / 12
    elif cycle == BillingCycle.daily:
        monthly = cost * DAYS_PER_MONTH
    elif cycle == BillingCycle.custom and custom_days and int(custom_days) > 0:
        monthly = cost * DAYS_PER_MONTH / int(custom_days)
    elif cycle == BillingCycle.monthly_custom and custom_months and int(custom_months) > 0:
        monthly = cost / int(custom_months)
    else:
        monthly = cost

    return monthly.quantize(CENT, rounding=ROUND_HALF_UP)


def spending_summary(subscriptions: Iterable[Any]) -> Dict[str, Any]:
    """
    Monthly spending breakdown for active subscriptions.

    Amounts in different currencies are never added together.
    """
    items: List[Dict[str, Any]] = []
    totals: Dict[str, Decimal] = defaultdict(Decimal)
    by_category: Dict[str, Dict[str, Decimal]] = defaultdict(lambda: defaultdict(Decimal))

    for sub in subscriptions:
        if sub.active is False:
            continue
        monthly = monthly_cost(sub.cost, sub.billing_cycle, sub.custom_days, sub.custom_months)
        category = sub.category or "Other"
        items.append({
            "subscription_id": str(sub.id),
            "name": sub.name,
            "cost": Decimal(str(sub.cost or 0)),
            "currency": sub.currency,
            "billing_cycle": sub.billing_cycle,
            "monthly_cost": monthly,
            "category": category,
        })
        totals[sub.currency] += monthly
        by_category[sub.currency][category] += monthly

    items.sort(key=lambda i: i["monthly_cost"], reverse=True)

    projections = {
        currency: [
            {"month": month, "amount": int((total * (i + 1)).quantize(Decimal(1), rounding=ROUND_HALF_UP))}
            for i, month in enumerate(MONTHS)
        ]
        for currency, total in totals.items()
    }

    return {
        "subscriptions": items,
        "monthly_totals": dict(totals),
        "category_totals": {c: dict(cats) for c, cats in by_category.items()},
        "cumulative": projections,
    }
