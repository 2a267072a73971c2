"""
FastAPI dependencies.
"""

from datetime import date, datetime
from typing import Optional

from fastapi import Query

from varisankya.database import get_db

__all__ = ["get_db", "get_today", "get_now"]


def get_today(
    today: Optional[date] = Query(None, description="Override the current date (YYYY-MM-DD)"),
) -> date:
    """
    Resolve "today" for urgency calculations.

    Clients may pass their own local date so day boundaries follow the device.
    """
    return today or date.today()


def get_now(
    now: Optional[datetime] = Query(None, description="Override the current local time"),
) -> datetime:
    """Resolve "now" for notification scheduling (naive local time)."""
    if now is None:
        return datetime.now()
    return now.replace(tzinfo=None)
