"""Pydantic schemas for the derived notification schedule."""

from pydantic import BaseModel
from typing import List
from datetime import datetime


class NotificationResponse(BaseModel):
    id: int
    title: str
    body: str
    fire_at: datetime
    subscription_id: str
    channel_id: str
    group_id: str


class NotificationScheduleResponse(BaseModel):
    """The complete set to schedule after cancelling everything pending."""
    notifications: List[NotificationResponse]
    total: int
    generated_at: datetime
