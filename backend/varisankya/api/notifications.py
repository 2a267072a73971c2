"""API endpoint for the device notification schedule."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime

from varisankya.config import settings
from varisankya.dependencies import get_db, get_now
from varisankya.schemas.notification import NotificationResponse, NotificationScheduleResponse
from varisankya.services import subscription_service
from varisankya.services.notification_service import derive_notifications

router = APIRouter(prefix="/notifications", tags=["notifications"])


@router.get("/schedule", response_model=NotificationScheduleResponse)
def get_notification_schedule(
    now: datetime = Depends(get_now),
    db: Session = Depends(get_db)
):
    """
    The full set of local notifications the device should have pending.
    Clients cancel everything pending and schedule exactly this list.
    """
    subscriptions = subscription_service.get_active_dated_subscriptions(db)
    notifications = derive_notifications(subscriptions, now)

    return NotificationScheduleResponse(
        notifications=[
            NotificationResponse(
                id=n.id,
                title=n.title,
                body=n.body,
                fire_at=n.fire_at,
                subscription_id=n.subscription_id,
                channel_id=settings.notification_channel_id,
                group_id=settings.notification_group_id,
            ) for n in notifications
        ],
        total=len(notifications),
        generated_at=now,
    )
