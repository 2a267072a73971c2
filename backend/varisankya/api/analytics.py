"""API endpoint for spending analytics."""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from varisankya.dependencies import get_db
from varisankya.models.subscription import Subscription
from varisankya.schemas.analytics import SpendingSummaryResponse
from varisankya.services.analytics_service import spending_summary

router = APIRouter(prefix="/analytics", tags=["analytics"])


@router.get("", response_model=SpendingSummaryResponse)
def get_spending_summary(db: Session = Depends(get_db)):
    """Monthly-normalized spending for active subscriptions."""
    subscriptions = db.query(Subscription).filter(Subscription.active == True).all()  # noqa: E712
    return spending_summary(subscriptions)
