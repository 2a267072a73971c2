"""API endpoints for subscriptions and the mark-paid workflow."""

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.orm import Session
from typing import Optional
from datetime import date

from varisankya.dependencies import get_db, get_today
from varisankya.exceptions import RecurrenceError, SubscriptionNotFound
from varisankya.models.subscription import Subscription
from varisankya.schemas.subscription import (
    SubscriptionCreate,
    SubscriptionUpdate,
    SubscriptionResponse,
    SubscriptionListResponse,
    UrgencyResponse,
    MarkPaidRequest,
    ForecastResponse,
)
from varisankya.services import subscription_service
from varisankya.services.recurrence_service import MarkPaidStrategy, build_forecast
from varisankya.services.urgency_service import compute_urgency

router = APIRouter(prefix="/subscriptions", tags=["subscriptions"])

# Columns that may be explicitly cleared by a PATCH
NULLABLE_FIELDS = {"next_due_date", "custom_days", "custom_months"}


def _to_response(subscription: Subscription, today: date) -> SubscriptionResponse:
    response = SubscriptionResponse.model_validate(subscription)
    urgency = compute_urgency(subscription.next_due_date, today)
    response.urgency = UrgencyResponse(
        days_left=urgency.days_left,
        days_left_raw=urgency.days_left_raw,
        progress=urgency.progress,
        label=urgency.label,
        is_urgent=urgency.is_urgent,
    )
    return response


def _get_or_404(db: Session, subscription_id: str) -> Subscription:
    try:
        return subscription_service.get_subscription(db, subscription_id)
    except SubscriptionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))


@router.get("", response_model=SubscriptionListResponse)
def list_subscriptions(
    include_inactive: bool = Query(True),
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """List subscriptions, active first and soonest due first."""
    subscriptions = subscription_service.list_subscriptions(db, today, include_inactive)
    return SubscriptionListResponse(
        items=[_to_response(s, today) for s in subscriptions],
        total=len(subscriptions),
        today=today,
    )


@router.post("", response_model=SubscriptionResponse, status_code=201)
def create_subscription(
    data: SubscriptionCreate,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Create a subscription."""
    subscription = subscription_service.create_subscription(db, data.model_dump())
    return _to_response(subscription, today)


@router.get("/{subscription_id}", response_model=SubscriptionResponse)
def get_subscription(
    subscription_id: str,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Get a single subscription."""
    return _to_response(_get_or_404(db, subscription_id), today)


@router.patch("/{subscription_id}", response_model=SubscriptionResponse)
def update_subscription(
    subscription_id: str,
    update: SubscriptionUpdate,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Update a subscription's schedule or details."""
    update_data = {
        field: value
        for field, value in update.model_dump(exclude_unset=True).items()
        if value is not None or field in NULLABLE_FIELDS
    }
    try:
        subscription = subscription_service.update_subscription(db, subscription_id, update_data)
    except SubscriptionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RecurrenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_response(subscription, today)


@router.delete("/{subscription_id}")
def delete_subscription(
    subscription_id: str,
    db: Session = Depends(get_db)
):
    """Delete a subscription and its payment history."""
    try:
        subscription_service.delete_subscription(db, subscription_id)
    except SubscriptionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return {"deleted": True}


@router.post("/{subscription_id}/stop", response_model=SubscriptionResponse)
def stop_subscription(
    subscription_id: str,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Mark a subscription inactive; it stops producing notifications."""
    _get_or_404(db, subscription_id)
    return _to_response(subscription_service.set_active(db, subscription_id, False), today)


@router.post("/{subscription_id}/resume", response_model=SubscriptionResponse)
def resume_subscription(
    subscription_id: str,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Mark a subscription active again."""
    _get_or_404(db, subscription_id)
    return _to_response(subscription_service.set_active(db, subscription_id, True), today)


@router.get("/{subscription_id}/forecast", response_model=ForecastResponse)
def get_forecast(
    subscription_id: str,
    strategy: MarkPaidStrategy = Query(MarkPaidStrategy.keep),
    reset_date: Optional[date] = Query(None),
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """
    Preview a mark-paid action: the date being paid, the resulting due date
    and the one after it. Nothing is saved.
    """
    subscription = _get_or_404(db, subscription_id)
    try:
        forecast = build_forecast(subscription, strategy, reset_date or today)
    except RecurrenceError as e:
        raise HTTPException(status_code=400, detail=str(e))

    return ForecastResponse(
        strategy=strategy,
        paid_date=forecast.paid_date,
        next_due=forecast.next_due,
        following_due=forecast.following_due,
    )


@router.post("/{subscription_id}/mark-paid", response_model=SubscriptionResponse)
def mark_paid(
    subscription_id: str,
    request: MarkPaidRequest,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Record a payment and advance the due date."""
    try:
        subscription = subscription_service.mark_paid(
            db,
            subscription_id,
            request.strategy,
            request.reset_date or today,
        )
    except SubscriptionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    except RecurrenceError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return _to_response(subscription, today)


@router.delete("/{subscription_id}/history/{entry_id}", response_model=SubscriptionResponse)
def delete_history_entry(
    subscription_id: str,
    entry_id: str,
    today: date = Depends(get_today),
    db: Session = Depends(get_db)
):
    """Remove a single payment history item."""
    try:
        subscription = subscription_service.delete_history_entry(db, subscription_id, entry_id)
    except SubscriptionNotFound as e:
        raise HTTPException(status_code=404, detail=str(e))
    return _to_response(subscription, today)
