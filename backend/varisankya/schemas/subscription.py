"""Pydantic schemas for subscriptions."""

from pydantic import BaseModel, Field, field_validator, model_validator
from typing import Optional, List
from datetime import date, datetime
from decimal import Decimal

from varisankya.models.subscription import BillingCycle
from varisankya.services.recurrence_service import MarkPaidStrategy, validate_cycle_config


class SubscriptionBase(BaseModel):
    name: str = Field(..., min_length=1, max_length=100)
    cost: Decimal = Field(Decimal("0"), ge=0)
    currency: str = Field("USD", min_length=3, max_length=3)
    billing_cycle: BillingCycle = BillingCycle.monthly
    custom_days: Optional[int] = None
    custom_months: Optional[int] = None
    next_due_date: Optional[date] = None
    category: str = "Other"
    notes: str = ""

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        return v.upper()

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Subscription name is required")
        return v


class SubscriptionCreate(SubscriptionBase):
    active: bool = True

    @model_validator(mode="after")
    def check_cycle_counts(self):
        self.custom_days, self.custom_months = validate_cycle_config(
            self.billing_cycle, self.custom_days, self.custom_months
        )
        return self


class SubscriptionUpdate(BaseModel):
    """Partial update; cycle counts are checked against the stored record by the API."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    cost: Optional[Decimal] = Field(None, ge=0)
    currency: Optional[str] = Field(None, min_length=3, max_length=3)
    billing_cycle: Optional[BillingCycle] = None
    custom_days: Optional[int] = None
    custom_months: Optional[int] = None
    next_due_date: Optional[date] = None
    category: Optional[str] = None
    notes: Optional[str] = None
    active: Optional[bool] = None

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: Optional[str]) -> Optional[str]:
        return v.upper() if v else v

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: Optional[str]) -> Optional[str]:
        if v is None:
            return v
        v = v.strip()
        if not v:
            raise ValueError("Subscription name is required")
        return v


class PaymentHistoryEntryResponse(BaseModel):
    id: str
    date: date
    cost: Decimal

    class Config:
        from_attributes = True


class UrgencyResponse(BaseModel):
    days_left: int
    days_left_raw: Optional[int] = None
    progress: float
    label: str
    is_urgent: bool


class SubscriptionResponse(BaseModel):
    id: str
    name: str
    cost: Decimal
    currency: str
    billing_cycle: str  # may hold a legacy value the engine treats as monthly
    custom_days: Optional[int] = None
    custom_months: Optional[int] = None
    next_due_date: Optional[date] = None
    category: str
    notes: str
    active: bool
    payment_history: List[PaymentHistoryEntryResponse] = []
    created_at: datetime
    updated_at: datetime

    # Computed by the API for the requested day
    urgency: Optional[UrgencyResponse] = None

    class Config:
        from_attributes = True


class SubscriptionListResponse(BaseModel):
    items: List[SubscriptionResponse]
    total: int
    today: date


class MarkPaidRequest(BaseModel):
    strategy: MarkPaidStrategy = MarkPaidStrategy.keep
    reset_date: Optional[date] = None  # reset strategy only; defaults to today


class ForecastResponse(BaseModel):
    strategy: MarkPaidStrategy
    paid_date: date
    next_due: date
    following_due: date
